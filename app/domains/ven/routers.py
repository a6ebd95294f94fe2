# app/domains/ven/routers.py

"""
API endpoints of the 'ven' domain (suppliers).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User

from . import crud as ven_crud
from . import schemas as ven_schemas

router = APIRouter(
    tags=["Supplier Management"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/suppliers",
    response_model=ven_schemas.SupplierRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a supplier",
)
async def create_supplier(
    supplier_in: ven_schemas.SupplierCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.get_current_staff_user),
):
    """
    Creates a supplier.
    - **code**, **name** and **phone** must be unique (400 otherwise)
    - **category_id** must reference an existing category
    """
    return await ven_crud.supplier.create(db, obj_in=supplier_in)


@router.get("/suppliers", response_model=List[ven_schemas.SupplierRead], summary="List suppliers")
async def read_suppliers(
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.get_current_active_user),
):
    return await ven_crud.supplier.search(db, search=search, skip=skip, limit=limit)


@router.get("/suppliers/dropdown", response_model=List[ven_schemas.SupplierDropdown], summary="Suppliers for select boxes")
async def read_suppliers_dropdown(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.get_current_active_user),
):
    return await ven_crud.supplier.get_dropdown(db)


@router.get("/suppliers/{supplier_id}", response_model=ven_schemas.SupplierRead, summary="Get a supplier")
async def read_supplier(
    supplier_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.get_current_active_user),
):
    return await ven_crud.supplier.get_or_404(db, supplier_id, detail="Supplier not found")


@router.put("/suppliers/{supplier_id}", response_model=ven_schemas.SupplierRead, summary="Update a supplier")
async def update_supplier(
    supplier_id: int,
    supplier_in: ven_schemas.SupplierUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.get_current_staff_user),
):
    db_supplier = await ven_crud.supplier.get_or_404(db, supplier_id, detail="Supplier not found")
    return await ven_crud.supplier.update(db, db_obj=db_supplier, obj_in=supplier_in)


@router.delete("/suppliers/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a supplier")
async def delete_supplier(
    supplier_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: User = Depends(deps.get_current_staff_user),
):
    await ven_crud.supplier.remove(db, id=supplier_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
