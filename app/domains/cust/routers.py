# app/domains/cust/routers.py

"""
API endpoints of the 'cust' domain (areas and customers).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser
from app.domains.bill import crud as bill_crud
from app.domains.bill import schemas as bill_schemas

from . import crud as cust_crud
from . import schemas as cust_schemas

router = APIRouter(
    tags=["Customer Management"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. areas
# =============================================================================
@router.post("/areas", response_model=cust_schemas.AreaRead, status_code=status.HTTP_201_CREATED, summary="Create an area")
async def create_area(
    area_in: cust_schemas.AreaCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await cust_crud.area.create(db, obj_in=area_in)


@router.get("/areas", response_model=List[cust_schemas.AreaRead], summary="List areas")
async def read_areas(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await cust_crud.area.get_multi(db, limit=1000)


# =============================================================================
# 2. customers
# =============================================================================
@router.post(
    "/customers",
    response_model=cust_schemas.CustomerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer",
)
async def create_customer(
    customer_in: cust_schemas.CustomerCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """
    Creates a customer with the next CUSTnnnn code.
    - **contact_number** must be unique (409)
    - a representative becomes the assigned rep unless another is given
    """
    return await cust_crud.customer.create(db, obj_in=customer_in, current_user=current_user)


@router.get("/customers", response_model=List[cust_schemas.CustomerRead], summary="List customers")
async def read_customers(
    area_id: Optional[int] = None,
    assigned_rep_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await cust_crud.customer.list_customers(
        db, area_id=area_id, assigned_rep_id=assigned_rep_id, skip=skip, limit=limit
    )


@router.get("/customers/{customer_id}", response_model=cust_schemas.CustomerRead, summary="Get a customer")
async def read_customer(
    customer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await cust_crud.customer.get_or_404(db, customer_id, detail="Customer not found")


@router.put("/customers/{customer_id}", response_model=cust_schemas.CustomerRead, summary="Update a customer")
async def update_customer(
    customer_id: int,
    customer_in: cust_schemas.CustomerUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    db_customer = await cust_crud.customer.get_or_404(db, customer_id, detail="Customer not found")
    return await cust_crud.customer.update(db, db_obj=db_customer, obj_in=customer_in)


@router.get(
    "/customers/{customer_id}/summary",
    response_model=bill_schemas.CustomerSummary,
    summary="Outstanding summary of a customer",
)
async def read_customer_summary(
    customer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    await cust_crud.customer.get_or_404(db, customer_id, detail="Customer not found")
    return await bill_crud.customer_bill.customer_summary(db, customer_id=customer_id)
