# app/domains/inv/routers.py

"""
API endpoints of the 'inv' domain.

- categories and items (item master)
- stock levels per location
- stock transfers between locations
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser

from . import crud as inv_crud
from . import schemas as inv_schemas

router = APIRouter(
    tags=["Inventory Management"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. categories
# =============================================================================
@router.post(
    "/categories",
    response_model=inv_schemas.CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    category_in: inv_schemas.CategoryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await inv_crud.category.create(db, obj_in=category_in)


@router.get("/categories", response_model=List[inv_schemas.CategoryRead], summary="List categories")
async def read_categories(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.category.get_multi(db, skip=skip, limit=limit)


@router.get("/categories/{category_id}", response_model=inv_schemas.CategoryRead, summary="Get a category")
async def read_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.category.get_or_404(db, category_id, detail="Category not found")


# =============================================================================
# 2. items
# =============================================================================
@router.post(
    "/items",
    response_model=inv_schemas.ItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an item",
)
async def create_item(
    item_in: inv_schemas.ItemCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    """
    Creates an item in the item master.
    - **code** must be unique (400 otherwise)
    - **supplier_id** and **category_id** must exist (404 otherwise)
    - **selling_price** may not be lower than **minimum_selling_price**
    """
    return await inv_crud.item.create(db, obj_in=item_in)


@router.get("/items", response_model=List[inv_schemas.ItemRead], summary="List items")
async def read_items(
    supplier_id: Optional[int] = None,
    category_id: Optional[int] = None,
    search: Optional[str] = Query(None, description="matches item name or code"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.item.search(
        db, supplier_id=supplier_id, category_id=category_id, search=search, skip=skip, limit=limit
    )


@router.get("/items/code/{code}", response_model=inv_schemas.ItemRead, summary="Get an item by code")
async def read_item_by_code(
    code: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    db_item = await inv_crud.item.get_by_code(db, code=code)
    if db_item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return db_item


@router.get("/items/{item_id}", response_model=inv_schemas.ItemRead, summary="Get an item")
async def read_item(
    item_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.item.get_or_404(db, item_id, detail="Item not found")


@router.put("/items/{item_id}", response_model=inv_schemas.ItemRead, summary="Update an item")
async def update_item(
    item_id: int,
    item_in: inv_schemas.ItemUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    db_item = await inv_crud.item.get_or_404(db, item_id, detail="Item not found")
    return await inv_crud.item.update(db, db_obj=db_item, obj_in=item_in)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an item")
async def delete_item(
    item_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    await inv_crud.item.remove(db, id=item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 3. stocks
# =============================================================================
@router.get("/stocks", response_model=List[inv_schemas.StockRead], summary="List stock levels")
async def read_stocks(
    location_id: Optional[int] = None,
    item_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    rows = await inv_crud.stock.list_levels(db, location_id=location_id, item_id=item_id, skip=skip, limit=limit)
    return [inv_crud.to_stock_read(row) for row in rows]


@router.post(
    "/stocks",
    response_model=inv_schemas.StockRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add stock at a location",
)
async def add_stock(
    stock_in: inv_schemas.StockAdd,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    """
    Increments the stock of an item at a location, creating the row on first use.
    """
    db_stock = await inv_crud.stock.add_stock(db, obj_in=stock_in)
    return inv_crud.to_stock_read(db_stock)


# =============================================================================
# 4. stock transfers
# =============================================================================
@router.post(
    "/stock_transfers",
    response_model=inv_schemas.StockTransferRead,
    status_code=status.HTTP_201_CREATED,
    summary="Transfer stock between locations",
)
async def create_stock_transfer(
    transfer_in: inv_schemas.StockTransferCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    """
    Moves stock from the source to the destination location in one transaction.
    - Lines of the same item are merged.
    - If any item is short at the source, nothing is written (400).
    """
    return await inv_crud.stock_transfer.create_transfer(db, obj_in=transfer_in, created_by=current_user.id)


@router.get("/stock_transfers", response_model=List[inv_schemas.StockTransferRead], summary="List stock transfers")
async def read_stock_transfers(
    location_id: Optional[int] = Query(None, description="matches the source or the destination"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.stock_transfer.list_transfers(db, location_id=location_id, skip=skip, limit=limit)


@router.get("/stock_transfers/{transfer_id}", response_model=inv_schemas.StockTransferRead, summary="Get a stock transfer")
async def read_stock_transfer(
    transfer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.stock_transfer.get_or_404(db, transfer_id, detail="Stock transfer not found")
