# app/domains/bill/routers.py

"""
API endpoints of the 'bill' domain.

- /supplier_bills: goods received from suppliers
- /customer_bills: invoices (and the frontend invoice form)
- /orders: representative orders and their confirmation workflow
"""

import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser

from . import crud as bill_crud
from . import models as bill_models
from . import schemas as bill_schemas
from . import transform as bill_transform

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Billing"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. supplier bills
# =============================================================================
@router.post(
    "/supplier_bills",
    response_model=bill_schemas.SupplierBillRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a supplier bill",
)
async def create_supplier_bill(
    bill_in: bill_schemas.SupplierBillCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    """
    Records goods received from a supplier and adds them to stock.
    - **bill_number** must be unique per supplier (409)
    - **location_id** defaults to the main location of your business
    - stock grows by quantity + free quantity of each line
    """
    return await bill_crud.supplier_bill.create_bill(db, obj_in=bill_in, current_user=current_user)


@router.get("/supplier_bills", response_model=List[bill_schemas.SupplierBillRead], summary="List supplier bills")
async def read_supplier_bills(
    supplier_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.supplier_bill.list_bills(db, supplier_id=supplier_id, skip=skip, limit=limit)


@router.get("/supplier_bills/{bill_id}", response_model=bill_schemas.SupplierBillRead, summary="Get a supplier bill")
async def read_supplier_bill(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.supplier_bill.get_or_404(db, bill_id, detail="Supplier bill not found")


# =============================================================================
# 2. customer bills
# =============================================================================
@router.post(
    "/customer_bills",
    response_model=bill_schemas.CustomerBillRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an invoice or an order",
)
async def create_customer_bill(
    bill_in: bill_schemas.CustomerBillCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """
    Creates a customer bill.
    - Representatives create **orders** (ORD-...), deducted on confirmation.
    - Admin/office create **invoices** (INV-...); with a **location_id** the
      stock is deducted immediately and a shortage returns 400.
    """
    return await bill_crud.customer_bill.create_bill(db, obj_in=bill_in, current_user=current_user)


@router.post(
    "/customer_bills/frontend",
    response_model=bill_schemas.CustomerBillRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a bill from the frontend invoice form",
)
async def create_customer_bill_from_frontend(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    try:
        bill_in = bill_transform.transform_frontend_invoice(payload)
    except ValueError as e:
        logger.info("Rejected frontend invoice: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return await bill_crud.customer_bill.create_bill(db, obj_in=bill_in, current_user=current_user)


@router.post(
    "/customer_bills/validate",
    response_model=bill_schemas.FrontendValidationResult,
    summary="Validate a frontend invoice form without saving it",
)
async def validate_customer_bill_from_frontend(
    payload: Dict[str, Any] = Body(...),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    errors = bill_transform.validate_frontend_invoice(payload)
    return bill_schemas.FrontendValidationResult(valid=not errors, errors=errors)


@router.get("/customer_bills", response_model=List[bill_schemas.CustomerBillRead], summary="List customer bills")
async def read_customer_bills(
    customer_id: Optional[int] = None,
    bill_status: Optional[bill_models.BillStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.customer_bill.list_bills(
        db, customer_id=customer_id, bill_status=bill_status, skip=skip, limit=limit
    )


@router.get("/customer_bills/{bill_id}", response_model=bill_schemas.CustomerBillRead, summary="Get a customer bill")
async def read_customer_bill(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.customer_bill.get_or_404(db, bill_id, detail="Bill not found")


@router.post(
    "/customer_bills/{bill_id}/payments",
    response_model=bill_schemas.CustomerBillRead,
    summary="Record a payment on a bill",
)
async def add_customer_bill_payment(
    bill_id: int,
    payment_in: bill_schemas.PaymentCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.customer_bill.add_payment(db, bill_id=bill_id, obj_in=payment_in)


# =============================================================================
# 3. orders
# =============================================================================
@router.get("/orders", response_model=List[bill_schemas.CustomerBillRead], summary="List orders")
async def read_orders(
    order_status: Optional[bill_models.OrderStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.customer_bill.list_orders(db, order_status=order_status, skip=skip, limit=limit)


@router.get("/orders/my", response_model=List[bill_schemas.CustomerBillRead], summary="List my orders")
async def read_my_orders(
    order_status: Optional[bill_models.OrderStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await bill_crud.customer_bill.list_orders(
        db, order_status=order_status, created_by=current_user.id, skip=skip, limit=limit
    )


@router.get("/orders/{bill_id}", response_model=bill_schemas.OrderDetail, summary="Get an order with the customer summary")
async def read_order(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """
    Returns the order and the outstanding position of its customer
    (delivered, unpaid bills other than this one).
    """
    return await bill_crud.customer_bill.get_order(db, bill_id=bill_id, current_user=current_user)


@router.post("/orders/{bill_id}/confirm", response_model=bill_schemas.CustomerBillRead, summary="Confirm an order")
async def confirm_order(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """
    Confirms a pending order and deducts its stock (admin only).
    A second confirmation of the same order returns 400.
    """
    return await bill_crud.customer_bill.confirm_order(db, bill_id=bill_id, current_user=current_user)


@router.post("/orders/{bill_id}/checking", response_model=bill_schemas.CustomerBillRead, summary="Move an order to checking")
async def move_order_to_checking(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.customer_bill.move_order(
        db, bill_id=bill_id,
        from_status=bill_models.OrderStatus.CONFIRMED,
        to_status=bill_models.OrderStatus.CHECKING,
    )


@router.post("/orders/{bill_id}/deliver", response_model=bill_schemas.CustomerBillRead, summary="Mark an order delivered")
async def deliver_order(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_staff_user),
):
    return await bill_crud.customer_bill.move_order(
        db, bill_id=bill_id,
        from_status=bill_models.OrderStatus.CHECKING,
        to_status=bill_models.OrderStatus.DELIVERED,
    )


@router.post("/orders/{bill_id}/cancel", response_model=bill_schemas.CustomerBillRead, summary="Cancel a pending order")
async def cancel_order(
    bill_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await bill_crud.customer_bill.cancel_order(db, bill_id=bill_id, current_user=current_user)
