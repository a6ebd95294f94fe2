# app/domains/bill/crud.py

"""
CRUD operations and workflows of the 'bill' domain.

- Supplier bills receive goods into a location (stock increases).
- Customer bills created by office staff are invoices; stock is deducted
  immediately when a location is given.
- Customer bills created by representatives are orders; stock is deducted
  once, when an admin confirms the order.

Every workflow validates and locks first, then writes, then commits once.
A failed check raises before anything is written.
"""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.config import settings
from app.core.crud_base import CRUDBase
from app.core.database_base import money, utc_now
from app.domains.usr import models as usr_models
from app.domains.loc import models as loc_models
from app.domains.loc.crud import stock_location as loc_stock_location
from app.domains.ven import models as ven_models
from app.domains.cust import models as cust_models
from app.domains.inv import models as inv_models
from app.domains.inv.crud import stock as inv_stock
from . import models as bill_models
from . import schemas as bill_schemas

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
ItemLine = Union[bill_schemas.SupplierBillItemCreate, bill_schemas.CustomerBillItemCreate]


async def resolve_item(db: AsyncSession, line: ItemLine) -> inv_models.Item:
    """Finds the item of a bill line by id, falling back to the code."""
    db_item = None
    if line.item_id is not None:
        db_item = await db.get(inv_models.Item, line.item_id)
    elif line.item_code:
        result = await db.execute(select(inv_models.Item).where(inv_models.Item.code == line.item_code))
        db_item = result.scalars().first()
    if db_item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Item {line.item_id if line.item_id is not None else line.item_code} not found"
        )
    return db_item


def percentage_of(amount: Decimal, percentage: Decimal) -> Decimal:
    return money(amount * percentage / HUNDRED)


# =============================================================================
# 1. supplier bills
# =============================================================================
class CRUDSupplierBill(CRUDBase[bill_models.SupplierBill, bill_schemas.SupplierBillCreate, bill_schemas.SupplierBillCreate]):
    def __init__(self):
        super().__init__(model=bill_models.SupplierBill)

    async def _resolve_location(
        self, db: AsyncSession, location_id: Optional[int], current_user: usr_models.User
    ) -> loc_models.StockLocation:
        if location_id is not None:
            location = await db.get(loc_models.StockLocation, location_id)
            if location is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
            return location
        if current_user.business_id is not None:
            location = await loc_stock_location.get_main_for_business(db, business_id=current_user.business_id)
            if location is not None:
                return location
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No location given and no main location found for the user's business"
        )

    async def create_bill(
        self, db: AsyncSession, *, obj_in: bill_schemas.SupplierBillCreate, current_user: usr_models.User
    ) -> bill_models.SupplierBill:
        """
        Records goods received from a supplier and increases the stock of the
        receiving location by quantity + free quantity of every line.
        """
        if await db.get(ven_models.Supplier, obj_in.supplier_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
        duplicate = await db.execute(
            select(self.model.id).where(
                self.model.supplier_id == obj_in.supplier_id, self.model.bill_number == obj_in.bill_number
            )
        )
        if duplicate.first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Bill number already exists for this supplier"
            )
        location = await self._resolve_location(db, obj_in.location_id, current_user)
        items = [await resolve_item(db, line) for line in obj_in.items]

        try:
            bill = bill_models.SupplierBill(
                bill_number=obj_in.bill_number,
                supplier_id=obj_in.supplier_id,
                location_id=location.id,
                billing_date=obj_in.billing_date or date.today(),
                received_date=obj_in.received_date,
                extra_discount_percentage=obj_in.extra_discount_percentage,
                notes=obj_in.notes,
                created_by=current_user.id,
            )
            subtotal = Decimal("0")
            for line, db_item in zip(obj_in.items, items):
                gross = line.unit_price * line.quantity
                amount = money(gross - gross * line.discount_percentage / HUNDRED)
                bill.items.append(
                    bill_models.SupplierBillItem(
                        item_id=db_item.id,
                        item_code=db_item.code,
                        item_name=db_item.name,
                        unit_price=money(line.unit_price),
                        quantity=line.quantity,
                        discount_percentage=line.discount_percentage,
                        free_item_quantity=line.free_item_quantity,
                        amount=amount,
                    )
                )
                subtotal += amount
                await inv_stock.increment(
                    db, item_id=db_item.id, location_id=location.id,
                    quantity=line.quantity + line.free_item_quantity,
                )

            bill.subtotal = money(subtotal)
            bill.discount_amount = percentage_of(bill.subtotal, obj_in.extra_discount_percentage)
            bill.final_total = bill.subtotal - bill.discount_amount
            db.add(bill)
            await db.flush()
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Supplier bill %s rolled back", obj_in.bill_number)
            raise

        await db.refresh(bill)
        logger.info("Supplier bill %s received into location %s", bill.bill_number, location.code)
        return bill

    async def list_bills(
        self, db: AsyncSession, *, supplier_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> List[bill_models.SupplierBill]:
        return await self.get_filtered(db, filters={"supplier_id": supplier_id}, skip=skip, limit=limit)


supplier_bill = CRUDSupplierBill()


# =============================================================================
# 2. customer bills
# =============================================================================
class CRUDCustomerBill(CRUDBase[bill_models.CustomerBill, bill_schemas.CustomerBillCreate, bill_schemas.CustomerBillCreate]):
    def __init__(self):
        super().__init__(model=bill_models.CustomerBill)

    async def generate_invoice_no(self, db: AsyncSession, *, prefix: str, on: Optional[date] = None) -> str:
        """
        INV-YYMMNNNN for invoices, ORD-YYMMNNNN for orders. NNNN continues the
        highest number issued with the same prefix in the month (longer numbers
        sort first once NNNN passes 9999).
        """
        head = f"{prefix}-{(on or date.today()):%y%m}"
        column = self.model.invoice_no
        result = await db.execute(
            select(column)
            .where(column.like(f"{head}%"))
            .order_by(func.length(column).desc(), column.desc())
            .limit(1)
        )
        last = result.scalar_one_or_none()
        sequence = int(last[len(head):]) + 1 if last else 1
        return f"{head}{sequence:04d}"

    async def lock_bill(self, db: AsyncSession, bill_id: int) -> bill_models.CustomerBill:
        statement = (
            select(self.model)
            .where(self.model.id == bill_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        bill = (await db.execute(statement)).scalars().first()
        if bill is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")
        return bill

    @staticmethod
    def _stock_requirements(bill_items) -> Tuple["OrderedDict[int, int]", Dict[int, str]]:
        """Physical quantities per item (quantity + free quantity), lines of one item merged."""
        required: "OrderedDict[int, int]" = OrderedDict()
        labels: Dict[int, str] = {}
        for line in bill_items:
            required[line.item_id] = required.get(line.item_id, 0) + line.quantity + line.free_quantity
            labels[line.item_id] = line.item_code
        return required, labels

    @staticmethod
    def _status_for_payment(bill: bill_models.CustomerBill) -> None:
        if bill.paid_amount <= 0:
            return
        bill.status = bill_models.BillStatus.PAID if bill.balance_amount <= 0 else bill_models.BillStatus.PARTIALLY_PAID

    async def create_bill(
        self, db: AsyncSession, *, obj_in: bill_schemas.CustomerBillCreate, current_user: usr_models.User
    ) -> bill_models.CustomerBill:
        """
        Creates an order (representatives) or an invoice (admin/office).

        Invoices with a location lock and deduct the stock of every line in the
        same transaction; an order only records the location for confirmation.
        """
        if await db.get(cust_models.Customer, obj_in.customer_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
        if obj_in.location_id is not None and await db.get(loc_models.StockLocation, obj_in.location_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")

        is_order = current_user.role == usr_models.UserRole.REPRESENTATIVE
        bill = bill_models.CustomerBill(
            customer_id=obj_in.customer_id,
            billing_date=obj_in.billing_date or date.today(),
            payment_method=obj_in.payment_method,
            is_order=is_order,
            order_status=bill_models.OrderStatus.PENDING if is_order else None,
            status=bill_models.BillStatus.PENDING if is_order else (obj_in.status or bill_models.BillStatus.DRAFT),
            discount_percentage=obj_in.discount_percentage,
            tax_amount=money(obj_in.tax_amount),
            paid_amount=money(obj_in.paid_amount),
            notes=obj_in.notes,
            reference_no=obj_in.reference_no,
            location_id=obj_in.location_id,
            created_by=current_user.id,
        )

        subtotal = Decimal("0")
        for line in obj_in.items:
            db_item = await resolve_item(db, line)
            unit_price = money(line.unit_price if line.unit_price is not None else db_item.selling_price)
            line_subtotal = money(unit_price * line.quantity)
            line_discount = percentage_of(line_subtotal, line.discount_percentage)
            bill.items.append(
                bill_models.CustomerBillItem(
                    item_id=db_item.id,
                    item_code=db_item.code,
                    item_name=db_item.name,
                    category_name=db_item.category.name if db_item.category else None,
                    unit_price=unit_price,
                    quantity=line.quantity,
                    unit_type=db_item.unit_type.value if db_item.unit_type else None,
                    discount_percentage=line.discount_percentage,
                    discount_amount=line_discount,
                    free_quantity=line.free_quantity,
                    subtotal=line_subtotal,
                    total_amount=line_subtotal - line_discount,
                    notes=line.notes,
                )
            )
            subtotal += line_subtotal - line_discount

        bill.subtotal = money(subtotal)
        if obj_in.discount_amount is not None and money(obj_in.discount_amount) > bill.subtotal:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Discount amount cannot exceed the subtotal. Subtotal: {bill.subtotal}"
            )
        bill.discount_amount = (
            money(obj_in.discount_amount) if obj_in.discount_amount is not None
            else percentage_of(bill.subtotal, obj_in.discount_percentage)
        )
        bill.total_amount = bill.subtotal - bill.discount_amount + bill.tax_amount
        if bill.paid_amount > bill.total_amount:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Paid amount cannot exceed the total amount")
        bill.balance_amount = bill.total_amount - bill.paid_amount
        bill.total_items = len(bill.items)
        bill.total_quantity = sum(line.quantity for line in bill.items)
        self._status_for_payment(bill)

        required: Dict[int, int] = {}
        stock_rows: Dict[int, inv_models.Stock] = {}
        deduct_now = not is_order and obj_in.location_id is not None
        if deduct_now:
            required, labels = self._stock_requirements(bill.items)
            stock_rows = await inv_stock.lock_available(
                db, location_id=obj_in.location_id, required=required, labels=labels
            )

        try:
            bill.invoice_no = await self.generate_invoice_no(db, prefix="ORD" if is_order else "INV")
            db.add(bill)
            if deduct_now:
                for item_id, quantity in required.items():
                    inv_stock.decrement(db, stock_rows[item_id], quantity)
            await db.flush()
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Customer bill for customer %s rolled back", obj_in.customer_id)
            raise

        await db.refresh(bill)
        logger.info(
            "%s %s created by user %s (total %s)",
            "Order" if is_order else "Invoice", bill.invoice_no, current_user.id, bill.total_amount,
        )
        return bill

    async def list_bills(
        self,
        db: AsyncSession,
        *,
        customer_id: Optional[int] = None,
        bill_status: Optional[bill_models.BillStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[bill_models.CustomerBill]:
        return await self.get_filtered(
            db, filters={"customer_id": customer_id, "status": bill_status}, skip=skip, limit=limit
        )

    async def add_payment(
        self, db: AsyncSession, *, bill_id: int, obj_in: bill_schemas.PaymentCreate
    ) -> bill_models.CustomerBill:
        bill = await self.lock_bill(db, bill_id)
        if bill.status == bill_models.BillStatus.CANCELLED:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot add a payment to a cancelled bill")
        amount = money(obj_in.amount)
        if amount > bill.balance_amount:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Payment amount exceeds the balance. Balance: {bill.balance_amount}"
            )

        try:
            bill.paid_amount = bill.paid_amount + amount
            bill.balance_amount = bill.total_amount - bill.paid_amount
            if obj_in.payment_method is not None:
                bill.payment_method = obj_in.payment_method
            self._status_for_payment(bill)
            db.add(bill)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(bill)
        logger.info("Payment of %s recorded on %s, balance %s", amount, bill.invoice_no, bill.balance_amount)
        return bill

    # -------------------------------------------------------------------------
    # orders
    # -------------------------------------------------------------------------
    async def list_orders(
        self,
        db: AsyncSession,
        *,
        order_status: Optional[bill_models.OrderStatus] = None,
        created_by: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[bill_models.CustomerBill]:
        return await self.get_filtered(
            db,
            filters={"is_order": True, "order_status": order_status, "created_by": created_by},
            skip=skip,
            limit=limit,
        )

    async def customer_summary(
        self, db: AsyncSession, *, customer_id: int, exclude_bill_id: Optional[int] = None
    ) -> bill_schemas.CustomerSummary:
        """
        Outstanding position of a customer over delivered, unpaid bills.
        Bills older than OVERDUE_DAYS are totalled separately.
        """
        statement = select(self.model).where(
            self.model.customer_id == customer_id,
            self.model.order_status == bill_models.OrderStatus.DELIVERED,
            self.model.status.not_in([bill_models.BillStatus.PAID, bill_models.BillStatus.CANCELLED]),
        )
        if exclude_bill_id is not None:
            statement = statement.where(self.model.id != exclude_bill_id)
        bills = (await db.execute(statement.order_by(self.model.billing_date.desc()))).scalars().all()

        overdue_before = date.today() - timedelta(days=settings.OVERDUE_DAYS)
        pending = [bill for bill in bills if bill.balance_amount > 0]
        return bill_schemas.CustomerSummary(
            customer_id=customer_id,
            due_amount=money(sum((bill.balance_amount for bill in pending), Decimal("0"))),
            pending_bills_count=len(pending),
            over_45_days_amount=money(
                sum((bill.balance_amount for bill in pending if bill.billing_date < overdue_before), Decimal("0"))
            ),
            last_billing_date=bills[0].billing_date if bills else None,
        )

    async def get_order(self, db: AsyncSession, *, bill_id: int, current_user: usr_models.User) -> bill_schemas.OrderDetail:
        bill = await self.get_or_404(db, bill_id, detail="Order not found")
        if not bill.is_order:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not an order")
        if current_user.role == usr_models.UserRole.REPRESENTATIVE and bill.created_by != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this order")

        summary = await self.customer_summary(db, customer_id=bill.customer_id, exclude_bill_id=bill.id)
        return bill_schemas.OrderDetail.model_validate(
            bill,
            update={
                "customer_name": bill.customer.name if bill.customer else None,
                "customer_summary": summary,
            },
        )

    async def _lock_order(self, db: AsyncSession, bill_id: int) -> bill_models.CustomerBill:
        bill = await self.lock_bill(db, bill_id)
        if not bill.is_order:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not an order")
        return bill

    async def confirm_order(
        self, db: AsyncSession, *, bill_id: int, current_user: usr_models.User
    ) -> bill_models.CustomerBill:
        """
        Confirms a pending order and deducts its stock.

        The bill row is locked first, so of two concurrent confirmations the
        second one sees `confirmed` and fails with 400.
        """
        bill = await self._lock_order(db, bill_id)
        if bill.order_status != bill_models.OrderStatus.PENDING:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order is not pending")
        if bill.location_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order has no stock location")

        required, labels = self._stock_requirements(bill.items)
        stock_rows = await inv_stock.lock_available(db, location_id=bill.location_id, required=required, labels=labels)

        try:
            for item_id, quantity in required.items():
                inv_stock.decrement(db, stock_rows[item_id], quantity)
            bill.order_status = bill_models.OrderStatus.CONFIRMED
            bill.order_confirmed_at = utc_now()
            bill.confirmed_by = current_user.id
            db.add(bill)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Confirmation of order %s rolled back", bill_id)
            raise

        await db.refresh(bill)
        logger.info("Order %s confirmed by user %s", bill.invoice_no, current_user.id)
        return bill

    async def move_order(
        self,
        db: AsyncSession,
        *,
        bill_id: int,
        from_status: bill_models.OrderStatus,
        to_status: bill_models.OrderStatus,
    ) -> bill_models.CustomerBill:
        """Moves an order one step along confirmed -> checking -> delivered."""
        bill = await self._lock_order(db, bill_id)
        if bill.order_status != from_status:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Order must be {from_status.value} to move to {to_status.value}"
            )
        bill.order_status = to_status
        db.add(bill)
        await self._commit(db)
        await db.refresh(bill)
        logger.info("Order %s moved to %s", bill.invoice_no, to_status.value)
        return bill

    async def cancel_order(
        self, db: AsyncSession, *, bill_id: int, current_user: usr_models.User
    ) -> bill_models.CustomerBill:
        bill = await self._lock_order(db, bill_id)
        if current_user.role == usr_models.UserRole.REPRESENTATIVE and bill.created_by != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to cancel this order")
        if bill.order_status != bill_models.OrderStatus.PENDING:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only pending orders can be cancelled")

        bill.order_status = bill_models.OrderStatus.CANCELLED
        bill.status = bill_models.BillStatus.CANCELLED
        db.add(bill)
        await self._commit(db)
        await db.refresh(bill)
        logger.info("Order %s cancelled by user %s", bill.invoice_no, current_user.id)
        return bill


customer_bill = CRUDCustomerBill()
