# app/domains/inv/crud.py

"""
CRUD operations of the 'inv' domain.

Besides the item master this module owns every stock movement:
- CRUDStock locks, checks, decrements and increments stock rows and is
  reused by the billing workflows.
- CRUDStockTransfer moves quantities between two locations in one
  transaction (validate, lock, write, single commit).
"""

import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from sqlmodel import select, or_, func
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.core.database_base import money
from app.domains.loc import models as loc_models
from app.domains.ven import models as ven_models
from app.domains.bill import models as bill_models
from . import models as inv_models
from . import schemas as inv_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. categories
# =============================================================================
class CRUDCategory(CRUDBase[inv_models.Category, inv_schemas.CategoryCreate, inv_schemas.CategoryCreate]):
    def __init__(self):
        super().__init__(model=inv_models.Category)

    async def create(self, db: AsyncSession, *, obj_in: inv_schemas.CategoryCreate) -> inv_models.Category:
        if await self.get_by_attribute(db, attribute="code", value=obj_in.code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category with this code already exists")
        return await super().create(db, obj_in=obj_in)


category = CRUDCategory()


# =============================================================================
# 2. items
# =============================================================================
class CRUDItem(CRUDBase[inv_models.Item, inv_schemas.ItemCreate, inv_schemas.ItemUpdate]):
    def __init__(self):
        super().__init__(model=inv_models.Item)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[inv_models.Item]:
        return await self.get_by_attribute(db, attribute="code", value=code)

    async def search(
        self,
        db: AsyncSession,
        *,
        supplier_id: Optional[int] = None,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[inv_models.Item]:
        statement = select(self.model)
        if supplier_id is not None:
            statement = statement.where(self.model.supplier_id == supplier_id)
        if category_id is not None:
            statement = statement.where(self.model.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            statement = statement.where(or_(self.model.name.ilike(pattern), self.model.code.ilike(pattern)))
        statement = statement.order_by(self.model.code).offset(skip).limit(limit)
        result = await db.execute(statement)
        return result.scalars().all()

    async def _check_references(self, db: AsyncSession, supplier_id: Optional[int], category_id: Optional[int]) -> None:
        if supplier_id is not None and await db.get(ven_models.Supplier, supplier_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
        if category_id is not None and await db.get(inv_models.Category, category_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    @staticmethod
    def _check_prices(selling_price: Optional[Decimal], minimum_selling_price: Optional[Decimal]) -> None:
        if selling_price is not None and minimum_selling_price is not None and selling_price < minimum_selling_price:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Selling price cannot be lower than the minimum selling price"
            )

    async def create(self, db: AsyncSession, *, obj_in: inv_schemas.ItemCreate) -> inv_models.Item:
        if await self.get_by_code(db, code=obj_in.code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Item with this code already exists")
        await self._check_references(db, obj_in.supplier_id, obj_in.category_id)
        self._check_prices(obj_in.selling_price, obj_in.minimum_selling_price)
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj: inv_models.Item, obj_in: inv_schemas.ItemUpdate) -> inv_models.Item:
        update_data = obj_in.model_dump(exclude_unset=True)
        await self._check_references(db, update_data.get("supplier_id"), update_data.get("category_id"))
        self._check_prices(
            update_data.get("selling_price", db_obj.selling_price),
            update_data.get("minimum_selling_price", db_obj.minimum_selling_price),
        )
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def remove(self, db: AsyncSession, *, id: int) -> inv_models.Item:
        """Deletes an item without stock on hand and without any history."""
        db_obj = await self.get_or_404(db, id, detail="Item not found")

        stock_rows = (await db.execute(select(inv_models.Stock).where(inv_models.Stock.item_id == id))).scalars().all()
        if any(row.quantity > 0 for row in stock_rows):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete an item with stock on hand.")

        for column in (
            inv_models.StockTransferItem.item_id,
            bill_models.SupplierBillItem.item_id,
            bill_models.CustomerBillItem.item_id,
        ):
            if (await db.execute(select(column).where(column == id).limit(1))).first() is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cannot delete this item as it is used by transfers or bills."
                )

        for row in stock_rows:
            await db.delete(row)
        await db.delete(db_obj)
        await self._commit(db)
        return db_obj


item = CRUDItem()


# =============================================================================
# 3. stocks
# =============================================================================
def to_stock_read(stock: inv_models.Stock) -> inv_schemas.StockRead:
    return inv_schemas.StockRead(
        id=stock.id,
        item_id=stock.item_id,
        item_code=stock.item.code,
        item_name=stock.item.name,
        supplier_name=stock.item.supplier.name if stock.item.supplier else None,
        location_id=stock.location_id,
        location_name=stock.location.name,
        quantity=stock.quantity,
        updated_at=stock.updated_at,
    )


class CRUDStock(CRUDBase[inv_models.Stock, inv_schemas.StockAdd, inv_schemas.StockAdd]):
    """
    Stock rows are only changed through the helpers below. Callers own the
    transaction: nothing here commits except add_stock.
    """
    def __init__(self):
        super().__init__(model=inv_models.Stock)

    async def list_levels(
        self,
        db: AsyncSession,
        *,
        location_id: Optional[int] = None,
        item_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[inv_models.Stock]:
        statement = select(self.model)
        if location_id is not None:
            statement = statement.where(self.model.location_id == location_id)
        if item_id is not None:
            statement = statement.where(self.model.item_id == item_id)
        statement = (
            statement.order_by(self.model.updated_at.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().all()

    async def lock(self, db: AsyncSession, *, item_id: int, location_id: int) -> Optional[inv_models.Stock]:
        """Reads the (item, location) row with a row lock (SELECT ... FOR UPDATE)."""
        statement = (
            select(self.model)
            .where(self.model.item_id == item_id, self.model.location_id == location_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def lock_available(
        self,
        db: AsyncSession,
        *,
        location_id: int,
        required: Mapping[int, int],
        labels: Mapping[int, str],
        location_label: Optional[str] = None,
    ) -> Dict[int, inv_models.Stock]:
        """
        Locks the stock rows of every required item and checks that the
        quantity covers the requirement. Raises 400 before anything is
        written when one item is short.

        A missing row is reported as "No stock record ... at <location_label>"
        when a label is given, otherwise as insufficient stock with 0 available.
        """
        rows: Dict[int, inv_models.Stock] = {}
        for item_id in sorted(required):
            quantity = required[item_id]
            stock = await self.lock(db, item_id=item_id, location_id=location_id)
            if stock is None and location_label is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"No stock record for item {labels[item_id]} at {location_label}"
                )
            available = stock.quantity if stock is not None else 0
            if available < quantity:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Insufficient stock for item {labels[item_id]}. "
                           f"Required: {quantity}, Available: {available}"
                )
            rows[item_id] = stock
        return rows

    def decrement(self, db: AsyncSession, stock: inv_models.Stock, quantity: int) -> None:
        if stock.quantity < quantity:
            # lock_available runs first; reaching this means the caller skipped it
            raise ValueError(f"stock {stock.id} would become negative")
        stock.quantity -= quantity
        db.add(stock)

    async def increment(self, db: AsyncSession, *, item_id: int, location_id: int, quantity: int) -> inv_models.Stock:
        """Adds quantity to the (item, location) row, creating the row when missing."""
        stock = await self.lock(db, item_id=item_id, location_id=location_id)
        if stock is None:
            stock = inv_models.Stock(item_id=item_id, location_id=location_id, quantity=0)
        stock.quantity += quantity
        db.add(stock)
        await db.flush()
        return stock

    async def add_stock(self, db: AsyncSession, *, obj_in: inv_schemas.StockAdd) -> inv_models.Stock:
        if await db.get(inv_models.Item, obj_in.item_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
        if await db.get(loc_models.StockLocation, obj_in.location_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
        try:
            stock = await self.increment(db, item_id=obj_in.item_id, location_id=obj_in.location_id, quantity=obj_in.quantity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(stock)
        logger.info("Added %s of item %s at location %s", obj_in.quantity, obj_in.item_id, obj_in.location_id)
        return stock


stock = CRUDStock()


# =============================================================================
# 4. stock transfers
# =============================================================================
class CRUDStockTransfer(CRUDBase[inv_models.StockTransfer, inv_schemas.StockTransferCreate, inv_schemas.StockTransferCreate]):
    def __init__(self):
        super().__init__(model=inv_models.StockTransfer)

    async def list_transfers(
        self, db: AsyncSession, *, location_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> List[inv_models.StockTransfer]:
        statement = select(self.model)
        if location_id is not None:
            statement = statement.where(
                or_(self.model.source_location_id == location_id, self.model.destination_location_id == location_id)
            )
        statement = statement.order_by(self.model.id.desc()).offset(skip).limit(limit)
        result = await db.execute(statement)
        return result.scalars().all()

    async def generate_transfer_number(self, db: AsyncSession, *, on: Optional[date] = None) -> str:
        """
        ST-YYYYMMDD-NNN, where NNN continues the highest sequence issued that day.
        NNN grows past 3 digits after 999, so longer numbers sort first.
        """
        prefix = f"ST-{(on or date.today()):%Y%m%d}-"
        column = self.model.transfer_number
        result = await db.execute(
            select(column)
            .where(column.like(f"{prefix}%"))
            .order_by(func.length(column).desc(), column.desc())
            .limit(1)
        )
        last = result.scalar_one_or_none()
        sequence = int(last.rsplit("-", 1)[1]) + 1 if last else 1
        return f"{prefix}{sequence:03d}"

    async def create_transfer(
        self, db: AsyncSession, *, obj_in: inv_schemas.StockTransferCreate, created_by: Optional[int] = None
    ) -> inv_models.StockTransfer:
        """
        Moves stock between two locations in one transaction.

        1. validate locations and items (lines of the same item are merged)
        2. lock and check every source row; nothing is written if one is short
        3. write the transfer, its lines and both stock sides, then commit once
        """
        if obj_in.source_location_id == obj_in.destination_location_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Source and destination locations must differ")
        source = await db.get(loc_models.StockLocation, obj_in.source_location_id)
        if source is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Source location not found")
        destination = await db.get(loc_models.StockLocation, obj_in.destination_location_id)
        if destination is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Destination location not found")
        # rollback expires loaded instances; keep plain values for logging
        source_id, destination_id = source.id, destination.id
        source_code, destination_code = source.code, destination.code

        quantities: "OrderedDict[int, int]" = OrderedDict()
        unit_costs: Dict[int, Optional[Decimal]] = {}
        for line in obj_in.items:
            quantities[line.item_id] = quantities.get(line.item_id, 0) + line.quantity
            if unit_costs.get(line.item_id) is None:
                unit_costs[line.item_id] = line.unit_cost

        items: Dict[int, inv_models.Item] = {}
        for item_id in quantities:
            db_item = await db.get(inv_models.Item, item_id)
            if db_item is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {item_id} not found")
            items[item_id] = db_item

        source_rows = await stock.lock_available(
            db,
            location_id=source_id,
            required=quantities,
            labels={item_id: db_item.code for item_id, db_item in items.items()},
            location_label="source location",
        )

        try:
            transfer = inv_models.StockTransfer(
                transfer_number=await self.generate_transfer_number(db),
                source_location_id=source_id,
                destination_location_id=destination_id,
                transfer_date=obj_in.transfer_date or date.today(),
                status=inv_models.TransferStatus.COMPLETED,
                notes=obj_in.notes,
                created_by=created_by,
            )
            total_value = Decimal("0")
            for item_id, quantity in quantities.items():
                db_item = items[item_id]
                unit_cost = money(unit_costs[item_id] if unit_costs[item_id] is not None else db_item.cost_price)
                line_total = money(unit_cost * quantity)
                transfer.items.append(
                    inv_models.StockTransferItem(
                        item_id=item_id,
                        item_code=db_item.code,
                        item_name=db_item.name,
                        supplier_name=db_item.supplier.name if db_item.supplier else None,
                        requested_quantity=quantity,
                        shipped_quantity=quantity,
                        received_quantity=quantity,
                        unit_cost=unit_cost,
                        total_cost=line_total,
                    )
                )
                total_value += line_total

                stock.decrement(db, source_rows[item_id], quantity)
                await stock.increment(db, item_id=item_id, location_id=destination_id, quantity=quantity)

            transfer.total_items = len(quantities)
            transfer.total_quantity = sum(quantities.values())
            transfer.total_value = money(total_value)
            db.add(transfer)
            await db.flush()
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Stock transfer from %s to %s rolled back", source_id, destination_id)
            raise

        await db.refresh(transfer)
        logger.info(
            "Stock transfer %s completed: %s items, %s units from %s to %s",
            transfer.transfer_number, transfer.total_items, transfer.total_quantity, source_code, destination_code,
        )
        return transfer


stock_transfer = CRUDStockTransfer()
