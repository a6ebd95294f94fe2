# app/domains/ven/crud.py

"""
CRUD operations of the 'ven' domain.
"""

from typing import Any, Dict, List, Optional
from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.domains.inv import models as inv_models
from app.domains.bill import models as bill_models
from . import models as ven_models
from . import schemas as ven_schemas


class CRUDSupplier(CRUDBase[ven_models.Supplier, ven_schemas.SupplierCreate, ven_schemas.SupplierUpdate]):
    def __init__(self):
        super().__init__(model=ven_models.Supplier)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[ven_models.Supplier]:
        return await self.get_by_attribute(db, attribute="code", value=code)

    async def search(
        self, db: AsyncSession, *, search: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[ven_models.Supplier]:
        statement = select(self.model)
        if search:
            pattern = f"%{search}%"
            statement = statement.where(or_(self.model.name.ilike(pattern), self.model.code.ilike(pattern)))
        statement = statement.order_by(self.model.name).offset(skip).limit(limit)
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_dropdown(self, db: AsyncSession) -> List[Dict[str, Any]]:
        result = await db.execute(select(self.model.id, self.model.code, self.model.name).order_by(self.model.name))
        return [{"id": row.id, "code": row.code, "name": row.name} for row in result.all()]

    async def _check_unique(self, db: AsyncSession, data: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        """Rejects a code, name or phone already used by another supplier."""
        for field in ("code", "name", "phone"):
            value = data.get(field)
            if not value:
                continue
            existing = await self.get_by_attribute(db, attribute=field, value=value)
            if existing is not None and existing.id != exclude_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Supplier with this {field} already exists"
                )

    async def _check_category(self, db: AsyncSession, category_id: Optional[int]) -> None:
        if category_id is not None and await db.get(inv_models.Category, category_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    async def create(self, db: AsyncSession, *, obj_in: ven_schemas.SupplierCreate) -> ven_models.Supplier:
        await self._check_unique(db, obj_in.model_dump())
        await self._check_category(db, obj_in.category_id)
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: ven_models.Supplier, obj_in: ven_schemas.SupplierUpdate
    ) -> ven_models.Supplier:
        update_data = obj_in.model_dump(exclude_unset=True)
        await self._check_unique(db, update_data, exclude_id=db_obj.id)
        if "category_id" in update_data:
            await self._check_category(db, update_data["category_id"])
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def remove(self, db: AsyncSession, *, id: int) -> ven_models.Supplier:
        """Deletes a supplier nobody references (items or supplier bills)."""
        db_obj = await self.get_or_404(db, id, detail="Supplier not found")

        item_check = await db.execute(select(inv_models.Item.id).where(inv_models.Item.supplier_id == id).limit(1))
        if item_check.first() is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this supplier as it has associated items."
            )
        bill_check = await db.execute(
            select(bill_models.SupplierBill.id).where(bill_models.SupplierBill.supplier_id == id).limit(1)
        )
        if bill_check.first() is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this supplier as it has associated bills."
            )

        await db.delete(db_obj)
        await self._commit(db)
        return db_obj


supplier = CRUDSupplier()
