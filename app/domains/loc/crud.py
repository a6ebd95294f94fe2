# app/domains/loc/crud.py

"""
CRUD operations of the 'loc' domain.

Keeps the one-main-location-per-business rule: the first location of a
business becomes main, a second main is refused on create, and promoting a
location on update demotes the previous main in the same transaction.
"""

import logging
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.domains.corp import models as corp_models
from app.domains.usr import models as usr_models
from app.domains.inv import models as inv_models
from app.domains.bill import models as bill_models
from . import models as loc_models
from . import schemas as loc_schemas

logger = logging.getLogger(__name__)


class CRUDStockLocation(
    CRUDBase[
        loc_models.StockLocation,
        loc_schemas.StockLocationCreate,
        loc_schemas.StockLocationUpdate
    ]
):
    def __init__(self):
        super().__init__(model=loc_models.StockLocation)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[loc_models.StockLocation]:
        return await self.get_by_attribute(db, attribute="code", value=code)

    async def get_main_for_business(self, db: AsyncSession, *, business_id: int) -> Optional[loc_models.StockLocation]:
        statement = select(self.model).where(
            self.model.business_id == business_id,
            self.model.is_main == True,  # noqa: E712
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_main_locations(self, db: AsyncSession) -> List[loc_models.StockLocation]:
        statement = select(self.model).where(self.model.is_main == True).order_by(self.model.business_id)  # noqa: E712
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_dropdown(self, db: AsyncSession, *, business_id: Optional[int] = None) -> List[dict]:
        statement = select(self.model.id, self.model.name).order_by(self.model.name)
        if business_id is not None:
            statement = statement.where(self.model.business_id == business_id)
        result = await db.execute(statement)
        return [{"id": row.id, "name": row.name} for row in result.all()]

    async def _validate_parent(
        self, db: AsyncSession, *, parent_id: int, business_id: int, location_id: Optional[int] = None
    ) -> None:
        """
        The parent must exist, belong to the same business and must not be
        the location itself or one of its descendants.
        """
        if location_id is not None and parent_id == location_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A location cannot be its own parent")
        parent = await self.get(db, id=parent_id)
        if parent is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parent location not found for the given ID")
        if parent.business_id != business_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parent location belongs to another business")

        if location_id is None:
            return
        # walk up from the new parent; reaching the location means a cycle
        seen = set()
        ancestor = parent
        while ancestor is not None and ancestor.parent_location_id is not None:
            if ancestor.parent_location_id == location_id:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Location hierarchy cannot contain cycles")
            if ancestor.parent_location_id in seen:
                break
            seen.add(ancestor.parent_location_id)
            ancestor = await self.get(db, id=ancestor.parent_location_id)

    async def _validate_responsible_user(self, db: AsyncSession, user_id: Optional[int]) -> None:
        if user_id is not None and await db.get(usr_models.User, user_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Responsible user not found")

    async def create(self, db: AsyncSession, *, obj_in: loc_schemas.StockLocationCreate) -> loc_models.StockLocation:
        """Validates foreign keys and the main location rule, then creates."""
        if await self.get_by_code(db, code=obj_in.code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Location with this code already exists")
        if await db.get(corp_models.Business, obj_in.business_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
        if obj_in.parent_location_id is not None:
            await self._validate_parent(db, parent_id=obj_in.parent_location_id, business_id=obj_in.business_id)
        await self._validate_responsible_user(db, obj_in.responsible_user_id)

        current_main = await self.get_main_for_business(db, business_id=obj_in.business_id)
        if obj_in.is_main and current_main is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Business already has a main location ({current_main.code})"
            )
        is_main = current_main is None
        if is_main and not obj_in.is_main:
            logger.info("First location of business %s becomes its main location", obj_in.business_id)
        return await super().create(db, obj_in=obj_in, is_main=is_main)

    async def update(
        self, db: AsyncSession, *, db_obj: loc_models.StockLocation, obj_in: loc_schemas.StockLocationUpdate
    ) -> loc_models.StockLocation:
        update_data = obj_in.model_dump(exclude_unset=True)

        if update_data.get("code") and update_data["code"] != db_obj.code:
            if await self.get_by_code(db, code=update_data["code"]):
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Location with this code already exists")
        if update_data.get("parent_location_id") is not None:
            await self._validate_parent(
                db, parent_id=update_data["parent_location_id"], business_id=db_obj.business_id, location_id=db_obj.id
            )
        if "responsible_user_id" in update_data:
            await self._validate_responsible_user(db, update_data["responsible_user_id"])

        if "is_main" in update_data:
            wants_main = bool(update_data["is_main"])
            if not wants_main and db_obj.is_main:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A business must keep one main location; promote another location instead"
                )
            if wants_main and not db_obj.is_main:
                current_main = await self.get_main_for_business(db, business_id=db_obj.business_id)
                if current_main is not None:
                    current_main.is_main = False
                    db.add(current_main)
                    logger.info("Location %s demoted; %s is the new main location", current_main.code, db_obj.code)

        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def _is_referenced(self, db: AsyncSession, location_id: int) -> bool:
        references = [
            inv_models.StockTransfer.source_location_id,
            inv_models.StockTransfer.destination_location_id,
            bill_models.SupplierBill.location_id,
            bill_models.CustomerBill.location_id,
            usr_models.UserLocationAccess.location_id,
        ]
        for column in references:
            result = await db.execute(select(column).where(column == location_id).limit(1))
            if result.first() is not None:
                return True
        return False

    async def remove(self, db: AsyncSession, *, id: int) -> loc_models.StockLocation:
        """
        Deletes a location that has no children, no stock on hand and no
        history. A main location can only be removed as the last location
        of its business.
        """
        db_obj = await self.get_or_404(db, id, detail="Location not found")

        children = await db.execute(select(self.model.id).where(self.model.parent_location_id == id).limit(1))
        if children.first() is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete a location that has child locations.")

        stock_rows = (await db.execute(select(inv_models.Stock).where(inv_models.Stock.location_id == id))).scalars().all()
        if any(row.quantity > 0 for row in stock_rows):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete a location with stock on hand.")

        if await self._is_referenced(db, id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete location due to existing related data."
            )

        if db_obj.is_main:
            siblings = await db.execute(
                select(self.model.id).where(self.model.business_id == db_obj.business_id, self.model.id != id).limit(1)
            )
            if siblings.first() is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cannot delete the main location while the business has other locations."
                )

        for row in stock_rows:
            await db.delete(row)
        await db.delete(db_obj)
        await self._commit(db)
        return db_obj


stock_location = CRUDStockLocation()
