# app/domains/corp/crud.py

"""
CRUD operations of the 'corp' domain.
"""

from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from . import models as corp_models
from . import schemas as corp_schemas


class CRUDBusiness(CRUDBase[corp_models.Business, corp_schemas.BusinessCreate, corp_schemas.BusinessUpdate]):
    def __init__(self):
        super().__init__(model=corp_models.Business)

    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[corp_models.Business]:
        return await self.get_by_attribute(db, attribute="name", value=name)

    async def create(self, db: AsyncSession, *, obj_in: corp_schemas.BusinessCreate) -> corp_models.Business:
        if await self.get_by_name(db, name=obj_in.name):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Business with this name already exists")
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: corp_models.Business, obj_in: corp_schemas.BusinessUpdate
    ) -> corp_models.Business:
        if obj_in.name is not None and obj_in.name != db_obj.name:
            if await self.get_by_name(db, name=obj_in.name):
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Business with this name already exists")
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)


business = CRUDBusiness()
