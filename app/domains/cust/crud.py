# app/domains/cust/crud.py

"""
CRUD operations of the 'cust' domain.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.domains.usr import models as usr_models
from . import models as cust_models
from . import schemas as cust_schemas

logger = logging.getLogger(__name__)

CUSTOMER_CODE_PREFIX = "CUST"


class CRUDArea(CRUDBase[cust_models.Area, cust_schemas.AreaCreate, cust_schemas.AreaCreate]):
    def __init__(self):
        super().__init__(model=cust_models.Area)

    async def create(self, db: AsyncSession, *, obj_in: cust_schemas.AreaCreate) -> cust_models.Area:
        if await self.get_by_attribute(db, attribute="name", value=obj_in.name):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Area with this name already exists")
        return await super().create(db, obj_in=obj_in)


area = CRUDArea()


class CRUDCustomer(CRUDBase[cust_models.Customer, cust_schemas.CustomerCreate, cust_schemas.CustomerUpdate]):
    def __init__(self):
        super().__init__(model=cust_models.Customer)

    async def generate_code(self, db: AsyncSession) -> str:
        """CUST0001, CUST0002, ... continuing the highest numeric suffix in use."""
        result = await db.execute(select(self.model.code).where(self.model.code.like(f"{CUSTOMER_CODE_PREFIX}%")))
        suffixes = [
            int(code[len(CUSTOMER_CODE_PREFIX):])
            for code in result.scalars().all()
            if code[len(CUSTOMER_CODE_PREFIX):].isdigit()
        ]
        return f"{CUSTOMER_CODE_PREFIX}{max(suffixes, default=0) + 1:04d}"

    async def _validate(self, db: AsyncSession, data: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        contact_number = data.get("contact_number")
        if contact_number:
            existing = await self.get_by_attribute(db, attribute="contact_number", value=contact_number)
            if existing is not None and existing.id != exclude_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Customer with this contact number already exists"
                )
        if data.get("area_id") is not None and await db.get(cust_models.Area, data["area_id"]) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Area not found")
        if data.get("assigned_rep_id") is not None and await db.get(usr_models.User, data["assigned_rep_id"]) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assigned representative not found")

    async def create(
        self, db: AsyncSession, *, obj_in: cust_schemas.CustomerCreate, current_user: usr_models.User
    ) -> cust_models.Customer:
        """
        Creates a customer with the next free code. A representative who does not
        name another rep becomes the assigned rep.
        """
        await self._validate(db, obj_in.model_dump())
        extra: Dict[str, Any] = {"code": await self.generate_code(db)}
        if obj_in.assigned_rep_id is None and current_user.role == usr_models.UserRole.REPRESENTATIVE:
            extra["assigned_rep_id"] = current_user.id
        db_obj = await super().create(db, obj_in=obj_in, **extra)
        logger.info("Customer %s created by user %s", db_obj.code, current_user.id)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: cust_models.Customer, obj_in: cust_schemas.CustomerUpdate
    ) -> cust_models.Customer:
        update_data = obj_in.model_dump(exclude_unset=True)
        await self._validate(db, update_data, exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def list_customers(
        self,
        db: AsyncSession,
        *,
        area_id: Optional[int] = None,
        assigned_rep_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[cust_models.Customer]:
        return await self.get_multi(db, skip=skip, limit=limit, area_id=area_id, assigned_rep_id=assigned_rep_id)


customer = CRUDCustomer()
