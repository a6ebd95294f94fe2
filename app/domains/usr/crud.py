# app/domains/usr/crud.py

"""
CRUD operations of the 'usr' domain.
"""

import logging
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from app.core.database_base import utc_now
from app.core.security import get_password_hash, verify_password
from app.domains.corp import models as corp_models
from app.domains.loc import models as loc_models
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[usr_models.User]:
        return await self.get_by_attribute(db, attribute="username", value=username)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        return await self.get_by_attribute(db, attribute="email", value=email.lower())

    async def _check_business(self, db: AsyncSession, business_id: Optional[int]) -> None:
        if business_id is not None and await db.get(corp_models.Business, business_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")

    async def create(self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate) -> usr_models.User:
        """Registers a user, hashing the password and rejecting duplicates."""
        if await self.get_by_username(db, username=obj_in.username):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already registered")
        if await self.get_by_email(db, email=obj_in.email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
        await self._check_business(db, obj_in.business_id)

        user_data = obj_in.model_dump(exclude={"password"})
        user_data["email"] = user_data["email"].lower()
        db_user = usr_models.User(**user_data, password_hash=get_password_hash(obj_in.password))

        db.add(db_user)
        await self._commit(db)
        await db.refresh(db_user)
        logger.info("User %s registered with role %s", db_user.username, db_user.role.name)
        return db_user

    async def update(self, db: AsyncSession, *, db_obj: usr_models.User, obj_in: usr_schemas.UserUpdate) -> usr_models.User:
        update_data = obj_in.model_dump(exclude_unset=True)
        if "business_id" in update_data:
            await self._check_business(db, update_data["business_id"])
        if "email" in update_data and update_data["email"] is not None:
            email = update_data["email"].lower()
            existing = await self.get_by_email(db, email=email)
            if existing and existing.id != db_obj.id:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
            update_data["email"] = email
        password = update_data.pop("password", None)
        if password:
            update_data["password_hash"] = get_password_hash(password)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def authenticate(self, db: AsyncSession, *, login: str, password: str) -> Optional[usr_models.User]:
        """
        Authenticates by username or e-mail.
        Returns None when the account is unknown or the password is wrong.
        """
        if "@" in login:
            user = await self.get_by_email(db, email=login)
        else:
            user = await self.get_by_username(db, username=login)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user


user = CRUDUser()


class CRUDUserLocationAccess(CRUDBase[usr_models.UserLocationAccess, usr_schemas.LocationAccessCreate, usr_schemas.LocationAccessCreate]):
    def __init__(self):
        super().__init__(model=usr_models.UserLocationAccess)

    async def get_active(self, db: AsyncSession, *, user_id: int, location_id: Optional[int] = None) -> List[usr_models.UserLocationAccess]:
        query = select(self.model).where(
            self.model.user_id == user_id,
            self.model.access_end.is_(None),
        )
        if location_id is not None:
            query = query.where(self.model.location_id == location_id)
        result = await db.execute(query.order_by(self.model.id))
        return result.scalars().all()

    async def grant(self, db: AsyncSession, *, user_id: int, obj_in: usr_schemas.LocationAccessCreate) -> usr_models.UserLocationAccess:
        if await db.get(loc_models.StockLocation, obj_in.location_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
        if await self.get_active(db, user_id=user_id, location_id=obj_in.location_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already has access to this location")
        return await self.create(db, obj_in=obj_in, user_id=user_id)

    async def revoke(self, db: AsyncSession, *, user_id: int, location_id: int) -> usr_models.UserLocationAccess:
        grants = await self.get_active(db, user_id=user_id, location_id=location_id)
        if not grants:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Active location access not found")
        now = utc_now()
        for grant in grants:
            grant.access_end = now
            db.add(grant)
        await self._commit(db)
        await db.refresh(grants[0])
        return grants[0]


location_access = CRUDUserLocationAccess()
