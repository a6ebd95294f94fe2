# app/core/crud_base.py

"""
Base class for the common async CRUD (Create, Read, Update, Delete) operations.
Domain CRUD classes subclass it and add their own validation and workflows.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar, Any, Dict

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Generic CRUD operations for a single SQLModel table.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Fetches one record by primary key."""
        return await db.get(self.model, id)

    async def get_or_404(self, db: AsyncSession, id: Any, *, detail: Optional[str] = None) -> ModelType:
        """Fetches one record by primary key or raises 404."""
        db_obj = await db.get(self.model, id)
        if db_obj is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=detail or f"{self.model.__name__} not found",
            )
        return db_obj

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        Lists records. Keyword arguments are applied as equality filters,
        None values are ignored.
        """
        query = select(self.model)

        for field, value in kwargs.items():
            if value is not None and hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        if hasattr(self.model, 'id'):
            query = query.order_by(self.model.id)
        query = query.offset(skip).limit(limit)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,  # {"attribute_name": value}
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """
        Lists records matching every non-None filter, newest first.
        """
        query = select(self.model)
        conditions = []

        if filters:
            for attribute, value in filters.items():
                if value is None:
                    continue
                if hasattr(self.model, attribute):
                    conditions.append(getattr(self.model, attribute) == value)
                else:
                    logger.warning("Model %s has no attribute '%s'", self.model.__name__, attribute)

        if conditions:
            query = query.where(*conditions)

        query = query.order_by(self.model.id.desc()).offset(skip).limit(limit)

        result = await db.execute(query)
        return result.scalars().all()

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType, **extra: Any) -> ModelType:
        """
        Creates a record. `extra` holds server-side values (ids of the
        current user, generated codes) that are not part of the payload.
        """
        db_obj = self.model.model_validate(obj_in, update=extra or None)
        db.add(db_obj)
        await self._commit(db)
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType | Dict[str, Any]
    ) -> ModelType:
        """Applies the fields that were explicitly set on the payload."""
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await self._commit(db)
        await db.refresh(db_obj)
        return db_obj

    async def _commit(self, db: AsyncSession) -> None:
        """Commits, turning constraint violations into a 409 response."""
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Integrity error on %s: %s", self.model.__name__, e.orig)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{self.model.__name__} conflicts with an existing record.",
            )
