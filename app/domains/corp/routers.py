# app/domains/corp/routers.py

"""
API endpoints of the 'corp' domain (businesses).
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser

from . import crud as corp_crud
from . import schemas as corp_schemas

router = APIRouter(
    tags=["Business Management"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/businesses",
    response_model=corp_schemas.BusinessRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a business",
)
async def create_business(
    business_in: corp_schemas.BusinessCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """
    Creates a business. Names are unique (409 on duplicates).
    """
    return await corp_crud.business.create(db, obj_in=business_in)


@router.get("/businesses", response_model=List[corp_schemas.BusinessRead], summary="List businesses")
async def read_businesses(
    db: AsyncSession = Depends(deps.get_db_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await corp_crud.business.get_multi(db, skip=skip, limit=limit)


@router.get("/businesses/{business_id}", response_model=corp_schemas.BusinessRead, summary="Get a business")
async def read_business(
    business_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await corp_crud.business.get_or_404(db, business_id, detail="Business not found")


@router.put("/businesses/{business_id}", response_model=corp_schemas.BusinessRead, summary="Update a business")
async def update_business(
    business_id: int,
    business_in: corp_schemas.BusinessUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    db_business = await corp_crud.business.get_or_404(db, business_id, detail="Business not found")
    return await corp_crud.business.update(db, db_obj=db_business, obj_in=business_in)
