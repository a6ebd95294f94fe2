# app/domains/loc/routers.py

"""
API endpoints of the 'loc' domain (stock locations).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.domains.usr.models import User as UsrUser

from . import crud as loc_crud
from . import schemas as loc_schemas

router = APIRouter(
    tags=["Location Management"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/locations",
    response_model=loc_schemas.StockLocationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a stock location",
)
async def create_location(
    location_in: loc_schemas.StockLocationCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """
    Creates a stock location.
    - The first location of a business automatically becomes its main location.
    - Requesting `is_main` when the business already has one returns 400.
    """
    return await loc_crud.stock_location.create(db, obj_in=location_in)


@router.get("/locations", response_model=List[loc_schemas.StockLocationRead], summary="List stock locations")
async def read_locations(
    business_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await loc_crud.stock_location.get_multi(db, skip=skip, limit=limit, business_id=business_id)


@router.get("/locations/dropdown", response_model=List[loc_schemas.StockLocationDropdown], summary="Locations for select boxes")
async def read_locations_dropdown(
    business_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await loc_crud.stock_location.get_dropdown(db, business_id=business_id)


@router.get("/locations/main", response_model=List[loc_schemas.StockLocationRead], summary="Main location of every business")
async def read_main_locations(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await loc_crud.stock_location.get_main_locations(db)


@router.get(
    "/locations/main/business/{business_id}",
    response_model=loc_schemas.StockLocationRead,
    summary="Main location of a business",
)
async def read_main_location_for_business(
    business_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    location = await loc_crud.stock_location.get_main_for_business(db, business_id=business_id)
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Main location not found for this business")
    return location


@router.get("/locations/{location_id}", response_model=loc_schemas.StockLocationRead, summary="Get a stock location")
async def read_location(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await loc_crud.stock_location.get_or_404(db, location_id, detail="Location not found")


@router.put("/locations/{location_id}", response_model=loc_schemas.StockLocationRead, summary="Update a stock location")
async def update_location(
    location_id: int,
    location_in: loc_schemas.StockLocationUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """
    Updates a location. Setting `is_main=true` demotes the business's previous main location.
    """
    db_location = await loc_crud.stock_location.get_or_404(db, location_id, detail="Location not found")
    return await loc_crud.stock_location.update(db, db_obj=db_location, obj_in=location_in)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a stock location")
async def delete_location(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    await loc_crud.stock_location.remove(db, id=location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
