# app/domains/usr/routers.py

"""
API endpoints of the 'usr' domain: authentication, user management and
location access grants.
"""

from typing import List
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status, Query
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core import dependencies as deps

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas


router = APIRouter(
    tags=["User Management"],
    responses={404: {"description": "Not found"}},
)


def _ensure_self_or_admin(current_user: usr_models.User, user_id: int) -> None:
    if current_user.id != user_id and current_user.role != usr_models.UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions.")


# =============================================================================
# 1. authentication
# =============================================================================
@router.post("/auth/token", response_model=usr_schemas.Token, summary="Obtain an access token")
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    OAuth2 password login. The `username` form field accepts a username or an e-mail.
    """
    user = await usr_crud.user.authenticate(db, login=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = deps.create_access_token(data={"sub": str(user.id)}, expires_delta=access_token_expires)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/auth/me", response_model=usr_schemas.UserRead, summary="Current user profile")
async def read_users_me(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return current_user


# =============================================================================
# 2. users
# =============================================================================
@router.post("/users", response_model=usr_schemas.UserRead, status_code=status.HTTP_201_CREATED, summary="Register a user")
async def create_user(
    user_in: usr_schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return await usr_crud.user.create(db, obj_in=user_in)


@router.get("/users", response_model=List[usr_schemas.UserRead], summary="List users")
async def read_users(
    db: AsyncSession = Depends(deps.get_db_session),
    role: usr_models.UserRole | None = None,
    business_id: int | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return await usr_crud.user.get_multi(db, skip=skip, limit=limit, role=role, business_id=business_id)


@router.get("/users/{user_id}", response_model=usr_schemas.UserRead, summary="Get a user")
async def read_user(
    user_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    _ensure_self_or_admin(current_user, user_id)
    return await usr_crud.user.get_or_404(db, user_id, detail="User not found")


@router.put("/users/{user_id}", response_model=usr_schemas.UserRead, summary="Update a user")
async def update_user(
    user_id: int,
    user_in: usr_schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    db_user = await usr_crud.user.get_or_404(db, user_id, detail="User not found")
    if db_user.id == current_admin_user.id and user_in.is_active is False:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot deactivate your own account.")
    return await usr_crud.user.update(db, db_obj=db_user, obj_in=user_in)


# =============================================================================
# 3. location access
# =============================================================================
@router.post(
    "/users/{user_id}/locations",
    response_model=usr_schemas.LocationAccessRead,
    status_code=status.HTTP_201_CREATED,
    summary="Grant location access",
)
async def grant_location_access(
    user_id: int,
    access_in: usr_schemas.LocationAccessCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    await usr_crud.user.get_or_404(db, user_id, detail="User not found")
    return await usr_crud.location_access.grant(db, user_id=user_id, obj_in=access_in)


@router.get("/users/{user_id}/locations", response_model=List[usr_schemas.LocationAccessRead], summary="Active location grants")
async def read_location_access(
    user_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    _ensure_self_or_admin(current_user, user_id)
    await usr_crud.user.get_or_404(db, user_id, detail="User not found")
    return await usr_crud.location_access.get_active(db, user_id=user_id)


@router.delete(
    "/users/{user_id}/locations/{location_id}",
    response_model=usr_schemas.LocationAccessRead,
    summary="Revoke location access",
)
async def revoke_location_access(
    user_id: int,
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return await usr_crud.location_access.revoke(db, user_id=user_id, location_id=location_id)
