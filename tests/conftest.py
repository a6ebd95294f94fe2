# tests/conftest.py

import os
from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

# the settings object is built at import time, so the environment comes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-suite")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.main import app as main_app
from app.core import dependencies as deps
from app.core.database import get_session
from app.core.security import get_password_hash

# every table model must be imported before create_all
from app.domains.models import *    # noqa: F401, F403

from app.domains.usr import models as usr_models
from app.domains.corp import models as corp_models
from app.domains.loc import models as loc_models
from app.domains.ven import models as ven_models
from app.domains.inv import models as inv_models
from app.domains.cust import models as cust_models

TOKEN_URL = "/api/v1/usr/auth/token"


# --- database fixtures ---
@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """A fresh SQLite database file per test, with every table created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'stockbill_test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    The session shared by the fixtures and by every request of the test
    (the app's session dependencies are overridden with it).
    """
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def stock_quantity(db_session: AsyncSession) -> Callable[[int, int], Awaitable[int]]:
    """Reads the current stock quantity straight from the database."""
    async def _quantity(item_id: int, location_id: int) -> int:
        result = await db_session.exec(
            select(inv_models.Stock.quantity).where(
                inv_models.Stock.item_id == item_id, inv_models.Stock.location_id == location_id
            )
        )
        return result.first() or 0
    return _quantity


# --- reference data ---
@pytest_asyncio.fixture(scope="function")
async def test_business(db_session: AsyncSession) -> corp_models.Business:
    business = corp_models.Business(name="Lanka Traders", business_type=corp_models.BusinessType.WHOLESALE)
    db_session.add(business)
    await db_session.commit()
    await db_session.refresh(business)
    return business


@pytest_asyncio.fixture(scope="function")
async def test_main_location(db_session: AsyncSession, test_business: corp_models.Business) -> loc_models.StockLocation:
    location = loc_models.StockLocation(code="MAIN", name="Main Store", is_main=True, business_id=test_business.id)
    db_session.add(location)
    await db_session.commit()
    await db_session.refresh(location)
    return location


@pytest_asyncio.fixture(scope="function")
async def test_branch_location(db_session: AsyncSession, test_business: corp_models.Business) -> loc_models.StockLocation:
    location = loc_models.StockLocation(code="BR01", name="Branch One", is_main=False, business_id=test_business.id)
    db_session.add(location)
    await db_session.commit()
    await db_session.refresh(location)
    return location


@pytest_asyncio.fixture(scope="function")
async def test_category(db_session: AsyncSession) -> inv_models.Category:
    category = inv_models.Category(code="BEV", name="Beverages")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest_asyncio.fixture(scope="function")
async def test_supplier(db_session: AsyncSession, test_category: inv_models.Category) -> ven_models.Supplier:
    supplier = ven_models.Supplier(code="SUP01", name="Ceylon Beverages", phone="0112000000", category_id=test_category.id)
    db_session.add(supplier)
    await db_session.commit()
    await db_session.refresh(supplier)
    return supplier


@pytest.fixture
def item_factory(
    db_session: AsyncSession, test_supplier: ven_models.Supplier, test_category: inv_models.Category
) -> Callable[..., Awaitable[inv_models.Item]]:
    async def _create_item(code: str, name: str, **kwargs) -> inv_models.Item:
        item_data = {
            "code": code,
            "name": name,
            "cost_price": Decimal("80.00"),
            "selling_price": Decimal("100.00"),
            "supplier_id": test_supplier.id,
            "category_id": test_category.id,
            **kwargs,
        }
        item = inv_models.Item(**item_data)
        db_session.add(item)
        await db_session.commit()
        await db_session.refresh(item)
        return item
    return _create_item


@pytest_asyncio.fixture(scope="function")
async def test_item(item_factory) -> inv_models.Item:
    return await item_factory("COLA", "Cola 500ml")


@pytest.fixture
def stock_factory(db_session: AsyncSession) -> Callable[..., Awaitable[inv_models.Stock]]:
    async def _create_stock(item_id: int, location_id: int, quantity: int) -> inv_models.Stock:
        stock = inv_models.Stock(item_id=item_id, location_id=location_id, quantity=quantity)
        db_session.add(stock)
        await db_session.commit()
        await db_session.refresh(stock)
        return stock
    return _create_stock


@pytest_asyncio.fixture(scope="function")
async def test_area(db_session: AsyncSession) -> cust_models.Area:
    area = cust_models.Area(name="Colombo North")
    db_session.add(area)
    await db_session.commit()
    await db_session.refresh(area)
    return area


@pytest_asyncio.fixture(scope="function")
async def test_customer(db_session: AsyncSession, test_area: cust_models.Area) -> cust_models.Customer:
    customer = cust_models.Customer(
        code="CUST0001", name="Nimal Perera", shop_name="Nimal Stores",
        area_id=test_area.id, contact_number="0771234567",
    )
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


# --- users per role ---
@pytest.fixture
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """Returns a factory creating a user with the given role."""
    async def _create_user(
        username: str,
        password: str,
        role: usr_models.UserRole,
        business_id: int = None,
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user_data = {
            "username": username,
            "password_hash": get_password_hash(password),
            "email": f"{username}@example.com",
            "role": role,
            "business_id": business_id,
            "is_active": is_active,
            **kwargs,
        }
        user = usr_models.User(**user_data)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable, test_business: corp_models.Business) -> usr_models.User:
    return await user_factory("sysadm", "sysadmpass123", role=usr_models.UserRole.ADMIN,
                              business_id=test_business.id, full_name="Admin Test User")


@pytest_asyncio.fixture(scope="function")
async def test_office_user(user_factory: Callable, test_business: corp_models.Business) -> usr_models.User:
    return await user_factory("office", "officepass123", role=usr_models.UserRole.OFFICE,
                              business_id=test_business.id, full_name="Office Test User")


@pytest_asyncio.fixture(scope="function")
async def test_rep_user(user_factory: Callable, test_business: corp_models.Business) -> usr_models.User:
    return await user_factory("rep", "reppass123", role=usr_models.UserRole.REPRESENTATIVE,
                              business_id=test_business.id, full_name="Sales Rep")


@pytest_asyncio.fixture(scope="function")
async def test_other_rep_user(user_factory: Callable, test_business: corp_models.Business) -> usr_models.User:
    return await user_factory("rep2", "rep2pass123", role=usr_models.UserRole.REPRESENTATIVE,
                              business_id=test_business.id, full_name="Other Sales Rep")


# --- clients ---
@pytest.fixture
def override_session(db_session: AsyncSession) -> Callable[[], None]:
    """Points both session dependencies of the app at the test session."""
    def _apply() -> None:
        def override_get_session():
            yield db_session

        main_app.dependency_overrides.update({
            get_session: override_get_session,
            deps.get_db_session: override_get_session,
        })
    return _apply


@pytest.fixture
def authorized_client_factory(override_session: Callable[[], None]):
    """
    Returns an async context manager yielding a client logged in as the given
    user through the token endpoint.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        original_overrides = main_app.dependency_overrides.copy()
        try:
            override_session()
            transport = ASGITransport(app=main_app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                res = await client.post(TOKEN_URL, data={"username": user.username, "password": password})
                if res.status_code != 200:
                    pytest.fail(f"Login failed for {user.username}: {res.text}")
                client.headers["Authorization"] = f"Bearer {res.json()['access_token']}"
                yield client
        finally:
            main_app.dependency_overrides.clear()
            main_app.dependency_overrides.update(original_overrides)

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def client(override_session: Callable[[], None]) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials."""
    original_overrides = main_app.dependency_overrides.copy()
    override_session()
    try:
        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


@pytest_asyncio.fixture(scope="function")
async def admin_client(authorized_client_factory, test_admin_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_admin_user, "sysadmpass123") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def office_client(authorized_client_factory, test_office_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_office_user, "officepass123") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def rep_client(authorized_client_factory, test_rep_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_rep_user, "reppass123") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def other_rep_client(authorized_client_factory, test_other_rep_user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_other_rep_user, "rep2pass123") as ac:
        yield ac
