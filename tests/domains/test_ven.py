# tests/domains/test_ven.py

"""
Supplier endpoints of the 'ven' domain.

- `POST /ven/suppliers` (admin/office), `GET /ven/suppliers`, `GET /ven/suppliers/dropdown`
- `GET|PUT|DELETE /ven/suppliers/{id}`
"""

import pytest
from httpx import AsyncClient

from app.domains.inv.models import Category, Item
from app.domains.ven.models import Supplier

SUPPLIERS_URL = "/api/v1/ven/suppliers"


@pytest.mark.asyncio
async def test_create_supplier_office(office_client: AsyncClient, test_category: Category):
    supplier_data = {
        "code": "SUP99",
        "name": "Island Foods",
        "phone": "0113000000",
        "email": "sales@islandfoods.lk",
        "credit_days": 30,
        "category_id": test_category.id,
    }
    response = await office_client.post(SUPPLIERS_URL, json=supplier_data)
    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "SUP99"
    assert body["credit_days"] == 30


@pytest.mark.asyncio
async def test_create_supplier_rep_forbidden(rep_client: AsyncClient):
    response = await rep_client.post(SUPPLIERS_URL, json={"code": "SUP98", "name": "Nope"})
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("field, value", [("code", "SUP01"), ("name", "Ceylon Beverages"), ("phone", "0112000000")])
async def test_create_supplier_duplicates(admin_client: AsyncClient, test_supplier: Supplier, field: str, value: str):
    supplier_data = {"code": "NEW01", "name": "Brand New", "phone": "0119999999"}
    supplier_data[field] = value
    response = await admin_client.post(SUPPLIERS_URL, json=supplier_data)
    assert response.status_code == 400
    assert response.json()["detail"] == f"Supplier with this {field} already exists"


@pytest.mark.asyncio
async def test_create_supplier_invalid_code_length(admin_client: AsyncClient):
    response = await admin_client.post(SUPPLIERS_URL, json={"code": "S", "name": "Short Code"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_supplier_negative_credit_days(admin_client: AsyncClient):
    response = await admin_client.post(SUPPLIERS_URL, json={"code": "SUP77", "name": "Credit", "credit_days": -1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_supplier_unknown_category(admin_client: AsyncClient):
    response = await admin_client.post(SUPPLIERS_URL, json={"code": "SUP76", "name": "Lost", "category_id": 9999})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_search_suppliers(rep_client: AsyncClient, test_supplier: Supplier):
    response = await rep_client.get(SUPPLIERS_URL, params={"search": "ceylon"})
    assert response.status_code == 200
    assert [s["code"] for s in response.json()] == ["SUP01"]

    response = await rep_client.get(SUPPLIERS_URL, params={"search": "nothing-like-this"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_supplier_dropdown(rep_client: AsyncClient, test_supplier: Supplier):
    response = await rep_client.get(f"{SUPPLIERS_URL}/dropdown")
    assert response.status_code == 200
    assert response.json() == [{"id": test_supplier.id, "code": "SUP01", "name": "Ceylon Beverages"}]


@pytest.mark.asyncio
async def test_update_supplier(admin_client: AsyncClient, test_supplier: Supplier):
    response = await admin_client.put(f"{SUPPLIERS_URL}/{test_supplier.id}", json={"credit_days": 60})
    assert response.status_code == 200
    assert response.json()["credit_days"] == 60


@pytest.mark.asyncio
async def test_delete_supplier_with_items_rejected(admin_client: AsyncClient, test_supplier: Supplier, test_item: Item):
    response = await admin_client.delete(f"{SUPPLIERS_URL}/{test_supplier.id}")
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete this supplier as it has associated items."


@pytest.mark.asyncio
async def test_delete_supplier(admin_client: AsyncClient, test_supplier: Supplier):
    supplier_id = test_supplier.id
    response = await admin_client.delete(f"{SUPPLIERS_URL}/{supplier_id}")
    assert response.status_code == 204

    response = await admin_client.get(f"{SUPPLIERS_URL}/{supplier_id}")
    assert response.status_code == 404
