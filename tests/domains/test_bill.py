# tests/domains/test_bill.py

"""
Endpoints of the 'bill' domain.

- supplier bills (`/bill/supplier_bills`): receiving goods into stock
- customer bills (`/bill/customer_bills`): invoices, payments, frontend form
- orders (`/bill/orders`): representative orders, confirmation and delivery
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.bill.models import BillStatus, CustomerBill, OrderStatus
from app.domains.cust.models import Customer
from app.domains.inv.models import Item
from app.domains.loc.models import StockLocation
from app.domains.usr.models import User as UsrUser, UserRole
from app.domains.ven.models import Supplier

SUPPLIER_BILLS_URL = "/api/v1/bill/supplier_bills"
CUSTOMER_BILLS_URL = "/api/v1/bill/customer_bills"
ORDERS_URL = "/api/v1/bill/orders"


def this_month() -> str:
    return f"{date.today():%y%m}"


async def create_order(client: AsyncClient, customer_id: int, item_id: int, quantity: int = 2, **extra) -> dict:
    response = await client.post(
        CUSTOMER_BILLS_URL,
        json={"customer_id": customer_id, "items": [{"item_id": item_id, "quantity": quantity}], **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# supplier bills
# =============================================================================
@pytest.mark.asyncio
async def test_supplier_bill_increases_stock(
    office_client: AsyncClient,
    test_supplier: Supplier,
    test_item: Item,
    test_main_location: StockLocation,
    stock_quantity,
):
    item_id, main_id = test_item.id, test_main_location.id
    bill_data = {
        "bill_number": "SB-1001",
        "supplier_id": test_supplier.id,
        "extra_discount_percentage": "10",
        "items": [
            {"item_id": item_id, "unit_price": "80.00", "quantity": 10, "discount_percentage": "5", "free_item_quantity": 2}
        ],
    }
    response = await office_client.post(SUPPLIER_BILLS_URL, json=bill_data)
    assert response.status_code == 201, response.text
    body = response.json()

    # no location given: received into the main location of the user's business
    assert body["location_id"] == main_id
    assert body["items"][0]["amount"] == "760.00"
    assert body["subtotal"] == "760.00"
    assert body["discount_amount"] == "76.00"
    assert body["final_total"] == "684.00"
    assert await stock_quantity(item_id, main_id) == 12


@pytest.mark.asyncio
async def test_supplier_bill_by_item_code_into_branch(
    office_client: AsyncClient,
    test_supplier: Supplier,
    test_item: Item,
    test_branch_location: StockLocation,
    stock_factory,
    stock_quantity,
):
    item_id, branch_id = test_item.id, test_branch_location.id
    await stock_factory(item_id, branch_id, 3)

    response = await office_client.post(
        SUPPLIER_BILLS_URL,
        json={
            "bill_number": "SB-1002",
            "supplier_id": test_supplier.id,
            "location_id": branch_id,
            "items": [{"item_code": "COLA", "unit_price": "80.00", "quantity": 4}],
        },
    )
    assert response.status_code == 201
    assert await stock_quantity(item_id, branch_id) == 7


@pytest.mark.asyncio
async def test_supplier_bill_duplicate_number(
    office_client: AsyncClient, test_supplier: Supplier, test_item: Item, test_main_location: StockLocation, stock_quantity
):
    item_id, main_id = test_item.id, test_main_location.id
    bill_data = {
        "bill_number": "SB-2000",
        "supplier_id": test_supplier.id,
        "items": [{"item_id": item_id, "unit_price": "80.00", "quantity": 1}],
    }
    assert (await office_client.post(SUPPLIER_BILLS_URL, json=bill_data)).status_code == 201

    response = await office_client.post(SUPPLIER_BILLS_URL, json=bill_data)
    assert response.status_code == 409
    assert response.json()["detail"] == "Bill number already exists for this supplier"
    assert await stock_quantity(item_id, main_id) == 1


@pytest.mark.asyncio
async def test_supplier_bill_unknown_supplier(office_client: AsyncClient, test_item: Item, test_main_location: StockLocation):
    response = await office_client.post(
        SUPPLIER_BILLS_URL,
        json={"bill_number": "SB-3", "supplier_id": 9999, "items": [{"item_id": test_item.id, "unit_price": "1", "quantity": 1}]},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Supplier not found"


@pytest.mark.asyncio
async def test_supplier_bill_line_needs_item_reference(office_client: AsyncClient, test_supplier: Supplier):
    response = await office_client.post(
        SUPPLIER_BILLS_URL,
        json={"bill_number": "SB-4", "supplier_id": test_supplier.id, "items": [{"unit_price": "1", "quantity": 1}]},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_supplier_bill_without_any_location(
    authorized_client_factory, user_factory, test_supplier: Supplier, test_item: Item
):
    supplier_id, item_id = test_supplier.id, test_item.id
    user = await user_factory("nobiz", "nobizpass123", role=UserRole.OFFICE)

    async with authorized_client_factory(user, "nobizpass123") as nobiz_client:
        response = await nobiz_client.post(
            SUPPLIER_BILLS_URL,
            json={"bill_number": "SB-5", "supplier_id": supplier_id, "items": [{"item_id": item_id, "unit_price": "1", "quantity": 1}]},
        )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_supplier_bill_rep_forbidden(rep_client: AsyncClient, test_supplier: Supplier, test_item: Item):
    response = await rep_client.post(
        SUPPLIER_BILLS_URL,
        json={"bill_number": "SB-6", "supplier_id": test_supplier.id, "items": [{"item_id": test_item.id, "unit_price": "1", "quantity": 1}]},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_supplier_bills(
    office_client: AsyncClient, test_supplier: Supplier, test_item: Item, test_main_location: StockLocation
):
    supplier_id = test_supplier.id
    for number in ("SB-A", "SB-B"):
        await office_client.post(
            SUPPLIER_BILLS_URL,
            json={"bill_number": number, "supplier_id": supplier_id, "items": [{"item_id": test_item.id, "unit_price": "1", "quantity": 1}]},
        )

    response = await office_client.get(SUPPLIER_BILLS_URL, params={"supplier_id": supplier_id})
    assert [b["bill_number"] for b in response.json()] == ["SB-B", "SB-A"]


# =============================================================================
# invoices
# =============================================================================
@pytest.mark.asyncio
async def test_invoice_computes_totals_and_deducts_stock(
    office_client: AsyncClient,
    test_customer: Customer,
    item_factory,
    test_main_location: StockLocation,
    stock_factory,
    stock_quantity,
):
    cola = await item_factory("COLA", "Cola 500ml")
    soda = await item_factory("SODA", "Soda Water 1L")
    main_id = test_main_location.id
    await stock_factory(cola.id, main_id, 20)
    await stock_factory(soda.id, main_id, 10)

    invoice_data = {
        "customer_id": test_customer.id,
        "location_id": main_id,
        "discount_percentage": "5",
        "tax_amount": "10.00",
        "paid_amount": "100.00",
        "items": [
            {"item_id": cola.id, "quantity": 3, "discount_percentage": "10", "free_quantity": 1},
            {"item_code": "SODA", "quantity": 2, "unit_price": "33.335"},
        ],
    }
    response = await office_client.post(CUSTOMER_BILLS_URL, json=invoice_data)
    assert response.status_code == 201, response.text
    body = response.json()

    assert body["invoice_no"] == f"INV-{this_month()}0001"
    assert body["is_order"] is False
    assert body["order_status"] is None
    lines = {line["item_code"]: line for line in body["items"]}
    # selling price used when no unit price is sent
    assert lines["COLA"]["unit_price"] == "100.00"
    assert lines["COLA"]["discount_amount"] == "30.00"
    assert lines["COLA"]["total_amount"] == "270.00"
    assert lines["COLA"]["category_name"] == "Beverages"
    assert lines["SODA"]["unit_price"] == "33.34"
    assert lines["SODA"]["subtotal"] == "66.68"

    assert body["subtotal"] == "336.68"
    assert body["discount_amount"] == "16.83"
    assert body["total_amount"] == "329.85"
    assert body["balance_amount"] == "229.85"
    assert body["status"] == "partially_paid"
    assert body["total_items"] == 2
    assert body["total_quantity"] == 5

    # free quantity leaves the shelf too
    assert await stock_quantity(cola.id, main_id) == 16
    assert await stock_quantity(soda.id, main_id) == 8


@pytest.mark.asyncio
async def test_invoice_insufficient_stock_changes_nothing(
    office_client: AsyncClient,
    test_customer: Customer,
    test_item: Item,
    test_main_location: StockLocation,
    stock_factory,
    stock_quantity,
):
    item_id, main_id = test_item.id, test_main_location.id
    await stock_factory(item_id, main_id, 5)

    response = await office_client.post(
        CUSTOMER_BILLS_URL,
        json={
            "customer_id": test_customer.id,
            "location_id": main_id,
            "items": [{"item_id": item_id, "quantity": 5, "free_quantity": 1}],
        },
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock for item COLA. Required: 6, Available: 5"
    assert await stock_quantity(item_id, main_id) == 5

    response = await office_client.get(CUSTOMER_BILLS_URL)
    assert response.json() == []


@pytest.mark.asyncio
async def test_invoice_without_stock_row_reports_zero_available(
    office_client: AsyncClient, test_customer: Customer, test_item: Item, test_main_location: StockLocation
):
    response = await office_client.post(
        CUSTOMER_BILLS_URL,
        json={
            "customer_id": test_customer.id,
            "location_id": test_main_location.id,
            "items": [{"item_id": test_item.id, "quantity": 2}],
        },
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock for item COLA. Required: 2, Available: 0"


@pytest.mark.asyncio
async def test_invoice_without_location_keeps_stock(
    office_client: AsyncClient, test_customer: Customer, test_item: Item, test_main_location: StockLocation, stock_factory, stock_quantity
):
    item_id, main_id = test_item.id, test_main_location.id
    await stock_factory(item_id, main_id, 5)

    response = await office_client.post(
        CUSTOMER_BILLS_URL, json={"customer_id": test_customer.id, "items": [{"item_id": item_id, "quantity": 2}]}
    )
    assert response.status_code == 201
    assert response.json()["status"] == "draft"
    assert await stock_quantity(item_id, main_id) == 5


@pytest.mark.asyncio
async def test_invoice_numbers_increase(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    first = await create_order(office_client, test_customer.id, test_item.id)
    second = await create_order(office_client, test_customer.id, test_item.id)
    assert first["invoice_no"] == f"INV-{this_month()}0001"
    assert second["invoice_no"] == f"INV-{this_month()}0002"


@pytest.mark.asyncio
async def test_invoice_numbers_past_9999(
    office_client: AsyncClient, db_session: AsyncSession, test_customer: Customer, test_item: Item
):
    customer_id, item_id = test_customer.id, test_item.id
    # "9999" sorts after "10000" as a string
    for number in ("9999", "10000"):
        db_session.add(
            CustomerBill(invoice_no=f"INV-{this_month()}{number}", customer_id=customer_id, billing_date=date.today())
        )
    await db_session.commit()

    body = await create_order(office_client, customer_id, item_id)
    assert body["invoice_no"] == f"INV-{this_month()}10001"


@pytest.mark.asyncio
async def test_invoice_paid_more_than_total(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    response = await office_client.post(
        CUSTOMER_BILLS_URL,
        json={"customer_id": test_customer.id, "paid_amount": "500.00", "items": [{"item_id": test_item.id, "quantity": 1}]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Paid amount cannot exceed the total amount"


@pytest.mark.asyncio
async def test_invoice_fully_paid(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    body = await create_order(office_client, test_customer.id, test_item.id, paid_amount="200.00")
    assert body["status"] == "paid"
    assert body["balance_amount"] == "0.00"


@pytest.mark.asyncio
async def test_invoice_discount_amount_above_subtotal(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    response = await office_client.post(
        CUSTOMER_BILLS_URL,
        json={"customer_id": test_customer.id, "discount_amount": "150.00", "items": [{"item_id": test_item.id, "quantity": 1}]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Discount amount cannot exceed the subtotal. Subtotal: 100.00"


@pytest.mark.asyncio
async def test_invoice_unknown_customer_or_item(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    response = await office_client.post(CUSTOMER_BILLS_URL, json={"customer_id": 9999, "items": [{"item_id": test_item.id, "quantity": 1}]})
    assert response.status_code == 404
    assert response.json()["detail"] == "Customer not found"

    response = await office_client.post(CUSTOMER_BILLS_URL, json={"customer_id": test_customer.id, "items": [{"item_code": "NOPE", "quantity": 1}]})
    assert response.status_code == 404
    assert response.json()["detail"] == "Item NOPE not found"


@pytest.mark.asyncio
async def test_list_customer_bills_by_status(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    await create_order(office_client, test_customer.id, test_item.id)
    paid = await create_order(office_client, test_customer.id, test_item.id, paid_amount="200.00")

    response = await office_client.get(CUSTOMER_BILLS_URL, params={"status": "paid"})
    assert [b["id"] for b in response.json()] == [paid["id"]]

    response = await office_client.get(f"{CUSTOMER_BILLS_URL}/{paid['id']}")
    assert response.status_code == 200


# =============================================================================
# payments
# =============================================================================
@pytest.mark.asyncio
async def test_payments_move_bill_to_paid(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    bill = await create_order(office_client, test_customer.id, test_item.id, quantity=1)
    url = f"{CUSTOMER_BILLS_URL}/{bill['id']}/payments"

    response = await office_client.post(url, json={"amount": "150.00"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Payment amount exceeds the balance. Balance: 100.00"

    response = await office_client.post(url, json={"amount": "40.00", "payment_method": "check"})
    body = response.json()
    assert body["status"] == "partially_paid"
    assert body["balance_amount"] == "60.00"
    assert body["payment_method"] == "check"

    response = await office_client.post(url, json={"amount": "60.00"})
    body = response.json()
    assert body["status"] == "paid"
    assert body["paid_amount"] == "100.00"
    assert body["balance_amount"] == "0.00"


@pytest.mark.asyncio
async def test_payment_rejects_non_positive_amount(office_client: AsyncClient, test_customer: Customer, test_item: Item):
    bill = await create_order(office_client, test_customer.id, test_item.id)
    response = await office_client.post(f"{CUSTOMER_BILLS_URL}/{bill['id']}/payments", json={"amount": "0"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_payment_on_unknown_bill(office_client: AsyncClient):
    response = await office_client.post(f"{CUSTOMER_BILLS_URL}/9999/payments", json={"amount": "1.00"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_payment_on_cancelled_order(
    rep_client: AsyncClient, office_client: AsyncClient, test_customer: Customer, test_item: Item
):
    order = await create_order(rep_client, test_customer.id, test_item.id)
    response = await rep_client.post(f"{ORDERS_URL}/{order['id']}/cancel")
    assert response.status_code == 200

    response = await office_client.post(f"{CUSTOMER_BILLS_URL}/{order['id']}/payments", json={"amount": "10.00"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot add a payment to a cancelled bill"


# =============================================================================
# orders
# =============================================================================
@pytest.mark.asyncio
async def test_rep_creates_order_without_touching_stock(
    rep_client: AsyncClient, test_customer: Customer, test_item: Item, test_main_location: StockLocation, stock_factory, stock_quantity
):
    item_id, main_id = test_item.id, test_main_location.id
    await stock_factory(item_id, main_id, 10)

    order = await create_order(rep_client, test_customer.id, item_id, location_id=main_id, status="paid")
    assert order["invoice_no"] == f"ORD-{this_month()}0001"
    assert order["is_order"] is True
    assert order["order_status"] == "pending"
    assert order["status"] == "pending"
    assert await stock_quantity(item_id, main_id) == 10


@pytest.mark.asyncio
async def test_order_lifecycle(
    rep_client: AsyncClient,
    admin_client: AsyncClient,
    office_client: AsyncClient,
    test_admin_user: UsrUser,
    test_customer: Customer,
    test_item: Item,
    test_main_location: StockLocation,
    stock_factory,
    stock_quantity,
):
    admin_id, item_id, main_id = test_admin_user.id, test_item.id, test_main_location.id
    await stock_factory(item_id, main_id, 10)
    order = await create_order(rep_client, test_customer.id, item_id, quantity=3, location_id=main_id)
    order_url = f"{ORDERS_URL}/{order['id']}"

    response = await office_client.post(f"{order_url}/checking")
    assert response.status_code == 400
    assert response.json()["detail"] == "Order must be confirmed to move to checking"

    response = await admin_client.post(f"{order_url}/confirm")
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["order_status"] == "confirmed"
    assert body["confirmed_by"] == admin_id
    assert body["order_confirmed_at"] is not None
    assert await stock_quantity(item_id, main_id) == 7

    # a second confirmation must not deduct again
    response = await admin_client.post(f"{order_url}/confirm")
    assert response.status_code == 400
    assert response.json()["detail"] == "Order is not pending"
    assert await stock_quantity(item_id, main_id) == 7

    response = await office_client.post(f"{order_url}/deliver")
    assert response.status_code == 400

    response = await office_client.post(f"{order_url}/checking")
    assert response.json()["order_status"] == "checking"
    response = await office_client.post(f"{order_url}/deliver")
    assert response.json()["order_status"] == "delivered"

    response = await rep_client.post(f"{order_url}/cancel")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_confirm_order_requires_admin(
    rep_client: AsyncClient, office_client: AsyncClient, test_customer: Customer, test_item: Item, test_main_location: StockLocation
):
    order = await create_order(rep_client, test_customer.id, test_item.id, location_id=test_main_location.id)

    for client in (rep_client, office_client):
        response = await client.post(f"{ORDERS_URL}/{order['id']}/confirm")
        assert response.status_code == 403


@pytest.mark.asyncio
async def test_confirm_order_insufficient_stock(
    rep_client: AsyncClient,
    admin_client: AsyncClient,
    test_customer: Customer,
    test_item: Item,
    test_main_location: StockLocation,
    stock_factory,
    stock_quantity,
):
    item_id, main_id = test_item.id, test_main_location.id
    await stock_factory(item_id, main_id, 2)
    order = await create_order(rep_client, test_customer.id, item_id, quantity=3, location_id=main_id)

    response = await admin_client.post(f"{ORDERS_URL}/{order['id']}/confirm")
    assert response.status_code == 400
    assert response.json()["detail"] == "Insufficient stock for item COLA. Required: 3, Available: 2"
    assert await stock_quantity(item_id, main_id) == 2

    response = await admin_client.get(f"{ORDERS_URL}/{order['id']}")
    assert response.json()["order_status"] == "pending"


@pytest.mark.asyncio
async def test_confirm_order_without_location(
    rep_client: AsyncClient, admin_client: AsyncClient, test_customer: Customer, test_item: Item
):
    order = await create_order(rep_client, test_customer.id, test_item.id)
    response = await admin_client.post(f"{ORDERS_URL}/{order['id']}/confirm")
    assert response.status_code == 400
    assert response.json()["detail"] == "Order has no stock location"


@pytest.mark.asyncio
async def test_confirm_invoice_is_not_an_order(admin_client: AsyncClient, test_customer: Customer, test_item: Item):
    invoice = await create_order(admin_client, test_customer.id, test_item.id)
    response = await admin_client.post(f"{ORDERS_URL}/{invoice['id']}/confirm")
    assert response.status_code == 400
    assert response.json()["detail"] == "Not an order"


@pytest.mark.asyncio
async def test_cancel_order(
    rep_client: AsyncClient, other_rep_client: AsyncClient, test_customer: Customer, test_item: Item
):
    order = await create_order(rep_client, test_customer.id, test_item.id)
    cancel_url = f"{ORDERS_URL}/{order['id']}/cancel"

    response = await other_rep_client.post(cancel_url)
    assert response.status_code == 403

    response = await rep_client.post(cancel_url)
    assert response.status_code == 200
    body = response.json()
    assert body["order_status"] == "cancelled"
    assert body["status"] == "cancelled"


@pytest.mark.asyncio
async def test_my_orders_and_staff_listing(
    rep_client: AsyncClient,
    other_rep_client: AsyncClient,
    office_client: AsyncClient,
    test_customer: Customer,
    test_item: Item,
):
    mine = await create_order(rep_client, test_customer.id, test_item.id)
    theirs = await create_order(other_rep_client, test_customer.id, test_item.id)
    await create_order(office_client, test_customer.id, test_item.id)

    response = await rep_client.get(f"{ORDERS_URL}/my")
    assert [o["id"] for o in response.json()] == [mine["id"]]

    response = await rep_client.get(ORDERS_URL)
    assert response.status_code == 403

    response = await office_client.get(ORDERS_URL)
    assert [o["id"] for o in response.json()] == [theirs["id"], mine["id"]]

    response = await office_client.get(ORDERS_URL, params={"order_status": "confirmed"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_order_detail_with_customer_summary(
    rep_client: AsyncClient,
    other_rep_client: AsyncClient,
    office_client: AsyncClient,
    db_session: AsyncSession,
    test_customer: Customer,
    test_item: Item,
):
    customer_id = test_customer.id
    old_bill = CustomerBill(
        invoice_no="ORD-OLD0001",
        customer_id=customer_id,
        billing_date=date.today() - timedelta(days=50),
        is_order=True,
        order_status=OrderStatus.DELIVERED,
        status=BillStatus.PENDING,
        total_amount=Decimal("250.00"),
        balance_amount=Decimal("250.00"),
    )
    db_session.add(old_bill)
    await db_session.commit()

    order = await create_order(rep_client, customer_id, test_item.id)
    order_url = f"{ORDERS_URL}/{order['id']}"

    response = await rep_client.get(order_url)
    assert response.status_code == 200
    body = response.json()
    assert body["customer_name"] == "Nimal Perera"
    assert body["customer_summary"]["due_amount"] == "250.00"
    assert body["customer_summary"]["pending_bills_count"] == 1
    assert body["customer_summary"]["over_45_days_amount"] == "250.00"

    response = await other_rep_client.get(order_url)
    assert response.status_code == 403

    response = await office_client.get(order_url)
    assert response.status_code == 200


# =============================================================================
# frontend invoice form
# =============================================================================
@pytest.mark.asyncio
async def test_frontend_invoice(
    office_client: AsyncClient, test_customer: Customer, test_item: Item, test_main_location: StockLocation, stock_factory, stock_quantity
):
    item_id, main_id = test_item.id, test_main_location.id
    await stock_factory(item_id, main_id, 10)

    payload = {
        "customer": {"value": str(test_customer.id), "label": "Nimal Perera"},
        "paymentMethod": "Cheque",
        "billingDate": "2026-01-15T00:00:00Z",
        "discount": "",
        "tax": "0",
        "paidAmount": "191",
        "locationId": str(main_id),
        "referenceNo": "PO-77",
        "items": [{"itemId": str(item_id), "quantity": "2", "unitPrice": "95.50", "freeItemQuantity": "1"}],
    }
    response = await office_client.post(f"{CUSTOMER_BILLS_URL}/frontend", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["payment_method"] == "check"
    assert body["billing_date"] == "2026-01-15"
    assert body["reference_no"] == "PO-77"
    assert body["total_amount"] == "191.00"
    assert body["status"] == "paid"
    assert body["items"][0]["free_quantity"] == 1
    assert await stock_quantity(item_id, main_id) == 7


@pytest.mark.asyncio
async def test_frontend_invoice_rejected(office_client: AsyncClient):
    response = await office_client.post(f"{CUSTOMER_BILLS_URL}/frontend", json={"items": []})
    assert response.status_code == 400
    assert response.json()["detail"] == "Customer is required; At least one item is required"


@pytest.mark.asyncio
async def test_validate_frontend_invoice(rep_client: AsyncClient, test_customer: Customer):
    payload = {
        "selectedCustomer": test_customer.id,
        "discount": "120",
        "items": [{"itemCode": "COLA", "quantity": "0"}, {"quantity": 1, "price": "-5"}],
    }
    response = await rep_client.post(f"{CUSTOMER_BILLS_URL}/validate", json=payload)
    assert response.status_code == 200
    assert response.json() == {
        "valid": False,
        "errors": [
            "Item 1: quantity must be greater than 0",
            "Item 2: item id or code is required",
            "Item 2: unit price cannot be negative",
            "Discount must be between 0 and 100",
        ],
    }

    response = await rep_client.post(
        f"{CUSTOMER_BILLS_URL}/validate",
        json={"customer": test_customer.id, "items": [{"itemCode": "COLA", "quantity": 1}]},
    )
    assert response.json() == {"valid": True, "errors": []}


@pytest.mark.asyncio
async def test_validate_frontend_invoice_non_finite_numbers(rep_client: AsyncClient, test_customer: Customer):
    response = await rep_client.post(
        f"{CUSTOMER_BILLS_URL}/validate",
        json={"customer": test_customer.id, "discount": "nan", "items": [{"itemCode": "COLA", "quantity": "NaN"}]},
    )
    assert response.status_code == 200
    assert response.json() == {"valid": False, "errors": ["Item 1: quantity must be greater than 0"]}
