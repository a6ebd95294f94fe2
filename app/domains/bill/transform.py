# app/domains/bill/transform.py

"""
Conversion of the invoice form payload sent by the web frontend (camelCase,
loosely typed, numbers often sent as strings) into CustomerBillCreate.

Pure functions, no database access.
"""

from typing import Any, Dict, List, Mapping, Optional
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from . import models as bill_models
from . import schemas as bill_schemas

PAYMENT_METHOD_ALIASES: Dict[str, bill_models.PaymentMethod] = {
    "cash": bill_models.PaymentMethod.CASH,
    "check": bill_models.PaymentMethod.CHECK,
    "cheque": bill_models.PaymentMethod.CHECK,
    "bank": bill_models.PaymentMethod.BANK_TRANSFER,
    "bank_transfer": bill_models.PaymentMethod.BANK_TRANSFER,
    "bank-transfer": bill_models.PaymentMethod.BANK_TRANSFER,
    "card": bill_models.PaymentMethod.CREDIT_CARD,
    "credit_card": bill_models.PaymentMethod.CREDIT_CARD,
    "credit-card": bill_models.PaymentMethod.CREDIT_CARD,
}

# fields the customer id may arrive in, highest precedence first
CUSTOMER_KEYS = ("customer", "selectedCustomer", "supplier", "selectedSupplier")


# =============================================================================
# helpers
# =============================================================================
def _unwrap(value: Any) -> Any:
    """Select boxes send {"value": ..., "label": ...}; plain values pass through."""
    if isinstance(value, Mapping):
        return value.get("value")
    return value


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) not in (None, ""):
            return data[key]
    return None


def _to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    if value in (None, ""):
        return default
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, OverflowError):
        return default
    # NaN and Infinity parse but cannot be compared or stored
    return number if number.is_finite() else default


def _to_int(value: Any, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, OverflowError):
        return default


def _positive_int(value: Any) -> Optional[int]:
    number = _to_int(value, default=0)
    return number if number > 0 else None


def _to_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return date.fromisoformat(text[:10])


# =============================================================================
# public api
# =============================================================================
def extract_customer_id(data: Mapping[str, Any]) -> Optional[int]:
    """Returns the first positive integer found in the customer fields, or None."""
    for key in CUSTOMER_KEYS:
        customer_id = _positive_int(_unwrap(data.get(key)))
        if customer_id is not None:
            return customer_id
    return None


def map_payment_method(value: Any) -> bill_models.PaymentMethod:
    """Maps a free-form payment method label to PaymentMethod; unknown values mean cash."""
    raw = _unwrap(value)
    if not isinstance(raw, str):
        return bill_models.PaymentMethod.CASH
    return PAYMENT_METHOD_ALIASES.get(raw.strip().lower(), bill_models.PaymentMethod.CASH)


def validate_frontend_invoice(data: Mapping[str, Any]) -> List[str]:
    """
    Checks a frontend invoice payload and returns a list of readable errors.
    An empty list means the payload can be transformed.
    """
    errors: List[str] = []

    if extract_customer_id(data) is None:
        errors.append("Customer is required")

    items = data.get("items") or []
    if not items:
        errors.append("At least one item is required")

    for index, line in enumerate(items, start=1):
        if not isinstance(line, Mapping):
            errors.append(f"Item {index}: item id or code is required")
            continue
        if _to_decimal(line.get("quantity")) <= 0:
            errors.append(f"Item {index}: quantity must be greater than 0")
        if _positive_int(_first(line, "itemId", "id")) is None and not line.get("itemCode"):
            errors.append(f"Item {index}: item id or code is required")
        if _to_decimal(_first(line, "unitPrice", "price")) < 0:
            errors.append(f"Item {index}: unit price cannot be negative")

    discount = _to_decimal(data.get("discount"))
    if discount < 0 or discount > 100:
        errors.append("Discount must be between 0 and 100")

    return errors


def transform_item(line: Mapping[str, Any]) -> bill_schemas.CustomerBillItemCreate:
    unit_price = _first(line, "unitPrice", "price")
    return bill_schemas.CustomerBillItemCreate(
        item_id=_positive_int(_first(line, "itemId", "id")),
        item_code=line.get("itemCode") or None,
        quantity=_to_int(line.get("quantity")),
        unit_price=_to_decimal(unit_price) if unit_price is not None else None,
        discount_percentage=_to_decimal(line.get("discount")),
        free_quantity=_to_int(_first(line, "freeItemQuantity", "freeQuantity")),
        notes=line.get("notes"),
    )


def transform_frontend_invoice(data: Mapping[str, Any]) -> bill_schemas.CustomerBillCreate:
    """
    Converts a frontend invoice payload to CustomerBillCreate.

    Raises ValueError with every validation error joined when the payload is
    invalid; pydantic's ValidationError (a ValueError) for values the schema rejects.
    """
    errors = validate_frontend_invoice(data)
    if errors:
        raise ValueError("; ".join(errors))

    payload: Dict[str, Any] = {
        "customer_id": extract_customer_id(data),
        "billing_date": _to_date(_first(data, "billingDate", "invoiceDate")),
        "payment_method": map_payment_method(data.get("paymentMethod")),
        "discount_percentage": _to_decimal(data.get("discount")),
        "tax_amount": _to_decimal(data.get("tax")),
        "paid_amount": _to_decimal(data.get("paidAmount")),
        "location_id": _positive_int(data.get("locationId")),
        "notes": data.get("notes"),
        "reference_no": data.get("referenceNo"),
        "items": [transform_item(line) for line in data["items"]],
    }
    return bill_schemas.CustomerBillCreate(**payload)
