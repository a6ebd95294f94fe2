# app/domains/models/__init__.py

"""
Central import of every table model, so that SQLModel.metadata knows all
tables (scripts and tests import from here).
"""

# usr (User, UserLocationAccess)
from app.domains.usr.models import User, UserRole, UserLocationAccess

# corp (Business)
from app.domains.corp.models import Business, BusinessType

# loc (StockLocation)
from app.domains.loc.models import StockLocation

# ven (Supplier)
from app.domains.ven.models import Supplier

# inv (Category, Item, Stock, StockTransfer, StockTransferItem)
from app.domains.inv.models import (
    Category, CategoryType, Item, UnitType, Stock,
    StockTransfer, StockTransferItem, TransferStatus,
)

# cust (Area, Customer)
from app.domains.cust.models import Area, Customer, CustomerType

# bill (SupplierBill, CustomerBill and their lines)
from app.domains.bill.models import (
    SupplierBill, SupplierBillItem, CustomerBill, CustomerBillItem,
    PaymentMethod, BillStatus, OrderStatus,
)

__all__ = [
    "User", "UserRole", "UserLocationAccess",
    "Business", "BusinessType",
    "StockLocation",
    "Supplier",
    "Category", "CategoryType", "Item", "UnitType", "Stock",
    "StockTransfer", "StockTransferItem", "TransferStatus",
    "Area", "Customer", "CustomerType",
    "SupplierBill", "SupplierBillItem", "CustomerBill", "CustomerBillItem",
    "PaymentMethod", "BillStatus", "OrderStatus",
]
