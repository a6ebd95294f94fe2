# app/domains/bill/__init__.py

"""
'bill' domain package.

Manages supplier bills, customer bills and the order confirmation workflow.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/bill.
- `transform.py`: conversion and validation of the frontend invoice payload.
"""

__title__ = "StockBill Billing Domain"
__description__ = "Manages supplier bills, customer bills and the order confirmation workflow."
__version__ = "0.1.0"
__all__ = []
