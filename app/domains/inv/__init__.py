# app/domains/inv/__init__.py

"""
'inv' domain package.

Manages categories, items, stock levels and stock transfers.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/inv.
"""

__title__ = "StockBill Inventory Domain"
__description__ = "Manages categories, items, stock levels and stock transfers."
__version__ = "0.1.0"
__all__ = []
