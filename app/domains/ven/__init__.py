# app/domains/ven/__init__.py

"""
'ven' domain package.

Manages suppliers.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/ven.
"""

__title__ = "StockBill Supplier Domain"
__description__ = "Manages suppliers."
__version__ = "0.1.0"
__all__ = []
