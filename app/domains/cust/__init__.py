# app/domains/cust/__init__.py

"""
'cust' domain package.

Manages sales areas and customers.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/cust.
"""

__title__ = "StockBill Customer Domain"
__description__ = "Manages sales areas and customers."
__version__ = "0.1.0"
__all__ = []
