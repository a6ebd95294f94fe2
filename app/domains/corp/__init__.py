# app/domains/corp/__init__.py

"""
'corp' domain package.

Manages the businesses that own locations and users.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/corp.
"""

__title__ = "StockBill Business Domain"
__description__ = "Manages the businesses that own locations and users."
__version__ = "0.1.0"
__all__ = []
