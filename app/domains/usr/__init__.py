# app/domains/usr/__init__.py

"""
'usr' domain package.

Manages user accounts, authentication and location access grants.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/usr.
"""

__title__ = "StockBill User Domain"
__description__ = "Manages user accounts, authentication and location access grants."
__version__ = "0.1.0"
__all__ = []
