# app/domains/loc/__init__.py

"""
'loc' domain package.

Manages stock locations and the main location of each business.

Submodules:
- `models.py`: SQLModel table definitions.
- `schemas.py`: request and response models.
- `crud.py`: async CRUD classes and workflows.
- `routers.py`: API endpoints mounted under /api/v1/loc.
"""

__title__ = "StockBill Location Domain"
__description__ = "Manages stock locations and the main location of each business."
__version__ = "0.1.0"
__all__ = []
