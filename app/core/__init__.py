# app/core/__init__.py

"""
Core building blocks shared by every domain.

- `config.py`: application settings (pydantic-settings).
- `database.py`: async engine, session factory and session dependencies.
- `database_base.py`: column helpers shared by the table models.
- `crud_base.py`: generic async CRUD class.
- `security.py`: password hashing, JWT and role-based dependencies.
- `dependencies.py`: dependency re-exports used by the routers.
- `exceptions.py`: global exception handlers.
- `middleware.py`: request logging and security headers.
- `tasks.py`: ARQ worker tasks and settings.
"""

__title__ = "StockBill Core"
__description__ = "Core components for the StockBill FastAPI application."
__version__ = "0.1.0"
__all__ = []
