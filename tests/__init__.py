# tests/__init__.py

"""
Test suite of the StockBill API.

- `conftest.py`: shared fixtures (per-test SQLite database, reference data,
  users per role and logged-in clients).
- `test_main.py`: application-level endpoints and cross-cutting behaviour.
- `domains/`: one test module per business domain.
"""

__title__ = "StockBill API Tests"
__version__ = "0.1.0"
__all__ = []
