# app/__init__.py

"""
Main package of the StockBill inventory and billing API.

The package is split into the `core` subpackage (configuration, database,
security, error handling, middleware) and the `domains` subpackage where each
business domain (users, businesses, locations, suppliers, inventory,
customers, billing) keeps its own models, schemas, crud and routers.
"""

APP_NAME = "StockBill API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # common prefix for every domain router (applied in main.py)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Small-business inventory and billing API backend."
__license__ = "MIT"
__all__ = []
