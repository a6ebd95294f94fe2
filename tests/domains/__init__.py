# tests/domains/__init__.py

"""
Tests grouped by business domain (usr, corp, loc, ven, inv, cust, bill).
"""

__title__ = "StockBill Domain Tests"
__all__ = []
