"""
Data access: one repository per table, holding its SQL.
"""

from .product_repo import ProductRepository

__all__ = ["ProductRepository"]
