"""
Domain models for the records the server stores and returns.
"""

from .product import Product, ProductDecodeError, products_to_json

__all__ = ["Product", "ProductDecodeError", "products_to_json"]
