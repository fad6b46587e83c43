"""
Request handlers for the product API.
"""

from .products import ProductHandlers, create_router, parse_int

__all__ = ["ProductHandlers", "create_router", "parse_int"]
