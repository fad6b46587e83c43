"""
=============================================================================
PRODUCT HANDLERS
=============================================================================

One handler per route. Each pulls the id/threshold and/or JSON body out of
the request text, makes one repository call and turns the outcome into a
response.

=============================================================================
OUTCOMES
=============================================================================

    ┌─────────────┬──────────────────────────┬───────────────────────────────┐
    │ Handler     │ 200 body                 │ Other outcomes                │
    ├─────────────┼──────────────────────────┼───────────────────────────────┤
    │ create      │ Product created          │ 500 Error                     │
    │ get_one     │ {"id":..,"name":..,..}   │ 404 Product not found, 500    │
    │ get_all     │ [ ... ]                  │ 500 Error                     │
    │ get_by_price│ [ ... ] (price < T)      │ 500 Error                     │
    │ update      │ Product updated          │ 500 Error                     │
    │ delete      │ Product deleted          │ 404 User not found, 500       │
    └─────────────┴──────────────────────────┴───────────────────────────────┘

Bad input (non-numeric id, malformed JSON) and storage failures both map to
500 "Error". Update has no not-found outcome: updating an unknown id still
answers "Product updated".

=============================================================================
"""

from typing import Optional
import logging
import re

import psycopg2

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok, not_found, internal_error
from ..http.router import Router
from ..models.product import INT32_MAX, INT32_MIN, Product, products_to_json
from ..repositories.product_repo import ProductRepository


logger = logging.getLogger(__name__)

# Signed decimal integer, ASCII digits only
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Errors that become a 500 "Error" response
HANDLED_ERRORS = (ValueError, psycopg2.Error)


def parse_int(text: str) -> int:
    """
    Parse a path segment as a 32-bit signed integer.

    Stricter than int(): no surrounding whitespace, no underscores,
    no non-ASCII digits.

    Raises:
        ValueError: If the text is not an integer in range.
    """
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"Not an integer: {text!r}")
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"Integer out of range: {text!r}")
    return value


class ProductHandlers:
    """
    Request handlers for the product routes.

    Args:
        repository: Where products are stored. Anything with the
                    ProductRepository methods works.
    """

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def create(self, request: HTTPRequest) -> HTTPResponse:
        """POST /products"""
        try:
            product = Product.from_json(request.body_text)
            self.repository.add(product)
        except HANDLED_ERRORS as e:
            return self._failed("create product", e)
        return ok("Product created")

    def get_one(self, request: HTTPRequest) -> HTTPResponse:
        """GET /products/<id>"""
        try:
            product_id = parse_int(request.path_segment)
            product: Optional[Product] = self.repository.get_by_id(product_id)
        except HANDLED_ERRORS as e:
            return self._failed("read product", e)
        if product is None:
            return not_found("Product not found")
        return ok(product.to_json())

    def get_all(self, request: HTTPRequest) -> HTTPResponse:
        """GET /products"""
        try:
            products = self.repository.list_all()
        except HANDLED_ERRORS as e:
            return self._failed("list products", e)
        return ok(products_to_json(products))

    def get_by_price(self, request: HTTPRequest) -> HTTPResponse:
        """GET /price/<threshold>"""
        try:
            threshold = parse_int(request.path_segment)
            products = self.repository.list_below_price(threshold)
        except HANDLED_ERRORS as e:
            return self._failed("list products by price", e)
        return ok(products_to_json(products))

    def update(self, request: HTTPRequest) -> HTTPResponse:
        """PUT /products/<id>"""
        try:
            product_id = parse_int(request.path_segment)
            product = Product.from_json(request.body_text)
            self.repository.update(product_id, product)
        except HANDLED_ERRORS as e:
            return self._failed("update product", e)
        return ok("Product updated")

    def delete(self, request: HTTPRequest) -> HTTPResponse:
        """DELETE /products/<id>"""
        try:
            product_id = parse_int(request.path_segment)
            deleted = self.repository.delete(product_id)
        except HANDLED_ERRORS as e:
            return self._failed("delete product", e)
        if not deleted:
            return not_found("User not found")
        return ok("Product deleted")

    @staticmethod
    def _failed(action: str, error: Exception) -> HTTPResponse:
        logger.error(f"Failed to {action}: {type(error).__name__}: {error}")
        return internal_error()


def create_router(handlers: ProductHandlers) -> Router:
    """
    Build the route table.

    Order is precedence: "GET /products/" sits above "GET /products",
    and Router.add_route rejects the reverse order.
    """
    router = Router()
    router.add_route("POST", "/products", handlers.create, name="create")
    router.add_route("GET", "/products/", handlers.get_one, name="read_one")
    router.add_route("GET", "/products", handlers.get_all, name="read_all")
    router.add_route("GET", "/price/", handlers.get_by_price, name="read_below_price")
    router.add_route("PUT", "/products/", handlers.update, name="update")
    router.add_route("DELETE", "/products/", handlers.delete, name="delete")
    return router
