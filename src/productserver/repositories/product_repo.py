"""
=============================================================================
PRODUCT REPOSITORY
=============================================================================

All SQL touching the `products` table lives here.

=============================================================================
"""

from typing import Optional
import logging

from ..db.connection import Database
from ..models.product import Product


logger = logging.getLogger(__name__)


class ProductRepository:
    """Repository for CRUD operations on the products table."""

    def __init__(self, database: Database):
        self.database = database

    # ── CREATE ────────────────────────────────────────────

    def add(self, product: Product) -> Product:
        """
        Insert a product. Any client-supplied id is ignored.

        Returns:
            A new Product carrying the id assigned by storage.
        """
        row = self.database.fetch_one(
            "INSERT INTO products (name, price) VALUES (%s, %s) RETURNING id",
            (product.name, product.price),
        )
        created = Product(id=row[0], name=product.name, price=product.price)
        logger.info(f"Added product {created}")
        return created

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Fetch one product, or None if the id is unknown."""
        row = self.database.fetch_one(
            "SELECT id, name, price FROM products WHERE id = %s",
            (product_id,),
        )
        return Product.from_row(row) if row else None

    def list_all(self) -> list[Product]:
        """Every product, ordered by id."""
        rows = self.database.fetch_all("SELECT id, name, price FROM products ORDER BY id")
        return [Product.from_row(r) for r in rows]

    def list_below_price(self, threshold: int) -> list[Product]:
        """Products whose price is strictly less than `threshold`."""
        rows = self.database.fetch_all(
            "SELECT id, name, price FROM products WHERE price < %s ORDER BY id",
            (threshold,),
        )
        return [Product.from_row(r) for r in rows]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, product_id: int, product: Product) -> bool:
        """
        Overwrite name and price of an existing product.

        Returns:
            True if a row was updated, False otherwise.
        """
        updated = self.database.execute(
            "UPDATE products SET name = %s, price = %s WHERE id = %s",
            (product.name, product.price, product_id),
        ) > 0
        if updated:
            logger.info(f"Updated product #{product_id}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, product_id: int) -> bool:
        """
        Delete a product by id.

        Returns:
            True if a row was deleted, False otherwise.
        """
        deleted = self.database.execute(
            "DELETE FROM products WHERE id = %s",
            (product_id,),
        ) > 0
        if deleted:
            logger.info(f"Deleted product #{product_id}")
        return deleted
