"""
Unit tests for ProductRepository SQL.
"""

from unittest.mock import MagicMock

import pytest

from productserver.db import Database
from productserver.models import Product
from productserver.repositories import ProductRepository


@pytest.fixture
def database() -> MagicMock:
    return MagicMock(spec=Database)


@pytest.fixture
def repo(database: MagicMock) -> ProductRepository:
    return ProductRepository(database)


class TestProductRepository:

    def test_add(self, repo, database):
        database.fetch_one.return_value = (7,)

        created = repo.add(Product(id=99, name="Widget", price=10))

        assert created == Product(id=7, name="Widget", price=10)
        database.fetch_one.assert_called_once_with(
            "INSERT INTO products (name, price) VALUES (%s, %s) RETURNING id",
            ("Widget", 10),
        )

    def test_get_by_id(self, repo, database):
        database.fetch_one.return_value = (1, "Widget", 10)

        assert repo.get_by_id(1) == Product(id=1, name="Widget", price=10)
        database.fetch_one.assert_called_once_with(
            "SELECT id, name, price FROM products WHERE id = %s", (1,)
        )

    def test_get_by_id_missing(self, repo, database):
        database.fetch_one.return_value = None
        assert repo.get_by_id(404) is None

    def test_list_all(self, repo, database):
        database.fetch_all.return_value = [(1, "Widget", 10), (2, "Gadget", 25)]

        products = repo.list_all()

        assert [p.id for p in products] == [1, 2]
        sql = database.fetch_all.call_args[0][0]
        assert sql == "SELECT id, name, price FROM products ORDER BY id"

    def test_list_below_price(self, repo, database):
        database.fetch_all.return_value = [(1, "Cheap", 5)]

        assert repo.list_below_price(10) == [Product(id=1, name="Cheap", price=5)]
        database.fetch_all.assert_called_once_with(
            "SELECT id, name, price FROM products WHERE price < %s ORDER BY id", (10,)
        )

    def test_update(self, repo, database):
        database.execute.return_value = 1

        assert repo.update(3, Product(name="Gadget", price=30)) is True
        database.execute.assert_called_once_with(
            "UPDATE products SET name = %s, price = %s WHERE id = %s",
            ("Gadget", 30, 3),
        )

    def test_update_missing(self, repo, database):
        database.execute.return_value = 0
        assert repo.update(3, Product(name="Gadget", price=30)) is False

    def test_delete(self, repo, database):
        database.execute.return_value = 1

        assert repo.delete(5) is True
        database.execute.assert_called_once_with("DELETE FROM products WHERE id = %s", (5,))

    def test_delete_missing(self, repo, database):
        database.execute.return_value = 0
        assert repo.delete(5) is False
