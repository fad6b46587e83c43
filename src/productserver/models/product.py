"""
=============================================================================
PRODUCT MODEL
=============================================================================

One row of the `products` table, plus its JSON form.

=============================================================================
JSON SHAPE
=============================================================================

    {"id":1,"name":"Widget","price":10}

    - keys always in this order, compact separators
    - non-ASCII text is written as raw UTF-8 ("Café", not "Caf\\u00e9")
    - creation payloads may omit `id` or send it as null; it is ignored
      on insert

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional
import json


# Bounds of the PostgreSQL INT / SERIAL columns
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class ProductDecodeError(ValueError):
    """Raised when a request body cannot be turned into a Product."""


def _require_int(payload: dict, key: str) -> int:
    value = payload[key]
    # bool is an int subclass; JSON true/false is not a price
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProductDecodeError(f"Field {key!r} must be an integer, got {type(value).__name__}")
    if not INT32_MIN <= value <= INT32_MAX:
        raise ProductDecodeError(f"Field {key!r} out of range: {value}")
    return value


@dataclass
class Product:
    """
    A product record.

    Attributes:
        name: Product name.
        price: Price as a whole number.
        id: Database primary key (None for client-submitted payloads).
    """
    name: str
    price: int
    id: Optional[int] = None

    # ── DECODING ──────────────────────────────────────────

    @classmethod
    def from_json(cls, text: str) -> "Product":
        """
        Parse a JSON object into a Product.

        Raises:
            ProductDecodeError: Empty or malformed JSON, a non-object
                payload, a missing `name`/`price`, or a field of the
                wrong type.
        """
        if not text or not text.strip():
            raise ProductDecodeError("Empty request body")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ProductDecodeError(f"Invalid JSON body: {e}") from e

        if not isinstance(payload, dict):
            raise ProductDecodeError("Request body must be a JSON object")

        for key in ("name", "price"):
            if key not in payload:
                raise ProductDecodeError(f"Missing field {key!r}")

        name = payload["name"]
        if not isinstance(name, str):
            raise ProductDecodeError(f"Field 'name' must be a string, got {type(name).__name__}")

        product_id = None
        if payload.get("id") is not None:
            product_id = _require_int(payload, "id")

        return cls(name=name, price=_require_int(payload, "price"), id=product_id)

    @classmethod
    def from_row(cls, row: tuple) -> "Product":
        """Convert a `(id, name, price)` row into a Product."""
        return cls(id=row[0], name=row[1], price=row[2])

    # ── ENCODING ──────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": self.price}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def __str__(self) -> str:
        return f"#{self.id} {self.name} ({self.price})"


def products_to_json(products: Iterable[Product]) -> str:
    """Serialize a sequence of products as a compact JSON array."""
    return json.dumps(
        [p.to_dict() for p in products], separators=(",", ":"), ensure_ascii=False
    )
