"""
Domain: Product catalog entries.

Products are read-only catalog data for analytics; sales reference them by
name (free text is allowed too).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .errors import InvalidRecordError
from .money import require_non_negative, to_decimal


@dataclass(frozen=True, slots=True)
class Product:
    name: str
    price: Decimal
    category: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidRecordError("product name is required")
        price = to_decimal(self.price, name="price")
        require_non_negative("price", price)
        object.__setattr__(self, "price", price)


DEFAULT_CATALOG: tuple[Product, ...] = (
    Product('Laptop Pro 15"', Decimal("1299.99"), "Electronics"),
    Product("Wireless Headphones", Decimal("199.99"), "Audio"),
    Product("Smartphone X", Decimal("899.99"), "Electronics"),
    Product("Tablet Air", Decimal("599.99"), "Electronics"),
    Product("Gaming Mouse", Decimal("79.99"), "Accessories"),
    Product("Mechanical Keyboard", Decimal("149.99"), "Accessories"),
    Product("Monitor 4K", Decimal("399.99"), "Electronics"),
    Product("Webcam HD", Decimal("99.99"), "Accessories"),
    Product("Bluetooth Speaker", Decimal("129.99"), "Audio"),
    Product("Power Bank", Decimal("49.99"), "Accessories"),
)
