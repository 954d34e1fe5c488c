"""
Domain: Sale transactions.

Rules implemented here:
- amount is derived: amount = quantity * unit_price. It is a property, so it is
  recomputed on every read and cannot be edited on its own.
- quantity is an integer >= 1; unit_price is a finite Decimal >= 0.
- customer_id is a weak reference. The customer may be deleted later; the sale
  stays valid.
- customer_name is the customer's name at the time the sale was recorded. It is
  a point-in-time snapshot, not kept in sync with renames. Display paths resolve
  the live name through services.analytics_service.resolve_customer_name.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from .errors import InvalidRecordError
from .money import require_non_negative, to_decimal
from .time import require_utc_timestamp

_IMMUTABLE_FIELDS = frozenset({"sale_id", "created_at"})


class SaleStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Immutable record of a sale of one product line to a customer.

    All timestamps must be passed explicitly.
    """

    sale_id: UUID
    customer_id: Optional[UUID]
    customer_name: str
    product: str
    quantity: int
    unit_price: Decimal
    created_at: datetime
    status: SaleStatus = SaleStatus.COMPLETED

    def __post_init__(self) -> None:
        if not isinstance(self.product, str) or not self.product.strip():
            raise InvalidRecordError("product is required")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidRecordError(f"quantity must be an integer, got {self.quantity!r}")
        if self.quantity < 1:
            raise InvalidRecordError("quantity must be >= 1")

        unit_price = to_decimal(self.unit_price, name="unit_price")
        require_non_negative("unit_price", unit_price)
        object.__setattr__(self, "unit_price", unit_price)

        require_utc_timestamp("created_at", self.created_at)

        try:
            object.__setattr__(self, "status", SaleStatus(self.status))
        except ValueError as exc:
            raise InvalidRecordError(f"Invalid sale status: {self.status!r}") from exc

    @property
    def amount(self) -> Decimal:
        """Line total (quantity * unit_price), exact."""

        return self.unit_price * self.quantity

    def with_updates(self, **changes: Any) -> "Sale":
        """
        Return a copy with the given fields overwritten (partial update).

        amount is not a field; changing quantity or unit_price changes it.
        """

        if "amount" in changes:
            raise InvalidRecordError("amount is derived from quantity and unit_price")
        forbidden = _IMMUTABLE_FIELDS.intersection(changes)
        if forbidden:
            raise InvalidRecordError(f"Fields cannot be updated: {sorted(forbidden)}")
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise InvalidRecordError(f"Unknown sale fields: {sorted(unknown)}")
        return dataclasses.replace(self, **changes)
