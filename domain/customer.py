"""
Domain: Customer accounts.

Rules implemented here:
- A Customer is uniquely identified by customer_id (UUID); email is unique per store.
- created_at is a UTC timestamp and is immutable once set.
- total_spent and total_orders are stored values (entered, imported or generated).
  They are not derived from sales; see services.analytics_service.recompute_customer_totals
  for the derived view.
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
from .money import ZERO, require_non_negative, to_decimal
from .time import require_utc_timestamp

_IMMUTABLE_FIELDS = frozenset({"customer_id", "created_at"})


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True, slots=True)
class Customer:
    """
    Pure domain entity for a Customer.

    Updates return a new instance (see with_updates); identity and
    creation time cannot change.
    """

    customer_id: UUID
    name: str
    email: str
    created_at: datetime
    phone: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    total_spent: Decimal = ZERO
    total_orders: int = 0
    status: CustomerStatus = CustomerStatus.ACTIVE

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidRecordError("name is required")
        if not isinstance(self.email, str) or "@" not in self.email:
            raise InvalidRecordError(f"email is invalid: {self.email!r}")
        require_utc_timestamp("created_at", self.created_at)

        total_spent = to_decimal(self.total_spent, name="total_spent")
        require_non_negative("total_spent", total_spent)
        object.__setattr__(self, "total_spent", total_spent)

        if isinstance(self.total_orders, bool) or not isinstance(self.total_orders, int):
            raise InvalidRecordError("total_orders must be an integer")
        if self.total_orders < 0:
            raise InvalidRecordError("total_orders must be >= 0")

        try:
            object.__setattr__(self, "status", CustomerStatus(self.status))
        except ValueError as exc:
            raise InvalidRecordError(f"Invalid customer status: {self.status!r}") from exc

    def with_updates(self, **changes: Any) -> "Customer":
        """
        Return a copy with the given fields overwritten (partial update).

        Raises InvalidRecordError for unknown fields or attempts to change
        customer_id or created_at.
        """

        forbidden = _IMMUTABLE_FIELDS.intersection(changes)
        if forbidden:
            raise InvalidRecordError(f"Fields cannot be updated: {sorted(forbidden)}")
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise InvalidRecordError(f"Unknown customer fields: {sorted(unknown)}")
        return dataclasses.replace(self, **changes)
