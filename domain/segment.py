"""
Domain: Customer value segments.

Segments are defined strictly by total_spent:
  - HIGH_VALUE:   total_spent > 1000
  - MEDIUM_VALUE: 500 < total_spent <= 1000
  - LOW_VALUE:    total_spent <= 500

Boundaries: 500 is Low Value, 1000 is Medium Value, 1000.01 is High Value.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

HIGH_VALUE_THRESHOLD = Decimal("1000")
MEDIUM_VALUE_THRESHOLD = Decimal("500")


class CustomerSegment(str, Enum):
    HIGH_VALUE = "High Value"
    MEDIUM_VALUE = "Medium Value"
    LOW_VALUE = "Low Value"

    @staticmethod
    def for_total_spent(total_spent: Decimal) -> "CustomerSegment":
        """Resolve the segment for a spend amount. No other segmentation rules exist."""

        if total_spent > HIGH_VALUE_THRESHOLD:
            return CustomerSegment.HIGH_VALUE
        if total_spent > MEDIUM_VALUE_THRESHOLD:
            return CustomerSegment.MEDIUM_VALUE
        return CustomerSegment.LOW_VALUE
