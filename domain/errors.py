"""
Domain errors.
"""

from __future__ import annotations


class InvalidRecordError(ValueError):
    """Raised when a Customer, Sale or Product is built from invalid field values."""
