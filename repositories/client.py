"""
Supabase client initialization.

This module contains *only* the database connection setup and exposes a
`create_supabase_client()` factory for the Supabase store backend.

Environment variables required (only when STORE_BACKEND=supabase):
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

from typing import Optional

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

from api.settings import Settings, get_settings


def create_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Build a Supabase client from settings.

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_KEY is missing
    """

    settings = settings or get_settings()

    if not settings.supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not settings.supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(settings.supabase_url, settings.supabase_key)


__all__ = ["create_supabase_client"]
