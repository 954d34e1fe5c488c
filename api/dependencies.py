"""
FastAPI dependencies: the entity store and the authenticated user.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.settings import Settings, get_settings
from repositories.store import EntityStore, InMemoryStore
from services.auth_service import AuthenticationError, TokenData, decode_access_token, seed_default_users
from services.demo_data_service import load_demo_data

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme; missing tokens are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)

_store: Optional[EntityStore] = None
_store_lock = threading.Lock()


def build_store(settings: Settings) -> EntityStore:
    """Create the configured store backend and seed it."""

    if settings.store_backend == "supabase":
        from repositories.supabase_store import SupabaseStore

        store: EntityStore = SupabaseStore()
    else:
        store = InMemoryStore()

    seed_default_users(store)
    if settings.seed_demo_data:
        load_demo_data(store, seed=settings.demo_seed)

    logger.info(f"Entity store ready (backend={settings.store_backend})")
    return store


def get_store() -> EntityStore:
    """Process-wide store, built on first use."""

    global _store
    with _store_lock:
        if _store is None:
            _store = build_store(get_settings())
        return _store


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenData:
    """Decode the bearer token: 401 when absent, 403 when invalid."""

    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access token required")

    try:
        return decode_access_token(credentials.credentials, settings.jwt_secret)
    except AuthenticationError:
        raise HTTPException(status_code=403, detail="Invalid token")
