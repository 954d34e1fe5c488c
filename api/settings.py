"""
Application settings.

Values come from environment variables, with a `.env` file at the project
root loaded first.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Look for .env in the project root directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_JWT_SECRET = "dev-only-change-me"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Settings:
    store_backend: str = "memory"  # memory, supabase
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expire_hours: int = 24
    seed_demo_data: bool = True
    demo_seed: Optional[int] = None

    @staticmethod
    def from_env() -> "Settings":
        backend = os.getenv("STORE_BACKEND", "memory").strip().lower()
        if backend not in {"memory", "supabase"}:
            raise RuntimeError(
                f"Invalid STORE_BACKEND: {backend!r}. Must be 'memory' or 'supabase'."
            )

        return Settings(
            store_backend=backend,
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_KEY"),
            jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_expire_hours=_env_int("JWT_EXPIRE_HOURS", 24),
            seed_demo_data=_env_bool("SEED_DEMO_DATA", backend == "memory"),
            demo_seed=_env_int("DEMO_SEED", None),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
