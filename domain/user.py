"""
Domain: Dashboard users (staff accounts that log in to the API).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


@dataclass(frozen=True, slots=True)
class User:
    user_id: int
    email: str
    name: str
    role: UserRole
    password_hash: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", UserRole(self.role))
        object.__setattr__(self, "email", self.email.strip().lower())
