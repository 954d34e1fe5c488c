"""
Authentication service.

Password hashing (passlib) and HS256 access tokens (PyJWT) for dashboard
users. Default staff accounts are seeded into the store at startup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from domain.time import utc_now
from domain.user import User, UserRole
from repositories.store import EntityStore

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

JWT_ALGORITHM = "HS256"
TOKEN_TYPE = "access"

# (email, password, name, role) for the seeded staff accounts
DEFAULT_USERS = (
    ("admin@company.com", "admin123", "Admin User", UserRole.ADMIN),
    ("manager@company.com", "manager123", "Manager User", UserRole.MANAGER),
    ("employee@company.com", "employee123", "Employee User", UserRole.EMPLOYEE),
)


class AuthenticationError(Exception):
    """Raised when credentials or a token cannot be accepted."""


@dataclass(frozen=True, slots=True)
class TokenData:
    """Claims carried by an access token."""
    user_id: int
    email: str
    name: str
    role: UserRole


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user: User,
    secret: str,
    expires_delta: timedelta = timedelta(hours=24),
    now: Optional[datetime] = None,
) -> str:
    """Create a signed JWT for the user."""

    issued_at = now or utc_now()
    payload: Dict[str, Any] = {
        "id": user.user_id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "type": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> TokenData:
    """
    Verify and decode an access token.

    Raises:
        AuthenticationError: If the token is expired, tampered with or malformed
    """

    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise AuthenticationError(f"Invalid token: {exc}") from exc

    if payload.get("type") != TOKEN_TYPE:
        raise AuthenticationError("Invalid token type")

    try:
        return TokenData(
            user_id=int(payload["id"]),
            email=str(payload["email"]),
            name=str(payload["name"]),
            role=UserRole(payload["role"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError(f"Invalid token claims: {exc}") from exc


def authenticate_user(store: EntityStore, email: str, password: str) -> User:
    """
    Check credentials against the store.

    Raises:
        AuthenticationError: If the user is unknown or the password is wrong
    """

    user = store.get_user_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt", extra={"email": email})
        raise AuthenticationError("Invalid credentials")
    return user


def seed_default_users(store: EntityStore) -> int:
    """Add the default staff accounts that are missing. Returns how many were added."""

    added = 0
    for user_id, (email, password, name, role) in enumerate(DEFAULT_USERS, start=1):
        if store.get_user_by_email(email) is not None:
            continue
        store.add_user(User(
            user_id=user_id,
            email=email,
            name=name,
            role=role,
            password_hash=hash_password(password),
        ))
        added += 1
    return added


__all__ = [
    "AuthenticationError",
    "TokenData",
    "DEFAULT_USERS",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "authenticate_user",
    "seed_default_users",
]
