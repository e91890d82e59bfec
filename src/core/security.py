"""Signed access/refresh token pair for API authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from src.core.config import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class InvalidTokenError(Exception):
    """Raised when a token is malformed, expired or of the wrong type."""


def _encode(claims: dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        **claims,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    user_id: int,
    email: str,
    full_name: str,
    role: str,
) -> str:
    """Short-lived token carrying the display claims the browser decodes."""
    return _encode(
        {"sub": str(user_id), "email": email, "fullname": full_name, "role": role},
        ACCESS_TOKEN,
        timedelta(minutes=settings.access_token_expires_minutes),
    )


def create_refresh_token(user_id: int) -> str:
    """Long-lived token that can only be exchanged for a new pair."""
    return _encode(
        {"sub": str(user_id)},
        REFRESH_TOKEN,
        timedelta(days=settings.refresh_token_expires_days),
    )


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> dict[str, Any]:
    """Verify signature, expiry and token type.

    Raises:
        InvalidTokenError: If any check fails.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "type"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    if claims.get("type") != expected_type:
        raise InvalidTokenError(f"Expected {expected_type} token")
    return claims


def token_user_id(claims: dict[str, Any]) -> int:
    """Extract the numeric user ID from decoded claims."""
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError("Token subject is not a user ID") from exc
