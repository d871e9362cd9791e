"""
Security utilities for the research budget API.

JWT issuing/verification through python-jose and bcrypt password hashing.
Secrets and lifetimes come from the settings singleton.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Password helpers (bcrypt direct)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Return the bcrypt hash of *password* as a UTF-8 string."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check *plain* against a stored bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


def create_access_token(data: dict[str, Any]) -> str:
    """Create a signed JWT access token.

    The payload is a copy of *data* plus ``exp`` and ``iat`` claims; the
    lifetime is ``JWT_EXPIRATION_MINUTES``.  Callers set ``sub`` to the
    user's primary key as a string.

    Args:
        data: Claims to embed in the token payload.

    Returns:
        A compact JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = data.copy()
    payload["iat"] = now
    payload["exp"] = now + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user: Any) -> str:
    """Issue an access token carrying the standard claims of *user*."""
    return create_access_token(
        {"sub": str(user.id), "username": user.username, "rol": user.rol}
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Raises:
        ValueError: If the token is invalid, expired, or cannot be decoded.
            Dependencies map this to HTTP 401.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        logger.debug("JWT verification failed: %s", exc)
        raise ValueError("Token inválido o expirado") from exc
