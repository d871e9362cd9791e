"""
Authentication business logic for the research budget API.

Provides:
- ``authenticate_user``: credential verification against the DB.
- ``get_current_user``: FastAPI dependency that extracts and validates
  the Bearer JWT from the ``Authorization`` header.
- ``require_role``: dependency factory that enforces role-based access
  control on top of ``get_current_user``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.utils.constants import ROLES
from app.utils.security import verify_password, verify_token

logger = logging.getLogger(__name__)

# The ``tokenUrl`` must match the login endpoint path (relative to root).
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def authenticate_user(db: Session, username: str, password: str) -> Usuario | None:
    """Verify username/password credentials against the database.

    Returns ``None`` (instead of raising) for unknown users, inactive
    accounts and wrong passwords alike, so callers control the HTTP error.

    Args:
        db: An active SQLAlchemy session.
        username: The login name submitted by the client.
        password: The plain-text password submitted by the client.

    Returns:
        The ``Usuario`` on success, or ``None``.
    """
    user: Usuario | None = (
        db.query(Usuario)
        .filter(Usuario.username == username, Usuario.activo.is_(True))
        .first()
    )

    if user is None:
        logger.debug("authenticate_user: unknown or inactive user '%s'", username)
        return None

    if not verify_password(password, user.password_hash):
        logger.debug("authenticate_user: wrong password for user '%s'", username)
        return None

    # Last-access timestamp is best-effort; a failure must not block the login.
    try:
        user.ultimo_acceso = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not update ultimo_acceso for user '%s'", username)

    return user


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> Usuario:
    """FastAPI dependency that resolves the caller's identity from a JWT.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired, or
            the referenced user no longer exists or has been deactivated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudo validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token)
        user_id = int(payload["sub"])
    except (ValueError, KeyError, TypeError):
        raise credentials_exception

    user: Usuario | None = (
        db.query(Usuario)
        .filter(Usuario.id == user_id, Usuario.activo.is_(True))
        .first()
    )
    if user is None:
        raise credentials_exception

    return user


def require_role(*roles: str):
    """Return a FastAPI dependency that restricts access to the given roles.

    Usage::

        @router.post("/")
        def crear(current_user: Usuario = Depends(require_role("ADMIN"))):
            ...

    Raises:
        ValueError: If a role name is not one of ``ROLES``.
        HTTPException 403: If the authenticated user's role is not allowed.
    """
    desconocidos = set(roles) - set(ROLES)
    if desconocidos:
        raise ValueError(f"Roles desconocidos: {sorted(desconocidos)}")
    allowed = frozenset(roles)

    def _check_role(
        current_user: Annotated[Usuario, Depends(get_current_user)],
    ) -> Usuario:
        if current_user.rol not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    f"Acceso denegado. Se requiere uno de los roles: "
                    f"{sorted(allowed)}"
                ),
            )
        return current_user

    return _check_role
