# invoicing/api/v1/deps.py
"""
FastAPI dependencies for the v1 API layer.

``get_current_actor`` extracts a Bearer JWT from the Authorization header
and returns who is acting. The token is issued elsewhere; only ``sub`` and
``role`` are read here and ``sub`` ends up in ``created_by``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, Header, status
from jose import JWTError, jwt

from invoicing.config.settings import settings

logger = logging.getLogger("api.v1.deps")


@dataclass(frozen=True)
class Actor:
    id: str
    role: str = "user"


async def get_current_actor(authorization: str | None = Header(None)) -> Actor:
    """
    Validate the ``Authorization: Bearer <jwt>`` header.

    Raises HTTP 401 if the token is missing, invalid, expired, or carries
    no subject.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # strip "Bearer "

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug("JWT decode failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    actor_id = payload.get("sub")
    if not actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject",
        )

    return Actor(id=str(actor_id), role=payload.get("role") or "user")
