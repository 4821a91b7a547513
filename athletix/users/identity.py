"""Bearer token verification for per-user endpoints.

This is the only access-control boundary: the store applies no row-level
policy, so every settings read or write must pass authorize_user first.
"""

from __future__ import annotations

from loguru import logger

from athletix.core.auth_jwt import decode_access_token
from athletix.core.errors import Forbidden, Unauthorized


def resolve_subject(token: str | None) -> str:
    """Resolve a bearer token to the subject (user id) it was issued for.

    Raises:
        Unauthorized: If the token is missing, malformed or expired
    """
    if not token:
        raise Unauthorized("Missing auth token")
    try:
        return decode_access_token(token)
    except ValueError as e:
        raise Unauthorized(str(e)) from e


def authorize_user(token: str | None, user_id: str) -> str:
    """Check that the token belongs to user_id.

    Returns:
        The verified subject

    Raises:
        Unauthorized: If the token is missing or invalid
        Forbidden: If the token subject is a different user
    """
    subject = resolve_subject(token)
    if subject != user_id:
        logger.warning(f"[AUTH] Forbidden: subject={subject} attempted access to user_id={user_id}")
        raise Forbidden("Forbidden")
    return subject
