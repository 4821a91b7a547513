"""Issue and verify the bearer tokens used by per-user endpoints.

A token's 'sub' claim is the users.user_id primary key. Tokens are signed
with AUTH_SECRET_KEY and must carry this service as issuer; nothing is
stored server side, so logout only drops the client copy.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from loguru import logger

from athletix.config.settings import settings

TOKEN_ISSUER = "athletix-backend"


def token_lifetime() -> timedelta:
    return timedelta(days=settings.auth_token_expire_days)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Sign a token for user_id.

    Raises:
        ValueError: If user_id is empty
    """
    if not user_id:
        raise ValueError("user_id cannot be None or empty")

    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iss": TOKEN_ISSUER,
        "iat": issued_at,
        "exp": issued_at + (expires_delta or token_lifetime()),
    }
    return jwt.encode(claims, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> str:
    """Return the user id a token was issued for.

    Raises:
        ValueError: If the signature, issuer or expiry check fails, or the
            token has no subject
    """
    try:
        claims = jwt.decode(
            token,
            settings.auth_secret_key,
            algorithms=[settings.auth_algorithm],
            issuer=TOKEN_ISSUER,
        )
    except JWTError as e:
        logger.warning(f"[AUTH] Token rejected: {e}")
        raise ValueError("Invalid or expired token") from e

    subject = claims.get("sub")
    if not subject:
        raise ValueError("Token missing user ID")
    return str(subject)
