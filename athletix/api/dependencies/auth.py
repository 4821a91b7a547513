"""FastAPI authentication dependencies.

Tokens are read from the Authorization header ("Bearer <token>") and fall
back to the session cookie set at login.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from athletix.users.identity import authorize_user

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Extract the raw token, or None if the request carries none."""
    if credentials and credentials.credentials:
        return credentials.credentials

    session_token = request.cookies.get("session")
    if session_token:
        return session_token

    logger.debug(f"No auth token on {request.method} {request.url.path}")
    return None


def require_matching_user(user_id: str, token: str | None = Depends(get_bearer_token)) -> str:
    """Dependency for /{user_id} routes: the token subject must be user_id.

    Runs before the route body, so no data is read for rejected requests.
    """
    return authorize_user(token, user_id)
