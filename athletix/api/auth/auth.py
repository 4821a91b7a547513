"""Account endpoints: registration, login and logout.

Login issues a JWT both in the response body and as an httponly session
cookie; logout clears the cookie. Tokens themselves are stateless.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from loguru import logger

from athletix.api.schemas.auth import LoginRequest, LoginResponse, LoginUser, MessageResponse, RegisterRequest, RegisterResponse
from athletix.core.auth_jwt import token_lifetime
from athletix.core.errors import AthletixError, StoreError
from athletix.db.session import get_session
from athletix.users.account_service import authenticate, register_user

router = APIRouter(tags=["auth"])

SESSION_COOKIE = "session"


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=True,
        samesite="none",
        max_age=int(token_lifetime().total_seconds()),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def register(request: RegisterRequest):
    """Create an account. The profile starts unverified."""
    logger.info("[AUTH] Registration requested")
    try:
        with get_session() as session:
            user = register_user(
                session,
                name=request.name,
                email=request.email,
                password=request.password,
                role=request.role,
                gender=request.gender,
                birth_date=request.birth_date,
                region=request.region,
                sport=request.sport,
                bio=request.bio,
            )
            return RegisterResponse(message="Registration successful", user_id=user.user_id)
    except AthletixError:
        raise
    except Exception as e:
        logger.error(f"[AUTH] Registration error: {e}", exc_info=True)
        raise StoreError("Registration failed", error_key="message") from e


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest):
    """Log in with email and password."""
    try:
        with get_session() as session:
            user, token = authenticate(session, email=request.email, password=request.password)
            body = LoginResponse(
                access_token=token,
                user=LoginUser(id=user.user_id, email=user.email, fullname=user.fullname, role=user.role),
            )
    except AthletixError:
        raise
    except Exception as e:
        logger.error(f"[AUTH] Login error: {e}", exc_info=True)
        raise StoreError("Login failed", error_key="message") from e

    response = JSONResponse(content=body.model_dump())
    _set_auth_cookie(response, token)
    return response


@router.post("/logout", response_model=MessageResponse)
def logout():
    """Log out. The client discards its token; the session cookie is cleared."""
    response = JSONResponse(content={"message": "Logged out"})
    response.delete_cookie(SESSION_COOKIE)
    return response
