"""Password change endpoint.

No bearer token is required: the caller re-proves identity with the current
password. A notification mail is sent once the new password is stored.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from loguru import logger

from athletix.api.schemas.auth import MessageResponse, UpdatePasswordRequest
from athletix.core.errors import AthletixError, StoreError
from athletix.core.mailer import send_password_changed_notification
from athletix.db.session import get_session
from athletix.users.account_service import change_password

router = APIRouter(prefix="/api/update-password", tags=["auth"])


@router.post("", response_model=MessageResponse)
def update_password(request: UpdatePasswordRequest):
    try:
        with get_session() as session:
            user = change_password(
                session,
                email=request.email,
                current_password=request.current_password,
                new_password=request.new_password,
                confirm_password=request.confirm_password,
            )
            email = user.email
        send_password_changed_notification(email, datetime.now(timezone.utc))
    except AthletixError as e:
        if e.status_code < 500:
            raise
        logger.error(f"[AUTH] Password update error: {e.message}")
        raise StoreError(f"Server error: {e.message}", error_key="message") from e
    except Exception as e:
        logger.error(f"[AUTH] Password update error: {e}", exc_info=True)
        raise StoreError(f"Server error: {e}", error_key="message") from e

    return MessageResponse(message="Password updated and user notified by email")
