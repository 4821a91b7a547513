"""Sports catalogue used by the registration form."""

from __future__ import annotations

from fastapi import APIRouter
from loguru import logger

from athletix.core.errors import StoreError
from athletix.db.session import get_session
from athletix.users.profile_repository import ProfileRepository

router = APIRouter(prefix="/sports", tags=["sports"])


@router.get("")
def get_sports():
    try:
        with get_session() as session:
            return [{"id": sport.id, "name": sport.name} for sport in ProfileRepository(session).list_sports()]
    except Exception as e:
        logger.error(f"[SPORTS] Failed to load sports: {e}", exc_info=True)
        raise StoreError("Failed to load sports") from e
