"""Settings API endpoints.

Read and update a user's own profile settings. Both endpoints require a
bearer token whose subject is the user in the path.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger

from athletix.api.dependencies.auth import require_matching_user
from athletix.api.schemas.settings import SettingsUpdateRequest
from athletix.config.settings import settings
from athletix.core.errors import AthletixError, StoreError
from athletix.db.session import get_session
from athletix.users.settings_service import get_user_settings, update_user_settings

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/{user_id}")
def get_settings(user_id: str, _subject: str = Depends(require_matching_user)):
    """Get the merged user, achievements and education for the settings page.

    Returns:
        {"user": {...}, "achievements": [...], "education": [...]}
    """
    logger.info(f"[SETTINGS] GET /api/settings called for user_id={user_id}")
    try:
        with get_session() as session:
            return get_user_settings(session, user_id)
    except AthletixError:
        raise
    except Exception as e:
        logger.error(f"[SETTINGS] GET /api/settings error: {e}", exc_info=True)
        raise StoreError(str(e) or "Server error") from e


@router.put("/{user_id}")
def put_settings(
    user_id: str,
    request: SettingsUpdateRequest,
    _subject: str = Depends(require_matching_user),
):
    """Apply submitted settings: user fields, details, achievements and education.

    Steps are committed one by one unless SETTINGS_ATOMIC_WRITES is enabled,
    so a 500 response can follow a partially applied update.
    """
    logger.info(f"[SETTINGS] PUT /api/settings called for user_id={user_id}")
    try:
        with get_session() as session:
            update_user_settings(session, user_id, request, atomic=settings.settings_atomic_writes)
    except AthletixError:
        raise
    except Exception as e:
        logger.error(f"[SETTINGS] PUT /api/settings error: {e}", exc_info=True)
        raise StoreError(str(e) or "Server error") from e
    return {"success": True}
