"""Public athlete directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from loguru import logger

from athletix.athletes.read_model import get_athlete_profile, list_athletes
from athletix.core.errors import NotFound, StoreError
from athletix.db.session import get_session

router = APIRouter(prefix="/api/athletes", tags=["athletes"])


@router.get("")
def get_athletes():
    """List every athlete with a summary projection and placeholder stats."""
    try:
        with get_session() as session:
            return list_athletes(session)
    except Exception as e:
        logger.error(f"[ATHLETES] Failed to load athletes: {e}", exc_info=True)
        raise StoreError("Failed to load athletes") from e


@router.get("/{athlete_id}")
def get_athlete(athlete_id: str):
    """Public profile for a single athlete. Non-athletes are reported as not found."""
    try:
        with get_session() as session:
            return get_athlete_profile(session, athlete_id)
    except NotFound:
        logger.info(f"[ATHLETES] Athlete not found: {athlete_id}")
        raise
    except Exception as e:
        logger.error(f"[ATHLETES] Error fetching athlete {athlete_id}: {e}", exc_info=True)
        raise StoreError("Failed to load athlete") from e
