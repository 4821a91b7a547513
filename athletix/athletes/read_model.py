"""Public athlete projections.

Builds the athlete list and athlete profile responses from users,
user_details and achievements. The two endpoints use different fallbacks
for missing string fields: the list uses "" and the profile uses "N/A".
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

from athletix.core.errors import NotFound
from athletix.db.models import User, UserDetail
from athletix.users.profile_repository import ProfileRepository
from athletix.users.settings_service import achievement_view

LIST_FALLBACK = ""
DETAIL_FALLBACK = "N/A"

PLACEHOLDER_STATS = (
    {"label": "PPG", "value": "0.0"},
    {"label": "RPG", "value": "0.0"},
    {"label": "APG", "value": "0.0"},
)

_YOUTUBE_WATCH = re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([^\s&]+)")


def compute_age(birthdate: date | None, today: date | None = None) -> int | None:
    """Age as current year minus birth year.

    Only calendar years are compared, so someone born in December counts a
    year older from January 1st.
    """
    if birthdate is None:
        return None
    today = today or date.today()
    return today.year - birthdate.year


def to_embed_url(url: str) -> str:
    """Rewrite a YouTube watch link into its embeddable form."""
    match = _YOUTUBE_WATCH.search(url)
    return f"https://www.youtube.com/embed/{match.group(1)}" if match else url


def _or(value: Any, fallback: str) -> Any:
    return value if value else fallback


def athlete_summary(user: User, detail: UserDetail | None, today: date | None = None) -> dict[str, Any]:
    age = compute_age(user.birthdate, today)
    return {
        "id": user.user_id,
        "name": user.fullname,
        "sport": _or(user.sport_name, LIST_FALLBACK),
        "position": _or(detail.position if detail else None, LIST_FALLBACK),
        "age": age if age is not None else LIST_FALLBACK,
        "gender": _or(user.gender, LIST_FALLBACK),
        "location": _or(user.location, LIST_FALLBACK),
        "achievements": 0,
        "stats": [dict(stat) for stat in PLACEHOLDER_STATS],
        "verification_status": user.verification_status,
    }


def list_athletes(session: Session, today: date | None = None) -> list[dict[str, Any]]:
    """Summaries of every user with the athlete role."""
    repo = ProfileRepository(session)
    users = repo.list_athletes()
    if not users:
        return []

    details_by_user = {detail.user_id: detail for detail in repo.list_details()}
    athletes = [athlete_summary(user, details_by_user.get(user.user_id), today) for user in users]
    logger.debug(f"[ATHLETES] Listed {len(athletes)} athletes")
    return athletes


def get_athlete_profile(session: Session, athlete_id: str, today: date | None = None) -> dict[str, Any]:
    """Public profile of one athlete.

    Raises:
        NotFound: If no user with this id has the athlete role
    """
    repo = ProfileRepository(session)

    user = repo.get_athlete(athlete_id)
    if user is None:
        raise NotFound("Athlete not found", error_key="message")

    detail = repo.get_detail(athlete_id)
    achievements = repo.list_achievements(athlete_id)

    age = compute_age(user.birthdate, today)
    video_url = detail.video_url if detail else None

    return {
        "id": user.user_id,
        "name": user.fullname,
        "sport": _or(user.sport_name, DETAIL_FALLBACK),
        "position": _or(detail.position if detail else None, DETAIL_FALLBACK),
        "age": age if age is not None else DETAIL_FALLBACK,
        "gender": _or(user.gender, DETAIL_FALLBACK),
        "location": _or(user.location, DETAIL_FALLBACK),
        "bio": user.bio or "",
        "verification_status": user.verification_status,
        "height": detail.height_cm if detail else None,
        "weight": detail.weight_kg if detail else None,
        "jerseyNumber": detail.jersey_number if detail else None,
        "email": detail.email if detail else None,
        "contactNum": detail.contact_num if detail else None,
        "videos": [{"url": video_url, "embedUrl": to_embed_url(video_url)}] if video_url else [],
        "achievements": [achievement_view(a) for a in achievements],
    }
