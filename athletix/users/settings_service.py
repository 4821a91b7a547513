"""Settings read and reconciliation for a user's profile.

The write path turns a desired-state payload into inserts, updates and
deletes across users, user_details, achievements and education. It runs as
six sequential steps:

1. Update users fields that were supplied, always stamping updated_at
2. Upsert the user_details row
3. Delete achievements named in the deletion list (owner-scoped)
4. Update achievements that carry an id, insert the ones that don't
5. Delete education rows named in the deletion list (owner-scoped)
6. Update or insert education rows the same way

By default each step is committed on its own. A failure stops the sequence
and earlier steps stay applied. With atomic=True the whole sequence is one
transaction.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

from athletix.api.schemas.settings import SettingsUpdateRequest, SettingsUserPayload
from athletix.core.errors import AthletixError, NotFound, StoreError, ValidationError
from athletix.db.models import Achievement, Education, User, UserDetail
from athletix.users.profile_repository import ProfileRepository

USER_UPDATABLE_FIELDS = ("fullname", "birthdate", "gender", "location", "bio")
DETAIL_FIELDS = ("email", "contact_num", "height_cm", "weight_kg", "position", "jersey_number", "video_url")

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_int(value: Any) -> int | None:
    """Parse a form value into an integer or None.

    Empty strings and missing values become None. Strings are read like a
    lenient integer parse: leading digits are taken and anything after them
    is ignored ("2022abc" -> 2022, "180.5" -> 180). A value with no leading
    digits is None, never NaN.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def parse_birthdate(value: str | date | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid birthdate: {value}") from e


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SettingsUpdateResult:
    """Counts of the mutations applied by one settings update."""

    user_rows_updated: int = 0
    detail_inserted: bool = False
    achievements_deleted: int = 0
    achievements_updated: int = 0
    achievements_inserted: int = 0
    education_deleted: int = 0
    education_updated: int = 0
    education_inserted: int = 0


# ----------------------------------------------------------------------
# Read path
# ----------------------------------------------------------------------


def _user_settings_view(user: User, detail: UserDetail | None) -> dict[str, Any]:
    merged: dict[str, Any] = {
        "user_id": user.user_id,
        "fullname": user.fullname,
        "location": user.location,
        "birthdate": user.birthdate,
        "gender": user.gender,
        "bio": user.bio,
    }
    for field in DETAIL_FIELDS:
        merged[field] = getattr(detail, field) if detail is not None else None
    return merged


def achievement_view(achievement: Achievement) -> dict[str, Any]:
    return {
        "achievement_id": achievement.achievement_id,
        "title": achievement.title,
        "year": achievement.year,
        "description": achievement.description,
    }


def _education_view(education: Education) -> dict[str, Any]:
    return {
        "education_id": education.education_id,
        "school": education.school,
        "degree": education.degree,
        "field": education.field,
        "start_year": education.start_year,
        "end_year": education.end_year,
    }


def get_user_settings(session: Session, user_id: str) -> dict[str, Any]:
    """Load the merged settings view for an already-authorized user.

    Raises:
        NotFound: If there is no users row for user_id
    """
    repo = ProfileRepository(session)

    user = repo.get_user(user_id)
    if user is None:
        raise NotFound("User record not found")

    detail = repo.get_detail(user_id)
    achievements = repo.list_achievements(user_id)
    education = repo.list_education(user_id)

    return {
        "user": _user_settings_view(user, detail),
        "achievements": [achievement_view(a) for a in achievements],
        "education": [_education_view(e) for e in education],
    }


# ----------------------------------------------------------------------
# Write path
# ----------------------------------------------------------------------


def build_user_update(payload: SettingsUserPayload, now: datetime) -> dict[str, Any]:
    """Columns to set on users. Missing and null fields are dropped.

    A blank birthdate is treated as missing so an untouched date input does
    not wipe the stored value.
    """
    update: dict[str, Any] = {}
    for field in USER_UPDATABLE_FIELDS:
        value = getattr(payload, field)
        if value is None:
            continue
        if field == "birthdate":
            if isinstance(value, str) and not value.strip():
                continue
            value = parse_birthdate(value)
        update[field] = value
    update["updated_at"] = now
    return update


def build_detail_update(payload: SettingsUserPayload) -> dict[str, Any]:
    """Columns to write on user_details. Every column is always written."""
    jersey = payload.jersey_number
    contact = payload.phone if payload.phone is not None else payload.contact_num
    return {
        "height_cm": parse_int(payload.height),
        "weight_kg": parse_int(payload.weight),
        "position": payload.position,
        "jersey_number": str(jersey) if jersey is not None else None,
        "contact_num": contact,
        "email": payload.email,
        "video_url": payload.video_url,
    }


class SettingsReconciler:
    """Applies a SettingsUpdateRequest for one user."""

    def __init__(self, session: Session, *, atomic: bool = False) -> None:
        self.repo = ProfileRepository(session)
        self.atomic = atomic

    def _step_done(self, step: str, user_id: str) -> None:
        if not self.atomic:
            self.repo.commit()
        logger.debug(f"[SETTINGS] Step '{step}' applied for user_id={user_id}")

    def apply(self, user_id: str, request: SettingsUpdateRequest) -> SettingsUpdateResult:
        """Run the six reconciliation steps in order.

        Raises:
            ValidationError: If a submitted value cannot be stored
            StoreError: If any data-access step fails
        """
        result = SettingsUpdateResult()
        now = _now()

        result.user_rows_updated = self.repo.update_user_fields(user_id, build_user_update(request.user, now))
        self._step_done("update user", user_id)

        result.detail_inserted = self.repo.upsert_detail(user_id, build_detail_update(request.user))
        self._step_done("upsert details", user_id)

        result.achievements_deleted = self.repo.delete_achievements(user_id, request.deleted_achievement_ids)
        self._step_done("delete achievements", user_id)

        for achievement in request.achievements:
            fields = {
                "title": achievement.title,
                "year": parse_int(achievement.year),
                "description": achievement.description,
            }
            if achievement.achievement_id:
                fields["updated_at"] = _now()
                result.achievements_updated += self.repo.update_achievement(user_id, achievement.achievement_id, fields)
            else:
                self.repo.insert_achievement(user_id, fields)
                result.achievements_inserted += 1
        self._step_done("upsert achievements", user_id)

        result.education_deleted = self.repo.delete_education(user_id, request.deleted_education_ids)
        self._step_done("delete education", user_id)

        for entry in request.education:
            fields = {
                "school": entry.school,
                "degree": entry.degree,
                "field": entry.field,
                "start_year": parse_int(entry.start_year),
                "end_year": parse_int(entry.end_year),
            }
            if entry.education_id:
                fields["updated_at"] = _now()
                result.education_updated += self.repo.update_education(user_id, entry.education_id, fields)
            else:
                self.repo.insert_education(user_id, fields)
                result.education_inserted += 1
        self._step_done("upsert education", user_id)

        if self.atomic:
            self.repo.commit()

        logger.info(f"[SETTINGS] Settings updated for user_id={user_id}: {result}")
        return result


def update_user_settings(
    session: Session,
    user_id: str,
    request: SettingsUpdateRequest,
    *,
    atomic: bool = False,
) -> SettingsUpdateResult:
    """Reconcile stored settings with the submitted desired state.

    Unexpected failures are reported as StoreError so the caller can surface
    them as a server error.
    """
    try:
        return SettingsReconciler(session, atomic=atomic).apply(user_id, request)
    except AthletixError:
        raise
    except Exception as e:
        logger.exception(f"[SETTINGS] Settings update failed for user_id={user_id}")
        raise StoreError(str(e) or "Server error") from e
