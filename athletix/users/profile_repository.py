"""Repository for profile data access.

Every query against users, user_details, achievements and education goes
through ProfileRepository. Mutations on achievements and education are
always scoped by owner id as well as record id, so a caller can never touch
another user's rows by guessing an id.
"""

from __future__ import annotations

from collections.abc import Generator, Iterable
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from athletix.core.errors import StoreError
from athletix.db.models import Achievement, Education, Sport, User, UserDetail, UserRole


@contextmanager
def _store_errors(operation: str) -> Generator[None, None, None]:
    """Translate SQLAlchemy failures into StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"[REPO] {operation} failed: {type(e).__name__}: {e}")
        raise StoreError(f"{operation} failed: {e}") from e


class ProfileRepository:
    """Data access for the four profile collections and the sports catalogue."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        with _store_errors("fetch user"):
            return self.session.execute(select(User).where(User.user_id == user_id)).scalar_one_or_none()

    def get_user_by_email(self, email: str) -> User | None:
        with _store_errors("fetch user by email"):
            return self.session.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def get_athlete(self, user_id: str) -> User | None:
        """Fetch a user only if their role is athlete."""
        with _store_errors("fetch athlete"):
            return self.session.execute(
                select(User).where(User.user_id == user_id, User.role == UserRole.athlete.value)
            ).scalar_one_or_none()

    def list_athletes(self) -> list[User]:
        with _store_errors("list athletes"):
            return list(self.session.execute(select(User).where(User.role == UserRole.athlete.value)).scalars())

    def get_detail(self, user_id: str) -> UserDetail | None:
        """Fetch the detail row. None means the row does not exist yet."""
        with _store_errors("fetch user details"):
            return self.session.execute(select(UserDetail).where(UserDetail.user_id == user_id)).scalar_one_or_none()

    def list_details(self) -> list[UserDetail]:
        with _store_errors("list user details"):
            return list(self.session.execute(select(UserDetail)).scalars())

    def list_achievements(self, user_id: str) -> list[Achievement]:
        with _store_errors("fetch achievements"):
            return list(
                self.session.execute(
                    select(Achievement).where(Achievement.user_id == user_id).order_by(Achievement.created_at.asc())
                ).scalars()
            )

    def list_education(self, user_id: str) -> list[Education]:
        with _store_errors("fetch education"):
            return list(
                self.session.execute(
                    select(Education).where(Education.user_id == user_id).order_by(Education.start_year.asc().nulls_last())
                ).scalars()
            )

    def list_sports(self) -> list[Sport]:
        with _store_errors("list sports"):
            return list(self.session.execute(select(Sport).order_by(Sport.name.asc())).scalars())

    def get_sport_by_name(self, name: str) -> Sport | None:
        with _store_errors("fetch sport"):
            return self.session.execute(select(Sport).where(Sport.name == name)).scalar_one_or_none()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_user(self, user: User) -> User:
        with _store_errors("insert user"):
            self.session.add(user)
            self.session.flush()
        return user

    def update_user_fields(self, user_id: str, fields: dict[str, Any]) -> int:
        """Partial update of a user row. Only keys present in fields change."""
        if not fields:
            return 0
        with _store_errors("update user"):
            result = self.session.execute(update(User).where(User.user_id == user_id).values(**fields))
        return result.rowcount

    def upsert_detail(self, user_id: str, fields: dict[str, Any]) -> bool:
        """Update the detail row if one exists, else insert it.

        Returns:
            True if a new row was inserted
        """
        existing = self.get_detail(user_id)
        with _store_errors("upsert user details"):
            if existing is not None:
                self.session.execute(update(UserDetail).where(UserDetail.user_id == user_id).values(**fields))
                return False
            self.session.add(UserDetail(user_id=user_id, **fields))
            self.session.flush()
        return True

    def delete_achievements(self, user_id: str, achievement_ids: Iterable[str]) -> int:
        ids = list(achievement_ids)
        if not ids:
            return 0
        with _store_errors("delete achievements"):
            result = self.session.execute(
                delete(Achievement).where(Achievement.achievement_id.in_(ids), Achievement.user_id == user_id)
            )
        return result.rowcount

    def update_achievement(self, user_id: str, achievement_id: str, fields: dict[str, Any]) -> int:
        with _store_errors("update achievement"):
            result = self.session.execute(
                update(Achievement)
                .where(Achievement.achievement_id == achievement_id, Achievement.user_id == user_id)
                .values(**fields)
            )
        return result.rowcount

    def insert_achievement(self, user_id: str, fields: dict[str, Any]) -> Achievement:
        achievement = Achievement(user_id=user_id, **fields)
        with _store_errors("insert achievement"):
            self.session.add(achievement)
            self.session.flush()
        return achievement

    def delete_education(self, user_id: str, education_ids: Iterable[str]) -> int:
        ids = list(education_ids)
        if not ids:
            return 0
        with _store_errors("delete education"):
            result = self.session.execute(
                delete(Education).where(Education.education_id.in_(ids), Education.user_id == user_id)
            )
        return result.rowcount

    def update_education(self, user_id: str, education_id: str, fields: dict[str, Any]) -> int:
        with _store_errors("update education"):
            result = self.session.execute(
                update(Education)
                .where(Education.education_id == education_id, Education.user_id == user_id)
                .values(**fields)
            )
        return result.rowcount

    def insert_education(self, user_id: str, fields: dict[str, Any]) -> Education:
        education = Education(user_id=user_id, **fields)
        with _store_errors("insert education"):
            self.session.add(education)
            self.session.flush()
        return education

    def commit(self) -> None:
        with _store_errors("commit"):
            self.session.commit()
