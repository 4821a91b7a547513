from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import StrEnum

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class UserRole(StrEnum):
    athlete = "athlete"
    scout = "scout"
    organizer = "organizer"


class Gender(StrEnum):
    male = "male"
    female = "female"
    other = "other"


class VerificationStatus(StrEnum):
    verified = "verified"
    unverified = "unverified"


class Sport(Base):
    """Sports catalogue offered at registration."""

    __tablename__ = "sports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class User(Base):
    """User account and public profile.

    Stores:
    - user_id: Subject id, also the 'sub' claim of issued tokens
    - email / password_hash: Credentials for the in-process identity provider
    - fullname, sport, birthdate, gender, bio, location: Profile fields
    - role: athlete, scout or organizer
    - verification_status: verified or unverified
    - registration_date / updated_at / last_login_at: Lifecycle timestamps
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True, unique=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String, nullable=True)
    fullname: Mapped[str] = mapped_column(String, nullable=False)
    sport_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("sports.id"), nullable=True)
    sport_name: Mapped[str | None] = mapped_column(String, nullable=True)
    birthdate: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default=UserRole.athlete.value, index=True)
    verification_status: Mapped[str] = mapped_column(String, nullable=False, default=VerificationStatus.unverified.value)
    registration_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("role IN ('athlete','scout','organizer')", name="ck_users_role"),
        CheckConstraint("gender IS NULL OR gender IN ('male','female','other')", name="ck_users_gender"),
        CheckConstraint("verification_status IN ('verified','unverified')", name="ck_users_verification_status"),
    )


class UserDetail(Base):
    """One-to-one extension of users, created lazily on first settings save."""

    __tablename__ = "user_details"

    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), primary_key=True)
    height_cm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight_kg: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    jersey_number: Mapped[str | None] = mapped_column(String, nullable=True)
    contact_num: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)


class Achievement(Base):
    """Achievement owned by a user. Read back ordered by created_at."""

    __tablename__ = "achievements"

    achievement_id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    title: Mapped[str | None] = mapped_column(String, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (Index("idx_achievements_user_created", "user_id", "created_at"),)


class Education(Base):
    """Education entry owned by a user. Read back ordered by start_year."""

    __tablename__ = "education"

    education_id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    school: Mapped[str | None] = mapped_column(String, nullable=True)
    degree: Mapped[str | None] = mapped_column(String, nullable=True)
    field: Mapped[str | None] = mapped_column(String, nullable=True)
    start_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    end_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
