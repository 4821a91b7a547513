"""Account lifecycle: registration, login and password change.

All errors raised here use the "message" body key, matching what the web
client reads on the registration, login and password pages.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

from athletix.core.auth_jwt import create_access_token
from athletix.core.errors import Unauthorized, ValidationError
from athletix.core.password import hash_password, is_strong_password, verify_password
from athletix.db.models import Gender, User, UserRole, VerificationStatus
from athletix.users.profile_repository import ProfileRepository


def _normalize_email(email: str) -> str:
    """Normalize email to lowercase."""
    return email.lower().strip()


def _invalid(message: str) -> ValidationError:
    return ValidationError(message, error_key="message")


def _parse_birth_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError as e:
        raise _invalid("Invalid birth date") from e


def register_user(
    session: Session,
    *,
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
    gender: str | None = None,
    birth_date: str | None = None,
    region: str | None = None,
    sport: str | None = None,
    bio: str | None = None,
) -> User:
    """Create a new account with an unverified profile.

    Raises:
        ValidationError: On missing fields, unknown role or gender, weak
            password, or an email that is already registered
    """
    if not name or not name.strip() or not email or not password:
        raise _invalid("All fields are required")

    role = (role or UserRole.athlete.value).strip().lower()
    if role not in {r.value for r in UserRole}:
        raise _invalid(f"Invalid role: {role}")

    if gender is not None:
        gender = gender.strip().lower()
        if gender not in {g.value for g in Gender}:
            raise _invalid(f"Invalid gender: {gender}")

    if not is_strong_password(password):
        raise _invalid("Password does not meet requirements")

    normalized_email = _normalize_email(email)
    repo = ProfileRepository(session)

    if repo.get_user_by_email(normalized_email) is not None:
        logger.warning(f"[AUTH] Registration failed: email already exists={normalized_email}")
        raise _invalid("Email already registered")

    sport_row = repo.get_sport_by_name(sport) if sport else None

    user = User(
        user_id=str(uuid.uuid4()),
        email=normalized_email,
        password_hash=hash_password(password),
        fullname=name.strip(),
        sport_id=sport_row.id if sport_row else None,
        sport_name=sport or None,
        birthdate=_parse_birth_date(birth_date),
        gender=gender,
        bio=bio,
        location=region or None,
        role=role,
        verification_status=VerificationStatus.unverified.value,
        registration_date=datetime.now(timezone.utc),
    )
    repo.add_user(user)
    repo.commit()

    logger.info(f"[AUTH] User registered: user_id={user.user_id}, role={role}")
    return user


def authenticate(session: Session, *, email: str | None, password: str | None) -> tuple[User, str]:
    """Check credentials and issue an access token.

    Raises:
        ValidationError: If email or password is missing
        Unauthorized: If the credentials do not match an account
    """
    if not email or not password:
        raise _invalid("Email and password are required")

    normalized_email = _normalize_email(email)
    repo = ProfileRepository(session)
    user = repo.get_user_by_email(normalized_email)

    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"[AUTH] Login failed for email={normalized_email}")
        raise Unauthorized("Invalid email or password", error_key="message")

    user.last_login_at = datetime.now(timezone.utc)
    repo.commit()

    token = create_access_token(user.user_id)
    logger.info(f"[AUTH] Login successful for user_id={user.user_id}")
    return user, token


def change_password(
    session: Session,
    *,
    email: str | None,
    current_password: str | None,
    new_password: str | None,
    confirm_password: str | None,
) -> User:
    """Replace a password after re-verifying the current one.

    Raises:
        ValidationError: On missing fields, mismatched or weak new password
        Unauthorized: If the current password is wrong
    """
    if not email or not current_password or not new_password or not confirm_password:
        raise _invalid("All fields are required")

    if new_password != confirm_password:
        raise _invalid("Passwords do not match")

    if not is_strong_password(new_password):
        raise _invalid("Password does not meet requirements")

    normalized_email = _normalize_email(email)
    repo = ProfileRepository(session)
    user = repo.get_user_by_email(normalized_email)

    if user is None or not verify_password(current_password, user.password_hash):
        logger.warning(f"[AUTH] Password change rejected for email={normalized_email}")
        raise Unauthorized("Current password is incorrect", error_key="message")

    user.password_hash = hash_password(new_password)
    user.updated_at = datetime.now(timezone.utc)
    repo.commit()

    logger.info(f"[AUTH] Password changed for user_id={user.user_id}")
    return user
