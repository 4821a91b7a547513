"""Password hashing and strength rules.

Hashing uses passlib with bcrypt. Raw passwords are never stored or logged.
"""

from __future__ import annotations

import re

from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)

SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    # bcrypt hard limit: 72 bytes
    password = password[:72]
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Verify a password against a hash. Empty input never matches."""
    if not plain or not hashed:
        return False
    return pwd_context.verify(plain[:72], hashed)


def password_criteria(password: str) -> dict[str, bool]:
    """Evaluate each strength rule for a candidate password."""
    return {
        "minLength": len(password) >= 8,
        "hasUppercase": re.search(r"[A-Z]", password) is not None,
        "hasLowercase": re.search(r"[a-z]", password) is not None,
        "hasNumber": re.search(r"\d", password) is not None,
        "hasSpecialChar": any(ch in SPECIAL_CHARACTERS for ch in password),
    }


def is_strong_password(password: str) -> bool:
    return all(password_criteria(password).values())
