"""Unit tests for registration, login and password change."""

from datetime import date

import pytest

from athletix.core.auth_jwt import decode_access_token
from athletix.core.errors import Unauthorized, ValidationError
from athletix.core.password import verify_password
from athletix.db.models import Sport
from athletix.users.account_service import authenticate, change_password, register_user

TEST_PASSWORD = "Str0ng!Pass"


def _register(db_session, **overrides):
    fields = {
        "name": "Maria Clara",
        "email": "Maria@Example.com ",
        "password": "Secur3!pass",
        "role": "athlete",
        "gender": "female",
        "birth_date": "2002-04-09",
        "region": "Region IV-A",
        "sport": "Volleyball",
        "bio": "Libero",
    }
    fields.update(overrides)
    return register_user(db_session, **fields)


class TestRegister:
    def test_creates_unverified_user(self, db_session):
        db_session.add(Sport(name="Volleyball"))
        db_session.commit()

        user = _register(db_session)

        assert user.email == "maria@example.com"
        assert user.fullname == "Maria Clara"
        assert user.birthdate == date(2002, 4, 9)
        assert user.location == "Region IV-A"
        assert user.sport_name == "Volleyball"
        assert user.sport_id is not None
        assert user.verification_status == "unverified"
        assert verify_password("Secur3!pass", user.password_hash)

    def test_unknown_sport_keeps_name_without_id(self, db_session):
        user = _register(db_session, sport="Sepak Takraw")
        assert user.sport_name == "Sepak Takraw"
        assert user.sport_id is None

    @pytest.mark.parametrize("missing", ["name", "email", "password"])
    def test_missing_required_field(self, db_session, missing):
        with pytest.raises(ValidationError, match="All fields are required") as exc_info:
            _register(db_session, **{missing: None})
        assert exc_info.value.error_key == "message"

    def test_weak_password_is_rejected(self, db_session):
        with pytest.raises(ValidationError, match="requirements"):
            _register(db_session, password="password")

    def test_invalid_role_is_rejected(self, db_session):
        with pytest.raises(ValidationError, match="Invalid role"):
            _register(db_session, role="coach")

    def test_invalid_gender_is_rejected(self, db_session):
        with pytest.raises(ValidationError, match="Invalid gender"):
            _register(db_session, gender="robot")

    def test_duplicate_email_is_rejected(self, db_session):
        _register(db_session)
        with pytest.raises(ValidationError, match="already registered"):
            _register(db_session, email="maria@example.com")


class TestAuthenticate:
    def test_valid_credentials_return_token(self, db_session, make_user):
        user_id = make_user(email="juan@example.com")

        user, token = authenticate(db_session, email="JUAN@example.com", password=TEST_PASSWORD)

        assert user.user_id == user_id
        assert user.last_login_at is not None
        assert decode_access_token(token) == user_id

    def test_wrong_password_is_unauthorized(self, db_session, make_user):
        make_user(email="juan@example.com")
        with pytest.raises(Unauthorized, match="Invalid email or password"):
            authenticate(db_session, email="juan@example.com", password="Wr0ng!pass")

    def test_unknown_email_is_unauthorized(self, db_session):
        with pytest.raises(Unauthorized):
            authenticate(db_session, email="ghost@example.com", password=TEST_PASSWORD)

    def test_missing_fields(self, db_session):
        with pytest.raises(ValidationError):
            authenticate(db_session, email="", password=None)


class TestChangePassword:
    def _change(self, db_session, **overrides):
        fields = {
            "email": "juan@example.com",
            "current_password": TEST_PASSWORD,
            "new_password": "N3w!Password",
            "confirm_password": "N3w!Password",
        }
        fields.update(overrides)
        return change_password(db_session, **fields)

    def test_replaces_hash(self, db_session, make_user):
        make_user(email="juan@example.com")

        user = self._change(db_session)

        assert verify_password("N3w!Password", user.password_hash)
        assert not verify_password(TEST_PASSWORD, user.password_hash)

    def test_missing_field(self, db_session):
        with pytest.raises(ValidationError, match="All fields are required"):
            self._change(db_session, confirm_password="")

    def test_mismatched_confirmation(self, db_session):
        with pytest.raises(ValidationError, match="Passwords do not match"):
            self._change(db_session, confirm_password="N3w!Passwordx")

    def test_wrong_current_password(self, db_session, make_user):
        make_user(email="juan@example.com")
        with pytest.raises(Unauthorized, match="Current password is incorrect"):
            self._change(db_session, current_password="Wr0ng!pass")
