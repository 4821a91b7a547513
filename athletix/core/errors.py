"""Domain errors raised by services and converted to JSON responses at the API edge.

Each error carries the HTTP status it maps to and the key used for the
message in the response body. Endpoints do not agree on the key
(``error`` vs ``message``), so the key is chosen where the error is raised.
"""

from __future__ import annotations


class AthletixError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_key: str = "error"

    def __init__(self, message: str, *, error_key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_key = error_key or self.default_key

    def to_body(self) -> dict[str, str]:
        return {self.error_key: self.message}


class Unauthorized(AthletixError):
    """Missing or invalid bearer token, or bad credentials."""

    status_code = 401


class Forbidden(AthletixError):
    """Token subject does not match the requested user."""

    status_code = 403


class NotFound(AthletixError):
    """No user or athlete row for the requested id."""

    status_code = 404


class ValidationError(AthletixError):
    """Malformed or incomplete request input."""

    status_code = 400


class StoreError(AthletixError):
    """Any data-access failure not otherwise classified."""

    status_code = 500


class MailError(StoreError):
    """Outbound notification could not be delivered."""
