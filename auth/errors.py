"""
Error taxonomy for the credential and records API.

Every error carries the HTTP status it maps to and the message that is safe
to show the client.  Internal errors (``StoreFailure``, ``HashFailure``)
keep their underlying cause on ``__cause__`` for server-side logging only.
"""

from __future__ import annotations

from http import HTTPStatus


class StudentApiError(Exception):
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Internal server error"
    internal: bool = False

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ── Client errors ──────────────────────────────────────────────────────


class MissingField(StudentApiError):
    status = HTTPStatus.BAD_REQUEST
    message = "Please provide all required fields"

    def __init__(self, *fields: str) -> None:
        self.fields = fields
        super().__init__(
            f"Please provide all required fields: {', '.join(fields)}" if fields else None
        )


class DuplicateEmail(StudentApiError):
    status = HTTPStatus.BAD_REQUEST
    message = "Email already in use"


class InvalidCredentials(StudentApiError):
    """Shared by unknown email and wrong password so the two are indistinguishable."""

    status = HTTPStatus.BAD_REQUEST
    message = "Invalid email or password"


class Unauthenticated(StudentApiError):
    status = HTTPStatus.UNAUTHORIZED
    message = "Access denied"


class Forbidden(StudentApiError):
    status = HTTPStatus.FORBIDDEN
    message = "Invalid token"


class NotFound(StudentApiError):
    status = HTTPStatus.NOT_FOUND
    message = "Not found"


# ── Internal errors ────────────────────────────────────────────────────


class StoreFailure(StudentApiError):
    internal = True


class HashFailure(StudentApiError):
    internal = True
