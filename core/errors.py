"""
core/errors.py -- Exception taxonomy for TaskList.

Every error a caller can observe is one of the classes below. Each carries the
HTTP status, a machine-readable code, and a short human message. api/main.py
renders them into the shared ErrorResponse envelope; nothing else in the API
layer needs to know the mapping.

Collapsing rules:
  - InvalidCredentials covers both "unknown identifier" and "wrong password".
    Callers must never be able to tell the two apart.
  - NotFoundOrForbidden covers both "task does not exist" and "task belongs to
    someone else". There is no 403 anywhere in the API.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or tasks/.
"""

from __future__ import annotations


class TaskListError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(TaskListError):
    """Malformed or missing input."""

    status_code = 400
    code = "validation_error"
    message = "Request validation failed."


class IdentifierTaken(ValidationError):
    code = "identifier_taken"
    message = "User already exists."


class AuthenticationError(TaskListError):
    """Bad login credentials, or an absent/invalid/expired access token."""

    status_code = 401
    code = "unauthorized"
    message = "Authentication required."


class InvalidCredentials(AuthenticationError):
    # Login failures are 400, token failures are 401.
    status_code = 400
    code = "invalid_credentials"
    message = "Invalid Credentials"


class MissingCredential(AuthenticationError):
    code = "missing_credential"
    message = "No token, authorization denied."


class InvalidCredential(AuthenticationError):
    code = "invalid_credential"
    message = "Token is not valid."


class NotFoundOrForbidden(TaskListError):
    status_code = 404
    code = "not_found"
    message = "Task not found or unauthorized."


class StorageError(TaskListError):
    """The backing store failed. The driver error is logged, never returned."""

    status_code = 500
    code = "storage_error"
    message = "A storage error occurred."
