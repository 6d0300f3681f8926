"""Typed failures raised by account operations.

Every failure surfaced to a caller is an ``AccountError`` subclass carrying a
human readable ``message``, the underlying error ``detail`` when one exists,
and the HTTP status code the API layer maps it to.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConsistencyCompensationFailure:
    """A compensating action that itself failed.

    Never raised. It is attached to the error that triggered the
    compensation so the original failure kind is preserved.
    """

    action: str
    remote_ref: str | None
    detail: str


class AccountError(Exception):
    """Base class for account operation failures."""

    status_code: int = 500
    default_message: str = "Account operation failed"

    def __init__(self, message: str | None = None, *, detail: str | None = None):
        self.message = message or self.default_message
        self.detail = detail
        self.compensation_failures: list[ConsistencyCompensationFailure] = []
        super().__init__(self.message)

    def attach_compensation_failure(
        self, failure: ConsistencyCompensationFailure
    ) -> None:
        self.compensation_failures.append(failure)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class ValidationError(AccountError):
    """Bad or missing input; detected before any mutation."""

    status_code = 400
    default_message = "Invalid request"


class AuthorizationError(AccountError):
    """The actor lacks the required role or ownership."""

    status_code = 403
    default_message = "Unauthorized: Admin access required"


class NotFoundError(AccountError):
    """The target identity does not exist."""

    status_code = 404
    default_message = "User not found"


class ConflictError(AccountError):
    """The requested state collides with another identity."""

    status_code = 409
    default_message = "Conflict with existing user"


class DuplicateUsernameError(ConflictError):
    default_message = "Username already taken"


class RemoteProviderError(AccountError):
    """The identity provider call failed or timed out."""

    status_code = 502
    default_message = "Error communicating with the authentication provider"


class LocalStoreError(AccountError):
    """A relational store operation failed."""

    status_code = 500
    default_message = "Error writing to the user store"


class UsernameRaceError(DuplicateUsernameError, LocalStoreError):
    """The local write lost a username race to a concurrent request.

    Raised after the remote half was compensated. It is both a conflict and
    a local store failure.
    """

    status_code = 409
