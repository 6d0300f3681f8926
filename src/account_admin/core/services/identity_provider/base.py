"""Contract of the remote identity store."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, Field


class IdentityProviderError(Exception):
    """Raised for every failed identity provider call.

    Kept separate from database errors so callers can tell which store
    failed.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IdentityFields(BaseModel):
    """Fields of a remote identity that the backend writes."""

    email: str | None = Field(default=None, description="Login email")
    display_name: str | None = Field(default=None, description="Display name")
    password: str | None = Field(default=None, description="New password credential")

    def is_empty(self) -> bool:
        return self.email is None and self.display_name is None and self.password is None


class IdentityProviderClient(Protocol):
    """Operations the account coordinator needs from the identity provider."""

    def create_identity(self, email: str, password: str, display_name: str) -> str:
        """Create a remote identity and return its reference."""
        ...

    def update_identity(self, remote_ref: str, fields: IdentityFields) -> None:
        """Update the given fields of an existing identity."""
        ...

    def delete_identity(self, remote_ref: str) -> None:
        """Delete an identity. Deleting an absent identity succeeds."""
        ...
