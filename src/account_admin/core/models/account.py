"""Request and result models shared by the account services and the API."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Account roles stored on the local identity record."""

    CUSTOMER = "customer"
    SELLER = "seller"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def has_profile(self) -> bool:
        """Customers and sellers carry a role-specific profile row."""
        return self in (Role.CUSTOMER, Role.SELLER)

    @property
    def is_privileged(self) -> bool:
        return self in (Role.ADMIN, Role.SUPER_ADMIN)


VALID_ROLES = frozenset(role.value for role in Role)

ACCOUNT_COLUMNS = ("username", "email", "mobile_number", "role")
PROFILE_COLUMNS = ("first_name", "last_name", "profile_picture")
REMOTE_FIELDS = ("username", "email", "password")


class Actor(BaseModel):
    """The authenticated caller performing an operation."""

    id: int | None = Field(description="Local user id; None for system actors")
    role: Role = Field(description="Role of the caller")
    remote_ref: str | None = Field(default=None, description="Identity provider reference")

    @classmethod
    def system(cls) -> Actor:
        """Actor used by bootstrap tooling; records ``created_by`` as NULL."""
        return cls(id=None, role=Role.SUPER_ADMIN)


class AccountCreate(BaseModel):
    """Input for creating an account.

    Fields are optional at the model level so that missing values surface as
    account ``ValidationError`` rather than a schema error.
    """

    email: str | None = None
    password: str | None = None
    username: str | None = None
    role: str | None = None
    mobile_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class AccountPatch(BaseModel):
    """Partial update of an account.

    Only fields explicitly set on the patch are written, which lets a caller
    clear a nullable column by sending ``None``.
    """

    username: str | None = None
    email: str | None = None
    mobile_number: str | None = None
    role: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None
    password: str | None = None

    def provided(self, *names: str) -> dict[str, Any]:
        """Return the explicitly set fields among ``names``."""
        return {
            name: getattr(self, name)
            for name in names
            if name in self.model_fields_set
        }

    def is_empty(self) -> bool:
        return not self.model_fields_set


class PasswordReset(BaseModel):
    new_password: str | None = None


class OperationResult(BaseModel):
    """Structured outcome returned for every operation."""

    success: bool
    message: str
    data: Any | None = None
    error: str | None = None
