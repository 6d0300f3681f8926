"""Account domain entity."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field

from src.account_admin.core.models.account import Role
from src.account_admin.entities._base import Entity
from src.account_admin.entities.role_profile.entity import RoleProfile


class Account(Entity):
    """An identity as stored locally, optionally joined with its profile.

    The remote half of the identity lives with the identity provider under
    ``remote_ref``.
    """

    id: int = Field(
        validation_alias=AliasChoices("id", "user_id"),
        description="Local user id assigned by the store",
    )
    remote_ref: str = Field(description="Identity provider reference")
    username: str = Field(description="Unique username")
    email: str | None = Field(default=None, description="Email address")
    role: Role = Field(description="Account role")
    mobile_number: str | None = Field(default=None, description="Mobile number")
    created_at: datetime | None = Field(default=None)
    created_by: int | None = Field(
        default=None, description="Id of the account that created this one"
    )
    created_by_username: str | None = Field(default=None)
    profile: RoleProfile | None = Field(default=None)

    def __eq__(self, other: Any) -> bool:
        """Compare accounts by identity attributes, ignoring timestamps."""
        if not isinstance(other, Account):
            return False

        return (
            self.id == other.id
            and self.remote_ref == other.remote_ref
            and self.username == other.username
            and self.email == other.email
            and self.role == other.role
            and self.mobile_number == other.mobile_number
        )

    def __hash__(self) -> int:
        return hash((self.id, self.remote_ref, self.username))

    def public_view(self) -> dict[str, Any]:
        """Flattened projection returned to API callers."""
        profile = self.profile
        return {
            "user_id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "mobile_number": self.mobile_number,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by_username,
            "first_name": profile.first_name if profile else None,
            "last_name": profile.last_name if profile else None,
            "profile_picture": profile.profile_picture if profile else None,
        }
