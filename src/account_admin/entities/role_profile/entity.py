"""Role profile domain entity."""

from pydantic import Field

from src.account_admin.entities._base import Entity


class RoleProfile(Entity):
    """Role specific attributes of a customer or seller account."""

    user_id: int = Field(description="Owning account id")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    profile_picture: str | None = Field(
        default=None, description="Stored path of the profile picture"
    )
