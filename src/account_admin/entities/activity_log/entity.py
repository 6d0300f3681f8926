"""Activity log domain entity."""

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, Field

from src.account_admin.entities._base import Entity


class ActionType(str, Enum):
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    ACCOUNT_DELETION = "account_deletion"
    PASSWORD_RESET = "password_reset"


class ActivityLogEntry(Entity):
    """A single audit record. Written once, never updated."""

    id: int = Field(validation_alias=AliasChoices("id", "log_id"))
    actor_id: int | None = Field(validation_alias=AliasChoices("actor_id", "user_id"))
    actor_role: str = Field(validation_alias=AliasChoices("actor_role", "role"))
    action_type: str
    description: str | None = None
    affected_entity_id: int | None = None
    entity_type: str | None = None
    timestamp: datetime
