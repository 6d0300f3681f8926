"""Core models exports."""

from .account import (
    ACCOUNT_COLUMNS,
    PROFILE_COLUMNS,
    REMOTE_FIELDS,
    VALID_ROLES,
    AccountCreate,
    AccountPatch,
    Actor,
    OperationResult,
    PasswordReset,
    Role,
)

__all__ = [
    "ACCOUNT_COLUMNS",
    "PROFILE_COLUMNS",
    "REMOTE_FIELDS",
    "VALID_ROLES",
    "AccountCreate",
    "AccountPatch",
    "Actor",
    "OperationResult",
    "PasswordReset",
    "Role",
]
