"""Role and ownership checks shared by every account operation."""

from collections.abc import Iterable

from loguru import logger

from src.account_admin.core.errors import AuthorizationError
from src.account_admin.core.models.account import Actor, Role

ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
SUPER_ADMIN_ROLES = frozenset({Role.SUPER_ADMIN})

# Roles the admin console lets through its admin gate.
CONSOLE_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN, Role.SELLER})


def is_admin(actor: Actor | None) -> bool:
    return actor is not None and actor.role in ADMIN_ROLES


def is_super_admin(actor: Actor | None) -> bool:
    return actor is not None and actor.role == Role.SUPER_ADMIN


def authorize(
    actor: Actor | None,
    *,
    roles: Iterable[Role] = ADMIN_ROLES,
    owner_id: int | None = None,
    message: str | None = None,
) -> Actor:
    """Allow the actor if it holds one of ``roles`` or owns ``owner_id``.

    Args:
        actor: The caller, or None when unauthenticated
        roles: Roles that are granted access regardless of ownership
        owner_id: Local id of the target; matching it grants access
        message: Override for the rejection message

    Returns:
        The actor, for chaining

    Raises:
        AuthorizationError: If neither the role nor the ownership check passes
    """
    if actor is None:
        raise AuthorizationError("Authentication required")

    if actor.role in frozenset(roles):
        return actor

    if owner_id is not None and actor.id is not None and actor.id == owner_id:
        return actor

    logger.bind(actor_id=actor.id, actor_role=actor.role.value).warning(
        "Authorization denied for target {}", owner_id
    )
    raise AuthorizationError(message)


def require_role_manager(actor: Actor, target_role: Role, action: str) -> None:
    """Only super admins may create, delete or grant privileged roles."""
    if target_role.is_privileged and not is_super_admin(actor):
        raise AuthorizationError(
            f"Only super admins can {action} {target_role.value} accounts"
        )
