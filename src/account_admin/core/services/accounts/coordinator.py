"""Account writes that span the local user store and the identity provider.

The two stores fail independently and there is no distributed transaction
between them. Each operation orders its steps so that a failure leaves the
stores consistent where possible, and undoes the completed half otherwise:

* create: remote first, then one local transaction; a local failure deletes
  the remote identity again.
* update: remote first; a remote failure writes nothing locally, and either
  failure restores the previous remote email and display name.
* delete: local deletion is flushed inside an open transaction, the remote
  deletion runs last inside that transaction, and the commit happens only
  after it succeeds.

The delete path holds local row locks for the duration of the remote call.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.account_admin.core.authorization import (
    authorize,
    is_admin,
    is_super_admin,
    require_role_manager,
)
from src.account_admin.core.errors import (
    AccountError,
    AuthorizationError,
    ConsistencyCompensationFailure,
    DuplicateUsernameError,
    LocalStoreError,
    NotFoundError,
    RemoteProviderError,
    UsernameRaceError,
    ValidationError,
)
from src.account_admin.core.models.account import (
    ACCOUNT_COLUMNS,
    PROFILE_COLUMNS,
    VALID_ROLES,
    AccountCreate,
    AccountPatch,
    Actor,
    Role,
)
from src.account_admin.core.services.identity_provider.base import (
    IdentityFields,
    IdentityProviderClient,
    IdentityProviderError,
)
from src.account_admin.entities.account import Account, AccountRepository
from src.account_admin.entities.activity_log import ActionType, ActivityLogRepository
from src.account_admin.entities.booking import BookingRepository
from src.account_admin.entities.role_profile import RoleProfileRepository
from src.account_admin.runtime.context import get_config

REQUIRED_CREATE_FIELDS = ("email", "password", "username", "role")


def parse_role(value: str | Role | None) -> Role:
    if isinstance(value, Role):
        return value
    if value not in VALID_ROLES:
        raise ValidationError("Invalid role specified", detail=f"Got {value!r}")
    return Role(value)


def check_password(password: str) -> None:
    min_length = get_config().accounts.min_password_length
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")


class AccountConsistencyCoordinator:
    """Create, update and delete identities across both stores.

    The coordinator owns the session's transaction: every public method
    either commits its local changes or rolls them back before returning.
    """

    def __init__(self, db_session: Session, identity_provider: IdentityProviderClient):
        self._session = db_session
        self._provider = identity_provider
        self._accounts = AccountRepository(db_session)
        self._profiles = RoleProfileRepository(db_session)
        self._activity = ActivityLogRepository(db_session)
        self._bookings = BookingRepository(db_session)

    # -- transaction helpers -------------------------------------------------

    def _rollback(self) -> None:
        """Roll back best-effort; a failing rollback must not mask the cause."""
        try:
            self._session.rollback()
        except Exception as e:
            logger.error("Rollback failed: {}", e)

    @staticmethod
    def _as_local_error(exc: Exception, message: str) -> AccountError:
        if isinstance(exc, AccountError):
            return exc
        if isinstance(exc, IntegrityError) and "username" in str(exc.orig).lower():
            return UsernameRaceError(detail=str(exc.orig))
        return LocalStoreError(message, detail=str(exc))

    def _compensate_remote_create(self, remote_ref: str, error: AccountError) -> None:
        log = logger.bind(remote_ref=remote_ref)
        try:
            self._provider.delete_identity(remote_ref)
            log.warning("Removed remote identity after failed local insert")
        except IdentityProviderError as e:
            log.error("Compensation failed, remote identity left orphaned: {}", e)
            error.attach_compensation_failure(
                ConsistencyCompensationFailure(
                    action="delete_remote_identity",
                    remote_ref=remote_ref,
                    detail=str(e),
                )
            )

    def _restore_remote(
        self, target: Account, pushed: IdentityFields, error: AccountError
    ) -> None:
        restore = IdentityFields(
            email=target.email if pushed.email is not None else None,
            display_name=target.username if pushed.display_name is not None else None,
        )
        log = logger.bind(remote_ref=target.remote_ref, user_id=target.id)
        if pushed.password is not None:
            log.warning("Password may have changed remotely and cannot be restored")
        if restore.is_empty():
            return

        try:
            self._provider.update_identity(target.remote_ref, restore)
            log.warning("Restored remote identity fields after failed update")
        except IdentityProviderError as e:
            log.error("Remote identity diverged from local record: {}", e)
            error.attach_compensation_failure(
                ConsistencyCompensationFailure(
                    action="restore_remote_identity",
                    remote_ref=target.remote_ref,
                    detail=str(e),
                )
            )

    def _get_target(self, user_id: int) -> Account:
        target = self._accounts.get(user_id)
        if target is None:
            raise NotFoundError()
        return target

    # -- operations ----------------------------------------------------------

    def create_account(self, data: AccountCreate, actor: Actor) -> Account:
        """Create the remote identity, then the local record and profile.

        Raises:
            AuthorizationError: If the actor may not create this role
            ValidationError: If a required field is missing or invalid
            DuplicateUsernameError: If the username is taken
            UsernameRaceError: If a concurrent insert took the username; the
                remote identity is deleted again before this is raised
            RemoteProviderError: If the identity provider rejects the identity
            LocalStoreError: If the local insert fails; the remote identity
                is deleted again before this is raised
        """
        authorize(actor)

        missing = [name for name in REQUIRED_CREATE_FIELDS if not getattr(data, name)]
        if missing:
            raise ValidationError(
                "Email, password, username, and role are required",
                detail=f"Missing: {', '.join(missing)}",
            )
        role = parse_role(data.role)
        require_role_manager(actor, role, "create")
        check_password(data.password)

        if self._accounts.username_taken(data.username):
            raise DuplicateUsernameError()

        log = logger.bind(operation="create_account", actor_id=actor.id, username=data.username)

        try:
            remote_ref = self._provider.create_identity(
                email=data.email, password=data.password, display_name=data.username
            )
        except IdentityProviderError as e:
            log.error("Identity provider rejected new user: {}", e)
            raise RemoteProviderError(
                "Error creating user in authentication system", detail=str(e)
            ) from e

        log = log.bind(remote_ref=remote_ref)
        try:
            self._accounts.create(
                remote_ref=remote_ref,
                username=data.username,
                email=data.email,
                role=role,
                mobile_number=data.mobile_number or None,
                created_by=actor.id,
            )

            account = self._accounts.get_by_remote_ref(remote_ref)
            if account is None:
                raise LocalStoreError(
                    "Error creating user record", detail="Inserted record not found"
                )

            if role.has_profile:
                account.profile = self._profiles.create(
                    account.id, role, data.first_name, data.last_name
                )

            self._activity.append(
                actor,
                ActionType.USER_CREATED,
                f"Created user {account.username} with ID: {account.id}",
                affected_entity_id=account.id,
                entity_type="user",
            )
            self._session.commit()
        except Exception as e:
            self._rollback()
            error = self._as_local_error(e, "Error creating user")
            log.error("Local insert failed, compensating: {}", e)
            self._compensate_remote_create(remote_ref, error)
            raise error from e

        log.info("Created user {}", account.id)
        return account

    def update_account(self, user_id: int, patch: AccountPatch, actor: Actor) -> Account:
        """Apply ``patch`` to the account, pushing identity fields remote first.

        Admins may change any field. Other actors may only update their own
        account and never its role.
        """
        authorize(
            actor,
            owner_id=user_id,
            message="Unauthorized: You don't have permission to update this user",
        )
        self_service = not is_admin(actor)

        if patch.is_empty():
            raise ValidationError("No fields to update")

        target = self._get_target(user_id)
        if (
            target.role == Role.SUPER_ADMIN
            and actor.id != target.id
            and not is_super_admin(actor)
        ):
            raise AuthorizationError("Only super admins can modify super_admin accounts")

        changes = patch.provided(*ACCOUNT_COLUMNS)
        if "role" in changes:
            if self_service:
                raise AuthorizationError("Users cannot change their own role")
            changes["role"] = parse_role(changes["role"])
            require_role_manager(actor, changes["role"], "grant")
        for required in ("username", "email"):
            if required in changes and not changes[required]:
                raise ValidationError(f"{required.capitalize()} cannot be empty")
        if patch.password is not None:
            check_password(patch.password)

        changes = {
            column: value
            for column, value in changes.items()
            if getattr(target, column) != value
        }

        resulting_role = changes.get("role", target.role)
        profile_changes = patch.provided(*PROFILE_COLUMNS)
        if profile_changes and not resulting_role.has_profile:
            raise ValidationError(
                "Profile fields are only stored for customers and sellers"
            )

        if "username" in changes and self._accounts.username_taken(
            changes["username"], exclude_id=user_id
        ):
            raise DuplicateUsernameError()

        pushed = IdentityFields(
            email=changes.get("email"),
            display_name=changes.get("username"),
            password=patch.password,
        )
        log = logger.bind(
            operation="update_account",
            actor_id=actor.id,
            user_id=user_id,
            remote_ref=target.remote_ref,
        )

        if not pushed.is_empty():
            try:
                self._provider.update_identity(target.remote_ref, pushed)
            except IdentityProviderError as e:
                log.error("Identity provider rejected update: {}", e)
                error = RemoteProviderError(
                    "Error updating user in authentication system", detail=str(e)
                )
                # The provider may have applied part of the push before failing
                self._restore_remote(target, pushed, error)
                raise error from e

        try:
            if changes:
                self._accounts.update(user_id, changes)

            if resulting_role.has_profile:
                if profile_changes:
                    self._profiles.upsert(user_id, resulting_role, profile_changes)
                elif self._profiles.get(user_id, resulting_role) is None:
                    self._profiles.create(user_id, resulting_role)

            self._activity.append(
                actor,
                ActionType.USER_UPDATED,
                f"Updated user with ID: {user_id}",
                affected_entity_id=user_id,
                entity_type="user",
            )
            self._session.commit()
        except Exception as e:
            self._rollback()
            error = self._as_local_error(e, "Error updating user")
            log.error("Local update failed after remote push: {}", e)
            if not pushed.is_empty():
                self._restore_remote(target, pushed, error)
            raise error from e

        log.info("Updated user fields {}", sorted(changes) + sorted(profile_changes))
        return self._accounts.get_detailed(user_id)

    def update_profile(self, patch: AccountPatch, actor: Actor) -> Account:
        """Self-service update of the caller's own account."""
        if actor is None or actor.id is None:
            raise AuthorizationError("Authentication required")
        if "role" in patch.model_fields_set:
            raise AuthorizationError("Users cannot change their own role")
        return self.update_account(actor.id, patch, actor)

    def delete_account(self, user_id: int, actor: Actor) -> None:
        """Admin deletion of another account."""
        authorize(actor)
        if actor.id == user_id:
            raise ValidationError("You cannot delete your own account through this endpoint")

        target = self._get_target(user_id)
        if target.role.is_privileged and not is_super_admin(actor):
            raise AuthorizationError("Only super admins can delete admin accounts")

        self._delete(
            target,
            actor,
            ActionType.USER_DELETED,
            f"Deleted user {target.username} with ID: {target.id}",
        )

    def delete_own_account(self, actor: Actor) -> None:
        """Self-service deletion of the actor's own account."""
        if actor is None or actor.id is None:
            raise AuthorizationError("Authentication required")

        target = self._get_target(actor.id)
        self._delete(target, actor, ActionType.ACCOUNT_DELETION, "User deleted their account")

    def _delete(
        self, target: Account, actor: Actor, action: ActionType, description: str
    ) -> None:
        if self._bookings.count_active(target.id) > 0:
            raise ValidationError(
                "Cannot delete account with active bookings. "
                "Please cancel all bookings first."
            )

        log = logger.bind(
            operation=action.value,
            actor_id=actor.id,
            user_id=target.id,
            remote_ref=target.remote_ref,
        )

        try:
            self._activity.append(
                actor,
                action,
                description,
                affected_entity_id=target.id,
                entity_type="user",
            )
            if not self._accounts.delete(target.id):
                raise NotFoundError()
        except Exception as e:
            self._rollback()
            raise self._as_local_error(e, "Error deleting user") from e

        try:
            self._provider.delete_identity(target.remote_ref)
        except IdentityProviderError as e:
            self._rollback()
            log.error("Remote deletion failed, local deletion rolled back: {}", e)
            raise RemoteProviderError(
                "Error deleting account from authentication provider, changes rolled back",
                detail=str(e),
            ) from e

        try:
            self._session.commit()
        except Exception as e:
            self._rollback()
            log.critical(
                "Remote identity deleted but local deletion did not commit; "
                "reconcile user {} manually",
                target.id,
            )
            error = LocalStoreError("Error deleting user", detail=str(e))
            error.attach_compensation_failure(
                ConsistencyCompensationFailure(
                    action="commit_local_delete",
                    remote_ref=target.remote_ref,
                    detail="Remote identity already deleted; local record kept",
                )
            )
            raise error from e

        log.info("Deleted user {}", target.id)

    def reset_password(self, user_id: int, new_password: str | None, actor: Actor) -> None:
        """Set a new password on the remote identity. Nothing local changes."""
        authorize(actor)
        min_length = get_config().accounts.min_password_length
        if not new_password or len(new_password) < min_length:
            raise ValidationError(f"New password must be at least {min_length} characters")

        target = self._get_target(user_id)
        if target.role == Role.SUPER_ADMIN and not is_super_admin(actor):
            raise AuthorizationError("Only super admins can reset super_admin passwords")

        try:
            self._provider.update_identity(
                target.remote_ref, IdentityFields(password=new_password)
            )
        except IdentityProviderError as e:
            raise RemoteProviderError(
                "Error resetting password in authentication system", detail=str(e)
            ) from e

        try:
            self._activity.append(
                actor,
                ActionType.PASSWORD_RESET,
                f"Reset password for user with ID: {user_id}",
                affected_entity_id=user_id,
                entity_type="user",
            )
            self._session.commit()
        except Exception as e:
            self._rollback()
            logger.bind(user_id=user_id).error("Password reset not recorded: {}", e)
            raise LocalStoreError(
                "Password reset succeeded, but recording it in the activity log failed",
                detail=str(e),
            ) from e
