"""Administrative account management endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.account_admin.api.http.deps import (
    get_coordinator,
    get_current_actor,
    get_query_service,
)
from src.account_admin.core.models import (
    AccountCreate,
    AccountPatch,
    Actor,
    OperationResult,
    PasswordReset,
)
from src.account_admin.core.services import (
    AccountConsistencyCoordinator,
    AccountQueryService,
)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=OperationResult)
def create_account(
    data: AccountCreate,
    actor: Actor = Depends(get_current_actor),
    coordinator: AccountConsistencyCoordinator = Depends(get_coordinator),
) -> OperationResult:
    account = coordinator.create_account(data, actor)
    return OperationResult(
        success=True,
        message="User created successfully",
        data={"user_id": account.id, "remote_ref": account.remote_ref},
    )


@router.get("", response_model=OperationResult)
def list_accounts(
    role: str | None = Query(default=None),
    search: str | None = Query(default=None),
    actor: Actor = Depends(get_current_actor),
    queries: AccountQueryService = Depends(get_query_service),
) -> OperationResult:
    accounts = queries.list_accounts(actor, role=role, search=search)
    return OperationResult(
        success=True,
        message=f"Found {len(accounts)} users",
        data=[account.public_view() for account in accounts],
    )


@router.get("/verify-admin", response_model=OperationResult)
def verify_admin(
    actor: Actor = Depends(get_current_actor),
    queries: AccountQueryService = Depends(get_query_service),
) -> OperationResult:
    result = queries.verify_admin(actor)
    return OperationResult(success=True, message="Role verified", data=result)


@router.get("/{user_id}", response_model=OperationResult)
def get_account(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    queries: AccountQueryService = Depends(get_query_service),
) -> OperationResult:
    account = queries.get_account(user_id, actor)
    return OperationResult(
        success=True, message="User retrieved", data=account.public_view()
    )


@router.patch("/{user_id}", response_model=OperationResult)
def update_account(
    user_id: int,
    patch: AccountPatch,
    actor: Actor = Depends(get_current_actor),
    coordinator: AccountConsistencyCoordinator = Depends(get_coordinator),
) -> OperationResult:
    account = coordinator.update_account(user_id, patch, actor)
    return OperationResult(
        success=True, message="User updated successfully", data=account.public_view()
    )


@router.delete("/{user_id}", response_model=OperationResult)
def delete_account(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    coordinator: AccountConsistencyCoordinator = Depends(get_coordinator),
) -> OperationResult:
    coordinator.delete_account(user_id, actor)
    return OperationResult(success=True, message="User deleted successfully")


@router.post("/{user_id}/password", response_model=OperationResult)
def reset_password(
    user_id: int,
    body: PasswordReset,
    actor: Actor = Depends(get_current_actor),
    coordinator: AccountConsistencyCoordinator = Depends(get_coordinator),
) -> OperationResult:
    coordinator.reset_password(user_id, body.new_password, actor)
    return OperationResult(success=True, message="Password reset successfully")
