"""Self-service endpoints for the authenticated caller."""

from fastapi import APIRouter, Depends, Query

from src.account_admin.api.http.deps import (
    get_coordinator,
    get_current_actor,
    get_query_service,
)
from src.account_admin.core.models import AccountPatch, Actor, OperationResult
from src.account_admin.core.services import (
    AccountConsistencyCoordinator,
    AccountQueryService,
)

router = APIRouter(prefix="/me", tags=["profile"])


@router.get("", response_model=OperationResult)
def get_profile(
    actor: Actor = Depends(get_current_actor),
    queries: AccountQueryService = Depends(get_query_service),
) -> OperationResult:
    account = queries.get_profile(actor)
    return OperationResult(
        success=True, message="Profile retrieved", data=account.public_view()
    )


@router.patch("", response_model=OperationResult)
def update_profile(
    patch: AccountPatch,
    actor: Actor = Depends(get_current_actor),
    coordinator: AccountConsistencyCoordinator = Depends(get_coordinator),
) -> OperationResult:
    account = coordinator.update_profile(patch, actor)
    return OperationResult(
        success=True, message="Profile updated successfully", data=account.public_view()
    )


@router.delete("", response_model=OperationResult)
def delete_own_account(
    actor: Actor = Depends(get_current_actor),
    coordinator: AccountConsistencyCoordinator = Depends(get_coordinator),
) -> OperationResult:
    coordinator.delete_own_account(actor)
    return OperationResult(success=True, message="Account deleted successfully")


@router.get("/activity", response_model=OperationResult)
def list_my_activity(
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    actor: Actor = Depends(get_current_actor),
    queries: AccountQueryService = Depends(get_query_service),
) -> OperationResult:
    page = queries.list_my_activity(actor, limit=limit, offset=offset)
    return OperationResult(success=True, message="Activity retrieved", data=page)
