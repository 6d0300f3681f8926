"""Audit trail endpoints."""

from fastapi import APIRouter, Depends, Query

from src.account_admin.api.http.deps import get_current_actor, get_query_service
from src.account_admin.core.models import Actor, OperationResult
from src.account_admin.core.services import AccountQueryService

router = APIRouter(prefix="/activity-logs", tags=["activity-logs"])


@router.get("", response_model=OperationResult)
def list_activity(
    user_id: int | None = Query(default=None),
    action_type: str | None = Query(default=None),
    entity_type: str | None = Query(default=None),
    affected_entity_id: int | None = Query(default=None),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    actor: Actor = Depends(get_current_actor),
    queries: AccountQueryService = Depends(get_query_service),
) -> OperationResult:
    page = queries.list_activity(
        actor,
        user_id=user_id,
        action_type=action_type,
        entity_type=entity_type,
        affected_entity_id=affected_entity_id,
        limit=limit,
        offset=offset,
    )
    return OperationResult(success=True, message="Activity logs retrieved", data=page)
