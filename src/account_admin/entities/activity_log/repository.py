"""Activity log repository."""

from sqlalchemy import func
from sqlmodel import Session, select

from src.account_admin.core.models.account import Actor
from src.account_admin.entities.activity_log.entity import ActionType, ActivityLogEntry
from src.account_admin.entities.activity_log.table import ActivityLogTable


class ActivityLogRepository:
    """Append and query audit entries. There is no update or delete."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def append(
        self,
        actor: Actor,
        action_type: ActionType,
        description: str,
        affected_entity_id: int | None = None,
        entity_type: str | None = None,
    ) -> ActivityLogEntry:
        row = ActivityLogTable(
            user_id=actor.id,
            role=actor.role.value,
            action_type=action_type.value,
            description=description,
            affected_entity_id=affected_entity_id,
            entity_type=entity_type,
        )
        self._session.add(row)
        self._session.flush()
        return ActivityLogEntry.model_validate(row, from_attributes=True)

    def list_entries(
        self,
        user_id: int | None = None,
        action_type: str | None = None,
        entity_type: str | None = None,
        affected_entity_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[ActivityLogEntry], int]:
        """Return one page of entries, newest first, and the total match count."""
        conditions = []
        if user_id is not None:
            conditions.append(ActivityLogTable.user_id == user_id)
        if action_type:
            conditions.append(ActivityLogTable.action_type == action_type)
        if entity_type:
            conditions.append(ActivityLogTable.entity_type == entity_type)
        if affected_entity_id is not None:
            conditions.append(ActivityLogTable.affected_entity_id == affected_entity_id)

        statement = select(ActivityLogTable).where(*conditions)
        statement = (
            statement.order_by(
                ActivityLogTable.timestamp.desc(), ActivityLogTable.log_id.desc()
            )
            .limit(limit)
            .offset(offset)
        )
        rows = self._session.exec(statement).all()

        count_statement = select(func.count()).select_from(ActivityLogTable).where(*conditions)
        total = self._session.exec(count_statement).one()

        entries = [ActivityLogEntry.model_validate(row, from_attributes=True) for row in rows]
        return entries, total
