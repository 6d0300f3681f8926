"""Activity log entity module."""

from .entity import ActionType, ActivityLogEntry
from .repository import ActivityLogRepository
from .table import ActivityLogTable

__all__ = ["ActionType", "ActivityLogEntry", "ActivityLogRepository", "ActivityLogTable"]
