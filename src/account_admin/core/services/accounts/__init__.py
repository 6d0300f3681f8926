from .coordinator import AccountConsistencyCoordinator, check_password, parse_role
from .queries import AccountQueryService

__all__ = [
    "AccountConsistencyCoordinator",
    "AccountQueryService",
    "check_password",
    "parse_role",
]
