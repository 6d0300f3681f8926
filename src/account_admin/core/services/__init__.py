from .accounts import AccountConsistencyCoordinator, AccountQueryService
from .database import DbManageService, DbSessionService
from .identity_provider import (
    IdentityFields,
    IdentityProviderClient,
    IdentityProviderError,
    KeycloakIdentityProvider,
)

__all__ = [
    "AccountConsistencyCoordinator",
    "AccountQueryService",
    "DbManageService",
    "DbSessionService",
    "IdentityFields",
    "IdentityProviderClient",
    "IdentityProviderError",
    "KeycloakIdentityProvider",
]
