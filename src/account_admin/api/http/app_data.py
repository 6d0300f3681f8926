from dataclasses import dataclass

from src.account_admin.core.services import DbSessionService, IdentityProviderClient


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    identity_provider: IdentityProviderClient
