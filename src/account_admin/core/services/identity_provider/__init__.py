from .base import IdentityFields, IdentityProviderClient, IdentityProviderError
from .keycloak import KeycloakIdentityProvider

__all__ = [
    "IdentityFields",
    "IdentityProviderClient",
    "IdentityProviderError",
    "KeycloakIdentityProvider",
]
