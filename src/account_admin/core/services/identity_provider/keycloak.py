"""Keycloak Admin REST API client used as the remote identity store."""

from typing import Any
from urllib.parse import urljoin

import requests
from loguru import logger

from src.account_admin.core.services.identity_provider.base import (
    IdentityFields,
    IdentityProviderError,
)
from src.account_admin.runtime.config.config_data import IdentityProviderConfig


class KeycloakIdentityProvider:
    """Identity provider backed by a Keycloak realm.

    Every request is bounded by ``timeout_seconds``. Timeouts, connection
    failures and unexpected status codes are all raised as
    ``IdentityProviderError``; no call is retried except a single
    re-authentication when the admin token has expired.
    """

    def __init__(self, config: IdentityProviderConfig):
        """Initialize the Keycloak client.

        Args:
            config: Keycloak connection and admin credential settings
        """
        self.base_url = config.base_url.rstrip("/")
        self.realm = config.realm
        self.timeout = config.timeout_seconds
        self._config = config
        self.access_token: str | None = None

    def authenticate(self) -> str:
        """Obtain an admin access token with the password grant.

        Returns:
            Access token string

        Raises:
            IdentityProviderError: If authentication fails
        """
        token_url = urljoin(
            self.base_url,
            f"/realms/{self._config.admin_realm}/protocol/openid-connect/token",
        )

        data = {
            "grant_type": "password",
            "client_id": self._config.admin_client_id,
            "username": self._config.admin_username,
            "password": self._config.admin_password,
        }

        response = self._send("post", token_url, data=data, authenticated=False)
        self._raise_for_status(response, "authenticate")

        token = response.json().get("access_token")
        if not token:
            raise IdentityProviderError("Failed to obtain access token from Keycloak")
        self.access_token = token
        return token

    def _get_headers(self) -> dict[str, str]:
        """Get standard headers for authenticated requests."""
        if not self.access_token:
            self.authenticate()

        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def _send(
        self, method: str, url: str, authenticated: bool = True, **kwargs: Any
    ) -> requests.Response:
        try:
            if authenticated:
                kwargs["headers"] = self._get_headers()
            response = requests.request(method, url, timeout=self.timeout, **kwargs)

            if authenticated and response.status_code == 401:
                logger.info("Keycloak admin token rejected, re-authenticating")
                self.access_token = None
                kwargs["headers"] = self._get_headers()
                response = requests.request(method, url, timeout=self.timeout, **kwargs)

            return response
        except requests.Timeout as e:
            raise IdentityProviderError(
                f"Identity provider timed out after {self.timeout}s"
            ) from e
        except requests.RequestException as e:
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

    @staticmethod
    def _raise_for_status(response: requests.Response, operation: str) -> None:
        if response.status_code < 400:
            return
        try:
            body = response.json()
            reason = body.get("errorMessage") or body.get("error_description") or body.get("error")
        except ValueError:
            reason = None
        raise IdentityProviderError(
            f"Keycloak {operation} failed with status {response.status_code}"
            + (f": {reason}" if reason else ""),
            status_code=response.status_code,
        )

    def _user_url(self, remote_ref: str | None = None) -> str:
        path = f"/admin/realms/{self.realm}/users"
        if remote_ref:
            path = f"{path}/{remote_ref}"
        return urljoin(self.base_url, path)

    def create_identity(self, email: str, password: str, display_name: str) -> str:
        """Create a user in the realm.

        Args:
            email: Login email
            password: Initial password credential
            display_name: Display name, stored as the Keycloak username

        Returns:
            The Keycloak user id taken from the ``Location`` header
        """
        user_data = {
            "username": display_name,
            "email": email,
            "enabled": True,
            "attributes": {"displayName": [display_name]},
            "credentials": [
                {"type": "password", "value": password, "temporary": False}
            ],
        }

        response = self._send("post", self._user_url(), json=user_data)
        self._raise_for_status(response, "create user")

        location = response.headers.get("Location", "")
        remote_ref = location.rstrip("/").rsplit("/", 1)[-1]
        if not remote_ref:
            raise IdentityProviderError("Keycloak did not return the created user id")

        logger.info("Created Keycloak user {}", remote_ref)
        return remote_ref

    def update_identity(self, remote_ref: str, fields: IdentityFields) -> None:
        """Reset the password credential if given, then update profile fields.

        Keycloak takes these as two calls. A rejected password leaves the
        profile untouched.
        """
        representation: dict[str, Any] = {}
        if fields.email is not None:
            representation["email"] = fields.email
        if fields.display_name is not None:
            representation["username"] = fields.display_name
            representation["attributes"] = {"displayName": [fields.display_name]}

        if fields.password is not None:
            response = self._send(
                "put",
                f"{self._user_url(remote_ref)}/reset-password",
                json={"type": "password", "value": fields.password, "temporary": False},
            )
            self._raise_for_status(response, "reset password")

        if representation:
            response = self._send("put", self._user_url(remote_ref), json=representation)
            self._raise_for_status(response, "update user")

        logger.info("Updated Keycloak user {}", remote_ref)

    def delete_identity(self, remote_ref: str) -> None:
        """Delete a user from the realm; an already missing user is not an error."""
        response = self._send("delete", self._user_url(remote_ref))

        if response.status_code == 404:
            logger.warning("Keycloak user {} already absent", remote_ref)
            return

        self._raise_for_status(response, "delete user")
        logger.info("Deleted Keycloak user {}", remote_ref)
