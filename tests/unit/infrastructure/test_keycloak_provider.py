"""Unit tests for the Keycloak admin API client."""

from unittest.mock import Mock, patch

import pytest
import requests

from src.account_admin.core.services.identity_provider import (
    IdentityFields,
    IdentityProviderError,
    KeycloakIdentityProvider,
)
from src.account_admin.runtime.config.config_data import IdentityProviderConfig

REQUEST = "src.account_admin.core.services.identity_provider.keycloak.requests.request"


def _response(status_code: int, json_body=None, headers=None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_body is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def provider() -> KeycloakIdentityProvider:
    config = IdentityProviderConfig(
        base_url="http://keycloak.test/",
        realm="shop",
        timeout_seconds=3.0,
    )
    client = KeycloakIdentityProvider(config)
    client.access_token = "token-1"
    return client


class TestAuthenticate:
    def test_password_grant_against_admin_realm(self):
        client = KeycloakIdentityProvider(
            IdentityProviderConfig(base_url="http://keycloak.test")
        )

        with patch(REQUEST, return_value=_response(200, {"access_token": "abc"})) as mock:
            assert client.authenticate() == "abc"

        method, url = mock.call_args.args
        assert method == "post"
        assert url == "http://keycloak.test/realms/master/protocol/openid-connect/token"
        assert mock.call_args.kwargs["data"]["grant_type"] == "password"
        assert mock.call_args.kwargs["timeout"] == 10.0

    def test_rejected_credentials(self):
        client = KeycloakIdentityProvider(IdentityProviderConfig())

        with patch(REQUEST, return_value=_response(401, {"error": "invalid_grant"})):
            with pytest.raises(IdentityProviderError, match="invalid_grant") as exc_info:
                client.authenticate()

        assert exc_info.value.status_code == 401

    def test_token_fetched_lazily(self):
        client = KeycloakIdentityProvider(IdentityProviderConfig())
        responses = [
            _response(200, {"access_token": "abc"}),
            _response(204),
        ]

        with patch(REQUEST, side_effect=responses) as mock:
            client.delete_identity("kc-1")

        assert mock.call_count == 2
        assert mock.call_args.kwargs["headers"]["Authorization"] == "Bearer abc"


class TestCreateIdentity:
    def test_returns_id_from_location(self, provider):
        created = _response(
            201, headers={"Location": "http://keycloak.test/admin/realms/shop/users/abc-123"}
        )

        with patch(REQUEST, return_value=created) as mock:
            remote_ref = provider.create_identity("c@x.io", "secret123", "carl")

        assert remote_ref == "abc-123"
        method, url = mock.call_args.args
        assert (method, url) == ("post", "http://keycloak.test/admin/realms/shop/users")
        body = mock.call_args.kwargs["json"]
        assert body["username"] == "carl"
        assert body["email"] == "c@x.io"
        assert body["credentials"][0]["value"] == "secret123"
        assert mock.call_args.kwargs["timeout"] == 3.0

    def test_conflict_is_provider_error(self, provider):
        conflict = _response(409, {"errorMessage": "User exists with same email"})

        with patch(REQUEST, return_value=conflict):
            with pytest.raises(IdentityProviderError, match="same email") as exc_info:
                provider.create_identity("c@x.io", "secret123", "carl")

        assert exc_info.value.status_code == 409

    def test_missing_location(self, provider):
        with patch(REQUEST, return_value=_response(201)):
            with pytest.raises(IdentityProviderError, match="did not return"):
                provider.create_identity("c@x.io", "secret123", "carl")


class TestUpdateIdentity:
    def test_profile_and_password(self, provider):
        with patch(REQUEST, return_value=_response(204)) as mock:
            provider.update_identity(
                "kc-1",
                IdentityFields(email="n@x.io", display_name="caz", password="n3wpass"),
            )

        password_call, profile_call = mock.call_args_list
        assert profile_call.args == ("put", "http://keycloak.test/admin/realms/shop/users/kc-1")
        assert profile_call.kwargs["json"]["email"] == "n@x.io"
        assert profile_call.kwargs["json"]["username"] == "caz"
        assert password_call.args[1].endswith("/users/kc-1/reset-password")
        assert password_call.kwargs["json"]["value"] == "n3wpass"

    def test_rejected_password_skips_profile_call(self, provider):
        with patch(REQUEST, return_value=_response(400, {"error": "invalidPassword"})) as mock:
            with pytest.raises(IdentityProviderError, match="reset password"):
                provider.update_identity(
                    "kc-1", IdentityFields(email="n@x.io", password="short")
                )

        assert mock.call_count == 1
        assert mock.call_args.args[1].endswith("/reset-password")

    def test_password_only_skips_profile_call(self, provider):
        with patch(REQUEST, return_value=_response(204)) as mock:
            provider.update_identity("kc-1", IdentityFields(password="n3wpass"))

        assert mock.call_count == 1
        assert mock.call_args.args[1].endswith("/reset-password")

    def test_expired_token_is_refreshed_once(self, provider):
        responses = [
            _response(401),
            _response(200, {"access_token": "token-2"}),
            _response(204),
        ]

        with patch(REQUEST, side_effect=responses) as mock:
            provider.update_identity("kc-1", IdentityFields(email="n@x.io"))

        assert mock.call_count == 3
        assert mock.call_args.kwargs["headers"]["Authorization"] == "Bearer token-2"


class TestDeleteIdentity:
    def test_delete(self, provider):
        with patch(REQUEST, return_value=_response(204)) as mock:
            provider.delete_identity("kc-1")

        assert mock.call_args.args == (
            "delete",
            "http://keycloak.test/admin/realms/shop/users/kc-1",
        )

    def test_absent_identity_is_success(self, provider):
        with patch(REQUEST, return_value=_response(404)):
            provider.delete_identity("kc-gone")

    def test_server_error(self, provider):
        with patch(REQUEST, return_value=_response(500)):
            with pytest.raises(IdentityProviderError, match="status 500"):
                provider.delete_identity("kc-1")


class TestTransportFailures:
    def test_timeout(self, provider):
        with patch(REQUEST, side_effect=requests.Timeout("read timed out")):
            with pytest.raises(IdentityProviderError, match="timed out after 3.0s"):
                provider.delete_identity("kc-1")

    def test_connection_error(self, provider):
        with patch(REQUEST, side_effect=requests.ConnectionError("refused")):
            with pytest.raises(IdentityProviderError, match="unreachable"):
                provider.create_identity("c@x.io", "secret123", "carl")
