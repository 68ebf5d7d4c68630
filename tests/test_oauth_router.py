"""
Tests for the OAuth router wiring.
"""

import os
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient
from respx import MockRouter

from dropbox_oauth.main import app
from dropbox_oauth.oauth.callbacks import JSONCallbacks
from dropbox_oauth.oauth.config import DROPBOX_TOKEN_URL, DropboxOAuthConfig
from dropbox_oauth.oauth.dependencies import get_oauth_handler
from dropbox_oauth.oauth.handler import DropboxOAuth2Handler


ENV = {
    "BASE_URL": "http://testserver",
    "DROPBOX_APP_KEY": "env-key",
    "DROPBOX_APP_SECRET": "env-secret",
}


class TestDefaultWiring:
    """Tests for the handler built from the environment."""

    def test_redirect_uses_env_config(self):
        with patch.dict(os.environ, ENV, clear=True):
            response = TestClient(app).get("/oauth/dropbox", follow_redirects=False)

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith("https://www.dropbox.com/oauth2/authorize?")
        assert "client_id=env-key" in location
        assert "redirect_uri=http%3A%2F%2Ftestserver%2Foauth%2Fdropbox" in location

    def test_handler_is_singleton(self):
        with patch.dict(os.environ, ENV, clear=True):
            assert get_oauth_handler() is get_oauth_handler()

    def test_provider_denied_renders_401(self):
        with patch.dict(os.environ, ENV, clear=True):
            response = TestClient(app).get(
                "/oauth/dropbox",
                params={"error": "access_denied", "error_description": "User declined"},
            )

        assert response.status_code == 401
        assert response.json() == {
            "status": "error",
            "message": "access_denied: User declined",
        }

    def test_success_renders_uid_without_token(self, respx_mock: MockRouter):
        respx_mock.post(DROPBOX_TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"uid": "42", "access_token": "abc"})
        )

        with patch.dict(os.environ, ENV, clear=True):
            response = TestClient(app).get("/oauth/dropbox", params={"code": "auth-code"})

        assert response.status_code == 200
        assert response.json() == {"status": "success", "uid": "42"}
        assert "abc" not in response.text

    def test_transport_failure_renders_502(self, respx_mock: MockRouter):
        respx_mock.post(DROPBOX_TOKEN_URL).mock(
            side_effect=httpx.ConnectError("Connection refused")
        )

        with patch.dict(os.environ, ENV, clear=True):
            response = TestClient(app).get("/oauth/dropbox", params={"code": "auth-code"})

        assert response.status_code == 502
        assert response.json()["status"] == "error"


class TestUnconfigured:
    """Tests for a missing Dropbox app key/secret."""

    def test_returns_503(self, respx_mock: MockRouter):
        config = DropboxOAuthConfig(
            app_key=None, app_secret=None, redirect_uri="http://testserver/oauth/dropbox"
        )
        handler = DropboxOAuth2Handler(config, JSONCallbacks())
        app.dependency_overrides[get_oauth_handler] = lambda: handler

        try:
            response = TestClient(app).get(
                "/oauth/dropbox", params={"code": "auth-code"}, follow_redirects=False
            )
        finally:
            app.dependency_overrides.pop(get_oauth_handler, None)

        assert response.status_code == 503
        assert respx_mock.calls.call_count == 0
