"""
Shared test configuration and fixtures.
"""

import os
from unittest.mock import patch

import pytest
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

# Set environment variables before importing app
with patch.dict(
    os.environ,
    {
        "BASE_URL": "http://testserver",
        "DROPBOX_APP_KEY": "test-key",
        "DROPBOX_APP_SECRET": "test-secret",
    },
):
    from dropbox_oauth.main import app

from dropbox_oauth.core.domain import Token
from dropbox_oauth.core.exceptions import OAuthFlowError
from dropbox_oauth.oauth.config import DropboxOAuthConfig, get_dropbox_config
from dropbox_oauth.oauth.dependencies import get_oauth_handler
from dropbox_oauth.oauth.handler import DropboxOAuth2Handler


class RecordingCallbacks:
    """Callbacks that remember every invocation."""

    def __init__(self):
        self.successes: list[Token] = []
        self.failures: list[OAuthFlowError] = []

    async def on_success(self, context: Request, token: Token) -> JSONResponse:
        self.successes.append(token)
        return JSONResponse({"result": "success", "uid": token.uid})

    async def on_failure(self, context: Request, error: OAuthFlowError) -> JSONResponse:
        self.failures.append(error)
        return JSONResponse({"result": "failure", "message": str(error)}, status_code=400)


@pytest.fixture(autouse=True)
def reset_cached_dependencies():
    """Clear cached config/handler singletons between tests."""
    get_dropbox_config.cache_clear()
    get_oauth_handler.cache_clear()
    yield
    get_dropbox_config.cache_clear()
    get_oauth_handler.cache_clear()


@pytest.fixture
def dropbox_config():
    """Dropbox app configuration used by handler tests."""
    return DropboxOAuthConfig(
        app_key="test-key",
        app_secret="test-secret",
        redirect_uri="http://testserver/oauth/dropbox",
        timeout=5.0,
    )


@pytest.fixture
def callbacks():
    return RecordingCallbacks()


@pytest.fixture
def handler(dropbox_config, callbacks):
    return DropboxOAuth2Handler(dropbox_config, callbacks)


@pytest.fixture
def client(handler):
    """Test client with the recording handler injected."""
    app.dependency_overrides[get_oauth_handler] = lambda: handler

    yield TestClient(app)

    app.dependency_overrides.pop(get_oauth_handler, None)
