"""
Dropbox OAuth2 authorization-code handler.

Mounted on a route, the handler serves both legs of the flow:
- no ``code`` parameter: redirect the browser to the Dropbox consent page
- ``code`` parameter: exchange it for a bearer token, then report the
  outcome through the success or failure callback
- ``error`` parameter: the user (or Dropbox) refused, report the failure

https://www.dropbox.com/developers/documentation/http/documentation#oauth2-authorize
"""

import asyncio
import logging

import httpx
from authlib.common.urls import add_params_to_uri
from fastapi import Request, status
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError

from dropbox_oauth.core.domain import Token
from dropbox_oauth.core.exceptions import (
    MalformedTokenResponseError,
    OAuthFlowError,
    ProviderDeniedError,
    ProviderTokenError,
    TokenExchangeError,
)
from dropbox_oauth.core.ports import OAuthCallbacks
from dropbox_oauth.oauth.config import DropboxOAuthConfig


logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# Characters of a provider response body kept in log messages
MAX_LOGGED_BODY = 500


class DropboxOAuth2Handler:
    """
    Handles the authorization-code flow for a single Dropbox app.

    The handler holds only read-only configuration and is safe to share
    across concurrent requests. Tokens are never stored on the instance;
    they reach the application through the success callback.
    """

    def __init__(
        self,
        config: DropboxOAuthConfig,
        callbacks: OAuthCallbacks[Request],
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            config: Dropbox app credentials, redirect URI and endpoints
            callbacks: Success/failure callbacks owned by the application
            http_client: Optional shared client for the token exchange.
                A short-lived client is opened per exchange when omitted.
        """
        self._config = config
        self._callbacks = callbacks
        self._http_client = http_client

    @property
    def config(self) -> DropboxOAuthConfig:
        return self._config

    def build_authorize_url(self) -> str:
        """Build the Dropbox consent page URL for this app."""
        return add_params_to_uri(
            self._config.authorize_url,
            [
                ("client_id", self._config.app_key or ""),
                ("response_type", "code"),
                ("redirect_uri", self._config.redirect_uri),
            ],
        )

    async def exchange_token(self, code: str, timeout: float | None = None) -> Token:
        """
        Convert an authorization code into a bearer token.

        A single POST is made to the token endpoint; it is never retried.
        A token carrying a provider ``error`` is returned as-is, so callers
        must check ``Token.is_error`` before using it.

        Args:
            code: Authorization code from the Dropbox redirect
            timeout: Deadline in seconds for the whole call
                (defaults to the configured timeout)

        Returns:
            The decoded token response

        Raises:
            ValueError: If the code is empty
            TokenExchangeError: On network failure, timeout or unexpected status
            MalformedTokenResponseError: If the body is not a usable token response
        """
        if not code:
            raise ValueError("Authorization code must not be empty")

        deadline = self._config.timeout if timeout is None else timeout
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self._config.app_key or "",
            "client_secret": self._config.app_secret or "",
            "redirect_uri": self._config.redirect_uri,
        }

        try:
            async with asyncio.timeout(deadline):
                response = await self._post(data, deadline)
        except TimeoutError as e:
            logger.error(f"Token exchange timed out after {deadline}s")
            raise TokenExchangeError(
                f"Token exchange timed out after {deadline}s"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Network error during token exchange: {e}")
            raise TokenExchangeError(
                f"Network error during token exchange: {e}"
            ) from e

        return self._parse_token(response)

    async def _post(self, data: dict[str, str], timeout: float) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if self._http_client is not None:
            return await self._http_client.post(
                self._config.token_url, data=data, headers=headers
            )

        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.post(self._config.token_url, data=data, headers=headers)

    def _parse_token(self, response: httpx.Response) -> Token:
        """
        Decode the token endpoint response.

        Dropbox reports a rejected code as a JSON error object (usually with
        HTTP 400), which is returned as a Token with ``error`` set.
        """
        status_code = response.status_code

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            if not response.is_success:
                logger.error(
                    f"Token endpoint returned HTTP {status_code}: {response.text[:MAX_LOGGED_BODY]}"
                )
                raise TokenExchangeError(
                    f"Token endpoint returned HTTP {status_code}",
                    status_code=status_code,
                )
            logger.error(f"Token endpoint returned a non-JSON-object body: {response.text[:MAX_LOGGED_BODY]}")
            raise MalformedTokenResponseError(
                "Token response is not a JSON object", status_code=status_code
            )

        try:
            token = Token.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Token response failed validation: {e}")
            raise MalformedTokenResponseError(
                f"Failed to parse token response: {e}", status_code=status_code
            ) from e

        if token.is_error:
            return token

        if not response.is_success:
            logger.error(f"Token endpoint returned HTTP {status_code} without an error field")
            raise TokenExchangeError(
                f"Token endpoint returned HTTP {status_code}",
                status_code=status_code,
            )

        if not token.is_complete:
            logger.error("Token response is missing uid or access_token")
            raise MalformedTokenResponseError(
                "Token response is missing uid or access_token",
                status_code=status_code,
            )

        return token

    async def dispatch(self, request: Request) -> Response:
        """
        Serve one request of the authorization-code flow.

        Evaluated in order, first match wins:
        1. ``error`` present: failure callback with "<error>: <error_description>"
        2. ``code`` missing: 302 redirect to the consent page
        3. otherwise: exchange the code, then success or failure callback

        Args:
            request: Incoming request (query string or form body)

        Returns:
            The redirect, or whatever the invoked callback returned
        """
        params = await _request_params(request)
        error_code = params.get("error", "")
        code = params.get("code", "")

        if error_code:
            logger.warning(
                f"Dropbox authorization denied: {error_code}",
                extra={"provider": "dropbox", "oauth_error": error_code},
            )
            denied = ProviderDeniedError(error_code, params.get("error_description", ""))
            return await self._fail(request, denied)

        if not code:
            return RedirectResponse(
                url=self.build_authorize_url(),
                status_code=status.HTTP_302_FOUND,
            )

        try:
            token = await self.exchange_token(code)
        except TokenExchangeError as e:
            return await self._fail(request, e)

        if token.is_error:
            logger.warning(
                f"Dropbox rejected token exchange: {token.error}",
                extra={"provider": "dropbox", "oauth_error": token.error},
            )
            rejected = ProviderTokenError(token.error or "", token.error_description)
            return await self._fail(request, rejected)

        logger.info(
            "Dropbox token exchange succeeded",
            extra={"provider": "dropbox", "dropbox_uid": token.uid},
        )
        return await self._callbacks.on_success(request, token)

    async def _fail(self, request: Request, error: OAuthFlowError) -> Response:
        return await self._callbacks.on_failure(request, error)


async def _request_params(request: Request) -> dict[str, str]:
    """
    Collect flow parameters from the query string and form body.

    The first value of a repeated key is used. Form values take
    precedence over query values.
    """
    params: dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, value)

    media_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if request.method == "POST" and media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        form_params: dict[str, str] = {}
        for key, value in form.multi_items():
            if isinstance(value, str):
                form_params.setdefault(key, value)
        params.update(form_params)

    return params
