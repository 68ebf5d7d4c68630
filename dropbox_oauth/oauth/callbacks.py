"""
Callback implementations for the OAuth handler.

- FunctionCallbacks adapts a plain pair of functions
- JSONCallbacks is the default pair used by the reference application
"""

import inspect
import logging
from typing import Any, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse

from dropbox_oauth.core.domain import Token
from dropbox_oauth.core.exceptions import (
    OAuthFlowError,
    ProviderDeniedError,
    ProviderTokenError,
)


logger = logging.getLogger(__name__)


SuccessCallback = Callable[[Request, Token], Any]
FailureCallback = Callable[[Request, OAuthFlowError], Any]


class FunctionCallbacks:
    """
    Wraps a success function and a failure function.

    Either function may be sync or async.
    """

    def __init__(self, success: SuccessCallback, failure: FailureCallback):
        self._success = success
        self._failure = failure

    async def on_success(self, context: Request, token: Token) -> Any:
        result = self._success(context, token)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def on_failure(self, context: Request, error: OAuthFlowError) -> Any:
        result = self._failure(context, error)
        if inspect.isawaitable(result):
            result = await result
        return result


class JSONCallbacks:
    """
    Renders flow outcomes as JSON responses.

    The access token is never echoed back to the browser; applications
    that need to keep it should provide their own callbacks.
    """

    async def on_success(self, context: Request, token: Token) -> JSONResponse:
        logger.info(f"Dropbox connected for uid {token.uid}")
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "status": "success",
                "uid": token.uid,
            },
        )

    async def on_failure(self, context: Request, error: OAuthFlowError) -> JSONResponse:
        if isinstance(error, (ProviderDeniedError, ProviderTokenError)):
            status_code = status.HTTP_401_UNAUTHORIZED
        else:
            status_code = status.HTTP_502_BAD_GATEWAY

        logger.error(f"Dropbox OAuth failed: {error}")
        return JSONResponse(
            status_code=status_code,
            content={
                "status": "error",
                "message": str(error),
            },
        )
