"""
Port definitions (interfaces) for the OAuth flow.

The handler reports every outcome through this port, so the embedding
application decides how a success or a failure is rendered and what is
done with the token.
"""

from typing import Any, Protocol, TypeVar

from dropbox_oauth.core.domain import Token
from dropbox_oauth.core.exceptions import OAuthFlowError


ContextT = TypeVar("ContextT", contravariant=True)


class OAuthCallbacks(Protocol[ContextT]):
    """
    Port (interface) for the success and failure callbacks.

    ``ContextT`` is the request/response context owned by the caller. In
    this repo it is the Starlette request, and the return value of either
    callback is the response sent to the browser.
    """

    async def on_success(self, context: ContextT, token: Token) -> Any:
        """
        Handle a completed exchange.

        Args:
            context: The caller's request context
            token: A valid token (no error, uid and access token present)

        Returns:
            The response to send
        """
        ...

    async def on_failure(self, context: ContextT, error: OAuthFlowError) -> Any:
        """
        Handle any failed step of the flow.

        Args:
            context: The caller's request context
            error: The failure that ended the request

        Returns:
            The response to send
        """
        ...
