"""
FastAPI dependencies for OAuth endpoints.

Provides dependency injection for the Dropbox handler and its callbacks.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from dropbox_oauth.core.ports import OAuthCallbacks
from dropbox_oauth.oauth.callbacks import JSONCallbacks
from dropbox_oauth.oauth.config import get_dropbox_config
from dropbox_oauth.oauth.handler import DropboxOAuth2Handler


def get_callbacks() -> OAuthCallbacks:
    """Provide the default JSON callbacks."""
    return JSONCallbacks()


@lru_cache()
def get_oauth_handler() -> DropboxOAuth2Handler:
    """
    Provide the Dropbox handler singleton.

    The handler is read-only after construction, so one instance
    serves every request.
    """
    return DropboxOAuth2Handler(get_dropbox_config(), get_callbacks())


# Type alias for cleaner dependency injection
OAuthHandler = Annotated[DropboxOAuth2Handler, Depends(get_oauth_handler)]
