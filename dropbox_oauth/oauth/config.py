"""
Dropbox OAuth2 configuration.

Application credentials and endpoints are loaded from environment
variables once at startup and never change afterwards.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache


logger = logging.getLogger(__name__)


DROPBOX_AUTHORIZE_URL = "https://www.dropbox.com/oauth2/authorize"
DROPBOX_TOKEN_URL = "https://api.dropboxapi.com/oauth2/token"

# Upper bound (seconds) for a whole token-exchange call
DEFAULT_TOKEN_TIMEOUT = 10.0


@dataclass(frozen=True)
class DropboxOAuthConfig:
    """
    Dropbox application settings.

    The redirect URI must match the one registered in the Dropbox app
    console exactly, including scheme and trailing slash.
    """

    app_key: str | None
    app_secret: str | None
    redirect_uri: str
    authorize_url: str = DROPBOX_AUTHORIZE_URL
    token_url: str = DROPBOX_TOKEN_URL
    timeout: float = DEFAULT_TOKEN_TIMEOUT

    @classmethod
    def from_env(cls) -> "DropboxOAuthConfig":
        """
        Load configuration from environment variables.

        Raises:
            ValueError: If DROPBOX_TOKEN_TIMEOUT is not a positive number
        """
        base_url = os.getenv("BASE_URL", "")
        raw_timeout = os.getenv("DROPBOX_TOKEN_TIMEOUT")

        timeout = DEFAULT_TOKEN_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ValueError(
                    f"DROPBOX_TOKEN_TIMEOUT must be a number, got {raw_timeout!r}"
                ) from e
            if timeout <= 0:
                raise ValueError("DROPBOX_TOKEN_TIMEOUT must be positive")

        return cls(
            app_key=os.getenv("DROPBOX_APP_KEY"),
            app_secret=os.getenv("DROPBOX_APP_SECRET"),
            redirect_uri=os.getenv(
                "DROPBOX_REDIRECT_URI", f"{base_url}/oauth/dropbox"
            ),
            authorize_url=os.getenv("DROPBOX_AUTHORIZE_URL", DROPBOX_AUTHORIZE_URL),
            token_url=os.getenv("DROPBOX_TOKEN_URL", DROPBOX_TOKEN_URL),
            timeout=timeout,
        )

    def is_configured(self) -> bool:
        """Check if the app key and secret are both set."""
        return bool(self.app_key and self.app_secret)


@lru_cache()
def get_dropbox_config() -> DropboxOAuthConfig:
    """Get Dropbox configuration singleton."""
    config = DropboxOAuthConfig.from_env()
    if not config.is_configured():
        logger.warning("Dropbox OAuth not configured (missing app key or secret)")
    return config
