"""
Core domain models for the Dropbox OAuth2 flow.

These models represent the result of a token exchange and are independent
of the web framework hosting the handler.
"""

from pydantic import BaseModel, ConfigDict, Field


class Token(BaseModel):
    """
    Result of an authorization-code exchange.

    Dropbox answers the token endpoint with a JSON object. On success it
    carries the user id and a bearer access token; when the exchange is
    rejected the same object carries an ``error`` field instead.
    """

    uid: str = Field(default="", description="Dropbox user id")
    access_token: str = Field(
        default="", description="Bearer access token for the Dropbox API"
    )
    token_type: str | None = Field(default=None, description="Token type (bearer)")
    account_id: str | None = Field(default=None, description="Dropbox account id")
    error: str | None = Field(
        default=None, description="Provider error code, set instead of a token"
    )
    error_description: str | None = Field(
        default=None, description="Human-readable detail for the error code"
    )

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    @property
    def is_error(self) -> bool:
        """Check if the provider reported an error instead of a token."""
        return bool(self.error)

    @property
    def is_complete(self) -> bool:
        """Check if both the user id and the access token are present."""
        return bool(self.uid and self.access_token)
