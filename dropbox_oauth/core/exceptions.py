"""
Domain exceptions for the OAuth2 authorization-code flow.

Every failure path of a request ends up as one of these exceptions and is
handed to the failure callback. None of them is retried.
"""


class OAuthFlowError(Exception):
    """Base exception for all OAuth flow failures."""

    pass


class ProviderDeniedError(OAuthFlowError):
    """
    Raised when the provider redirects back with an ``error`` parameter.

    Typically the user declined consent. See RFC 6749 section 4.1.2.1.
    """

    def __init__(self, code: str, description: str = ""):
        self.code = code
        self.description = description
        super().__init__(f"{code}: {description}")


class TokenExchangeError(OAuthFlowError):
    """
    Raised when the token-exchange POST fails.

    Covers network errors, timeouts and unexpected HTTP statuses.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedTokenResponseError(TokenExchangeError):
    """Raised when the token endpoint returns an undecodable or incomplete body."""

    pass


class ProviderTokenError(OAuthFlowError):
    """Raised when the token endpoint answers with an ``error`` field."""

    def __init__(self, code: str, description: str | None = None):
        self.code = code
        self.description = description
        message = f"{code}: {description}" if description else code
        super().__init__(message)
