"""
OAuth2 API endpoints.

A single route serves both legs of the Dropbox flow:
- GET /oauth/dropbox - redirect to Dropbox, or handle the redirect back
- POST /oauth/dropbox - same, for form-encoded callbacks
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

from dropbox_oauth.oauth.dependencies import OAuthHandler


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["oauth"])


@router.api_route("/dropbox", methods=["GET", "POST"])
async def dropbox_oauth(request: Request, handler: OAuthHandler) -> Response:
    """
    Run one step of the Dropbox authorization-code flow.

    Args:
        request: Starlette request (code, error, error_description)
        handler: Dropbox OAuth handler

    Returns:
        Redirect to Dropbox, or the callback's response

    Raises:
        HTTPException: 503 if the Dropbox app is not configured
    """
    if not handler.config.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dropbox OAuth is not configured",
        )

    return await handler.dispatch(request)
