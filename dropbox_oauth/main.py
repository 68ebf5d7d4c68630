"""
FastAPI application serving the Dropbox OAuth2 flow.

This module wires dependencies and configures the application.
Flow logic lives in dropbox_oauth/oauth, domain types in dropbox_oauth/core.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from dropbox_oauth.logging_config import setup_global_logging

setup_global_logging()

from fastapi import FastAPI  # noqa: E402

from dropbox_oauth.oauth import router as oauth_router  # noqa: E402
from dropbox_oauth.oauth.config import get_dropbox_config  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; the handler is created lazily."""
    config = get_dropbox_config()
    logger.info(
        "Application starting up...",
        extra={"dropbox_configured": config.is_configured()},
    )
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="Dropbox OAuth",
    description="Dropbox OAuth2 authorization-code flow",
    version="1.0.0",
    lifespan=lifespan,
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "dropbox-oauth",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(oauth_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
