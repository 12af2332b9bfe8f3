"""Main FastAPI application for the Pullie GitHub bot."""

import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# Configure logging BEFORE importing any modules that use logger
log_level = os.getenv('LOG_LEVEL', 'INFO')
logging.basicConfig(
    level=getattr(logging, log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Import after logging is configured
from fastapi import FastAPI
from pullie import __version__
from pullie.constants import DEFAULT_PORT
from pullie.routers import webhook_router

# Create FastAPI app
app = FastAPI(
    title="Pullie",
    description="GitHub pull request bot with pluggable checks",
    version=__version__
)

app.include_router(webhook_router)  # /, /healthcheck, /api/v1/github


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    from pullie.dependencies import get_settings
    from pullie.plugins.registry import build_default_registry

    settings = get_settings()
    registry = build_default_registry(settings)

    logger.info("Starting Pullie")
    logger.info(f"  - GitHub API: {settings.github_api_url}")
    logger.info(f"  - Plugins: {', '.join(registry.names())}")
    if settings.enterprise_id:
        logger.info(f"  - Restricted to enterprise: {settings.enterprise_id}")
    if settings.no_public_repos:
        logger.info("  - Public repositories disabled")
    if not settings.webhook_secret:
        logger.warning("GITHUB_WEBHOOK_SECRET is not set, webhook signatures will not be verified")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event."""
    logger.info("Shutting down Pullie")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=DEFAULT_PORT, reload=True)
