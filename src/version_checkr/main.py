from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from version_checkr import __version__
from version_checkr.core.config import config
from version_checkr.core.utils import configure_logging
from version_checkr.event_processors.version_check import VersionCheckProcessor
from version_checkr.integrations.github import GitHubClient
from version_checkr.integrations.secrets import load_private_key
from version_checkr.webhooks.router import router as webhook_router

# --- Application Setup ---

configure_logging(config.logging)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate configuration and build the GitHub collaborators once per process."""
    config.validate()

    private_key = load_private_key(config.github, config.key_storage)
    github_client = GitHubClient(
        app_id=config.github.app_id,
        private_key=private_key,
        api_base_url=config.github.api_base_url,
        timeout=config.version_check.request_timeout,
    )
    app.state.processor = VersionCheckProcessor(
        github_client,
        settings=config.version_check,
        check_name=config.github.app_name,
    )
    logger.info("application_started", environment=config.environment, manifest=config.version_check.manifest_path)

    try:
        yield
    finally:
        await github_client.close()
        logger.info("application_stopped")


app = FastAPI(
    title="Version Checkr",
    description="Checks that pull requests bump the manifest version.",
    version=__version__,
    lifespan=lifespan,
)

# --- Include Routers ---

app.include_router(webhook_router, prefix="/webhooks", tags=["GitHub Webhooks"])

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root() -> dict[str, str]:
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "Version Checkr is running."}
