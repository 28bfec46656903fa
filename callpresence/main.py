"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from callpresence.api import health, setup
from callpresence.api.webhooks import openphone
from callpresence.core.config import settings
from callpresence.core.dependencies import close_http_client
from callpresence.core.logging import setup_logging
from callpresence.services.signature.verifier import SignatureVerifier, VerificationPolicy

logger = logging.getLogger(__name__)


def log_startup_config() -> None:
    """Log which settings are present, without their values."""
    logger.info("Teams-OpenPhone sync service starting")
    logger.info(f"- TEAMS_TENANT_ID: {'Set' if settings.teams_tenant_id else 'Missing'}")
    logger.info(f"- TEAMS_CLIENT_ID: {'Set' if settings.teams_client_id else 'Missing'}")
    logger.info(f"- TEAMS_CLIENT_SECRET: {'Set' if settings.teams_client_secret else 'Missing'}")
    logger.info(f"- OPENPHONE_API_KEY: {'Set' if settings.openphone_api_key else 'Missing'}")
    logger.info(f"- BASE_URL: {settings.base_url or 'not set'}")
    if SignatureVerifier(settings.openphone_webhook_secret).policy is VerificationPolicy.DISABLED:
        logger.warning(
            "OPENPHONE_WEBHOOK_SECRET is not set - webhook signatures are NOT verified (insecure)"
        )
    logger.info("After deployment, visit /setup-webhooks to configure OpenPhone webhooks")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    log_startup_config()
    yield
    # Shutdown
    await close_http_client()


app = FastAPI(
    title="Teams-OpenPhone Presence Sync",
    description="Updates Microsoft Teams presence from OpenPhone call events",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(openphone.router, tags=["webhooks"])
app.include_router(setup.router, tags=["setup"])


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run("callpresence.main:app", host=settings.host, port=settings.port)
