"""Webhook setup and configuration check endpoints."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from callpresence.core.config import settings
from callpresence.core.dependencies import get_webhook_registrar
from callpresence.core.exceptions import WebhookRegistrationError
from callpresence.services.openphone.webhooks import OpenPhoneWebhookRegistrar
from callpresence.services.signature.verifier import SignatureVerifier

router = APIRouter()
logger = logging.getLogger(__name__)


def get_base_url(request: Request) -> str:
    """
    Get the public base URL of this service.

    Uses BASE_URL if set, otherwise the URL the request came in on.
    """
    if settings.base_url:
        return settings.base_url.rstrip("/")
    return str(request.base_url).rstrip("/")


@router.api_route("/setup-webhooks", methods=["GET", "POST"])
async def setup_webhooks(
    request: Request,
    registrar: OpenPhoneWebhookRegistrar = Depends(get_webhook_registrar),
):
    """Register the OpenPhone call webhook (call once after deployment)."""
    base_url = get_base_url(request)
    logger.info(
        f"[SETUP] Setting up OpenPhone webhooks - base URL: {base_url}, "
        f"API key: {'Set' if settings.openphone_api_key else 'Missing'}"
    )

    try:
        webhook = await registrar.register(base_url)
    except WebhookRegistrationError as e:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": e.message, "details": e.response_data},
        )

    return {
        "success": True,
        "webhook": webhook,
        "message": "OpenPhone webhook set up successfully!",
    }


@router.get("/config-check")
async def config_check():
    """Report which settings are configured, without revealing them."""
    return {
        "teams": {
            "tenant_id": bool(settings.teams_tenant_id),
            "client_id": bool(settings.teams_client_id),
            "client_secret": bool(settings.teams_client_secret),
        },
        "openphone": {
            "api_key": bool(settings.openphone_api_key),
            "signature_verification": SignatureVerifier(settings.openphone_webhook_secret).policy.value,
        },
        "base_url": settings.base_url,
    }
