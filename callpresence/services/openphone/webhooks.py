"""OpenPhone webhook registration."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from callpresence.core.exceptions import WebhookRegistrationError
from callpresence.core.http import error_body, send_with_retry
from callpresence.services.presence.mapper import EventKind

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook/openphone"


class OpenPhoneWebhookRegistrar:
    """Creates the OpenPhone call webhook that feeds this service."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        api_url: str = "https://api.openphone.com/v1",
        retries: int = 1,
    ):
        self.client = client
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.retries = retries

    async def register(self, base_url: str, events: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Register a webhook for call events.

        Args:
            base_url: Public base URL of this service
            events: Event types to subscribe to (defaults to ringing and completed)

        Returns:
            The created webhook as returned by OpenPhone

        Raises:
            WebhookRegistrationError: If OpenPhone rejected the request or was unreachable
        """
        if not self.api_key:
            raise WebhookRegistrationError("OPENPHONE_API_KEY is not configured")

        webhook_data = {
            "url": f"{base_url.rstrip('/')}{WEBHOOK_PATH}",
            "events": events or [kind.value for kind in EventKind],
        }
        logger.info(f"[SETUP] Creating OpenPhone webhook for {webhook_data['url']}")

        try:
            response = await send_with_retry(
                self.client,
                "POST",
                f"{self.api_url}/webhooks",
                retries=self.retries,
                json=webhook_data,
                headers={"Authorization": self.api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_data = error_body(e.response)
            logger.error(
                f"[SETUP] Error creating OpenPhone webhook - "
                f"Status: {e.response.status_code}, Response: {error_data}"
            )
            raise WebhookRegistrationError(
                f"OpenPhone API error: {e.response.status_code}", error_data
            ) from e
        except httpx.RequestError as e:
            logger.error(f"[SETUP] OpenPhone request failed - Error: {type(e).__name__}: {e}")
            raise WebhookRegistrationError(f"OpenPhone request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"[SETUP] OpenPhone response is not JSON - Response: {response.text[:200]}")
            raise WebhookRegistrationError("OpenPhone response is not valid JSON", response.text) from e

        webhook = data.get("data", data) if isinstance(data, dict) else None
        if not isinstance(webhook, dict):
            logger.error(f"[SETUP] Unexpected OpenPhone response: {data}")
            raise WebhookRegistrationError("Unexpected OpenPhone response", data)

        logger.info(f"[SETUP] OpenPhone webhook created successfully: {webhook.get('id')}")
        return webhook
