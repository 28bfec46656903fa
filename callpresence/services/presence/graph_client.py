"""Microsoft Graph presence client."""
import logging
import uuid
from urllib.parse import quote

import httpx

from callpresence.core.exceptions import PresenceUpdateError
from callpresence.core.http import error_body, send_with_retry
from callpresence.services.presence.base import PresenceSetter
from callpresence.services.presence.mapper import PresenceDirective
from callpresence.services.presence.token import GraphTokenProvider

logger = logging.getLogger(__name__)


class GraphPresenceClient(PresenceSetter):
    """Sets Teams presence through the Graph ``setPresence`` endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_provider: GraphTokenProvider,
        graph_base_url: str = "https://graph.microsoft.com/v1.0",
        retries: int = 1,
    ):
        self.client = client
        self.token_provider = token_provider
        self.graph_base_url = graph_base_url.rstrip("/")
        self.retries = retries

    def presence_url(self, user: str) -> str:
        return f"{self.graph_base_url}/users/{quote(user, safe='@.')}/presence/setPresence"

    async def set_presence(self, directive: PresenceDirective) -> bool:
        """
        Set a user's Teams presence.

        Args:
            directive: Target user, availability and activity

        Returns:
            True if Graph answered 200

        Raises:
            PresenceUpdateError: If the token or the update request failed
        """
        token = await self.token_provider.get_token()
        body = {
            "sessionId": str(uuid.uuid4()),
            "availability": directive.availability.value,
            "activity": directive.activity.value,
        }

        try:
            response = await send_with_retry(
                self.client,
                "POST",
                self.presence_url(directive.user),
                retries=self.retries,
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_data = error_body(e.response)
            if e.response.status_code == 401:
                self.token_provider.invalidate()
            logger.error(
                f"[PRESENCE] Error setting Teams presence for {directive.user} - "
                f"Status: {e.response.status_code}, Response: {error_data}"
            )
            raise PresenceUpdateError(
                f"Graph setPresence failed: {e.response.status_code}", error_data
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"[PRESENCE] Request failed for {directive.user} - "
                f"Error: {type(e).__name__}: {e}"
            )
            raise PresenceUpdateError(f"Graph setPresence request failed: {e}") from e

        logger.info(
            f"[PRESENCE] Updated Teams presence for {directive.user}: "
            f"{directive.availability.value}/{directive.activity.value}"
        )
        return response.status_code == 200
