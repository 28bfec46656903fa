"""Microsoft Graph access token acquisition (client credentials)."""
import logging
import time
from typing import Callable, Optional

import httpx

from callpresence.core.exceptions import TokenAcquisitionError
from callpresence.core.http import error_body, send_with_retry

logger = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"
EXPIRY_SKEW_SECONDS = 60


class GraphTokenProvider:
    """Fetches and caches an app-only Graph bearer token."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        tenant_id: Optional[str],
        client_id: Optional[str],
        client_secret: Optional[str],
        login_base_url: str = "https://login.microsoftonline.com",
        retries: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.login_base_url = login_base_url.rstrip("/")
        self.retries = retries
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0

    @property
    def token_url(self) -> str:
        return f"{self.login_base_url}/{self.tenant_id}/oauth2/v2.0/token"

    def _cached_token(self) -> Optional[str]:
        if self._token and self._clock() < self._expires_at:
            return self._token
        return None

    async def get_token(self) -> str:
        """Return a valid access token, fetching a new one if none is cached or it expired."""
        token = self._cached_token()
        if token:
            return token

        if not (self.tenant_id and self.client_id and self.client_secret):
            raise TokenAcquisitionError("Teams client credentials are not configured")

        try:
            response = await send_with_retry(
                self.client,
                "POST",
                self.token_url,
                retries=self.retries,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "scope": GRAPH_SCOPE,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_data = error_body(e.response)
            logger.error(
                f"[TOKEN] Error getting Teams access token - "
                f"Status: {e.response.status_code}, Response: {error_data}"
            )
            raise TokenAcquisitionError(
                f"Token request failed: {e.response.status_code}", error_data
            ) from e
        except httpx.RequestError as e:
            logger.error(f"[TOKEN] Token request failed - Error: {type(e).__name__}: {e}")
            raise TokenAcquisitionError(f"Token request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"[TOKEN] Token response is not JSON - Response: {response.text[:200]}")
            raise TokenAcquisitionError("Token response is not valid JSON", response.text) from e

        try:
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            access_token = data.get("access_token")
            expires_in = int(data.get("expires_in", 3600))
        except (TypeError, ValueError) as e:
            logger.error(f"[TOKEN] Unexpected token response - Error: {e}, Response: {data}")
            raise TokenAcquisitionError(f"Unexpected token response: {e}", data) from e

        if not access_token or not isinstance(access_token, str):
            raise TokenAcquisitionError("Token response did not include an access_token", data)

        self._token = access_token
        self._expires_at = self._clock() + max(expires_in - EXPIRY_SKEW_SECONDS, 0)
        logger.debug(f"[TOKEN] Obtained Teams access token (expires in {expires_in}s)")
        return access_token

    def invalidate(self) -> None:
        """Drop the cached token."""
        self._token = None
        self._expires_at = 0.0
