"""Shared outbound HTTP helpers."""
import logging

import httpx

logger = logging.getLogger(__name__)


async def send_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    retries: int = 1,
    **kwargs,
) -> httpx.Response:
    """
    Send a request, retrying on transport failures (connection errors, timeouts).

    HTTP error statuses are returned to the caller as-is and never retried.
    """
    attempt = 0
    while True:
        try:
            return await client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            if attempt >= retries:
                raise
            attempt += 1
            logger.warning(
                f"[HTTP] {method} {url} failed ({type(e).__name__}: {e}), "
                f"retrying ({attempt}/{retries})"
            )


def error_body(response: httpx.Response):
    """Decoded JSON error body, falling back to raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text
