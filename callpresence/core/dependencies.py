"""FastAPI dependencies."""
from typing import Optional

import httpx
from fastapi import Depends

from callpresence.core.config import settings
from callpresence.services.calls.tracker import CallStateTracker
from callpresence.services.identity.mapper import IdentityMapper, load_identity_mapping
from callpresence.services.openphone.webhooks import OpenPhoneWebhookRegistrar
from callpresence.services.presence.base import PresenceSetter
from callpresence.services.presence.graph_client import GraphPresenceClient
from callpresence.services.presence.token import GraphTokenProvider
from callpresence.services.signature.verifier import SignatureVerifier
from callpresence.services.sync.orchestrator import SyncOrchestrator

# Process-wide instances, created on first use.
# Providers are async so they run on the event loop thread, never concurrently.
_call_tracker: Optional[CallStateTracker] = None
_identity_mapper: Optional[IdentityMapper] = None
_http_client: Optional[httpx.AsyncClient] = None
_presence_setter: Optional[PresenceSetter] = None


async def get_call_tracker() -> CallStateTracker:
    """Get the process-wide call tracker."""
    global _call_tracker
    if _call_tracker is None:
        _call_tracker = CallStateTracker()
    return _call_tracker


async def get_identity_mapper() -> IdentityMapper:
    """Get the identity mapper loaded from the configured mapping file."""
    global _identity_mapper
    if _identity_mapper is None:
        _identity_mapper = IdentityMapper(load_identity_mapping(settings.user_mapping_file))
    return _identity_mapper


def get_signature_verifier() -> SignatureVerifier:
    """Get the webhook signature verifier."""
    return SignatureVerifier(settings.openphone_webhook_secret)


async def get_http_client() -> httpx.AsyncClient:
    """Get the shared outbound HTTP client."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    return _http_client


async def get_presence_setter(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> PresenceSetter:
    """Get the Graph presence client (its token cache lives as long as the process)."""
    global _presence_setter
    if _presence_setter is None:
        token_provider = GraphTokenProvider(
            client,
            tenant_id=settings.teams_tenant_id,
            client_id=settings.teams_client_id,
            client_secret=settings.teams_client_secret,
            login_base_url=settings.login_base_url,
            retries=settings.http_retries,
        )
        _presence_setter = GraphPresenceClient(
            client,
            token_provider,
            graph_base_url=settings.graph_base_url,
            retries=settings.http_retries,
        )
    return _presence_setter


def get_sync_orchestrator(
    tracker: CallStateTracker = Depends(get_call_tracker),
    identity_mapper: IdentityMapper = Depends(get_identity_mapper),
    presence_setter: PresenceSetter = Depends(get_presence_setter),
) -> SyncOrchestrator:
    """Get the sync orchestrator."""
    return SyncOrchestrator(tracker, identity_mapper, presence_setter)


def get_webhook_registrar(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> OpenPhoneWebhookRegistrar:
    """Get the OpenPhone webhook registrar."""
    return OpenPhoneWebhookRegistrar(
        client,
        api_key=settings.openphone_api_key,
        api_url=settings.openphone_api_url,
        retries=settings.http_retries,
    )


async def close_http_client() -> None:
    """Close the shared HTTP client and drop the presence client bound to it."""
    global _http_client, _presence_setter
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None
    _presence_setter = None
