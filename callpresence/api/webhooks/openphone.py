"""OpenPhone webhook endpoint."""
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from callpresence.core.dependencies import get_signature_verifier, get_sync_orchestrator
from callpresence.core.exceptions import PresenceUpdateError
from callpresence.services.signature.verifier import SIGNATURE_HEADER, SignatureVerifier
from callpresence.services.sync.orchestrator import SyncOrchestrator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhook/openphone")
async def handle_openphone_event(
    request: Request,
    verifier: SignatureVerifier = Depends(get_signature_verifier),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
):
    """
    Handle an OpenPhone call event.

    Always answers 200 once the signature checks out, including for events
    that are ignored or whose Teams update failed, so OpenPhone does not
    redeliver them.
    """
    raw_payload = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    if not verifier.verify(raw_payload, signature):
        logger.error(
            f"[WEBHOOK] Invalid OpenPhone webhook signature - "
            f"Client: {request.client.host if request.client else 'unknown'}"
        )
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = json.loads(raw_payload)
    except ValueError:
        logger.warning(f"[WEBHOOK] Body is not valid JSON ({len(raw_payload)} bytes), ignoring")
        return Response(content="OK", media_type="text/plain")

    if isinstance(event, dict):
        data = event.get("data")
        call_data = data.get("object") if isinstance(data, dict) else None
        logger.info(
            f"[WEBHOOK] Received OpenPhone event: {event.get('type')} - "
            f"id: {event.get('id')}, "
            f"userId: {call_data.get('userId') if isinstance(call_data, dict) else None}"
        )

    try:
        result = await orchestrator.handle_event(event)
        logger.debug(f"[WEBHOOK] Event processed - outcome: {result.outcome.value}")
    except PresenceUpdateError as e:
        logger.error(
            f"[WEBHOOK] Teams presence update failed, acknowledging event anyway - "
            f"Error: {type(e).__name__}: {e.message}"
        )
    except Exception as e:
        logger.error(
            f"[WEBHOOK] Error handling OpenPhone webhook - Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Internal server error")

    return Response(content="OK", media_type="text/plain")
