"""Health and status endpoints."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from callpresence.core.dependencies import get_call_tracker
from callpresence.services.calls.tracker import CallStateTracker

router = APIRouter()
logger = logging.getLogger(__name__)


class ActiveCallResponse(BaseModel):
    """Active call response model."""
    call_id: str
    user_id: str
    start_time: datetime
    direction: Optional[str] = None
    duration_ms: int


class StatusResponse(BaseModel):
    """Status response model."""
    active_calls: List[ActiveCallResponse]


@router.get("/health")
async def health_check(
    request: Request,
    tracker: CallStateTracker = Depends(get_call_tracker),
):
    """Health check endpoint."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "active_calls": tracker.size(),
    }


@router.get("/status", response_model=StatusResponse)
async def get_status(tracker: CallStateTracker = Depends(get_call_tracker)):
    """List the calls currently tracked as active."""
    now = datetime.now(timezone.utc)
    return StatusResponse(
        active_calls=[
            ActiveCallResponse(
                call_id=record.call_id,
                user_id=record.provider_user_id,
                start_time=record.start_time,
                direction=record.direction.value if record.direction else None,
                duration_ms=record.duration_ms(now),
            )
            for record in tracker.snapshot()
        ]
    )
