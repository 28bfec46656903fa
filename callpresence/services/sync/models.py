"""Webhook event and sync result models."""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from callpresence.services.calls.models import CallDirection


class CallObject(BaseModel):
    """The ``data.object`` of an OpenPhone call event."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    direction: Optional[str] = None

    @property
    def call_direction(self) -> Optional[CallDirection]:
        try:
            return CallDirection(self.direction)
        except ValueError:
            return None


class EventData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object: CallObject = Field(default_factory=CallObject)


class WebhookEvent(BaseModel):
    """An inbound OpenPhone webhook event."""

    model_config = ConfigDict(extra="ignore")

    type: str
    id: Optional[str] = None
    data: EventData = Field(default_factory=EventData)


def parse_event(payload: Any) -> Optional[WebhookEvent]:
    """Parse a decoded webhook body, returning None if it is not an event."""
    if not isinstance(payload, dict):
        return None
    try:
        return WebhookEvent.model_validate(payload)
    except ValidationError:
        return None


class SyncOutcome(str, Enum):
    """What the orchestrator did with an event."""

    UPDATED = "updated"
    UNMAPPED = "unmapped"
    IGNORED = "ignored"
    MALFORMED = "malformed"


class SyncResult(BaseModel):
    outcome: SyncOutcome
    event_type: Optional[str] = None
    call_id: Optional[str] = None
    user: Optional[str] = None
    was_tracked: Optional[bool] = None
