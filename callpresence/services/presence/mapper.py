"""Call event to Teams presence mapping."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class EventKind(str, Enum):
    """OpenPhone call event types that drive presence."""

    CALL_RINGING = "call.ringing"
    CALL_COMPLETED = "call.completed"


class Availability(str, Enum):
    AVAILABLE = "Available"
    BUSY = "Busy"


class Activity(str, Enum):
    AVAILABLE = "Available"
    IN_A_CALL = "InACall"


class PresenceTarget(BaseModel):
    """Target (availability, activity) pair."""

    availability: Availability
    activity: Activity


class PresenceDirective(PresenceTarget):
    """A presence target addressed to a Teams user."""

    user: str


_EVENT_PRESENCE = {
    EventKind.CALL_RINGING: PresenceTarget(
        availability=Availability.BUSY, activity=Activity.IN_A_CALL
    ),
    EventKind.CALL_COMPLETED: PresenceTarget(
        availability=Availability.AVAILABLE, activity=Activity.AVAILABLE
    ),
}


def map_event_to_presence(event_type: Optional[str]) -> Optional[PresenceTarget]:
    """Return the presence target for an event type, or None if it is not a call event we act on."""
    try:
        kind = EventKind(event_type)
    except ValueError:
        return None
    return _EVENT_PRESENCE[kind]
