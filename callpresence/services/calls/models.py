"""Call tracking models."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class CallDirection(str, Enum):
    """Call direction as reported by OpenPhone."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


class CallRecord(BaseModel):
    """A call currently believed to be active."""

    call_id: str
    provider_user_id: str
    start_time: datetime
    direction: Optional[CallDirection] = None

    def duration_ms(self, now: datetime) -> int:
        """Milliseconds elapsed since the call was first observed."""
        return int((now - self.start_time).total_seconds() * 1000)
