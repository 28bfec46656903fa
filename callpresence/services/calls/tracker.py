"""In-memory tracker of active calls."""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict, List, Optional

from callpresence.services.calls.models import CallDirection, CallRecord

logger = logging.getLogger(__name__)


class CallStateTracker:
    """
    Table of calls currently believed to be active, keyed by call id.

    State lives only in memory and is lost on restart. Callers that
    read-modify-write state for a call should hold ``lock(call_id)``.
    """

    def __init__(self):
        self._calls: Dict[str, CallRecord] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @asynccontextmanager
    async def lock(self, call_id: str) -> AsyncIterator[None]:
        """Hold the per-call lock for ``call_id``."""
        lock = self._locks.get(call_id)
        if lock is None:
            lock = self._locks[call_id] = asyncio.Lock()
        self._lock_users[call_id] = self._lock_users.get(call_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[call_id] -= 1
            if self._lock_users[call_id] == 0:
                del self._lock_users[call_id]
                del self._locks[call_id]

    def on_call_started(
        self,
        call_id: str,
        provider_user_id: str,
        direction: Optional[CallDirection] = None,
    ) -> CallRecord:
        """Record a ringing call, replacing any existing record for it."""
        record = CallRecord(
            call_id=call_id,
            provider_user_id=provider_user_id,
            start_time=datetime.now(timezone.utc),
            direction=direction,
        )
        if call_id in self._calls:
            logger.debug(f"[TRACKER] Call {call_id} already tracked, replacing record")
        self._calls[call_id] = record
        return record

    def on_call_completed(self, call_id: str) -> Optional[CallRecord]:
        """Remove and return the record for ``call_id``, or None if untracked."""
        record = self._calls.pop(call_id, None)
        if record is None:
            logger.debug(f"[TRACKER] Call {call_id} completed but was not tracked")
        return record

    def get(self, call_id: str) -> Optional[CallRecord]:
        return self._calls.get(call_id)

    def snapshot(self) -> List[CallRecord]:
        """Active calls, oldest first."""
        return sorted(self._calls.values(), key=lambda record: record.start_time)

    def size(self) -> int:
        return len(self._calls)

    def clear(self) -> None:
        self._calls.clear()
