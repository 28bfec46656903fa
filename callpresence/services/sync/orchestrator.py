"""Call-to-presence sync orchestration."""
import logging
from typing import Any

from callpresence.services.calls.tracker import CallStateTracker
from callpresence.services.identity.mapper import IdentityMapper
from callpresence.services.presence.base import PresenceSetter
from callpresence.services.presence.mapper import (
    EventKind,
    PresenceDirective,
    map_event_to_presence,
)
from callpresence.services.sync.models import SyncOutcome, SyncResult, parse_event

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Applies OpenPhone call events to the call tracker and Teams presence.

    ``call.ringing`` marks the user Busy/InACall, ``call.completed`` marks
    them Available/Available. The completed update is sent even when the
    call was never tracked (missed ringing event, restart), so a user cannot
    stay stuck in Busy. Duplicate ringing events re-send the same update.
    """

    def __init__(
        self,
        tracker: CallStateTracker,
        identity_mapper: IdentityMapper,
        presence_setter: PresenceSetter,
    ):
        self.tracker = tracker
        self.identity_mapper = identity_mapper
        self.presence_setter = presence_setter

    async def handle_event(self, payload: Any) -> SyncResult:
        """
        Process one decoded webhook body.

        Returns:
            SyncResult describing what was done

        Raises:
            PresenceUpdateError: If the Teams update failed. The tracker
                change for the event is kept.
        """
        event = parse_event(payload)
        if event is None:
            logger.warning("[SYNC] Ignoring malformed event payload")
            return SyncResult(outcome=SyncOutcome.MALFORMED)

        target = map_event_to_presence(event.type)
        if target is None:
            logger.info(f"[SYNC] Ignoring unhandled event type: {event.type} (id: {event.id})")
            return SyncResult(outcome=SyncOutcome.IGNORED, event_type=event.type)

        call = event.data.object
        if not call.id or not call.user_id:
            logger.warning(
                f"[SYNC] Ignoring malformed {event.type} event (id: {event.id}) - "
                f"call id: {call.id}, user id: {call.user_id}"
            )
            return SyncResult(outcome=SyncOutcome.MALFORMED, event_type=event.type)

        kind = EventKind(event.type)
        async with self.tracker.lock(call.id):
            if kind is EventKind.CALL_RINGING:
                self.tracker.on_call_started(call.id, call.user_id, call.call_direction)
                was_tracked = True
            else:
                was_tracked = self.tracker.on_call_completed(call.id) is not None
                if not was_tracked:
                    logger.info(
                        f"[SYNC] Call {call.id} completed without a tracked start, "
                        f"resetting presence anyway"
                    )

            teams_user = self.identity_mapper.resolve(call.user_id)
            if teams_user is None:
                logger.info(f"[SYNC] No Teams user mapping found for OpenPhone user: {call.user_id}")
                return SyncResult(
                    outcome=SyncOutcome.UNMAPPED,
                    event_type=event.type,
                    call_id=call.id,
                    was_tracked=was_tracked,
                )

            directive = PresenceDirective(
                user=teams_user,
                availability=target.availability,
                activity=target.activity,
            )
            await self.presence_setter.set_presence(directive)

        logger.info(
            f"[SYNC] Updated Teams status for {teams_user}: call {call.id} "
            f"{'ringing' if kind is EventKind.CALL_RINGING else 'completed'} "
            f"({directive.availability.value}/{directive.activity.value})"
        )
        return SyncResult(
            outcome=SyncOutcome.UPDATED,
            event_type=event.type,
            call_id=call.id,
            user=teams_user,
            was_tracked=was_tracked,
        )
