"""Presence setter interface."""
from abc import ABC, abstractmethod

from callpresence.services.presence.mapper import PresenceDirective


class PresenceSetter(ABC):
    """Abstract base class for presence update backends."""

    @abstractmethod
    async def set_presence(self, directive: PresenceDirective) -> bool:
        """
        Apply a presence directive.

        Raises:
            PresenceUpdateError: If the update could not be applied
        """
        pass
