"""Application exceptions."""
from typing import Any, Optional


class PresenceSyncError(Exception):
    """Base class for call-to-presence sync errors."""

    def __init__(self, message: str, response_data: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.response_data = response_data


class PresenceUpdateError(PresenceSyncError):
    """Raised when a presence update could not be applied."""


class TokenAcquisitionError(PresenceUpdateError):
    """Raised when no Graph access token could be obtained."""


class WebhookRegistrationError(PresenceSyncError):
    """Raised when the OpenPhone webhook could not be created."""
