"""
Error taxonomy for the event proxy.

Malformed provider events are not errors - the normalizer filters them out.
Everything here propagates to the request handler, which is the only place
exceptions are turned into a response.
"""
from typing import Optional


class EventProxyError(Exception):
    """Base class for event proxy errors."""
    pass


class ConfigurationError(EventProxyError):
    """Raised at startup when required configuration is missing."""
    pass


class AuthenticationError(EventProxyError):
    """Raised when a webhook request carries a missing or wrong credential."""
    pass


class DispatchError(EventProxyError):
    """Raised when a notification could not be published to its queue."""

    def __init__(self, notification_type: str, queue_name: Optional[str], message: str = ""):
        self.notification_type = notification_type
        self.queue_name = queue_name
        super().__init__(
            message or f"Failed to publish {notification_type} notification to {queue_name}"
        )
