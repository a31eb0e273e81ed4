"""
Errors

Exception hierarchy shared by the codec, the state engine and the
exchange protocol.
"""

from typing import List, Optional


class MidiWireError(Exception):
    """Base class for all midiwire errors."""


class MalformedFrameError(MidiWireError):
    """A field was read past the end of a frame, or the frame was empty."""

    def __init__(self, message: str, data: bytes = b''):
        super().__init__(message)
        self.data = data


class ProtocolViolationError(MidiWireError):
    """An exchange was started twice, after completion, or with no events."""


class ExchangeError(MidiWireError):
    """
    Terminal failure of an exchange.

    Attributes:
        event_index: Index of the exchange event that was running when the
            exchange failed, or None if no event was armed
        responses: Responses captured by events that completed before the failure
    """

    def __init__(self, message: str, event_index: Optional[int] = None,
                 responses: Optional[List[bytes]] = None):
        super().__init__(message)
        self.event_index = event_index
        self.responses = list(responses) if responses else []


class ExchangeTimeoutError(ExchangeError):
    """No matching response arrived within the configured window."""


class TransportUnavailableError(ExchangeError):
    """Send attempted with no bound output, or subscription with no bound input."""
