"""
MIDI Transport Protocol

Defines the byte-level transport boundary the codec, the device and the
exchange engine talk to. Port discovery, opening and reconnection are
left to the host; implementations wrap ports that are already open.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from ..utils.event_emitter import EventEmitter

logger = logging.getLogger(__name__)

OutboundData = Union[bytes, bytearray, Sequence[int]]


class MidiOutputProtocol(ABC):
    """
    Abstract base class for anything that can send MIDI frames.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the output is open and ready to send."""
        pass

    @abstractmethod
    def send(self, data: OutboundData, time: Optional[float] = None) -> None:
        """
        Send one frame.

        Args:
            data: The frame bytes
            time: Optional send time in seconds (time.time() clock);
                None or a time in the past sends immediately
        """
        pass


class MidiInputPort(EventEmitter):
    """
    Base class for inbound MIDI ports.

    Delivers frames through the 'message' event as (data: bytes, timestamp: float)
    and announces loss of the port through the 'disconnect' event.

    The base class is usable on its own as an in-process port: hosts (and tests)
    push frames in with feed().

    Events emitted:
        - 'message': A frame arrived (data: bytes, timestamp: float)
        - 'disconnect': The port went away; no more frames will arrive
    """

    def __init__(self, name: str = 'input'):
        super().__init__()
        self._name = name
        self._is_connected = True

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    def feed(self, data: OutboundData, timestamp: Optional[float] = None) -> None:
        """Deliver one inbound frame to all subscribers."""
        if not self._is_connected:
            logger.debug("[%s] Dropping frame on disconnected port", self._name)
            return
        self.emit('message', bytes(data), time.time() if timestamp is None else timestamp)

    def close(self) -> None:
        """Mark the port as gone and notify subscribers once."""
        if not self._is_connected:
            return
        self._is_connected = False
        logger.info("[%s] Input disconnected", self._name)
        self.emit('disconnect')
