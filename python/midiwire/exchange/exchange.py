"""
MIDI Exchange

Request/response handshakes with a device, driven by an asyncio event loop.

An exchange is a list of events. Each event sends one request frame and
waits for its required responses. The next event starts once every required
response has arrived; if the timeout expires first, the whole exchange fails.

    IDLE --start()--> RUNNING --last event completes--> COMPLETED
                         |
                         +--timeout / input disconnect--> FAILED

Example:
    exchange = MidiExchange(device, [
        ExchangeEvent(
            request=universal_nrt_sysex(0x10, 0x06, 0x01, terminate=True),
            responses=[RequiredResponse(manufacturer_id=0x7E, header=[0x06, 0x02])],
        ),
    ], timeout_ms=500)
    responses = await exchange.start()
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from ..errors import (
    ExchangeError,
    ExchangeTimeoutError,
    MalformedFrameError,
    ProtocolViolationError,
    TransportUnavailableError,
)
from ..midi.device import MidiDevice
from ..midi.protocol import MidiInputPort
from ..midi.sysex import validate_sysex
from ..models.codec_config import DEFAULT_EXCHANGE_TIMEOUT_MS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequiredResponse:
    """
    Pattern a response frame must match, see validate_sysex().

    Attributes:
        manufacturer_id: Single-byte or 3-byte id; None uses the device's id
        device_id: Required device id (0x7F matches any); None uses the device's id
        header: Bytes expected after the device id (0xFF matches any byte)
    """
    manufacturer_id: Optional[Union[int, Tuple[int, ...]]] = None
    device_id: Optional[int] = None
    header: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        if self.manufacturer_id is not None and not isinstance(self.manufacturer_id, int):
            object.__setattr__(self, 'manufacturer_id', tuple(self.manufacturer_id))
        if self.header is not None:
            object.__setattr__(self, 'header', tuple(self.header))


@dataclass
class ExchangeEvent:
    """
    One request and the responses that complete it.

    Responses are tried in order and an inbound frame satisfies the first
    one it matches, so list more specific patterns first. With no required
    responses, the first inbound frame of any shape completes the event.
    """
    request: bytes
    responses: Sequence[RequiredResponse] = field(default_factory=list)

    def __post_init__(self):
        self.request = bytes(self.request)
        if isinstance(self.responses, RequiredResponse):
            self.responses = [self.responses]
        else:
            self.responses = list(self.responses)


class ExchangeState(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'


class MidiExchange:
    """
    Single-use request/response state machine bound to one device.

    start() returns immediately with an asyncio.Future that resolves to the
    list of captured response frames, or fails with an ExchangeError
    subclass carrying the failing event index. Subclasses can hook into the
    lifecycle by overriding the exchange_* methods.

    Inbound frames and timer callbacks run on the event loop; frames from
    other threads must be handed over to the loop before they reach the
    input port (see RtMidiInputPort).
    """

    def __init__(self, device: MidiDevice,
                 events: Optional[Union[ExchangeEvent, Sequence[ExchangeEvent]]] = None,
                 timeout_ms: Optional[int] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Args:
            device: The device to talk to; supplies ports and default ids
            events: The exchange events, in order
            timeout_ms: Per-event timeout in milliseconds
            loop: Event loop to run on; defaults to the running loop at start()

        Raises:
            TransportUnavailableError: If the device has no input or no output
        """
        if device.input is None:
            raise TransportUnavailableError(f"{device} has no valid MIDI input")
        if device.output is None:
            raise TransportUnavailableError(f"{device} has no valid MIDI output")

        self.device = device
        self.timeout_ms = DEFAULT_EXCHANGE_TIMEOUT_MS if timeout_ms is None else timeout_ms
        if self.timeout_ms <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout_ms} ms")

        if events is None:
            self._events: List[ExchangeEvent] = []
        elif isinstance(events, ExchangeEvent):
            self._events = [events]
        else:
            self._events = list(events)

        self._loop = loop
        self._state = ExchangeState.IDLE
        self._future: Optional[asyncio.Future] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._input: Optional[MidiInputPort] = None

        self._event_index = 0
        self._remaining: List[RequiredResponse] = []
        self._any_response = False
        self._responses: List[bytes] = []
        # Response count when the current event was armed
        self._event_start = 0

    @property
    def state(self) -> ExchangeState:
        return self._state

    @property
    def event_index(self) -> int:
        return self._event_index

    @property
    def events(self) -> List[ExchangeEvent]:
        return list(self._events)

    @property
    def responses(self) -> List[bytes]:
        """Responses captured so far, in arrival order."""
        return list(self._responses)

    @property
    def is_running(self) -> bool:
        return self._state is ExchangeState.RUNNING

    def add_event(self, event: ExchangeEvent) -> None:
        """Append an event; only allowed before the exchange starts."""
        if self._state is not ExchangeState.IDLE:
            raise ProtocolViolationError(f"Cannot add events to a {self._state.value} exchange")
        self._events.append(event)

    def start(self) -> asyncio.Future:
        """
        Start the exchange.

        Returns:
            Future resolving to the list of response frames

        Raises:
            ProtocolViolationError: If the exchange already ran or is running, has no
                events, or another exchange is running on the same device
        """
        if self._state is ExchangeState.RUNNING:
            raise ProtocolViolationError("Exchange already running")
        if self._state is not ExchangeState.IDLE:
            raise ProtocolViolationError("Exchange already completed")

        self.exchange_will_start()

        if not self._events:
            raise ProtocolViolationError("No exchange events defined")
        active = self.device.active_exchange
        if active is not None and active is not self:
            raise ProtocolViolationError(f"Another exchange is running on {self.device}")

        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        self._future = loop.create_future()
        self._state = ExchangeState.RUNNING
        self.device.active_exchange = self

        self._input = self.device.input
        if self._input is None or not self._input.is_connected:
            self._fail(TransportUnavailableError(f"{self.device} input is not connected", 0))
            return self._future

        self._input.on('message', self._on_input_message)
        self._input.on('disconnect', self._on_input_disconnect)

        logger.info("[MidiExchange] Starting %d event(s) with %s", len(self._events), self.device)
        self._event_index = 0
        self._arm_event()
        return self._future

    def exchange_will_start(self) -> None:
        """Hook: called by start() before the exchange is validated and armed."""

    def exchange_event_will_start(self, event: ExchangeEvent, index: int) -> None:
        """Hook: called before an event's request is sent."""

    def exchange_event_did_complete(self, event: ExchangeEvent, index: int) -> None:
        """Hook: called after all of an event's required responses arrived."""

    def exchange_did_complete(self, responses: List[bytes]) -> List[bytes]:
        """Hook: post-process the responses before they are delivered."""
        return responses

    def _arm_event(self) -> None:
        index = self._event_index
        event = self._events[index]
        self.exchange_event_will_start(event, index)

        self._remaining = list(event.responses)
        self._any_response = not self._remaining
        self._event_start = len(self._responses)

        logger.debug("[MidiExchange] Event %d request: %s, expecting %s response(s)",
                     index, event.request.hex(' '),
                     'any' if self._any_response else len(self._remaining))

        # Armed before sending; a port may deliver the reply from inside send()
        self._timer = self._loop.call_later(self.timeout_ms / 1000.0, self._on_timeout, index)
        try:
            self.device.send_message(event.request)
        except TransportUnavailableError as e:
            self._fail(TransportUnavailableError(str(e), index))

    def _matches(self, data: bytes, required: RequiredResponse) -> bool:
        manufacturer_id = required.manufacturer_id
        if manufacturer_id is None:
            manufacturer_id = self.device.manufacturer_id
        device_id = required.device_id
        if device_id is None:
            device_id = self.device.device_id
        return validate_sysex(data, manufacturer_id, device_id, required.header)

    def _on_input_message(self, data: bytes, timestamp: float) -> None:
        if self._state is not ExchangeState.RUNNING:
            return

        if self._any_response:
            self._responses.append(data)
            self._complete_event()
            return

        for required in self._remaining:
            if self._matches(data, required):
                self._responses.append(data)
                self._remaining.remove(required)
                logger.debug("[MidiExchange] Event %d captured %s", self._event_index, data.hex(' '))
                break

        if not self._remaining:
            self._complete_event()

    def _complete_event(self) -> None:
        self._cancel_timer()
        index = self._event_index
        self.exchange_event_did_complete(self._events[index], index)

        self._event_index += 1
        if self._event_index < len(self._events):
            self._arm_event()
            return

        try:
            responses = self.exchange_did_complete(self._responses)
        except MalformedFrameError as e:
            self._event_index = index
            self._fail(ExchangeError(f"Invalid response to event {index}: {e}", index))
            return

        self._responses = list(responses)
        self._finish(ExchangeState.COMPLETED)
        logger.info("[MidiExchange] Completed with %d response(s)", len(self._responses))
        if not self._future.done():
            self._future.set_result(list(self._responses))

    def _on_timeout(self, index: int) -> None:
        if self._state is not ExchangeState.RUNNING or index != self._event_index:
            return
        self._timer = None
        logger.warning("[MidiExchange] Event %d timed out after %d ms", index, self.timeout_ms)
        self._fail(ExchangeTimeoutError(
            f"No response, timeout reached after {self.timeout_ms} milliseconds (event {index})",
            index
        ))

    def _on_input_disconnect(self) -> None:
        if self._state is not ExchangeState.RUNNING:
            return
        logger.warning("[MidiExchange] Input disconnected during event %d", self._event_index)
        self._fail(TransportUnavailableError(
            f"MIDI input disconnected during event {self._event_index}", self._event_index
        ))

    def _fail(self, error: ExchangeError) -> None:
        self._cancel_timer()
        # Responses of the failing event are dropped, earlier events are kept
        del self._responses[self._event_start:]
        error.responses = list(self._responses)
        self._finish(ExchangeState.FAILED)
        if not self._future.done():
            self._future.set_exception(error)

    def _finish(self, state: ExchangeState) -> None:
        self._state = state
        if self._input is not None:
            self._input.off('message', self._on_input_message)
            self._input.off('disconnect', self._on_input_disconnect)
            self._input = None
        if self.device.active_exchange is self:
            self.device.active_exchange = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
