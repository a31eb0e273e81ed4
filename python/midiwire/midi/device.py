"""
MIDI Device

A remote MIDI device reached through one input port and one output port.
"""

import logging
from typing import Any, Optional, Sequence, Union

from ..errors import MalformedFrameError, TransportUnavailableError
from ..models.codec_config import CodecConfig, DEFAULT_CODEC_CONFIG
from ..utils.event_emitter import EventEmitter
from .builders import universal_nrt_sysex
from .message import MidiMessage
from .protocol import MidiInputPort, MidiOutputProtocol, OutboundData
from .status import MessageCategory
from .sysex import ANY_DEVICE, GeneralInformation, ManufacturerId, NrtSubId, normalize_manufacturer_id

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_ID = 0x10

_CATEGORY_EVENTS = {
    MessageCategory.CHANNEL: 'channel',
    MessageCategory.SYSTEM: 'system',
    MessageCategory.SYSTEM_EXCLUSIVE: 'sysex',
}


class MidiDevice(EventEmitter):
    """
    A MIDI device identified by manufacturer id and device id.

    Decodes frames arriving on its input and re-emits them by category.
    Only one exchange may run against a device at a time; the running
    exchange is tracked in active_exchange.

    Events emitted:
        - 'message': Every decoded message (data: MidiMessage)
        - 'channel' / 'system' / 'sysex': Decoded messages of that category
        - 'input_changed': The input port was replaced (data: previous, current)
        - 'output_changed': The output port was replaced (data: previous, current)

    Example:
        device = MidiDevice(0x43, device_id=0x10, input_port=port_in, output_port=port_out)
        device.on('channel', device_state.update)
        device.send_message(note_on(0, 60, 100))
    """

    def __init__(self, manufacturer_id: Union[int, Sequence[int]],
                 device_id: Optional[int] = None,
                 input_port: Optional[MidiInputPort] = None,
                 output_port: Optional[MidiOutputProtocol] = None,
                 config: CodecConfig = DEFAULT_CODEC_CONFIG):
        super().__init__()
        self._manufacturer_id: ManufacturerId = normalize_manufacturer_id(manufacturer_id)
        self.device_id = DEFAULT_DEVICE_ID if device_id is None else device_id
        self._config = config
        self._input: Optional[MidiInputPort] = None
        self._output: Optional[MidiOutputProtocol] = None
        self.active_exchange: Optional[Any] = None

        if input_port is not None:
            self.input = input_port
        if output_port is not None:
            self.output = output_port

    @property
    def manufacturer_id(self) -> ManufacturerId:
        return self._manufacturer_id

    @property
    def device_id(self) -> int:
        return self._device_id

    @device_id.setter
    def device_id(self, value: int) -> None:
        if not 0 <= value <= ANY_DEVICE:
            raise ValueError(f"Device id must be 0-127, got {value}")
        self._device_id = value

    @property
    def config(self) -> CodecConfig:
        return self._config

    @property
    def input(self) -> Optional[MidiInputPort]:
        return self._input

    @input.setter
    def input(self, port: Optional[MidiInputPort]) -> None:
        previous = self._input
        if previous is port:
            return
        if previous is not None:
            previous.off('message', self._on_input_message)
        self._input = port
        if port is not None:
            port.on('message', self._on_input_message)
        self.emit('input_changed', previous, port)

    @property
    def output(self) -> Optional[MidiOutputProtocol]:
        return self._output

    @output.setter
    def output(self, port: Optional[MidiOutputProtocol]) -> None:
        previous = self._output
        self._output = port
        self.emit('output_changed', previous, port)

    def send_message(self, data: OutboundData, time: Optional[float] = None) -> None:
        """
        Send a frame through the output port.

        Raises:
            TransportUnavailableError: If no output port is bound
        """
        if self._output is None:
            raise TransportUnavailableError(f"{self} has no MIDI output")
        self._output.send(data, time)

    def send_identity_request(self) -> None:
        """Send a universal identity request (F0 7E dev 06 01 F7)."""
        self.send_message(universal_nrt_sysex(
            self._device_id,
            NrtSubId.GENERAL_INFORMATION,
            GeneralInformation.IDENTITY_REQUEST,
            terminate=True
        ))

    async def request_identity(self, timeout_ms: Optional[int] = None):
        """
        Run an identity request exchange against this device.

        Returns:
            The DeviceIdentity from the device's identity reply

        Raises:
            ExchangeTimeoutError: If the device does not reply in time
        """
        from ..exchange.identity import IdentityRequest
        exchange = IdentityRequest(self, timeout_ms=timeout_ms)
        await exchange.start()
        return exchange.identity

    def _on_input_message(self, data: bytes, timestamp: float) -> None:
        try:
            message = MidiMessage.from_bytes(data, timestamp, self._config)
        except MalformedFrameError as e:
            logger.debug("[MidiDevice] Ignoring frame: %s", e)
            return

        logger.debug("[MidiDevice] %s", message)
        self.emit('message', message)
        self.emit(_CATEGORY_EVENTS[message.category], message)

    def __str__(self) -> str:
        manufacturer = self._manufacturer_id
        if isinstance(manufacturer, tuple):
            manufacturer_text = ' '.join(f"{b:02X}" for b in manufacturer)
        else:
            manufacturer_text = f"{manufacturer:02X}"
        input_name = self._input.name if self._input is not None else 'N/A'
        output_name = self._output.name if self._output is not None else 'N/A'
        return (f"MidiDevice(manufacturer: {manufacturer_text}, ID: 0x{self._device_id:02X}, "
                f"input: {input_name}, output: {output_name})")
