"""
RtMidi Transport

Adapters that put python-rtmidi ports behind the transport boundary.

The adapters wrap ports the host has already opened. rtmidi delivers
input callbacks on its own thread; pass an asyncio loop to hand every
frame over to that loop so the device, state engine and exchanges only
ever see frames on one logical sequence.
"""

import asyncio
import logging
import threading
import time
from typing import Any, List, Optional, Set, Union

try:
    import rtmidi
except ImportError:
    rtmidi = None

from .protocol import MidiInputPort, MidiOutputProtocol, OutboundData

logger = logging.getLogger(__name__)


def _require_rtmidi() -> None:
    if rtmidi is None:
        raise ImportError(
            "python-rtmidi not installed. "
            "Install with: pip install python-rtmidi"
        )


def _resolve_port(port_id: Union[int, str], available_ports: List[str]) -> int:
    """Resolve a port index or (partial) port name to an index."""
    if isinstance(port_id, int):
        if 0 <= port_id < len(available_ports):
            return port_id
        raise ValueError(f"Port index {port_id} out of range (0-{len(available_ports) - 1})")

    for idx, name in enumerate(available_ports):
        if port_id == name or port_id in name:
            return idx
    raise ValueError(f"Port '{port_id}' not found. Available: {available_ports}")


class RtMidiInputPort(MidiInputPort):
    """
    Input port fed by an open rtmidi.MidiIn.

    Example:
        midi_in = rtmidi.MidiIn()
        midi_in.open_port(0)
        port = RtMidiInputPort(midi_in, loop=asyncio.get_running_loop())
        port.on('message', handle_frame)
    """

    def __init__(self, midi_in: Any, name: Optional[str] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Args:
            midi_in: An opened rtmidi.MidiIn (or compatible) object
            name: Port name for logging
            loop: Event loop to deliver frames on; None delivers on rtmidi's thread
        """
        super().__init__(name or 'rtmidi-in')
        self._midi_in = midi_in
        self._loop = loop
        self._start_time = time.time()
        self._elapsed = 0.0

        # Sysex, timing and active sensing are filtered by rtmidi by default
        self._midi_in.ignore_types(sysex=False, timing=False, active_sense=False)
        self._midi_in.set_callback(self._on_rtmidi_message)

    @classmethod
    def open(cls, port: Union[int, str], loop: Optional[asyncio.AbstractEventLoop] = None) -> 'RtMidiInputPort':
        """Open an rtmidi input port by index or name."""
        _require_rtmidi()
        midi_in = rtmidi.MidiIn()
        ports = midi_in.get_ports()
        index = _resolve_port(port, ports)
        midi_in.open_port(index)
        logger.info("[RtMidiInput] Connected to port %d: %s", index, ports[index])
        return cls(midi_in, name=ports[index], loop=loop)

    def _on_rtmidi_message(self, event, data=None) -> None:
        message, delta = event
        # rtmidi reports the time since the previous message
        self._elapsed += delta
        timestamp = self._start_time + self._elapsed
        frame = bytes(message)

        if self._loop is None:
            self.feed(frame, timestamp)
        elif self._loop.is_closed():
            logger.warning("[%s] Event loop closed, dropping frame %s", self.name, frame.hex(' '))
        else:
            self._loop.call_soon_threadsafe(self.feed, frame, timestamp)

    def close(self) -> None:
        """Close the underlying port and notify subscribers."""
        if self.is_connected:
            self._midi_in.cancel_callback()
            self._midi_in.close_port()
        super().close()


class RtMidiOutputPort(MidiOutputProtocol):
    """
    Output port sending through an open rtmidi.MidiOut.

    Frames with a send time in the future are held back on a timer.
    """

    def __init__(self, midi_out: Any, name: Optional[str] = None):
        """
        Args:
            midi_out: An opened rtmidi.MidiOut (or compatible) object
            name: Port name for logging
        """
        self._midi_out = midi_out
        self._name = name or 'rtmidi-out'
        self._connected = True
        self._pending: Set[threading.Timer] = set()
        self._timer_lock = threading.Lock()

    @classmethod
    def open(cls, port: Union[int, str]) -> 'RtMidiOutputPort':
        """Open an rtmidi output port by index or name."""
        _require_rtmidi()
        midi_out = rtmidi.MidiOut()
        ports = midi_out.get_ports()
        index = _resolve_port(port, ports)
        midi_out.open_port(index)
        logger.info("[RtMidiOutput] Connected to port %d: %s", index, ports[index])
        return cls(midi_out, name=ports[index])

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_connected(self) -> bool:
        return self._connected

    def send(self, data: OutboundData, time: Optional[float] = None) -> None:
        if not self._connected:
            logger.warning("[%s] Not connected, dropping frame", self._name)
            return

        frame = list(data)
        delay = 0.0 if time is None else time - _now()
        if delay <= 0:
            self._midi_out.send_message(frame)
            return

        def send_later():
            with self._timer_lock:
                self._pending.discard(timer)
            if self._connected:
                self._midi_out.send_message(frame)

        timer = threading.Timer(delay, send_later)
        timer.daemon = True
        with self._timer_lock:
            self._pending.add(timer)
        timer.start()

    def close(self) -> None:
        """Cancel scheduled frames and close the port."""
        with self._timer_lock:
            for timer in self._pending:
                timer.cancel()
            self._pending.clear()

        if self._connected:
            self._midi_out.close_port()
            self._connected = False
            logger.info("[%s] Disconnected", self._name)


def _now() -> float:
    return time.time()
