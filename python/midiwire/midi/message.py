"""
MIDI Message

Immutable views over raw MIDI frames.

A frame's first byte decides its category, and each category has its own
message class carrying only the fields that make sense for it:

    ChannelMessage   note, velocity, controller, program, pressure, pitch bend
    SystemMessage    MTC quarter frame, song position, song select
    SysExMessage     manufacturer id, device id, wildcard matching

Use MidiMessage.from_bytes() to build the right class from a frame.

Reading a field that lies past the end of the frame raises
MalformedFrameError. Use is_complete to check a frame before reading.
"""

import time
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Sequence, Type, Union

from ..errors import MalformedFrameError
from ..models.codec_config import CodecConfig, DEFAULT_CODEC_CONFIG
from ..models.note import note_name
from .controller import CHANNEL_MODE_FIRST, controller_name
from .status import FRAME_LENGTHS, MessageCategory, MidiStatus, classify, status_of
from .status import status_name as _status_name
from .sysex import ManufacturerId, validate_sysex

FrameData = Union[bytes, bytearray, Sequence[int]]

# Sysex dumps in str() stop after this many bytes
SYSEX_DUMP_LIMIT = 64


@dataclass(frozen=True)
class MidiMessage:
    """
    Base view over one frame plus its capture timestamp (seconds since epoch).
    """
    data: bytes
    timestamp: float = field(default_factory=time.time)

    category: ClassVar[MessageCategory]

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            object.__setattr__(self, 'data', bytes(self.data))

    @staticmethod
    def from_bytes(data: FrameData, timestamp: Optional[float] = None,
                   config: CodecConfig = DEFAULT_CODEC_CONFIG) -> 'MidiMessage':
        """
        Decode a raw frame into the message class for its category.

        If enabled in the config, a 3-byte Note-On frame with velocity 0 is
        rewritten to a Note-Off frame on the same channel.

        Args:
            data: Raw frame bytes
            timestamp: Capture time in seconds, defaults to now
            config: Codec configuration

        Returns:
            A ChannelMessage, SystemMessage or SysExMessage

        Raises:
            MalformedFrameError: If the frame is empty
        """
        frame = bytes(data)
        if not frame:
            raise MalformedFrameError("Cannot decode an empty frame", frame)

        if (config.convert_zero_velocity_note_on and len(frame) == 3
                and (frame[0] & 0xF0) == MidiStatus.NOTE_ON and frame[2] == 0):
            frame = bytes([MidiStatus.NOTE_OFF | (frame[0] & 0x0F), frame[1], 0])

        message_class = _MESSAGE_CLASSES[classify(frame[0])]
        if timestamp is None:
            return message_class(frame)
        return message_class(frame, timestamp)

    @property
    def status(self) -> int:
        return status_of(self._byte(0, 'status'))

    @property
    def status_name(self) -> str:
        return _status_name(self.status)

    @property
    def is_complete(self) -> bool:
        """True if the frame is long enough for every field of its status."""
        if not self.data:
            return False
        return len(self.data) >= FRAME_LENGTHS.get(self.status, 1)

    def _byte(self, index: int, field_name: str) -> int:
        if index >= len(self.data):
            raise MalformedFrameError(
                f"{self.status_name if index else 'Frame'} frame of {len(self.data)} "
                f"byte(s) has no {field_name} at offset {index}",
                self.data
            )
        return self.data[index]

    def __len__(self) -> int:
        return len(self.data)

    def hex(self) -> str:
        return self.data.hex(' ')


@dataclass(frozen=True)
class ChannelMessage(MidiMessage):
    """A per-channel voice or mode message."""
    category: ClassVar[MessageCategory] = MessageCategory.CHANNEL

    @property
    def channel(self) -> int:
        """Zero-based channel number (0-15)."""
        return self._byte(0, 'status') & 0x0F

    @property
    def note(self) -> int:
        return self._byte(1, 'note')

    @property
    def velocity(self) -> int:
        return self._byte(2, 'velocity')

    @property
    def controller(self) -> int:
        return self._byte(1, 'controller')

    @property
    def value(self) -> int:
        return self._byte(2, 'value')

    @property
    def program(self) -> int:
        return self._byte(1, 'program')

    @property
    def pressure(self) -> int:
        """Pressure of a channel pressure or key pressure message."""
        if self.status == MidiStatus.KEY_PRESSURE:
            return self._byte(2, 'pressure')
        return self._byte(1, 'pressure')

    @property
    def pitch_bend(self) -> int:
        """Pitch bend amount in the range -8192 to +8191."""
        return self._byte(2, 'pitch bend MSB') * 0x80 + self._byte(1, 'pitch bend LSB') - 0x2000

    @property
    def is_channel_mode(self) -> bool:
        return self.status == MidiStatus.CONTROL_CHANGE and self.controller >= CHANNEL_MODE_FIRST

    def with_channel(self, channel: int) -> 'ChannelMessage':
        """Return a copy of this message addressed to another channel."""
        if not 0 <= channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {channel}")
        data = bytes([(self.data[0] & 0xF0) | channel]) + self.data[1:]
        return ChannelMessage(data, self.timestamp)

    def __str__(self) -> str:
        if not self.is_complete:
            return f"{self.status_name} (Ch. {self.channel + 1}, Incomplete: {self.hex()})"

        status = self.status
        name = self.status_name
        channel = self.channel + 1
        b1 = self.data[1]
        # Out-of-range note bytes are shown as raw numbers
        note = note_name(b1) if b1 <= 0x7F else None

        if status in (MidiStatus.NOTE_ON, MidiStatus.NOTE_OFF):
            note_text = f"{note} ({b1})" if note else str(b1)
            return f"{name} (Ch. {channel}, Note: {note_text}, Velocity: {self.velocity})"
        if status == MidiStatus.KEY_PRESSURE:
            return f"{name} (Ch. {channel}, Note: {note or b1}, Pressure: {self.pressure})"
        if status == MidiStatus.CONTROL_CHANGE:
            cc_type = 'ChannelMode' if self.is_channel_mode else 'ControlChange'
            cc_name = controller_name(b1)
            suffix = f" / {cc_name}" if cc_name else ''
            return f"{cc_type} (Ch. {channel}, Number: {b1}{suffix}, Value: {self.value})"
        if status == MidiStatus.PROGRAM_CHANGE:
            return f"{name} (Ch. {channel}, Number: {b1})"
        if status == MidiStatus.CHANNEL_PRESSURE:
            return f"{name} (Ch. {channel}, Pressure: {b1})"
        if status == MidiStatus.PITCH_BEND:
            return f"{name} (Ch. {channel}, Value: {self.pitch_bend}, LSB: {b1}, MSB: {self.data[2]})"
        return f"{name} (Ch. {channel}, Values: {self.hex()})"


@dataclass(frozen=True)
class SystemMessage(MidiMessage):
    """A system common or system realtime message."""
    category: ClassVar[MessageCategory] = MessageCategory.SYSTEM

    @property
    def is_realtime(self) -> bool:
        return self.status >= MidiStatus.TIMING_CLOCK

    @property
    def mtc_type(self) -> int:
        """Piece number (0-7) of an MTC quarter frame."""
        return self._byte(1, 'quarter frame') >> 4

    @property
    def mtc_value(self) -> int:
        """Value nibble of an MTC quarter frame."""
        return self._byte(1, 'quarter frame') & 0x0F

    @property
    def song_position(self) -> int:
        """Song position pointer in MIDI beats (sixteenth notes)."""
        return self._byte(2, 'song position MSB') * 0x80 + self._byte(1, 'song position LSB')

    @property
    def song_number(self) -> int:
        return self._byte(1, 'song number')

    def __str__(self) -> str:
        status = self.status
        name = self.status_name
        if not self.is_complete:
            return f"{name} (Incomplete: {self.hex()})"
        if status == MidiStatus.MTC_QUARTER_FRAME:
            return f"{name} (type: {self.mtc_type}, value: {self.mtc_value})"
        if status == MidiStatus.SONG_POSITION:
            return f"{name} (position: {self.song_position})"
        if status == MidiStatus.SONG_SELECT:
            return f"{name} (song: {self.song_number})"
        return name


@dataclass(frozen=True)
class SysExMessage(MidiMessage):
    """A system exclusive message."""
    category: ClassVar[MessageCategory] = MessageCategory.SYSTEM_EXCLUSIVE

    @property
    def is_extended_id(self) -> bool:
        return self._byte(1, 'manufacturer id') == 0x00

    @property
    def manufacturer_id(self) -> ManufacturerId:
        """Single-byte id, or a 3-tuple for extended ids starting with 0x00."""
        if self.is_extended_id:
            return (0x00, self._byte(2, 'manufacturer id'), self._byte(3, 'manufacturer id'))
        return self.data[1]

    @property
    def device_id(self) -> int:
        return self._byte(4 if self.is_extended_id else 2, 'device id')

    @property
    def body(self) -> bytes:
        """Bytes following the device id, without a trailing end-of-exclusive."""
        start = 5 if self.is_extended_id else 3
        end = len(self.data)
        if end > start and self.data[-1] == MidiStatus.END_OF_EXCLUSIVE:
            end -= 1
        return self.data[start:end]

    def validate(self, manufacturer_id: Union[int, Sequence[int]], device_id: Optional[int] = None,
                 header: Optional[Sequence[int]] = None) -> bool:
        """Match this frame against an id/device/header pattern, see validate_sysex()."""
        return validate_sysex(self.data, manufacturer_id, device_id, header)

    def __str__(self) -> str:
        # Dump the first bytes in rows of 8
        parts = [f"{self.status_name} (length: {len(self.data)})"]
        for i, byte in enumerate(self.data):
            if i == SYSEX_DUMP_LIMIT:
                parts.append("\n    ...")
                break
            if i % 8 == 0:
                parts.append("\n   ")
            parts.append(f" {byte:02x}")
        return ''.join(parts)


_MESSAGE_CLASSES: Dict[MessageCategory, Type[MidiMessage]] = {
    MessageCategory.CHANNEL: ChannelMessage,
    MessageCategory.SYSTEM: SystemMessage,
    MessageCategory.SYSTEM_EXCLUSIVE: SysExMessage,
}
