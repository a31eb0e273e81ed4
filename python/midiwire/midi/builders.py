"""
Frame Builders

Builders for well-formed outbound MIDI frames.

Every builder returns a ``bytes`` object ready to hand to an output port.
Arguments are validated and out-of-range values raise ``ValueError``.
"""

from typing import Optional, Sequence

from .controller import MidiController
from .status import MidiStatus
from .sysex import NON_REALTIME, REALTIME

# Pitch bend center (no bend) in the raw 14-bit encoding
PITCH_BEND_CENTER = 0x2000


def _check_channel(channel: int) -> None:
    if not 0 <= channel <= 15:
        raise ValueError(f"Channel must be 0-15, got {channel}")


def _check_7bit(name: str, value: int) -> None:
    if not 0 <= value <= 0x7F:
        raise ValueError(f"{name} must be 0-127, got {value}")


def _check_14bit(name: str, value: int) -> None:
    if not 0 <= value <= 0x3FFF:
        raise ValueError(f"{name} must be 0-16383, got {value}")


def _channel_frame(status: MidiStatus, channel: int, *data_bytes: int) -> bytes:
    _check_channel(channel)
    return bytes([status | channel, *data_bytes])


def note_on(channel: int, note: int, velocity: int) -> bytes:
    """Build a Note-On frame. Channel is zero-based (0-15)."""
    _check_7bit('Note', note)
    _check_7bit('Velocity', velocity)
    return _channel_frame(MidiStatus.NOTE_ON, channel, note, velocity)


def note_off(channel: int, note: int, velocity: int = 0) -> bytes:
    """Build a Note-Off frame."""
    _check_7bit('Note', note)
    _check_7bit('Velocity', velocity)
    return _channel_frame(MidiStatus.NOTE_OFF, channel, note, velocity)


def key_pressure(channel: int, note: int, pressure: int) -> bytes:
    """Build a polyphonic key pressure frame."""
    _check_7bit('Note', note)
    _check_7bit('Pressure', pressure)
    return _channel_frame(MidiStatus.KEY_PRESSURE, channel, note, pressure)


def control_change(channel: int, controller: int, value: int) -> bytes:
    """Build a Control-Change frame."""
    _check_7bit('Controller', controller)
    _check_7bit('Value', value)
    return _channel_frame(MidiStatus.CONTROL_CHANGE, channel, controller, value)


def program_change(channel: int, program: int) -> bytes:
    """Build a 2-byte Program-Change frame."""
    _check_7bit('Program', program)
    return _channel_frame(MidiStatus.PROGRAM_CHANGE, channel, program)


def channel_pressure(channel: int, pressure: int) -> bytes:
    """Build a 2-byte channel pressure frame."""
    _check_7bit('Pressure', pressure)
    return _channel_frame(MidiStatus.CHANNEL_PRESSURE, channel, pressure)


def pitch_bend(channel: int, value: int) -> bytes:
    """
    Build a pitch bend frame.

    Args:
        channel: Zero-based channel (0-15)
        value: Bend amount from -8192 (full down) to 8191 (full up), 0 is center
    """
    if not -PITCH_BEND_CENTER <= value < PITCH_BEND_CENTER:
        raise ValueError(f"Pitch bend must be -8192 to 8191, got {value}")
    raw = value + PITCH_BEND_CENTER
    return _channel_frame(MidiStatus.PITCH_BEND, channel, raw & 0x7F, (raw >> 7) & 0x7F)


def _universal_sysex(kind: int, device_id: int, sub_id_1: int, sub_id_2: Optional[int],
                     data: Optional[Sequence[int]], terminate: bool) -> bytes:
    _check_7bit('Device id', device_id)
    _check_7bit('Sub-id #1', sub_id_1)
    frame = [MidiStatus.SYSTEM_EXCLUSIVE, kind, device_id, sub_id_1]
    if sub_id_2 is not None:
        _check_7bit('Sub-id #2', sub_id_2)
        frame.append(sub_id_2)
    if data is not None:
        for byte in data:
            _check_7bit('Sysex data byte', byte)
        frame.extend(data)
    if terminate:
        frame.append(MidiStatus.END_OF_EXCLUSIVE)
    return bytes(frame)


def universal_nrt_sysex(device_id: int, sub_id_1: int, sub_id_2: Optional[int] = None,
                        data: Optional[Sequence[int]] = None, terminate: bool = False) -> bytes:
    """
    Build a universal non-realtime sysex frame: F0 7E dev sid1 [sid2] [data...] [F7].

    Args:
        device_id: Target device id, 0x7F addresses all devices
        sub_id_1: Sub-id #1, see NrtSubId
        sub_id_2: Optional sub-id #2
        data: Optional payload bytes (7-bit)
        terminate: Append an end-of-exclusive byte
    """
    return _universal_sysex(NON_REALTIME, device_id, sub_id_1, sub_id_2, data, terminate)


def universal_rt_sysex(device_id: int, sub_id_1: int, sub_id_2: Optional[int] = None,
                       data: Optional[Sequence[int]] = None, terminate: bool = False) -> bytes:
    """Build a universal realtime sysex frame: F0 7F dev sid1 [sid2] [data...] [F7]."""
    return _universal_sysex(REALTIME, device_id, sub_id_1, sub_id_2, data, terminate)


def _parameter_number(channel: int, msb_controller: int, lsb_controller: int,
                      param: int, value: int, fine: bool) -> bytes:
    _check_channel(channel)
    _check_14bit('Parameter number', param)
    if fine:
        _check_14bit('Value', value)
    else:
        _check_7bit('Value', value)

    status = MidiStatus.CONTROL_CHANGE | channel
    # Receivers need the parameter address (MSB, then LSB) before the value
    frame = [
        status, msb_controller, (param >> 7) & 0x7F,
        status, lsb_controller, param & 0x7F,
    ]
    if fine:
        frame += [
            status, MidiController.DATA_ENTRY_MSB, (value >> 7) & 0x7F,
            status, MidiController.DATA_ENTRY_LSB, value & 0x7F,
        ]
    else:
        frame += [status, MidiController.DATA_ENTRY_MSB, value]
    return bytes(frame)


def rpn7(channel: int, param: int, value: int) -> bytes:
    """Set a registered parameter to a 7-bit value (three CC triplets)."""
    return _parameter_number(channel, MidiController.RPN_MSB, MidiController.RPN_LSB,
                             param, value, fine=False)


def rpn14(channel: int, param: int, value: int) -> bytes:
    """Set a registered parameter to a 14-bit value (four CC triplets)."""
    return _parameter_number(channel, MidiController.RPN_MSB, MidiController.RPN_LSB,
                             param, value, fine=True)


def nrpn7(channel: int, param: int, value: int) -> bytes:
    """Set a non-registered parameter to a 7-bit value."""
    return _parameter_number(channel, MidiController.NRPN_MSB, MidiController.NRPN_LSB,
                             param, value, fine=False)


def nrpn14(channel: int, param: int, value: int) -> bytes:
    """Set a non-registered parameter to a 14-bit value."""
    return _parameter_number(channel, MidiController.NRPN_MSB, MidiController.NRPN_LSB,
                             param, value, fine=True)


def rpn_null(channel: int) -> bytes:
    """Deselect the current parameter number so later data entry is ignored."""
    _check_channel(channel)
    status = MidiStatus.CONTROL_CHANGE | channel
    return bytes([
        status, MidiController.RPN_MSB, 0x7F,
        status, MidiController.RPN_LSB, 0x7F,
    ])
