"""
System Exclusive

Universal sysex sub-ids and wildcard-based sysex frame matching.

Manufacturer ids come in two shapes: a single byte, or the extended
three-byte form whose first byte is 0x00. The device id sits right
after the manufacturer id bytes.
"""

from enum import IntEnum
from typing import Optional, Sequence, Tuple, Union

from .status import MidiStatus

# Universal sysex manufacturer ids
NON_REALTIME = 0x7E
REALTIME = 0x7F

# A device id of 0x7F addresses (and matches) every device
ANY_DEVICE = 0x7F

# A header byte of 0xFF matches any byte at that position
ANY_BYTE = 0xFF

ManufacturerId = Union[int, Tuple[int, int, int]]


class NrtSubId(IntEnum):
    """Sub-id #1 of universal non-realtime messages."""
    UNUSED = 0x00
    SAMPLE_DUMP_HEADER = 0x01
    SAMPLE_DATA_PACKET = 0x02
    SAMPLE_DUMP_REQUEST = 0x03
    MIDI_TIME_CODE = 0x04
    SAMPLE_DUMP_EXTENSIONS = 0x05
    GENERAL_INFORMATION = 0x06
    FILE_DUMP = 0x07
    MIDI_TUNING_STANDARD = 0x08
    GENERAL_MIDI = 0x09
    DOWNLOADABLE_SOUNDS = 0x0A
    FILE_REFERENCE_MESSAGE = 0x0B
    MIDI_VISUAL_CONTROL = 0x0C
    MIDI_CAPABILITY_INQUIRY = 0x0D
    END_OF_FILE = 0x7B
    WAIT = 0x7C
    CANCEL = 0x7D
    NAK = 0x7E
    ACK = 0x7F


class RtSubId(IntEnum):
    """Sub-id #1 of universal realtime messages."""
    UNUSED = 0x00
    MIDI_TIME_CODE = 0x01
    MIDI_SHOW_CONTROL = 0x02
    NOTATION_INFORMATION = 0x03
    DEVICE_CONTROL = 0x04
    REAL_TIME_MTC_CUEING = 0x05
    MIDI_MACHINE_CONTROL_COMMANDS = 0x06
    MIDI_MACHINE_CONTROL_RESPONSES = 0x07
    MIDI_TUNING_STANDARD = 0x08
    CONTROLLER_DESTINATION_SETTING = 0x09
    KEY_BASED_INSTRUMENT_CONTROL = 0x0A
    SCALABLE_POLYPHONY_MIDI_MIP_MESSAGE = 0x0B
    MOBILE_PHONE_CONTROL_MESSAGE = 0x0C


class GeneralInformation(IntEnum):
    """Sub-id #2 values under NrtSubId.GENERAL_INFORMATION."""
    IDENTITY_REQUEST = 0x01
    IDENTITY_REPLY = 0x02


def _byte_at(data: Sequence[int], index: int) -> Optional[int]:
    return data[index] if index < len(data) else None


def normalize_manufacturer_id(manufacturer_id: Union[int, Sequence[int]]) -> ManufacturerId:
    """Return a manufacturer id as an int or a 3-tuple."""
    if isinstance(manufacturer_id, int):
        return manufacturer_id
    id_bytes = tuple(manufacturer_id)
    if len(id_bytes) != 3:
        raise ValueError(f"Extended manufacturer id must have 3 bytes, got {len(id_bytes)}")
    return id_bytes


def validate_sysex(
    data: Sequence[int],
    manufacturer_id: Union[int, Sequence[int]],
    device_id: Optional[int] = None,
    header: Optional[Sequence[int]] = None,
) -> bool:
    """
    Check a sysex frame against a manufacturer id, device id and header pattern.

    Comparison is positional. A device id of ANY_DEVICE matches every device,
    a header byte of ANY_BYTE matches every byte. The header is compared
    starting one byte after the device id position. A frame that is too
    short to hold a compared position does not match.

    Args:
        data: The frame to check
        manufacturer_id: Single-byte id, or a 3-byte sequence for extended ids
        device_id: Required device id, or None to skip the check
        header: Byte pattern expected after the device id, or None

    Returns:
        True if the frame matches
    """
    if _byte_at(data, 0) != MidiStatus.SYSTEM_EXCLUSIVE:
        return False

    if isinstance(manufacturer_id, int):
        if _byte_at(data, 1) != manufacturer_id:
            return False
        index = 2
    else:
        id_bytes = normalize_manufacturer_id(manufacturer_id)
        for offset, id_byte in enumerate(id_bytes):
            if _byte_at(data, 1 + offset) != id_byte:
                return False
        index = 4

    if device_id is not None and device_id != ANY_DEVICE and _byte_at(data, index) != device_id:
        return False

    if header is not None:
        for offset, expected in enumerate(header):
            if expected != ANY_BYTE and _byte_at(data, index + offset + 1) != expected:
                return False

    return True
