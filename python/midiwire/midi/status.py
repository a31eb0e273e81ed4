"""
MIDI Status

Status byte values and message category classification.
"""

from enum import Enum, IntEnum


class MidiStatus(IntEnum):
    """Status codes, with the channel nibble stripped for channel messages."""
    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    KEY_PRESSURE = 0xA0
    CONTROL_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_PRESSURE = 0xD0
    PITCH_BEND = 0xE0

    SYSTEM_EXCLUSIVE = 0xF0
    MTC_QUARTER_FRAME = 0xF1
    SONG_POSITION = 0xF2
    SONG_SELECT = 0xF3
    TUNE_REQUEST = 0xF6
    END_OF_EXCLUSIVE = 0xF7

    TIMING_CLOCK = 0xF8
    START = 0xFA
    CONTINUE = 0xFB
    STOP = 0xFC
    ACTIVE_SENSING = 0xFE
    RESET = 0xFF


class MessageCategory(Enum):
    """Mutually exclusive message categories, decided by the first byte."""
    CHANNEL = 'channel'
    SYSTEM = 'system'
    SYSTEM_EXCLUSIVE = 'sysex'


# Number of bytes a complete frame of each status needs. Statuses missing
# from the table (undefined system bytes) are complete with the status alone.
FRAME_LENGTHS = {
    MidiStatus.NOTE_OFF: 3,
    MidiStatus.NOTE_ON: 3,
    MidiStatus.KEY_PRESSURE: 3,
    MidiStatus.CONTROL_CHANGE: 3,
    MidiStatus.PROGRAM_CHANGE: 2,
    MidiStatus.CHANNEL_PRESSURE: 2,
    MidiStatus.PITCH_BEND: 3,
    MidiStatus.SYSTEM_EXCLUSIVE: 2,
    MidiStatus.MTC_QUARTER_FRAME: 2,
    MidiStatus.SONG_POSITION: 3,
    MidiStatus.SONG_SELECT: 2,
}


def classify(first_byte: int) -> MessageCategory:
    """Return the category of a frame from its first byte."""
    if first_byte == MidiStatus.SYSTEM_EXCLUSIVE:
        return MessageCategory.SYSTEM_EXCLUSIVE
    if (first_byte & 0xF0) == 0xF0:
        return MessageCategory.SYSTEM
    return MessageCategory.CHANNEL


def status_of(first_byte: int) -> int:
    """
    Return the status code of a frame from its first byte.

    Channel messages drop the channel nibble; system messages keep the
    byte verbatim.
    """
    if (first_byte & 0xF0) == 0xF0:
        return first_byte
    return first_byte & 0xF0


def status_name(status: int) -> str:
    """Readable name for a status code, e.g. 'NoteOn'."""
    try:
        name = MidiStatus(status).name
    except ValueError:
        return f'Undefined(0x{status:02X})'
    return ''.join(part.capitalize() for part in name.split('_'))
