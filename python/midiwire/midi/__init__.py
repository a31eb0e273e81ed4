"""
MIDI module for midiwire

Wire-format codec, frame builders and the transport boundary.

Codec:
    - MidiMessage.from_bytes(): decode a frame into ChannelMessage, SystemMessage or SysExMessage
    - builders: note_on, control_change, universal_nrt_sysex, rpn14, ...
    - validate_sysex(): wildcard matching of sysex frames

Transport:
    - MidiInputPort / MidiOutputProtocol: the byte-level port interface
    - RtMidiInputPort / RtMidiOutputPort: adapters for open python-rtmidi ports
    - MidiDevice: a device reached through one input and one output

Usage:
    from midiwire.midi import MidiMessage, MidiStatus, builders

    message = MidiMessage.from_bytes(builders.note_on(0, 60, 100))
    assert message.status == MidiStatus.NOTE_ON
    print(message)  # NoteOn (Ch. 1, Note: C4 (60), Velocity: 100)
"""

from . import builders
from .status import MidiStatus, MessageCategory, classify, status_of
from .controller import MidiController
from .sysex import (
    ANY_BYTE,
    ANY_DEVICE,
    GeneralInformation,
    NrtSubId,
    RtSubId,
    validate_sysex,
)
from .message import MidiMessage, ChannelMessage, SystemMessage, SysExMessage
from .protocol import MidiInputPort, MidiOutputProtocol
from .rtmidi_transport import RtMidiInputPort, RtMidiOutputPort
from .device import MidiDevice

__all__ = [
    'builders',
    'MidiStatus',
    'MessageCategory',
    'classify',
    'status_of',
    'MidiController',
    'ANY_BYTE',
    'ANY_DEVICE',
    'GeneralInformation',
    'NrtSubId',
    'RtSubId',
    'validate_sysex',
    'MidiMessage',
    'ChannelMessage',
    'SystemMessage',
    'SysExMessage',
    'MidiInputPort',
    'MidiOutputProtocol',
    'RtMidiInputPort',
    'RtMidiOutputPort',
    'MidiDevice',
]
