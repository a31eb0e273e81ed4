"""
midiwire - Python Package

This package provides:
- A MIDI wire-format codec and frame builders
- A channel/device state engine (active notes, controllers, sustain hold)
- A request/response exchange protocol for device handshakes
- python-rtmidi transport adapters

Example:
    from midiwire import MidiMessage, DeviceState, MidiDevice, MidiExchange
    from midiwire.midi import builders
"""

__version__ = '1.0.0'

# Export main classes and functions
from .errors import (
    MidiWireError,
    MalformedFrameError,
    ProtocolViolationError,
    ExchangeError,
    ExchangeTimeoutError,
    TransportUnavailableError,
)
from .models.codec_config import CodecConfig
from .midi.message import MidiMessage, ChannelMessage, SystemMessage, SysExMessage
from .midi.device import MidiDevice
from .state.channel_state import ChannelState
from .state.device_state import DeviceState
from .exchange.exchange import MidiExchange, ExchangeEvent, RequiredResponse, ExchangeState
from .exchange.identity import IdentityRequest, DeviceIdentity
from .utils.event_emitter import EventEmitter

__all__ = [
    '__version__',
    'MidiWireError',
    'MalformedFrameError',
    'ProtocolViolationError',
    'ExchangeError',
    'ExchangeTimeoutError',
    'TransportUnavailableError',
    'CodecConfig',
    'MidiMessage',
    'ChannelMessage',
    'SystemMessage',
    'SysExMessage',
    'MidiDevice',
    'ChannelState',
    'DeviceState',
    'MidiExchange',
    'ExchangeEvent',
    'RequiredResponse',
    'ExchangeState',
    'IdentityRequest',
    'DeviceIdentity',
    'EventEmitter',
]
