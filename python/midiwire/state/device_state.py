"""
Device State

Live state of all 16 channels of a device, plus an omni channel that
aggregates every channel's activity.
"""

from typing import List

from ..midi.message import MidiMessage
from ..midi.status import MessageCategory
from ..models.codec_config import CodecConfig, DEFAULT_CODEC_CONFIG
from ..utils.event_emitter import EventEmitter
from .channel_state import ChannelState, OMNI

CHANNEL_COUNT = 16


class DeviceState(EventEmitter):
    """
    Routes decoded messages to the addressed channel and to omni.

    Events emitted:
        - 'message': A message was applied on one of the 16 channels, including
          held Note-Offs when the pedal comes up (data: ChannelMessage)
        - 'updated': A message was routed or the state was reset (data: DeviceState)

    Example:
        state = DeviceState()
        device.on('channel', state.update)
        state.channels[0].active_note_numbers()
    """

    def __init__(self, config: CodecConfig = DEFAULT_CODEC_CONFIG):
        super().__init__()
        self.channels: List[ChannelState] = [
            ChannelState(index, self, config) for index in range(CHANNEL_COUNT)
        ]
        self.omni = ChannelState(OMNI, config=config)

    def get_channel_state(self, index: int) -> ChannelState:
        """Channel state by zero-based index; any other index returns omni."""
        if 0 <= index < CHANNEL_COUNT:
            return self.channels[index]
        return self.omni

    def update(self, message: MidiMessage) -> None:
        """Apply a message; only channel messages change state."""
        if message.category is MessageCategory.CHANNEL and message.is_complete:
            self.channels[message.channel].update(message)
            self.omni.update(message)

        self.emit('updated', self)

    def reset(self) -> None:
        """Reset all channels and omni to their initial state."""
        for channel in self.channels:
            channel.reset()
        self.omni.reset()
        self.emit('updated', self)
