"""
Channel State

Live snapshot of one MIDI channel: active notes, controllers, pressure,
pitch bend and sustain-pedal hold.
"""

import logging
from collections import deque
from typing import TYPE_CHECKING, Deque, List, Optional

from ..midi.controller import MidiController, SWITCH_THRESHOLD
from ..midi.message import ChannelMessage, MidiMessage
from ..midi.status import MessageCategory, MidiStatus
from ..models.codec_config import CodecConfig, DEFAULT_CODEC_CONFIG
from ..utils.event_emitter import EventEmitter

if TYPE_CHECKING:
    from .device_state import DeviceState

logger = logging.getLogger(__name__)

NOTE_COUNT = 128
CONTROLLER_COUNT = 128

# Channel index of the aggregate channel that sees every channel's messages
OMNI = -1


class ChannelState(EventEmitter):
    """
    State of a single MIDI channel.

    A note can be retriggered before it is released, so each note keeps a
    FIFO of its outstanding Note-On messages; a Note-Off releases the oldest.
    While the sustain pedal (controller 64) is down, Note-Offs are parked in
    held_notes and applied in order when the pedal comes up.

    Events emitted:
        - 'message': A message was applied, including held Note-Offs when
          they are released (data: ChannelMessage)
        - 'updated': The state changed (data: ChannelState)
    """

    def __init__(self, channel: int, device: Optional['DeviceState'] = None,
                 config: CodecConfig = DEFAULT_CODEC_CONFIG):
        """
        Args:
            channel: Zero-based channel index, or OMNI for the aggregate channel
            device: Owning device state, receives this channel's 'message' events
            config: Supplies the per-note queue depth
        """
        super().__init__()
        self.channel = channel
        self.device = device
        self._max_depth = config.max_note_queue_depth

        self.channel_pressure = 0
        self.pitch_bend = 0
        self.active_notes: List[Deque[ChannelMessage]] = []
        self.held_notes: Deque[ChannelMessage] = deque()
        self.controllers: List[int] = []
        self.key_pressure: List[int] = []
        self._clear()

    @property
    def is_omni(self) -> bool:
        return self.channel == OMNI

    @property
    def hold_on(self) -> bool:
        """True while the sustain pedal is down."""
        return self.controllers[MidiController.SUSTAIN_PEDAL_SWITCH] >= SWITCH_THRESHOLD

    def is_note_active(self, note: int) -> bool:
        return len(self.active_notes[note]) > 0

    def active_note_numbers(self) -> List[int]:
        """Numbers of all notes with at least one outstanding Note-On, ascending."""
        return [note for note, queue in enumerate(self.active_notes) if queue]

    def update(self, message: MidiMessage) -> None:
        """
        Apply one message to the channel.

        Non-channel messages, frames too short for their status and frames
        with a data byte above 0x7F are ignored.
        """
        if message.category is not MessageCategory.CHANNEL or not message.is_complete:
            logger.debug("[ChannelState] Ignoring %s", message.hex())
            return
        if any(b & 0x80 for b in message.data[1:]):
            logger.debug("[ChannelState] Ignoring out-of-range data bytes: %s", message.hex())
            return

        status = message.status

        if status == MidiStatus.NOTE_ON:
            self.active_notes[message.note].append(message)

        elif status == MidiStatus.NOTE_OFF:
            if self.hold_on:
                self.held_notes.append(message)
                self.emit('updated', self)
                return
            self._release(message.note)

        elif status == MidiStatus.KEY_PRESSURE:
            self.key_pressure[message.note] = message.pressure

        elif status == MidiStatus.CONTROL_CHANGE:
            self.controllers[message.controller] = message.value
            if message.controller == MidiController.SUSTAIN_PEDAL_SWITCH and message.value < SWITCH_THRESHOLD:
                self._release_held_notes()

        elif status == MidiStatus.PITCH_BEND:
            self.pitch_bend = message.pitch_bend

        elif status == MidiStatus.CHANNEL_PRESSURE:
            self.channel_pressure = message.pressure

        self._publish(message)
        self.emit('updated', self)

    def reset(self) -> None:
        """Return to the initial state. The channel index is kept."""
        self._clear()
        self.emit('updated', self)

    def _clear(self) -> None:
        self.channel_pressure = 0
        self.pitch_bend = 0
        self.active_notes = [deque(maxlen=self._max_depth) for _ in range(NOTE_COUNT)]
        self.held_notes.clear()
        self.controllers = [0] * CONTROLLER_COUNT
        self.key_pressure = [0] * NOTE_COUNT

    def _release(self, note: int) -> None:
        queue = self.active_notes[note]
        if queue:
            queue.popleft()

    def _release_held_notes(self) -> None:
        while self.held_notes:
            held = self.held_notes.popleft()
            self._release(held.note)
            self._publish(held)

    def _publish(self, message: ChannelMessage) -> None:
        self.emit('message', message)
        if self.device is not None:
            self.device.emit('message', message)

    def __repr__(self) -> str:
        name = 'omni' if self.is_omni else str(self.channel + 1)
        return (f"ChannelState(channel={name}, notes={self.active_note_numbers()}, "
                f"held={len(self.held_notes)}, pitch_bend={self.pitch_bend}, "
                f"pressure={self.channel_pressure})")
