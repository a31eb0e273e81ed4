"""
Codec Config Model

Configuration for decoding inbound frames and tracking note state.
"""

from dataclasses import dataclass
from typing import Dict, Any

DEFAULT_MAX_NOTE_QUEUE_DEPTH = 32

# Timeout for each exchange event, in milliseconds
DEFAULT_EXCHANGE_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class CodecConfig:
    """
    Configuration threaded through the codec and the state engine.

    Attributes:
        convert_zero_velocity_note_on: Rewrite 3-byte Note-On frames with
            velocity 0 into Note-Off frames when a message is constructed
        max_note_queue_depth: Maximum number of outstanding Note-On
            occurrences tracked per note; the oldest is dropped beyond it
    """
    convert_zero_velocity_note_on: bool = True
    max_note_queue_depth: int = DEFAULT_MAX_NOTE_QUEUE_DEPTH

    def __post_init__(self):
        if self.max_note_queue_depth < 1:
            raise ValueError(
                f"max_note_queue_depth must be at least 1, got {self.max_note_queue_depth}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CodecConfig':
        """Create a CodecConfig from a dictionary"""
        # Handle both snake_case and camelCase keys
        return cls(
            convert_zero_velocity_note_on=data.get(
                'convert_zero_velocity_note_on',
                data.get('convertZeroVelocityNoteOn', True)
            ),
            max_note_queue_depth=data.get(
                'max_note_queue_depth',
                data.get('maxNoteQueueDepth', DEFAULT_MAX_NOTE_QUEUE_DEPTH)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (camelCase keys)"""
        return {
            'convertZeroVelocityNoteOn': self.convert_zero_velocity_note_on,
            'maxNoteQueueDepth': self.max_note_queue_depth,
        }


DEFAULT_CODEC_CONFIG = CodecConfig()
