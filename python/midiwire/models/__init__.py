"""
Data models for midiwire.
"""

from .note import NoteObject, note_name
from .codec_config import CodecConfig, DEFAULT_CODEC_CONFIG, DEFAULT_EXCHANGE_TIMEOUT_MS

__all__ = [
    'NoteObject',
    'note_name',
    'CodecConfig',
    'DEFAULT_CODEC_CONFIG',
    'DEFAULT_EXCHANGE_TIMEOUT_MS',
]
