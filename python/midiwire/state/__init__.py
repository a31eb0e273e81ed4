"""
State engine: folds decoded channel messages into per-channel snapshots.
"""

from .channel_state import ChannelState, OMNI
from .device_state import DeviceState, CHANNEL_COUNT

__all__ = [
    'ChannelState',
    'DeviceState',
    'OMNI',
    'CHANNEL_COUNT',
]
