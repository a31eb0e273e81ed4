"""
Pytest configuration and shared fixtures

This file is automatically loaded by pytest and provides
fixtures that can be used across all test files.
"""

import pytest
from typing import List, Optional, Tuple

from midiwire.midi.device import MidiDevice
from midiwire.midi.protocol import MidiInputPort, MidiOutputProtocol


class RecordingOutput(MidiOutputProtocol):
    """Output port that records every frame it is asked to send."""

    def __init__(self):
        self.sent: List[Tuple[bytes, Optional[float]]] = []
        self.on_send = None

    @property
    def is_connected(self) -> bool:
        return True

    def send(self, data, time=None) -> None:
        self.sent.append((bytes(data), time))
        if self.on_send is not None:
            self.on_send(bytes(data))

    @property
    def frames(self) -> List[bytes]:
        return [frame for frame, _ in self.sent]


@pytest.fixture
def input_port():
    """In-process input port fed by the test"""
    return MidiInputPort('test-in')


@pytest.fixture
def output_port():
    """Output port recording sent frames"""
    return RecordingOutput()


@pytest.fixture
def device(input_port, output_port):
    """Yamaha-style device (manufacturer 0x43, device id 0x10) on the test ports"""
    return MidiDevice(0x43, device_id=0x10, input_port=input_port, output_port=output_port)
