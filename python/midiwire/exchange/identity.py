"""
Identity Request

Universal device inquiry: asks a device who it is.

    Request:  F0 7E <dev> 06 01 F7
    Reply:    F0 7E <dev> 06 02 <manufacturer id> <family LSB MSB> <model LSB MSB> <version x4> F7

The manufacturer id in the reply is one byte, or three bytes starting
with 0x00.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import MalformedFrameError
from ..midi.builders import universal_nrt_sysex
from ..midi.device import MidiDevice
from ..midi.sysex import ANY_BYTE, ANY_DEVICE, GeneralInformation, ManufacturerId, NON_REALTIME, NrtSubId
from .exchange import ExchangeEvent, MidiExchange, RequiredResponse

# F0 7E dev 06 02 id(1) family(2) model(2) version(4)
_MIN_REPLY_LENGTH = 14


@dataclass(frozen=True)
class DeviceIdentity:
    """Contents of an identity reply."""
    device_id: int
    manufacturer_id: ManufacturerId
    family: int
    model: int
    version: Tuple[int, int, int, int]

    @classmethod
    def from_reply(cls, data: bytes) -> 'DeviceIdentity':
        """
        Parse an identity reply frame.

        Raises:
            MalformedFrameError: If the frame is not a complete identity reply
        """
        if (len(data) < _MIN_REPLY_LENGTH or data[1] != NON_REALTIME
                or data[3] != NrtSubId.GENERAL_INFORMATION
                or data[4] != GeneralInformation.IDENTITY_REPLY):
            raise MalformedFrameError(f"Not an identity reply: {data.hex(' ')}", data)

        if data[5] == 0x00:
            manufacturer_id: ManufacturerId = (0x00, data[6], data[7])
            index = 8
        else:
            manufacturer_id = data[5]
            index = 6

        fields = data[index:index + 8]
        if len(fields) < 8:
            raise MalformedFrameError(f"Identity reply too short: {data.hex(' ')}", data)

        return cls(
            device_id=data[2],
            manufacturer_id=manufacturer_id,
            family=fields[0] | (fields[1] << 7),
            model=fields[2] | (fields[3] << 7),
            version=(fields[4], fields[5], fields[6], fields[7]),
        )

    @property
    def version_string(self) -> str:
        return '.'.join(str(part) for part in self.version)


class IdentityRequest(MidiExchange):
    """
    Exchange that sends an identity request and parses the reply.

    The reply may come from any device id, since many devices answer
    under their own id whatever the request addressed.
    """

    def __init__(self, device: MidiDevice, timeout_ms: Optional[int] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        request = universal_nrt_sysex(
            device.device_id,
            NrtSubId.GENERAL_INFORMATION,
            GeneralInformation.IDENTITY_REQUEST,
            terminate=True
        )
        reply = RequiredResponse(
            manufacturer_id=NON_REALTIME,
            device_id=ANY_DEVICE,
            header=(NrtSubId.GENERAL_INFORMATION, GeneralInformation.IDENTITY_REPLY, ANY_BYTE),
        )
        super().__init__(device, ExchangeEvent(request=request, responses=[reply]), timeout_ms, loop)
        self.identity: Optional[DeviceIdentity] = None

    def exchange_did_complete(self, responses: List[bytes]) -> List[bytes]:
        self.identity = DeviceIdentity.from_reply(responses[0])
        return responses
