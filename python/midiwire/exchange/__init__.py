"""
Exchange protocol: multi-step request/response handshakes with a device.

Usage:
    from midiwire.exchange import MidiExchange, ExchangeEvent, RequiredResponse

    exchange = MidiExchange(device, [
        ExchangeEvent(request=request_frame, responses=[RequiredResponse(header=[0x12])]),
    ], timeout_ms=1000)
    responses = await exchange.start()
"""

from .exchange import ExchangeEvent, ExchangeState, MidiExchange, RequiredResponse
from .identity import DeviceIdentity, IdentityRequest

__all__ = [
    'ExchangeEvent',
    'ExchangeState',
    'MidiExchange',
    'RequiredResponse',
    'DeviceIdentity',
    'IdentityRequest',
]
