"""
udpprobe.net

Socket side of udpprobe: endpoint parsing, the fixed-rate transmitter and
the timing receiver. Nothing here depends on the offline analysis modules.
"""

from __future__ import annotations

from .endpoint import EndpointError, format_endpoint, parse_endpoint, parse_port
from .rx import BIND_ADDRESS, RX_BUFFER_SIZE, ArrivalRecord, Receiver
from .tx import PACKET_SIZE, SEND_INTERVAL_US, Transmitter

__all__ = [
    "EndpointError",
    "format_endpoint",
    "parse_endpoint",
    "parse_port",
    "BIND_ADDRESS",
    "RX_BUFFER_SIZE",
    "ArrivalRecord",
    "Receiver",
    "PACKET_SIZE",
    "SEND_INTERVAL_US",
    "Transmitter",
]
