"""
udpprobe

UDP link probe for ad-hoc latency, jitter and loss checks.

The package keeps a hard separation between:
- the live socket loops (udpprobe.net: transmitter, receiver, endpoints)
- offline analysis of receiver logs (udpprobe.stats, udpprobe.timeline)

The CLI (``python -m udpprobe``) only exposes the ``tx`` and ``rx`` loops.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "EndpointError",
    "parse_endpoint",
    "parse_port",
    "format_endpoint",
    "ArrivalRecord",
    "Receiver",
    "Transmitter",
    "PACKET_SIZE",
    "SEND_INTERVAL_US",
    "RX_BUFFER_SIZE",
    "parse_arrival_line",
    "load_arrival_log",
    "summarize",
    "summarize_log",
    "format_summary",
    "render_timeline",
]

__version__ = "0.1.0"

from .net.endpoint import EndpointError, format_endpoint, parse_endpoint, parse_port  # noqa: E402
from .net.rx import RX_BUFFER_SIZE, ArrivalRecord, Receiver  # noqa: E402
from .net.tx import PACKET_SIZE, SEND_INTERVAL_US, Transmitter  # noqa: E402
from .stats import format_summary, load_arrival_log, parse_arrival_line, summarize, summarize_log  # noqa: E402
from .timeline import render_timeline  # noqa: E402
