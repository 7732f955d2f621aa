"""
udpprobe.net.endpoint

Parsing for the ip:port and port arguments taken by the tx/rx modes.
"""

from __future__ import annotations

import ipaddress
import socket
from typing import Tuple

__all__ = [
    "EndpointError",
    "parse_endpoint",
    "parse_port",
    "format_endpoint",
    "address_family",
]


class EndpointError(ValueError):
    """Raised when an endpoint or port argument cannot be parsed."""


def parse_port(text: str) -> int:
    """
    Parse a UDP port number in the range 1..65535.
    """
    raw = str(text).strip()
    if not (raw.isascii() and raw.isdigit()):
        raise EndpointError(f"port must be a number, got {text!r}")
    port = int(raw)
    if not 1 <= port <= 65535:
        raise EndpointError(f"port out of range 1..65535: {port}")
    return port


def parse_endpoint(text: str) -> Tuple[str, int]:
    """
    Parse ``a.b.c.d:port`` or ``[v6addr]:port`` into a ``(host, port)`` tuple.

    Only IP literals are accepted; hostnames are rejected so the endpoint
    names exactly one peer.
    """
    raw = str(text).strip()
    if ":" not in raw:
        raise EndpointError(f"expected ip:port, got {text!r}")

    if raw.startswith("["):
        close = raw.find("]")
        if close < 0 or raw[close + 1:close + 2] != ":":
            raise EndpointError(f"expected [ipv6]:port, got {text!r}")
        host, port_text = raw[1:close], raw[close + 2:]
        try:
            addr = ipaddress.IPv6Address(host)
        except ValueError as exc:
            raise EndpointError(f"invalid IPv6 address {host!r}") from exc
    else:
        host, port_text = raw.rsplit(":", 1)
        try:
            addr = ipaddress.IPv4Address(host)
        except ValueError as exc:
            raise EndpointError(f"invalid IPv4 address {host!r}") from exc

    return str(addr), parse_port(port_text)


def format_endpoint(addr: Tuple) -> str:
    """
    Render a socket address as ``ip:port`` (``[ip]:port`` for IPv6).

    Accepts the 4-tuples returned for AF_INET6 sockets as well.
    """
    host, port = addr[0], int(addr[1])
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def address_family(host: str) -> int:
    """Socket family (AF_INET or AF_INET6) for an IP literal."""
    return socket.AF_INET6 if ":" in host else socket.AF_INET
