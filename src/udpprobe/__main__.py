"""
udpprobe.__main__

CLI entry point.

    python -m udpprobe tx <target_ip:port>
    python -m udpprobe rx <listen_port>

This file only parses arguments and turns configuration and bind errors into
a non-zero exit. The loops live in udpprobe.net.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from udpprobe.net.endpoint import EndpointError, format_endpoint, parse_endpoint, parse_port
from udpprobe.net.rx import BIND_ADDRESS, Receiver
from udpprobe.net.tx import PACKET_SIZE, SEND_INTERVAL_US, Transmitter


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="udpprobe",
        description="UDP link probe: send fixed-size datagrams at a fixed rate, or log their arrival timing.",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    tx = sub.add_parser(
        "tx",
        help=f"send {PACKET_SIZE}-byte datagrams every {SEND_INTERVAL_US} us until interrupted",
    )
    tx.add_argument("target", help="destination ip:port ([ipv6]:port for IPv6)")

    rx = sub.add_parser(
        "rx",
        help="print since_start_ns,diff_ns,size,sender for every datagram received",
    )
    rx.add_argument("port", help="local UDP port to bind on all interfaces")

    return p.parse_args(argv)


def _run_tx(target_arg: str) -> int:
    try:
        target = parse_endpoint(target_arg)
    except EndpointError as exc:
        raise SystemExit(f"invalid target {target_arg!r}: {exc}") from exc

    tx = Transmitter(target)
    print(
        f"sending {tx.packet_size} bytes to {format_endpoint(target)} every {tx.interval_us} us",
        file=sys.stderr,
    )
    try:
        tx.run()
    except KeyboardInterrupt:
        pass
    finally:
        tx.close()
        print(
            f"sent {tx.counters['sent']} datagrams ({tx.counters['send_errors']} errors, "
            f"{tx.counters['late']} late)",
            file=sys.stderr,
        )
    return 0


def _run_rx(port_arg: str) -> int:
    try:
        port = parse_port(port_arg)
    except EndpointError as exc:
        raise SystemExit(f"invalid port {port_arg!r}: {exc}") from exc

    try:
        rx = Receiver(port, bind_address=BIND_ADDRESS)
    except OSError as exc:
        raise SystemExit(f"socket bind failed on {BIND_ADDRESS}:{port}: {exc}") from exc

    print(f"listening on {format_endpoint(rx.address)}", file=sys.stderr)
    try:
        rx.run()
    except KeyboardInterrupt:
        pass
    finally:
        rx.close()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)

    if args.cmd == "tx":
        return _run_tx(args.target)
    if args.cmd == "rx":
        return _run_rx(args.port)

    raise SystemExit(f"unknown command: {args.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
