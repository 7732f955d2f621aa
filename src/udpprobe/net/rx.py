"""
udpprobe.net.rx

Blocking UDP receiver that prints one timing record per datagram.

Each line is ``since_start_ns,diff_ns,size,sender``. The first packet's diff
is measured from receiver start, so it equals its own ``since_start_ns``.
"""

from __future__ import annotations

import socket
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional, TextIO, Tuple

from .endpoint import address_family, format_endpoint

__all__ = ["BIND_ADDRESS", "RX_BUFFER_SIZE", "ArrivalRecord", "Receiver"]

BIND_ADDRESS = "0.0.0.0"
RX_BUFFER_SIZE = 9048


@dataclass(frozen=True)
class ArrivalRecord:
    time_since_start_ns: int
    time_diff_ns: int
    size: int
    sender: Tuple[str, int]

    def format_line(self) -> str:
        return f"{self.time_since_start_ns},{self.time_diff_ns},{self.size},{format_endpoint(self.sender)}"


class Receiver:
    """
    Bind ``port`` on ``bind_address`` and time every incoming datagram.

    Binding happens in the constructor so a busy port fails before any
    receive loop starts (``OSError`` propagates). The start time used for
    ``time_since_start_ns`` is taken right after the bind.
    """

    def __init__(
        self,
        port: int,
        *,
        bind_address: str = BIND_ADDRESS,
        buffer_size: int = RX_BUFFER_SIZE,
        clock: Callable[[], int] = time.monotonic_ns,
        log: Optional[TextIO] = None,
    ) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")
        self.buffer_size = int(buffer_size)
        self._clock = clock
        self._log = log
        self.counters = {
            "received": 0,
            "recv_errors": 0,
        }

        self.sock = socket.socket(address_family(bind_address), socket.SOCK_DGRAM)
        try:
            self.sock.bind((bind_address, int(port)))
        except OSError:
            self.sock.close()
            raise

        self.start_ns = self._clock()
        self._last_ns = self.start_ns

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self.sock.getsockname()[:2]
        return host, int(port)

    def recv_once(self) -> ArrivalRecord:
        """
        Block for one datagram and return its arrival record.
        """
        data, addr = self.sock.recvfrom(self.buffer_size)
        now = self._clock()
        record = ArrivalRecord(
            time_since_start_ns=now - self.start_ns,
            time_diff_ns=now - self._last_ns,
            size=len(data),
            sender=(addr[0], int(addr[1])),
        )
        self._last_ns = now
        self.counters["received"] += 1
        return record

    def run(self, count: Optional[int] = None, out: Optional[TextIO] = None) -> int:
        """
        Receive and print records until ``count`` datagrams arrived (or forever).

        Receive errors are reported on stderr and the loop keeps waiting.
        A socket timeout set by the caller is not an error and propagates.
        Returns the number of records printed.
        """
        out = out or sys.stdout
        printed = 0
        while count is None or printed < count:
            try:
                record = self.recv_once()
            except socket.timeout:
                raise
            except OSError as exc:
                self.counters["recv_errors"] += 1
                print(f"sock recvfrom failed: {exc}", file=self._log or sys.stderr)
                continue
            out.write(record.format_line() + "\n")
            out.flush()
            printed += 1
        return printed

    def close(self) -> None:
        self.sock.close()
