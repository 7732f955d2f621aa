"""
udpprobe.net.tx

Fixed-rate UDP transmitter.

Sends a zeroed payload of fixed size to one target, then sleeps for the send
interval, then repeats. The loop never compensates for time spent in
``sendto``: a slow send pushes every later packet back by the same amount.
"""

from __future__ import annotations

import socket
import sys
import time
from typing import Callable, Optional, TextIO, Tuple

from .endpoint import address_family, format_endpoint

__all__ = ["PACKET_SIZE", "SEND_INTERVAL_US", "Transmitter"]

PACKET_SIZE = 500
SEND_INTERVAL_US = 1000


class Transmitter:
    """
    Send ``packet_size``-byte datagrams to ``target`` every ``interval_us``.

    Parameters
    ----------
    target : (str, int)
        Destination IP literal and port.
    packet_size : int, optional
        Payload length in bytes. Defaults to 500.
    interval_us : int, optional
        Sleep after each send, in microseconds. Defaults to 1000.
    bind_address : str, optional
        Local IP to send from. The kernel picks the source port.
    sleep, clock :
        Injection points for tests; ``clock`` must return nanoseconds.
    log : file, optional
        Where late-send and send-error diagnostics are printed (stderr).
    """

    def __init__(
        self,
        target: Tuple[str, int],
        *,
        packet_size: int = PACKET_SIZE,
        interval_us: int = SEND_INTERVAL_US,
        bind_address: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = time.perf_counter_ns,
        log: Optional[TextIO] = None,
    ) -> None:
        if packet_size < 0:
            raise ValueError("packet_size must be >= 0")
        if interval_us < 0:
            raise ValueError("interval_us must be >= 0")
        self.target = (str(target[0]), int(target[1]))
        self.packet_size = int(packet_size)
        self.interval_us = int(interval_us)
        self.payload = bytes(self.packet_size)
        self._sleep = sleep
        self._clock = clock
        self._log = log
        self.counters = {
            "sent": 0,
            "send_errors": 0,
            "late": 0,
        }

        self.sock = socket.socket(address_family(self.target[0]), socket.SOCK_DGRAM)
        if bind_address is not None:
            try:
                self.sock.bind((bind_address, 0))
            except OSError:
                self.sock.close()
                raise

    def _warn(self, msg: str) -> None:
        print(msg, file=self._log or sys.stderr)

    def send_once(self) -> bool:
        """
        Send one datagram. Returns False if the send failed.

        Failures are reported and counted, never raised: the next tick tries
        again.
        """
        t0 = self._clock()
        try:
            self.sock.sendto(self.payload, self.target)
        except OSError as exc:
            self.counters["send_errors"] += 1
            self._warn(f"sendto {format_endpoint(self.target)} failed: {exc}")
            return False
        took_ns = self._clock() - t0
        self.counters["sent"] += 1

        if took_ns > self.interval_us * 1000:
            self.counters["late"] += 1
            self._warn(f"socket send took too long ({took_ns // 1000} us > {self.interval_us} us)")
        return True

    def run(self, count: Optional[int] = None) -> int:
        """
        Send-then-sleep loop. Runs forever unless ``count`` is given.

        Returns the number of datagrams sent successfully.
        """
        interval_s = self.interval_us / 1_000_000.0
        ticks = 0
        while count is None or ticks < count:
            self.send_once()
            ticks += 1
            self._sleep(interval_s)
        return self.counters["sent"]

    def close(self) -> None:
        self.sock.close()
