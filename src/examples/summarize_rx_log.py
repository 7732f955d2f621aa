#!/usr/bin/env python3
"""
Summarize a receiver log and optionally draw its inter-arrival timeline.

Usage:
  python -m udpprobe rx 9999 > rx.log          # on the receiving host
  python -m udpprobe tx 10.0.0.2:9999          # on the sending host
  python3 examples/summarize_rx_log.py rx.log --expected-us 1000 --png rx.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from udpprobe.stats import format_summary, load_arrival_log, summarize  # noqa: E402
from udpprobe.timeline import render_timeline  # noqa: E402


def main() -> int:
    ap = argparse.ArgumentParser(description="Summarize a udpprobe rx log (rate, jitter, estimated loss).")
    ap.add_argument("log", help="file holding the rx output lines")
    ap.add_argument("--expected-us", type=int, default=None, help="sender interval in us, enables loss estimate")
    ap.add_argument("--png", default=None, help="write an inter-arrival timeline PNG here")
    ap.add_argument("--width", type=int, default=800)
    ap.add_argument("--height", type=int, default=240)
    args = ap.parse_args()

    records = load_arrival_log(args.log)
    if not records:
        sys.exit(f"no records in {args.log}")

    expected_ns = args.expected_us * 1000 if args.expected_us else None
    print(format_summary(summarize(records, expected_interval_ns=expected_ns)))

    if args.png:
        render_timeline(
            records,
            args.png,
            width=args.width,
            height=args.height,
            expected_interval_ns=expected_ns,
        )
        print(args.png)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
