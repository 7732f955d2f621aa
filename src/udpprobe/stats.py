"""
udpprobe.stats

Offline summary of receiver logs.

The receiver prints one ``since_start_ns,diff_ns,size,sender`` line per
datagram. This module reads those lines back and reduces them to the numbers
a quick link check needs: rate, jitter and an estimate of lost packets.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .net.endpoint import EndpointError, parse_endpoint
from .net.rx import ArrivalRecord

__all__ = [
    "parse_arrival_line",
    "load_arrival_log",
    "summarize",
    "format_summary",
    "summarize_log",
]


def parse_arrival_line(line: str) -> ArrivalRecord:
    """
    Parse one receiver output line. Raises ValueError on malformed input.
    """
    parts = line.strip().split(",")
    if len(parts) != 4:
        raise ValueError(f"expected 4 comma-separated fields, got {len(parts)}: {line!r}")
    try:
        since, diff, size = int(parts[0]), int(parts[1]), int(parts[2])
    except ValueError as exc:
        raise ValueError(f"non-integer timing field in {line!r}") from exc
    try:
        sender = parse_endpoint(parts[3])
    except EndpointError as exc:
        raise ValueError(f"bad sender in {line!r}: {exc}") from exc
    return ArrivalRecord(time_since_start_ns=since, time_diff_ns=diff, size=size, sender=sender)


def load_arrival_log(path: str) -> List[ArrivalRecord]:
    records = []
    with open(path, "r", encoding="ascii") as f:
        for line in f:
            if line.strip():
                records.append(parse_arrival_line(line))
    return records


def summarize(
    records: Sequence[ArrivalRecord],
    *,
    expected_interval_ns: Optional[int] = None,
) -> Dict[str, object]:
    """
    Reduce arrival records to a flat dict of link statistics.

    Parameters
    ----------
    records : sequence of ArrivalRecord
        Records in arrival order, as printed by the receiver.
    expected_interval_ns : int, optional
        The transmitter's send interval. When given, the number of packets
        that should have arrived over the observed span is estimated and the
        shortfall reported as ``lost``.

    Notes
    -----
    The first record's diff is measured from receiver start, not from a
    previous packet, so inter-arrival statistics use records 2..N only.
    """
    if not records:
        raise ValueError("no arrival records to summarize")

    since = np.array([r.time_since_start_ns for r in records], dtype=np.int64)
    sizes = np.array([r.size for r in records], dtype=np.int64)
    gaps = np.array([r.time_diff_ns for r in records[1:]], dtype=np.int64)

    count = int(since.size)
    span_ns = int(since[-1] - since[0])
    total_bytes = int(sizes.sum())

    out: Dict[str, object] = {
        "packets": count,
        "bytes": total_bytes,
        "senders": len({r.sender for r in records}),
        "first_ns": int(since[0]),
        "span_ns": span_ns,
        "size_min": int(sizes.min()),
        "size_max": int(sizes.max()),
    }

    if gaps.size:
        out.update(
            {
                "interval_mean_ns": float(np.mean(gaps)),
                "interval_min_ns": int(gaps.min()),
                "interval_p50_ns": float(np.percentile(gaps, 50)),
                "interval_p99_ns": float(np.percentile(gaps, 99)),
                "interval_max_ns": int(gaps.max()),
                "jitter_ns": float(np.std(gaps)),
            }
        )
    else:
        out.update(
            {
                "interval_mean_ns": None,
                "interval_min_ns": None,
                "interval_p50_ns": None,
                "interval_p99_ns": None,
                "interval_max_ns": None,
                "jitter_ns": None,
            }
        )

    if span_ns > 0:
        # count - 1 gaps fit in the observed span
        out["rate_pps"] = (count - 1) * 1e9 / span_ns
        out["throughput_bps"] = float(sizes[1:].sum()) * 8 * 1e9 / span_ns
    else:
        out["rate_pps"] = None
        out["throughput_bps"] = None

    if expected_interval_ns is not None:
        if expected_interval_ns <= 0:
            raise ValueError("expected_interval_ns must be > 0")
        expected = int(round(span_ns / float(expected_interval_ns))) + 1
        lost = max(0, expected - count)
        out["expected_packets"] = expected
        out["lost"] = lost
        out["loss_ratio"] = lost / float(expected)

    return out


def _fmt_value(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def format_summary(summary: Dict[str, object], keys: Optional[Iterable[str]] = None) -> str:
    keys = list(keys) if keys is not None else list(summary.keys())
    width = max((len(k) for k in keys), default=0)
    return "\n".join(f"{k.ljust(width)}: {_fmt_value(summary.get(k))}" for k in keys)


def summarize_log(path: str, *, expected_interval_ns: Optional[int] = None) -> Dict[str, object]:
    return summarize(load_arrival_log(path), expected_interval_ns=expected_interval_ns)
