"""
udpprobe.timeline

Render a receiver log as a PNG: one bar per inter-arrival gap, in arrival
order, with an optional reference line at the expected send interval.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from PIL import Image, ImageDraw

from .net.rx import ArrivalRecord

__all__ = ["render_timeline"]

_BG = (30, 30, 30)
_BAR = (250, 169, 77)
_REF = (120, 200, 120)
_AXIS = (80, 80, 80)


def _gaps_ns(records: Sequence[ArrivalRecord]) -> np.ndarray:
    if len(records) > 1:
        return np.array([r.time_diff_ns for r in records[1:]], dtype=np.float64)
    return np.array([records[0].time_diff_ns], dtype=np.float64)


def render_timeline(
    records: Sequence[ArrivalRecord],
    out_path: str,
    *,
    width: int = 800,
    height: int = 240,
    expected_interval_ns: Optional[int] = None,
    margin: int = 8,
) -> str:
    """
    Draw the inter-arrival gaps of ``records`` and save a PNG to ``out_path``.

    Bars are scaled so the largest gap (or the reference line, if higher)
    touches the top margin. With more gaps than pixel columns, each column
    shows the largest gap that falls in it, so spikes stay visible.
    """
    if not records:
        raise ValueError("no arrival records to render")
    if width <= 2 * margin or height <= 2 * margin:
        raise ValueError("image too small for margins")

    gaps = _gaps_ns(records)
    plot_w = width - 2 * margin
    plot_h = height - 2 * margin

    if gaps.size > plot_w:
        edges = np.linspace(0, gaps.size, plot_w + 1).astype(np.int64)
        cols = np.array([gaps[a:b].max() if b > a else 0.0 for a, b in zip(edges[:-1], edges[1:])])
    else:
        cols = gaps

    top = float(cols.max()) if cols.size else 0.0
    if expected_interval_ns is not None:
        top = max(top, float(expected_interval_ns))
    scale = (plot_h - 1) / top if top > 0 else 0.0

    img = Image.new("RGB", (int(width), int(height)), _BG)
    draw = ImageDraw.Draw(img)
    base_y = height - margin - 1
    draw.line((margin, base_y, width - margin - 1, base_y), fill=_AXIS)

    bar_w = plot_w / float(cols.size)
    for idx, gap in enumerate(cols):
        x0 = margin + int(idx * bar_w)
        x1 = max(x0, margin + int((idx + 1) * bar_w) - 1)
        y0 = base_y - int(round(float(gap) * scale))
        draw.rectangle((x0, min(y0, base_y), x1, base_y), fill=_BAR)

    if expected_interval_ns is not None and scale > 0:
        ref_y = base_y - int(round(float(expected_interval_ns) * scale))
        draw.line((margin, ref_y, width - margin - 1, ref_y), fill=_REF)

    img.save(out_path, format="PNG")
    return out_path
