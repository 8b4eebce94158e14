from __future__ import annotations

import math
from typing import Sequence

Point = tuple[float, float]


def fmt(value: float) -> str:
    out = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if out in ("-0", "") else out


def polar(cx: float, cy: float, r: float, angle_deg: float) -> Point:
    """Point on a circle; 0 degrees is twelve o'clock, angles grow clockwise."""
    rad = math.radians(angle_deg - 90.0)
    return (cx + r * math.cos(rad), cy + r * math.sin(rad))


def polyline_path(points: Sequence[Point]) -> str:
    if not points:
        return ""
    head = f"M {fmt(points[0][0])} {fmt(points[0][1])}"
    return " ".join([head] + [f"L {fmt(x)} {fmt(y)}" for x, y in points[1:]])


def smooth_path(points: Sequence[Point], tension: float = 0.5) -> str:
    """Catmull-Rom spline through ``points`` expressed as cubic Bezier segments."""
    if len(points) < 3:
        return polyline_path(points)
    k = max(0.0, min(1.0, tension)) / 3.0
    parts = [f"M {fmt(points[0][0])} {fmt(points[0][1])}"]
    for i in range(len(points) - 1):
        p0 = points[i - 1] if i > 0 else points[i]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[i + 2] if i + 2 < len(points) else p2
        c1 = (p1[0] + (p2[0] - p0[0]) * k, p1[1] + (p2[1] - p0[1]) * k)
        c2 = (p2[0] - (p3[0] - p1[0]) * k, p2[1] - (p3[1] - p1[1]) * k)
        parts.append(f"C {fmt(c1[0])} {fmt(c1[1])}, {fmt(c2[0])} {fmt(c2[1])}, {fmt(p2[0])} {fmt(p2[1])}")
    return " ".join(parts)


def area_path(top: Sequence[Point], bottom: Sequence[Point], *, smooth: bool = False, tension: float = 0.5) -> str:
    """Closed region between an upper edge and a lower edge (both left to right)."""
    if not top or not bottom:
        return ""
    upper = smooth_path(top, tension) if smooth else polyline_path(top)
    lower = list(reversed(bottom))
    if smooth and len(lower) >= 3:
        lower_d = smooth_path(lower, tension)
        # Drop the leading move so the outline stays one subpath.
        lower_d = "L" + lower_d[1:]
    else:
        lower_d = " ".join(f"L {fmt(x)} {fmt(y)}" for x, y in lower)
    return f"{upper} {lower_d} Z"


def sector_path(
    cx: float,
    cy: float,
    inner_r: float,
    outer_r: float,
    start_deg: float,
    end_deg: float,
) -> str:
    """Annular sector (or pie wedge when ``inner_r`` is 0)."""
    extent = end_deg - start_deg
    if extent <= 0 or outer_r <= 0:
        return ""
    if extent >= 360.0 - 1e-9:
        # A single arc command cannot describe a full turn.
        half = start_deg + 180.0
        outer = (
            f"M {fmt(polar(cx, cy, outer_r, start_deg)[0])} {fmt(polar(cx, cy, outer_r, start_deg)[1])} "
            f"{_arc(cx, cy, outer_r, half, 1)} {_arc(cx, cy, outer_r, start_deg + 360.0, 1)} Z"
        )
        if inner_r <= 0:
            return outer
        sx, sy = polar(cx, cy, inner_r, start_deg)
        inner = f"M {fmt(sx)} {fmt(sy)} {_arc(cx, cy, inner_r, half, 0)} {_arc(cx, cy, inner_r, start_deg + 360.0, 0)} Z"
        return f"{outer} {inner}"

    large = 1 if extent > 180.0 else 0
    ox0, oy0 = polar(cx, cy, outer_r, start_deg)
    ox1, oy1 = polar(cx, cy, outer_r, end_deg)
    parts = [f"M {fmt(ox0)} {fmt(oy0)}", f"A {fmt(outer_r)} {fmt(outer_r)} 0 {large} 1 {fmt(ox1)} {fmt(oy1)}"]
    if inner_r > 0:
        ix1, iy1 = polar(cx, cy, inner_r, end_deg)
        ix0, iy0 = polar(cx, cy, inner_r, start_deg)
        parts.append(f"L {fmt(ix1)} {fmt(iy1)}")
        parts.append(f"A {fmt(inner_r)} {fmt(inner_r)} 0 {large} 0 {fmt(ix0)} {fmt(iy0)}")
    else:
        parts.append(f"L {fmt(cx)} {fmt(cy)}")
    parts.append("Z")
    return " ".join(parts)


def _arc(cx: float, cy: float, r: float, to_deg: float, sweep: int) -> str:
    x, y = polar(cx, cy, r, to_deg)
    return f"A {fmt(r)} {fmt(r)} 0 0 {sweep} {fmt(x)} {fmt(y)}"


def ribbon_path(x0: float, y0_top: float, y0_bot: float, x1: float, y1_top: float, y1_bot: float) -> str:
    """Filled band between two vertical edges with S-shaped Bezier borders."""
    mid = (x0 + x1) / 2.0
    return (
        f"M {fmt(x0)} {fmt(y0_top)} "
        f"C {fmt(mid)} {fmt(y0_top)}, {fmt(mid)} {fmt(y1_top)}, {fmt(x1)} {fmt(y1_top)} "
        f"L {fmt(x1)} {fmt(y1_bot)} "
        f"C {fmt(mid)} {fmt(y1_bot)}, {fmt(mid)} {fmt(y0_bot)}, {fmt(x0)} {fmt(y0_bot)} Z"
    )
