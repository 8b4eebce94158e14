from __future__ import annotations

from typing import Optional, Sequence

from dataviz_core.color import contrast_text_color
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import fmt, polar, sector_path
from dataviz_core.primitives import Bounds, Line, Path, Polygon, Primitive, Style, Text
from dataviz_core.scales.band import BandScale
from dataviz_core.scales.linear import LinearScale
from dataviz_plot._common import Series, as_float_array, is_empty, legend, require, safe_chart, safe_div, series_color


def _label_style(theme: ChartTheme, **changes: object) -> Style:
    return Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px).with_(**changes)


@safe_chart("pie_chart")
def pie_chart(
    labels: Sequence[str],
    values: Sequence[float],
    bounds: Bounds,
    *,
    donut_ratio: float = 0.0,
    colors: Optional[Sequence[str]] = None,
    show_percent: bool = True,
    show_legend: bool = True,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Pie (or donut when ``donut_ratio`` > 0); slices run clockwise from twelve o'clock."""
    if is_empty(labels) or is_empty(values):
        return []
    vals = as_float_array(values)
    require(len(labels) == vals.size, f"{len(labels)} labels for {vals.size} values")
    require(bool((vals >= 0).all()), "pie values must be non-negative")
    require(colors is None or len(colors) >= len(labels), "one color per slice is required")
    legend_width = 120.0 if show_legend else 0.0
    cx = bounds.x + (bounds.width - legend_width) / 2.0
    cy = bounds.y + bounds.height / 2.0
    radius = max(0.0, min(bounds.width - legend_width, bounds.height) / 2.0 - 10.0)
    inner = radius * min(0.95, max(0.0, donut_ratio))
    total = float(vals.sum())
    out: list[Primitive] = []
    angle = 0.0
    entries: list[tuple[str, str]] = []
    for i, (label, v) in enumerate(zip(labels, vals)):
        color = colors[i] if colors is not None else theme.color_at(i)
        entries.append((str(label), color))
        extent = 360.0 * safe_div(float(v), total)
        if extent <= 0:
            continue
        out.append(Path(sector_path(cx, cy, inner, radius, angle, angle + extent), Style(fill=color, stroke=theme.background, stroke_width=1.0)))
        if show_percent and extent >= 10.0:
            lx, ly = polar(cx, cy, (inner + radius) / 2.0 if inner > 0 else radius * 0.65, angle + extent / 2.0)
            pct = 100.0 * safe_div(float(v), total)
            out.append(
                Text(
                    f"{pct:.1f}%",
                    lx,
                    ly,
                    _label_style(theme, fill=contrast_text_color(color).hex, text_anchor="middle", dominant_baseline="middle"),
                )
            )
        angle += extent
    if show_legend:
        out += legend(entries, bounds.right - legend_width + 10.0, bounds.y + 20.0, theme)
    return out


@safe_chart("radar_chart")
def radar_chart(
    axis_labels: Sequence[str],
    series: Sequence[Series],
    bounds: Bounds,
    *,
    max_value: Optional[float] = None,
    levels: int = 5,
    fill_opacity: float = 0.25,
    show_legend: bool = True,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(axis_labels) or is_empty(series):
        return []
    n = len(axis_labels)
    require(n >= 3, "radar chart needs at least three axes")
    data = [as_float_array(s.values, label=s.name) for s in series]
    for s, arr in zip(series, data):
        require(arr.size == n, f"series {s.name!r} has {arr.size} values for {n} axes")
    top = max_value if max_value is not None else max(float(arr.max()) for arr in data)
    cx, cy = bounds.center
    radius = max(0.0, min(bounds.width, bounds.height) / 2.0 - 40.0)
    r = LinearScale((0.0, top if top > 0 else 1.0), (0.0, radius), clamp=True)
    step = 360.0 / n
    grid = Style(stroke=theme.grid_stroke, stroke_width=1.0)
    out: list[Primitive] = []
    for level in range(1, max(1, levels) + 1):
        rr = radius * level / max(1, levels)
        out.append(Polygon(tuple(polar(cx, cy, rr, i * step) for i in range(n)), grid))
    for i, label in enumerate(axis_labels):
        ex, ey = polar(cx, cy, radius, i * step)
        out.append(Line(cx, cy, ex, ey, grid))
        lx, ly = polar(cx, cy, radius + 14.0, i * step)
        out.append(Text(str(label), lx, ly, _label_style(theme, text_anchor="middle", dominant_baseline="middle")))
    for idx, (s, arr) in enumerate(zip(series, data)):
        color = series_color(s, idx, theme)
        pts = tuple(polar(cx, cy, r.forward(v).value, i * step) for i, v in enumerate(arr))
        out.append(Polygon(pts, Style(fill=color, fill_opacity=fill_opacity, stroke=color, stroke_width=2.0)))
    if show_legend:
        out += legend([(s.name, series_color(s, i, theme)) for i, s in enumerate(series)], bounds.x + 10.0, bounds.y + 10.0, theme)
    return out


@safe_chart("circular_bar_chart")
def circular_bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    bounds: Bounds,
    *,
    inner_ratio: float = 0.3,
    colors: Optional[Sequence[str]] = None,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Bars laid around a circle; bar length grows outward from the inner radius."""
    if is_empty(labels) or is_empty(values):
        return []
    vals = as_float_array(values)
    require(len(labels) == vals.size, f"{len(labels)} labels for {vals.size} values")
    cx, cy = bounds.center
    outer = max(0.0, min(bounds.width, bounds.height) / 2.0 - 30.0)
    inner = outer * min(0.9, max(0.0, inner_ratio))
    top = float(vals.max())
    r = LinearScale((0.0, top if top > 0 else 1.0), (inner, outer), clamp=True)
    angles = BandScale(list(labels), (0.0, 360.0), padding_inner=0.1)
    out: list[Primitive] = []
    for i, (label, v) in enumerate(zip(labels, vals)):
        if not v > 0:
            continue
        a0 = angles.forward(label).value
        a1 = a0 + angles.bandwidth()
        color = colors[i % len(colors)] if colors else theme.color_at(i)
        out.append(Path(sector_path(cx, cy, inner, r.forward(v).value, a0, a1), Style(fill=color)))
        lx, ly = polar(cx, cy, outer + 12.0, (a0 + a1) / 2.0)
        out.append(Text(str(label), lx, ly, _label_style(theme, text_anchor="middle", dominant_baseline="middle")))
    return out


@safe_chart("chord_diagram")
def chord_diagram(
    entities: Sequence[str],
    matrix: Sequence[Sequence[float]],
    bounds: Bounds,
    *,
    gap: float = 2.0,
    arc_thickness: float = 12.0,
    colors: Optional[Sequence[str]] = None,
    ribbon_opacity: float = 0.6,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Flows between entities; ``matrix[i][j]`` is the flow from i to j."""
    if is_empty(entities) or is_empty(matrix):
        return []
    n = len(entities)
    require(len(matrix) == n, f"matrix has {len(matrix)} rows for {n} entities")
    for i, row in enumerate(matrix):
        require(len(row) == n, f"matrix is not square: row {i} has {len(row)} columns")
        require(all(v >= 0 for v in row), "chord flows must be non-negative")
    totals = [float(sum(row)) for row in matrix]
    grand = sum(totals)
    available = max(0.0, 360.0 - gap * n)
    cx, cy = bounds.center
    radius = max(0.0, min(bounds.width, bounds.height) / 2.0 - arc_thickness - 30.0)

    out: list[Primitive] = []
    sub_arcs: dict[tuple[int, int], tuple[float, float]] = {}
    angle = 0.0
    for i, name in enumerate(entities):
        extent = available * safe_div(totals[i], grand)
        color = colors[i % len(colors)] if colors else theme.color_at(i)
        if extent > 0:
            out.append(Path(sector_path(cx, cy, radius, radius + arc_thickness, angle, angle + extent), Style(fill=color)))
            lx, ly = polar(cx, cy, radius + arc_thickness + 14.0, angle + extent / 2.0)
            out.append(Text(str(name), lx, ly, _label_style(theme, text_anchor="middle", dominant_baseline="middle")))
        pos = angle
        for j in range(n):
            part = available * safe_div(float(matrix[i][j]), grand)
            sub_arcs[(i, j)] = (pos, pos + part)
            pos += part
        angle += extent + gap

    for i in range(n):
        for j in range(i, n):
            if matrix[i][j] <= 0 and matrix[j][i] <= 0:
                continue
            color = colors[i % len(colors)] if colors else theme.color_at(i)
            d = _chord_ribbon(cx, cy, radius, sub_arcs[(i, j)], sub_arcs[(j, i)])
            out.append(Path(d, Style(fill=color, fill_opacity=ribbon_opacity)))
    return out


def _chord_ribbon(cx: float, cy: float, r: float, src: tuple[float, float], dst: tuple[float, float]) -> str:
    s0 = polar(cx, cy, r, src[0])
    s1 = polar(cx, cy, r, src[1])
    t0 = polar(cx, cy, r, dst[0])
    t1 = polar(cx, cy, r, dst[1])
    large_s = 1 if src[1] - src[0] > 180.0 else 0
    large_t = 1 if dst[1] - dst[0] > 180.0 else 0
    return (
        f"M {fmt(s0[0])} {fmt(s0[1])} "
        f"A {fmt(r)} {fmt(r)} 0 {large_s} 1 {fmt(s1[0])} {fmt(s1[1])} "
        f"Q {fmt(cx)} {fmt(cy)} {fmt(t0[0])} {fmt(t0[1])} "
        f"A {fmt(r)} {fmt(r)} 0 {large_t} 1 {fmt(t1[0])} {fmt(t1[1])} "
        f"Q {fmt(cx)} {fmt(cy)} {fmt(s0[0])} {fmt(s0[1])} Z"
    )
