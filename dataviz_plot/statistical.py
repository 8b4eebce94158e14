from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence

import numpy as np

from dataviz_core.axis import Axis, AxisOrientation, AxisStyle
from dataviz_core.color import contrast_text_color
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import area_path, smooth_path
from dataviz_core.primitives import Bounds, Circle, Line, Path, Primitive, Rect, Style, Text
from dataviz_core.scales.band import BandScale
from dataviz_core.scales.color import DivergingColorScale
from dataviz_core.scales.linear import LinearScale
from dataviz_core.stats import box_summary, correlation_matrix, gaussian_kde
from dataviz_plot._common import (
    DEFAULT_MARGIN,
    Margin,
    as_float_array,
    axes,
    finite_extent,
    is_empty,
    require,
    safe_chart,
)


def _groups(groups: Mapping[str, Sequence[float]]) -> dict[str, np.ndarray]:
    out: dict[str, np.ndarray] = {}
    for name, values in groups.items():
        arr = as_float_array(values, label=str(name))
        arr = arr[np.isfinite(arr)]
        require(arr.size > 0, f"group {name!r} has no finite values")
        out[str(name)] = arr
    return out


@safe_chart("box_plot")
def box_plot(
    groups: Mapping[str, Sequence[float]],
    bounds: Bounds,
    *,
    whisker_k: float = 1.5,
    show_mean: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Tukey box plots: box Q1..Q3, median line, whiskers to the fences, outlier dots."""
    if is_empty(groups):
        return []
    data = _groups(groups)
    summaries = {name: box_summary(arr, whisker_k) for name, arr in data.items()}
    plot = margin.apply(bounds)
    x = BandScale(list(data), (plot.x, plot.right), padding_inner=0.4, padding_outer=0.2)
    lo, hi = finite_extent(np.concatenate(list(data.values())))
    y = LinearScale((lo, hi), (plot.bottom, plot.y)).nice(5)
    out: list[Primitive] = axes(x, y, plot, theme)
    for i, (name, s) in enumerate(summaries.items()):
        color = theme.color_at(i)
        left = x.forward(name).value
        width = x.bandwidth()
        cx = left + width / 2.0
        stroke = Style(stroke=theme.text_color, stroke_width=1.0)
        y_q1 = y.forward(s.q1).value
        y_q3 = y.forward(s.q3).value
        out.append(Line(cx, y.forward(s.max).value, cx, y_q3, stroke))
        out.append(Line(cx, y_q1, cx, y.forward(s.min).value, stroke))
        cap = width / 4.0
        out.append(Line(cx - cap, y.forward(s.max).value, cx + cap, y.forward(s.max).value, stroke))
        out.append(Line(cx - cap, y.forward(s.min).value, cx + cap, y.forward(s.min).value, stroke))
        out.append(Rect(left, y_q3, width, max(1.0, y_q1 - y_q3), Style(fill=color, fill_opacity=0.7, stroke=theme.text_color, stroke_width=1.0)))
        y_med = y.forward(s.median).value
        out.append(Line(left, y_med, left + width, y_med, Style(stroke=theme.text_color, stroke_width=2.0)))
        if show_mean:
            out.append(Circle(cx, y.forward(s.mean).value, 3.0, Style(fill=theme.background, stroke=theme.text_color, stroke_width=1.0)))
        for v in s.outliers:
            out.append(Circle(cx, y.forward(v).value, 3.0, Style(fill=color, stroke=theme.text_color, stroke_width=0.5)))
    return out


def _density(arr: np.ndarray, bandwidth: Optional[float]) -> list[tuple[float, float]]:
    return list(gaussian_kde(arr, bandwidth))


@safe_chart("violin_plot")
def violin_plot(
    groups: Mapping[str, Sequence[float]],
    bounds: Bounds,
    *,
    bandwidth: Optional[float] = None,
    show_box: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Mirrored KDE outlines per group with an optional inner box."""
    if is_empty(groups):
        return []
    data = _groups(groups)
    densities = {name: _density(arr, bandwidth) for name, arr in data.items()}
    plot = margin.apply(bounds)
    x = BandScale(list(data), (plot.x, plot.right), padding_inner=0.2, padding_outer=0.1)
    lo, hi = finite_extent([v for curve in densities.values() for v, _ in curve])
    y = LinearScale((lo, hi), (plot.bottom, plot.y)).nice(5)
    peak = max(d for curve in densities.values() for _, d in curve) or 1.0
    half = x.bandwidth() / 2.0
    out: list[Primitive] = axes(x, y, plot, theme)
    for i, (name, curve) in enumerate(densities.items()):
        cx = x.center(name).value
        right = [(cx + d / peak * half, y.forward(v).value) for v, d in curve]
        left = [(cx - d / peak * half, y.forward(v).value) for v, d in curve]
        color = theme.color_at(i)
        out.append(Path(area_path(right, left, smooth=True), Style(fill=color, fill_opacity=0.6, stroke=color, stroke_width=1.0)))
        if show_box:
            s = box_summary(data[name])
            w = max(2.0, half / 5.0)
            out.append(Line(cx, y.forward(s.min).value, cx, y.forward(s.max).value, Style(stroke=theme.text_color, stroke_width=1.0)))
            out.append(Rect(cx - w / 2.0, y.forward(s.q3).value, w, max(1.0, y.forward(s.q1).value - y.forward(s.q3).value), Style(fill=theme.text_color)))
            out.append(Circle(cx, y.forward(s.median).value, 2.5, Style(fill=theme.background)))
    return out


@safe_chart("density_plot")
def density_plot(
    groups: Mapping[str, Sequence[float]],
    bounds: Bounds,
    *,
    bandwidth: Optional[float] = None,
    fill: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Overlaid KDE curves on shared axes."""
    if is_empty(groups):
        return []
    data = _groups(groups)
    densities = {name: _density(arr, bandwidth) for name, arr in data.items()}
    plot = margin.apply(bounds)
    lo, hi = finite_extent([v for curve in densities.values() for v, _ in curve])
    x = LinearScale((lo, hi), (plot.x, plot.right))
    peak = max(d for curve in densities.values() for _, d in curve)
    y = LinearScale((0.0, peak if peak > 0 else 1.0), (plot.bottom, plot.y)).nice(5)
    out: list[Primitive] = axes(x, y, plot, theme)
    zero = y.forward(0).value
    for i, curve in enumerate(densities.values()):
        color = theme.color_at(i)
        pts = [(x.forward(v).value, y.forward(d).value) for v, d in curve]
        if fill:
            out.append(Path(area_path(pts, [(px, zero) for px, _ in pts], smooth=True), Style(fill=color, fill_opacity=0.3)))
        out.append(Path(smooth_path(pts), Style(stroke=color, stroke_width=2.0)))
    return out


@safe_chart("ridgeline_plot")
def ridgeline_plot(
    groups: Mapping[str, Sequence[float]],
    bounds: Bounds,
    *,
    overlap: float = 0.5,
    bandwidth: Optional[float] = None,
    margin: Margin = Margin(20.0, 20.0, 40.0, 90.0),
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Stacked density rows sharing one x scale; ``overlap`` lets peaks rise into the row above."""
    if is_empty(groups):
        return []
    data = _groups(groups)
    densities = {name: _density(arr, bandwidth) for name, arr in data.items()}
    plot = margin.apply(bounds)
    lo, hi = finite_extent([v for curve in densities.values() for v, _ in curve])
    x = LinearScale((lo, hi), (plot.x, plot.right)).nice(5)
    rows = BandScale(list(data), (plot.y, plot.bottom))
    row_h = rows.bandwidth()
    peak = max(d for curve in densities.values() for _, d in curve) or 1.0
    lift = row_h * (1.0 + max(0.0, overlap))
    out: list[Primitive] = []
    label_style = Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px, text_anchor="end", dominant_baseline="middle")
    for i, (name, curve) in enumerate(densities.items()):
        base = rows.forward(name).value + row_h
        pts = [(x.forward(v).value, base - d / peak * lift) for v, d in curve]
        color = theme.color_at(i)
        out.append(Path(area_path(pts, [(px, base) for px, _ in pts], smooth=True), Style(fill=color, fill_opacity=0.7, stroke=theme.background, stroke_width=1.0)))
        out.append(Text(name, plot.x - 8.0, base - row_h / 2.0, label_style))
    out += Axis(x, AxisOrientation.BOTTOM, offset=plot.bottom, tick_count=8, style=AxisStyle.from_theme(theme)).render()
    return out


class CapStyle(str, Enum):
    LINE = "line"
    CIRCLE = "circle"
    NONE = "none"


@dataclass(frozen=True)
class ErrorBar:
    """Point estimate with an interval; ``is_relative`` means lower/upper are offsets from y."""

    x: float
    y: float
    lower: float
    upper: float
    is_relative: bool = False

    @property
    def bounds(self) -> tuple[float, float]:
        if self.is_relative:
            return (self.y - abs(self.lower), self.y + abs(self.upper))
        return (min(self.lower, self.upper), max(self.lower, self.upper))


@safe_chart("error_bar_chart")
def error_bar_chart(
    bars: Sequence[ErrorBar],
    bounds: Bounds,
    *,
    cap_style: CapStyle | str = CapStyle.LINE,
    cap_width: float = 8.0,
    color: Optional[str] = None,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(bars):
        return []
    cap_style = CapStyle(cap_style)
    plot = margin.apply(bounds)
    x = LinearScale(finite_extent([b.x for b in bars]), (plot.x, plot.right)).nice(5)
    y = LinearScale(finite_extent([v for b in bars for v in (*b.bounds, b.y)]), (plot.bottom, plot.y)).nice(5)
    stroke_color = color or theme.color_at(0)
    stroke = Style(stroke=stroke_color, stroke_width=1.5)
    out: list[Primitive] = axes(x, y, plot, theme)
    for b in bars:
        lo, hi = b.bounds
        px = x.forward(b.x).value
        y_lo = y.forward(lo).value
        y_hi = y.forward(hi).value
        out.append(Line(px, y_lo, px, y_hi, stroke))
        if cap_style is CapStyle.LINE:
            out.append(Line(px - cap_width / 2.0, y_lo, px + cap_width / 2.0, y_lo, stroke))
            out.append(Line(px - cap_width / 2.0, y_hi, px + cap_width / 2.0, y_hi, stroke))
        elif cap_style is CapStyle.CIRCLE:
            out.append(Circle(px, y_lo, cap_width / 4.0, Style(fill=stroke_color)))
            out.append(Circle(px, y_hi, cap_width / 4.0, Style(fill=stroke_color)))
        out.append(Circle(px, y.forward(b.y).value, 4.0, Style(fill=stroke_color)))
    return out


@safe_chart("correlogram")
def correlogram(
    variables: Sequence[str],
    bounds: Bounds,
    *,
    matrix: Optional[Sequence[Sequence[float]]] = None,
    data: Optional[Sequence[Sequence[float]]] = None,
    show_values: bool = True,
    colors: tuple[str, str, str] = ("#2166AC", "#F7F7F7", "#B2182B"),
    margin: Margin = Margin(20.0, 20.0, 80.0, 80.0),
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Pearson matrix heat grid colored on a diverging scale centered at 0.

    Pass a precomputed ``matrix`` or raw ``data`` columns (one per variable).
    """
    if is_empty(variables):
        return []
    n = len(variables)
    if matrix is None:
        if is_empty(data):
            return []
        require(len(data) == n, f"{len(data)} data columns for {n} variables")
        matrix = correlation_matrix(data)
    require(len(matrix) == n, f"matrix has {len(matrix)} rows for {n} variables")
    for i, row in enumerate(matrix):
        require(len(row) == n, f"matrix is not square: row {i} has {len(row)} columns")
    plot = margin.apply(bounds)
    size = min(plot.width, plot.height)
    cells = BandScale(list(variables), (0.0, size), padding_inner=0.05)
    color = DivergingColorScale((-1.0, 1.0), colors, midpoint=0.0)
    out: list[Primitive] = []
    text_base = Style(font_family=theme.font_family, font_size=theme.font_size_px - 1, text_anchor="middle", dominant_baseline="middle")
    for i, row_name in enumerate(variables):
        for j, col_name in enumerate(variables):
            r = float(matrix[i][j])
            fill = color.forward(r)
            cx = plot.x + cells.forward(col_name).value
            cy = plot.y + cells.forward(row_name).value
            bw = cells.bandwidth()
            out.append(Rect(cx, cy, bw, bw, Style(fill=fill.hex)))
            if show_values:
                out.append(Text(f"{r:.2f}", cx + bw / 2.0, cy + bw / 2.0, text_base.with_(fill=contrast_text_color(fill).hex)))
    label = Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px)
    for name in variables:
        c = cells.center(name).value
        out.append(Text(str(name), plot.x - 6.0, plot.y + c, label.with_(text_anchor="end", dominant_baseline="middle")))
        out.append(Text(str(name), plot.x + c, plot.y + size + 14.0, label.with_(text_anchor="middle")))
    return out
