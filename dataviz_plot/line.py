from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

import numpy as np

from dataviz_core.annotations import AnnotationLayer
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import area_path, polyline_path, smooth_path
from dataviz_core.ids import next_gradient_id
from dataviz_core.primitives import Bounds, Circle, LinearGradient, Path, Primitive, Style, Text
from dataviz_core.scales.base import ContinuousScale
from dataviz_core.scales.linear import LinearScale
from dataviz_core.scales.time import TimeScale
from dataviz_core.transforms import StackOffset, stack
from dataviz_plot._common import (
    DEFAULT_MARGIN,
    Margin,
    Series,
    as_float_array,
    axes,
    finite_extent,
    is_empty,
    legend,
    require,
    safe_chart,
    series_color,
)


def x_scale_for(xs: Sequence[Any], plot: Bounds) -> ContinuousScale | TimeScale:
    """Time scale for dates/datetimes, linear otherwise."""
    if all(isinstance(v, (date, np.datetime64)) for v in xs):
        return TimeScale((min(xs), max(xs)), (plot.x, plot.right))
    lo, hi = finite_extent(as_float_array(xs, label="x"))
    return LinearScale((lo, hi), (plot.x, plot.right))


def _points(xs: Sequence[Any], ys: np.ndarray, x: Any, y: LinearScale) -> list[tuple[float, float]]:
    return [(x.forward(xv).value, y.forward(yv).value) for xv, yv in zip(xs, ys) if np.isfinite(yv)]


@safe_chart("line_chart")
def line_chart(
    xs: Sequence[Any],
    series: Sequence[Series],
    bounds: Bounds,
    *,
    smooth: bool = False,
    tension: float = 0.5,
    gradient_fill: bool = False,
    markers: bool = False,
    stroke_width: float = 2.0,
    show_legend: bool = False,
    annotations: Optional[AnnotationLayer] = None,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Straight or Catmull-Rom lines; ``gradient_fill`` adds a fading area under each line."""
    if is_empty(xs) or is_empty(series):
        return []
    ys = [as_float_array(s.values, label=s.name) for s in series]
    for s, arr in zip(series, ys):
        require(arr.size == len(xs), f"series {s.name!r} has {arr.size} values for {len(xs)} x values")
    plot = margin.apply(bounds)
    x = x_scale_for(xs, plot)
    lo, hi = finite_extent(np.concatenate(ys))
    y = LinearScale((lo, hi), (plot.bottom, plot.y)).nice(5)
    out: list[Primitive] = axes(x, y, plot, theme)
    base = y.forward(y.domain()[0]).value
    for idx, (s, arr) in enumerate(zip(series, ys)):
        color = series_color(s, idx, theme)
        pts = _points(xs, arr, x, y)
        if not pts:
            continue
        if gradient_fill and len(pts) > 1:
            grad = LinearGradient(next_gradient_id("lineGraphGradient"), color, color, 90.0, 0.4, 0.0)
            out.append(grad)
            floor = [(px, base) for px, _ in pts]
            out.append(Path(area_path(pts, floor, smooth=smooth, tension=tension), Style(fill=grad.ref)))
        d = smooth_path(pts, tension) if smooth else polyline_path(pts)
        out.append(Path(d, Style(stroke=color, stroke_width=stroke_width)))
        if markers:
            out += [Circle(px, py, 3.0, Style(fill=color)) for px, py in pts]
    if annotations is not None:
        out += annotations.render(x, y, plot, theme)
    if show_legend:
        out += legend([(s.name, series_color(s, i, theme)) for i, s in enumerate(series)], plot.right - 80.0, plot.y, theme, symbol="line")
    return out


@safe_chart("area_chart")
def area_chart(
    xs: Sequence[Any],
    values: Sequence[float],
    bounds: Bounds,
    *,
    color: Optional[str] = None,
    opacity: float = 0.3,
    smooth: bool = False,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(xs) or is_empty(values):
        return []
    arr = as_float_array(values)
    require(arr.size == len(xs), f"{arr.size} values for {len(xs)} x values")
    plot = margin.apply(bounds)
    x = x_scale_for(xs, plot)
    lo, hi = finite_extent(arr, include_zero=True)
    y = LinearScale((lo, hi), (plot.bottom, plot.y)).nice(5)
    fill = color or theme.color_at(0)
    pts = _points(xs, arr, x, y)
    zero = y.forward(0).value
    out: list[Primitive] = axes(x, y, plot, theme)
    out.append(Path(area_path(pts, [(px, zero) for px, _ in pts], smooth=smooth), Style(fill=fill, fill_opacity=opacity)))
    out.append(Path(smooth_path(pts) if smooth else polyline_path(pts), Style(stroke=fill, stroke_width=2.0)))
    return out


def _stacked_layers(
    xs: Sequence[Any],
    series: Sequence[Series],
    bounds: Bounds,
    offset: StackOffset,
    smooth: bool,
    show_legend: bool,
    margin: Margin,
    theme: ChartTheme,
    with_axes: bool,
) -> list[Primitive]:
    for s in series:
        require(len(s.values) == len(xs), f"series {s.name!r} has {len(s.values)} values for {len(xs)} x values")
    layers = stack([list(s.values) for s in series], offset)
    plot = margin.apply(bounds)
    x = x_scale_for(xs, plot)
    lo = min(lower for layer in layers for lower, _ in layer)
    hi = max(upper for layer in layers for _, upper in layer)
    if lo == hi:
        hi = lo + 1.0
    y = LinearScale((lo, hi), (plot.bottom, plot.y))
    if with_axes:
        y.nice(5)
    out: list[Primitive] = axes(x, y, plot, theme) if with_axes else []
    for idx, (s, layer) in enumerate(zip(series, layers)):
        top = [(x.forward(xv).value, y.forward(upper).value) for xv, (_, upper) in zip(xs, layer)]
        bottom = [(x.forward(xv).value, y.forward(lower).value) for xv, (lower, _) in zip(xs, layer)]
        out.append(Path(area_path(top, bottom, smooth=smooth), Style(fill=series_color(s, idx, theme), fill_opacity=0.85)))
    if show_legend:
        out += legend([(s.name, series_color(s, i, theme)) for i, s in enumerate(series)], plot.right - 80.0, plot.y)
    return out


@safe_chart("stacked_area_chart")
def stacked_area_chart(
    xs: Sequence[Any],
    series: Sequence[Series],
    bounds: Bounds,
    *,
    normalize: bool = False,
    smooth: bool = False,
    show_legend: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(xs) or is_empty(series):
        return []
    offset = StackOffset.NORMALIZE if normalize else StackOffset.ZERO
    return _stacked_layers(xs, series, bounds, offset, smooth, show_legend, margin, theme, True)


@safe_chart("stream_chart")
def stream_chart(
    xs: Sequence[Any],
    series: Sequence[Series],
    bounds: Bounds,
    *,
    baseline: StackOffset | str = StackOffset.WIGGLE,
    show_legend: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Smoothed stacked areas around a silhouette, center or wiggle baseline."""
    if is_empty(xs) or is_empty(series):
        return []
    baseline = StackOffset(baseline)
    require(
        baseline in (StackOffset.SILHOUETTE, StackOffset.CENTER, StackOffset.WIGGLE),
        f"unsupported stream baseline: {baseline.value}",
    )
    return _stacked_layers(xs, series, bounds, baseline, True, show_legend, margin, theme, False)


@safe_chart("connected_scatter")
def connected_scatter(
    xs: Sequence[float],
    ys: Sequence[float],
    bounds: Bounds,
    *,
    labels: Optional[Sequence[str]] = None,
    color: Optional[str] = None,
    smooth: bool = False,
    radius: float = 4.0,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Points joined in input order; optional per-point labels."""
    if is_empty(xs) or is_empty(ys):
        return []
    xa = as_float_array(xs, label="x")
    ya = as_float_array(ys, label="y")
    require(xa.size == ya.size, f"x and y length mismatch: {xa.size} != {ya.size}")
    require(labels is None or len(labels) == xa.size, "one label per point is required")
    plot = margin.apply(bounds)
    x = LinearScale(finite_extent(xa), (plot.x, plot.right)).nice(5)
    y = LinearScale(finite_extent(ya), (plot.bottom, plot.y)).nice(5)
    stroke = color or theme.color_at(0)
    pts = [(x.forward(a).value, y.forward(b).value) for a, b in zip(xa, ya) if np.isfinite(a) and np.isfinite(b)]
    out: list[Primitive] = axes(x, y, plot, theme)
    out.append(Path(smooth_path(pts) if smooth else polyline_path(pts), Style(stroke=stroke, stroke_width=1.5)))
    out += [Circle(px, py, radius, Style(fill=stroke, stroke=theme.background, stroke_width=1.0)) for px, py in pts]
    if labels is not None:
        text_style = Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px - 1)
        out += [Text(str(lbl), px + radius + 3.0, py - radius, text_style) for lbl, (px, py) in zip(labels, pts)]
    return out


@dataclass(frozen=True)
class ConfidenceBand:
    x: Sequence[float]
    center: Sequence[float]
    lower: Sequence[float]
    upper: Sequence[float]
    color: Optional[str] = None
    opacity: float = 0.2


@safe_chart("confidence_band_chart")
def confidence_band_chart(
    band: ConfidenceBand,
    bounds: Bounds,
    *,
    smooth: bool = False,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Shaded lower/upper envelope with the center line on top."""
    if is_empty(band.x) or is_empty(band.center):
        return []
    xs = as_float_array(band.x, label="x")
    mid = as_float_array(band.center, label="center")
    lower = as_float_array(band.lower, label="lower")
    upper = as_float_array(band.upper, label="upper")
    require(xs.size == mid.size == lower.size == upper.size, "confidence band arrays differ in length")
    plot = margin.apply(bounds)
    x = LinearScale(finite_extent(xs), (plot.x, plot.right))
    y = LinearScale(finite_extent(np.concatenate([lower, upper, mid])), (plot.bottom, plot.y)).nice(5)
    color = band.color or theme.color_at(0)
    top = [(x.forward(a).value, y.forward(b).value) for a, b in zip(xs, upper)]
    bottom = [(x.forward(a).value, y.forward(b).value) for a, b in zip(xs, lower)]
    center = [(x.forward(a).value, y.forward(b).value) for a, b in zip(xs, mid)]
    out: list[Primitive] = axes(x, y, plot, theme)
    out.append(Path(area_path(top, bottom, smooth=smooth), Style(fill=color, fill_opacity=band.opacity)))
    out.append(Path(smooth_path(center) if smooth else polyline_path(center), Style(stroke=color, stroke_width=2.0)))
    return out
