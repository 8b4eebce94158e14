from __future__ import annotations

from typing import Optional, Sequence

from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import fmt
from dataviz_core.primitives import Bounds, Circle, Line, Primitive, Rect, Style, Text
from dataviz_core.scales.band import BandScale
from dataviz_core.scales.linear import LinearScale
from dataviz_core.transforms import bin_values, stack
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


def _value_scales(
    labels: Sequence[str],
    lo: float,
    hi: float,
    plot: Bounds,
    horizontal: bool,
    padding: float,
) -> tuple[BandScale, LinearScale]:
    if horizontal:
        cat = BandScale(labels, (plot.y, plot.bottom), padding_inner=padding, padding_outer=padding / 2.0)
        val = LinearScale((lo, hi), (plot.x, plot.right)).nice(5)
    else:
        cat = BandScale(labels, (plot.x, plot.right), padding_inner=padding, padding_outer=padding / 2.0)
        val = LinearScale((lo, hi), (plot.bottom, plot.y)).nice(5)
    return cat, val


def _bar_rect(cat: float, width: float, v0: float, v1: float, horizontal: bool, style: Style) -> Rect:
    a, b = sorted((v0, v1))
    if horizontal:
        return Rect(a, cat, b - a, width, style)
    return Rect(cat, a, width, b - a, style)


def _axes(cat: BandScale, val: LinearScale, plot: Bounds, theme: ChartTheme, horizontal: bool) -> list[Primitive]:
    if horizontal:
        return axes(val, cat, plot, theme, grid=False)
    return axes(cat, val, plot, theme)


@safe_chart("bar_chart")
def bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    bounds: Bounds,
    *,
    horizontal: bool = False,
    color: Optional[str] = None,
    padding: float = 0.2,
    show_values: bool = False,
    show_axes: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(labels) or is_empty(values):
        return []
    vals = as_float_array(values)
    require(len(labels) == vals.size, f"{len(labels)} labels for {vals.size} values")
    plot = margin.apply(bounds)
    lo, hi = finite_extent(vals, include_zero=True)
    cat, val = _value_scales(list(labels), lo, hi, plot, horizontal, padding)
    zero = val.forward(0).value
    fill = color or theme.color_at(0)
    out: list[Primitive] = _axes(cat, val, plot, theme, horizontal) if show_axes else []
    label_style = Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px)
    for label, v in zip(labels, vals):
        if v != v:
            continue
        pos = cat.forward(label).value
        end = val.forward(v).value
        out.append(_bar_rect(pos, cat.bandwidth(), zero, end, horizontal, Style(fill=fill)))
        if show_values:
            if horizontal:
                out.append(Text(fmt(v), end + 4.0, pos + cat.bandwidth() / 2.0, label_style.with_(dominant_baseline="middle")))
            else:
                out.append(Text(fmt(v), pos + cat.bandwidth() / 2.0, end - 4.0, label_style.with_(text_anchor="middle")))
    return out


@safe_chart("stacked_bar_chart")
def stacked_bar_chart(
    labels: Sequence[str],
    series: Sequence[Series],
    bounds: Bounds,
    *,
    horizontal: bool = False,
    padding: float = 0.2,
    show_legend: bool = True,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(labels) or is_empty(series):
        return []
    for s in series:
        require(len(s.values) == len(labels), f"series {s.name!r} has {len(s.values)} values for {len(labels)} labels")
    layers = stack([list(s.values) for s in series])
    top = max(upper for layer in layers for _, upper in layer)
    plot = margin.apply(bounds)
    cat, val = _value_scales(list(labels), 0.0, top if top > 0 else 1.0, plot, horizontal, padding)
    out: list[Primitive] = _axes(cat, val, plot, theme, horizontal)
    for idx, (s, layer) in enumerate(zip(series, layers)):
        style = Style(fill=series_color(s, idx, theme))
        for label, (lower, upper) in zip(labels, layer):
            if upper == lower:
                continue
            pos = cat.forward(label).value
            out.append(
                _bar_rect(pos, cat.bandwidth(), val.forward(lower).value, val.forward(upper).value, horizontal, style)
            )
    if show_legend:
        out += legend([(s.name, series_color(s, i, theme)) for i, s in enumerate(series)], plot.right - 80.0, plot.y)
    return out


@safe_chart("lollipop_chart")
def lollipop_chart(
    labels: Sequence[str],
    values: Sequence[float],
    bounds: Bounds,
    *,
    horizontal: bool = False,
    color: Optional[str] = None,
    radius: float = 6.0,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(labels) or is_empty(values):
        return []
    vals = as_float_array(values)
    require(len(labels) == vals.size, f"{len(labels)} labels for {vals.size} values")
    plot = margin.apply(bounds)
    lo, hi = finite_extent(vals, include_zero=True)
    cat, val = _value_scales(list(labels), lo, hi, plot, horizontal, 0.0)
    zero = val.forward(0).value
    stroke = color or theme.color_at(0)
    out: list[Primitive] = _axes(cat, val, plot, theme, horizontal)
    for label, v in zip(labels, vals):
        if v != v:
            continue
        c = cat.center(label).value
        end = val.forward(v).value
        if horizontal:
            out.append(Line(zero, c, end, c, Style(stroke=stroke, stroke_width=2.0)))
            out.append(Circle(end, c, radius, Style(fill=stroke)))
        else:
            out.append(Line(c, zero, c, end, Style(stroke=stroke, stroke_width=2.0)))
            out.append(Circle(c, end, radius, Style(fill=stroke)))
    return out


@safe_chart("histogram")
def histogram(
    values: Sequence[float],
    bounds: Bounds,
    *,
    bins: Optional[int] = None,
    bin_width: Optional[float] = None,
    color: Optional[str] = None,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Auto-binned (Sturges, nice edges) unless ``bins`` or ``bin_width`` is given."""
    if is_empty(values):
        return []
    binned = bin_values(as_float_array(values), bins, width=bin_width)
    if not binned:
        return []
    plot = margin.apply(bounds)
    x = LinearScale((binned[0].x0, binned[-1].x1), (plot.x, plot.right))
    top = max(b.count for b in binned)
    y = LinearScale((0, top if top > 0 else 1), (plot.bottom, plot.y)).nice(5)
    out: list[Primitive] = axes(x, y, plot, theme)
    style = Style(fill=color or theme.color_at(0), stroke=theme.background, stroke_width=1.0)
    for b in binned:
        if b.count == 0:
            continue
        x0 = x.forward(b.x0).value
        x1 = x.forward(b.x1).value
        y1 = y.forward(b.count).value
        out.append(Rect(x0, y1, x1 - x0, y.forward(0).value - y1, style))
    return out
