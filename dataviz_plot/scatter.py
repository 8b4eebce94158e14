from __future__ import annotations

from enum import Enum
import math
from typing import Optional, Sequence

from dataviz_core.annotations import AnnotationLayer
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.primitives import Bounds, Circle, Line, Polygon, Primitive, Rect, Style
from dataviz_core.scales.linear import LinearScale
from dataviz_core.scales.pow import SqrtScale
from dataviz_plot._common import DEFAULT_MARGIN, Margin, as_float_array, axes, finite_extent, is_empty, require, safe_chart


class MarkerShape(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    CROSS = "cross"
    X = "x"


def marker(shape: MarkerShape | str, cx: float, cy: float, size: float, color: str) -> list[Primitive]:
    """Marker centered on (cx, cy); ``size`` is the half-extent."""
    shape = MarkerShape(shape)
    fill = Style(fill=color)
    stroke = Style(stroke=color, stroke_width=max(1.0, size / 3.0))
    if shape is MarkerShape.CIRCLE:
        return [Circle(cx, cy, size, fill)]
    if shape is MarkerShape.SQUARE:
        return [Rect(cx - size, cy - size, 2 * size, 2 * size, fill)]
    if shape is MarkerShape.DIAMOND:
        return [Polygon(((cx, cy - size), (cx + size, cy), (cx, cy + size), (cx - size, cy)), fill)]
    if shape is MarkerShape.TRIANGLE:
        h = size * math.sqrt(3.0) / 2.0
        return [Polygon(((cx, cy - size), (cx + h, cy + size / 2.0), (cx - h, cy + size / 2.0)), fill)]
    if shape is MarkerShape.CROSS:
        return [Line(cx - size, cy, cx + size, cy, stroke), Line(cx, cy - size, cx, cy + size, stroke)]
    return [
        Line(cx - size, cy - size, cx + size, cy + size, stroke),
        Line(cx - size, cy + size, cx + size, cy - size, stroke),
    ]


@safe_chart("scatter_plot")
def scatter_plot(
    xs: Sequence[float],
    ys: Sequence[float],
    bounds: Bounds,
    *,
    shape: MarkerShape | str = MarkerShape.CIRCLE,
    size: float = 4.0,
    sizes: Optional[Sequence[float]] = None,
    max_size: float = 20.0,
    colors: Optional[Sequence[str]] = None,
    color: Optional[str] = None,
    annotations: Optional[AnnotationLayer] = None,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Scatter plot; ``sizes`` turns it into a bubble chart with area-true radii."""
    if is_empty(xs) or is_empty(ys):
        return []
    xa = as_float_array(xs, label="x")
    ya = as_float_array(ys, label="y")
    require(xa.size == ya.size, f"x and y length mismatch: {xa.size} != {ya.size}")
    require(colors is None or len(colors) == xa.size, "one color per point is required")
    radius = None
    if sizes is not None:
        sa = as_float_array(sizes, label="sizes")
        require(sa.size == xa.size, "one size per point is required")
        radius = SqrtScale((0.0, max(float(sa.max()), 1e-12)), (0.0, max_size), clamp=True)
    plot = margin.apply(bounds)
    x = LinearScale(finite_extent(xa), (plot.x, plot.right)).nice(5)
    y = LinearScale(finite_extent(ya), (plot.bottom, plot.y)).nice(5)
    out: list[Primitive] = axes(x, y, plot, theme)
    for i, (a, b) in enumerate(zip(xa, ya)):
        if not (math.isfinite(a) and math.isfinite(b)):
            continue
        r = radius.forward(sa[i]).value if radius is not None else size
        c = colors[i] if colors is not None else (color or theme.color_at(0))
        out += marker(shape, x.forward(a).value, y.forward(b).value, r, c)
    if annotations is not None:
        out += annotations.render(x, y, plot, theme)
    return out
