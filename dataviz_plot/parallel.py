from __future__ import annotations

from typing import Optional, Sequence

from dataviz_core.axis import Axis, AxisOrientation, AxisStyle
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import polyline_path
from dataviz_core.primitives import Bounds, Path, Primitive, Style, Text
from dataviz_core.scales.linear import LinearScale
from dataviz_core.scales.point import PointScale
from dataviz_plot._common import DEFAULT_MARGIN, Margin, as_float_array, finite_extent, is_empty, require, safe_chart


@safe_chart("parallel_coordinates")
def parallel_coordinates(
    axis_labels: Sequence[str],
    rows: Sequence[Sequence[float]],
    bounds: Bounds,
    *,
    colors: Optional[Sequence[str]] = None,
    opacity: float = 0.6,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """One vertical axis per variable, one polyline per row; each axis scales independently."""
    if is_empty(axis_labels) or is_empty(rows):
        return []
    n = len(axis_labels)
    data = [as_float_array(row, label="row") for row in rows]
    for i, arr in enumerate(data):
        require(arr.size == n, f"row {i} has {arr.size} values for {n} axes")
    require(colors is None or len(colors) == len(rows), "one color per row is required")
    plot = margin.apply(bounds)
    x = PointScale(list(axis_labels), (plot.x, plot.right), padding=0.1)
    scales = []
    for k in range(n):
        lo, hi = finite_extent([arr[k] for arr in data])
        scales.append(LinearScale((lo, hi), (plot.bottom, plot.y)).nice(5))

    out: list[Primitive] = []
    for i, arr in enumerate(data):
        pts = [(x.forward(label).value, scales[k].forward(arr[k]).value) for k, label in enumerate(axis_labels)]
        color = colors[i] if colors is not None else theme.color_at(i)
        out.append(Path(polyline_path(pts), Style(stroke=color, stroke_width=1.5, opacity=opacity)))

    axis_style = AxisStyle.from_theme(theme)
    for k, label in enumerate(axis_labels):
        offset = x.forward(label).value
        out += Axis(scales[k], AxisOrientation.LEFT, offset=offset, tick_count=5, style=axis_style).render()
        out.append(
            Text(
                str(label),
                offset,
                plot.y - 8.0,
                Style(
                    fill=theme.text_color,
                    font_family=theme.font_family,
                    font_size=theme.font_size_px,
                    font_weight="bold",
                    text_anchor="middle",
                ),
            )
        )
    return out
