from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Any, ClassVar, Optional, Union

from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.primitives import Bounds, Line, Polygon, Primitive, Rect, Style, Text
from dataviz_core.scales.base import Scale, to_number
from dataviz_core.units import UnitValue

LOGGER = logging.getLogger(__name__)

DASHED = "4 3"


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def scale_position(scale: Scale, value: Any) -> float | None:
    """Pixel position of ``value``; band and point scales use the band center."""
    center = getattr(scale, "center", None)
    mapped = center(value) if center is not None else scale.forward(value)
    pos = mapped.value if isinstance(mapped, UnitValue) else to_number(mapped)
    if pos is None or not math.isfinite(pos):
        return None
    return pos


def _scale_extent(scale: Scale, value: Any) -> tuple[float, float] | None:
    bandwidth = getattr(scale, "bandwidth", None)
    if bandwidth is None or getattr(scale, "center", None) is None:
        pos = scale_position(scale, value)
        return None if pos is None else (pos, pos)
    start = scale_position(scale, value)
    if start is None:
        return None
    half = bandwidth() / 2.0
    return (start - half, start + half)


def _within(pos: float, lo: float, hi: float) -> bool:
    return lo - 1e-9 <= pos <= hi + 1e-9


def _label_style(theme: ChartTheme, color: Optional[str], **changes: Any) -> Style:
    return Style(
        fill=color or theme.text_color,
        font_family=theme.font_family,
        font_size=theme.font_size_px,
    ).with_(**changes)


@dataclass(frozen=True)
class ReferenceLine:
    """Full-width (horizontal) or full-height (vertical) line at a data value."""

    value: Any
    orientation: Orientation | str = Orientation.HORIZONTAL
    label: Optional[str] = None
    color: Optional[str] = None
    dashed: bool = True
    stroke_width: float = 1.0

    layer: ClassVar[int] = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "orientation", Orientation(self.orientation))
        if self.stroke_width <= 0:
            raise ValueError("reference line stroke_width must be > 0")

    def render(self, x_scale: Scale, y_scale: Scale, plot: Bounds, theme: ChartTheme = DEFAULT_THEME) -> list[Primitive]:
        color = self.color or theme.axis_stroke
        style = Style(stroke=color, stroke_width=self.stroke_width, stroke_dasharray=DASHED if self.dashed else None)
        if self.orientation is Orientation.HORIZONTAL:
            y = scale_position(y_scale, self.value)
            if y is None or not _within(y, plot.y, plot.bottom):
                LOGGER.debug("reference line at %r falls outside the plot", self.value)
                return []
            out: list[Primitive] = [Line(plot.x, y, plot.right, y, style)]
            if self.label:
                out.append(Text(self.label, plot.right - 4.0, y - 4.0, _label_style(theme, color, text_anchor="end")))
            return out
        x = scale_position(x_scale, self.value)
        if x is None or not _within(x, plot.x, plot.right):
            LOGGER.debug("reference line at %r falls outside the plot", self.value)
            return []
        out = [Line(x, plot.y, x, plot.bottom, style)]
        if self.label:
            out.append(
                Text(self.label, x + 4.0, plot.y + theme.font_size_px, _label_style(theme, color, text_anchor="start"))
            )
        return out


@dataclass(frozen=True)
class ReferenceRegion:
    """Shaded span between two data values, clipped to the plot area.

    On band scales the span covers the whole bands of ``start`` and ``end``.
    """

    start: Any
    end: Any
    orientation: Orientation | str = Orientation.HORIZONTAL
    label: Optional[str] = None
    color: Optional[str] = None
    opacity: float = 0.15

    layer: ClassVar[int] = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "orientation", Orientation(self.orientation))
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError("reference region opacity must be in [0, 1]")

    def render(self, x_scale: Scale, y_scale: Scale, plot: Bounds, theme: ChartTheme = DEFAULT_THEME) -> list[Primitive]:
        horizontal = self.orientation is Orientation.HORIZONTAL
        scale = y_scale if horizontal else x_scale
        a = _scale_extent(scale, self.start)
        b = _scale_extent(scale, self.end)
        if a is None or b is None:
            LOGGER.debug("reference region %r..%r has an unmapped endpoint", self.start, self.end)
            return []
        lo_limit, hi_limit = (plot.y, plot.bottom) if horizontal else (plot.x, plot.right)
        lo = max(lo_limit, min(*a, *b))
        hi = min(hi_limit, max(*a, *b))
        if hi <= lo:
            return []
        color = self.color or theme.color_at(0)
        style = Style(fill=color, fill_opacity=self.opacity)
        if horizontal:
            out: list[Primitive] = [Rect(plot.x, lo, plot.width, hi - lo, style)]
            if self.label:
                out.append(
                    Text(self.label, plot.x + 4.0, lo + theme.font_size_px, _label_style(theme, None, text_anchor="start"))
                )
            return out
        out = [Rect(lo, plot.y, hi - lo, plot.height, style)]
        if self.label:
            mid = (lo + hi) / 2.0
            out.append(Text(self.label, mid, plot.y + theme.font_size_px, _label_style(theme, None, text_anchor="middle")))
        return out


@dataclass(frozen=True)
class TextAnnotation:
    x: Any
    y: Any
    text: str
    dx: float = 0.0
    dy: float = 0.0
    anchor: str = "middle"
    color: Optional[str] = None
    bold: bool = False

    layer: ClassVar[int] = 3

    def render(self, x_scale: Scale, y_scale: Scale, plot: Bounds, theme: ChartTheme = DEFAULT_THEME) -> list[Primitive]:
        px = scale_position(x_scale, self.x)
        py = scale_position(y_scale, self.y)
        if px is None or py is None or not self.text:
            return []
        style = _label_style(theme, self.color, text_anchor=self.anchor, font_weight="bold" if self.bold else None)
        return [Text(self.text, px + self.dx, py + self.dy, style)]


@dataclass(frozen=True)
class Arrow:
    """Straight arrow from (x1, y1) to a head at (x2, y2), all in data values."""

    x1: Any
    y1: Any
    x2: Any
    y2: Any
    label: Optional[str] = None
    color: Optional[str] = None
    head_size: float = 6.0
    stroke_width: float = 1.0

    layer: ClassVar[int] = 2

    def __post_init__(self) -> None:
        if self.head_size <= 0:
            raise ValueError("arrow head_size must be > 0")

    def render(self, x_scale: Scale, y_scale: Scale, plot: Bounds, theme: ChartTheme = DEFAULT_THEME) -> list[Primitive]:
        ends = [
            scale_position(x_scale, self.x1),
            scale_position(y_scale, self.y1),
            scale_position(x_scale, self.x2),
            scale_position(y_scale, self.y2),
        ]
        if any(v is None for v in ends):
            return []
        ax, ay, bx, by = ends
        length = math.hypot(bx - ax, by - ay)
        if length == 0:
            return []
        ux, uy = (bx - ax) / length, (by - ay) / length
        head = min(self.head_size, length)
        base_x, base_y = bx - ux * head, by - uy * head
        half = head / 2.0
        color = self.color or theme.text_color
        out: list[Primitive] = [
            Line(ax, ay, base_x, base_y, Style(stroke=color, stroke_width=self.stroke_width)),
            Polygon(
                ((bx, by), (base_x - uy * half, base_y + ux * half), (base_x + uy * half, base_y - ux * half)),
                Style(fill=color),
            ),
        ]
        if self.label:
            # Label sits behind the tail, away from the head.
            anchor = "end" if ux > 0 else "start" if ux < 0 else "middle"
            out.append(Text(self.label, ax - ux * 4.0, ay - uy * 4.0, _label_style(theme, color, text_anchor=anchor)))
        return out


Annotation = Union[ReferenceLine, ReferenceRegion, TextAnnotation, Arrow]


@dataclass
class AnnotationLayer:
    """Ordered annotations drawn over a chart.

    Regions render first, then reference lines, arrows and text; insertion
    order holds within each group.
    """

    annotations: list[Annotation] = field(default_factory=list)

    def add(self, annotation: Annotation) -> AnnotationLayer:
        if not hasattr(annotation, "render"):
            raise TypeError(f"unsupported annotation: {type(annotation).__name__}")
        self.annotations.append(annotation)
        return self

    def horizontal_line(self, value: Any, label: Optional[str] = None, **kwargs: Any) -> AnnotationLayer:
        return self.add(ReferenceLine(value, Orientation.HORIZONTAL, label, **kwargs))

    def vertical_line(self, value: Any, label: Optional[str] = None, **kwargs: Any) -> AnnotationLayer:
        return self.add(ReferenceLine(value, Orientation.VERTICAL, label, **kwargs))

    def region(self, start: Any, end: Any, orientation: Orientation | str = Orientation.HORIZONTAL, **kwargs: Any) -> AnnotationLayer:
        return self.add(ReferenceRegion(start, end, orientation, **kwargs))

    def text(self, x: Any, y: Any, text: str, **kwargs: Any) -> AnnotationLayer:
        return self.add(TextAnnotation(x, y, text, **kwargs))

    def arrow(self, x1: Any, y1: Any, x2: Any, y2: Any, **kwargs: Any) -> AnnotationLayer:
        return self.add(Arrow(x1, y1, x2, y2, **kwargs))

    def __len__(self) -> int:
        return len(self.annotations)

    def render(self, x_scale: Scale, y_scale: Scale, plot: Bounds, theme: ChartTheme = DEFAULT_THEME) -> list[Primitive]:
        out: list[Primitive] = []
        for annotation in sorted(self.annotations, key=lambda a: a.layer):
            out += annotation.render(x_scale, y_scale, plot, theme)
        return out
