from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any, Callable

from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.primitives import Line, Primitive, Style, Text
from dataviz_core.scales.base import CategoricalScale, ContinuousScale, Scale, to_number
from dataviz_core.scales.time import TimeScale
from dataviz_core.units import UnitValue


class AxisOrientation(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def horizontal(self) -> bool:
        return self in (AxisOrientation.TOP, AxisOrientation.BOTTOM)


@dataclass(frozen=True)
class Tick:
    value: Any
    position: float
    label: str


@dataclass(frozen=True)
class AxisStyle:
    stroke: str = "#000000"
    stroke_width: float = 1.0
    text_color: str = "#333333"
    font_family: str = "sans-serif"
    font_size: float = 11.0
    grid_stroke: str = "#E0E0E0"
    grid_width: float = 1.0
    title_font_size: float = 12.0
    title_font_weight: str = "bold"

    @classmethod
    def from_theme(cls, theme: ChartTheme = DEFAULT_THEME) -> AxisStyle:
        return cls(
            stroke=theme.axis_stroke,
            stroke_width=theme.stroke_width,
            text_color=theme.text_color,
            font_family=theme.font_family,
            font_size=theme.font_size_px,
            grid_stroke=theme.grid_stroke,
            title_font_size=theme.title_font_size_px,
        )


class Axis:
    """Tick marks, labels, optional grid and title for one scale.

    ``offset`` is the cross-axis coordinate of the axis line: the y of a
    top/bottom axis, the x of a left/right one. Grid lines extend
    ``grid_length`` into the plot area.
    """

    def __init__(
        self,
        scale: Scale,
        orientation: AxisOrientation | str = AxisOrientation.BOTTOM,
        *,
        offset: float = 0.0,
        tick_count: int = 10,
        tick_size: float = 6.0,
        tick_padding: float = 3.0,
        grid_length: float | None = None,
        title: str | None = None,
        title_offset: float | None = None,
        formatter: Callable[[Any], str] | None = None,
        style: AxisStyle | None = None,
    ) -> None:
        self.scale = scale
        self.orientation = AxisOrientation(orientation)
        self.offset = float(offset)
        self.tick_count = tick_count if tick_count > 0 else 10
        self.tick_size = float(tick_size)
        self.tick_padding = float(tick_padding)
        self.grid_length = grid_length
        self.title = title
        self.title_offset = title_offset
        self.formatter = formatter
        self.style = style or AxisStyle()

    def _tick_values(self) -> list[Any]:
        if isinstance(self.scale, CategoricalScale):
            return list(self.scale.domain())
        ticks = getattr(self.scale, "ticks", None)
        if ticks is None:
            return []
        return list(ticks(self.tick_count))

    def _position(self, value: Any) -> float | None:
        center = getattr(self.scale, "center", None)
        mapped = center(value) if center is not None else self.scale.forward(value)
        if isinstance(mapped, UnitValue):
            pos = mapped.value
        else:
            pos = to_number(mapped)
        if pos is None or not math.isfinite(pos):
            return None
        return pos

    def ticks(self) -> list[Tick]:
        values = self._tick_values()
        fmt = self.formatter or self.scale.tick_format(self.tick_count)
        out: list[Tick] = []
        for value in values:
            pos = self._position(value)
            if pos is None:
                continue
            out.append(Tick(value=value, position=pos, label=fmt(value)))
        return out

    def _extent(self) -> tuple[float, float]:
        r = self.scale.range()
        if isinstance(self.scale, (ContinuousScale, TimeScale)) or (
            len(r) == 2 and all(isinstance(v, UnitValue) for v in r)
        ):
            return (r[0].value, r[1].value)
        positions = [t.position for t in self.ticks()]
        if not positions:
            return (0.0, 0.0)
        return (min(positions), max(positions))

    def render(self) -> list[Primitive]:
        st = self.style
        o = self.offset
        ticks = self.ticks()
        line_style = Style(stroke=st.stroke, stroke_width=st.stroke_width)
        grid_style = Style(stroke=st.grid_stroke, stroke_width=st.grid_width)
        label_style = Style(fill=st.text_color, font_family=st.font_family, font_size=st.font_size)

        orient = self.orientation
        # Direction ticks point away from the plot area; grid lines go the other way.
        outward = 1.0 if orient in (AxisOrientation.BOTTOM, AxisOrientation.RIGHT) else -1.0
        grid: list[Primitive] = []
        marks: list[Primitive] = []
        labels: list[Primitive] = []
        for tick in ticks:
            p = tick.position
            tip = o + outward * self.tick_size
            if orient.horizontal:
                if self.grid_length:
                    grid.append(Line(p, o, p, o - outward * self.grid_length, grid_style))
                marks.append(Line(p, o, p, tip, line_style))
                if orient is AxisOrientation.BOTTOM:
                    y = o + self.tick_size + self.tick_padding + st.font_size
                else:
                    y = o - self.tick_size - self.tick_padding
                labels.append(Text(tick.label, p, y, label_style.with_(text_anchor="middle")))
            else:
                if self.grid_length:
                    grid.append(Line(o, p, o - outward * self.grid_length, p, grid_style))
                marks.append(Line(o, p, tip, p, line_style))
                x = o + outward * (self.tick_size + self.tick_padding)
                anchor = "end" if orient is AxisOrientation.LEFT else "start"
                labels.append(
                    Text(tick.label, x, p, label_style.with_(text_anchor=anchor, dominant_baseline="middle"))
                )

        a, b = self._extent()
        if orient.horizontal:
            domain_line = Line(a, o, b, o, line_style)
        else:
            domain_line = Line(o, a, o, b, line_style)

        out: list[Primitive] = [*grid, domain_line, *marks, *labels]
        if self.title:
            out.append(self._title(a, b))
        return out

    def _title(self, a: float, b: float) -> Text:
        st = self.style
        mid = (a + b) / 2.0
        style = Style(
            fill=st.text_color,
            font_family=st.font_family,
            font_size=st.title_font_size,
            font_weight=st.title_font_weight,
            text_anchor="middle",
        )
        orient = self.orientation
        if orient is AxisOrientation.BOTTOM:
            gap = self.title_offset if self.title_offset is not None else self.tick_size + self.tick_padding + st.font_size + st.title_font_size + 6
            return Text(self.title or "", mid, self.offset + gap, style)
        if orient is AxisOrientation.TOP:
            gap = self.title_offset if self.title_offset is not None else self.tick_size + self.tick_padding + st.font_size + 6
            return Text(self.title or "", mid, self.offset - gap, style)
        gap = self.title_offset if self.title_offset is not None else 40.0
        if orient is AxisOrientation.LEFT:
            return Text(self.title or "", self.offset - gap, mid, style, rotate=-90.0)
        return Text(self.title or "", self.offset + gap, mid, style, rotate=90.0)
