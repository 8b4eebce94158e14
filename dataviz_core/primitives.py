from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Protocol, Union


@dataclass(frozen=True)
class Style:
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    opacity: float = 1.0
    fill_opacity: Optional[float] = None
    stroke_dasharray: Optional[str] = None
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[str] = None
    text_anchor: Optional[str] = None
    dominant_baseline: Optional[str] = None

    def with_(self, **changes: object) -> Style:
        return replace(self, **changes)


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("bounds width/height must be >= 0")

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def inset(self, top: float, right: float | None = None, bottom: float | None = None, left: float | None = None) -> Bounds:
        right = top if right is None else right
        bottom = top if bottom is None else bottom
        left = right if left is None else left
        return Bounds(
            x=self.x + left,
            y=self.y + top,
            width=max(0.0, self.width - left - right),
            height=max(0.0, self.height - top - bottom),
        )


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    style: Style = Style()
    rx: float = 0.0


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    style: Style = Style()


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    style: Style = Style()


@dataclass(frozen=True)
class Path:
    d: str
    style: Style = Style()


@dataclass(frozen=True)
class Polygon:
    points: tuple[tuple[float, float], ...]
    style: Style = Style()


@dataclass(frozen=True)
class Text:
    content: str
    x: float
    y: float
    style: Style = Style()
    rotate: float = 0.0


@dataclass(frozen=True)
class LinearGradient:
    id: str
    start_color: str
    end_color: str
    angle: float = 90.0
    start_opacity: float = 1.0
    end_opacity: float = 1.0

    @property
    def ref(self) -> str:
        return f"url(#{self.id})"


Primitive = Union[Rect, Circle, Line, Path, Polygon, Text, LinearGradient]


class PrimitiveSink(Protocol):
    def rectangle(self, x: float, y: float, w: float, h: float, style: Style, rx: float = 0.0) -> None: ...

    def circle(self, cx: float, cy: float, r: float, style: Style) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, style: Style) -> None: ...

    def path(self, d: str, style: Style) -> None: ...

    def polygon(self, points: tuple[tuple[float, float], ...], style: Style) -> None: ...

    def text(self, content: str, x: float, y: float, style: Style, rotate: float = 0.0) -> None: ...

    def linear_gradient(
        self,
        gradient_id: str,
        start_color: str,
        end_color: str,
        angle: float,
        start_opacity: float = 1.0,
        end_opacity: float = 1.0,
    ) -> None: ...


def emit(sink: PrimitiveSink, primitives: Iterable[Primitive]) -> int:
    """Feed primitives to a sink in order. Returns the number emitted."""
    count = 0
    for prim in primitives:
        if isinstance(prim, Rect):
            sink.rectangle(prim.x, prim.y, prim.width, prim.height, prim.style, prim.rx)
        elif isinstance(prim, Circle):
            sink.circle(prim.cx, prim.cy, prim.r, prim.style)
        elif isinstance(prim, Line):
            sink.line(prim.x1, prim.y1, prim.x2, prim.y2, prim.style)
        elif isinstance(prim, Path):
            sink.path(prim.d, prim.style)
        elif isinstance(prim, Polygon):
            sink.polygon(prim.points, prim.style)
        elif isinstance(prim, Text):
            sink.text(prim.content, prim.x, prim.y, prim.style, prim.rotate)
        elif isinstance(prim, LinearGradient):
            sink.linear_gradient(
                prim.id, prim.start_color, prim.end_color, prim.angle, prim.start_opacity, prim.end_opacity
            )
        else:
            raise TypeError(f"unsupported primitive: {type(prim).__name__}")
        count += 1
    return count
