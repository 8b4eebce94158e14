from __future__ import annotations

import math
from typing import Any, Callable, Hashable, Iterable, Sequence

from dataviz_core.color import GRAY, Color, GradientSpace, mix, parse_color
from dataviz_core.config import DEFAULT_PALETTE
from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.base import CategoricalScale, Scale, ScaleKind, to_number
from dataviz_core.scales.ticks import TickFormatter, linear_formatter, linear_ticks


class _NumericColorScale(Scale):
    def __init__(self, domain: Sequence[float], *, clamp: bool, space: GradientSpace | str) -> None:
        self._d0, self._d1 = self._validate_domain(domain)
        self._clamp = bool(clamp)
        self._space = GradientSpace(space)

    @staticmethod
    def _validate_domain(domain: Sequence[float]) -> tuple[float, float]:
        values = list(domain)
        if len(values) != 2:
            raise ScaleDomainError("color domain must have exactly two endpoints")
        d0 = to_number(values[0])
        d1 = to_number(values[1])
        if d0 is None or d1 is None or not (math.isfinite(d0) and math.isfinite(d1)):
            raise ScaleDomainError("color domain endpoints must be finite numbers")
        return d0, d1

    def domain(self) -> tuple[float, float]:
        return (self._d0, self._d1)

    def set_domain(self, domain: Sequence[float]):
        self._d0, self._d1 = self._validate_domain(domain)
        return self

    def clamp(self, enabled: bool = True):
        self._clamp = bool(enabled)
        return self

    @property
    def space(self) -> GradientSpace:
        return self._space

    def set_space(self, space: GradientSpace | str):
        self._space = GradientSpace(space)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self._d0, self._d1, count)

    def tick_format(self, count: int = 10) -> TickFormatter:
        return linear_formatter(self.ticks(count))

    def samples(self, n: int) -> list[Color]:
        """``n`` colors taken at evenly spaced domain values, for legends."""
        if n <= 0:
            return []
        if n == 1:
            return [self.forward(self._d0)]
        return [self.forward(self._d0 + (self._d1 - self._d0) * i / (n - 1)) for i in range(n)]


class SequentialColorScale(_NumericColorScale):
    """Two-anchor color ramp; ``interpolate`` may warp the parameter first."""

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        colors: Sequence[Color | str] = ("#F7FBFF", "#08306B"),
        *,
        clamp: bool = True,
        space: GradientSpace | str = GradientSpace.OKLCH,
        interpolate: Callable[[float], float] | None = None,
    ) -> None:
        super().__init__(domain, clamp=clamp, space=space)
        anchors = list(colors)
        if len(anchors) != 2:
            raise ScaleDomainError("sequential color scale needs exactly two anchor colors")
        self._start = parse_color(anchors[0])
        self._end = parse_color(anchors[1])
        self._interpolate = interpolate

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.SEQUENTIAL

    def range(self) -> tuple[Color, Color]:
        return (self._start, self._end)

    def set_interpolate(self, fn: Callable[[float], float] | None) -> SequentialColorScale:
        self._interpolate = fn
        return self

    def forward_normalized(self, value: Any) -> float:
        v = to_number(value)
        if v is None or math.isnan(v):
            return 0.0
        span = self._d1 - self._d0
        t = (v - self._d0) / span if span != 0 else 0.0
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return t

    def forward(self, value: Any) -> Color:
        t = self.forward_normalized(value)
        if self._interpolate is not None:
            t = float(self._interpolate(t))
        return mix(self._start, self._end, t, self._space)


class DivergingColorScale(_NumericColorScale):
    """Three anchors around a midpoint (the domain centroid unless given)."""

    def __init__(
        self,
        domain: Sequence[float] = (-1.0, 1.0),
        colors: Sequence[Color | str] = ("#2166AC", "#F7F7F7", "#B2182B"),
        *,
        midpoint: float | None = None,
        clamp: bool = True,
        space: GradientSpace | str = GradientSpace.OKLCH,
    ) -> None:
        super().__init__(domain, clamp=clamp, space=space)
        anchors = list(colors)
        if len(anchors) != 3:
            raise ScaleDomainError("diverging color scale needs exactly three anchor colors")
        self._start, self._mid, self._end = (parse_color(c) for c in anchors)
        self._midpoint = midpoint
        if midpoint is not None and not math.isfinite(float(midpoint)):
            raise ScaleDomainError("diverging midpoint must be finite")

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.DIVERGING

    @property
    def midpoint(self) -> float:
        if self._midpoint is None:
            return (self._d0 + self._d1) / 2.0
        return float(self._midpoint)

    def set_midpoint(self, midpoint: float | None) -> DivergingColorScale:
        self._midpoint = midpoint
        return self

    def range(self) -> tuple[Color, Color, Color]:
        return (self._start, self._mid, self._end)

    def forward_normalized(self, value: Any) -> float:
        v = to_number(value)
        if v is None:
            return 0.5
        if math.isnan(v):
            return 0.0
        mid = self.midpoint
        if v < mid:
            denom = mid - self._d0
            t = 0.5 * (v - self._d0) / (denom if denom != 0 else 1.0)
        else:
            denom = self._d1 - mid
            t = 0.5 + 0.5 * (v - mid) / (denom if denom != 0 else 1.0)
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return t

    def forward(self, value: Any) -> Color:
        t = self.forward_normalized(value)
        if t < 0.5:
            return mix(self._start, self._mid, 2.0 * t, self._space)
        return mix(self._mid, self._end, 2.0 * (t - 0.5), self._space)


class CategoricalColorScale(CategoricalScale):
    def __init__(
        self,
        domain: Iterable[Hashable],
        colors: Sequence[Color | str] = DEFAULT_PALETTE,
        *,
        unknown: Color | str = GRAY,
    ) -> None:
        super().__init__(domain)
        self._colors = [parse_color(c) for c in colors]
        if not self._colors:
            raise ScaleDomainError("categorical color scale needs at least one color")
        self._unknown = parse_color(unknown)

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.CATEGORICAL

    def range(self) -> tuple[Color, ...]:
        return tuple(self._colors)

    def set_unknown(self, color: Color | str) -> CategoricalColorScale:
        self._unknown = parse_color(color)
        return self

    def forward(self, value: Any) -> Color:
        idx = self.index(value)
        if idx is None:
            return self._unknown
        return self._colors[idx % len(self._colors)]
