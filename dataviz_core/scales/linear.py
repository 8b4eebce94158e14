from __future__ import annotations

from dataviz_core.scales.base import ContinuousScale, ScaleKind
from dataviz_core.scales.ticks import TickFormatter, linear_formatter, linear_ticks, nice_domain


class LinearScale(ContinuousScale):
    """``r0 + t * (r1 - r0)`` with ``t = (v - d0) / (d1 - d0)``."""

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.LINEAR

    def _normalize(self, v: float) -> float:
        span = self._d1 - self._d0
        if span == 0:
            return 0.0
        return (v - self._d0) / span

    def _denormalize(self, t: float) -> float:
        return self._d0 * (1.0 - t) + self._d1 * t

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self._d0, self._d1, count)

    def nice(self, count: int = 10) -> LinearScale:
        self._d0, self._d1, _ = nice_domain(self._d0, self._d1, count)
        return self

    def tick_format(self, count: int = 10) -> TickFormatter:
        return linear_formatter(self.ticks(count))
