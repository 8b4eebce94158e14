from __future__ import annotations

import math
from typing import Sequence

from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.base import ContinuousScale, ScaleKind
from dataviz_core.scales.ticks import TickFormatter, linear_formatter, linear_ticks, nice_domain
from dataviz_core.units import UnitValue


def _signed_power(t: float, exponent: float) -> float:
    if t < 0 and not float(exponent).is_integer():
        return math.nan
    return math.copysign(abs(t) ** exponent, t)


class PowScale(ContinuousScale):
    """Linear normalization followed by ``sign(t) * |t| ** exponent``."""

    KIND = ScaleKind.POW

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        exponent: float = 1.0,
        clamp: bool = False,
    ) -> None:
        super().__init__(domain, range, clamp=clamp)
        self._exponent = 1.0
        self.set_exponent(exponent)

    @property
    def kind(self) -> ScaleKind:
        return self.KIND

    @property
    def exponent(self) -> float:
        return self._exponent

    def set_exponent(self, exponent: float) -> PowScale:
        exponent = float(exponent)
        if not math.isfinite(exponent) or exponent == 0:
            raise ScaleDomainError("pow exponent must be finite and non-zero")
        self._exponent = exponent
        return self

    def _linear(self, v: float) -> float:
        span = self._d1 - self._d0
        if span == 0:
            return 0.0
        return (v - self._d0) / span

    def _normalize(self, v: float) -> float:
        t = self._linear(v)
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return _signed_power(t, self._exponent)

    def _denormalize(self, t: float) -> float:
        s = _signed_power(t, 1.0 / self._exponent)
        return self._d0 * (1.0 - s) + self._d1 * s

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self._d0, self._d1, count)

    def nice(self, count: int = 10) -> PowScale:
        self._d0, self._d1, _ = nice_domain(self._d0, self._d1, count)
        return self

    def tick_format(self, count: int = 10) -> TickFormatter:
        return linear_formatter(self.ticks(count))


class SqrtScale(PowScale):
    KIND = ScaleKind.SQRT

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        clamp: bool = False,
    ) -> None:
        super().__init__(domain, range, exponent=0.5, clamp=clamp)
