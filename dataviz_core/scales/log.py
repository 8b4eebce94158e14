from __future__ import annotations

import logging
import math
from typing import Sequence

from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.base import ContinuousScale, ScaleKind
from dataviz_core.scales.ticks import TickFormatter, log_formatter
from dataviz_core.units import UnitValue

LOGGER = logging.getLogger(__name__)

_EDGE_EPS = 1e-9


def _valid_base(base: float) -> bool:
    return math.isfinite(base) and base > 0 and base != 1


class LogScale(ContinuousScale):
    """Logarithmic scale; the domain lies entirely above or entirely below zero."""

    def __init__(
        self,
        domain: Sequence[float] = (1.0, 10.0),
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        base: float = 10.0,
        clamp: bool = False,
    ) -> None:
        self._base = 10.0
        self.set_base(base)
        super().__init__(domain, range, clamp=clamp)

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.LOG

    @property
    def base(self) -> float:
        return self._base

    def set_base(self, base: float) -> LogScale:
        try:
            base = float(base)
        except (TypeError, ValueError):
            base = math.nan
        if not _valid_base(base):
            LOGGER.debug("invalid log base %r; falling back to 10", base)
            base = 10.0
        self._base = base
        return self

    def _validate_domain(self, domain: Sequence[float]) -> tuple[float, float]:
        d0, d1 = super()._validate_domain(domain)
        if not ((d0 > 0 and d1 > 0) or (d0 < 0 and d1 < 0)):
            raise ScaleDomainError(f"log domain must not include or straddle zero: [{d0}, {d1}]")
        return d0, d1

    @property
    def _sign(self) -> float:
        return 1.0 if self._d0 > 0 else -1.0

    def _log(self, v: float) -> float:
        return math.log(v * self._sign) / math.log(self._base)

    def _pow(self, e: float) -> float:
        return self._sign * self._base**e

    def _normalize(self, v: float) -> float:
        if v * self._sign <= 0:
            return math.nan
        l0 = self._log(self._d0)
        l1 = self._log(self._d1)
        if l1 == l0:
            return 0.0
        return (self._log(v) - l0) / (l1 - l0)

    def _denormalize(self, t: float) -> float:
        l0 = self._log(self._d0)
        l1 = self._log(self._d1)
        return self._pow(l0 * (1.0 - t) + l1 * t)

    def _exponent_bounds(self) -> tuple[float, float, int, int]:
        lo, hi = sorted((abs(self._d0), abs(self._d1)))
        log_b = math.log(self._base)
        k0 = math.floor(math.log(lo) / log_b + _EDGE_EPS)
        k1 = math.ceil(math.log(hi) / log_b - _EDGE_EPS)
        return lo, hi, k0, k1

    def nice(self, count: int = 10) -> LogScale:
        _, _, k0, k1 = self._exponent_bounds()
        lo = self._base**k0
        hi = self._base**k1
        if abs(self._d0) <= abs(self._d1):
            a, b = lo, hi
        else:
            a, b = hi, lo
        self._d0 = self._sign * a
        self._d1 = self._sign * b
        return self

    def ticks(self, count: int = 10) -> list[float]:
        if count <= 0:
            count = 10
        lo, hi, k0, k1 = self._exponent_bounds()

        def inside(v: float) -> float | None:
            if lo * (1 - _EDGE_EPS) <= v <= hi * (1 + _EDGE_EPS):
                return min(hi, max(lo, v))
            return None

        ticks: set[float] = set()
        for k in range(k0, k1 + 1):
            v = inside(float(self._base**k))
            if v is not None:
                ticks.add(v)
        if len(ticks) < count and self._base == 10.0:
            for k in range(k0, k1 + 1):
                for mult in range(2, 10):
                    v = inside(float(mult * 10.0**k))
                    if v is not None:
                        ticks.add(v)
        out = sorted(ticks)
        if self._sign < 0:
            out = [-v for v in reversed(out)]
        if self._d0 > self._d1:
            out.reverse()
        return out

    def tick_format(self, count: int = 10) -> TickFormatter:
        return log_formatter
