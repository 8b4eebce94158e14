from __future__ import annotations

import math
from typing import Any, Hashable, Iterable, Sequence

from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.base import CategoricalScale, ScaleKind, to_number, validate_range
from dataviz_core.units import Unit, UnitValue


class BandScale(CategoricalScale):
    """Splits a continuous range into equal bands, one per category.

    ``step = span / (n - padding_inner + 2 * padding_outer)`` and the first band
    starts at ``start + step * padding_outer + residual * align`` where the
    residual is whatever rounding (or a single band) leaves unused.
    """

    def __init__(
        self,
        domain: Iterable[Hashable],
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        padding_inner: float = 0.0,
        padding_outer: float = 0.0,
        align: float = 0.5,
        round: bool = False,
    ) -> None:
        super().__init__(domain)
        r = list(range)
        if len(r) != 2:
            raise ScaleDomainError("range must have exactly two endpoints")
        self._r0, self._r1 = validate_range(r[0], r[1])
        self._padding_inner = self._check_padding(padding_inner, "padding_inner", upper=1.0)
        self._padding_outer = self._check_padding(padding_outer, "padding_outer")
        self._align = min(1.0, max(0.0, float(align)))
        self._round = bool(round)
        self._rescale()

    @staticmethod
    def _check_padding(value: float, label: str, upper: float | None = None) -> float:
        v = float(value)
        if not math.isfinite(v) or v < 0:
            raise ScaleDomainError(f"{label} must be a non-negative number")
        if upper is not None:
            v = min(upper, v)
        return v

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.BAND

    @property
    def unit(self) -> Unit:
        return self._r0.unit

    def _rescale(self) -> None:
        n = len(self._categories)
        reverse = self._r1.value < self._r0.value
        start, stop = sorted((self._r0.value, self._r1.value))
        span = stop - start
        denom = max(1.0, n - self._padding_inner + 2.0 * self._padding_outer)
        step = span / denom
        if self._round:
            step = math.floor(step)
        residual = span - step * (n - self._padding_inner + 2.0 * self._padding_outer)
        residual = max(0.0, residual)
        first = start + step * self._padding_outer + residual * self._align
        bandwidth = step * (1.0 - self._padding_inner)
        if self._round:
            first = float(round(first))
            bandwidth = float(math.floor(bandwidth))
        if reverse:
            first = first + (n - 1) * step
            step = -step
        self._first = first
        self._step = step
        self._bandwidth = bandwidth

    def range(self) -> tuple[UnitValue, UnitValue]:
        return (self._r0, self._r1)

    def set_range(self, range: Sequence[UnitValue | float]) -> BandScale:
        r = list(range)
        if len(r) != 2:
            raise ScaleDomainError("range must have exactly two endpoints")
        self._r0, self._r1 = validate_range(r[0], r[1])
        self._rescale()
        return self

    def set_padding(self, padding: float) -> BandScale:
        self._padding_inner = self._check_padding(padding, "padding", upper=1.0)
        self._padding_outer = self._padding_inner
        self._rescale()
        return self

    def set_padding_inner(self, padding: float) -> BandScale:
        self._padding_inner = self._check_padding(padding, "padding_inner", upper=1.0)
        self._rescale()
        return self

    def set_padding_outer(self, padding: float) -> BandScale:
        self._padding_outer = self._check_padding(padding, "padding_outer")
        self._rescale()
        return self

    def set_align(self, align: float) -> BandScale:
        self._align = min(1.0, max(0.0, float(align)))
        self._rescale()
        return self

    def set_round(self, enabled: bool = True) -> BandScale:
        self._round = bool(enabled)
        self._rescale()
        return self

    @property
    def padding_inner(self) -> float:
        return self._padding_inner

    @property
    def padding_outer(self) -> float:
        return self._padding_outer

    def step(self) -> float:
        return self._step

    def bandwidth(self) -> float:
        return self._bandwidth

    def forward(self, value: Any) -> UnitValue:
        idx = self.index(value)
        if idx is None:
            num = to_number(value)
            if num is not None and math.isnan(num):
                return self._r0
            return UnitValue(0.0, self.unit)
        return UnitValue(self._first + idx * self._step, self.unit)

    def center(self, value: Any) -> UnitValue:
        """Middle of the band, where labels and tick marks belong."""
        if self.index(value) is None:
            return self.forward(value)
        start = self.forward(value).value
        return UnitValue(start + self._bandwidth / 2.0, self.unit)
