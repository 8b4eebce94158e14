from __future__ import annotations

import math
from typing import Any, Hashable, Iterable, Sequence

from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.base import CategoricalScale, ScaleKind, to_number, validate_range
from dataviz_core.units import Unit, UnitValue


class PointScale(CategoricalScale):
    """Evenly spaced zero-width positions, one per category."""

    def __init__(
        self,
        domain: Iterable[Hashable],
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        padding: float = 0.0,
        align: float = 0.5,
        round: bool = False,
    ) -> None:
        super().__init__(domain)
        r = list(range)
        if len(r) != 2:
            raise ScaleDomainError("range must have exactly two endpoints")
        self._r0, self._r1 = validate_range(r[0], r[1])
        padding = float(padding)
        if not math.isfinite(padding) or padding < 0:
            raise ScaleDomainError("padding must be a non-negative number")
        self._padding = padding
        self._align = min(1.0, max(0.0, float(align)))
        self._round = bool(round)
        self._rescale()

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.POINT

    @property
    def unit(self) -> Unit:
        return self._r0.unit

    def _rescale(self) -> None:
        n = len(self._categories)
        if n == 1:
            pos = self._r0.value + (self._r1.value - self._r0.value) * self._align
            self._first = float(round(pos)) if self._round else pos
            self._step = 0.0
            return
        reverse = self._r1.value < self._r0.value
        start, stop = sorted((self._r0.value, self._r1.value))
        step = (stop - start) / max(1.0, n - 1 + 2.0 * self._padding)
        if self._round:
            step = math.floor(step)
        first = start + step * self._padding
        if self._round:
            first = float(round(first))
        if reverse:
            first = first + (n - 1) * step
            step = -step
        self._first = first
        self._step = step

    def range(self) -> tuple[UnitValue, UnitValue]:
        return (self._r0, self._r1)

    def set_range(self, range: Sequence[UnitValue | float]) -> PointScale:
        r = list(range)
        if len(r) != 2:
            raise ScaleDomainError("range must have exactly two endpoints")
        self._r0, self._r1 = validate_range(r[0], r[1])
        self._rescale()
        return self

    def set_padding(self, padding: float) -> PointScale:
        padding = float(padding)
        if not math.isfinite(padding) or padding < 0:
            raise ScaleDomainError("padding must be a non-negative number")
        self._padding = padding
        self._rescale()
        return self

    def set_align(self, align: float) -> PointScale:
        self._align = min(1.0, max(0.0, float(align)))
        self._rescale()
        return self

    def set_round(self, enabled: bool = True) -> PointScale:
        self._round = bool(enabled)
        self._rescale()
        return self

    def step(self) -> float:
        return self._step

    def bandwidth(self) -> float:
        return 0.0

    def forward(self, value: Any) -> UnitValue:
        idx = self.index(value)
        if idx is None:
            num = to_number(value)
            if num is not None and math.isnan(num):
                return self._r0
            return UnitValue(0.0, self.unit)
        return UnitValue(self._first + idx * self._step, self.unit)

    def center(self, value: Any) -> UnitValue:
        return self.forward(value)
