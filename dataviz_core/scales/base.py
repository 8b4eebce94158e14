from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from decimal import Decimal
from enum import Enum
import math
from numbers import Real
from typing import Any, Hashable, Iterable, Sequence

import numpy as np

from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.ticks import TickFormatter
from dataviz_core.units import Unit, UnitValue, as_unit_value


class ScaleKind(str, Enum):
    LINEAR = "linear"
    LOG = "log"
    POW = "pow"
    SQRT = "sqrt"
    TIME = "time"
    ORDINAL = "ordinal"
    BAND = "band"
    POINT = "point"
    SEQUENTIAL = "sequential"
    DIVERGING = "diverging"
    CATEGORICAL = "categorical"


def to_number(value: Any) -> float | None:
    """Coerce a domain input to float; ``None`` marks an unknown (non-numeric) value."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (Real, Decimal, np.number)):
        return float(value)
    if isinstance(value, UnitValue):
        return value.value
    return None


def validate_range(r0: UnitValue | float, r1: UnitValue | float) -> tuple[UnitValue, UnitValue]:
    u0 = as_unit_value(r0)
    u1 = as_unit_value(r1, u0.unit)
    if u0.unit is not u1.unit:
        raise ScaleDomainError(f"range endpoints must share a unit ({u0.unit.value} != {u1.unit.value})")
    if not (math.isfinite(u0.value) and math.isfinite(u1.value)):
        raise ScaleDomainError("range endpoints must be finite")
    return u0, u1


class Scale(ABC):
    """Shared contract: forward, forward_normalized, domain, range, kind, clone."""

    @property
    @abstractmethod
    def kind(self) -> ScaleKind: ...

    @abstractmethod
    def forward(self, value: Any) -> Any: ...

    @abstractmethod
    def forward_normalized(self, value: Any) -> float: ...

    @abstractmethod
    def domain(self) -> tuple[Any, ...]: ...

    @abstractmethod
    def range(self) -> tuple[Any, ...]: ...

    @abstractmethod
    def tick_format(self, count: int = 10) -> TickFormatter: ...

    def clone(self):
        return copy.deepcopy(self)

    def __call__(self, value: Any) -> Any:
        return self.forward(value)


class ContinuousScale(Scale):
    """Numeric domain pair mapped through a normalized parameter onto a unit range."""

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        clamp: bool = False,
    ) -> None:
        self._d0, self._d1 = self._validate_domain(domain)
        self._r0, self._r1 = validate_range(*self._pair(range, "range"))
        self._clamp = bool(clamp)

    @staticmethod
    def _pair(values: Sequence[Any], label: str) -> tuple[Any, Any]:
        values = list(values)
        if len(values) != 2:
            raise ScaleDomainError(f"{label} must have exactly two endpoints, got {len(values)}")
        return values[0], values[1]

    def _validate_domain(self, domain: Sequence[Any]) -> tuple[float, float]:
        a, b = self._pair(domain, "domain")
        d0 = to_number(a)
        d1 = to_number(b)
        if d0 is None or d1 is None:
            raise ScaleDomainError("domain endpoints must be numeric")
        if not (math.isfinite(d0) and math.isfinite(d1)):
            raise ScaleDomainError("domain endpoints must be finite")
        return d0, d1

    # Subclasses map a finite domain value to the normalized parameter and back.
    @abstractmethod
    def _normalize(self, v: float) -> float: ...

    @abstractmethod
    def _denormalize(self, t: float) -> float: ...

    @property
    def unit(self) -> Unit:
        return self._r0.unit

    def domain(self) -> tuple[float, float]:
        return (self._d0, self._d1)

    def range(self) -> tuple[UnitValue, UnitValue]:
        return (self._r0, self._r1)

    def set_domain(self, domain: Sequence[float]):
        self._d0, self._d1 = self._validate_domain(domain)
        return self

    def set_range(self, range: Sequence[UnitValue | float]):
        self._r0, self._r1 = validate_range(*self._pair(range, "range"))
        return self

    def clamp(self, enabled: bool = True):
        self._clamp = bool(enabled)
        return self

    @property
    def clamped(self) -> bool:
        return self._clamp

    def forward_normalized(self, value: Any) -> float:
        v = to_number(value)
        if v is None:
            return 0.0
        if math.isnan(v):
            return 0.0
        t = self._normalize(v)
        if math.isnan(t):
            # Invalid input for the transform collapses to 0 only when clamping.
            return 0.0 if self._clamp else t
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return t

    def forward(self, value: Any) -> UnitValue:
        v = to_number(value)
        if v is None:
            return UnitValue(0.0, self.unit)
        if math.isnan(v):
            return self._r0
        t = self.forward_normalized(v)
        if math.isnan(t):
            return UnitValue(math.nan, self.unit)
        return self._r0.lerp(self._r1, t)

    def invert(self, value: UnitValue | float) -> float:
        u = to_number(value)
        if u is None or math.isnan(u):
            return self._d0
        span = self._r1.value - self._r0.value
        t = (u - self._r0.value) / span if span != 0 else 0.0
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return self._denormalize(t)

    @abstractmethod
    def ticks(self, count: int = 10) -> list[Any]: ...

    @abstractmethod
    def nice(self, count: int = 10): ...


class CategoricalScale(Scale):
    """Ordered sequence of category identifiers; duplicates keep their first position."""

    def __init__(self, domain: Iterable[Hashable] = ()) -> None:
        self._set_categories(domain)

    def _set_categories(self, domain: Iterable[Hashable]) -> None:
        categories: list[Hashable] = []
        index: dict[Hashable, int] = {}
        for cat in domain:
            if cat in index:
                continue
            index[cat] = len(categories)
            categories.append(cat)
        if not categories:
            raise ScaleDomainError("categorical domain must not be empty")
        self._categories = categories
        self._index = index

    def set_domain(self, domain: Iterable[Hashable]):
        self._set_categories(domain)
        self._rescale()
        return self

    def _rescale(self) -> None:
        return None

    def domain(self) -> tuple[Hashable, ...]:
        return tuple(self._categories)

    def index(self, category: Any) -> int | None:
        try:
            return self._index.get(category)
        except TypeError:
            return None

    def forward_normalized(self, value: Any) -> float:
        idx = self.index(value)
        if idx is None:
            return 0.0
        n = len(self._categories)
        if n == 1:
            return 0.5
        return idx / (n - 1)

    def tick_format(self, count: int = 10) -> TickFormatter:
        return str
