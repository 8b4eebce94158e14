from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dataviz_core.errors import UnitMismatchError


class Unit(str, Enum):
    PX = "px"
    PERCENT = "%"
    EM = "em"
    REM = "rem"
    USER = "user"


@dataclass(frozen=True)
class UnitValue:
    value: float
    unit: Unit = Unit.PX

    def __post_init__(self) -> None:
        if not isinstance(self.unit, Unit):
            object.__setattr__(self, "unit", Unit(self.unit))
        object.__setattr__(self, "value", float(self.value))

    def _check(self, other: UnitValue) -> None:
        if other.unit is not self.unit:
            raise UnitMismatchError(f"cannot combine {self.unit.value} with {other.unit.value}")

    def add(self, other: UnitValue) -> UnitValue:
        self._check(other)
        return UnitValue(self.value + other.value, self.unit)

    def sub(self, other: UnitValue) -> UnitValue:
        self._check(other)
        return UnitValue(self.value - other.value, self.unit)

    def scale(self, factor: float) -> UnitValue:
        return UnitValue(self.value * factor, self.unit)

    def lerp(self, other: UnitValue, t: float) -> UnitValue:
        self._check(other)
        return UnitValue(self.value * (1.0 - t) + other.value * t, self.unit)

    def __add__(self, other: UnitValue) -> UnitValue:
        return self.add(other)

    def __sub__(self, other: UnitValue) -> UnitValue:
        return self.sub(other)

    def __mul__(self, factor: float) -> UnitValue:
        return self.scale(factor)

    __rmul__ = __mul__

    def __float__(self) -> float:
        return self.value

    def css(self) -> str:
        if self.unit is Unit.USER:
            return _format_number(self.value)
        return f"{_format_number(self.value)}{self.unit.value}"


def px(value: float) -> UnitValue:
    return UnitValue(value, Unit.PX)


def pct(value: float) -> UnitValue:
    return UnitValue(value, Unit.PERCENT)


def em(value: float) -> UnitValue:
    return UnitValue(value, Unit.EM)


def rem(value: float) -> UnitValue:
    return UnitValue(value, Unit.REM)


def user(value: float) -> UnitValue:
    return UnitValue(value, Unit.USER)


def as_unit_value(value: UnitValue | float, unit: Unit = Unit.PX) -> UnitValue:
    if isinstance(value, UnitValue):
        return value
    return UnitValue(float(value), unit)


def _format_number(value: float) -> str:
    out = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if out in ("-0", "") else out
