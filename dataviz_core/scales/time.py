from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
import math
from typing import Any, Sequence

import numpy as np

from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales.base import ScaleKind, Scale, validate_range
from dataviz_core.scales.ticks import TickFormatter
from dataviz_core.units import UnitValue


class TimeInterval(str, Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"

    @property
    def seconds(self) -> float:
        return _INTERVAL_SECONDS[self]

    @property
    def format(self) -> str:
        return _INTERVAL_FORMATS[self]


_INTERVAL_SECONDS = {
    TimeInterval.SECOND: 1.0,
    TimeInterval.MINUTE: 60.0,
    TimeInterval.HOUR: 3600.0,
    TimeInterval.DAY: 86400.0,
    TimeInterval.MONTH: 30 * 86400.0,
    TimeInterval.YEAR: 365 * 86400.0,
}

_INTERVAL_FORMATS = {
    TimeInterval.SECOND: "%H:%M:%S",
    TimeInterval.MINUTE: "%H:%M",
    TimeInterval.HOUR: "%H:%M",
    TimeInterval.DAY: "%b %d",
    TimeInterval.MONTH: "%b",
    TimeInterval.YEAR: "%Y",
}

# Checked coarsest first: duration-per-tick at or above the threshold selects the bucket.
_THRESHOLDS = (
    TimeInterval.YEAR,
    TimeInterval.MONTH,
    TimeInterval.DAY,
    TimeInterval.HOUR,
    TimeInterval.MINUTE,
)


def select_interval(seconds_per_tick: float) -> TimeInterval:
    for interval in _THRESHOLDS:
        if seconds_per_tick >= interval.seconds:
            return interval
    return TimeInterval.SECOND


def to_datetime(value: Any) -> datetime | None:
    """Coerce datetimes, dates, numpy datetime64 and epoch seconds; ``None`` if unknown."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        seconds = (value - np.datetime64(0, "s")) / np.timedelta64(1, "s")
        return datetime.fromtimestamp(float(seconds), tz=timezone.utc).replace(tzinfo=None)
    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        if not math.isfinite(float(value)):
            return None
        return datetime.fromtimestamp(float(value), tz=timezone.utc).replace(tzinfo=None)
    return None


def to_seconds(dt: datetime) -> float:
    """Seconds since the epoch; naive datetimes are read as UTC wall-clock."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc).timestamp()
    return dt.timestamp()


def floor_to(dt: datetime, interval: TimeInterval) -> datetime:
    if interval is TimeInterval.YEAR:
        return dt.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    if interval is TimeInterval.MONTH:
        return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if interval is TimeInterval.DAY:
        return dt.replace(hour=0, minute=0, second=0, microsecond=0)
    if interval is TimeInterval.HOUR:
        return dt.replace(minute=0, second=0, microsecond=0)
    if interval is TimeInterval.MINUTE:
        return dt.replace(second=0, microsecond=0)
    return dt.replace(microsecond=0)


def add_interval(dt: datetime, interval: TimeInterval, step: int) -> datetime:
    if interval is TimeInterval.YEAR:
        return _add_months(dt, 12 * step)
    if interval is TimeInterval.MONTH:
        return _add_months(dt, step)
    return dt + timedelta(seconds=interval.seconds * step)


def ceil_to(dt: datetime, interval: TimeInterval) -> datetime:
    floored = floor_to(dt, interval)
    if floored == dt:
        return dt
    return add_interval(floored, interval, 1)


def _add_months(dt: datetime, months: int) -> datetime:
    total = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(total, 12)
    day = min(dt.day, calendar.monthrange(year, month + 1)[1])
    return dt.replace(year=year, month=month + 1, day=day)


class TimeScale(Scale):
    """Linear interpolation over seconds since the epoch."""

    def __init__(
        self,
        domain: Sequence[Any],
        range: Sequence[UnitValue | float] = (0.0, 1.0),
        *,
        clamp: bool = False,
    ) -> None:
        self._t0, self._t1 = self._validate_domain(domain)
        r = list(range)
        if len(r) != 2:
            raise ScaleDomainError("range must have exactly two endpoints")
        self._r0, self._r1 = validate_range(r[0], r[1])
        self._clamp = bool(clamp)

    @staticmethod
    def _validate_domain(domain: Sequence[Any]) -> tuple[datetime, datetime]:
        values = list(domain)
        if len(values) != 2:
            raise ScaleDomainError("time domain must have exactly two endpoints")
        t0 = to_datetime(values[0])
        t1 = to_datetime(values[1])
        if t0 is None or t1 is None:
            raise ScaleDomainError("time domain endpoints must be instants")
        if (t0.tzinfo is None) != (t1.tzinfo is None):
            raise ScaleDomainError("time domain endpoints must both be naive or both be aware")
        return t0, t1

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.TIME

    @property
    def _tz(self) -> tzinfo | None:
        return self._t0.tzinfo

    def domain(self) -> tuple[datetime, datetime]:
        return (self._t0, self._t1)

    def range(self) -> tuple[UnitValue, UnitValue]:
        return (self._r0, self._r1)

    def set_domain(self, domain: Sequence[Any]) -> TimeScale:
        self._t0, self._t1 = self._validate_domain(domain)
        return self

    def set_range(self, range: Sequence[UnitValue | float]) -> TimeScale:
        r = list(range)
        if len(r) != 2:
            raise ScaleDomainError("range must have exactly two endpoints")
        self._r0, self._r1 = validate_range(r[0], r[1])
        return self

    def clamp(self, enabled: bool = True) -> TimeScale:
        self._clamp = bool(enabled)
        return self

    def _seconds(self) -> tuple[float, float]:
        return to_seconds(self._t0), to_seconds(self._t1)

    def forward_normalized(self, value: Any) -> float:
        dt = to_datetime(value)
        if dt is None:
            return 0.0
        s0, s1 = self._seconds()
        if s1 == s0:
            return 0.0
        t = (to_seconds(dt) - s0) / (s1 - s0)
        if self._clamp:
            t = min(1.0, max(0.0, t))
        return t

    def forward(self, value: Any) -> UnitValue:
        if to_datetime(value) is None:
            if isinstance(value, float) and math.isnan(value):
                return self._r0
            if isinstance(value, np.datetime64) and np.isnat(value):
                return self._r0
            return UnitValue(0.0, self._r0.unit)
        return self._r0.lerp(self._r1, self.forward_normalized(value))

    def invert(self, value: UnitValue | float) -> datetime:
        u = value.value if isinstance(value, UnitValue) else float(value)
        if math.isnan(u):
            return self._t0
        span = self._r1.value - self._r0.value
        t = (u - self._r0.value) / span if span != 0 else 0.0
        if self._clamp:
            t = min(1.0, max(0.0, t))
        s0, s1 = self._seconds()
        instant = datetime.fromtimestamp(s0 * (1.0 - t) + s1 * t, tz=timezone.utc)
        if self._tz is None:
            return instant.replace(tzinfo=None)
        return instant.astimezone(self._tz)

    def tick_interval(self, count: int = 10) -> TimeInterval:
        if count <= 0:
            count = 10
        s0, s1 = self._seconds()
        return select_interval(abs(s1 - s0) / count)

    def ticks(self, count: int = 10) -> list[datetime]:
        if count <= 0:
            count = 10
        lo, hi = sorted((self._t0, self._t1))
        if lo == hi:
            return [lo]
        interval = self.tick_interval(count)
        if interval is TimeInterval.MONTH:
            step = 1
        else:
            units = (to_seconds(hi) - to_seconds(lo)) / interval.seconds
            step = max(1, int(round(units / count)))
        current = floor_to(lo, interval)
        while current < lo:
            current = add_interval(current, interval, step)
        out: list[datetime] = []
        while current <= hi:
            out.append(current)
            current = add_interval(current, interval, step)
        if self._t0 > self._t1:
            out.reverse()
        return out

    def nice(self, count: int = 10, interval: TimeInterval | None = None) -> TimeScale:
        interval = interval or self.tick_interval(count)
        if self._t0 <= self._t1:
            self._t0, self._t1 = floor_to(self._t0, interval), ceil_to(self._t1, interval)
        else:
            self._t0, self._t1 = ceil_to(self._t0, interval), floor_to(self._t1, interval)
        return self

    def tick_format(self, count: int = 10) -> TickFormatter:
        pattern = self.tick_interval(count).format

        def _fmt(value: object) -> str:
            dt = to_datetime(value)
            return dt.strftime(pattern) if dt is not None else str(value)

        return _fmt
