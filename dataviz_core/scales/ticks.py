from __future__ import annotations

from decimal import Decimal, InvalidOperation
import math
from typing import Callable

import numpy as np

TickFormatter = Callable[[object], str]

# Relative slack when deciding whether a boundary tick falls inside the domain.
_EDGE_EPS = 1e-10


def nice_number(value: float, *, round_result: bool) -> float:
    """Round a positive magnitude to 1, 2, 2.5, 5 or 10 times a power of ten.

    With ``round_result`` the closest candidate wins; otherwise the largest
    candidate not exceeding ``value`` (2.5 is only used when rounding).
    """
    if not np.isfinite(value) or value <= 0:
        return 0.0
    exp = math.floor(math.log10(value))
    frac = value / (10.0**exp)
    # log10 can land a hair under an exact power of ten.
    if frac >= 10.0 - 1e-9:
        exp += 1
        frac = value / (10.0**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 2.25:
            nice_frac = 2.0
        elif frac < 3.5:
            nice_frac = 2.5
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac < 2.0 - 1e-9:
            nice_frac = 1.0
        elif frac < 5.0 - 1e-9:
            nice_frac = 2.0
        elif frac < 10.0 - 1e-9:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10.0**exp))


def tick_step(d0: float, d1: float, count: int) -> float:
    if count <= 0:
        count = 10
    span = abs(d1 - d0)
    if span == 0:
        return 0.0
    return nice_number(span / max(count - 1, 1), round_result=True)


def linear_ticks(d0: float, d1: float, count: int = 10) -> list[float]:
    """Nice ticks covering the inclusive interval between ``d0`` and ``d1``.

    Ticks are ordered like the domain (descending for a reversed domain).
    """
    if count <= 0:
        count = 10
    if not (np.isfinite(d0) and np.isfinite(d1)):
        return []
    if d0 == d1:
        return [float(d0)]
    lo, hi = min(d0, d1), max(d0, d1)
    step = tick_step(lo, hi, count)
    if step <= 0:
        return [float(lo)]
    decimals = decimals_from_step(step)
    first = math.ceil(lo / step - _EDGE_EPS)
    last = math.floor(hi / step + _EDGE_EPS)
    ticks: list[float] = []
    for i in range(first, last + 1):
        value = round(i * step, decimals)
        if value == 0.0:
            value = 0.0
        if lo <= value <= hi:
            ticks.append(value)
    if d0 > d1:
        ticks.reverse()
    return ticks


def nice_domain(d0: float, d1: float, count: int = 10) -> tuple[float, float, float]:
    """Extend a domain outward to multiples of a nice step. Returns (d0, d1, step)."""
    if count <= 0:
        count = 10
    if d0 == d1 or not (np.isfinite(d0) and np.isfinite(d1)):
        return float(d0), float(d1), 0.0
    reverse = d0 > d1
    lo, hi = (d1, d0) if reverse else (d0, d1)
    step = nice_number((hi - lo) / max(count - 1, 1), round_result=False)
    decimals = decimals_from_step(step)
    lo = round(math.floor(lo / step + _EDGE_EPS) * step, decimals)
    hi = round(math.ceil(hi / step - _EDGE_EPS) * step, decimals)
    if reverse:
        return hi, lo, step
    return lo, hi, step


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks(ticks: list[float]) -> list[str]:
    if not ticks:
        return []
    if len(ticks) == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def linear_formatter(ticks: list[float]) -> TickFormatter:
    """Formatter with just enough decimals to tell adjacent ticks apart."""
    step = float(abs(ticks[1] - ticks[0])) if len(ticks) > 1 else None

    def _fmt(value: object) -> str:
        try:
            return format_tick(float(value), step=step)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return str(value)

    return _fmt


def log_formatter(value: object) -> str:
    try:
        v = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return str(value)
    if not np.isfinite(v):
        return str(v)
    abs_v = abs(v)
    if abs_v != 0 and (abs_v >= 1e4 or abs_v <= 1e-3):
        mantissa, exponent = f"{v:e}".split("e")
        mantissa = mantissa.rstrip("0").rstrip(".")
        return f"{mantissa}e{int(exponent)}"
    return f"{v:g}"


def decimals_from_step(step: float | None) -> int:
    if step is None or step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
