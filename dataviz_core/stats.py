from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Iterable, Iterator, Sequence

import numpy as np

from dataviz_core.errors import ChartDataError

LOGGER = logging.getLogger(__name__)

KDE_POINTS = 100
_SQRT_2PI = math.sqrt(2.0 * math.pi)


def _finite(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(list(values), dtype=np.float64).ravel()
    return arr[np.isfinite(arr)]


def percentile(values: Iterable[float], p: float, *, presorted: bool = False) -> float:
    """Linear interpolation at rank ``(p / 100) * (n - 1)``."""
    data = list(values) if presorted else sorted(values)
    n = len(data)
    if n == 0:
        return 0.0
    if n == 1:
        return float(data[0])
    p = min(100.0, max(0.0, float(p)))
    rank = (p / 100.0) * (n - 1)
    lo = math.floor(rank)
    hi = math.ceil(rank)
    if lo == hi:
        return float(data[lo])
    frac = rank - lo
    return float(data[lo]) * (1.0 - frac) + float(data[hi]) * frac


def quartiles(values: Iterable[float]) -> tuple[float, float, float]:
    data = sorted(values)
    return (
        percentile(data, 25, presorted=True),
        percentile(data, 50, presorted=True),
        percentile(data, 75, presorted=True),
    )


def mean(values: Iterable[float]) -> float:
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def std(values: Iterable[float]) -> float:
    """Population standard deviation."""
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(np.std(arr))


@dataclass(frozen=True)
class BoxSummary:
    """Tukey box-plot summary; ``min``/``max`` are the whisker ends, not raw extremes."""

    min: float
    q1: float
    median: float
    q3: float
    max: float
    mean: float
    iqr: float
    lower_fence: float
    upper_fence: float
    outliers: tuple[float, ...]


def box_summary(values: Iterable[float], k: float = 1.5) -> BoxSummary:
    raw = [float(v) for v in values]
    data = sorted(v for v in raw if math.isfinite(v))
    if not data:
        raise ChartDataError("box summary of an empty sample")
    q1 = percentile(data, 25, presorted=True)
    med = percentile(data, 50, presorted=True)
    q3 = percentile(data, 75, presorted=True)
    iqr = q3 - q1
    lower = q1 - k * iqr
    upper = q3 + k * iqr
    inside = [v for v in data if lower <= v <= upper]
    outliers = tuple(v for v in data if v < lower or v > upper)
    return BoxSummary(
        min=inside[0] if inside else q1,
        q1=q1,
        median=med,
        q3=q3,
        max=inside[-1] if inside else q3,
        mean=sum(v for v in raw if math.isfinite(v)) / len(data),
        iqr=iqr,
        lower_fence=lower,
        upper_fence=upper,
        outliers=outliers,
    )


def silverman_bandwidth(values: Iterable[float]) -> float:
    """``0.9 * min(sigma, IQR / 1.34) * n ** (-1/5)``."""
    data = _finite(values)
    n = data.size
    if n == 0:
        return 0.0
    sigma = float(np.std(data))
    q1, _, q3 = quartiles(data.tolist())
    spread = min(sigma, (q3 - q1) / 1.34)
    if spread <= 0:
        spread = max(sigma, (q3 - q1) / 1.34)
    if spread <= 0:
        # Constant sample: a narrow kernel keeps the density a finite spike.
        spread = max(abs(float(data[0])) * 0.01, 1e-3)
        LOGGER.debug("constant sample; using fallback KDE spread %g", spread)
    return 0.9 * spread * n ** (-0.2)


def gaussian_kde(
    values: Iterable[float],
    bandwidth: float | None = None,
    *,
    points: int = KDE_POINTS,
) -> Iterator[tuple[float, float]]:
    """Lazily yield ``(x, density)`` over [min, max] at ``points`` even steps.

    ``bandwidth`` of None or 0 selects Silverman's rule; a negative or
    non-finite one yields nothing. A constant sample is evaluated over
    ``value +/- 3h`` so that the evaluation values stay strictly increasing.
    """
    data = _finite(values)
    if data.size == 0:
        return
    if bandwidth is None or bandwidth == 0:
        h = silverman_bandwidth(data)
    else:
        h = float(bandwidth)
    if not math.isfinite(h) or h <= 0:
        LOGGER.warning("KDE bandwidth must be positive, got %r", bandwidth)
        return
    lo = float(np.min(data))
    hi = float(np.max(data))
    if lo == hi:
        lo -= 3.0 * h
        hi += 3.0 * h
    points = max(2, int(points))
    step = (hi - lo) / (points - 1)
    norm = 1.0 / (data.size * h * _SQRT_2PI)
    for i in range(points):
        x = hi if i == points - 1 else lo + i * step
        z = (x - data) / h
        yield x, float(norm * np.sum(np.exp(-0.5 * z * z)))


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    if len(x) != len(y):
        raise ChartDataError(f"pearson inputs differ in length: {len(x)} != {len(y)}")
    if len(x) < 2:
        return 0.0
    xa = np.asarray(x, dtype=np.float64)
    ya = np.asarray(y, dtype=np.float64)
    dx = xa - xa.mean()
    dy = ya - ya.mean()
    denom = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denom == 0:
        return 0.0
    return float(np.sum(dx * dy) / denom)


def correlation_matrix(columns: Sequence[Sequence[float]]) -> list[list[float]]:
    """Pairwise Pearson coefficients between equal-length variables."""
    n = len(columns)
    out = [[1.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            r = pearson(columns[i], columns[j])
            out[i][j] = r
            out[j][i] = r
    return out


def sma(values: Sequence[float], period: int) -> list[float]:
    """Trailing simple moving average; NaN until the window fills."""
    if period <= 0:
        raise ChartDataError("SMA period must be positive")
    arr = np.asarray(values, dtype=np.float64)
    out = [math.nan] * arr.size
    for i in range(period - 1, arr.size):
        out[i] = float(np.mean(arr[i - period + 1 : i + 1]))
    return out


def rolling_std(values: Sequence[float], period: int) -> list[float]:
    if period <= 0:
        raise ChartDataError("rolling window must be positive")
    arr = np.asarray(values, dtype=np.float64)
    out = [math.nan] * arr.size
    for i in range(period - 1, arr.size):
        out[i] = float(np.std(arr[i - period + 1 : i + 1]))
    return out


@dataclass(frozen=True)
class BollingerBands:
    middle: list[float]
    upper: list[float]
    lower: list[float]


def bollinger_bands(values: Sequence[float], period: int = 20, k: float = 2.0) -> BollingerBands:
    """Period-N SMA flanked by ``k`` times the window's population standard deviation."""
    middle = sma(values, period)
    sigma = rolling_std(values, period)
    upper = [m + k * s for m, s in zip(middle, sigma)]
    lower = [m - k * s for m, s in zip(middle, sigma)]
    return BollingerBands(middle=middle, upper=upper, lower=lower)


@dataclass(frozen=True)
class Candle:
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        if self.high < self.low:
            raise ChartDataError(f"candle high {self.high} below low {self.low}")

    @property
    def rising(self) -> bool:
        return self.close >= self.open


def heikin_ashi(candles: Sequence[Candle]) -> list[Candle]:
    """Heikin-Ashi candles; the first keeps its raw open, later opens average the previous HA body."""
    out: list[Candle] = []
    for i, c in enumerate(candles):
        close = (c.open + c.high + c.low + c.close) / 4.0
        if i == 0:
            open_ = c.open
        else:
            prev = out[-1]
            open_ = (prev.open + prev.close) / 2.0
        out.append(
            Candle(
                open=open_,
                high=max(c.high, open_, close),
                low=min(c.low, open_, close),
                close=close,
                volume=c.volume,
            )
        )
    return out
