from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Iterable, Sequence

import numpy as np

from dataviz_core.errors import ChartDataError
from dataviz_core.scales.ticks import nice_domain


@dataclass(frozen=True)
class Bin:
    x0: float
    x1: float
    count: int


def sturges_bins(n: int) -> int:
    if n <= 1:
        return 1
    return int(math.ceil(math.log2(n))) + 1


def bin_values(
    values: Iterable[float],
    bins: int | None = None,
    *,
    width: float | None = None,
    nice: bool = True,
) -> list[Bin]:
    """Histogram bins; a fixed ``width`` wins over a bin count.

    Every bin is half-open except the last, which includes its upper edge.
    """
    data = np.asarray([v for v in values], dtype=np.float64)
    data = data[np.isfinite(data)]
    if data.size == 0:
        return []
    lo = float(data.min())
    hi = float(data.max())

    if width is not None:
        if width <= 0 or not math.isfinite(width):
            raise ChartDataError("bin width must be positive")
        start = math.floor(lo / width) * width
        count = max(1, int(math.ceil((hi - start) / width - 1e-9)))
        if start + count * width <= hi:
            count += 1
        edges = [start + i * width for i in range(count + 1)]
    else:
        count = bins if bins and bins > 0 else sturges_bins(int(data.size))
        if lo == hi:
            edges = [lo - 0.5, hi + 0.5]
        elif nice:
            nlo, nhi, step = nice_domain(lo, hi, count + 1)
            steps = max(1, int(round((nhi - nlo) / step)))
            edges = [nlo + i * step for i in range(steps + 1)]
        else:
            edges = list(np.linspace(lo, hi, count + 1))

    edge_arr = np.asarray(edges, dtype=np.float64)
    idx = np.searchsorted(edge_arr, data, side="right") - 1
    idx = np.clip(idx, 0, len(edges) - 2)
    counts = np.bincount(idx, minlength=len(edges) - 1)
    return [Bin(float(edges[i]), float(edges[i + 1]), int(counts[i])) for i in range(len(edges) - 1)]


def moving_average(values: Sequence[float], window: int) -> list[float]:
    """Trailing mean over up to ``window`` values (shorter at the start)."""
    if window <= 0:
        raise ChartDataError("window must be positive")
    out: list[float] = []
    total = 0.0
    for i, v in enumerate(values):
        total += v
        if i >= window:
            total -= values[i - window]
        out.append(total / min(i + 1, window))
    return out


def exponential_smoothing(values: Sequence[float], alpha: float) -> list[float]:
    if not 0.0 < alpha <= 1.0:
        raise ChartDataError("alpha must be in (0, 1]")
    out: list[float] = []
    for i, v in enumerate(values):
        out.append(float(v) if i == 0 else alpha * v + (1.0 - alpha) * out[-1])
    return out


_ROLLING = {
    "mean": np.mean,
    "std": np.std,
    "min": np.min,
    "max": np.max,
}


def rolling(values: Sequence[float], window: int, fn: str = "mean") -> list[float]:
    """Trailing window statistic; NaN until the window fills."""
    if window <= 0:
        raise ChartDataError("window must be positive")
    try:
        reducer = _ROLLING[fn]
    except KeyError:
        raise ChartDataError(f"unknown rolling statistic: {fn}") from None
    arr = np.asarray(values, dtype=np.float64)
    out = [math.nan] * arr.size
    for i in range(window - 1, arr.size):
        out[i] = float(reducer(arr[i - window + 1 : i + 1]))
    return out


class StackOffset(str, Enum):
    ZERO = "zero"
    NORMALIZE = "normalize"
    CENTER = "center"
    SILHOUETTE = "silhouette"
    WIGGLE = "wiggle"


def stack(series: Sequence[Sequence[float]], offset: StackOffset | str = StackOffset.ZERO) -> list[list[tuple[float, float]]]:
    """Stack equal-length series; returns per series a list of (lower, upper) pairs.

    Baselines: ``center`` shifts each column by half its total, ``wiggle``
    by half the mean of the neighbouring column totals, ``silhouette`` and
    ``zero`` keep the baseline at 0, ``normalize`` scales columns to sum to 1.
    """
    offset = StackOffset(offset)
    if not series:
        return []
    n = len(series[0])
    if any(len(s) != n for s in series):
        raise ChartDataError("stacked series must have equal length")
    values = np.asarray(series, dtype=np.float64)
    values = np.where(np.isfinite(values), np.maximum(values, 0.0), 0.0)
    totals = values.sum(axis=0)

    if offset is StackOffset.NORMALIZE:
        safe = np.where(totals == 0, 1.0, totals)
        values = values / safe
        baseline = np.zeros(n)
    elif offset is StackOffset.CENTER:
        baseline = -totals / 2.0
    elif offset is StackOffset.WIGGLE:
        baseline = np.zeros(n)
        for i in range(n):
            neighbours = totals[max(0, i - 1) : min(n, i + 2)]
            baseline[i] = -float(np.mean(neighbours)) / 2.0
    else:
        baseline = np.zeros(n)

    out: list[list[tuple[float, float]]] = []
    lower = baseline.copy()
    for row in values:
        upper = lower + row
        out.append([(float(a), float(b)) for a, b in zip(lower, upper)])
        lower = upper
    return out


class NormalizeMethod(str, Enum):
    MINMAX = "minmax"
    ZSCORE = "zscore"
    PERCENTAGE = "percentage"


def normalize(values: Sequence[float], method: NormalizeMethod | str = NormalizeMethod.MINMAX) -> list[float]:
    method = NormalizeMethod(method)
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return []
    if method is NormalizeMethod.MINMAX:
        span = float(arr.max() - arr.min())
        return ((arr - arr.min()) / (span if span != 0 else 1.0)).tolist()
    if method is NormalizeMethod.ZSCORE:
        sigma = float(arr.std())
        return ((arr - arr.mean()) / (sigma if sigma != 0 else 1.0)).tolist()
    total = float(arr.sum())
    return (arr / (total if total != 0 else 1.0) * 100.0).tolist()
