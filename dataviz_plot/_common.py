from __future__ import annotations

from dataclasses import dataclass
import functools
import logging
import math
from typing import Any, Callable, Optional, Sequence, TypeVar

import numpy as np

from dataviz_core.axis import Axis, AxisOrientation, AxisStyle
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.errors import ChartDataError, DatavizError
from dataviz_core.primitives import Bounds, Circle, Line, Primitive, Rect, Style, Text
from dataviz_core.scales.base import Scale

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., list])


@dataclass(frozen=True)
class Margin:
    top: float = 20.0
    right: float = 20.0
    bottom: float = 40.0
    left: float = 50.0

    def apply(self, bounds: Bounds) -> Bounds:
        return bounds.inset(self.top, self.right, self.bottom, self.left)


DEFAULT_MARGIN = Margin()
NO_MARGIN = Margin(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Series:
    name: str
    values: Sequence[float]
    color: Optional[str] = None


def safe_chart(name: str) -> Callable[[F], F]:
    """Turn malformed input into an empty primitive list instead of an exception."""

    def decorate(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> list:
            try:
                return fn(*args, **kwargs)
            except (DatavizError, ValueError, TypeError, KeyError, IndexError, ZeroDivisionError) as exc:
                LOGGER.warning("%s: rejected input (%s)", name, exc)
                return []

        return wrapper  # type: ignore[return-value]

    return decorate


def require(condition: bool, message: str) -> None:
    if not condition:
        raise ChartDataError(message)


def as_float_array(values: Any, *, label: str = "values") -> np.ndarray:
    """1-D float array from lists, numpy arrays or pandas Series."""
    if values is None:
        raise ChartDataError(f"{label} input is required")
    if pd is not None and isinstance(values, pd.Series):
        values = values.to_numpy()
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{label} must be numeric") from exc
    if arr.ndim != 1:
        raise ChartDataError(f"{label} must be 1-D, got shape {arr.shape}")
    return arr


def is_empty(values: Any) -> bool:
    if values is None:
        return True
    try:
        return len(values) == 0
    except TypeError:
        return False


def finite_extent(values: Sequence[float], *, include_zero: bool = False) -> tuple[float, float]:
    arr = np.asarray(values, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise ChartDataError("no finite values")
    lo = float(arr.min())
    hi = float(arr.max())
    if include_zero:
        lo = min(lo, 0.0)
        hi = max(hi, 0.0)
    if lo == hi:
        # Zero spread: pad by one unit so scales stay non-degenerate.
        lo, hi = lo - 1.0, hi + 1.0
    return lo, hi


def series_color(series: Series, index: int, theme: ChartTheme) -> str:
    return series.color or theme.color_at(index)


def axes(
    x_scale: Scale,
    y_scale: Scale,
    plot: Bounds,
    theme: ChartTheme = DEFAULT_THEME,
    *,
    x_title: Optional[str] = None,
    y_title: Optional[str] = None,
    x_ticks: int = 10,
    y_ticks: int = 5,
    grid: bool = True,
) -> list[Primitive]:
    style = AxisStyle.from_theme(theme)
    out: list[Primitive] = []
    out += Axis(
        y_scale,
        AxisOrientation.LEFT,
        offset=plot.x,
        tick_count=y_ticks,
        grid_length=plot.width if grid else None,
        title=y_title,
        style=style,
    ).render()
    out += Axis(
        x_scale,
        AxisOrientation.BOTTOM,
        offset=plot.bottom,
        tick_count=x_ticks,
        title=x_title,
        style=style,
    ).render()
    return out


LEGEND_SYMBOLS = ("swatch", "line", "circle")


def legend(
    entries: Sequence[tuple[str, str]],
    x: float,
    y: float,
    theme: ChartTheme = DEFAULT_THEME,
    *,
    swatch: float = 10.0,
    spacing: float = 18.0,
    symbol: str = "swatch",
) -> list[Primitive]:
    """Vertical list of color keys with labels, starting at (x, y).

    ``symbol`` picks the key drawn before each label: ``"swatch"`` (filled
    square), ``"line"`` (short stroke, for line series) or ``"circle"``.
    """
    if symbol not in LEGEND_SYMBOLS:
        raise ValueError(f"unknown legend symbol {symbol!r}")
    out: list[Primitive] = []
    label_style = Style(
        fill=theme.text_color,
        font_family=theme.font_family,
        font_size=theme.font_size_px,
        dominant_baseline="middle",
    )
    for i, (label, color) in enumerate(entries):
        row = y + i * spacing
        if symbol == "line":
            mid = row + swatch / 2.0
            out.append(Line(x, mid, x + swatch, mid, Style(stroke=color, stroke_width=2.0)))
        elif symbol == "circle":
            out.append(Circle(x + swatch / 2.0, row + swatch / 2.0, swatch / 2.0, Style(fill=color)))
        else:
            out.append(Rect(x, row, swatch, swatch, Style(fill=color)))
        out.append(Text(label, x + swatch + 6.0, row + swatch / 2.0, label_style))
    return out


def title(text: Optional[str], bounds: Bounds, theme: ChartTheme = DEFAULT_THEME) -> list[Primitive]:
    if not text:
        return []
    return [
        Text(
            text,
            bounds.x + bounds.width / 2.0,
            bounds.y + theme.title_font_size_px + 2.0,
            Style(
                fill=theme.text_color,
                font_family=theme.font_family,
                font_size=theme.title_font_size_px,
                font_weight="bold",
                text_anchor="middle",
            ),
        )
    ]


def safe_div(num: float, denom: float) -> float:
    return num / (denom if denom != 0 and math.isfinite(denom) else 1.0)
