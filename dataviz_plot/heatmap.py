from __future__ import annotations

import colorsys
from dataclasses import dataclass
import datetime as dt
from typing import Optional, Sequence

from dataviz_core.color import parse_color, to_hex
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.primitives import Bounds, Primitive, Rect, Style, Text
from dataviz_core.render.terminal import RESET, SHADES, ColorMode, ansi_fg
from dataviz_plot._common import is_empty, require, safe_chart

WEEKS = 53
DAYS_PER_WEEK = 7
LABEL_WIDTH = 30.0
LINEAR_DAYS = 30
DAY_LABELS = ("", "Mon", "", "Wed", "", "Fri", "")


@dataclass(frozen=True)
class HeatmapDay:
    date: dt.date
    count: int = 0

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"count for {self.date} must be non-negative")


def contribution_lightness(ratio: float) -> float:
    """Four-segment lightness ramp; zero activity stays dark, the top caps at 0.85."""
    if ratio <= 0:
        return 0.15
    if ratio < 0.25:
        lightness = 0.15 + ratio * 0.4
    elif ratio < 0.5:
        lightness = 0.25 + (ratio - 0.25) * 0.6
    elif ratio < 0.75:
        lightness = 0.40 + (ratio - 0.5) * 0.3
    else:
        lightness = 0.55 + (ratio - 0.75) * 0.25
    return min(0.85, lightness)


def contribution_color(color: str, ratio: float) -> str:
    """``color`` with its HLS lightness replaced by the ramp value for ``ratio``."""
    c = parse_color(color)
    h, _, s = colorsys.rgb_to_hls(c.r, c.g, c.b)
    r, g, b = colorsys.hls_to_rgb(h, min(1.0, max(0.0, contribution_lightness(ratio))), s)
    return to_hex(tuple(min(1.0, max(0.0, v)) for v in (r, g, b)))


def _day_index(days: Sequence[HeatmapDay]) -> tuple[dict[dt.date, int], int]:
    counts: dict[dt.date, int] = {}
    for day in days:
        counts[_as_date(day.date)] = day.count
    max_count = max(counts.values(), default=0)
    return counts, max_count if max_count > 0 else 1


def _as_date(value: dt.date) -> dt.date:
    return value.date() if isinstance(value, dt.datetime) else value


def week_start(value: dt.date) -> dt.date:
    """Sunday on or before ``value``."""
    value = _as_date(value)
    # Python weekdays run Monday=0..Sunday=6.
    return value - dt.timedelta(days=(value.weekday() + 1) % 7)


@safe_chart("weeks_heatmap")
def weeks_heatmap(
    days: Sequence[HeatmapDay],
    bounds: Bounds,
    *,
    color: Optional[str] = None,
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """GitHub-style grid: one column per week starting Sunday, one row per weekday.

    The grid starts at the Sunday on or before ``start`` (default: the
    earliest day) and stops after ``end`` when given.
    """
    if is_empty(days):
        return []
    base = color or theme.color_at(0)
    counts, max_count = _day_index(days)
    available = bounds.width - LABEL_WIDTH
    cell = max(1.0, min((available - WEEKS) / WEEKS, bounds.height / DAYS_PER_WEEK))
    offset_x = bounds.x + LABEL_WIDTH
    offset_y = bounds.y + (bounds.height - DAYS_PER_WEEK * cell) / 2.0
    current = week_start(start if start is not None else min(counts))
    last = _as_date(end) if end is not None else None

    out: list[Primitive] = []
    for week in range(WEEKS):
        for weekday in range(DAYS_PER_WEEK):
            if last is not None and current > last:
                break
            ratio = counts.get(current, 0) / max_count
            out.append(
                Rect(
                    offset_x + week * (cell + 1.0),
                    offset_y + weekday * cell,
                    cell,
                    cell,
                    Style(fill=contribution_color(base, ratio)),
                    rx=2.0,
                )
            )
            current += dt.timedelta(days=1)
    label = Style(
        fill=theme.text_color,
        font_family=theme.font_family,
        font_size=theme.font_size_px - 1,
        text_anchor="end",
        dominant_baseline="middle",
    )
    for i, text in enumerate(DAY_LABELS):
        if text:
            out.append(Text(text, offset_x - 5.0, offset_y + i * cell + cell / 2.0, label))
    return out


@safe_chart("linear_heatmap")
def linear_heatmap(
    days: Sequence[HeatmapDay],
    bounds: Bounds,
    *,
    color: Optional[str] = None,
    max_days: int = LINEAR_DAYS,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Single row of squares (the first ``max_days`` days) filling the width with 1px gaps."""
    if is_empty(days):
        return []
    require(max_days > 0, "max_days must be positive")
    base = color or theme.color_at(0)
    shown = list(days)[:max_days]
    _, max_count = _day_index(days)
    size = max(1.0, (bounds.width - (len(shown) - 1)) / len(shown))
    return [
        Rect(
            bounds.x + i * (size + 1.0),
            bounds.y + 8.0,
            size,
            size,
            Style(fill=contribution_color(base, day.count / max_count)),
            rx=2.0,
        )
        for i, day in enumerate(shown)
    ]


def _shade(ratio: float) -> str:
    return SHADES[min(len(SHADES) - 1, int(ratio * (len(SHADES) - 1)))]


def weeks_heatmap_terminal(
    days: Sequence[HeatmapDay],
    *,
    width: int = 104,
    start: Optional[dt.date] = None,
    color: Optional[str] = None,
    color_mode: ColorMode = ColorMode.NONE,
) -> str:
    """Seven text rows (Sunday first), each cell a shade block followed by a space.

    Column ``w`` of row ``d`` is the day ``d`` days after the Sunday of week
    ``w``, so rows line up with the SVG grid; at most 52 weeks fit.
    """
    if is_empty(days):
        return ""
    counts, max_count = _day_index(days)
    weeks = min(52, max(1, width // 2))
    first = week_start(start if start is not None else _as_date(days[0].date))
    prefix = ansi_fg(color, color_mode) if color is not None and color_mode is not ColorMode.NONE else ""
    lines = []
    for weekday in range(DAYS_PER_WEEK):
        cells = []
        for week in range(weeks):
            day = first + dt.timedelta(days=week * DAYS_PER_WEEK + weekday)
            cells.append(_shade(counts.get(day, 0) / max_count) + " ")
        row = "".join(cells)
        lines.append(f"{prefix}{row}{RESET}" if prefix else row)
    return "\n".join(lines) + "\n"


def linear_heatmap_terminal(
    days: Sequence[HeatmapDay],
    *,
    width: int = 80,
    color: Optional[str] = None,
    color_mode: ColorMode = ColorMode.NONE,
) -> str:
    if is_empty(days):
        return ""
    _, max_count = _day_index(days)
    row = "".join(_shade(day.count / max_count) for day in list(days)[: max(0, width)])
    if color is not None and color_mode is not ColorMode.NONE:
        row = f"{ansi_fg(color, color_mode)}{row}{RESET}"
    return row + "\n"
