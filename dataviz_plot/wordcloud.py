from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Optional, Sequence

from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.primitives import Bounds, Primitive, Style, Text
from dataviz_plot._common import is_empty, require, safe_chart, title

MIN_FONT_SIZE = 12.0
MAX_FONT_SIZE = 72.0
SPIRAL_ANGLE_STEP = 0.3
SPIRAL_RADIUS_STEP = 5.0
ROW_MARGIN = 20.0
# Rough advance width of a bold glyph relative to its font size.
CHAR_WIDTH = 0.6


class WordLayout(str, Enum):
    SPIRAL = "spiral"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Word:
    text: str
    frequency: float
    color: Optional[str] = None
    angle: float = 0.0


@dataclass(frozen=True)
class PlacedWord:
    word: Word
    font_size: float
    x: float
    y: float


def font_sizes(words: Sequence[Word], min_size: float = MIN_FONT_SIZE, max_size: float = MAX_FONT_SIZE) -> list[float]:
    lo = min(w.frequency for w in words)
    hi = max(w.frequency for w in words)
    span = (hi - lo) or 1.0
    return [min_size + (w.frequency - lo) / span * (max_size - min_size) for w in words]


def _spiral(sized: list[tuple[Word, float]], bounds: Bounds) -> list[PlacedWord]:
    cx = bounds.x + bounds.width / 2.0
    cy = bounds.y + bounds.height / 2.0
    angle = 0.0
    radius = 0.0
    out = []
    for word, size in sized:
        x = min(max(cx + radius * math.cos(angle), bounds.x + size), bounds.right - size)
        y = min(max(cy + radius * math.sin(angle), bounds.y + size), bounds.bottom - size)
        out.append(PlacedWord(word, size, x, y))
        angle += SPIRAL_ANGLE_STEP
        radius += SPIRAL_RADIUS_STEP
        if size > 40.0:
            radius += SPIRAL_RADIUS_STEP * 2.0
    return out


def _rows(sized: list[tuple[Word, float]], bounds: Bounds) -> list[PlacedWord]:
    left = bounds.x + ROW_MARGIN
    x = left
    y = bounds.y + ROW_MARGIN + 30.0
    row_height = 0.0
    out = []
    for word, size in sized:
        width = len(word.text) * size * CHAR_WIDTH
        if x + width > bounds.right - ROW_MARGIN and x > left:
            x = left
            y += row_height + 10.0
            row_height = 0.0
        y = min(y, bounds.bottom - ROW_MARGIN)
        out.append(PlacedWord(word, size, x + width / 2.0, y + size / 2.0))
        x += width + 15.0
        row_height = max(row_height, size)
    return out


def layout_words(
    words: Sequence[Word],
    bounds: Bounds,
    *,
    layout: WordLayout | str = WordLayout.SPIRAL,
    min_font_size: float = MIN_FONT_SIZE,
    max_font_size: float = MAX_FONT_SIZE,
) -> list[PlacedWord]:
    """Place words most-frequent first; no collision detection is attempted."""
    if not words:
        return []
    layout = WordLayout(layout)
    sizes = font_sizes(words, min_font_size, max_font_size)
    sized = sorted(zip(words, sizes), key=lambda pair: pair[0].frequency, reverse=True)
    if layout is WordLayout.HORIZONTAL:
        return _rows(sized, bounds)
    return _spiral(sized, bounds)


@safe_chart("word_cloud")
def word_cloud(
    words: Sequence[Word],
    bounds: Bounds,
    *,
    layout: WordLayout | str = WordLayout.SPIRAL,
    min_font_size: float = MIN_FONT_SIZE,
    max_font_size: float = MAX_FONT_SIZE,
    color: Optional[str] = None,
    chart_title: Optional[str] = None,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if is_empty(words):
        return []
    require(0 < min_font_size <= max_font_size, "font sizes must satisfy 0 < min <= max")
    for w in words:
        require(math.isfinite(float(w.frequency)), f"frequency of {w.text!r} must be finite")
    out: list[Primitive] = title(chart_title, bounds, theme)
    for i, placed in enumerate(layout_words(words, bounds, layout=layout, min_font_size=min_font_size, max_font_size=max_font_size)):
        fill = placed.word.color or color or theme.color_at(i)
        out.append(
            Text(
                placed.word.text,
                placed.x,
                placed.y,
                Style(
                    fill=fill,
                    font_family=theme.font_family,
                    font_size=round(placed.font_size, 2),
                    font_weight="bold",
                    text_anchor="middle",
                    dominant_baseline="middle",
                ),
                rotate=placed.word.angle,
            )
        )
    return out
