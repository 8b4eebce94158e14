from __future__ import annotations

from enum import Enum
import math
from typing import Optional, Sequence

from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import area_path, polyline_path
from dataviz_core.primitives import Bounds, Line, Path, Primitive, Rect, Style
from dataviz_core.scales.band import BandScale
from dataviz_core.scales.linear import LinearScale
from dataviz_core.stats import Candle, bollinger_bands, heikin_ashi
from dataviz_plot._common import DEFAULT_MARGIN, Margin, axes, is_empty, require, safe_chart

VOLUME_SHARE = 0.2
MIN_BODY = 1.0


class CandleStyle(str, Enum):
    CANDLESTICK = "candlestick"
    OHLC = "ohlc"


@safe_chart("candlestick_chart")
def candlestick_chart(
    candles: Sequence[Candle],
    bounds: Bounds,
    *,
    labels: Optional[Sequence[str]] = None,
    style: CandleStyle | str = CandleStyle.CANDLESTICK,
    use_heikin_ashi: bool = False,
    bollinger: Optional[tuple[int, float]] = None,
    show_volume: bool = False,
    candle_width: float = 8.0,
    margin: Margin = DEFAULT_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Candlestick or OHLC bars with optional Heikin-Ashi smoothing, Bollinger bands and volume."""
    if is_empty(candles):
        return []
    style = CandleStyle(style)
    names = list(labels) if labels is not None else [str(i) for i in range(len(candles))]
    require(len(names) == len(candles), f"{len(names)} labels for {len(candles)} candles")
    shown = heikin_ashi(candles) if use_heikin_ashi else list(candles)

    plot = margin.apply(bounds)
    price_area = plot
    if show_volume:
        price_area = Bounds(plot.x, plot.y, plot.width, plot.height * (1.0 - VOLUME_SHARE))

    bands = None
    lows = [c.low for c in shown]
    highs = [c.high for c in shown]
    if bollinger is not None:
        period, k = bollinger
        bands = bollinger_bands([c.close for c in shown], int(period), float(k))
        lows += [v for v in bands.lower if not math.isnan(v)]
        highs += [v for v in bands.upper if not math.isnan(v)]
    lo, hi = min(lows), max(highs)
    if lo == hi:
        lo, hi = lo - 1.0, hi + 1.0

    x = BandScale(names, (plot.x, plot.right), padding_inner=0.3, padding_outer=0.15)
    y = LinearScale((lo, hi), (price_area.bottom, price_area.y)).nice(5)
    out: list[Primitive] = axes(x, y, price_area, theme, x_ticks=len(names))
    width = min(candle_width, x.bandwidth())

    if bands is not None:
        out += _bollinger(bands, names, x, y, theme)

    for name, c in zip(names, shown):
        cx = x.center(name).value
        color = theme.rising if c.rising else theme.falling
        stroke = Style(stroke=color, stroke_width=1.0)
        y_open = y.forward(c.open).value
        y_close = y.forward(c.close).value
        if style is CandleStyle.OHLC:
            out.append(Line(cx, y.forward(c.high).value, cx, y.forward(c.low).value, stroke))
            out.append(Line(cx - width / 2.0, y_open, cx, y_open, stroke))
            out.append(Line(cx, y_close, cx + width / 2.0, y_close, stroke))
            continue
        out.append(Line(cx, y.forward(c.high).value, cx, y.forward(c.low).value, stroke))
        top = min(y_open, y_close)
        out.append(Rect(cx - width / 2.0, top, width, max(MIN_BODY, abs(y_open - y_close)), Style(fill=color, stroke=color)))

    if show_volume:
        vol_top = price_area.bottom + 4.0
        vol = LinearScale((0.0, max(max(c.volume for c in candles), 1e-12)), (plot.bottom, vol_top))
        for name, c, raw in zip(names, shown, candles):
            if raw.volume <= 0:
                continue
            vy = vol.forward(raw.volume).value
            color = theme.rising if c.rising else theme.falling
            out.append(Rect(x.center(name).value - width / 2.0, vy, width, plot.bottom - vy, Style(fill=color, opacity=0.5)))
    return out


def _bollinger(bands, names: Sequence[str], x: BandScale, y: LinearScale, theme: ChartTheme) -> list[Primitive]:
    upper: list[tuple[float, float]] = []
    lower: list[tuple[float, float]] = []
    middle: list[tuple[float, float]] = []
    for name, m, u, lo in zip(names, bands.middle, bands.upper, bands.lower):
        if math.isnan(m):
            continue
        cx = x.center(name).value
        middle.append((cx, y.forward(m).value))
        upper.append((cx, y.forward(u).value))
        lower.append((cx, y.forward(lo).value))
    if not middle:
        return []
    color = theme.color_at(4)
    return [
        Path(area_path(upper, lower), Style(fill=color, fill_opacity=0.1)),
        Path(polyline_path(upper), Style(stroke=color, stroke_width=1.0)),
        Path(polyline_path(lower), Style(stroke=color, stroke_width=1.0)),
        Path(polyline_path(middle), Style(stroke=color, stroke_width=1.0, stroke_dasharray="4,2")),
    ]


def ohlc_chart(candles: Sequence[Candle], bounds: Bounds, **kwargs) -> list[Primitive]:
    return candlestick_chart(candles, bounds, style=CandleStyle.OHLC, **kwargs)
