from __future__ import annotations

from enum import Enum
import logging
import math
import os
import re
from typing import Mapping, Optional, Sequence

import numpy as np

from dataviz_core.color import Color, parse_color
from dataviz_core.errors import ColorParseError
from dataviz_core.primitives import Style

LOGGER = logging.getLogger(__name__)

BRAILLE_BASE = 0x2800
# Dot bit for sub-pixel (column, row) inside a 2x4 Braille cell.
BRAILLE_BITS = (
    (0x01, 0x02, 0x04, 0x40),
    (0x08, 0x10, 0x20, 0x80),
)
SHADES = (" ", "░", "▒", "▓", "█")

CSI = "\x1b["
RESET = f"{CSI}0m"

ANSI16_PALETTE: tuple[tuple[int, tuple[int, int, int]], ...] = (
    (30, (0, 0, 0)),
    (31, (205, 0, 0)),
    (32, (0, 205, 0)),
    (33, (205, 205, 0)),
    (34, (0, 0, 238)),
    (35, (205, 0, 205)),
    (36, (0, 205, 205)),
    (37, (229, 229, 229)),
    (90, (127, 127, 127)),
    (91, (255, 0, 0)),
    (92, (0, 255, 0)),
    (93, (255, 255, 0)),
    (94, (92, 92, 255)),
    (95, (255, 0, 255)),
    (96, (0, 255, 255)),
    (97, (255, 255, 255)),
)


class ColorMode(str, Enum):
    NONE = "none"
    ANSI16 = "ansi16"
    ANSI256 = "ansi256"
    TRUECOLOR = "truecolor"


def detect_color_mode(environ: Optional[Mapping[str, str]] = None) -> ColorMode:
    env = os.environ if environ is None else environ
    if env.get("NO_COLOR"):
        return ColorMode.NONE
    colorterm = env.get("COLORTERM", "").lower()
    if colorterm in ("truecolor", "24bit"):
        return ColorMode.TRUECOLOR
    term = env.get("TERM", "").lower()
    if not term or term == "dumb":
        return ColorMode.NONE
    if "256color" in term:
        return ColorMode.ANSI256
    return ColorMode.ANSI16


def shade_char(intensity: float) -> str:
    """Block character for an intensity in [0, 1] (floored to the nearest level)."""
    if not math.isfinite(intensity) or intensity <= 0:
        return SHADES[0]
    idx = int(min(1.0, intensity) * (len(SHADES) - 1))
    return SHADES[min(idx, len(SHADES) - 1)]


def rgb_to_ansi16(r: int, g: int, b: int) -> int:
    """Foreground code of the palette entry nearest in RGB."""
    best_code = 37
    best = math.inf
    for code, (pr, pg, pb) in ANSI16_PALETTE:
        dist = (r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2
        if dist < best:
            best = dist
            best_code = code
    return best_code


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    if abs(r - g) < 10 and abs(g - b) < 10 and abs(b - r) < 10:
        if r < 8:
            return 16
        if r > 247:
            return 231
        return 232 + (r - 8) // 10
    return 16 + 36 * (r * 6 // 256) + 6 * (g * 6 // 256) + (b * 6 // 256)


def ansi_fg(color: Color | str, mode: ColorMode) -> str:
    return _ansi(color, mode, background=False)


def ansi_bg(color: Color | str, mode: ColorMode) -> str:
    return _ansi(color, mode, background=True)


def _ansi(color: Color | str, mode: ColorMode, *, background: bool) -> str:
    if mode is ColorMode.NONE:
        return ""
    r, g, b = parse_color(color).rgb255()
    if mode is ColorMode.TRUECOLOR:
        return f"{CSI}{48 if background else 38};2;{r};{g};{b}m"
    if mode is ColorMode.ANSI256:
        return f"{CSI}{48 if background else 38};5;{rgb_to_ansi256(r, g, b)}m"
    code = rgb_to_ansi16(r, g, b)
    return f"{CSI}{code + 10 if background else code}m"


class BrailleCanvas:
    """Dot grid with 2x4 sub-pixels per character cell."""

    def __init__(self, cols: int, rows: int) -> None:
        if cols <= 0 or rows <= 0:
            raise ValueError("canvas cols/rows must be > 0")
        self.cols = cols
        self.rows = rows
        self.dots = np.zeros((rows * 4, cols * 2), dtype=bool)
        self.colors: list[list[Optional[Color]]] = [[None] * cols for _ in range(rows)]
        # Whole-cell overrides (block shades, text) drawn instead of Braille dots.
        self.cells: list[list[Optional[str]]] = [[None] * cols for _ in range(rows)]

    @property
    def width(self) -> int:
        return self.cols * 2

    @property
    def height(self) -> int:
        return self.rows * 4

    def set(self, x: int, y: int, color: Optional[Color] = None) -> None:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return
        self.dots[y, x] = True
        if color is not None:
            self.colors[y // 4][x // 2] = color

    def line(self, x0: int, y0: int, x1: int, y1: int, color: Optional[Color] = None) -> None:
        dx = abs(x1 - x0)
        sx = 1 if x0 < x1 else -1
        dy = -abs(y1 - y0)
        sy = 1 if y0 < y1 else -1
        err = dx + dy

        while True:
            self.set(x0, y0, color)
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy

    def fill_column(self, x: int, y_top: int, y_bottom: int, color: Optional[Color] = None) -> None:
        for y in range(min(y_top, y_bottom), max(y_top, y_bottom) + 1):
            self.set(x, y, color)

    def set_cell(self, col: int, row: int, char: str, color: Optional[Color] = None) -> None:
        if 0 <= col < self.cols and 0 <= row < self.rows:
            self.cells[row][col] = char
            if color is not None:
                self.colors[row][col] = color

    def cell_char(self, col: int, row: int) -> str:
        override = self.cells[row][col]
        if override is not None:
            return override
        block = self.dots[row * 4 : row * 4 + 4, col * 2 : col * 2 + 2]
        bits = 0
        for cx in range(2):
            for cy in range(4):
                if block[cy, cx]:
                    bits |= BRAILLE_BITS[cx][cy]
        return chr(BRAILLE_BASE + bits) if bits else " "

    def render(self, mode: ColorMode = ColorMode.NONE) -> str:
        lines: list[str] = []
        for row in range(self.rows):
            parts: list[str] = []
            active: Optional[Color] = None
            for col in range(self.cols):
                ch = self.cell_char(col, row)
                color = self.colors[row][col] if ch != " " else None
                if mode is not ColorMode.NONE and color != active:
                    parts.append(ansi_fg(color, mode) if color is not None else RESET)
                    active = color
                parts.append(ch)
            if mode is not ColorMode.NONE and active is not None:
                parts.append(RESET)
            lines.append("".join(parts).rstrip(" ") if mode is ColorMode.NONE else "".join(parts))
        return "\n".join(lines)


_PATH_TOKEN = re.compile(r"[MLHVCQAZmlhvcqaz]|-?\d*\.?\d+(?:[eE][-+]?\d+)?")
_PATH_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Q": 4, "A": 7, "Z": 0}


def path_points(d: str, *, curve_samples: int = 8) -> list[list[tuple[float, float]]]:
    """Flatten absolute path data into polylines (one per subpath); arcs become chords."""
    tokens = _PATH_TOKEN.findall(d)
    subpaths: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    x = y = 0.0
    start = (0.0, 0.0)
    cmd = ""
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.isalpha():
            cmd = tok.upper()
            i += 1
            if cmd == "Z":
                if current:
                    current.append(start)
                    subpaths.append(current)
                    current = []
                x, y = start
                continue
        arity = _PATH_ARITY.get(cmd)
        if not arity or i + arity > len(tokens):
            break
        args = [float(t) for t in tokens[i : i + arity]]
        i += arity
        if cmd == "M":
            if current:
                subpaths.append(current)
            x, y = args
            start = (x, y)
            current = [(x, y)]
            cmd = "L"
        elif cmd == "L":
            x, y = args
            current.append((x, y))
        elif cmd == "H":
            x = args[0]
            current.append((x, y))
        elif cmd == "V":
            y = args[0]
            current.append((x, y))
        elif cmd == "C":
            x0, y0 = x, y
            for k in range(1, curve_samples + 1):
                t = k / curve_samples
                u = 1.0 - t
                px = u**3 * x0 + 3 * u * u * t * args[0] + 3 * u * t * t * args[2] + t**3 * args[4]
                py = u**3 * y0 + 3 * u * u * t * args[1] + 3 * u * t * t * args[3] + t**3 * args[5]
                current.append((px, py))
            x, y = args[4], args[5]
        elif cmd == "Q":
            x0, y0 = x, y
            for k in range(1, curve_samples + 1):
                t = k / curve_samples
                u = 1.0 - t
                current.append(
                    (u * u * x0 + 2 * u * t * args[0] + t * t * args[2], u * u * y0 + 2 * u * t * args[1] + t * t * args[3])
                )
            x, y = args[2], args[3]
        elif cmd == "A":
            x, y = args[5], args[6]
            current.append((x, y))
    if current:
        subpaths.append(current)
    return subpaths


class TerminalSink:
    """Rasterizes primitives given in pixel space onto a Braille canvas."""

    def __init__(
        self,
        width: float,
        height: float,
        *,
        cols: int = 80,
        rows: int = 24,
        color_mode: ColorMode = ColorMode.NONE,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("terminal sink width/height must be > 0")
        self.canvas = BrailleCanvas(cols, rows)
        self.sx = self.canvas.width / float(width)
        self.sy = self.canvas.height / float(height)
        self.color_mode = color_mode

    def _dot(self, x: float, y: float) -> tuple[int, int]:
        return int(round(x * self.sx)), int(round(y * self.sy))

    @staticmethod
    def _color(style: Style, *, prefer_fill: bool) -> Optional[Color]:
        value = (style.fill or style.stroke) if prefer_fill else (style.stroke or style.fill)
        if not value or value.startswith("url("):
            return None
        try:
            return parse_color(value)
        except ColorParseError:
            return None

    def _segment(self, p0: tuple[float, float], p1: tuple[float, float], color: Optional[Color]) -> None:
        x0, y0 = self._dot(*p0)
        x1, y1 = self._dot(*p1)
        self.canvas.line(x0, y0, x1, y1, color)

    def rectangle(self, x: float, y: float, w: float, h: float, style: Style, rx: float = 0.0) -> None:
        color = self._color(style, prefer_fill=True)
        x0, y0 = self._dot(x, y)
        x1, y1 = self._dot(x + w, y + h)
        if style.fill and style.fill != "none":
            for px in range(min(x0, x1), max(x0, x1) + 1):
                self.canvas.fill_column(px, y0, y1, color)
            return
        for a, b in (((x, y), (x + w, y)), ((x + w, y), (x + w, y + h)), ((x + w, y + h), (x, y + h)), ((x, y + h), (x, y))):
            self._segment(a, b, color)

    def circle(self, cx: float, cy: float, r: float, style: Style) -> None:
        color = self._color(style, prefer_fill=True)
        steps = max(8, int(2 * math.pi * r * max(self.sx, self.sy)))
        pts = [(cx + r * math.cos(2 * math.pi * k / steps), cy + r * math.sin(2 * math.pi * k / steps)) for k in range(steps + 1)]
        for a, b in zip(pts, pts[1:]):
            self._segment(a, b, color)
        if style.fill and style.fill != "none":
            x0, _ = self._dot(cx - r, cy)
            x1, _ = self._dot(cx + r, cy)
            for px in range(x0, x1 + 1):
                dx = px / self.sx - cx
                half = math.sqrt(max(0.0, r * r - dx * dx))
                _, ya = self._dot(cx, cy - half)
                _, yb = self._dot(cx, cy + half)
                self.canvas.fill_column(px, ya, yb, color)

    def line(self, x1: float, y1: float, x2: float, y2: float, style: Style) -> None:
        self._segment((x1, y1), (x2, y2), self._color(style, prefer_fill=False))

    def path(self, d: str, style: Style) -> None:
        color = self._color(style, prefer_fill=False)
        for poly in path_points(d):
            for a, b in zip(poly, poly[1:]):
                self._segment(a, b, color)

    def polygon(self, points: tuple[tuple[float, float], ...], style: Style) -> None:
        if len(points) < 2:
            return
        color = self._color(style, prefer_fill=False)
        closed = list(points) + [points[0]]
        for a, b in zip(closed, closed[1:]):
            self._segment(a, b, color)

    def text(self, content: str, x: float, y: float, style: Style, rotate: float = 0.0) -> None:
        col = int(x * self.sx) // 2
        row = int(y * self.sy) // 4
        if style.text_anchor == "middle":
            col -= len(content) // 2
        elif style.text_anchor == "end":
            col -= len(content)
        if row < 0 or row >= self.canvas.rows:
            LOGGER.debug("dropping text %r outside the terminal canvas", content)
            return
        color = self._color(style, prefer_fill=True)
        for k, ch in enumerate(content):
            self.canvas.set_cell(col + k, row, ch, color)

    def linear_gradient(
        self,
        gradient_id: str,
        start_color: str,
        end_color: str,
        angle: float,
        start_opacity: float = 1.0,
        end_opacity: float = 1.0,
    ) -> None:
        LOGGER.debug("terminal sink ignores gradient %s", gradient_id)

    def to_string(self) -> str:
        return self.canvas.render(self.color_mode)


def braille_line_chart(
    values: Sequence[float],
    *,
    cols: int = 60,
    rows: int = 15,
    fill: bool = False,
    color: Optional[Color | str] = None,
    color_mode: ColorMode = ColorMode.NONE,
) -> str:
    """Line (or filled area) chart of ``values`` drawn with Braille dots."""
    data = [float(v) for v in values if math.isfinite(float(v))]
    if not data:
        return ""
    canvas = BrailleCanvas(cols, rows)
    c = parse_color(color) if color is not None else None
    lo, hi = min(data), max(data)
    span = hi - lo if hi != lo else 1.0
    max_x = canvas.width - 1
    max_y = canvas.height - 1
    n = len(data)
    pts = [
        (int(round(i * max_x / (n - 1))) if n > 1 else 0, int(round(max_y - (v - lo) / span * max_y)))
        for i, v in enumerate(data)
    ]
    if n == 1:
        canvas.set(pts[0][0], pts[0][1], c)
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        canvas.line(x0, y0, x1, y1, c)
    if fill:
        for x in range(canvas.width):
            column = np.nonzero(canvas.dots[:, x])[0]
            if column.size:
                canvas.fill_column(x, int(column.min()), max_y, c)
    return canvas.render(color_mode)


def block_bar_chart(
    labels: Sequence[str],
    values: Sequence[float],
    *,
    width: int = 40,
    color: Optional[Color | str] = None,
    color_mode: ColorMode = ColorMode.NONE,
) -> str:
    """Horizontal bars: full blocks plus one shade block for the remainder."""
    if not values or len(labels) != len(values):
        return ""
    max_v = max(max(values), 0.0) or 1.0
    label_w = max(len(str(lbl)) for lbl in labels)
    prefix = ansi_fg(color, color_mode) if color is not None else ""
    suffix = RESET if prefix else ""
    lines = []
    for label, value in zip(labels, values):
        length = max(0.0, value) / max_v * width
        whole = int(length)
        bar = SHADES[-1] * whole
        remainder = length - whole
        if remainder > 0 and whole < width:
            bar += shade_char(remainder)
        lines.append(f"{str(label).ljust(label_w)} {prefix}{bar}{suffix} {value:g}".rstrip())
    return "\n".join(lines)
