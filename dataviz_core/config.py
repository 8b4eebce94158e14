from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from dataviz_core.errors import ThemeError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

DEFAULT_PALETTE: tuple[str, ...] = (
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#F97316",
)


@dataclass(frozen=True)
class ChartTheme:
    """Design tokens shared by axes and chart adapters."""

    palette: tuple[str, ...] = DEFAULT_PALETTE
    background: str = "#FFFFFF"
    text_color: str = "#333333"
    axis_stroke: str = "#000000"
    grid_stroke: str = "#E0E0E0"
    rising: str = "#10B981"
    falling: str = "#EF4444"
    font_family: str = "sans-serif"
    font_size_px: float = 11.0
    title_font_size_px: float = 12.0
    stroke_width: float = 1.0

    def color_at(self, index: int) -> str:
        return self.palette[index % len(self.palette)]


DEFAULT_THEME = ChartTheme()

_COLOR_TOKENS = ("background", "text_color", "axis_stroke", "grid_stroke", "rising", "falling")
_SIZE_TOKENS = ("font_size_px", "title_font_size_px", "stroke_width")


def validate_theme(overrides: Mapping[str, Any] | None = None) -> ChartTheme:
    """Merge token overrides onto the defaults, rejecting unknown or malformed tokens."""

    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ThemeError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ThemeError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    palette = raw["palette"]
    if isinstance(palette, str) or not palette:
        raise ThemeError("Token `palette` must be a non-empty list of hex colors")
    for entry in palette:
        if not isinstance(entry, str) or not _HEX_COLOR.match(entry):
            raise ThemeError(f"Palette entry {entry!r} must be a hex color (#RRGGBB or #RRGGBBAA)")

    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise ThemeError("Token `font_family` must be a non-empty string")

    for key in _SIZE_TOKENS:
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or float(value) <= 0:
            raise ThemeError(f"Token `{key}` must be a positive number")

    values = {f.name: raw[f.name] for f in fields(ChartTheme)}
    values["palette"] = tuple(str(c) for c in palette)
    for key in _SIZE_TOKENS:
        values[key] = float(values[key])
    return ChartTheme(**values)


def load_theme(path: str | Path) -> ChartTheme:
    """Load a theme from the ``[theme]`` table of a TOML file."""
    path = Path(path)
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ThemeError(f"invalid theme file {path}: {exc}") from exc
    table = data.get("theme", {})
    if not isinstance(table, dict):
        raise ThemeError(f"`theme` in {path} must be a table")
    return validate_theme(table)
