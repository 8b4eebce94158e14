from dataviz_core.render.svg import SvgSink, render_svg
from dataviz_core.render.terminal import (
    BrailleCanvas,
    ColorMode,
    TerminalSink,
    ansi_bg,
    ansi_fg,
    block_bar_chart,
    braille_line_chart,
    detect_color_mode,
    shade_char,
)

__all__ = [
    "BrailleCanvas",
    "ColorMode",
    "SvgSink",
    "TerminalSink",
    "ansi_bg",
    "ansi_fg",
    "block_bar_chart",
    "braille_line_chart",
    "detect_color_mode",
    "render_svg",
    "shade_char",
]
