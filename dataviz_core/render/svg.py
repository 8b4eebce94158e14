from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable, Optional
import xml.etree.ElementTree as ET

from dataviz_core.geometry import fmt
from dataviz_core.primitives import Primitive, Style, emit

SVG_NS = "http://www.w3.org/2000/svg"


def _style_attrs(style: Style, *, default_fill: Optional[str] = "none") -> dict[str, str]:
    attrs: dict[str, str] = {}
    fill = style.fill if style.fill is not None else default_fill
    if fill is not None:
        attrs["fill"] = fill
    if style.stroke is not None:
        attrs["stroke"] = style.stroke
        attrs["stroke-width"] = fmt(style.stroke_width if style.stroke_width > 0 else 1.0)
    if style.opacity < 1.0:
        attrs["opacity"] = fmt(style.opacity)
    if style.fill_opacity is not None:
        attrs["fill-opacity"] = fmt(style.fill_opacity)
    if style.stroke_dasharray:
        attrs["stroke-dasharray"] = style.stroke_dasharray
    if style.font_family:
        attrs["font-family"] = style.font_family
    if style.font_size is not None:
        attrs["font-size"] = fmt(style.font_size)
    if style.font_weight:
        attrs["font-weight"] = style.font_weight
    if style.text_anchor:
        attrs["text-anchor"] = style.text_anchor
    if style.dominant_baseline:
        attrs["dominant-baseline"] = style.dominant_baseline
    return attrs


class SvgSink:
    """Collects primitives into an SVG document tree."""

    def __init__(self, width: float, height: float, *, background: Optional[str] = None) -> None:
        self.width = float(width)
        self.height = float(height)
        self.root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": fmt(self.width),
                "height": fmt(self.height),
                "viewBox": f"0 0 {fmt(self.width)} {fmt(self.height)}",
            },
        )
        self._defs: Optional[ET.Element] = None
        if background:
            ET.SubElement(self.root, "rect", {"width": "100%", "height": "100%", "fill": background})

    def _defs_element(self) -> ET.Element:
        if self._defs is None:
            self._defs = ET.Element("defs")
            self.root.insert(0, self._defs)
        return self._defs

    def rectangle(self, x: float, y: float, w: float, h: float, style: Style, rx: float = 0.0) -> None:
        attrs = {"x": fmt(x), "y": fmt(y), "width": fmt(max(0.0, w)), "height": fmt(max(0.0, h))}
        if rx > 0:
            attrs["rx"] = fmt(rx)
        attrs.update(_style_attrs(style))
        ET.SubElement(self.root, "rect", attrs)

    def circle(self, cx: float, cy: float, r: float, style: Style) -> None:
        attrs = {"cx": fmt(cx), "cy": fmt(cy), "r": fmt(max(0.0, r))}
        attrs.update(_style_attrs(style))
        ET.SubElement(self.root, "circle", attrs)

    def line(self, x1: float, y1: float, x2: float, y2: float, style: Style) -> None:
        attrs = {"x1": fmt(x1), "y1": fmt(y1), "x2": fmt(x2), "y2": fmt(y2)}
        attrs.update(_style_attrs(style, default_fill=None))
        ET.SubElement(self.root, "line", attrs)

    def path(self, d: str, style: Style) -> None:
        attrs = {"d": d}
        attrs.update(_style_attrs(style))
        ET.SubElement(self.root, "path", attrs)

    def polygon(self, points: tuple[tuple[float, float], ...], style: Style) -> None:
        attrs = {"points": " ".join(f"{fmt(x)},{fmt(y)}" for x, y in points)}
        attrs.update(_style_attrs(style))
        ET.SubElement(self.root, "polygon", attrs)

    def text(self, content: str, x: float, y: float, style: Style, rotate: float = 0.0) -> None:
        attrs = {"x": fmt(x), "y": fmt(y)}
        attrs.update(_style_attrs(style, default_fill=None))
        if rotate:
            attrs["transform"] = f"rotate({fmt(rotate)} {fmt(x)} {fmt(y)})"
        elem = ET.SubElement(self.root, "text", attrs)
        elem.text = content

    def linear_gradient(
        self,
        gradient_id: str,
        start_color: str,
        end_color: str,
        angle: float,
        start_opacity: float = 1.0,
        end_opacity: float = 1.0,
    ) -> None:
        # Angle 0 runs left to right, 90 top to bottom.
        rad = math.radians(angle)
        dx = math.cos(rad) / 2.0
        dy = math.sin(rad) / 2.0
        grad = ET.SubElement(
            self._defs_element(),
            "linearGradient",
            {
                "id": gradient_id,
                "x1": f"{fmt((0.5 - dx) * 100)}%",
                "y1": f"{fmt((0.5 - dy) * 100)}%",
                "x2": f"{fmt((0.5 + dx) * 100)}%",
                "y2": f"{fmt((0.5 + dy) * 100)}%",
            },
        )
        ET.SubElement(
            grad, "stop", {"offset": "0%", "stop-color": start_color, "stop-opacity": fmt(start_opacity)}
        )
        ET.SubElement(grad, "stop", {"offset": "100%", "stop-color": end_color, "stop-opacity": fmt(end_opacity)})

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def write(self, path: str | Path) -> None:
        Path(path).write_text(self.to_string(), encoding="utf-8")


def render_svg(
    primitives: Iterable[Primitive],
    width: float,
    height: float,
    *,
    background: Optional[str] = None,
) -> str:
    sink = SvgSink(width, height, background=background)
    emit(sink, primitives)
    return sink.to_string()
