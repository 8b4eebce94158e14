from __future__ import annotations

from typing import Optional

from dataviz_core.color import adjust_lightness, contrast_text_color
from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.geometry import polar, sector_path
from dataviz_core.hierarchy import (
    DendrogramNode,
    HierarchyNode,
    IcicleOrientation,
    dendrogram,
    icicle,
    pack_circles,
    sunburst,
    treemap,
)
from dataviz_core.primitives import Bounds, Circle, Line, Path, Primitive, Rect, Style, Text
from dataviz_plot._common import NO_MARGIN, Margin, safe_chart

MIN_LABEL_WIDTH = 30.0
MIN_LABEL_HEIGHT = 14.0


def _top_level_colors(root: HierarchyNode, theme: ChartTheme) -> dict[int, str]:
    """Each subtree inherits its top-level ancestor's color unless it sets one."""
    colors: dict[int, str] = {}

    def visit(node: HierarchyNode, inherited: str) -> None:
        color = node.color or inherited
        colors[id(node)] = color
        for child in node.children:
            visit(child, color)

    colors[id(root)] = root.color or theme.background
    for i, child in enumerate(root.children):
        visit(child, child.color or theme.color_at(i))
    return colors


def _cell_label(node: HierarchyNode, x: float, y: float, w: float, h: float, fill: str, theme: ChartTheme) -> list[Primitive]:
    if w < MIN_LABEL_WIDTH or h < MIN_LABEL_HEIGHT or not node.name:
        return []
    return [
        Text(
            node.name,
            x + w / 2.0,
            y + h / 2.0,
            Style(
                fill=contrast_text_color(fill).hex,
                font_family=theme.font_family,
                font_size=theme.font_size_px,
                text_anchor="middle",
                dominant_baseline="middle",
            ),
        )
    ]


@safe_chart("treemap_chart")
def treemap_chart(
    root: HierarchyNode,
    bounds: Bounds,
    *,
    padding: float = 1.0,
    show_labels: bool = True,
    margin: Margin = NO_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if root is None:
        return []
    plot = margin.apply(bounds)
    colors = _top_level_colors(root, theme)
    out: list[Primitive] = []
    for cell in treemap(root, plot, padding=padding):
        fill = colors[id(cell.node)]
        out.append(Rect(cell.x, cell.y, cell.width, cell.height, Style(fill=fill, stroke=theme.background, stroke_width=1.0)))
        if show_labels:
            out += _cell_label(cell.node, cell.x, cell.y, cell.width, cell.height, fill, theme)
    return out


@safe_chart("sunburst_chart")
def sunburst_chart(
    root: HierarchyNode,
    bounds: Bounds,
    *,
    include_root: bool = True,
    show_labels: bool = True,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Rings from the center outwards; deeper rings are progressively lighter."""
    if root is None:
        return []
    cx = bounds.x + bounds.width / 2.0
    cy = bounds.y + bounds.height / 2.0
    radius = max(0.0, min(bounds.width, bounds.height) / 2.0 - 4.0)
    colors = _top_level_colors(root, theme)
    out: list[Primitive] = []
    for arc in sunburst(root, cx, cy, radius, include_root=include_root):
        fill = colors[id(arc.node)]
        if arc.depth > 1:
            fill = adjust_lightness(fill, 0.08 * (arc.depth - 1)).hex
        out.append(
            Path(
                sector_path(cx, cy, arc.inner_radius, arc.outer_radius, arc.start_angle, arc.end_angle),
                Style(fill=fill, stroke=theme.background, stroke_width=1.0),
            )
        )
        if show_labels and arc.depth > 0 and arc.end_angle - arc.start_angle >= 15.0:
            lx, ly = polar(cx, cy, (arc.inner_radius + arc.outer_radius) / 2.0, arc.mid_angle)
            out.append(
                Text(
                    arc.node.name,
                    lx,
                    ly,
                    Style(
                        fill=contrast_text_color(fill).hex,
                        font_family=theme.font_family,
                        font_size=theme.font_size_px - 1,
                        text_anchor="middle",
                        dominant_baseline="middle",
                    ),
                )
            )
    return out


@safe_chart("icicle_chart")
def icicle_chart(
    root: HierarchyNode,
    bounds: Bounds,
    *,
    orientation: IcicleOrientation | str = IcicleOrientation.VERTICAL,
    include_root: bool = True,
    show_labels: bool = True,
    margin: Margin = NO_MARGIN,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if root is None:
        return []
    plot = margin.apply(bounds)
    colors = _top_level_colors(root, theme)
    out: list[Primitive] = []
    for cell in icicle(root, plot, orientation=orientation, include_root=include_root):
        fill = colors[id(cell.node)]
        if cell.depth == 0:
            fill = theme.grid_stroke
        out.append(Rect(cell.x, cell.y, cell.width, cell.height, Style(fill=fill, stroke=theme.background, stroke_width=1.0)))
        if show_labels:
            out += _cell_label(cell.node, cell.x, cell.y, cell.width, cell.height, fill, theme)
    return out


@safe_chart("circle_packing_chart")
def circle_packing_chart(
    root: HierarchyNode,
    bounds: Bounds,
    *,
    gap: float = 5.0,
    shrink: float = 0.8,
    show_labels: bool = True,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    if root is None:
        return []
    cx = bounds.x + bounds.width / 2.0
    cy = bounds.y + bounds.height / 2.0
    radius = max(0.0, min(bounds.width, bounds.height) / 2.0 - 4.0)
    colors = _top_level_colors(root, theme)
    out: list[Primitive] = []
    for c in pack_circles(root, cx, cy, radius, gap=gap, shrink=shrink):
        if c.depth == 0:
            out.append(Circle(c.cx, c.cy, c.r, Style(fill="none", stroke=theme.grid_stroke, stroke_width=1.0)))
            continue
        fill = colors[id(c.node)]
        out.append(Circle(c.cx, c.cy, c.r, Style(fill=fill, fill_opacity=0.35 if c.node.children else 0.85, stroke=fill, stroke_width=1.0)))
        if show_labels and c.node.is_leaf and c.r * 2.0 >= MIN_LABEL_WIDTH:
            out.append(
                Text(
                    c.node.name,
                    c.cx,
                    c.cy,
                    Style(
                        fill=contrast_text_color(fill).hex,
                        font_family=theme.font_family,
                        font_size=theme.font_size_px - 1,
                        text_anchor="middle",
                        dominant_baseline="middle",
                    ),
                )
            )
    return out


@safe_chart("dendrogram_chart")
def dendrogram_chart(
    root: DendrogramNode,
    bounds: Bounds,
    *,
    color: Optional[str] = None,
    margin: Margin = Margin(20.0, 20.0, 40.0, 20.0),
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Orthogonal connectors with leaf labels under the baseline."""
    if root is None:
        return []
    plot = margin.apply(bounds)
    layout = dendrogram(root, plot)
    stroke = Style(stroke=color or theme.axis_stroke, stroke_width=1.5)
    out: list[Primitive] = [Line(x1, y1, x2, y2, stroke) for x1, y1, x2, y2 in layout.segments]
    label = Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px, text_anchor="middle")
    for p in layout.points:
        if p.node.children:
            continue
        out.append(Circle(p.x, p.y, 3.0, Style(fill=color or theme.color_at(0))))
        out.append(Text(p.node.label, p.x, p.y + theme.font_size_px + 6.0, label))
    return out
