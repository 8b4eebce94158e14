from __future__ import annotations

from typing import Optional, Sequence

from dataviz_core.config import DEFAULT_THEME, ChartTheme
from dataviz_core.ids import next_gradient_id
from dataviz_core.primitives import Bounds, LinearGradient, Path, Primitive, Rect, Style, Text
from dataviz_core.sankey import SankeyLink, SankeyNode, sankey_layout
from dataviz_plot._common import Margin, is_empty, safe_chart

LINK_OPACITY = 0.4


@safe_chart("sankey_chart")
def sankey_chart(
    nodes: Sequence[SankeyNode],
    links: Sequence[SankeyLink],
    bounds: Bounds,
    *,
    node_width: float = 15.0,
    node_padding: float = 10.0,
    gradient_links: bool = True,
    link_color: Optional[str] = None,
    margin: Margin = Margin(10.0, 10.0, 10.0, 10.0),
    theme: ChartTheme = DEFAULT_THEME,
) -> list[Primitive]:
    """Links are drawn first so node bars sit on top of the ribbons.

    With ``gradient_links`` each ribbon fades from its source color to its
    target color through a uniquely named linear gradient.
    """
    if is_empty(nodes):
        return []
    plot = margin.apply(bounds)
    layout = sankey_layout(nodes, links, plot, node_width=node_width, node_padding=node_padding)
    colors = {pn.node.id: pn.node.color or theme.color_at(i) for i, pn in enumerate(layout.nodes)}

    out: list[Primitive] = []
    for pl in layout.links:
        source_color = colors[pl.link.source]
        target_color = colors[pl.link.target]
        if pl.link.color or link_color:
            fill = pl.link.color or link_color
        elif gradient_links and source_color != target_color:
            gradient = LinearGradient(
                next_gradient_id("sankeyLinkGradient"),
                source_color,
                target_color,
                angle=0.0,
                start_opacity=LINK_OPACITY,
                end_opacity=LINK_OPACITY,
            )
            out.append(gradient)
            fill = gradient.ref
        else:
            fill = source_color
        out.append(Path(pl.path, Style(fill=fill, fill_opacity=None if fill.startswith("url(") else LINK_OPACITY)))

    last_column = layout.columns - 1
    label = Style(fill=theme.text_color, font_family=theme.font_family, font_size=theme.font_size_px, dominant_baseline="middle")
    for pn in layout.nodes:
        out.append(Rect(pn.x, pn.y, pn.width, max(pn.height, 1.0), Style(fill=colors[pn.node.id])))
        mid = pn.y + pn.height / 2.0
        if pn.column == last_column and last_column > 0:
            out.append(Text(pn.node.display_label, pn.x - 6.0, mid, label.with_(text_anchor="end")))
        else:
            out.append(Text(pn.node.display_label, pn.x + pn.width + 6.0, mid, label.with_(text_anchor="start")))
    return out
