from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Optional, Sequence

from dataviz_core.errors import ChartDataError
from dataviz_core.geometry import ribbon_path
from dataviz_core.primitives import Bounds

LOGGER = logging.getLogger(__name__)

DEFAULT_NODE_WIDTH = 15.0
DEFAULT_NODE_PADDING = 10.0
MIN_LINK_THICKNESS = 1.0


@dataclass(frozen=True)
class SankeyNode:
    id: str
    label: Optional[str] = None
    color: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def display_label(self) -> str:
        return self.label if self.label is not None else self.id


@dataclass(frozen=True)
class SankeyLink:
    source: str
    target: str
    value: float
    color: Optional[str] = None

    def __post_init__(self) -> None:
        if not math.isfinite(float(self.value)) or self.value < 0:
            raise ChartDataError(f"link {self.source}->{self.target} value must be a non-negative number")


@dataclass
class PositionedNode:
    node: SankeyNode
    column: int
    x: float
    y: float
    width: float
    height: float
    in_value: float
    out_value: float
    # Attachment y for each link index touching this node.
    link_offsets: dict[int, float] = field(default_factory=dict)


@dataclass(frozen=True)
class PositionedLink:
    link: SankeyLink
    index: int
    thickness: float
    source_y: float
    target_y: float
    x0: float
    x1: float

    @property
    def path(self) -> str:
        return ribbon_path(
            self.x0,
            self.source_y,
            self.source_y + self.thickness,
            self.x1,
            self.target_y,
            self.target_y + self.thickness,
        )


@dataclass(frozen=True)
class SankeyLayout:
    nodes: list[PositionedNode]
    links: list[PositionedLink]
    columns: int

    def node(self, node_id: str) -> PositionedNode:
        for pn in self.nodes:
            if pn.node.id == node_id:
                return pn
        raise KeyError(node_id)


def assign_columns(node_ids: Sequence[str], links: Sequence[SankeyLink]) -> dict[str, int]:
    """Longest path from any source, relaxed until stable.

    Columns are capped at ``len(node_ids) - 1`` so cycles still terminate;
    nodes no source reaches land in column 0.
    """
    has_incoming = {link.target for link in links}
    column: dict[str, Optional[int]] = {nid: (None if nid in has_incoming else 0) for nid in node_ids}
    cap = max(0, len(node_ids) - 1)
    passes = 0
    changed = True
    while changed:
        changed = False
        passes += 1
        for link in links:
            src = column.get(link.source)
            if src is None:
                continue
            candidate = min(cap, src + 1)
            current = column.get(link.target)
            if current is None or candidate > current:
                column[link.target] = candidate
                changed = True
    LOGGER.debug("sankey column relaxation settled after %d passes", passes)
    return {nid: (col if col is not None else 0) for nid, col in column.items()}


def sankey_layout(
    nodes: Sequence[SankeyNode],
    links: Sequence[SankeyLink],
    bounds: Bounds,
    *,
    node_width: float = DEFAULT_NODE_WIDTH,
    node_padding: float = DEFAULT_NODE_PADDING,
) -> SankeyLayout:
    ids = [n.id for n in nodes]
    if len(set(ids)) != len(ids):
        raise ChartDataError("sankey node ids must be unique")
    known = set(ids)
    for link in links:
        if link.source not in known or link.target not in known:
            raise ChartDataError(f"sankey link references unknown node: {link.source}->{link.target}")

    columns = assign_columns(ids, links)
    in_value = {nid: 0.0 for nid in ids}
    out_value = {nid: 0.0 for nid in ids}
    for link in links:
        out_value[link.source] += link.value
        in_value[link.target] += link.value

    num_cols = max(columns.values(), default=0) + 1
    by_column: dict[int, list[SankeyNode]] = {c: [] for c in range(num_cols)}
    for node in nodes:
        by_column[columns[node.id]].append(node)
    for col_nodes in by_column.values():
        col_nodes.sort(key=lambda n: n.id)

    # One vertical scale for every column: the tallest stack must fit.
    ky = math.inf
    for col_nodes in by_column.values():
        total = sum(max(in_value[n.id], out_value[n.id]) for n in col_nodes)
        if total <= 0:
            continue
        available = max(0.0, bounds.height - node_padding * (len(col_nodes) - 1))
        ky = min(ky, available / total)
    if not math.isfinite(ky):
        ky = 0.0

    col_width = bounds.width / (num_cols + 1)
    positioned: dict[str, PositionedNode] = {}
    for col, col_nodes in by_column.items():
        heights = [max(in_value[n.id], out_value[n.id]) * ky for n in col_nodes]
        stack = sum(heights) + node_padding * max(0, len(col_nodes) - 1)
        y = bounds.y + (bounds.height - stack) / 2.0
        for node, h in zip(col_nodes, heights):
            x = node.x if node.x is not None else bounds.x + col_width * (col + 1) - node_width / 2.0
            ny = node.y if node.y is not None else y
            positioned[node.id] = PositionedNode(
                node=node,
                column=col,
                x=x,
                y=ny,
                width=node_width,
                height=h,
                in_value=in_value[node.id],
                out_value=out_value[node.id],
            )
            y += h + node_padding

    thickness: dict[int, float] = {}
    for i, link in enumerate(links):
        if link.value <= 0:
            continue
        src = positioned[link.source]
        t = link.value / src.out_value * src.height if src.out_value > 0 else 0.0
        thickness[i] = max(MIN_LINK_THICKNESS, t)

    # Outgoing ribbons stack by target position, incoming ones by source position.
    out_cursor = {nid: positioned[nid].y for nid in ids}
    in_cursor = dict(out_cursor)
    order_out = sorted(thickness, key=lambda i: (positioned[links[i].source].column, positioned[links[i].target].y, i))
    for i in order_out:
        src = positioned[links[i].source]
        src.link_offsets[i] = out_cursor[src.node.id]
        out_cursor[src.node.id] += thickness[i]
    order_in = sorted(thickness, key=lambda i: (positioned[links[i].source].y, i))
    target_offsets: dict[int, float] = {}
    for i in order_in:
        tgt_id = links[i].target
        target_offsets[i] = in_cursor[tgt_id]
        in_cursor[tgt_id] += thickness[i]
        if links[i].source != tgt_id:
            positioned[tgt_id].link_offsets[i] = target_offsets[i]

    placed_links = [
        PositionedLink(
            link=links[i],
            index=i,
            thickness=thickness[i],
            source_y=positioned[links[i].source].link_offsets[i],
            target_y=target_offsets[i],
            x0=positioned[links[i].source].x + node_width,
            x1=positioned[links[i].target].x,
        )
        for i in sorted(thickness)
    ]
    return SankeyLayout(nodes=[positioned[nid] for nid in ids], links=placed_links, columns=num_cols)
