from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Any, Iterator, Optional, Sequence

from dataviz_core.errors import ChartDataError
from dataviz_core.primitives import Bounds

LOGGER = logging.getLogger(__name__)


@dataclass
class HierarchyNode:
    name: str
    value: float = 0.0
    children: list[HierarchyNode] = field(default_factory=list)
    color: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not math.isfinite(float(self.value)) or self.value < 0:
            raise ChartDataError(f"node {self.name!r} weight must be a non-negative finite number")

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def weight(self) -> float:
        """Aggregate weight: own value for leaves, sum over children otherwise."""
        if not self.children:
            return float(self.value)
        return sum(child.weight() for child in self.children)

    def max_depth(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.max_depth() for child in self.children)

    def leaves(self) -> Iterator[HierarchyNode]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.leaves()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HierarchyNode:
        return cls(
            name=str(data.get("name", "")),
            value=float(data.get("value", 0.0)),
            children=[cls.from_dict(c) for c in data.get("children", [])],
            color=data.get("color"),
            metadata=dict(data.get("metadata", {})),
        )


def _weighted_children(node: HierarchyNode) -> list[tuple[HierarchyNode, float]]:
    pairs = [(child, child.weight()) for child in node.children]
    return [(child, w) for child, w in pairs if w > 0]


# Squarified treemap


@dataclass(frozen=True)
class TreemapRect:
    node: HierarchyNode
    depth: int
    x: float
    y: float
    width: float
    height: float


def _worst(row: Sequence[float], length: float) -> float:
    s = sum(row)
    if s <= 0 or length <= 0:
        return math.inf
    l2 = length * length
    return max(l2 * max(row) / (s * s), (s * s) / (l2 * min(row)))


def squarify(weights: Sequence[float], bounds: Bounds) -> list[Bounds]:
    """Tile ``bounds`` with one cell per weight (weights sorted descending, positive).

    Strips run along the shorter remaining edge and grow while the worst
    aspect ratio in the strip does not get worse.
    """
    n = len(weights)
    if n == 0:
        return []
    total = float(sum(weights))
    area = bounds.width * bounds.height
    if total <= 0 or area <= 0:
        return [Bounds(bounds.x, bounds.y, 0.0, 0.0) for _ in weights]
    areas = [w * area / total for w in weights]

    cells: list[Bounds] = []
    rx, ry, rw, rh = bounds.x, bounds.y, bounds.width, bounds.height
    i = 0
    while i < n:
        short = min(rw, rh)
        row = [areas[i]]
        i += 1
        while i < n and _worst(row + [areas[i]], short) <= _worst(row, short):
            row.append(areas[i])
            i += 1
        row_sum = sum(row)
        vertical_strip = rw >= rh
        if i >= n:
            thickness = rw if vertical_strip else rh
        else:
            thickness = row_sum / short if short > 0 else 0.0
        pos = ry if vertical_strip else rx
        end = ry + rh if vertical_strip else rx + rw
        for j, a in enumerate(row):
            extent = end - pos if j == len(row) - 1 else (a / row_sum) * short
            if vertical_strip:
                cells.append(Bounds(rx, pos, max(0.0, thickness), max(0.0, extent)))
            else:
                cells.append(Bounds(pos, ry, max(0.0, extent), max(0.0, thickness)))
            pos += extent
        if vertical_strip:
            rx += thickness
            rw = max(0.0, rw - thickness)
        else:
            ry += thickness
            rh = max(0.0, rh - thickness)
    return cells


def treemap(
    root: HierarchyNode,
    bounds: Bounds,
    *,
    padding: float = 0.0,
    include_internal: bool = False,
) -> list[TreemapRect]:
    """Squarified treemap; leaves are shrunk by ``padding`` on every side."""
    out: list[TreemapRect] = []
    if root.weight() <= 0:
        return out
    _treemap_node(root, bounds, 0, padding, include_internal, out)
    return out


def _treemap_node(
    node: HierarchyNode,
    cell: Bounds,
    depth: int,
    padding: float,
    include_internal: bool,
    out: list[TreemapRect],
) -> None:
    if node.is_leaf:
        inner = cell.inset(padding)
        out.append(TreemapRect(node, depth, inner.x, inner.y, inner.width, inner.height))
        return
    if include_internal:
        out.append(TreemapRect(node, depth, cell.x, cell.y, cell.width, cell.height))
    children = sorted(_weighted_children(node), key=lambda pair: pair[1], reverse=True)
    cells = squarify([w for _, w in children], cell)
    for (child, _), sub in zip(children, cells):
        _treemap_node(child, sub, depth + 1, padding, include_internal, out)


# Sunburst / icicle partition


@dataclass(frozen=True)
class SunburstArc:
    node: HierarchyNode
    depth: int
    cx: float
    cy: float
    inner_radius: float
    outer_radius: float
    start_angle: float
    end_angle: float

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2.0


def sunburst(
    root: HierarchyNode,
    cx: float,
    cy: float,
    radius: float,
    *,
    start_angle: float = 0.0,
    end_angle: float = 360.0,
    include_root: bool = True,
) -> list[SunburstArc]:
    """Concentric rings, one per depth; angles in degrees clockwise from twelve o'clock."""
    out: list[SunburstArc] = []
    if root.weight() <= 0 or radius <= 0:
        return out
    levels = root.max_depth() + (1 if include_root else 0)
    ring = radius / max(levels, 1)
    first_level = 0 if include_root else 1

    def visit(node: HierarchyNode, depth: int, a0: float, a1: float) -> None:
        if depth >= first_level:
            inner = (depth - first_level) * ring
            out.append(SunburstArc(node, depth, cx, cy, inner, inner + ring, a0, a1))
        total = node.weight()
        pos = a0
        for child, w in _weighted_children(node):
            extent = (a1 - a0) * w / total
            visit(child, depth + 1, pos, pos + extent)
            pos += extent

    visit(root, 0, start_angle, end_angle)
    return out


class IcicleOrientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


def icicle(
    root: HierarchyNode,
    bounds: Bounds,
    *,
    orientation: IcicleOrientation | str = IcicleOrientation.VERTICAL,
    include_root: bool = True,
) -> list[TreemapRect]:
    """Rectangular partition: depth along one axis, weight along the other.

    Vertical icicles grow downward from the top edge, horizontal ones
    rightward from the left edge.
    """
    orientation = IcicleOrientation(orientation)
    out: list[TreemapRect] = []
    if root.weight() <= 0:
        return out
    levels = root.max_depth() + (1 if include_root else 0)
    first_level = 0 if include_root else 1
    vertical = orientation is IcicleOrientation.VERTICAL
    level_size = (bounds.height if vertical else bounds.width) / max(levels, 1)

    def visit(node: HierarchyNode, depth: int, p0: float, p1: float) -> None:
        if depth >= first_level:
            level = (depth - first_level) * level_size
            if vertical:
                out.append(TreemapRect(node, depth, p0, bounds.y + level, p1 - p0, level_size))
            else:
                out.append(TreemapRect(node, depth, bounds.x + level, p0, level_size, p1 - p0))
        total = node.weight()
        pos = p0
        for child, w in _weighted_children(node):
            extent = (p1 - p0) * w / total
            visit(child, depth + 1, pos, pos + extent)
            pos += extent

    if vertical:
        visit(root, 0, bounds.x, bounds.right)
    else:
        visit(root, 0, bounds.y, bounds.bottom)
    return out


# Circle packing


@dataclass(frozen=True)
class PackedCircle:
    node: HierarchyNode
    depth: int
    cx: float
    cy: float
    r: float


def pack_circles(
    root: HierarchyNode,
    cx: float,
    cy: float,
    radius: float,
    *,
    gap: float = 5.0,
    shrink: float = 0.8,
) -> list[PackedCircle]:
    """Largest child at the parent's center, the others on a ring around it.

    Child radii are ``sqrt(w / total) * parent_r * shrink``. The placement is
    simple and does not guarantee containment for many children.
    """
    out: list[PackedCircle] = []
    if root.weight() <= 0 or radius <= 0:
        return out

    def visit(node: HierarchyNode, depth: int, x: float, y: float, r: float) -> None:
        out.append(PackedCircle(node, depth, x, y, r))
        children = sorted(_weighted_children(node), key=lambda pair: pair[1], reverse=True)
        if not children:
            return
        total = sum(w for _, w in children)
        radii = [math.sqrt(w / total) * r * shrink for _, w in children]
        visit(children[0][0], depth + 1, x, y, radii[0])
        rest = len(children) - 1
        if rest == 0:
            return
        step = 2.0 * math.pi / rest
        for k in range(rest):
            child_r = radii[k + 1]
            dist = radii[0] + child_r + gap
            angle = k * step - math.pi / 2.0
            visit(children[k + 1][0], depth + 1, x + dist * math.cos(angle), y + dist * math.sin(angle), child_r)

    visit(root, 0, cx, cy, radius)
    return out


# Dendrogram


@dataclass
class DendrogramNode:
    label: str
    height: float = 0.0
    children: list[DendrogramNode] = field(default_factory=list)

    def leaves(self) -> Iterator[DendrogramNode]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.leaves()

    def max_height(self) -> float:
        return max([self.height] + [child.max_height() for child in self.children])


@dataclass(frozen=True)
class DendrogramPoint:
    node: DendrogramNode
    depth: int
    x: float
    y: float


@dataclass(frozen=True)
class DendrogramLayout:
    points: list[DendrogramPoint]
    segments: list[tuple[float, float, float, float]]


def dendrogram(root: DendrogramNode, bounds: Bounds) -> DendrogramLayout:
    """Leaves evenly spaced along x, nodes at ``y = top + h * (1 - height / max_height)``.

    Connectors are orthogonal: a horizontal bar at the parent's y spanning its
    children, then vertical drops to each child.
    """
    leaves = list(root.leaves())
    spacing = bounds.width / len(leaves)
    max_h = root.max_height()
    if max_h <= 0:
        LOGGER.debug("dendrogram max height is %g; using 1", max_h)
        max_h = 1.0
    leaf_x = {id(leaf): bounds.x + i * spacing + spacing / 2.0 for i, leaf in enumerate(leaves)}

    points: list[DendrogramPoint] = []
    segments: list[tuple[float, float, float, float]] = []

    def y_of(node: DendrogramNode) -> float:
        return bounds.y + bounds.height * (1.0 - node.height / max_h)

    def visit(node: DendrogramNode, depth: int) -> float:
        y = y_of(node)
        if not node.children:
            x = leaf_x[id(node)]
            points.append(DendrogramPoint(node, depth, x, y))
            return x
        child_xs = [visit(child, depth + 1) for child in node.children]
        x = sum(child_xs) / len(child_xs)
        segments.append((min(child_xs), y, max(child_xs), y))
        for child, cx in zip(node.children, child_xs):
            segments.append((cx, y, cx, y_of(child)))
        points.append(DendrogramPoint(node, depth, x, y))
        return x

    visit(root, 0)
    return DendrogramLayout(points=points, segments=segments)
