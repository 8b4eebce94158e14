from __future__ import annotations

import math
import unittest

from dataviz_core.errors import ChartDataError
from dataviz_core.hierarchy import (
    DendrogramNode,
    HierarchyNode,
    IcicleOrientation,
    dendrogram,
    icicle,
    pack_circles,
    squarify,
    sunburst,
    treemap,
)
from dataviz_core.primitives import Bounds
from dataviz_core.sankey import SankeyLink, SankeyNode, assign_columns, sankey_layout


def _tree() -> HierarchyNode:
    return HierarchyNode(
        "root",
        children=[
            HierarchyNode("a", children=[HierarchyNode("a1", 2), HierarchyNode("a2", 1)]),
            HierarchyNode("b", 1),
        ],
    )


class HierarchyNodeTests(unittest.TestCase):
    def test_weight_and_depth(self) -> None:
        root = _tree()
        self.assertEqual(root.weight(), 4.0)
        self.assertEqual(root.max_depth(), 2)
        self.assertEqual([leaf.name for leaf in root.leaves()], ["a1", "a2", "b"])

    def test_from_dict(self) -> None:
        root = HierarchyNode.from_dict({"name": "r", "children": [{"name": "x", "value": 3}]})
        self.assertEqual(root.children[0].weight(), 3.0)

    def test_rejects_negative_weight(self) -> None:
        with self.assertRaises(ChartDataError):
            HierarchyNode("bad", -1)


class TreemapTests(unittest.TestCase):
    def test_squarify_tiles_the_rectangle(self) -> None:
        cells = squarify([3600, 1800, 600], Bounds(0, 0, 100, 60))
        self.assertEqual(cells[0], Bounds(0, 0, 60, 60))
        self.assertEqual(cells[1], Bounds(60, 0, 40, 45))
        self.assertEqual(cells[2], Bounds(60, 45, 40, 15))

    def test_cell_areas_are_proportional_and_disjoint(self) -> None:
        root = HierarchyNode("r", children=[HierarchyNode(n, w) for n, w in zip("abcde", (6, 4, 3, 2, 1))])
        rects = treemap(root, Bounds(10, 20, 160, 100))
        self.assertEqual(len(rects), 5)
        total = 160 * 100
        for rect, w in zip(rects, (6, 4, 3, 2, 1)):
            self.assertAlmostEqual(rect.width * rect.height, total * w / 16, places=6)
            self.assertGreaterEqual(rect.x, 10 - 1e-9)
            self.assertGreaterEqual(rect.y, 20 - 1e-9)
            self.assertLessEqual(rect.x + rect.width, 170 + 1e-9)
            self.assertLessEqual(rect.y + rect.height, 120 + 1e-9)
        for i, a in enumerate(rects):
            for b in rects[i + 1 :]:
                overlap_w = min(a.x + a.width, b.x + b.width) - max(a.x, b.x)
                overlap_h = min(a.y + a.height, b.y + b.height) - max(a.y, b.y)
                self.assertFalse(overlap_w > 1e-9 and overlap_h > 1e-9)

    def test_padding_shrinks_leaves(self) -> None:
        rects = treemap(HierarchyNode("r", children=[HierarchyNode("only", 1)]), Bounds(0, 0, 50, 40), padding=2)
        self.assertEqual((rects[0].x, rects[0].y, rects[0].width, rects[0].height), (2, 2, 46, 36))

    def test_zero_weight_subtree_emits_nothing(self) -> None:
        root = HierarchyNode("r", children=[HierarchyNode("a", 1), HierarchyNode("z", 0)])
        self.assertEqual([r.node.name for r in treemap(root, Bounds(0, 0, 10, 10))], ["a"])
        self.assertEqual(treemap(HierarchyNode("empty"), Bounds(0, 0, 10, 10)), [])

    def test_internal_nodes_optional(self) -> None:
        rects = treemap(_tree(), Bounds(0, 0, 100, 100), include_internal=True)
        self.assertEqual([r.node.name for r in rects][:2], ["root", "a"])
        self.assertEqual(rects[0].depth, 0)


class PartitionTests(unittest.TestCase):
    def test_sunburst_rings_and_angles(self) -> None:
        arcs = {a.node.name: a for a in sunburst(_tree(), 0, 0, 90)}
        self.assertEqual((arcs["root"].inner_radius, arcs["root"].outer_radius), (0.0, 30.0))
        self.assertEqual((arcs["a"].start_angle, arcs["a"].end_angle), (0.0, 270.0))
        self.assertEqual((arcs["a1"].start_angle, arcs["a1"].end_angle), (0.0, 180.0))
        self.assertEqual((arcs["b"].start_angle, arcs["b"].end_angle), (270.0, 360.0))
        self.assertEqual((arcs["a2"].inner_radius, arcs["a2"].outer_radius), (60.0, 90.0))

    def test_sunburst_children_cover_parent_wedge(self) -> None:
        arcs = sunburst(_tree(), 0, 0, 100, include_root=False)
        depth_one = [a for a in arcs if a.depth == 1]
        self.assertAlmostEqual(sum(a.end_angle - a.start_angle for a in depth_one), 360.0)
        self.assertEqual(depth_one[0].inner_radius, 0.0)
        self.assertEqual(depth_one[0].outer_radius, 50.0)

    def test_vertical_icicle(self) -> None:
        cells = {c.node.name: c for c in icicle(_tree(), Bounds(0, 0, 100, 90))}
        self.assertEqual((cells["root"].y, cells["root"].width), (0.0, 100.0))
        self.assertEqual((cells["a"].x, cells["a"].y, cells["a"].width), (0.0, 30.0, 75.0))
        self.assertEqual((cells["a2"].x, cells["a2"].y, cells["a2"].width), (50.0, 60.0, 25.0))
        self.assertEqual(cells["b"].x, 75.0)

    def test_horizontal_icicle(self) -> None:
        cells = {c.node.name: c for c in icicle(_tree(), Bounds(0, 0, 90, 100), orientation=IcicleOrientation.HORIZONTAL)}
        self.assertEqual((cells["a"].x, cells["a"].height), (30.0, 75.0))
        self.assertEqual(cells["b"].y, 75.0)


class PackTests(unittest.TestCase):
    def test_largest_child_centered_others_on_ring(self) -> None:
        root = HierarchyNode("r", children=[HierarchyNode("small", 1), HierarchyNode("big", 4)])
        circles = {c.node.name: c for c in pack_circles(root, 100, 100, 50)}
        big, small = circles["big"], circles["small"]
        self.assertEqual((big.cx, big.cy), (100, 100))
        self.assertAlmostEqual(big.r / small.r, 2.0)
        self.assertAlmostEqual(small.cx, 100.0)
        self.assertAlmostEqual(100 - small.cy, big.r + small.r + 5.0)
        self.assertEqual(circles["r"].r, 50)


class DendrogramTests(unittest.TestCase):
    def test_orthogonal_connectors(self) -> None:
        inner = DendrogramNode("ab", 1.0, [DendrogramNode("A"), DendrogramNode("B")])
        root = DendrogramNode("root", 2.0, [inner, DendrogramNode("C")])
        layout = dendrogram(root, Bounds(0, 0, 90, 100))
        points = {p.node.label: p for p in layout.points}
        self.assertEqual([points[k].x for k in "ABC"], [15.0, 45.0, 75.0])
        self.assertEqual(points["A"].y, 100.0)
        self.assertEqual((points["ab"].x, points["ab"].y), (30.0, 50.0))
        self.assertEqual((points["root"].x, points["root"].y), (52.5, 0.0))
        self.assertIn((15.0, 50.0, 45.0, 50.0), layout.segments)
        self.assertIn((30.0, 0.0, 75.0, 0.0), layout.segments)
        self.assertIn((75.0, 0.0, 75.0, 100.0), layout.segments)
        self.assertEqual(len(layout.segments), 6)


class SankeyTests(unittest.TestCase):
    def _layout(self):
        nodes = [SankeyNode(n) for n in "ABCD"]
        links = [SankeyLink("A", "C", 5), SankeyLink("B", "C", 3), SankeyLink("C", "D", 8)]
        return sankey_layout(nodes, links, Bounds(0, 0, 300, 200))

    def test_columns_follow_longest_path(self) -> None:
        layout = self._layout()
        self.assertEqual([n.column for n in layout.nodes], [0, 0, 1, 2])
        self.assertEqual(layout.columns, 3)

    def test_shared_vertical_scale_and_centering(self) -> None:
        layout = self._layout()
        a, b, c = layout.node("A"), layout.node("B"), layout.node("C")
        self.assertAlmostEqual(a.height, 118.75)
        self.assertAlmostEqual(b.y, 128.75)
        self.assertAlmostEqual(c.height, 190.0)
        self.assertAlmostEqual(c.y, 5.0)
        self.assertAlmostEqual(a.x, 67.5)

    def test_link_thickness_fills_node_height(self) -> None:
        layout = self._layout()
        into_c = [pl for pl in layout.links if pl.link.target == "C"]
        self.assertAlmostEqual(sum(pl.thickness for pl in into_c), layout.node("C").height)
        a_to_c, b_to_c, c_to_d = layout.links
        self.assertAlmostEqual(a_to_c.target_y, 5.0)
        self.assertAlmostEqual(b_to_c.target_y, 123.75)
        self.assertEqual((a_to_c.x0, a_to_c.x1), (82.5, 142.5))
        self.assertAlmostEqual(c_to_d.thickness, 190.0)
        self.assertTrue(a_to_c.path.startswith("M"))

    def test_cycles_terminate_with_bounded_columns(self) -> None:
        links = [SankeyLink("S", "A", 1), SankeyLink("A", "B", 1), SankeyLink("B", "A", 1)]
        columns = assign_columns(["S", "A", "B"], links)
        self.assertEqual(columns["S"], 0)
        self.assertTrue(all(0 <= c <= 2 for c in columns.values()))

    def test_tiny_links_keep_minimum_thickness(self) -> None:
        nodes = [SankeyNode(n) for n in "ABC"]
        links = [SankeyLink("A", "B", 1000), SankeyLink("A", "C", 0.001)]
        layout = sankey_layout(nodes, links, Bounds(0, 0, 300, 200))
        self.assertGreaterEqual(layout.links[1].thickness, 1.0)

    def test_invalid_input(self) -> None:
        with self.assertRaises(ChartDataError):
            sankey_layout([SankeyNode("A")], [SankeyLink("A", "X", 1)], Bounds(0, 0, 10, 10))
        with self.assertRaises(ChartDataError):
            sankey_layout([SankeyNode("A"), SankeyNode("A")], [], Bounds(0, 0, 10, 10))
        with self.assertRaises(ChartDataError):
            SankeyLink("A", "B", -1)

    def test_display_label(self) -> None:
        self.assertEqual(SankeyNode("n1").display_label, "n1")
        self.assertEqual(SankeyNode("n1", label="Input").display_label, "Input")


if __name__ == "__main__":
    unittest.main()
