from __future__ import annotations

import datetime as dt
import unittest

from dataviz_core.annotations import DASHED, AnnotationLayer
from dataviz_core.hierarchy import DendrogramNode, HierarchyNode
from dataviz_core.primitives import Bounds, Circle, LinearGradient, Line, Path, Polygon, Rect, Text
from dataviz_core.render.svg import render_svg
from dataviz_core.sankey import SankeyLink, SankeyNode
from dataviz_core.stats import Candle
from dataviz_plot import (
    NO_MARGIN,
    CapStyle,
    ConfidenceBand,
    ErrorBar,
    HeatmapDay,
    Series,
    Word,
    area_chart,
    bar_chart,
    box_plot,
    candlestick_chart,
    chord_diagram,
    circle_packing_chart,
    circular_bar_chart,
    confidence_band_chart,
    connected_scatter,
    correlogram,
    density_plot,
    dendrogram_chart,
    error_bar_chart,
    histogram,
    icicle_chart,
    line_chart,
    linear_heatmap,
    lollipop_chart,
    ohlc_chart,
    parallel_coordinates,
    pie_chart,
    radar_chart,
    ridgeline_plot,
    sankey_chart,
    scatter_plot,
    stacked_area_chart,
    stacked_bar_chart,
    stream_chart,
    sunburst_chart,
    treemap_chart,
    violin_plot,
    weeks_heatmap,
    word_cloud,
)
from dataviz_plot._common import legend
from dataviz_plot.heatmap import (
    contribution_lightness,
    linear_heatmap_terminal,
    week_start,
    weeks_heatmap_terminal,
)
from dataviz_plot.wordcloud import layout_words

BOUNDS = Bounds(0, 0, 400, 300)


def _of(prims, kind):
    return [p for p in prims if isinstance(p, kind)]


class EmptyInputTests(unittest.TestCase):
    def test_every_adapter_returns_nothing_for_empty_data(self) -> None:
        calls = {
            "bar": lambda: bar_chart([], [], BOUNDS),
            "stacked_bar": lambda: stacked_bar_chart([], [], BOUNDS),
            "lollipop": lambda: lollipop_chart([], [], BOUNDS),
            "histogram": lambda: histogram([], BOUNDS),
            "line": lambda: line_chart([], [], BOUNDS),
            "area": lambda: area_chart([], [], BOUNDS),
            "stacked_area": lambda: stacked_area_chart([], [], BOUNDS),
            "stream": lambda: stream_chart([], [], BOUNDS),
            "connected_scatter": lambda: connected_scatter([], [], BOUNDS),
            "confidence_band": lambda: confidence_band_chart(ConfidenceBand([], [], [], []), BOUNDS),
            "scatter": lambda: scatter_plot([], [], BOUNDS),
            "candlestick": lambda: candlestick_chart([], BOUNDS),
            "ohlc": lambda: ohlc_chart([], BOUNDS),
            "pie": lambda: pie_chart([], [], BOUNDS),
            "radar": lambda: radar_chart([], [], BOUNDS),
            "circular_bar": lambda: circular_bar_chart([], [], BOUNDS),
            "chord": lambda: chord_diagram([], [], BOUNDS),
            "parallel": lambda: parallel_coordinates([], [], BOUNDS),
            "box": lambda: box_plot({}, BOUNDS),
            "violin": lambda: violin_plot({}, BOUNDS),
            "density": lambda: density_plot({}, BOUNDS),
            "ridgeline": lambda: ridgeline_plot({}, BOUNDS),
            "error_bars": lambda: error_bar_chart([], BOUNDS),
            "correlogram": lambda: correlogram([], BOUNDS),
            "treemap": lambda: treemap_chart(None, BOUNDS),
            "sunburst": lambda: sunburst_chart(None, BOUNDS),
            "icicle": lambda: icicle_chart(None, BOUNDS),
            "circle_packing": lambda: circle_packing_chart(None, BOUNDS),
            "dendrogram": lambda: dendrogram_chart(None, BOUNDS),
            "sankey": lambda: sankey_chart([], [], BOUNDS),
            "weeks_heatmap": lambda: weeks_heatmap([], BOUNDS),
            "linear_heatmap": lambda: linear_heatmap([], BOUNDS),
            "word_cloud": lambda: word_cloud([], BOUNDS),
        }
        for name, call in calls.items():
            with self.subTest(adapter=name):
                self.assertEqual(call(), [])

    def test_terminal_heatmaps_return_empty_text(self) -> None:
        self.assertEqual(weeks_heatmap_terminal([]), "")
        self.assertEqual(linear_heatmap_terminal([]), "")


class MalformedInputTests(unittest.TestCase):
    def test_length_mismatch_is_logged_and_dropped(self) -> None:
        with self.assertLogs("dataviz_plot._common", level="WARNING") as logs:
            self.assertEqual(bar_chart(["a", "b"], [1.0], BOUNDS), [])
        self.assertIn("bar_chart", logs.output[0])

    def test_parallel_row_mismatch(self) -> None:
        with self.assertLogs("dataviz_plot._common", level="WARNING"):
            self.assertEqual(parallel_coordinates(["a", "b", "c"], [[1, 2, 3], [1, 2]], BOUNDS), [])

    def test_non_square_correlogram(self) -> None:
        with self.assertLogs("dataviz_plot._common", level="WARNING"):
            self.assertEqual(correlogram(["a", "b"], BOUNDS, matrix=[[1.0, 0.5], [0.5]]), [])

    def test_radar_needs_three_axes(self) -> None:
        with self.assertLogs("dataviz_plot._common", level="WARNING"):
            self.assertEqual(radar_chart(["a", "b"], [Series("s", [1, 2])], BOUNDS), [])

    def test_negative_pie_slice(self) -> None:
        with self.assertLogs("dataviz_plot._common", level="WARNING"):
            self.assertEqual(pie_chart(["a", "b"], [1, -1], BOUNDS), [])


class BarAdapterTests(unittest.TestCase):
    def test_bars_follow_band_and_linear_scales(self) -> None:
        prims = bar_chart(["a", "b"], [10, 20], Bounds(0, 0, 250, 240), show_axes=False, margin=NO_MARGIN)
        self.assertEqual(
            [(r.x, r.y, r.width, r.height) for r in prims],
            [(12.5, 120.0, 100.0, 120.0), (137.5, 0.0, 100.0, 240.0)],
        )

    def test_stacked_bars_and_legend(self) -> None:
        prims = stacked_bar_chart(["q1", "q2"], [Series("x", [1, 2]), Series("y", [3, 0])], BOUNDS)
        self.assertTrue(any(isinstance(p, Text) and p.content == "y" for p in prims))
        # three non-empty segments plus two legend swatches
        self.assertEqual(len(_of(prims, Rect)), 5)

    def test_accepts_pandas_series(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")
        prims = bar_chart(["a", "b"], pd.Series([10, 20]), Bounds(0, 0, 250, 240), show_axes=False, margin=NO_MARGIN)
        self.assertEqual([r.height for r in prims], [120.0, 240.0])

    def test_histogram_and_lollipop(self) -> None:
        self.assertTrue(_of(histogram([1, 2, 2, 3, 3, 3, 4], BOUNDS, bin_width=1), Rect))
        self.assertEqual(len(_of(lollipop_chart(["a", "b"], [3, 4], BOUNDS), Circle)), 2)


class LineAdapterTests(unittest.TestCase):
    def test_gradient_fill_uses_unique_ids(self) -> None:
        series = [Series("a", [1, 3, 2]), Series("b", [2, 1, 4])]
        prims = line_chart([0, 1, 2], series, BOUNDS, gradient_fill=True)
        ids = [g.id for g in _of(prims, LinearGradient)]
        self.assertEqual(len(ids), 2)
        self.assertNotEqual(ids[0], ids[1])
        self.assertIn(f'id="{ids[0]}"', render_svg(prims, 400, 300))

    def test_time_axis(self) -> None:
        days = [dt.date(2024, 1, 1) + dt.timedelta(days=i) for i in range(10)]
        prims = line_chart(days, [Series("v", list(range(10)))], BOUNDS, markers=True)
        self.assertEqual(len(_of(prims, Circle)), 10)

    def test_area_variants(self) -> None:
        self.assertEqual(len(_of(area_chart([0, 1, 2], [1, 2, 1], BOUNDS), Path)), 2)
        stacked = stacked_area_chart([0, 1, 2], [Series("a", [1, 2, 3]), Series("b", [1, 1, 1])], BOUNDS, normalize=True)
        self.assertEqual(len(_of(stacked, Path)), 2)
        for baseline in ("silhouette", "center", "wiggle"):
            stream = stream_chart([0, 1, 2], [Series("a", [1, 2, 3]), Series("b", [2, 2, 2])], BOUNDS, baseline=baseline)
            self.assertEqual(len(_of(stream, Path)), 2)

    def test_connected_scatter_and_confidence_band(self) -> None:
        prims = connected_scatter([1, 2, 3], [3, 1, 2], BOUNDS, labels=["x", "y", "z"])
        self.assertEqual(len(_of(prims, Circle)), 3)
        band = ConfidenceBand([0, 1, 2], [1, 2, 3], [0.5, 1.5, 2.5], [1.5, 2.5, 3.5])
        self.assertEqual(len(_of(confidence_band_chart(band, BOUNDS), Path)), 2)

    def test_annotations_are_drawn_with_the_chart_scales(self) -> None:
        layer = AnnotationLayer().horizontal_line(2, "mean").region(1.5, 2.5)
        prims = line_chart([0, 1, 2], [Series("s", [1, 2, 3])], BOUNDS, annotations=layer)
        dashed = [p for p in _of(prims, Line) if p.style.stroke_dasharray == DASHED]
        self.assertEqual(len(dashed), 1)
        self.assertEqual((dashed[0].x1, dashed[0].x2), (50.0, 380.0))
        self.assertIn("mean", [t.content for t in _of(prims, Text)])
        self.assertEqual(len(_of(prims, Rect)), 1)

    def test_legend_uses_line_keys(self) -> None:
        series = [Series("a", [1, 3, 2]), Series("b", [2, 1, 4])]
        prims = line_chart([0, 1, 2], series, BOUNDS, show_legend=True)
        keys = [p for p in _of(prims, Line) if p.style.stroke_width == 2.0]
        self.assertEqual(len(keys), 2)
        self.assertEqual(_of(prims, Rect), [])


class LegendTests(unittest.TestCase):
    def test_symbols(self) -> None:
        swatch = legend([("a", "#FF0000")], 0, 0)
        self.assertEqual((swatch[0].x, swatch[0].y, swatch[0].width), (0, 0, 10.0))
        (key, label) = legend([("a", "#FF0000")], 0, 0, symbol="line")
        self.assertEqual((key.x1, key.y1, key.x2, key.y2), (0, 5.0, 10.0, 5.0))
        self.assertEqual(key.style.stroke, "#FF0000")
        self.assertEqual(label.x, 16.0)
        (dot, _) = legend([("a", "#FF0000")], 0, 0, symbol="circle")
        self.assertEqual((dot.cx, dot.cy, dot.r), (5.0, 5.0, 5.0))

    def test_unknown_symbol_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            legend([("a", "#FF0000")], 0, 0, symbol="star")


class ScatterAndFinancialTests(unittest.TestCase):
    def test_vertical_reference_line(self) -> None:
        prims = scatter_plot([1, 2, 3], [1, 4, 9], BOUNDS, annotations=AnnotationLayer().vertical_line(2, "median"))
        (line,) = [p for p in _of(prims, Line) if p.style.stroke_dasharray == DASHED]
        self.assertEqual(line.x1, line.x2)
        self.assertEqual((line.y1, line.y2), (20.0, 260.0))
        self.assertIn("median", [t.content for t in _of(prims, Text)])

    def test_marker_shapes(self) -> None:
        for shape, kind, count in (("circle", Circle, 3), ("square", Rect, 3), ("diamond", Polygon, 3), ("cross", Line, 6)):
            with self.subTest(shape=shape):
                prims = scatter_plot([1, 2, 3], [1, 4, 9], BOUNDS, shape=shape)
                markers = [p for p in _of(prims, kind) if p.style.fill == "#3B82F6" or p.style.stroke == "#3B82F6"]
                self.assertEqual(len(markers), count)

    def test_bubble_sizes_are_area_true(self) -> None:
        prims = scatter_plot([1, 2], [1, 2], BOUNDS, sizes=[1, 4], max_size=20)
        radii = sorted(c.r for c in _of(prims, Circle))
        self.assertAlmostEqual(radii[0], 10.0)
        self.assertAlmostEqual(radii[1], 20.0)

    def test_candles(self) -> None:
        candles = [Candle(10, 12, 9, 11, 100), Candle(11, 13, 10, 10, 50), Candle(10, 11, 8, 9, 0)]
        prims = candlestick_chart(candles, BOUNDS, bollinger=(2, 2.0), show_volume=True)
        self.assertTrue(any(isinstance(p, Path) and p.style.stroke_dasharray == "4,2" for p in prims))
        ohlc = ohlc_chart(candles, BOUNDS)
        self.assertFalse(any(isinstance(p, Rect) and p.style.fill in ("#10B981", "#EF4444") for p in ohlc))
        self.assertTrue(candlestick_chart(candles, BOUNDS, use_heikin_ashi=True))


class RadialAdapterTests(unittest.TestCase):
    def test_pie_percent_labels(self) -> None:
        prims = pie_chart(["a", "b"], [1, 3], BOUNDS)
        self.assertEqual([t.content for t in _of(prims, Text)][:2], ["25.0%", "75.0%"])

    def test_radar_chord_circular(self) -> None:
        radar = radar_chart(["a", "b", "c"], [Series("s", [1, 2, 3])], BOUNDS, levels=4)
        self.assertEqual(len(_of(radar, Polygon)), 5)
        chord = chord_diagram(["a", "b"], [[0, 2], [1, 0]], BOUNDS)
        self.assertEqual(len(_of(chord, Path)), 3)
        circular = circular_bar_chart(["a", "b", "c"], [1, 0, 2], BOUNDS)
        self.assertEqual(len(_of(circular, Path)), 2)


class StatisticalAdapterTests(unittest.TestCase):
    GROUPS = {"a": [1, 2, 3, 4, 5, 30], "b": [2, 3, 3, 4, 5]}

    def test_box_plot_marks_outliers(self) -> None:
        prims = box_plot(self.GROUPS, BOUNDS, show_mean=False)
        self.assertEqual(len(_of(prims, Circle)), 1)

    def test_density_family(self) -> None:
        self.assertEqual(len(_of(violin_plot(self.GROUPS, BOUNDS, show_box=False), Path)), 2)
        self.assertEqual(len(_of(density_plot(self.GROUPS, BOUNDS, fill=False), Path)), 2)
        ridge = ridgeline_plot(self.GROUPS, BOUNDS)
        self.assertEqual([t.content for t in _of(ridge, Text)][:2], ["a", "b"])

    def test_zero_bandwidth_still_draws(self) -> None:
        self.assertEqual(len(_of(violin_plot({"a": [1, 2, 3, 4]}, BOUNDS, bandwidth=0.0, show_box=False), Path)), 1)
        self.assertEqual(len(_of(density_plot({"a": [1, 2, 3, 4]}, BOUNDS, bandwidth=0.0), Path)), 2)

    def test_error_bar_caps(self) -> None:
        bars = [ErrorBar(1, 5, 1, 2, is_relative=True), ErrorBar(2, 6, 4, 8)]
        self.assertEqual(bars[0].bounds, (4, 7))
        lines = _of(error_bar_chart(bars, BOUNDS, cap_style=CapStyle.LINE, color="#123456"), Line)
        self.assertEqual(len([ln for ln in lines if ln.style.stroke == "#123456"]), 6)
        none = _of(error_bar_chart(bars, BOUNDS, cap_style="none", color="#123456"), Line)
        self.assertEqual(len([ln for ln in none if ln.style.stroke == "#123456"]), 2)

    def test_correlogram_colors(self) -> None:
        prims = correlogram(["x", "y"], BOUNDS, matrix=[[1.0, -1.0], [-1.0, 1.0]])
        rects = _of(prims, Rect)
        self.assertEqual([r.style.fill for r in rects], ["#B2182B", "#2166AC", "#2166AC", "#B2182B"])
        self.assertIn("-1.00", [t.content for t in _of(prims, Text)])

    def test_correlogram_from_raw_columns(self) -> None:
        prims = correlogram(["x", "y"], BOUNDS, data=[[1, 2, 3], [3, 2, 1]], show_values=False)
        self.assertEqual(len(_of(prims, Rect)), 4)

    def test_parallel_coordinates(self) -> None:
        prims = parallel_coordinates(["a", "b", "c"], [[1, 10, 100], [2, 20, 50]], BOUNDS)
        self.assertEqual(len(_of(prims, Path)), 2)
        self.assertEqual([t.content for t in _of(prims, Text) if t.style.font_weight == "bold"], ["a", "b", "c"])


class HierarchyAdapterTests(unittest.TestCase):
    def _root(self) -> HierarchyNode:
        return HierarchyNode(
            "root",
            children=[
                HierarchyNode("a", children=[HierarchyNode("a1", 2), HierarchyNode("a2", 1)]),
                HierarchyNode("b", 3),
            ],
        )

    def test_treemap_children_inherit_top_level_color(self) -> None:
        rects = _of(treemap_chart(self._root(), BOUNDS), Rect)
        self.assertEqual(len(rects), 3)
        fills = {r.style.fill for r in rects}
        self.assertEqual(fills, {"#3B82F6", "#10B981"})

    def test_partition_charts(self) -> None:
        self.assertEqual(len(_of(sunburst_chart(self._root(), BOUNDS), Path)), 5)
        self.assertEqual(len(_of(icicle_chart(self._root(), BOUNDS), Rect)), 5)
        packed = _of(circle_packing_chart(self._root(), BOUNDS), Circle)
        self.assertEqual(len(packed), 5)
        self.assertEqual(packed[0].style.fill, "none")

    def test_dendrogram_chart(self) -> None:
        root = DendrogramNode("r", 1.0, [DendrogramNode("x"), DendrogramNode("y")])
        prims = dendrogram_chart(root, BOUNDS)
        self.assertEqual(len(_of(prims, Line)), 3)
        self.assertEqual([t.content for t in _of(prims, Text)], ["x", "y"])


class SankeyAdapterTests(unittest.TestCase):
    def test_links_drawn_before_nodes_with_gradients(self) -> None:
        nodes = [SankeyNode("a"), SankeyNode("b"), SankeyNode("c", label="Sink")]
        links = [SankeyLink("a", "c", 2), SankeyLink("b", "c", 1)]
        prims = sankey_chart(nodes, links, BOUNDS)
        gradients = _of(prims, LinearGradient)
        self.assertEqual(len(gradients), 2)
        self.assertTrue(all(g.angle == 0.0 for g in gradients))
        first_rect = next(i for i, p in enumerate(prims) if isinstance(p, Rect))
        last_path = max(i for i, p in enumerate(prims) if isinstance(p, Path))
        self.assertLess(last_path, first_rect)
        sink_label = next(t for t in _of(prims, Text) if t.content == "Sink")
        self.assertEqual(sink_label.style.text_anchor, "end")

    def test_solid_link_color(self) -> None:
        prims = sankey_chart([SankeyNode("a"), SankeyNode("b")], [SankeyLink("a", "b", 1)], BOUNDS, link_color="#999999")
        self.assertEqual(_of(prims, LinearGradient), [])
        self.assertEqual(_of(prims, Path)[0].style.fill, "#999999")


class HeatmapTests(unittest.TestCase):
    def _week(self) -> list[HeatmapDay]:
        first = dt.date(2024, 1, 7)
        return [HeatmapDay(first + dt.timedelta(days=i), i + 1) for i in range(7)]

    def test_week_start_is_sunday(self) -> None:
        self.assertEqual(week_start(dt.date(2024, 1, 10)), dt.date(2024, 1, 7))
        self.assertEqual(week_start(dt.date(2024, 1, 7)), dt.date(2024, 1, 7))

    def test_lightness_ramp(self) -> None:
        self.assertEqual(contribution_lightness(0), 0.15)
        self.assertAlmostEqual(contribution_lightness(1.0), 0.6125)
        self.assertLess(contribution_lightness(0.3), contribution_lightness(0.6))

    def test_weeks_grid_stops_after_end(self) -> None:
        prims = weeks_heatmap(self._week(), Bounds(0, 0, 700, 100), end=dt.date(2024, 1, 13))
        self.assertEqual(len(_of(prims, Rect)), 7)
        self.assertEqual([t.content for t in _of(prims, Text)], ["Mon", "Wed", "Fri"])
        self.assertTrue(all(r.rx == 2.0 for r in _of(prims, Rect)))

    def test_linear_heatmap_caps_days(self) -> None:
        days = [HeatmapDay(dt.date(2024, 1, 1) + dt.timedelta(days=i), i) for i in range(40)]
        self.assertEqual(len(linear_heatmap(days, BOUNDS)), 30)

    def test_negative_count_rejected(self) -> None:
        with self.assertRaises(ValueError):
            HeatmapDay(dt.date(2024, 1, 1), -1)

    def test_terminal_grid_rows_are_weekdays(self) -> None:
        out = weeks_heatmap_terminal(self._week(), width=4)
        self.assertTrue(out.endswith("\n"))
        rows = out.split("\n")[:-1]
        self.assertEqual(len(rows), 7)
        self.assertEqual(rows[6], "█   ")
        self.assertEqual(rows[0], "    ")

    def test_terminal_linear(self) -> None:
        self.assertEqual(linear_heatmap_terminal(self._week(), width=3), " ░░\n")


class WordCloudTests(unittest.TestCase):
    WORDS = [Word("beta", 5), Word("alpha", 10), Word("gamma", 1, color="#000000")]

    def test_spiral_starts_at_center_with_largest_word(self) -> None:
        prims = word_cloud(self.WORDS, BOUNDS)
        first = prims[0]
        self.assertEqual((first.content, first.x, first.y, first.style.font_size), ("alpha", 200.0, 150.0, 72.0))
        self.assertEqual(prims[-1].style.fill, "#000000")

    def test_horizontal_rows(self) -> None:
        placed = layout_words(self.WORDS, BOUNDS, layout="horizontal")
        self.assertEqual(placed[0].word.text, "alpha")
        self.assertAlmostEqual(placed[0].x, 20.0 + 5 * 72 * 0.6 / 2.0)
        self.assertAlmostEqual(placed[0].y, 50.0 + 36.0)

    def test_title(self) -> None:
        prims = word_cloud(self.WORDS, BOUNDS, chart_title="Tags")
        self.assertEqual(prims[0].content, "Tags")


if __name__ == "__main__":
    unittest.main()
