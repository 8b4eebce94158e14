from __future__ import annotations

import unittest

from dataviz_core.axis import Axis, AxisOrientation, AxisStyle
from dataviz_core.config import validate_theme
from dataviz_core.primitives import Line, Text
from dataviz_core.scales import BandScale, LinearScale


def _texts(prims):
    return [p for p in prims if isinstance(p, Text)]


def _lines(prims):
    return [p for p in prims if isinstance(p, Line)]


class AxisTests(unittest.TestCase):
    def test_bottom_axis_geometry(self) -> None:
        axis = Axis(LinearScale((0, 100), (0, 200)), "bottom", offset=150, tick_count=5)
        prims = axis.render()
        labels = _texts(prims)
        self.assertEqual([t.content for t in labels], ["0", "25", "50", "75", "100"])
        self.assertEqual([t.x for t in labels], [0.0, 50.0, 100.0, 150.0, 200.0])
        # tick size + padding + font size below the axis line
        self.assertTrue(all(t.y == 150 + 6 + 3 + 11 for t in labels))
        self.assertTrue(all(t.style.text_anchor == "middle" for t in labels))

        lines = _lines(prims)
        domain = lines[0]
        self.assertEqual((domain.x1, domain.y1, domain.x2, domain.y2), (0.0, 150.0, 200.0, 150.0))
        marks = lines[1:]
        self.assertEqual(len(marks), 5)
        self.assertTrue(all(m.y1 == 150 and m.y2 == 156 for m in marks))

    def test_left_axis_labels_are_end_anchored(self) -> None:
        axis = Axis(LinearScale((0, 10), (100, 0)), AxisOrientation.LEFT, offset=40, tick_count=3)
        labels = _texts(axis.render())
        self.assertEqual([t.content for t in labels], ["0", "5", "10"])
        self.assertEqual([t.y for t in labels], [100.0, 50.0, 0.0])
        self.assertTrue(all(t.x == 40 - 9 for t in labels))
        self.assertTrue(all(t.style.text_anchor == "end" for t in labels))
        self.assertTrue(all(t.style.dominant_baseline == "middle" for t in labels))

    def test_band_ticks_sit_at_band_centers(self) -> None:
        scale = BandScale(["a", "b", "c"], (0, 300))
        ticks = Axis(scale, "bottom").ticks()
        self.assertEqual([t.label for t in ticks], ["a", "b", "c"])
        self.assertEqual([t.position for t in ticks], [50.0, 150.0, 250.0])

    def test_grid_lines_render_before_domain_line(self) -> None:
        axis = Axis(LinearScale((0, 1), (0, 100)), "bottom", offset=80, tick_count=3, grid_length=80)
        prims = axis.render()
        lines = _lines(prims)
        grid = lines[:3]
        self.assertTrue(all(g.y1 == 80 and g.y2 == 0 for g in grid))
        self.assertTrue(all(g.style.stroke == AxisStyle().grid_stroke for g in grid))
        self.assertEqual(lines[3].y1, lines[3].y2)

    def test_left_title_is_rotated(self) -> None:
        axis = Axis(LinearScale((0, 1), (200, 0)), "left", offset=50, title="Value")
        title = axis.render()[-1]
        self.assertIsInstance(title, Text)
        self.assertEqual(title.content, "Value")
        self.assertEqual(title.rotate, -90.0)
        self.assertEqual(title.y, 100.0)
        self.assertEqual(title.x, 10.0)

    def test_custom_formatter(self) -> None:
        axis = Axis(LinearScale((0, 1)), "top", tick_count=3, formatter=lambda v: f"{v:.0%}")
        self.assertEqual([t.label for t in axis.ticks()], ["0%", "50%", "100%"])

    def test_style_from_theme(self) -> None:
        theme = validate_theme({"axis_stroke": "#445566", "font_size_px": 9})
        style = AxisStyle.from_theme(theme)
        self.assertEqual(style.stroke, "#445566")
        self.assertEqual(style.font_size, 9.0)


if __name__ == "__main__":
    unittest.main()
