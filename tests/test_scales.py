from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import math
import unittest

import numpy as np

from dataviz_core.color import GradientSpace
from dataviz_core.errors import ScaleDomainError
from dataviz_core.scales import (
    BandScale,
    CategoricalColorScale,
    DivergingColorScale,
    LinearScale,
    LogScale,
    OrdinalScale,
    PointScale,
    PowScale,
    ScaleKind,
    SequentialColorScale,
    SqrtScale,
    TimeInterval,
    TimeScale,
)
from dataviz_core.scales.ticks import format_ticks, linear_ticks, log_formatter, nice_domain, nice_number
from dataviz_core.units import Unit, pct, px


class LinearScaleTests(unittest.TestCase):
    def test_pixel_mapping_and_inverse(self) -> None:
        s = LinearScale((0, 100), (0, 500))
        self.assertEqual(s.forward(0), px(0))
        self.assertEqual(s.forward(50), px(250))
        self.assertEqual(s.forward(100), px(500))
        self.assertEqual(s.invert(px(250)), 50.0)
        self.assertEqual(s.ticks(5), [0, 25, 50, 75, 100])

    def test_endpoints_map_exactly_and_invert_round_trips(self) -> None:
        s = LinearScale((-3.7, 12.2), (40.0, 460.0))
        self.assertEqual(s.forward(-3.7).value, 40.0)
        self.assertEqual(s.forward(12.2).value, 460.0)
        for v in np.linspace(-3.7, 12.2, 17):
            self.assertAlmostEqual(s.invert(s.forward(v)), float(v), places=9)

    def test_midpoint_maps_to_range_midpoint(self) -> None:
        s = LinearScale((10, 30), (100, 300))
        self.assertAlmostEqual(s.forward(20).value, 200.0)

    def test_degenerate_domain(self) -> None:
        s = LinearScale((5, 5), (0, 100))
        self.assertEqual(s.forward(5), px(0))
        self.assertEqual(s.ticks(3), [5.0])
        self.assertEqual(s.ticks(12), [5.0])

    def test_unknown_and_nan_inputs(self) -> None:
        s = LinearScale((0, 1), (10, 20))
        self.assertEqual(s.forward("abc"), px(0))
        self.assertEqual(s.forward(math.nan), px(10))
        self.assertEqual(s.invert(math.nan), 0.0)

    def test_clamp(self) -> None:
        s = LinearScale((0, 100), (0, 500))
        self.assertFalse(s.clamped)
        self.assertEqual(s.forward(150).value, 750.0)
        self.assertIs(s.clamp(True), s)
        self.assertTrue(s.clamped)
        self.assertEqual(s.forward(150).value, 500.0)
        self.assertEqual(s.forward(-10).value, 0.0)

    def test_range_unit_is_preserved(self) -> None:
        s = LinearScale((0, 1), (pct(0), pct(100)))
        self.assertEqual(s.forward(0.25), pct(25))
        self.assertIs(s.unit, Unit.PERCENT)

    def test_mixed_range_units_are_rejected(self) -> None:
        with self.assertRaises(ScaleDomainError):
            LinearScale((0, 1), (px(0), pct(100)))

    def test_nice_extends_to_step_multiples(self) -> None:
        s = LinearScale((0.5, 9.7)).nice(5)
        self.assertEqual(s.domain(), (0.0, 10.0))
        d0, d1, step = nice_domain(0.5, 9.7, 5)
        self.assertEqual(step, 2.0)
        self.assertTrue(float(d0 / step).is_integer())
        self.assertTrue(float(d1 / step).is_integer())

    def test_nice_never_shrinks_domain(self) -> None:
        for d0, d1 in ((0.13, 0.87), (-42.0, 977.0), (3.0, 3.5)):
            nd0, nd1, _ = nice_domain(d0, d1, 10)
            self.assertLessEqual(nd0, d0)
            self.assertGreaterEqual(nd1, d1)

    def test_tick_laws(self) -> None:
        ticks = LinearScale((-3.7, 12.2)).ticks(7)
        self.assertTrue(all(-3.7 <= t <= 12.2 for t in ticks))
        deltas = np.diff(ticks)
        self.assertTrue(np.all(deltas > 0))
        self.assertTrue(np.allclose(deltas, deltas[0]))

    def test_reversed_domain_ticks_descend(self) -> None:
        self.assertEqual(LinearScale((100, 0)).ticks(5), [100, 75, 50, 25, 0])

    def test_tick_format_uses_step_precision(self) -> None:
        fmt = LinearScale((0, 1)).tick_format(5)
        self.assertEqual([fmt(v) for v in (0.0, 0.25, 0.5, 1.0)], ["0", "0.25", "0.5", "1"])

    def test_clone_is_independent(self) -> None:
        s = LinearScale((0, 10), (0, 100))
        c = s.clone()
        c.set_domain((0, 20))
        self.assertEqual(s.domain(), (0, 10))
        self.assertEqual(c.forward(10).value, 50.0)

    def test_call_is_forward(self) -> None:
        s = LinearScale((0, 10), (0, 100))
        self.assertEqual(s(5), s.forward(5))
        self.assertIs(s.kind, ScaleKind.LINEAR)


class NiceNumberTests(unittest.TestCase):
    def test_round_mode_picks_closest(self) -> None:
        self.assertEqual(nice_number(25.0, round_result=True), 25.0)
        self.assertEqual(nice_number(0.9, round_result=True), 1.0)
        self.assertEqual(nice_number(6.0, round_result=True), 5.0)
        self.assertEqual(nice_number(8.0, round_result=True), 10.0)

    def test_floor_mode_never_exceeds_input(self) -> None:
        self.assertEqual(nice_number(2.3, round_result=False), 2.0)
        self.assertEqual(nice_number(4.9, round_result=False), 2.0)
        self.assertEqual(nice_number(9.9, round_result=False), 5.0)
        self.assertEqual(nice_number(1000.0, round_result=False), 1000.0)

    def test_zero_count_defaults_to_ten(self) -> None:
        self.assertEqual(linear_ticks(0, 10, 0), linear_ticks(0, 10, 10))

    def test_format_ticks_keeps_integer_zeros(self) -> None:
        self.assertEqual(format_ticks([20.0, 30.0, 40.0]), ["20", "30", "40"])
        self.assertEqual(format_ticks([1.5, 2.0, 2.5]), ["1.5", "2", "2.5"])

    def test_log_formatter_switches_to_scientific(self) -> None:
        self.assertEqual(log_formatter(100), "100")
        self.assertEqual(log_formatter(10000), "1e4")
        self.assertEqual(log_formatter(0.001), "1e-3")


class LogScaleTests(unittest.TestCase):
    def test_decades_map_evenly(self) -> None:
        s = LogScale((1, 1000), (0, 300))
        self.assertEqual(s.forward(1).value, 0.0)
        self.assertAlmostEqual(s.forward(10).value, 100.0, places=6)
        self.assertAlmostEqual(s.forward(100).value, 200.0, places=6)
        self.assertEqual(s.forward(1000).value, 300.0)
        self.assertTrue({1.0, 10.0, 100.0, 1000.0}.issubset(s.ticks(4)))

    def test_invert_round_trips(self) -> None:
        s = LogScale((2, 5000), (0, 640))
        for v in (2.0, 3.3, 47.0, 999.0, 5000.0):
            self.assertAlmostEqual(s.invert(s.forward(v)), v, delta=v * 1e-9)

    def test_non_positive_query(self) -> None:
        s = LogScale((1, 100), (0, 200))
        self.assertTrue(math.isnan(s.forward(0).value))
        self.assertTrue(math.isnan(s.forward(-5).value))
        s.clamp(True)
        self.assertEqual(s.forward(0).value, 0.0)

    def test_domain_touching_or_straddling_zero_is_rejected(self) -> None:
        with self.assertRaises(ScaleDomainError):
            LogScale((0, 10))
        with self.assertRaises(ScaleDomainError):
            LogScale((-1, 10))

    def test_negative_domain(self) -> None:
        s = LogScale((-1000, -1), (0, 300))
        self.assertAlmostEqual(s.forward(-10).value, 200.0, places=6)

    def test_invalid_base_falls_back_to_ten(self) -> None:
        self.assertEqual(LogScale((1, 100), base=-2).base, 10.0)
        self.assertEqual(LogScale((1, 100), base=1).base, 10.0)
        self.assertEqual(LogScale((1, 64), base=2).base, 2.0)

    def test_nice_rounds_to_powers(self) -> None:
        s = LogScale((3, 700)).nice()
        self.assertEqual(s.domain(), (1.0, 1000.0))

    def test_ticks_are_enriched_when_sparse(self) -> None:
        ticks = LogScale((1, 100)).ticks(10)
        self.assertIn(20.0, ticks)
        self.assertIn(9.0, ticks)
        self.assertEqual(len(ticks), 19)
        self.assertTrue(all(b > a for a, b in zip(ticks, ticks[1:])))

    def test_powers_present_over_several_decades(self) -> None:
        ticks = LogScale((0.5, 20000)).ticks(5)
        for p in (1.0, 10.0, 100.0, 1000.0, 10000.0):
            self.assertIn(p, ticks)
        self.assertTrue(all(0.5 <= t <= 20000 for t in ticks))


class PowScaleTests(unittest.TestCase):
    def test_square(self) -> None:
        s = PowScale((0, 100), (0, 500), exponent=2)
        self.assertEqual(s.forward(50).value, 125.0)
        self.assertEqual(s.forward(100).value, 500.0)
        self.assertAlmostEqual(s.invert(125), 50.0)
        self.assertIs(s.kind, ScaleKind.POW)

    def test_sqrt_kind(self) -> None:
        s = SqrtScale((0, 100), (0, 10))
        self.assertIs(s.kind, ScaleKind.SQRT)
        self.assertAlmostEqual(s.forward(25).value, 5.0)
        self.assertIs(PowScale(exponent=0.5).kind, ScaleKind.POW)

    def test_kind_follows_the_preset_not_the_exponent(self) -> None:
        s = SqrtScale((0, 100), (0, 10)).set_exponent(2)
        self.assertIs(s.kind, ScaleKind.SQRT)
        self.assertEqual(s.forward(50).value, 2.5)
        self.assertIs(s.clone().kind, ScaleKind.SQRT)

    def test_negative_parameter_with_fractional_exponent(self) -> None:
        s = PowScale((0, 100), (0, 10), exponent=0.5)
        self.assertTrue(math.isnan(s.forward(-50).value))
        s.clamp(True)
        self.assertEqual(s.forward(-50).value, 0.0)

    def test_zero_exponent_is_rejected(self) -> None:
        with self.assertRaises(ScaleDomainError):
            PowScale(exponent=0)


class TimeScaleTests(unittest.TestCase):
    def test_year_in_days(self) -> None:
        s = TimeScale((datetime(2024, 1, 1), datetime(2024, 12, 31)), (0, 365))
        self.assertAlmostEqual(s.forward(datetime(2024, 7, 1)).value, 182.0, delta=1.0)
        self.assertAlmostEqual(s.forward(date(2024, 7, 1)).value, 182.0, delta=1.0)
        ticks = s.ticks(12)
        for month in range(1, 13):
            self.assertIn(datetime(2024, month, 1), ticks)

    def test_endpoints_and_inverse(self) -> None:
        t0 = datetime(2023, 3, 1, 8, 0)
        t1 = datetime(2023, 3, 1, 20, 0)
        s = TimeScale((t0, t1), (0, 720))
        self.assertEqual(s.forward(t0).value, 0.0)
        self.assertEqual(s.forward(t1).value, 720.0)
        self.assertEqual(s.invert(360), datetime(2023, 3, 1, 14, 0))

    def test_invert_keeps_timezone(self) -> None:
        tz = timezone(timedelta(hours=2))
        s = TimeScale((datetime(2024, 1, 1, tzinfo=tz), datetime(2024, 1, 2, tzinfo=tz)), (0, 24))
        back = s.invert(12)
        self.assertEqual(back.utcoffset(), timedelta(hours=2))
        self.assertEqual(back, datetime(2024, 1, 1, 12, tzinfo=tz))

    def test_day_ticks_may_exceed_count_by_one(self) -> None:
        s = TimeScale((datetime(2024, 1, 1), datetime(2024, 1, 11)), (0, 100))
        self.assertIs(s.tick_interval(10), TimeInterval.DAY)
        ticks = s.ticks(10)
        self.assertEqual(len(ticks), 11)
        self.assertEqual(ticks[0], datetime(2024, 1, 1))
        self.assertEqual(ticks[-1], datetime(2024, 1, 11))

    def test_nice_snaps_to_boundaries(self) -> None:
        s = TimeScale((datetime(2024, 1, 1, 10, 30), datetime(2024, 1, 1, 15, 10)))
        s.nice(5, TimeInterval.HOUR)
        self.assertEqual(s.domain(), (datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 16)))

    def test_month_formatter(self) -> None:
        s = TimeScale((datetime(2024, 1, 1), datetime(2024, 12, 31)))
        self.assertEqual(s.tick_format(12)(datetime(2024, 3, 1)), "Mar")

    def test_unknown_and_nat_inputs(self) -> None:
        s = TimeScale((datetime(2024, 1, 1), datetime(2024, 1, 2)), (5, 10))
        self.assertEqual(s.forward("yesterday"), px(0))
        self.assertEqual(s.forward(np.datetime64("NaT")), px(5))

    def test_numpy_datetime_input(self) -> None:
        s = TimeScale((np.datetime64("2024-01-01"), np.datetime64("2024-01-03")), (0, 2))
        self.assertAlmostEqual(s.forward(np.datetime64("2024-01-02")).value, 1.0)

    def test_mixed_naive_and_aware_domain_is_rejected(self) -> None:
        with self.assertRaises(ScaleDomainError):
            TimeScale((datetime(2024, 1, 1), datetime(2024, 1, 2, tzinfo=timezone.utc)))


class BandScaleTests(unittest.TestCase):
    def test_three_equal_bands(self) -> None:
        s = BandScale(["A", "B", "C"], (0, 300))
        self.assertEqual(s.forward("A"), px(0))
        self.assertEqual(s.forward("B"), px(100))
        self.assertEqual(s.forward("C"), px(200))
        self.assertEqual(s.bandwidth(), 100.0)
        self.assertEqual(s.center("B"), px(150))

    def test_padding_law(self) -> None:
        s = BandScale(["a", "b", "c", "d"], (0, 400), padding_inner=0.2, padding_outer=0.1)
        n = 4
        step = s.step()
        self.assertAlmostEqual(n * step - 0.2 * step + 2 * 0.1 * step, 400.0)
        self.assertAlmostEqual(s.bandwidth(), step * 0.8)
        self.assertAlmostEqual(s.forward("a").value, 10.0)
        self.assertAlmostEqual(s.forward("b").value, 110.0)

    def test_reversed_range_mirrors(self) -> None:
        s = BandScale(["A", "B", "C"], (300, 0))
        self.assertEqual([s.forward(c).value for c in "ABC"], [200.0, 100.0, 0.0])
        self.assertEqual(s.bandwidth(), 100.0)

    def test_rounding_produces_integer_positions(self) -> None:
        s = BandScale(["a", "b", "c"], (0, 100), round=True)
        self.assertEqual(s.step(), 33)
        self.assertEqual(s.bandwidth(), 33)
        for c in "abc":
            self.assertTrue(float(s.forward(c).value).is_integer())

    def test_unknown_category(self) -> None:
        s = BandScale(["A"], (0, 10))
        self.assertIsNone(s.index("Z"))
        self.assertEqual(s.forward("Z"), px(0))

    def test_duplicates_keep_first_position(self) -> None:
        s = BandScale(["A", "B", "A"], (0, 200))
        self.assertEqual(s.domain(), ("A", "B"))

    def test_empty_domain_is_rejected(self) -> None:
        with self.assertRaises(ScaleDomainError):
            BandScale([], (0, 100))

    def test_setters_rescale(self) -> None:
        s = BandScale(["A", "B"], (0, 100)).set_padding(0.5)
        self.assertEqual(s.padding_inner, 0.5)
        self.assertEqual(s.padding_outer, 0.5)
        s.set_range((0, 250))
        self.assertAlmostEqual(s.step(), 100.0)

    def test_inner_and_outer_padding_chain(self) -> None:
        s = BandScale(["A", "B"], (0, 100))
        self.assertIs(s.set_padding_inner(0.5), s)
        self.assertAlmostEqual(s.step(), 100.0 / 1.5)
        self.assertAlmostEqual(s.bandwidth(), 100.0 / 3.0)
        self.assertEqual(s.padding_outer, 0.0)
        s.set_padding_outer(0.25)
        self.assertEqual(s.padding_inner, 0.5)
        self.assertAlmostEqual(s.step(), 50.0)
        self.assertAlmostEqual(s.bandwidth(), 25.0)
        self.assertAlmostEqual(s.forward("A").value, 12.5)
        self.assertAlmostEqual(s.forward("B").value, 62.5)
        with self.assertRaises(ScaleDomainError):
            s.set_padding_outer(-1)


class PointScaleTests(unittest.TestCase):
    def test_even_spacing(self) -> None:
        s = PointScale(["a", "b", "c"], (0, 100))
        values = [s.forward(c).value for c in "abc"]
        self.assertEqual(values, [0.0, 50.0, 100.0])
        self.assertEqual(s.bandwidth(), 0.0)
        self.assertTrue(all(math.isclose(b - a, s.step()) for a, b in zip(values, values[1:])))

    def test_padding(self) -> None:
        s = PointScale(["a", "b", "c"], (0, 90), padding=0.5)
        self.assertAlmostEqual(s.step(), 30.0)
        self.assertAlmostEqual(s.forward("a").value, 15.0)

    def test_single_point_uses_alignment(self) -> None:
        self.assertEqual(PointScale(["only"], (0, 100), align=0.25).forward("only").value, 25.0)


class OrdinalScaleTests(unittest.TestCase):
    def test_cycles_through_range(self) -> None:
        s = OrdinalScale(["a", "b", "c"], ["red", "blue"])
        self.assertEqual(s.forward("a"), "red")
        self.assertEqual(s.forward("c"), "red")
        self.assertEqual(s.forward_normalized("b"), 0.5)

    def test_unknown_fallback(self) -> None:
        s = OrdinalScale(["a"], ["red"])
        self.assertEqual(s.forward("zzz"), px(0))
        s.set_unknown("gray")
        self.assertEqual(s.forward("zzz"), "gray")
        self.assertEqual(s.forward_normalized("a"), 0.5)


class ColorScaleTests(unittest.TestCase):
    def test_sequential_rgb_ramp(self) -> None:
        s = SequentialColorScale((0, 10), ("#000000", "#FFFFFF"), space="rgb")
        self.assertEqual(s.forward(0).hex, "#000000")
        self.assertEqual(s.forward(10).hex, "#FFFFFF")
        self.assertAlmostEqual(s.forward(5).r, 0.5)
        self.assertEqual(s.forward(20).hex, "#FFFFFF")

    def test_sequential_interpolator(self) -> None:
        s = SequentialColorScale((0, 10), ("#000000", "#FFFFFF"), space="rgb", interpolate=lambda t: t * t)
        self.assertAlmostEqual(s.forward(5).r, 0.25)

    def test_sequential_setters_chain(self) -> None:
        s = SequentialColorScale((0, 10), ("#000000", "#FFFFFF"))
        self.assertIs(s.space, GradientSpace.OKLCH)
        self.assertIs(s.set_space("rgb"), s)
        self.assertIs(s.space, GradientSpace.RGB)
        self.assertIs(s.set_interpolate(lambda t: t * t), s)
        self.assertAlmostEqual(s.forward(5).r, 0.25)
        s.set_interpolate(None)
        self.assertAlmostEqual(s.forward(5).r, 0.5)

    def test_sequential_oklch_endpoints(self) -> None:
        s = SequentialColorScale((0, 1), ("#3B82F6", "#EF4444"))
        self.assertEqual(s.forward(0).hex, "#3B82F6")
        self.assertEqual(s.forward(1).hex, "#EF4444")
        self.assertEqual(len(s.samples(5)), 5)

    def test_diverging(self) -> None:
        s = DivergingColorScale((-1, 1), ("#0000FF", "#FFFFFF", "#FF0000"), space="rgb")
        self.assertEqual(s.forward(-1).hex, "#0000FF")
        self.assertEqual(s.forward(0).hex, "#FFFFFF")
        self.assertEqual(s.forward(1).hex, "#FF0000")
        self.assertAlmostEqual(s.forward_normalized(-0.5), 0.25)
        self.assertAlmostEqual(s.forward_normalized(0.5), 0.75)

    def test_diverging_custom_midpoint(self) -> None:
        s = DivergingColorScale((0, 100), midpoint=20)
        self.assertEqual(s.forward_normalized(20), 0.5)
        self.assertAlmostEqual(s.forward_normalized(10), 0.25)

    def test_diverging_set_midpoint(self) -> None:
        s = DivergingColorScale((0, 100))
        self.assertEqual(s.midpoint, 50.0)
        self.assertIs(s.set_midpoint(20), s)
        self.assertEqual(s.forward_normalized(20), 0.5)
        self.assertAlmostEqual(s.forward_normalized(60), 0.75)
        s.set_midpoint(None)
        self.assertEqual(s.midpoint, 50.0)

    def test_diverging_needs_three_anchors(self) -> None:
        with self.assertRaises(ScaleDomainError):
            DivergingColorScale((0, 1), ("#000000", "#FFFFFF"))

    def test_categorical_colors(self) -> None:
        s = CategoricalColorScale(["x", "y"])
        self.assertEqual(s.forward("x").hex, "#3B82F6")
        self.assertEqual(s.forward("y").hex, "#10B981")
        self.assertAlmostEqual(s.forward("nope").r, 0.5)
        s.set_unknown("#000000")
        self.assertEqual(s.forward("nope").hex, "#000000")


if __name__ == "__main__":
    unittest.main()
