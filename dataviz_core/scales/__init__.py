from dataviz_core.scales.band import BandScale
from dataviz_core.scales.base import CategoricalScale, ContinuousScale, Scale, ScaleKind
from dataviz_core.scales.color import CategoricalColorScale, DivergingColorScale, SequentialColorScale
from dataviz_core.scales.linear import LinearScale
from dataviz_core.scales.log import LogScale
from dataviz_core.scales.ordinal import OrdinalScale
from dataviz_core.scales.point import PointScale
from dataviz_core.scales.pow import PowScale, SqrtScale
from dataviz_core.scales.ticks import format_tick, format_ticks, linear_ticks, nice_number
from dataviz_core.scales.time import TimeInterval, TimeScale

__all__ = [
    "BandScale",
    "CategoricalColorScale",
    "CategoricalScale",
    "ContinuousScale",
    "DivergingColorScale",
    "LinearScale",
    "LogScale",
    "OrdinalScale",
    "PointScale",
    "PowScale",
    "Scale",
    "ScaleKind",
    "SequentialColorScale",
    "SqrtScale",
    "TimeInterval",
    "TimeScale",
    "format_tick",
    "format_ticks",
    "linear_ticks",
    "nice_number",
]
