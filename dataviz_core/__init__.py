from dataviz_core.annotations import (
    AnnotationLayer,
    Arrow,
    Orientation,
    ReferenceLine,
    ReferenceRegion,
    TextAnnotation,
)
from dataviz_core.axis import Axis, AxisOrientation, AxisStyle, Tick
from dataviz_core.color import Color, GradientSpace, gradient_samples, luminance, mix, parse_color, to_hex
from dataviz_core.config import ChartTheme, DEFAULT_THEME, load_theme, validate_theme
from dataviz_core.errors import (
    ChartDataError,
    ColorParseError,
    DatavizError,
    ScaleDomainError,
    ThemeError,
    UnitMismatchError,
)
from dataviz_core.ids import GradientIdAllocator, next_gradient_id
from dataviz_core.primitives import Bounds, Circle, Line, LinearGradient, Path, Polygon, Primitive, Rect, Style, Text, emit
from dataviz_core.units import Unit, UnitValue, em, pct, px, rem, user

__all__ = [
    "AnnotationLayer",
    "Arrow",
    "Axis",
    "AxisOrientation",
    "AxisStyle",
    "Bounds",
    "ChartDataError",
    "ChartTheme",
    "Circle",
    "Color",
    "ColorParseError",
    "DEFAULT_THEME",
    "DatavizError",
    "GradientIdAllocator",
    "GradientSpace",
    "Line",
    "LinearGradient",
    "Orientation",
    "Path",
    "Polygon",
    "Primitive",
    "Rect",
    "ReferenceLine",
    "ReferenceRegion",
    "ScaleDomainError",
    "Style",
    "Text",
    "TextAnnotation",
    "ThemeError",
    "Tick",
    "Unit",
    "UnitMismatchError",
    "UnitValue",
    "em",
    "emit",
    "gradient_samples",
    "load_theme",
    "luminance",
    "mix",
    "next_gradient_id",
    "parse_color",
    "pct",
    "px",
    "rem",
    "to_hex",
    "user",
    "validate_theme",
]
