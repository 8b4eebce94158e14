from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
from matplotlib import colors as mcolors

from dataviz_core.errors import ColorParseError


class GradientSpace(str, Enum):
    RGB = "rgb"
    OKLAB = "oklab"
    OKLCH = "oklch"


@dataclass(frozen=True)
class Color:
    """sRGB color with straight alpha, components in [0, 1]."""

    r: float
    g: float
    b: float
    a: float = 1.0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = float(getattr(self, name))
            if not np.isfinite(value):
                raise ColorParseError(f"color component {name} must be finite")
            object.__setattr__(self, name, min(1.0, max(0.0, value)))

    @classmethod
    def from_rgb255(cls, r: int, g: int, b: int, a: int = 255) -> Color:
        return cls(r / 255.0, g / 255.0, b / 255.0, a / 255.0)

    def rgba(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def rgb255(self) -> tuple[int, int, int]:
        return (int(round(self.r * 255)), int(round(self.g * 255)), int(round(self.b * 255)))

    def with_alpha(self, alpha: float) -> Color:
        return Color(self.r, self.g, self.b, alpha)

    @property
    def hex(self) -> str:
        return to_hex(self)


GRAY = Color(0.5, 0.5, 0.5)
BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)

_M1 = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ]
)
_M2 = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ]
)
_M2_INV = np.linalg.inv(_M2)
_M1_INV = np.linalg.inv(_M1)

# Below this chroma the hue is meaningless and the other endpoint's hue is used.
_ACHROMATIC = 1e-4


def parse_color(value: str | Color | tuple[float, ...]) -> Color:
    """Parse hex strings, CSS/X11 names, or RGB(A) tuples in [0, 1]."""
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.lower() == "none":
            raise ColorParseError("'none' is not a color")
    try:
        r, g, b, a = mcolors.to_rgba(value)
    except (ValueError, TypeError) as exc:
        raise ColorParseError(f"invalid color: {value!r}") from exc
    return Color(r, g, b, a)


def to_hex(color: Color | str) -> str:
    c = parse_color(color)
    return mcolors.to_hex(c.rgba(), keep_alpha=c.a < 1.0).upper()


def luminance(color: Color | str) -> float:
    """WCAG relative luminance."""
    c = parse_color(color)
    lin = _srgb_to_linear(np.array([c.r, c.g, c.b]))
    return float(0.2126 * lin[0] + 0.7152 * lin[1] + 0.0722 * lin[2])


def contrast_text_color(background: Color | str) -> Color:
    return BLACK if luminance(background) > 0.4 else WHITE


def mix(a: Color | str, b: Color | str, t: float, space: GradientSpace | str = GradientSpace.OKLCH) -> Color:
    ca = parse_color(a)
    cb = parse_color(b)
    space = GradientSpace(space)
    t = float(t)
    if not np.isfinite(t):
        t = 0.0
    alpha = ca.a + (cb.a - ca.a) * t
    if space is GradientSpace.RGB:
        rgb = np.array(ca.rgba()[:3]) * (1.0 - t) + np.array(cb.rgba()[:3]) * t
        return Color(float(rgb[0]), float(rgb[1]), float(rgb[2]), alpha)

    lab_a = _rgb_to_oklab(ca)
    lab_b = _rgb_to_oklab(cb)
    if space is GradientSpace.OKLAB:
        lab = lab_a * (1.0 - t) + lab_b * t
        return _oklab_to_color(lab, alpha)

    lch_a = _oklab_to_oklch(lab_a)
    lch_b = _oklab_to_oklch(lab_b)
    if lch_a[1] < _ACHROMATIC:
        lch_a[2] = lch_b[2]
    if lch_b[1] < _ACHROMATIC:
        lch_b[2] = lch_a[2]
    dh = (lch_b[2] - lch_a[2] + 180.0) % 360.0 - 180.0
    lightness = lch_a[0] + (lch_b[0] - lch_a[0]) * t
    chroma = lch_a[1] + (lch_b[1] - lch_a[1]) * t
    hue = (lch_a[2] + dh * t) % 360.0
    return _oklab_to_color(_oklch_to_oklab(np.array([lightness, chroma, hue])), alpha)


def gradient_samples(
    a: Color | str, b: Color | str, n: int, space: GradientSpace | str = GradientSpace.OKLCH
) -> list[Color]:
    if n <= 0:
        return []
    if n == 1:
        return [parse_color(a)]
    return [mix(a, b, i / (n - 1), space) for i in range(n)]


def adjust_lightness(color: Color | str, delta: float) -> Color:
    """Shift OKLab lightness by ``delta`` (positive lightens)."""
    c = parse_color(color)
    lab = _rgb_to_oklab(c)
    lab[0] = min(1.0, max(0.0, lab[0] + delta))
    return _oklab_to_color(lab, c.a)


def _srgb_to_linear(rgb: np.ndarray) -> np.ndarray:
    return np.where(rgb <= 0.04045, rgb / 12.92, ((rgb + 0.055) / 1.055) ** 2.4)


def _linear_to_srgb(rgb: np.ndarray) -> np.ndarray:
    rgb = np.clip(rgb, 0.0, 1.0)
    return np.where(rgb <= 0.0031308, rgb * 12.92, 1.055 * np.power(rgb, 1.0 / 2.4) - 0.055)


def _rgb_to_oklab(c: Color) -> np.ndarray:
    lin = _srgb_to_linear(np.array([c.r, c.g, c.b], dtype=np.float64))
    lms = np.cbrt(_M1 @ lin)
    return _M2 @ lms


def _oklab_to_color(lab: np.ndarray, alpha: float) -> Color:
    lms = (_M2_INV @ lab) ** 3
    rgb = _linear_to_srgb(_M1_INV @ lms)
    return Color(float(rgb[0]), float(rgb[1]), float(rgb[2]), alpha)


def _oklab_to_oklch(lab: np.ndarray) -> np.ndarray:
    chroma = float(np.hypot(lab[1], lab[2]))
    hue = float(np.degrees(np.arctan2(lab[2], lab[1]))) % 360.0
    return np.array([lab[0], chroma, hue])


def _oklch_to_oklab(lch: np.ndarray) -> np.ndarray:
    h = np.radians(lch[2])
    return np.array([lch[0], lch[1] * np.cos(h), lch[1] * np.sin(h)])
