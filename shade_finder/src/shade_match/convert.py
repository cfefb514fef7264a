from __future__ import annotations

import re

import numpy as np
from skimage import color as skcolor

from .errors import InvalidColorInput
from .models import LABColor, RGBColor

_HEX_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Linear sRGB -> XYZ, D65 primaries.
_XYZ_FROM_LINEAR_RGB = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ],
    dtype=np.float64,
)
_D65_WHITE = np.array([95.047, 100.0, 108.883], dtype=np.float64)

_LAB_EPSILON = 0.008856


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """Undo the sRGB transfer curve on values already scaled to [0, 1]."""
    values = np.asarray(values, dtype=np.float64)
    return np.where(
        values <= 0.04045,
        values / 12.92,
        np.power((values + 0.055) / 1.055, 2.4),
    )


def srgb_to_xyz_array(rgb: np.ndarray) -> np.ndarray:
    """Convert ``(..., 3)`` sRGB values in [0, 255] to XYZ scaled to Y=100."""
    linear = srgb_to_linear(np.asarray(rgb, dtype=np.float64) / 255.0)
    return (linear @ _XYZ_FROM_LINEAR_RGB.T) * 100.0


def xyz_to_lab_array(xyz: np.ndarray) -> np.ndarray:
    normalized = np.asarray(xyz, dtype=np.float64) / _D65_WHITE
    # Linear segment near zero keeps the curve from going vertical.
    f = np.where(
        normalized > _LAB_EPSILON,
        np.cbrt(normalized),
        7.787 * normalized + 16.0 / 116.0,
    )
    l_star = 116.0 * f[..., 1] - 16.0
    a_star = 500.0 * (f[..., 0] - f[..., 1])
    b_star = 200.0 * (f[..., 1] - f[..., 2])
    return np.stack([l_star, a_star, b_star], axis=-1)


def srgb_to_lab_array(rgb: np.ndarray) -> np.ndarray:
    """Vectorised sRGB (0..255) to CIE LAB. Input is not clamped."""
    return xyz_to_lab_array(srgb_to_xyz_array(rgb))


def rgb_to_lab(rgb: RGBColor) -> LABColor:
    lab = srgb_to_lab_array(np.array(rgb.as_tuple(), dtype=np.float64))
    return LABColor(float(lab[0]), float(lab[1]), float(lab[2]))


def hex_to_rgb(value: str) -> RGBColor:
    if not isinstance(value, str) or not _HEX_PATTERN.match(value.strip()):
        raise InvalidColorInput(f"invalid hex color {value!r}, expected '#RRGGBB'")

    digits = value.strip()[1:]
    return RGBColor(
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def rgb_to_hex(rgb: RGBColor) -> str:
    return rgb.hex


def lab_to_rgb(lab: LABColor) -> RGBColor:
    """Map a LAB value back to the nearest displayable 8-bit sRGB color."""
    lab_arr = np.array(lab.as_tuple(), dtype=np.float64).reshape(1, 1, 3)
    rgb = skcolor.lab2rgb(lab_arr).reshape(3)
    clipped = np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)
    return RGBColor(int(clipped[0]), int(clipped[1]), int(clipped[2]))
