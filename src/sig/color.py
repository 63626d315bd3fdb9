"""Colour reduction from RGB rasters to single-channel intensity matrices."""

from __future__ import annotations

import logging

import numpy as np

from core.errors import InvalidChannelCountError

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = (0.299, 0.587, 0.114)
# Stored legacy fingerprints were produced with this green weight.
LEGACY_LUMA_WEIGHTS = (0.299, 587.0, 0.114)
HSV_CHANNELS = {"h": 0, "s": 1, "v": 2}
DEFAULT_EPSILON = 1e-10


def _require_rgb(array: np.ndarray) -> np.ndarray:
    values = np.asarray(array, dtype=np.float64)
    if values.ndim != 3:
        raise InvalidChannelCountError(f"array dimensions should be (N, M, 3), got {values.shape}")
    if values.shape[2] != 3:
        raise InvalidChannelCountError(f"unsupported number of channels: {values.shape[2]}, 3 expected")
    return values


def rgb_to_hsv(array: np.ndarray, *, max_color_value: float = 255.0) -> np.ndarray:
    """Convert an ``(N, M, 3)`` RGB array to HSV with every component in ``[0, 1]``."""
    rgb = _require_rgb(array) / float(max_color_value)
    red, green, blue = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    value = rgb.max(axis=2)
    chroma = value - rgb.min(axis=2)
    safe_chroma = np.where(chroma > 0, chroma, 1.0)
    saturation = np.where(value > 0, chroma / np.where(value > 0, value, 1.0), 0.0)

    hue = np.zeros_like(value)
    red_max = (value == red) & (chroma > 0)
    green_max = (value == green) & (chroma > 0) & ~red_max
    blue_max = (chroma > 0) & ~red_max & ~green_max
    hue = np.where(red_max, ((green - blue) / safe_chroma) % 6.0, hue)
    hue = np.where(green_max, (blue - red) / safe_chroma + 2.0, hue)
    hue = np.where(blue_max, (red - green) / safe_chroma + 4.0, hue)
    hue = hue / 6.0

    return np.stack([hue, saturation, value], axis=2)


def rgb_to_value(array: np.ndarray, which: str = "v", *, max_color_value: float = 255.0) -> np.ndarray:
    """Return one HSV component of ``array`` as an ``(N, M)`` matrix."""
    key = which.lower()
    if key not in HSV_CHANNELS:
        raise ValueError(f"which must be one of 'h', 's', 'v', got {which!r}")
    hsv = rgb_to_hsv(array, max_color_value=max_color_value)
    return hsv[..., HSV_CHANNELS[key]]


def rgb_to_luma(array: np.ndarray, *, parity: bool = False, floor: bool = False) -> np.ndarray:
    """Weighted luma of an ``(N, M, 3)`` array.

    ``parity`` selects the legacy weights whose green term is a thousand times
    too large; it exists only to reproduce fingerprints stored by older
    releases.
    """
    rgb = _require_rgb(array)
    red_w, green_w, blue_w = LEGACY_LUMA_WEIGHTS if parity else LUMA_WEIGHTS
    luma = rgb[..., 0] * red_w + rgb[..., 1] * green_w + rgb[..., 2] * blue_w
    if floor:
        luma = np.floor(luma)
    return luma


def is_degenerate(matrix: np.ndarray, epsilon: float = DEFAULT_EPSILON) -> bool:
    """Return True when ``matrix`` is numerically constant."""
    if matrix.size == 0:
        return True
    return bool(abs(float(matrix.max()) - float(matrix.min())) < epsilon)


def reduce_to_intensity(
    array: np.ndarray,
    *,
    epsilon: float = DEFAULT_EPSILON,
    legacy_luma_parity: bool = False,
    max_color_value: float = 255.0,
) -> np.ndarray:
    """Reduce an RGB raster to its HSV value, or to luma when the value is flat."""
    matrix = rgb_to_value(array, "v", max_color_value=max_color_value)
    if is_degenerate(matrix, epsilon):
        logger.debug("HSV value is constant; falling back to luma (parity=%s)", legacy_luma_parity)
        matrix = rgb_to_luma(array, parity=legacy_luma_parity)
    return matrix


__all__ = [
    "DEFAULT_EPSILON",
    "LEGACY_LUMA_WEIGHTS",
    "LUMA_WEIGHTS",
    "is_degenerate",
    "reduce_to_intensity",
    "rgb_to_hsv",
    "rgb_to_luma",
    "rgb_to_value",
]
