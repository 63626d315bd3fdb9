"""Bilinear resampling of rasters onto a fixed grid."""

from __future__ import annotations

import numpy as np

DEFAULT_SIZE = (64, 64)


def _source_coordinates(source: int, target: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    scale = source / target
    coords = (np.arange(target, dtype=np.float64) + 0.5) * scale - 0.5
    coords = np.clip(coords, 0.0, source - 1)
    lower = np.floor(coords).astype(np.intp)
    upper = np.minimum(lower + 1, source - 1)
    weight = coords - lower
    return lower, upper, weight


def bilinear_resize(image: np.ndarray, size: tuple[int, int] = DEFAULT_SIZE) -> np.ndarray:
    """Resize ``image`` to ``size`` (rows, columns) using bilinear weights.

    Works on ``(rows, cols)`` and ``(rows, cols, channels)`` arrays; each
    channel is interpolated independently. Sample positions outside the
    source grid are clamped to its border.
    """
    rows, cols = int(size[0]), int(size[1])
    if rows < 1 or cols < 1:
        raise ValueError(f"target size must be positive, got {size}")

    values = np.asarray(image, dtype=np.float64)
    if values.ndim not in (2, 3):
        raise ValueError(f"expected a 2-D or 3-D array, got shape {values.shape}")
    if values.shape[0] < 1 or values.shape[1] < 1:
        raise ValueError("cannot resample an empty image")

    flat = values.ndim == 2
    if flat:
        values = values[:, :, np.newaxis]

    r0, r1, wr = _source_coordinates(values.shape[0], rows)
    c0, c1, wc = _source_coordinates(values.shape[1], cols)
    wr = wr[:, np.newaxis, np.newaxis]
    wc = wc[np.newaxis, :, np.newaxis]

    top = values[r0][:, c0] * (1.0 - wc) + values[r0][:, c1] * wc
    bottom = values[r1][:, c0] * (1.0 - wc) + values[r1][:, c1] * wc
    resized = top * (1.0 - wr) + bottom * wr

    return resized[:, :, 0] if flat else resized


__all__ = ["DEFAULT_SIZE", "bilinear_resize"]
