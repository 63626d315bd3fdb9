"""Zero-crossing detection over one-dimensional signals."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from core.errors import InvalidWindowError

logger = logging.getLogger(__name__)


def sign_change_magnitude(x: np.ndarray, window: int) -> np.ndarray:
    """Return ``|sign(x[i]) - sign(x[i - window])|`` left-padded with zeros."""
    signs = np.sign(x)
    magnitude = np.zeros(signs.shape[0], dtype=np.float64)
    magnitude[window:] = np.abs(signs[window:] - signs[:-window])
    return magnitude


def is_cross(x: Sequence[float] | np.ndarray, window: int = 3) -> np.ndarray:
    """Flag positions where the sign of ``x`` settles after a change.

    A position is a candidate when the sign difference across ``window``
    samples reaches its maximum for the whole signal. A crossing is confirmed
    where ``window - 1`` consecutive candidates are followed by a
    non-candidate; the first index of that run is flagged.

    Returns a boolean array with the same length as ``x``.
    """
    if window < 1:
        raise InvalidWindowError("window must be a natural number greater than 0")

    values = np.asarray(x, dtype=np.float64).ravel()
    size = values.shape[0]
    matched = np.zeros(size, dtype=bool)

    if size < window:
        logger.warning("Signal of length %d is shorter than window %d", size, window)
        return matched

    magnitude = sign_change_magnitude(values, window)
    candidates = magnitude == magnitude.max()

    # constant or evenly alternating signals flip everywhere
    if candidates.all():
        return ~candidates

    signature = np.ones(window, dtype=bool)
    signature[-1] = False
    # the first window only sees padding
    for start in range(1, size - window + 1):
        if np.array_equal(candidates[start : start + window], signature):
            matched[start] = True
    return matched


__all__ = ["is_cross", "sign_change_magnitude"]
