"""Frequency-domain transforms used by the fingerprint pipelines."""

from __future__ import annotations

from functools import lru_cache

import numpy as np

DEFAULT_DIGITS = 8


def round_noise(values: np.ndarray, digits: int | None = DEFAULT_DIGITS) -> np.ndarray:
    """Round ``values`` to ``digits`` decimal places; ``None`` keeps them as is.

    Complex inputs have their real and imaginary parts rounded separately.
    """
    if digits is None:
        return values
    return np.round(values, int(digits))


@lru_cache(maxsize=16)
def dct_matrix(n: int) -> np.ndarray:
    """Return the unnormalised DCT-II basis with ``out[k, m] = cos(pi / n * (m + 0.5) * k)``."""
    if n < 1:
        raise ValueError(f"DCT length must be positive, got {n}")
    k = np.arange(n, dtype=np.float64)[:, np.newaxis]
    m = np.arange(n, dtype=np.float64)[np.newaxis, :]
    basis = np.cos(np.pi / n * (m + 0.5) * k)
    basis.setflags(write=False)
    return basis


def dct1(values: np.ndarray, axis: int = -1) -> np.ndarray:
    """Type II DCT of ``values`` along ``axis``."""
    data = np.moveaxis(np.asarray(values, dtype=np.float64), axis, -1)
    transformed = data @ dct_matrix(data.shape[-1]).T
    return np.moveaxis(transformed, -1, axis)


def dct2(matrix: np.ndarray, *, digits: int | None = DEFAULT_DIGITS) -> np.ndarray:
    """Separable 2-D DCT: rows first, then columns, rounding after each pass."""
    data = np.asarray(matrix, dtype=np.float64)
    if data.ndim != 2:
        raise ValueError(f"dct2 expects a 2-D matrix, got shape {data.shape}")
    rows = round_noise(dct1(data, axis=1), digits)
    return round_noise(dct1(rows, axis=0), digits)


def column_fft(matrix: np.ndarray, *, digits: int | None = DEFAULT_DIGITS) -> np.ndarray:
    """FFT of every column of ``matrix`` over the row dimension."""
    data = np.asarray(matrix, dtype=np.float64)
    if data.ndim != 2:
        raise ValueError(f"column_fft expects a 2-D matrix, got shape {data.shape}")
    return round_noise(np.fft.fft(data, axis=0), digits)


__all__ = ["DEFAULT_DIGITS", "column_fft", "dct1", "dct2", "dct_matrix", "round_noise"]
