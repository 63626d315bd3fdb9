"""Terminal encoders turning frequency data into fingerprints."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from sig.crossing import is_cross

DEFAULT_BLOCK = 8
DEFAULT_WINDOW = 3


def bits_to_hex(bits: Iterable[bool]) -> str:
    """Pack ``bits`` most-significant first into an uppercase hex string."""
    flat = [bool(bit) for bit in bits]
    if not flat or len(flat) % 4:
        raise ValueError(f"bit count must be a positive multiple of 4, got {len(flat)}")
    value = 0
    for bit in flat:
        value = (value << 1) | int(bit)
    return f"{value:0{len(flat) // 4}X}"


def hex_to_bits(value: str) -> np.ndarray:
    """Unpack a hex fingerprint into a boolean array, most-significant first."""
    text = value.strip()
    number = int(text, 16)
    width = len(text) * 4
    return np.array([(number >> (width - 1 - i)) & 1 for i in range(width)], dtype=bool)


def encode_dct_hash(dct: np.ndarray, *, block: int = DEFAULT_BLOCK) -> str:
    """Threshold the low-frequency ``block`` x ``block`` corner against its median."""
    coefficients = np.asarray(dct, dtype=np.float64)
    if coefficients.ndim != 2 or min(coefficients.shape) < block:
        raise ValueError(f"need at least a {block}x{block} matrix, got shape {coefficients.shape}")
    corner = coefficients[:block, :block]
    bits = corner > np.median(corner)
    return bits_to_hex(bits.ravel(order="C"))


def encode_crossing_gaps(spectrum: np.ndarray, *, window: int = DEFAULT_WINDOW) -> list[int]:
    """Gaps between sign crossings of the row-summed imaginary spectrum."""
    signal = np.imag(np.asarray(spectrum)).sum(axis=1)
    crossings = np.flatnonzero(is_cross(signal, window))
    return [int(gap) for gap in np.diff(crossings)]


__all__ = [
    "DEFAULT_BLOCK",
    "DEFAULT_WINDOW",
    "bits_to_hex",
    "encode_crossing_gaps",
    "encode_dct_hash",
    "hex_to_bits",
]
