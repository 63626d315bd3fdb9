"""Distance helpers for comparing stored fingerprints."""

from __future__ import annotations

from typing import Sequence

Fingerprint = str | Sequence[int]


def hamming_distance(a: str, b: str) -> int:
    """Count the differing bits between two hex fingerprints of equal width."""
    if len(a) != len(b):
        raise ValueError(f"fingerprints differ in width: {len(a)} != {len(b)}")
    return (int(a, 16) ^ int(b, 16)).bit_count()


def gap_distance(a: Sequence[int], b: Sequence[int]) -> int:
    """Sum of absolute gap differences; unmatched trailing gaps count in full."""
    shared = min(len(a), len(b))
    distance = sum(abs(int(x) - int(y)) for x, y in zip(a[:shared], b[:shared]))
    distance += sum(abs(int(x)) for x in a[shared:])
    distance += sum(abs(int(y)) for y in b[shared:])
    return distance


def distance(a: Fingerprint, b: Fingerprint) -> int:
    """Distance between two fingerprints of the same representation."""
    if isinstance(a, str) and isinstance(b, str):
        return hamming_distance(a, b)
    if isinstance(a, str) or isinstance(b, str):
        raise TypeError("cannot compare a DCT fingerprint with a legacy fingerprint")
    return gap_distance(a, b)


def is_similar(a: Fingerprint, b: Fingerprint, *, threshold: int = 0) -> bool:
    """Return True when ``a`` and ``b`` are within ``threshold`` of each other."""
    return distance(a, b) <= threshold


__all__ = ["Fingerprint", "distance", "gap_distance", "hamming_distance", "is_similar"]
