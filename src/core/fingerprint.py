# src/core/fingerprint.py
"""Fingerprint entry point and the two pipelines behind it.

The ``dct`` algorithm resamples the RGB image to 64x64, reduces it to luma,
takes a separable DCT and thresholds the top-left 8x8 coefficients against
their median. The result is a 64-bit value written as 16 uppercase hex
characters, comparable by Hamming distance.

The ``original`` algorithm takes the HSV value of every pixel, computes a
column-wise FFT, sums the imaginary part of each row and records the gaps
between sign crossings of that signal.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Sequence

import numpy as np

from core.config.schema import FingerprintSettings
from core.errors import MissingInputError
from sig.color import reduce_to_intensity, rgb_to_luma
from sig.encode import encode_crossing_gaps, encode_dct_hash
from sig.resample import bilinear_resize
from sig.transform import column_fft, dct2, round_noise
from utils.image_io import DecoderRegistry, load_raster

log = logging.getLogger(__name__)

PathInput = str | os.PathLike[str]


class Algorithm(str, Enum):
    """Available fingerprint algorithms."""

    DCT = "dct"
    ORIGINAL = "original"

    @classmethod
    def parse(cls, value: "Algorithm | str | None") -> "Algorithm":
        if value is None:
            return cls.DCT
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(repr(member.value) for member in cls)
            raise ValueError(f"algorithm must be one of {choices}, got {value!r}") from None


def _first_path(file: PathInput | Sequence[PathInput] | None) -> Path:
    if file is None:
        raise MissingInputError("file is missing")
    if isinstance(file, (str, os.PathLike)):
        if os.fspath(file) == "":
            raise MissingInputError("file is missing")
        return Path(file)
    paths = list(file)
    if not paths:
        raise MissingInputError("file is missing")
    if len(paths) > 1:
        log.warning("Only the first of %d files will be used: %s", len(paths), paths[0])
    return _first_path(paths[0])


def fingerprint_dct(image: np.ndarray, settings: FingerprintSettings | None = None) -> str:
    """Compute the DCT fingerprint of a float ``(rows, cols, 3)`` raster."""
    cfg = settings or FingerprintSettings()
    size = (cfg.resample_size, cfg.resample_size)
    resized = bilinear_resize(np.asarray(image, dtype=np.float64)[:, :, :3] * 255.0, size)
    luma = rgb_to_luma(resized, floor=True)
    coefficients = dct2(luma, digits=cfg.round_digits)
    return encode_dct_hash(coefficients, block=cfg.dct_block)


def fingerprint_original(image: np.ndarray, settings: FingerprintSettings | None = None) -> list[int]:
    """Compute the legacy FFT zero-crossing fingerprint of a raster."""
    cfg = settings or FingerprintSettings()
    # alpha, if any, is dropped
    rgb = np.asarray(image, dtype=np.float64)[:, :, :3]
    intensity = reduce_to_intensity(
        rgb,
        epsilon=cfg.degeneracy_epsilon,
        legacy_luma_parity=cfg.legacy_luma_parity,
        max_color_value=cfg.max_color_value,
    )
    intensity = round_noise(intensity, cfg.round_digits)
    spectrum = column_fft(intensity, digits=cfg.round_digits)
    return encode_crossing_gaps(spectrum, window=cfg.crossing_window)


def get_fingerprint(
    file: PathInput | Sequence[PathInput] | None,
    algorithm: Algorithm | str | None = None,
    *,
    settings: FingerprintSettings | None = None,
    registry: DecoderRegistry | None = None,
) -> str | list[int]:
    """Return the fingerprint of the PNG, JPEG or BMP image at ``file``.

    ``file`` may also be a gzip-compressed image ending in ``.gz``. When a
    sequence is given only its first entry is used. ``algorithm`` defaults to
    the one configured in ``settings`` (``dct`` unless overridden).
    """
    path = _first_path(file)
    cfg = settings or FingerprintSettings()
    selected = Algorithm.parse(algorithm if algorithm is not None else cfg.algorithm)

    image = load_raster(path, registry=registry)
    log.debug("Loaded %s with shape %s; algorithm=%s", path, image.shape, selected.value)

    if selected is Algorithm.ORIGINAL:
        return fingerprint_original(image, cfg)
    return fingerprint_dct(image, cfg)


__all__ = [
    "Algorithm",
    "fingerprint_dct",
    "fingerprint_original",
    "get_fingerprint",
]
