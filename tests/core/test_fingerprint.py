"""Tests for the fingerprint entry point and both pipelines."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable

import numpy as np
import pytest
from PIL import Image

from core.config import FingerprintSettings
from core.errors import MissingInputError, UnsupportedFormatError
from core.fingerprint import Algorithm, fingerprint_dct, fingerprint_original, get_fingerprint
from sig.compare import hamming_distance

HEX_PATTERN = re.compile(r"^[0-9A-F]{16}$")
# re-encoding noise should stay well under this many flipped bits
STABILITY_BITS = 8


def test_dct_fingerprint_is_deterministic(plot_png: Path) -> None:
    first = get_fingerprint(plot_png)
    second = get_fingerprint(plot_png, "dct")

    assert isinstance(first, str)
    assert HEX_PATTERN.match(first)
    assert first == second


@pytest.mark.parametrize("size", [(9, 9), (640, 480), (33, 200), (64, 64)])
def test_dct_fingerprint_has_fixed_width(
    tmp_path: Path, plot_factory: Callable[..., Image.Image], size: tuple[int, int]
) -> None:
    path = tmp_path / f"plot-{size[0]}x{size[1]}.png"
    plot_factory((max(size[0], 60), max(size[1], 60))).resize(size).save(path)

    value = get_fingerprint(path)

    assert isinstance(value, str) and HEX_PATTERN.match(value)


def test_compressed_input_gives_identical_fingerprints(plot_png: Path, plot_png_gz: Path) -> None:
    assert get_fingerprint(plot_png_gz) == get_fingerprint(plot_png)
    assert get_fingerprint(plot_png_gz, Algorithm.ORIGINAL) == get_fingerprint(plot_png, Algorithm.ORIGINAL)


def test_jpeg_recompression_is_perceptually_stable(tmp_path: Path, plot_factory: Callable[..., Image.Image]) -> None:
    plot = plot_factory((320, 240))
    high = tmp_path / "high.jpg"
    low = tmp_path / "low.jpg"
    plot.save(high, format="JPEG", quality=95)
    plot.save(low, format="JPEG", quality=75)

    assert hamming_distance(get_fingerprint(high), get_fingerprint(low)) <= STABILITY_BITS


def test_png_and_jpeg_of_same_plot_are_close(tmp_path: Path, plot_factory: Callable[..., Image.Image]) -> None:
    plot = plot_factory((320, 240))
    png = tmp_path / "plot.png"
    jpg = tmp_path / "plot.jpg"
    plot.save(png)
    plot.save(jpg, format="JPEG", quality=90)

    assert hamming_distance(get_fingerprint(png), get_fingerprint(jpg)) <= STABILITY_BITS


def test_structurally_different_images_differ() -> None:
    ramp = np.linspace(1.0, 0.0, 128)
    horizontal = np.repeat(np.tile(ramp, (96, 1))[:, :, np.newaxis], 3, axis=2)
    vertical = np.repeat(np.tile(ramp[:96, np.newaxis], (1, 128))[:, :, np.newaxis], 3, axis=2)

    assert hamming_distance(fingerprint_dct(horizontal), fingerprint_dct(vertical)) >= 6


def test_uniform_image_yields_well_formed_fingerprints(caplog: pytest.LogCaptureFixture) -> None:
    image = np.full((30, 40, 3), 0.5)

    with caplog.at_level(logging.DEBUG, logger="sig.color"):
        legacy = fingerprint_original(image)
    value = fingerprint_dct(image)

    assert value == "8000000000000000"
    assert legacy == []
    assert any("falling back to luma" in record.message for record in caplog.records)


def test_original_fingerprint_is_a_gap_sequence(plot_png: Path) -> None:
    value = get_fingerprint(plot_png, "original")

    assert isinstance(value, list)
    assert all(isinstance(gap, int) and gap >= 0 for gap in value)
    assert value == get_fingerprint(plot_png, "ORIGINAL")


def test_original_fingerprint_finds_banding() -> None:
    rows = np.arange(120)
    stripes = (np.sin(rows / 4.0) > 0).astype(np.float64) * 0.8 + 0.1
    image = np.repeat(np.tile(stripes[:, np.newaxis], (1, 30))[:, :, np.newaxis], 3, axis=2)
    image[:, :, 0] *= 0.5

    value = fingerprint_original(image)

    assert isinstance(value, list)
    assert all(gap > 0 for gap in value)


def test_alpha_channel_is_ignored() -> None:
    rng = np.random.default_rng(4)
    rgb = rng.random((50, 70, 3))
    rgba = np.concatenate([rgb, rng.random((50, 70, 1))], axis=2)

    assert fingerprint_dct(rgba) == fingerprint_dct(rgb)
    assert fingerprint_original(rgba) == fingerprint_original(rgb)


def test_algorithm_comes_from_settings(plot_png: Path) -> None:
    settings = FingerprintSettings(algorithm="original")

    assert isinstance(get_fingerprint(plot_png, settings=settings), list)
    assert isinstance(get_fingerprint(plot_png, "dct", settings=settings), str)


def test_unknown_algorithm_is_rejected(plot_png: Path) -> None:
    with pytest.raises(ValueError, match="algorithm"):
        get_fingerprint(plot_png, "wavelet")


@pytest.mark.parametrize("missing", [None, "", []])
def test_missing_input(missing: object) -> None:
    with pytest.raises(MissingInputError):
        get_fingerprint(missing)  # type: ignore[arg-type]


def test_extra_inputs_warn_and_use_first(
    plot_png: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    other = tmp_path / "ignored.gif"

    with caplog.at_level(logging.WARNING, logger="core.fingerprint"):
        value = get_fingerprint([plot_png, other])

    assert value == get_fingerprint(plot_png)
    assert any("Only the first" in record.message for record in caplog.records)


class _PlotPath:
    def __init__(self, path: str | Path) -> None:
        self._path = path

    def __fspath__(self) -> str:
        return str(self._path)


def test_any_path_like_input_is_accepted(plot_png: Path) -> None:
    assert get_fingerprint(_PlotPath(plot_png)) == get_fingerprint(plot_png)
    assert get_fingerprint([_PlotPath(plot_png)]) == get_fingerprint(str(plot_png))


def test_empty_path_like_is_missing() -> None:
    with pytest.raises(MissingInputError):
        get_fingerprint(_PlotPath(""))


def test_unsupported_file(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedFormatError):
        get_fingerprint(tmp_path / "plot.tiff")


def test_algorithm_parse() -> None:
    assert Algorithm.parse(None) is Algorithm.DCT
    assert Algorithm.parse(" Original ") is Algorithm.ORIGINAL
    assert Algorithm.parse(Algorithm.DCT) is Algorithm.DCT


def test_rounding_precision_is_configurable() -> None:
    rng = np.random.default_rng(21)
    image = rng.random((40, 40, 3))

    unrounded = fingerprint_dct(image, FingerprintSettings(round_digits=None))
    rounded = fingerprint_dct(image, FingerprintSettings(round_digits=8))

    assert HEX_PATTERN.match(unrounded) and HEX_PATTERN.match(rounded)
    assert unrounded == rounded
