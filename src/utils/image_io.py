"""Image loading helpers producing float RGB rasters, built atop Pillow."""

from __future__ import annotations

import contextlib
import gzip
import logging
import math
import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path
from typing import Iterator, Mapping, Protocol, runtime_checkable

import numpy as np
from PIL import Image

from core.errors import UnexpectedShapeError, UnsupportedFormatError

logger = logging.getLogger(__name__)

GZIP_SUFFIX = ".gz"


class FormatTag(str, Enum):
    """Raster formats the loader knows how to dispatch."""

    PNG = "png"
    JPEG = "jpeg"
    BMP = "bmp"

    @property
    def pillow_format(self) -> str:
        return self.value.upper()


EXTENSION_TAGS: Mapping[str, FormatTag] = {
    ".png": FormatTag.PNG,
    ".jpg": FormatTag.JPEG,
    ".jpeg": FormatTag.JPEG,
    ".bmp": FormatTag.BMP,
}


@runtime_checkable
class Decoder(Protocol):
    """Interface every format decoder must satisfy."""

    def decode(self, path: Path) -> np.ndarray:
        """Return samples laid out as ``[row, col]`` or ``[row, col, channel]``."""


def _open_pixels(path: Path, expected: FormatTag) -> Image.Image:
    with Image.open(path) as img:
        if img.format and img.format != expected.pillow_format:
            logger.debug("%s declares %s but contains %s", path, expected.value, img.format)
        img.load()
        return img.copy()


def _sample_scale(array: np.ndarray, mode: str) -> float:
    # 16-bit greyscale PNGs decode as "I;16" or, on older Pillow, "I"
    if mode == "I" or mode.startswith("I;16"):
        return 65535.0
    if array.dtype == np.uint8:
        return 255.0
    return 1.0


class PillowDecoder:
    """Decode PNG and JPEG files into samples scaled to ``[0, 1]``."""

    def __init__(self, format_tag: FormatTag) -> None:
        self.format_tag = format_tag

    def decode(self, path: Path) -> np.ndarray:
        img = _open_pixels(path, self.format_tag)
        if img.mode == "P":
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")
        elif img.mode == "1":
            img = img.convert("L")
        elif img.mode not in {"L", "LA", "RGB", "RGBA", "I", "I;16", "I;16B", "I;16L", "F"}:
            img = img.convert("RGB")
        array = np.asarray(img)
        scale = _sample_scale(array, img.mode)
        return array.astype(np.float64) / scale

    def __repr__(self) -> str:
        return f"PillowDecoder({self.format_tag.value})"


class BmpDecoder:
    """Decode BMP files from raw samples.

    Raw sample values are brought into a display-like range by dividing by
    ``2 ** floor(sqrt(max))``. Palette bitmaps are returned as their index
    matrix.
    """

    format_tag = FormatTag.BMP

    def decode(self, path: Path) -> np.ndarray:
        img = _open_pixels(path, self.format_tag)
        if img.mode == "1":
            img = img.convert("L")
        elif img.mode not in {"L", "P", "RGB", "RGBA"}:
            img = img.convert("RGB")
        array = np.asarray(img).astype(np.float64)
        peak = float(array.max()) if array.size else 0.0
        power = math.floor(math.sqrt(peak)) if peak > 0 else 0
        return array / (2.0**power)

    def __repr__(self) -> str:
        return "BmpDecoder()"


class UnavailableDecoder:
    """Placeholder registered when a format's decoding capability is missing."""

    def __init__(self, format_tag: FormatTag, capability: str) -> None:
        self.format_tag = format_tag
        self.capability = capability

    def decode(self, path: Path) -> np.ndarray:
        raise UnsupportedFormatError(
            f"the {self.capability} capability is needed to read {self.format_tag.value} file {path}"
        )

    def __repr__(self) -> str:
        return f"UnavailableDecoder({self.format_tag.value}, {self.capability!r})"


class DecoderRegistry:
    """Static mapping from :class:`FormatTag` to the decoder handling it."""

    def __init__(self, decoders: Mapping[FormatTag, Decoder] | None = None) -> None:
        self._decoders: dict[FormatTag, Decoder] = {}
        for tag in FormatTag:
            self._decoders[tag] = UnavailableDecoder(tag, f"{tag.value} decoder")
        for tag, decoder in (decoders or {}).items():
            self.register(tag, decoder)

    def register(self, tag: FormatTag, decoder: Decoder) -> None:
        if not isinstance(decoder, Decoder):
            raise TypeError(f"{decoder!r} does not implement Decoder")
        self._decoders[FormatTag(tag)] = decoder

    def get(self, tag: FormatTag) -> Decoder:
        return self._decoders[FormatTag(tag)]

    def available(self) -> list[FormatTag]:
        return [tag for tag, decoder in self._decoders.items() if not isinstance(decoder, UnavailableDecoder)]


def default_registry() -> DecoderRegistry:
    """Register a Pillow-backed decoder for every format Pillow can open."""
    Image.init()
    decoders: dict[FormatTag, Decoder] = {}
    for tag in FormatTag:
        if tag.pillow_format not in Image.OPEN:
            decoders[tag] = UnavailableDecoder(tag, f"Pillow {tag.pillow_format} plugin")
        elif tag is FormatTag.BMP:
            decoders[tag] = BmpDecoder()
        else:
            decoders[tag] = PillowDecoder(tag)
    return DecoderRegistry(decoders)


def resolve_format(path: str | Path) -> FormatTag:
    """Map a path's (case-insensitive) suffix onto a :class:`FormatTag`."""
    suffix = Path(path).suffix
    tag = EXTENSION_TAGS.get(suffix.lower())
    if tag is None:
        raise UnsupportedFormatError(f"unsupported file type: {suffix or '(none)'}")
    return tag


def normalise_channels(array: np.ndarray) -> np.ndarray:
    """Reshape decoded samples to a float ``(rows, cols, 3)`` raster."""
    values = np.asarray(array, dtype=np.float64)
    if values.ndim < 2 or values.ndim > 3:
        raise UnexpectedShapeError(f"unexpected dimensions of decoded image: {values.shape}")
    if values.ndim == 2:
        values = values[:, :, np.newaxis]
    channels = values.shape[2]
    if channels in (1, 2):
        # grey, optionally with alpha
        values = np.repeat(values[:, :, :1], 3, axis=2)
    elif channels > 3:
        values = values[:, :, :3]
    elif channels == 0:
        raise UnexpectedShapeError(f"decoded image has no channels: {values.shape}")
    return np.ascontiguousarray(values)


@contextlib.contextmanager
def staged_gzip(source: str | Path) -> Iterator[Path]:
    """Decompress ``source`` to a temporary file that is removed on exit."""
    source = Path(source)
    inner = source.with_suffix("")
    fd, tmp_name = tempfile.mkstemp(suffix=inner.suffix.lower())
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as dst, gzip.open(source, "rb") as src:
            shutil.copyfileobj(src, dst)
        logger.debug("Staged %s at %s", source, tmp_path)
        yield tmp_path
    finally:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass


def load_raster(path: str | Path, *, registry: DecoderRegistry | None = None) -> np.ndarray:
    """Load ``path`` as a float64 ``(rows, cols, 3)`` array.

    Files ending in ``.gz`` are decompressed to a temporary file whose
    extension matches the inner format and read from there.
    """
    source = Path(path)
    registry = registry or default_registry()

    if source.suffix.lower() == GZIP_SUFFIX:
        resolve_format(source.with_suffix(""))
        with staged_gzip(source) as staged:
            return load_raster(staged, registry=registry)

    tag = resolve_format(source)
    decoder = registry.get(tag)
    logger.debug("Decoding %s with %r", source, decoder)
    return normalise_channels(decoder.decode(source))


__all__ = [
    "BmpDecoder",
    "Decoder",
    "DecoderRegistry",
    "EXTENSION_TAGS",
    "FormatTag",
    "PillowDecoder",
    "UnavailableDecoder",
    "default_registry",
    "load_raster",
    "normalise_channels",
    "resolve_format",
    "staged_gzip",
]
