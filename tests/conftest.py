"""Shared pytest fixtures."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import Callable, Iterator

import numpy as np
import pytest
from PIL import Image, ImageDraw

from core.config import AppPaths, configure


def draw_plot(size: tuple[int, int] = (240, 180)) -> Image.Image:
    """Render a small line plot resembling test-suite output."""
    width, height = size
    image = Image.new("RGB", size, color=(255, 255, 255))
    draw = ImageDraw.Draw(image)
    margin = 20
    draw.rectangle([margin, margin, width - margin, height - margin], outline=(0, 0, 0), width=2)
    xs = np.linspace(margin, width - margin, 60)
    ys = height / 2 - np.sin(np.linspace(0, 2 * np.pi, 60)) * (height / 2 - margin - 10)
    draw.line(list(zip(xs.tolist(), ys.tolist())), fill=(200, 30, 30), width=3)
    draw.rectangle([width // 2, height // 2, width - margin - 10, height - margin - 10], fill=(40, 90, 200))
    draw.ellipse([margin + 10, margin + 10, margin + 60, margin + 50], fill=(20, 160, 60))
    return image


def gzip_file(source: Path) -> Path:
    target = source.with_name(source.name + ".gz")
    with gzip.open(target, "wb") as handle:
        handle.write(source.read_bytes())
    return target


@pytest.fixture
def plot_factory() -> Callable[..., Image.Image]:
    return draw_plot


@pytest.fixture
def gzip_factory() -> Callable[[Path], Path]:
    return gzip_file


@pytest.fixture
def plot_png(tmp_path: Path) -> Path:
    path = tmp_path / "plot.png"
    draw_plot().save(path, format="PNG")
    return path


@pytest.fixture
def plot_png_gz(plot_png: Path) -> Path:
    return gzip_file(plot_png)


class _DummyDirs:
    def __init__(self, root: Path) -> None:
        self.user_data_dir = str(root / "data")
        self.user_config_dir = str(root / "config")


def make_app_paths(root: Path) -> AppPaths:
    def factory(_: str) -> _DummyDirs:
        return _DummyDirs(root)

    return AppPaths(env={}, platform_dirs_factory=factory)


@pytest.fixture
def app_paths(tmp_path: Path) -> Iterator[AppPaths]:
    paths = make_app_paths(tmp_path)
    configure(paths)
    yield paths
    configure(AppPaths())
