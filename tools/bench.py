"""Benchmark throughput of image loading and both fingerprint pipelines."""

from __future__ import annotations

import argparse
import statistics
import time
from pathlib import Path
from typing import Callable, Iterable, Sequence

import numpy as np

from core.fingerprint import fingerprint_dct, fingerprint_original
from utils.image_io import default_registry, load_raster


def _timed(fn: Callable[[], None], repeats: int) -> list[float]:
    timings: list[float] = []
    for _ in range(repeats):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return timings


def _print_stats(label: str, timings: Sequence[float], units: str = "s") -> None:
    mean = statistics.mean(timings)
    stdev = statistics.pstdev(timings) if len(timings) > 1 else 0.0
    best = min(timings)
    worst = max(timings)
    print(
        f"{label:<16} mean={mean:.4f}{units} stdev={stdev:.4f}{units} fastest={best:.4f}{units} slowest={worst:.4f}{units}"
    )


def load_images(paths: Iterable[Path]) -> list[np.ndarray]:
    registry = default_registry()
    images: list[np.ndarray] = []
    for path in paths:
        try:
            images.append(load_raster(path, registry=registry))
        except (OSError, ValueError, RuntimeError) as exc:
            print(f"skip {path}: {exc}")
    if not images:
        raise SystemExit("No valid images found for benchmarking")
    return images


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("images", nargs="+", type=Path, help="Image files to benchmark")
    parser.add_argument("--repeats", type=int, default=5, help="Number of benchmark iterations")
    args = parser.parse_args()

    _print_stats("Load", _timed(lambda: load_images(args.images), args.repeats))
    images = load_images(args.images)
    print(f"Loaded {len(images)} image(s)")

    _print_stats("DCT", _timed(lambda: [fingerprint_dct(image) for image in images], args.repeats))
    _print_stats("Original", _timed(lambda: [fingerprint_original(image) for image in images], args.repeats))


if __name__ == "__main__":
    main()
