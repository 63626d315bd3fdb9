"""Command line entry point for visual-fingerprint."""

from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Sequence

from core.config import AppPaths, get_app_paths, load_settings
from core.errors import FingerprintError
from core.fingerprint import Algorithm, get_fingerprint
from sig.compare import distance
from utils.env import resolve_log_level

logger = logging.getLogger(__name__)

EXIT_SIMILAR = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def setup_logging(level: int | None = None, *, app_paths: AppPaths | None = None, log_file: bool = True) -> None:
    """Configure logging to stderr and, optionally, a rotating log file."""

    level = resolve_log_level() if level is None else level
    root_logger = logging.getLogger()

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # pragma: no cover - best effort cleanup
            pass

    root_logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        "%Y-%m-%d %H:%M:%S",
    )

    # stdout carries fingerprints
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if not log_file:
        return

    paths = app_paths or get_app_paths()
    paths.ensure_data_dirs()
    log_dir = paths.log_dir()
    file_handler = RotatingFileHandler(
        log_dir / "visual-fingerprint.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)


def format_fingerprint(value: str | list[int]) -> str:
    if isinstance(value, str):
        return value
    return " ".join(str(gap) for gap in value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="visual-fingerprint",
        description="Compute a rendering-tolerant fingerprint of a PNG, JPEG or BMP image.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Image file (optionally .gz compressed)")
    parser.add_argument(
        "--algorithm",
        choices=[member.value for member in Algorithm],
        default=None,
        help="Fingerprint algorithm (default: from config, else dct)",
    )
    parser.add_argument("--compare", type=Path, help="Reference image to compare against")
    parser.add_argument("--threshold", type=int, help="Maximum distance still considered similar")
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--log-level", help="Logging level (default: $VFP_LOG_LEVEL or INFO)")
    parser.add_argument("--no-log-file", action="store_true", help="Only log to stderr")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(resolve_log_level(args.log_level), log_file=not args.no_log_file)
    settings = load_settings(args.config)

    try:
        fingerprint = get_fingerprint(args.files, args.algorithm, settings=settings)
        print(format_fingerprint(fingerprint))

        if args.compare is None:
            return EXIT_SIMILAR

        reference = get_fingerprint(args.compare, args.algorithm, settings=settings)
        print(format_fingerprint(reference))
        threshold = settings.similarity_threshold if args.threshold is None else args.threshold
        score = distance(fingerprint, reference)
        print(f"distance={score} threshold={threshold}")
    except (FingerprintError, OSError) as exc:
        logger.error("%s", exc)
        return EXIT_ERROR

    return EXIT_SIMILAR if score <= threshold else EXIT_DIFFERENT


if __name__ == "__main__":
    sys.exit(main())
