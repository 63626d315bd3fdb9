"""Helpers for interrogating runtime environment flags."""

from __future__ import annotations

import logging
import os
from typing import Mapping, SupportsIndex, SupportsInt

LOG_LEVEL_VAR = "VFP_LOG_LEVEL"


def resolve_log_level(value: str | None = None, *, env: Mapping[str, str] | None = None) -> int:
    """Return the logging level named by ``value`` or ``VFP_LOG_LEVEL``.

    Unknown names fall back to :data:`logging.INFO`. Numeric strings are
    accepted as raw levels.
    """
    if value is None:
        value = (env if env is not None else os.environ).get(LOG_LEVEL_VAR)
    if not value:
        return logging.INFO
    numeric = safe_int(value, -1, min_value=0)
    if numeric >= 0:
        return numeric
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def safe_int(
    value: SupportsInt | SupportsIndex | str | None,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Safely coerce ``value`` to :class:`int`, returning ``default`` on failure.

    Empty strings, ``None`` and malformed values fall back to ``default``.
    Values outside the optional ``min_value``/``max_value`` range are treated
    as invalid as well.
    """

    candidate = value
    if candidate is None:
        return default
    if isinstance(candidate, str):
        candidate = candidate.strip()
        if candidate == "":
            return default

    try:
        coerced = int(candidate)
    except (TypeError, ValueError):
        return default

    if min_value is not None and coerced < min_value:
        return default
    if max_value is not None and coerced > max_value:
        return default
    return coerced


__all__ = ["LOG_LEVEL_VAR", "resolve_log_level", "safe_int"]
