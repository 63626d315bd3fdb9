"""Pydantic schemas for fingerprint configuration."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

ALGORITHMS = ("dct", "original")
DEFAULT_ALGORITHM = "dct"
DEFAULT_EPSILON = 1e-10
DEFAULT_ROUND_DIGITS = 8
DEFAULT_RESAMPLE_SIZE = 64
DEFAULT_DCT_BLOCK = 8
DEFAULT_CROSSING_WINDOW = 3
DEFAULT_MAX_COLOR_VALUE = 255.0
DEFAULT_SIMILARITY_THRESHOLD = 8


def _coerce_int(value: Any, default: int, *, minimum: int) -> int:
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        return default
    return max(minimum, coerced)


def _coerce_float(value: Any, default: float) -> float:
    try:
        coerced = float(value)
    except (TypeError, ValueError):
        return default
    return coerced if coerced > 0 else default


class FingerprintSettings(BaseModel):
    """Tunable constants of the fingerprint pipelines."""

    model_config = ConfigDict(extra="ignore")

    algorithm: str = DEFAULT_ALGORITHM
    degeneracy_epsilon: float = DEFAULT_EPSILON
    round_digits: int | None = DEFAULT_ROUND_DIGITS
    resample_size: int = DEFAULT_RESAMPLE_SIZE
    dct_block: int = DEFAULT_DCT_BLOCK
    crossing_window: int = DEFAULT_CROSSING_WINDOW
    legacy_luma_parity: bool = False
    max_color_value: float = DEFAULT_MAX_COLOR_VALUE
    similarity_threshold: int = DEFAULT_SIMILARITY_THRESHOLD

    @field_validator("algorithm", mode="before")
    @classmethod
    def _normalise_algorithm(cls, value: Any) -> str:
        name = str(getattr(value, "value", value) or "").strip().lower()
        return name if name in ALGORITHMS else DEFAULT_ALGORITHM

    @field_validator("degeneracy_epsilon", mode="before")
    @classmethod
    def _coerce_epsilon(cls, value: Any) -> float:
        return _coerce_float(value, DEFAULT_EPSILON)

    @field_validator("max_color_value", mode="before")
    @classmethod
    def _coerce_max_color(cls, value: Any) -> float:
        return _coerce_float(value, DEFAULT_MAX_COLOR_VALUE)

    @field_validator("round_digits", mode="before")
    @classmethod
    def _coerce_digits(cls, value: Any) -> int | None:
        if value is None or (isinstance(value, str) and value.strip().lower() in {"", "none", "off"}):
            return None
        return _coerce_int(value, DEFAULT_ROUND_DIGITS, minimum=0)

    @field_validator("resample_size", mode="before")
    @classmethod
    def _coerce_resample_size(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_RESAMPLE_SIZE, minimum=DEFAULT_DCT_BLOCK)

    @field_validator("dct_block", mode="before")
    @classmethod
    def _coerce_block(cls, value: Any) -> int:
        block = _coerce_int(value, DEFAULT_DCT_BLOCK, minimum=2)
        # hex packing needs block * block to be a multiple of four
        return block if block % 2 == 0 else DEFAULT_DCT_BLOCK

    @field_validator("crossing_window", mode="before")
    @classmethod
    def _coerce_window(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_CROSSING_WINDOW, minimum=1)

    @field_validator("similarity_threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: Any) -> int:
        return _coerce_int(value, DEFAULT_SIMILARITY_THRESHOLD, minimum=0)

    @model_validator(mode="after")
    def _check_block(self) -> "FingerprintSettings":
        if self.dct_block > self.resample_size:
            self.dct_block = min(DEFAULT_DCT_BLOCK, self.resample_size)
        return self

    def to_mapping(self) -> dict[str, Any]:
        """Return a serialisable representation of the configuration."""

        return self.model_dump()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FingerprintSettings":
        if not isinstance(data, Mapping):
            data = {}
        return cls.model_validate(data)


__all__ = [
    "ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "FingerprintSettings",
]
