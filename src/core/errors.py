"""Exception types raised by the fingerprint pipeline."""

from __future__ import annotations


class FingerprintError(Exception):
    """Base class for all fingerprinting failures."""


class MissingInputError(FingerprintError, ValueError):
    """No input file was supplied."""


class UnsupportedFormatError(FingerprintError, RuntimeError):
    """The file extension is unknown or its decoder is unavailable."""


class UnexpectedShapeError(FingerprintError, ValueError):
    """A decoder returned an array of unsupported rank."""


class InvalidChannelCountError(FingerprintError, ValueError):
    """A colour conversion received something other than three channels."""


class InvalidWindowError(FingerprintError, ValueError):
    """The crossing detector window length is not a natural number."""


__all__ = [
    "FingerprintError",
    "InvalidChannelCountError",
    "InvalidWindowError",
    "MissingInputError",
    "UnexpectedShapeError",
    "UnsupportedFormatError",
]
