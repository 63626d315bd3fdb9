"""Core logic for visual-fingerprint."""


from typing import Any


# Avoid importing numpy-heavy submodules at package import time.

_LAZY_ATTRS = {"Algorithm", "get_fingerprint", "fingerprint_dct", "fingerprint_original"}


def __getattr__(name: str) -> Any:
    if name in _LAZY_ATTRS:
        import importlib

        module = importlib.import_module(".fingerprint", __name__)
        return getattr(module, name)
    raise AttributeError(name)
