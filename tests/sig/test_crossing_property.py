"""Property-based tests for :func:`sig.crossing.is_cross`."""

from __future__ import annotations

import numpy as np
import pytest

pytest.importorskip("hypothesis")
from hypothesis import given, settings
from hypothesis import strategies as st

from sig.crossing import is_cross

finite_floats = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


@given(values=st.lists(finite_floats, max_size=60), window=st.integers(min_value=1, max_value=8))
@settings(max_examples=100, deadline=None)
def test_output_matches_input_length(values: list[float], window: int) -> None:
    flags = is_cross(values, window=window)

    assert flags.shape == (len(values),)
    assert flags.dtype == bool
    if flags.size:
        assert not flags[0]


@given(
    values=st.lists(st.floats(min_value=1e-6, max_value=1e6), min_size=1, max_size=60),
    window=st.integers(min_value=1, max_value=8),
    negate=st.booleans(),
)
@settings(max_examples=100, deadline=None)
def test_single_signed_signal_never_crosses(values: list[float], window: int, negate: bool) -> None:
    signal = -np.asarray(values) if negate else np.asarray(values)

    assert not is_cross(signal, window=window).any()
