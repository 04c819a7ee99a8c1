"""Test configuration for okcolor."""

import itertools

import numpy as np
import pytest

import okcolor_engine


@pytest.fixture(autouse=True)
def strict_ieee_mode():
    """Every test starts and ends in the default strict IEEE mode."""
    okcolor_engine.set_strict_ieee(True)
    yield
    okcolor_engine.set_strict_ieee(True)


@pytest.fixture
def rgb_grid():
    """In-gamut RGB grid, (216, 3), including channels at exactly zero."""
    levels = [0.0, 0.1, 0.3, 0.5, 0.7, 1.0]
    return np.array(list(itertools.product(levels, repeat=3)), dtype=np.float64)


@pytest.fixture
def muted_colors():
    """Low-chroma colors that stay in gamut under hue rotation."""
    return np.array([
        [0.60, 0.50, 0.45],
        [0.45, 0.55, 0.50],
        [0.50, 0.50, 0.62],
    ], dtype=np.float64)
