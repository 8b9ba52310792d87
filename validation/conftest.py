"""
Shared test arrays with known properties.

Every array here has a characteristic that scipy.stats agrees on,
so our normalizations can be checked against it.
"""
import numpy as np
import pytest


@pytest.fixture
def white_noise():
    """Standard normal: mean ~ 0, std ~ 1, IQR/1.35 ~ std."""
    rng = np.random.RandomState(42)
    return rng.randn(10000)


@pytest.fixture
def features():
    """Columns on very different scales: (500, 4)."""
    rng = np.random.RandomState(42)
    scales = np.array([1.0, 100.0, 0.01, 5.0])
    offsets = np.array([0.0, -50.0, 3.0, 1000.0])
    return rng.randn(500, 4) * scales + offsets


@pytest.fixture
def heavy_tailed():
    """Laplace samples with a few gross outliers per column."""
    rng = np.random.RandomState(42)
    data = rng.laplace(0.0, 1.0, size=(2000, 3))
    data[:10] = 1e4
    return data


@pytest.fixture
def cube():
    """Rank-3 array (time, channel, trial)."""
    rng = np.random.RandomState(7)
    return rng.gamma(2.0, 3.0, size=(50, 6, 8))
