"""
Shared fixtures for the filter engine test suite
"""

import numpy as np
import pytest

from core import EngineConfiguration, set_config, reset_config_manager
from dsp.filters import TransferFunction


@pytest.fixture(autouse=True)
def default_configuration():
    """Run every test against default configuration, unaffected by files or env"""
    set_config(EngineConfiguration())
    yield
    reset_config_manager()


@pytest.fixture
def rng():
    """Seeded random generator"""
    return np.random.default_rng(20240611)


def _random_roots(rng, count, max_radius):
    roots = []
    while len(roots) < count:
        if count - len(roots) >= 2 and rng.random() < 0.5:
            root = rng.uniform(0.2, max_radius) * np.exp(1j * rng.uniform(0.2, np.pi - 0.2))
            roots += [root, np.conj(root)]
        else:
            roots.append(rng.uniform(-max_radius, max_radius))
    return roots


@pytest.fixture
def stable_tf_factory(rng):
    """Build random stable transfer functions with real coefficients"""
    def make(n_poles, n_zeros=None):
        n_zeros = n_poles if n_zeros is None else n_zeros
        zeros = _random_roots(rng, n_zeros, 1.2)
        poles = _random_roots(rng, n_poles, 0.9)
        return TransferFunction.from_zpk(zeros, poles, gain=rng.uniform(0.5, 2.0))
    return make


def assert_coefficients_close(actual, expected, rtol=1e-8, atol=1e-10):
    """Compare coefficient arrays, treating missing trailing coefficients as zeros"""
    actual = np.asarray(actual, dtype=np.float64)
    expected = np.asarray(expected, dtype=np.float64)
    length = max(len(actual), len(expected))
    np.testing.assert_allclose(
        np.pad(actual, (0, length - len(actual))),
        np.pad(expected, (0, length - len(expected))),
        rtol=rtol, atol=atol
    )
