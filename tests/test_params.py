"""
Tests for frozen dataclass parameter containers.

Tests that each parameter dataclass:
- Can be constructed with valid values
- Is frozen (raises FrozenInstanceError on attribute assignment)
- Supports dataclasses.asdict() and dict-style access
- Flattens to the parameter vector the likelihood models consume
"""

import dataclasses
import pytest
import numpy as np

from statix.params import (
    ExponentialParams,
    GammaParams,
    NormalParams,
    UniformParams,
    WaringParams,
    YuleParams,
    ZipfParams,
    ProbitParams,
    HistogramParams,
)


# ============================================================================
# Continuous distribution parameters
# ============================================================================

class TestExponentialParams:
    def test_construction(self):
        p = ExponentialParams(scale=2.0)
        assert p.scale == 2.0

    def test_frozen(self):
        p = ExponentialParams(scale=2.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.scale = 3.0

    def test_asdict(self):
        p = ExponentialParams(scale=2.0)
        assert dataclasses.asdict(p) == {"scale": 2.0}

    def test_slots(self):
        p = ExponentialParams(scale=2.0)
        assert not hasattr(p, "__dict__")


class TestGammaParams:
    def test_construction(self):
        p = GammaParams(shape=2.0, scale=1.5)
        assert p.shape == 2.0
        assert p.scale == 1.5

    def test_frozen(self):
        p = GammaParams(shape=2.0, scale=1.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.shape = 3.0

    def test_vector_order(self):
        np.testing.assert_array_equal(
            GammaParams(shape=2.0, scale=1.5).as_array(), [2.0, 1.5]
        )


class TestNormalAndUniformParams:
    def test_normal_fields(self):
        p = NormalParams(mu=0.5, sigma=2.0)
        assert [f.name for f in dataclasses.fields(p)] == ["mu", "sigma"]

    def test_uniform_fields(self):
        p = UniformParams(low=-1.0, high=1.0)
        assert dict(p.items()) == {"low": -1.0, "high": 1.0}


# ============================================================================
# Rank distribution parameters
# ============================================================================

class TestWaringParams:
    def test_construction(self):
        p = WaringParams(b=3.0, a=0.5)
        assert p.b == 3.0
        assert p.a == 0.5

    def test_frozen(self):
        p = WaringParams(b=3.0, a=0.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.b = 4.0

    def test_dict_access(self):
        p = WaringParams(b=3.0, a=0.5)
        assert p["b"] == 3.0
        assert "a" in p
        assert "c" not in p
        assert list(p.keys()) == ["b", "a"]
        assert list(p.values()) == [3.0, 0.5]

    def test_missing_key(self):
        with pytest.raises(KeyError):
            WaringParams(b=3.0, a=0.5)["c"]

    def test_vector(self):
        np.testing.assert_array_equal(WaringParams(b=3.0, a=0.5).as_array(), [3.0, 0.5])


class TestOneParameterRankParams:
    def test_yule(self):
        assert YuleParams(b=2.5).as_array().shape == (1,)

    def test_zipf(self):
        p = ZipfParams(a=1.8)
        assert dataclasses.asdict(p) == {"a": 1.8}


# ============================================================================
# Array-valued parameters
# ============================================================================

class TestProbitParams:
    def test_construction(self):
        beta = np.array([0.5, -1.0, 2.0])
        p = ProbitParams(beta=beta)
        np.testing.assert_array_equal(p.beta, beta)

    def test_frozen(self):
        p = ProbitParams(beta=np.zeros(2))
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.beta = np.ones(2)

    def test_vector_is_beta(self):
        np.testing.assert_array_equal(
            ProbitParams(beta=np.array([1.0, 2.0])).as_array(), [1.0, 2.0]
        )


class TestHistogramParams:
    def test_field_names(self):
        p = HistogramParams(edges=np.arange(4.0), bins=np.ones(3))
        assert [f.name for f in dataclasses.fields(p)] == ["edges", "bins"]

    def test_frozen(self):
        p = HistogramParams(edges=np.arange(4.0), bins=np.ones(3))
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.bins = np.zeros(3)
