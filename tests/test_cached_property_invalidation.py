"""
Tests for the cache infrastructure on the Distribution base class.

Tests that:
- _fitted flag works correctly on real models
- _check_fitted() raises before fitting, passes after
- classical_params is cached and dropped when parameters change
- _invalidate_cache() is idempotent
- Histogram extends _cached_attrs and drops its running mass too
"""

import numpy as np
import pytest

from statix.base.distribution import Distribution
from statix.density import Histogram
from statix.distributions.univariate import Exponential, Normal, Waring, Yule
from statix.params import WaringParams


RANK_COUNTS = np.array([[10.0, 5.0, 3.0, 2.0, 1.0]])


class TestFittedFlag:
    @pytest.mark.parametrize("cls", [Waring, Yule, Exponential, Normal, Histogram])
    def test_initially_not_fitted(self, cls):
        dist = cls()
        assert dist._fitted is False
        assert "not fitted" in repr(dist)

    def test_fitted_after_from_classical_params(self):
        w = Waring.from_classical_params(b=3.0, a=0.5)
        assert w._fitted is True
        assert "not fitted" not in repr(w)

    def test_fitted_after_fit(self):
        model = Yule()
        result = model.fit(RANK_COUNTS)
        assert model._fitted is True
        assert result is model


class TestCheckFitted:
    def test_raises_when_not_fitted(self):
        with pytest.raises(ValueError, match="parameters not set"):
            Yule()._check_fitted()

    def test_passes_when_fitted(self):
        Yule.from_classical_params(b=2.5)._check_fitted()

    def test_error_includes_class_name(self):
        with pytest.raises(ValueError, match="Exponential"):
            Exponential().mean()

    def test_classical_params_before_fit_raises(self):
        with pytest.raises(ValueError, match="parameters not set"):
            _ = Yule().classical_params


class TestClassicalParamsCache:
    def test_base_caches_classical_params(self):
        assert Distribution._cached_attrs == ("classical_params",)

    def test_computed_once(self):
        w = Waring.from_classical_params(b=3.0, a=0.5)
        assert "classical_params" not in w.__dict__
        first = w.classical_params
        assert isinstance(first, WaringParams)
        assert w.classical_params is first

    def test_set_classical_params_invalidates(self):
        w = Waring.from_classical_params(b=3.0, a=0.5)
        before = w.classical_params
        w.set_classical_params(b=4.0, a=1.0)
        after = w.classical_params
        assert before.b == 3.0
        assert after.b == 4.0
        np.testing.assert_allclose(w.parameter_vector, [4.0, 1.0])

    def test_fit_invalidates(self):
        model = Exponential.from_classical_params(scale=100.0)
        _ = model.classical_params
        model.fit(RANK_COUNTS)
        assert model.classical_params.scale != 100.0

    def test_set_location_invalidates(self):
        n = Normal.from_classical_params(mu=0.0, sigma=1.0)
        _ = n.classical_params
        n.set_location(3.0)
        assert n.classical_params.mu == 3.0
        assert n.mean() == 3.0

    def test_invalidate_idempotent(self):
        y = Yule()
        y._invalidate_cache()
        y._invalidate_cache()
        y.set_classical_params(b=2.0)
        _ = y.classical_params
        y._invalidate_cache()
        y._invalidate_cache()
        assert "classical_params" not in y.__dict__

    def test_invalid_params_rejected(self):
        with pytest.raises(ValueError):
            Waring.from_classical_params(b=0.5, a=0.5)
        with pytest.raises(ValueError):
            Waring.from_classical_params(b=3.0, a=-1.0)


class TestHistogramCache:
    def test_extends_cached_attrs(self):
        assert "classical_params" in Histogram._cached_attrs
        assert "_cumulative" in Histogram._cached_attrs

    def test_cumulative_cached(self):
        h = Histogram(edges=[0.0, 1.0, 2.0, 3.0], bins=[1.0, 2.0, 1.0])
        first = h._cumulative
        assert h._cumulative is first
        np.testing.assert_allclose(first, [0.0, 1.0, 3.0, 4.0])

    def test_new_layout_drops_both(self):
        h = Histogram(edges=[0.0, 1.0, 2.0, 3.0], bins=[1.0, 2.0, 1.0])
        _ = h._cumulative
        _ = h.classical_params
        h.set_classical_params(edges=[0.0, 1.0, 2.0], bins=[3.0, 1.0])
        assert "_cumulative" not in h.__dict__
        assert "classical_params" not in h.__dict__
        np.testing.assert_allclose(h._cumulative, [0.0, 3.0, 4.0])
        assert h.classical_params.bins.tolist() == [3.0, 1.0]

    def test_fit_drops_cumulative(self):
        h = Histogram(edges=[0.0, 1.0], bins=[5.0])
        _ = h._cumulative
        h.fit(np.arange(10.0), n_bins=5)
        assert len(h._cumulative) == 6
        assert h._cumulative[-1] == 10.0
