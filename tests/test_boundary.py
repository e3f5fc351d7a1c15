"""
Tests for the barrier that keeps minimizers inside a model's parameter domain.

Covers:
- keep_away values and support projection
- Barrier value and gradient for infeasible parameters
- Monotone growth away from the boundary
- The per-instance reference cache: data fingerprint, reset() and fit()
- NaN parameters
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from statix.base.likelihood_model import BOUNDARY_EPSILON
from statix.distributions.univariate import Exponential, Gamma, Waring, Yule, Zipf
from statix.utils.boundary import Bound, keep_away, project_to_support


RANK_COUNTS = np.array([
    [10.0, 5.0, 3.0, 2.0, 1.0],
    [8.0, 4.0, 2.0, 1.0, 1.0],
])


# ============================================================================
# keep_away and projection
# ============================================================================

class TestKeepAway:
    def test_known_value(self):
        assert_allclose(keep_away(0.0, 1.0, 2.0), 2 * np.e)
        assert_allclose(keep_away(0.0, 1.0, 2.0), 5.43656365691809)

    def test_symmetric_in_distance(self):
        assert keep_away(3.0, 1.0, 1.5) == keep_away(-1.0, 1.0, 1.5)

    def test_equals_base_at_limit(self):
        assert keep_away(1.0, 1.0, 7.0) == 7.0


class TestProjectToSupport:
    def test_feasible_point_untouched(self):
        point, direction, distance = project_to_support(
            np.array([2.0, 0.5]), [Bound(lower=1.0), Bound(lower=0.0)], 1e-6
        )
        assert_allclose(point, [2.0, 0.5])
        assert not direction.any()
        assert distance == 0.0

    def test_lower_violation(self):
        point, direction, distance = project_to_support(
            np.array([0.25]), [Bound(lower=1.0)], 1e-6
        )
        assert_allclose(point, [1.0 + 1e-6])
        assert_allclose(direction, [-1.0])
        assert_allclose(distance, 0.75)

    def test_upper_violation(self):
        point, direction, distance = project_to_support(
            np.array([3.0]), [Bound(upper=2.0)], 1e-6
        )
        assert_allclose(point, [2.0 - 1e-6])
        assert_allclose(direction, [1.0])
        assert_allclose(distance, 1.0)

    def test_open_limit_is_infeasible(self):
        _, direction, _ = project_to_support(np.array([1.0]), [Bound(lower=1.0)], 1e-6)
        assert_allclose(direction, [-1.0])

    def test_closed_limit_is_feasible(self):
        _, direction, _ = project_to_support(
            np.array([0.0]), [Bound(lower=0.0, closed_lower=True)], 1e-6
        )
        assert not direction.any()

    def test_two_violations_add_distance(self):
        _, direction, distance = project_to_support(
            np.array([0.5, -1.0]),
            [Bound(lower=1.0), Bound(lower=0.0, closed_lower=True)], 1e-6,
        )
        assert_allclose(direction, [-1.0, -1.0])
        assert_allclose(distance, 1.5)

    def test_empty_support(self):
        _, direction, distance = project_to_support(np.array([-5.0, 5.0]), [], 1e-6)
        assert not direction.any()
        assert distance == 0.0


# ============================================================================
# Barrier value and gradient
# ============================================================================

class TestBarrier:
    def test_single_violation_matches_keep_away(self):
        model = Yule()
        ka = model.log_likelihood([1.0 + BOUNDARY_EPSILON], RANK_COUNTS)
        value = model.log_likelihood([0.5], RANK_COUNTS)
        assert_allclose(value, keep_away(0.5, 1.0, abs(ka)))

    def test_gradient_points_back_inside(self):
        model = Yule()
        value = model.log_likelihood([0.5], RANK_COUNTS)
        grad = model.gradient([0.5], RANK_COUNTS)
        assert_allclose(grad, [-value])

    def test_finite_and_positive(self):
        for model, params in [
            (Yule(), [-3.0]),
            (Zipf(), [0.2]),
            (Exponential(), [-1.0]),
            (Waring(), [0.0, -2.0]),
            (Gamma(), [-1.0, 2.0]),
        ]:
            data = RANK_COUNTS if not isinstance(model, Gamma) else RANK_COUNTS + 0.5
            value = model.log_likelihood(params, data)
            assert np.isfinite(value)
            assert value > 0

    @pytest.mark.parametrize("model,path", [
        (Yule(), [[0.9], [0.5], [0.0], [-2.0]]),
        (Zipf(), [[0.99], [0.5], [-1.0]]),
        (Exponential(), [[0.0], [-0.5], [-3.0]]),
    ])
    def test_monotone_away_from_boundary(self, model, path):
        values = [model.log_likelihood(p, RANK_COUNTS) for p in path]
        assert np.all(np.diff(values) > 0)

    def test_waring_two_violations(self):
        model = Waring()
        ka = model.log_likelihood([1.0 + BOUNDARY_EPSILON, BOUNDARY_EPSILON], RANK_COUNTS)
        value = model.log_likelihood([0.5, -1.0], RANK_COUNTS)
        assert_allclose(value, np.exp(1.5) * abs(ka))
        grad = model.gradient([0.5, -1.0], RANK_COUNTS)
        assert_allclose(grad, [-value, -value])

    def test_waring_reference_depends_on_other_coordinate(self):
        model = Waring()
        model.log_likelihood([-1.0, 0.5], RANK_COUNTS)
        model.log_likelihood([-1.0, 3.0], RANK_COUNTS)
        assert len(model._reference_cache) == 2

    def test_waring_a_only_violation(self):
        model = Waring()
        grad = model.gradient([3.0, -0.5], RANK_COUNTS)
        assert grad[0] != 0.0
        assert grad[1] < 0

    @pytest.mark.parametrize("model,params,data", [
        (Waring(), [3.0, -0.5], RANK_COUNTS),
        (Waring(), [1.5, -0.2], RANK_COUNTS),
        (Waring(), [0.7, 2.0], RANK_COUNTS),
        (Gamma(), [-1.0, 2.0], RANK_COUNTS + 0.5),
        (Yule(), [0.5], RANK_COUNTS),
    ])
    def test_gradient_matches_finite_differences(self, model, params, data):
        params = np.array(params)
        h = 1e-6
        numeric = np.zeros(len(params))
        for i in range(len(params)):
            step = np.zeros(len(params))
            step[i] = h
            numeric[i] = (model.log_likelihood(params + step, data)
                          - model.log_likelihood(params - step, data)) / (2 * h)
        assert_allclose(model.gradient(params, data), numeric, rtol=1e-4, atol=1e-6)

    @pytest.mark.parametrize("model,params,data", [
        (Exponential(), [-800.0], [[5.0], [3.0], [0.0]]),
        (Zipf(), [-800.0], [[5.0, 3.0, 1.0]]),
        (Yule(), [-1e6], RANK_COUNTS),
        (Waring(), [-900.0, -900.0], RANK_COUNTS),
    ])
    def test_far_outside_stays_finite(self, model, params, data):
        value, grad = model.fdf(params, data)
        assert np.isfinite(value)
        assert value > 0
        assert np.all(np.isfinite(grad))
        assert np.all(grad < 0)

    def test_exponent_capped(self):
        model = Exponential()
        assert model.log_likelihood([-1000.0], RANK_COUNTS) == \
            model.log_likelihood([-2000.0], RANK_COUNTS)

    def test_log_likelihood_vector_splits_barrier(self):
        model = Yule()
        vector = model.log_likelihood_vector([0.5], RANK_COUNTS)
        assert vector.shape == (2,)
        assert_allclose(vector.sum(), model.log_likelihood([0.5], RANK_COUNTS))


# ============================================================================
# Reference cache
# ============================================================================

class TestReferenceCache:
    def test_cache_filled_on_violation(self):
        model = Yule()
        assert model._reference_cache == {}
        model.log_likelihood([0.5], RANK_COUNTS)
        assert len(model._reference_cache) == 1

    def test_cache_reused(self):
        model = Yule()
        model.log_likelihood([0.5], RANK_COUNTS)
        model.log_likelihood([-4.0], RANK_COUNTS)
        assert len(model._reference_cache) == 1

    def test_new_data_drops_cache(self):
        model = Yule()
        first = model.log_likelihood([0.5], RANK_COUNTS)
        other = RANK_COUNTS * 3
        second = model.log_likelihood([0.5], other)
        assert_allclose(second, 3 * first)
        assert len(model._reference_cache) == 1

    def test_reset(self):
        model = Yule()
        model.log_likelihood([0.5], RANK_COUNTS)
        model.reset()
        assert model._reference_cache == {}
        assert model._reference_token is None

    def test_fit_starts_fresh(self):
        model = Yule()
        model.log_likelihood([0.5], RANK_COUNTS)
        model._reference_cache[(123.0,)] = (-1.0, np.zeros(1))
        model.fit(RANK_COUNTS)
        assert (123.0,) not in model._reference_cache

    def test_instances_do_not_share(self):
        first, second = Yule(), Yule()
        first.log_likelihood([0.5], RANK_COUNTS)
        assert second._reference_cache == {}


# ============================================================================
# NaN parameters
# ============================================================================

class TestNaNParameters:
    def test_value_is_inf(self):
        assert Waring().log_likelihood([np.nan, 0.5], RANK_COUNTS) == np.inf

    def test_gradient_is_nan(self):
        grad = Waring().gradient([np.nan, 0.5], RANK_COUNTS)
        assert grad.shape == (2,)
        assert np.isnan(grad).all()

    def test_fdf(self):
        value, grad = Zipf().fdf([np.nan], RANK_COUNTS)
        assert value == np.inf
        assert np.isnan(grad).all()
