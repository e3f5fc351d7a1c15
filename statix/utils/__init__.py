"""Utility functions for statix package."""

from .boundary import Bound, keep_away, project_to_support
from .linalg import (
    det_and_inv, matrix_inverse, matrix_determinant,
    normalize_for_svd, sv_decomposition,
    vector_stack, matrix_stack, matrix_rm_columns,
    vector_bounded, x_prime_sigma_x, dot,
)
from .scaling import (
    vector_normalize, matrix_normalize,
)
from .moments import (
    vector_sum, vector_mean, vector_var, vector_var_m, vector_kurtosis,
    vector_cov, vector_correlation, vector_distance, vector_grid_distance,
    vector_percentiles,
    matrix_sum, matrix_mean, matrix_var_m, matrix_mean_and_var,
    matrix_summarize, matrix_covariance,
    test_chi_squared_var_not_zero, multivariate_normal_prob,
    random_beta, random_double, random_int,
)

__all__ = [
    'Bound', 'keep_away', 'project_to_support',
    'det_and_inv', 'matrix_inverse', 'matrix_determinant',
    'normalize_for_svd', 'sv_decomposition',
    'vector_stack', 'matrix_stack', 'matrix_rm_columns',
    'vector_bounded', 'x_prime_sigma_x', 'dot',
    'vector_normalize', 'matrix_normalize',
    'vector_sum', 'vector_mean', 'vector_var', 'vector_var_m',
    'vector_kurtosis', 'vector_cov', 'vector_correlation',
    'vector_distance', 'vector_grid_distance', 'vector_percentiles',
    'matrix_sum', 'matrix_mean', 'matrix_var_m', 'matrix_mean_and_var',
    'matrix_summarize', 'matrix_covariance',
    'test_chi_squared_var_not_zero', 'multivariate_normal_prob',
    'random_beta', 'random_double', 'random_int',
]
