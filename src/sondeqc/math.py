"""
Log-pressure interpolation kernels compiled with Numba.
"""

from __future__ import annotations

import numpy as np
from numba import guvectorize


def _make_interp_log_pressure_gufunc():
    """
    Create the Numba gufunc for log-pressure interpolation between bracket
    levels.

    Returns a gufunc with signature ``(n),(n),(m),(m),(m)->(m)``. The function
    is created at module load time to ensure JIT compilation happens only
    once.
    """

    @guvectorize(
        [
            "void(float64[:], float64[:], int64[:], int64[:], int64[:], float64[:])",
        ],
        "(n),(n),(m),(m),(m)->(m)",
        nopython=True,
        cache=True,
    )
    def _interp_log_pressure_gufunc_impl(log_p, values, levels, below, above, out):
        m = len(levels)
        for i in range(m):
            lev = levels[i]
            b = below[i]
            a = above[i]
            ratio = (log_p[lev] - log_p[b]) / (log_p[a] - log_p[b])
            out[i] = values[b] + (values[a] - values[b]) * ratio

    return _interp_log_pressure_gufunc_impl


# Create gufuncs at module load time
_interp_log_pressure_gufunc = _make_interp_log_pressure_gufunc()


def interp_log_pressure(
    log_p: np.ndarray,
    values: np.ndarray,
    levels: np.ndarray,
    below: np.ndarray,
    above: np.ndarray,
) -> np.ndarray:
    """
    Interpolate values linearly in log-pressure between bracket levels.

    For each triple ``(lev, b, a)``, the result is

    .. math::

        v_b + (v_a - v_b) \\frac{\\ln p_{lev} - \\ln p_b}{\\ln p_a - \\ln p_b}

    Parameters
    ----------
    log_p : ndarray
        Natural logarithm of the pressure at each level.
        Shape (..., n).

    values : ndarray
        Values at each level.
        Shape (..., n).

    levels, below, above : ndarray
        Indices of the interpolated level and of its lower and upper bracket
        levels. Indices must be valid and brackets must have distinct
        log-pressures; this is not checked.
        Shape (m,).

    Returns
    -------
    ndarray
        Interpolated values.
        Shape (..., m).

    Examples
    --------
    >>> log_p = np.log([100000.0, 85000.0, 70000.0])
    >>> values = np.array([288.0, 0.0, 278.0])
    >>> interp_log_pressure(log_p, values, [1], [0], [2]).round(2)
    array([283.44])
    """
    log_p = np.asarray(log_p, dtype=np.float64)
    values = np.asarray(values, dtype=np.float64)
    levels = np.asarray(levels, dtype=np.int64)
    below = np.asarray(below, dtype=np.int64)
    above = np.asarray(above, dtype=np.int64)

    if levels.size == 0:
        return np.empty(values.shape[:-1] + (0,), dtype=np.float64)

    return _interp_log_pressure_gufunc(log_p, values, levels, below, above)
