"""
Descriptive statistics for session analysis

Pure functions over numeric sequences. All of them return plain Python floats
and raise InvalidInput on an empty sequence.
"""

from typing import Sequence
import numpy as np

from ..core.errors import InvalidInput


def _as_array(xs: Sequence[float], name: str = "xs") -> np.ndarray:
    arr = np.asarray(xs, dtype=float)
    if arr.size == 0:
        raise InvalidInput(f"{name} must not be empty")
    return arr


def mean(xs: Sequence[float]) -> float:
    return float(np.mean(_as_array(xs)))


def population_std(xs: Sequence[float]) -> float:
    """Standard deviation dividing by n (biased estimator)"""
    return float(np.std(_as_array(xs), ddof=0))


def percentile(xs: Sequence[float], p: float) -> float:
    """
    Linear-interpolation percentile

    The position is p/100 * (n - 1) in the sorted values, interpolated between
    its floor and ceil neighbours. p=0 gives the minimum, p=100 the maximum.
    The input sequence is not modified.

    Args:
        xs: Values
        p: Percentile in [0, 100]

    Returns:
        float: Interpolated percentile
    """
    if not 0.0 <= p <= 100.0:
        raise InvalidInput(f"percentile must be within [0, 100], got {p}")
    return float(np.percentile(_as_array(xs), p, method="linear"))


def ols_slope(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Ordinary least squares slope of ys against xs

    Returns 0.0 when all xs are equal (degenerate design).
    """
    x = _as_array(xs, "xs")
    y = _as_array(ys, "ys")
    if x.size != y.size:
        raise InvalidInput(f"xs and ys differ in length: {x.size} != {y.size}")

    dx = x - x.mean()
    den = float(np.sum(dx * dx))
    if den == 0.0:
        return 0.0
    return float(np.sum(dx * (y - y.mean())) / den)


def linear_regression_slope(ys: Sequence[float]) -> float:
    """OLS slope of ys against their index positions 0..n-1"""
    y = _as_array(ys, "ys")
    if y.size <= 1:
        return 0.0
    return ols_slope(np.arange(y.size, dtype=float), y)


def fraction_in_range(xs: Sequence[float], lo: float, hi_exclusive: float) -> float:
    """Fraction of values with lo <= x < hi_exclusive"""
    arr = _as_array(xs)
    return float(np.count_nonzero((arr >= lo) & (arr < hi_exclusive)) / arr.size)
