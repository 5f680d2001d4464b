"""
Descriptive statistics for one group of observations.

Functions
---------
percentile : Linear-interpolation percentile of a sorted sample
compute_descriptive_stats : Count, mean, median, variance, std, p95 and p05
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .core import GroupStats


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Percentile using linear interpolation between the closest ranks.

    This is NumPy's default ("linear") method. The values must already be
    sorted in ascending order.

    Parameters
    ----------
    sorted_values : sequence of float
        Sample sorted ascending.
    p : float
        Percentile in [0, 100].

    Returns
    -------
    float
        The interpolated percentile, NaN for an empty sample.

    Examples
    --------
    >>> percentile([1, 2, 3, 4], 50)
    2.5
    """
    if not 0 <= p <= 100:
        raise ValueError(f"p must be between 0 and 100, got {p}")
    values = np.asarray(sorted_values, dtype=float)
    n = len(values)
    if n == 0:
        return math.nan
    if n == 1:
        return float(values[0])

    rank = (p / 100.0) * (n - 1)
    lower = int(math.floor(rank))
    upper = min(int(math.ceil(rank)), n - 1)
    frac = rank - lower

    if lower == upper:
        return float(values[lower])
    return float(values[lower] * (1.0 - frac) + values[upper] * frac)


def compute_descriptive_stats(values: Sequence[float]) -> GroupStats:
    """
    Compute descriptive statistics for an array of values.

    Empty input is not an error: the returned record has count 0 and NaN
    statistics, so callers should check `count` before using the numbers.

    Parameters
    ----------
    values : sequence of float
        Observations for one group, in any order.

    Returns
    -------
    GroupStats
        Statistics with a blank group_name.
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        return GroupStats()

    sorted_arr = np.sort(arr)
    mean = float(arr.sum() / n)
    if n % 2 == 0:
        median = float((sorted_arr[n // 2 - 1] + sorted_arr[n // 2]) / 2.0)
    else:
        median = float(sorted_arr[n // 2])

    if n > 1:
        variance = float(((arr - mean) ** 2).sum() / (n - 1))
    else:
        variance = 0.0

    return GroupStats(
        count=n,
        mean=mean,
        median=median,
        std=math.sqrt(variance),
        variance=variance,
        p95=percentile(sorted_arr, 95.0),
        p05=percentile(sorted_arr, 5.0),
    )
