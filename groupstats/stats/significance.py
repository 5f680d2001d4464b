"""
Welch's two-sample t-test against a control group.

Functions
---------
welch_t_statistic : t statistic and Welch-Satterthwaite degrees of freedom
welch_ttest : Two-tailed p-value and significance flag
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
from scipy import stats

from .core import SIGNIFICANCE_THRESHOLD


def welch_t_statistic(
    sample: Sequence[float],
    control: Sequence[float]
) -> Tuple[float, float, float]:
    """
    Compute Welch's t statistic for `sample` versus `control`.

    Parameters
    ----------
    sample, control : sequence of float
        Observations. Each needs at least 2 values.

    Returns
    -------
    tuple
        (t, df, se). All NaN if either sample has fewer than 2 values.
        When se is 0 the samples have no variance and t and df are NaN.
    """
    a = np.asarray(sample, dtype=float)
    b = np.asarray(control, dtype=float)
    n1, n2 = len(a), len(b)
    if n1 < 2 or n2 < 2:
        return math.nan, math.nan, math.nan

    mean1 = a.sum() / n1
    mean2 = b.sum() / n2
    var1 = ((a - mean1) ** 2).sum() / (n1 - 1)
    var2 = ((b - mean2) ** 2).sum() / (n2 - 1)

    se1 = var1 / n1
    se2 = var2 / n2
    se = math.sqrt(se1 + se2)
    if se == 0.0:
        return math.nan, math.nan, 0.0

    t = (mean1 - mean2) / se
    # Welch-Satterthwaite
    df = (se1 + se2) ** 2 / (se1 ** 2 / (n1 - 1) + se2 ** 2 / (n2 - 1))
    return float(t), float(df), se


def welch_ttest(
    sample: Sequence[float],
    control: Sequence[float],
    alpha: float = SIGNIFICANCE_THRESHOLD
) -> Tuple[float, bool]:
    """
    Welch's t-test (independent samples, unequal variances).

    Degenerate input never raises:

    - fewer than 2 observations in either sample gives (NaN, False)
    - zero standard error (identical constant samples) gives (1.0, False)
    - invalid degrees of freedom give (NaN, False)

    Parameters
    ----------
    sample : sequence of float
        Observations for the group under test.
    control : sequence of float
        Observations for the control group.
    alpha : float
        Significance threshold. Default is 0.05.

    Returns
    -------
    tuple
        (p_value, is_significant) for a two-tailed test.

    Examples
    --------
    >>> welch_ttest([3, 3, 3], [3, 3, 3])
    (1.0, False)
    """
    t, df, se = welch_t_statistic(sample, control)
    if math.isnan(se):
        return math.nan, False
    if se == 0.0:
        return 1.0, False
    if not math.isfinite(df) or df <= 0:
        return math.nan, False

    # Student's t with real-valued degrees of freedom
    p_value = float(2.0 * (1.0 - stats.t.cdf(abs(t), df)))
    if math.isnan(p_value):
        return math.nan, False
    return p_value, p_value <= alpha
