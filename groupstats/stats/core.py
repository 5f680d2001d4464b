"""
Core data model for control-group comparisons.

This module holds the immutable value objects produced by one engine run and
the configuration object that controls how the run is performed.

Classes
-------
GroupStats : Descriptive statistics and significance for one group
DataTypeStats : Statistics for every group of one data type
ChartData : Statistics bundled with the raw per-group samples
StatsConfig : Configuration for statistics and geometry computation
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

# Significance threshold for the t-test
SIGNIFICANCE_THRESHOLD = 0.05


@dataclass(frozen=True)
class GroupStats:
    """
    Statistics for a single group within one data type.

    Attributes
    ----------
    group_name : str
        Group label. Left blank by compute_descriptive_stats and filled in by
        the calculator.
    count : int
        Number of observations.
    mean, median, std, variance : float
        Descriptive statistics. NaN when count is 0.
    p95, p05 : float
        95th and 5th percentiles (linear interpolation between closest ranks).
    std_diff_from_control : float, optional
        (mean - control_mean) / control_std. Only set when the control group
        has a positive, non-NaN standard deviation.
    p_value : float, optional
        Welch's t-test p-value against the control group. Never set for the
        control group itself, nor when the control sample is empty.
    is_significant : bool
        True when p_value <= alpha.
    """

    group_name: str = ""
    count: int = 0
    mean: float = math.nan
    median: float = math.nan
    std: float = math.nan
    variance: float = math.nan
    p95: float = math.nan
    p05: float = math.nan
    std_diff_from_control: Optional[float] = None
    p_value: Optional[float] = None
    is_significant: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return the statistics as a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class DataTypeStats:
    """
    Statistics for one data type across all of its groups.

    Examples
    --------
    >>> stats = compute_data_type_stats(values_by_group, "Weight", "Control")
    >>> stats.get_ordered_groups()
    ['Control', 'A', 'B']
    >>> stats.has_significant_results()
    True
    """

    data_type: str
    control_group: str
    group_stats: Dict[str, GroupStats] = field(default_factory=dict)

    def get_ordered_groups(self) -> List[str]:
        """Group names with the control group first, the rest sorted."""
        groups = sorted(self.group_stats)
        if self.control_group in self.group_stats:
            groups.remove(self.control_group)
            groups.insert(0, self.control_group)
        return groups

    def has_significant_results(self) -> bool:
        """True if any non-control group differs significantly from control."""
        return any(
            gs.is_significant
            for name, gs in self.group_stats.items()
            if name != self.control_group
        )


@dataclass(frozen=True)
class ChartData:
    """
    Statistics for one data type together with the raw samples per group.

    Box plots, beeswarm scatter and quantile plots need the raw values; the
    statistics table only needs the aggregates in `stats`.
    """

    data_type: str
    data_by_group: Dict[str, np.ndarray]
    stats: DataTypeStats

    def values_for(self, group: str) -> np.ndarray:
        """Raw values for `group`, empty if the group has no data."""
        return self.data_by_group.get(group, np.empty(0, dtype=float))


@dataclass
class StatsConfig:
    """
    Configuration for statistics and chart geometry.

    Attributes
    ----------
    alpha : float
        Significance level for Welch's t-test. Default is 0.05.
    threads : int
        Number of worker processes for the per-data-type fan-out.
        1 (the default) computes sequentially in the calling process.
    show_progress : bool
        Show a tqdm progress bar while data types are processed.
    box_width : float
        Box width in group-position units.
    swarm_width : float
        Horizontal spread of beeswarm clusters in group-position units.
    whisker_coef : float
        IQR multiplier for the box-plot whiskers. Default is 1.5.
    duplicate_precision : float
        Values closer than this are treated as duplicates by the beeswarm.

    Examples
    --------
    >>> config = StatsConfig(threads=4, show_progress=True)
    >>> calc = StatsCalculator("Control", config=config)
    """

    alpha: float = SIGNIFICANCE_THRESHOLD
    threads: int = 1
    show_progress: bool = False
    box_width: float = 0.5
    swarm_width: float = 0.35
    whisker_coef: float = 1.5
    duplicate_precision: float = 1e-6

    def __post_init__(self):
        """Validate configuration values."""
        if not 0 < self.alpha < 1:
            raise ValueError(f"alpha must be between 0 and 1, got {self.alpha}")
        if self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")
        if self.box_width <= 0 or self.swarm_width < 0:
            raise ValueError(f"box_width must be positive and swarm_width non-negative, "
                             f"got {self.box_width} and {self.swarm_width}")
        if self.whisker_coef < 0:
            raise ValueError(f"whisker_coef must be non-negative, got {self.whisker_coef}")
        if not 0 < self.duplicate_precision < 1:
            raise ValueError(f"duplicate_precision must be between 0 and 1, "
                             f"got {self.duplicate_precision}")
