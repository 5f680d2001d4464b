"""
Renderer-agnostic chart geometry.

Every rendering backend (interactive, raster, vector) draws from the output
of this module instead of computing its own quartiles, jitter or normal
scores. Coordinates are in abstract units: data values on the value axis,
group positions (0, 1, 2, ... in ordered-group order) on the group axis and
normal scores on the quantile-plot axis. Mapping to pixels is the renderer's
job.

Functions
---------
box_plot_stats : Index-based quartiles, whiskers and mean of one group
beeswarm_positions : Deterministic horizontal offsets for duplicate values
quantile_points : (normal score, value) pairs for a normal quantile plot
mean_trend : Group means in ordered-group order
value_range : Padded value-axis range
nice_step : Round tick step for an axis span
axis_ticks : Tick values between two bounds
quantile_axis : Quantile-plot x range and percent ticks
quantile_label : Percent label for a normal score
color_indices : Colour slot of every group
build_chart_geometry : Everything above for one data type
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .core import ChartData, StatsConfig
from .normal import normal_cdf, probit

# Quantile-plot ticks, as (probability, label)
QQ_TICKS = (
    (0.05, "5%"),
    (0.25, "25%"),
    (0.50, "50%"),
    (0.75, "75%"),
    (0.95, "95%"),
)
QQ_RANGE = (0.005, 0.995)


@dataclass(frozen=True)
class BoxPlotStats:
    """
    Box-plot summary of one group.

    Quartiles are taken at integer-division indices of the sorted sample
    (n//4, n//2, 3n//4) and are not interpolated, so they can differ from the
    percentiles in the statistics table. Whiskers reach the most extreme
    samples within whisker_coef * IQR of the box.
    """

    q1: float
    median: float
    q3: float
    iqr: float
    whisker_low: float
    whisker_high: float
    mean: float
    count: int


@dataclass(frozen=True)
class GroupGeometry:
    """Geometry of one group within a chart."""

    group: str
    position: int
    is_control: bool
    color_index: Optional[int]
    box: BoxPlotStats
    swarm: np.ndarray
    quantiles: np.ndarray


@dataclass(frozen=True)
class ChartGeometry:
    """
    All geometry a renderer needs for one data type.

    Attributes
    ----------
    data_type : str
        Name of the data type.
    groups : list of GroupGeometry
        Groups with data, in ordered-group order.
    labels : list of str
        Ordered group names, one per group position (including empty groups).
    mean_trend : list of (position, mean)
        Points of the connecting mean line.
    value_range : (float, float)
        Padded value-axis range shared by the box plot and quantile plot.
    value_ticks : np.ndarray
        Value-axis tick positions.
    quantile_range : (float, float)
        Normal-score range of the quantile plot x axis.
    quantile_ticks : list of (float, str)
        Quantile-plot x ticks as (normal score, label).
    """

    data_type: str
    groups: List[GroupGeometry]
    labels: List[str]
    mean_trend: List[Tuple[int, float]]
    value_range: Tuple[float, float]
    value_ticks: np.ndarray
    quantile_range: Tuple[float, float]
    quantile_ticks: List[Tuple[float, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable form of the geometry."""
        return {
            "data_type": self.data_type,
            "labels": list(self.labels),
            "groups": [
                {
                    "group": g.group,
                    "position": g.position,
                    "is_control": g.is_control,
                    "color_index": g.color_index,
                    "box": asdict(g.box),
                    "swarm": g.swarm.tolist(),
                    "quantiles": g.quantiles.tolist(),
                }
                for g in self.groups
            ],
            "mean_trend": [list(point) for point in self.mean_trend],
            "value_range": list(self.value_range),
            "value_ticks": self.value_ticks.tolist(),
            "quantile_range": list(self.quantile_range),
            "quantile_ticks": [list(tick) for tick in self.quantile_ticks],
        }


def box_plot_stats(values: Sequence[float], whisker_coef: float = 1.5) -> Optional[BoxPlotStats]:
    """
    Compute box-plot statistics for one group.

    Parameters
    ----------
    values : sequence of float
        Raw values, any order.
    whisker_coef : float
        IQR multiplier for the whisker reach. Default is 1.5.

    Returns
    -------
    BoxPlotStats or None
        None for an empty group. A single value collapses the box to a point.

    Examples
    --------
    >>> box = box_plot_stats([1, 2, 3, 4, 5, 6, 7, 8])
    >>> box.q1, box.median, box.q3
    (3.0, 5.0, 7.0)
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        return None

    sorted_arr = np.sort(arr)
    q1 = float(sorted_arr[n // 4])
    median = float(sorted_arr[n // 2])
    q3 = float(sorted_arr[3 * n // 4])
    iqr = q3 - q1

    low_reach = q1 - whisker_coef * iqr
    high_reach = q3 + whisker_coef * iqr
    inside_low = sorted_arr[sorted_arr >= low_reach]
    inside_high = sorted_arr[sorted_arr <= high_reach]
    whisker_low = float(inside_low[0]) if len(inside_low) else q1
    whisker_high = float(inside_high[-1]) if len(inside_high) else q3

    return BoxPlotStats(
        q1=q1,
        median=median,
        q3=q3,
        iqr=iqr,
        whisker_low=whisker_low,
        whisker_high=whisker_high,
        mean=float(arr.sum() / n),
        count=n,
    )


def _duplicate_keys(values: np.ndarray, precision: float) -> np.ndarray:
    # round half away from zero; float keys since values / precision may exceed int64
    scaled = values / precision
    return np.sign(scaled) * np.floor(np.abs(scaled) + 0.5)


def beeswarm_positions(
    values: Sequence[float],
    center: float,
    width: float,
    precision: float = 1e-6
) -> np.ndarray:
    """
    Horizontal positions that keep duplicate values from overlapping.

    Values equal after rounding to `precision` form a cluster. A cluster of
    k > 1 points is spread evenly over [center - width/2, center + width/2]
    in input order; single values stay at `center`. No randomness is used,
    so the same input always gives the same layout.

    Parameters
    ----------
    values : sequence of float
        Raw values in their original order.
    center : float
        Group position.
    width : float
        Total spread of a cluster.
    precision : float
        Resolution for detecting near-duplicates. Default is 1e-6.

    Returns
    -------
    np.ndarray
        One x position per value, aligned with `values`.
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    positions = np.full(n, float(center))
    if n == 0:
        return positions

    clusters: Dict[float, List[int]] = {}
    for idx, key in enumerate(_duplicate_keys(arr, precision)):
        clusters.setdefault(float(key), []).append(idx)

    start = center - width / 2.0
    for indices in clusters.values():
        count = len(indices)
        if count < 2:
            continue
        step = width / (count - 1)
        for i, idx in enumerate(indices):
            positions[idx] = start + i * step
    return positions


def quantile_points(values: Sequence[float]) -> np.ndarray:
    """
    Normal quantile plot points for one group.

    The i-th of n sorted values (0-indexed) gets the plotting position
    (i + 0.5) / n, which is mapped through the inverse normal CDF.

    Returns
    -------
    np.ndarray
        Array of shape (n, 2) holding (normal score, value) rows, sorted by
        value. Empty input gives shape (0, 2).
    """
    sorted_arr = np.sort(np.asarray(values, dtype=float))
    n = len(sorted_arr)
    if n == 0:
        return np.empty((0, 2))
    positions = (np.arange(n) + 0.5) / n
    return np.column_stack([probit(positions), sorted_arr])


def mean_trend(chart_data: ChartData) -> List[Tuple[int, float]]:
    """
    Means of the groups with data, at their positions in ordered-group order.
    """
    trend = []
    for position, group in enumerate(chart_data.stats.get_ordered_groups()):
        values = chart_data.values_for(group)
        if len(values) == 0:
            continue
        trend.append((position, float(np.sum(values) / len(values))))
    return trend


def value_range(chart_data: ChartData, pad: float = 0.15) -> Tuple[float, float]:
    """
    Value-axis range covering every group, padded and rounded outwards.

    Returns (0, 100) when there is no finite data.
    """
    finite = [
        arr[np.isfinite(arr)]
        for arr in (np.asarray(v, dtype=float) for v in chart_data.data_by_group.values())
    ]
    finite = [arr for arr in finite if len(arr)]
    if not finite:
        return 0.0, 100.0
    lo = min(float(arr.min()) for arr in finite)
    hi = max(float(arr.max()) for arr in finite)
    margin = (hi - lo) * pad
    lo, hi = math.floor(lo - margin), math.ceil(hi + margin)
    if lo == hi:
        hi = lo + 1.0
    return float(lo), float(hi)


def nice_step(span: float, target_steps: int) -> float:
    """Round a raw step of span/target_steps up to 1, 2, 5 or 10 times a power of 10."""
    if span <= 0 or target_steps < 1:
        raise ValueError(f"span and target_steps must be positive, got {span} and {target_steps}")
    raw_step = span / target_steps
    magnitude = 10.0 ** math.floor(math.log10(raw_step))
    normalized = raw_step / magnitude
    if normalized <= 1.0:
        nice = 1.0
    elif normalized <= 2.0:
        nice = 2.0
    elif normalized <= 5.0:
        nice = 5.0
    else:
        nice = 10.0
    return nice * magnitude


def axis_ticks(lo: float, hi: float, target_steps: int = 5) -> np.ndarray:
    """Multiples of nice_step(hi - lo, target_steps) within [lo, hi]."""
    step = nice_step(hi - lo, target_steps)
    first = math.ceil(lo / step)
    last = math.floor(hi / step)
    return np.arange(first, last + 1) * step


def quantile_label(score: float) -> str:
    """Percent label for a normal score, e.g. 1.645 -> '95%'."""
    pct = 100.0 * normal_cdf(score)
    return f"{pct:.0f}%" if pct >= 1.0 else f"{pct:.1f}%"


def quantile_axis() -> Tuple[Tuple[float, float], List[Tuple[float, str]]]:
    """
    X range and ticks of the normal quantile plot.

    Returns
    -------
    tuple
        ((x_min, x_max), [(normal score, label), ...])
    """
    x_range = (float(probit(QQ_RANGE[0])), float(probit(QQ_RANGE[1])))
    ticks = [(float(probit(p)), label) for p, label in QQ_TICKS]
    return x_range, ticks


def color_indices(ordered_groups: Sequence[str], control_group: str) -> Dict[str, Optional[int]]:
    """
    Colour slot for every group.

    The control group maps to None (the control colour); the other groups
    are numbered 0, 1, 2, ... in order, for renderers to index their palette
    modulo its length.
    """
    indices: Dict[str, Optional[int]] = {}
    next_index = 0
    for group in ordered_groups:
        if group == control_group:
            indices[group] = None
        else:
            indices[group] = next_index
            next_index += 1
    return indices


def build_chart_geometry(
    chart_data: ChartData,
    config: Optional[StatsConfig] = None
) -> ChartGeometry:
    """
    Compute the full geometry of one data type's chart.

    Parameters
    ----------
    chart_data : ChartData
        Statistics and raw values of one data type.
    config : StatsConfig, optional
        Whisker coefficient, beeswarm width and duplicate precision.

    Returns
    -------
    ChartGeometry
    """
    config = config or StatsConfig()
    stats = chart_data.stats
    labels = stats.get_ordered_groups()
    populated = [g for g in labels if len(chart_data.values_for(g)) > 0]
    colors = color_indices(populated, stats.control_group)

    groups = []
    for position, group in enumerate(labels):
        values = chart_data.values_for(group)
        box = box_plot_stats(values, whisker_coef=config.whisker_coef)
        if box is None:
            continue
        swarm_x = beeswarm_positions(
            values, float(position), config.swarm_width, precision=config.duplicate_precision
        )
        groups.append(GroupGeometry(
            group=group,
            position=position,
            is_control=group == stats.control_group,
            color_index=colors[group],
            box=box,
            swarm=np.column_stack([swarm_x, np.asarray(values, dtype=float)]),
            quantiles=quantile_points(values),
        ))

    lo, hi = value_range(chart_data)
    q_range, q_ticks = quantile_axis()
    return ChartGeometry(
        data_type=chart_data.data_type,
        groups=groups,
        labels=labels,
        mean_trend=mean_trend(chart_data),
        value_range=(lo, hi),
        value_ticks=axis_ticks(lo, hi, target_steps=8),
        quantile_range=q_range,
        quantile_ticks=q_ticks,
    )
