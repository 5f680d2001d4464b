"""
Statistics & chart-geometry engine for control-group comparisons.

For every data type of a (group, data_type, value) table, each group is
compared against a control group: descriptive statistics, Welch's t-test
significance, and the geometry renderers draw from (box plots, beeswarm
scatter, normal quantile plots).

Quick Start
-----------
>>> from groupstats.stats import StatsCalculator, build_chart_geometry
>>>
>>> calc = StatsCalculator("Control")
>>> all_stats = calc.compute_all(df)
>>> print(stats_table(all_stats["Weight"]))
>>>
>>> chart_data = calc.compute_chart_data(df, stats=all_stats)
>>> geometry = build_chart_geometry(chart_data["Weight"])

Modules
-------
core : Data model (GroupStats, DataTypeStats, ChartData, StatsConfig)
descriptive : Percentiles and descriptive statistics
significance : Welch's t-test
normal : erf, normal CDF and probit approximations
data : Sample table cleaning and wide-to-long preparation
calculator : Per-data-type orchestration and parallel fan-out
geometry : Box plot, beeswarm, quantile plot and axis geometry
reports : Statistics tables
synthetic : Synthetic data with known properties
"""

# Core data model
from .core import (
    SIGNIFICANCE_THRESHOLD,
    GroupStats,
    DataTypeStats,
    ChartData,
    StatsConfig,
)

# Numerics
from .descriptive import (
    percentile,
    compute_descriptive_stats,
)
from .significance import (
    welch_t_statistic,
    welch_ttest,
)
from .normal import (
    erf,
    normal_cdf,
    probit,
)

# Table preparation
from .data import (
    clean_table,
    stack_to_long,
    prepare_data,
    get_data_types,
    get_groups,
)

# Orchestration
from .calculator import (
    StatsCalculator,
    compute_data_type_stats,
    compute_all_stats,
    split_by_data_type,
    get_values_for_data_type_and_group,
)

# Geometry
from .geometry import (
    BoxPlotStats,
    GroupGeometry,
    ChartGeometry,
    box_plot_stats,
    beeswarm_positions,
    quantile_points,
    mean_trend,
    value_range,
    nice_step,
    axis_ticks,
    quantile_axis,
    quantile_label,
    color_indices,
    build_chart_geometry,
)

# Reports
from .reports import (
    stats_table,
    format_stats_table,
    combined_stats_table,
    order_data_types,
)

# Synthetic data
from .synthetic import (
    generate_sample_table,
    generate_wide_table,
)

__all__ = [
    # Core
    "SIGNIFICANCE_THRESHOLD",
    "GroupStats",
    "DataTypeStats",
    "ChartData",
    "StatsConfig",
    # Numerics
    "percentile",
    "compute_descriptive_stats",
    "welch_t_statistic",
    "welch_ttest",
    "erf",
    "normal_cdf",
    "probit",
    # Table preparation
    "clean_table",
    "stack_to_long",
    "prepare_data",
    "get_data_types",
    "get_groups",
    # Orchestration
    "StatsCalculator",
    "compute_data_type_stats",
    "compute_all_stats",
    "split_by_data_type",
    "get_values_for_data_type_and_group",
    # Geometry
    "BoxPlotStats",
    "GroupGeometry",
    "ChartGeometry",
    "box_plot_stats",
    "beeswarm_positions",
    "quantile_points",
    "mean_trend",
    "value_range",
    "nice_step",
    "axis_ticks",
    "quantile_axis",
    "quantile_label",
    "color_indices",
    "build_chart_geometry",
    # Reports
    "stats_table",
    "format_stats_table",
    "combined_stats_table",
    "order_data_types",
    # Synthetic data
    "generate_sample_table",
    "generate_wide_table",
]
