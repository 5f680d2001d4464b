"""
Statistics tables for display and export.

Functions
---------
stats_table : Numeric statistics table of one data type
format_stats_table : The same table formatted as renderers print it
combined_stats_table : One table covering several data types
order_data_types : Data types with significant results first
"""

from __future__ import annotations

import math
from typing import List, Mapping, Optional

import pandas as pd

from .core import DataTypeStats

STATS_COLUMNS = [
    "Group",
    "Count",
    "Mean",
    "Median",
    "Std",
    "P95",
    "P05",
    "(Mean-Ctrl)/σ",
    "P-value",
    "Significant",
]


def _or_nan(value: Optional[float]) -> float:
    return math.nan if value is None else value


def stats_table(stats: DataTypeStats) -> pd.DataFrame:
    """
    Statistics of one data type as a DataFrame, one row per group.

    Rows follow get_ordered_groups() (control first). Missing optional values
    (standardized difference, p-value) are NaN.
    """
    rows = []
    for group in stats.get_ordered_groups():
        record = stats.group_stats[group].to_dict()
        rows.append({
            "Group": group,
            "Count": record["count"],
            "Mean": record["mean"],
            "Median": record["median"],
            "Std": record["std"],
            "P95": record["p95"],
            "P05": record["p05"],
            "(Mean-Ctrl)/σ": _or_nan(record["std_diff_from_control"]),
            "P-value": _or_nan(record["p_value"]),
            "Significant": record["is_significant"],
        })
    return pd.DataFrame(rows, columns=STATS_COLUMNS)


def _fmt(value: Optional[float], decimals: int) -> str:
    if value is None:
        return "-"
    return f"{value:.{decimals}f}"


def format_stats_table(stats: DataTypeStats) -> pd.DataFrame:
    """
    Statistics table with every cell formatted as text.

    Values use 3 decimals, p-values 4 decimals and "-" marks a value that
    does not apply (the control group's p-value, for instance).
    """
    rows = []
    for group in stats.get_ordered_groups():
        gs = stats.group_stats[group]
        rows.append({
            "Group": group,
            "Count": str(gs.count),
            "Mean": _fmt(gs.mean, 3),
            "Median": _fmt(gs.median, 3),
            "Std": _fmt(gs.std, 3),
            "P95": _fmt(gs.p95, 3),
            "P05": _fmt(gs.p05, 3),
            "(Mean-Ctrl)/σ": _fmt(gs.std_diff_from_control, 3),
            "P-value": _fmt(gs.p_value, 4),
            "Significant": "yes" if gs.is_significant else "",
        })
    return pd.DataFrame(rows, columns=STATS_COLUMNS)


def order_data_types(stats_map: Mapping[str, DataTypeStats]) -> List[str]:
    """
    Data types with significant results first, then the rest; each sorted.
    """
    significant = sorted(dt for dt, s in stats_map.items() if s.has_significant_results())
    others = sorted(dt for dt, s in stats_map.items() if not s.has_significant_results())
    return significant + others


def combined_stats_table(stats_map: Mapping[str, DataTypeStats]) -> pd.DataFrame:
    """
    Statistics tables of several data types stacked into one DataFrame.

    Data types follow order_data_types(); a leading 'Data Type' column
    identifies each row's data type.
    """
    tables = []
    for data_type in order_data_types(stats_map):
        table = stats_table(stats_map[data_type])
        table.insert(0, "Data Type", data_type)
        tables.append(table)
    if not tables:
        return pd.DataFrame(columns=["Data Type"] + STATS_COLUMNS)
    return pd.concat(tables, ignore_index=True)
