"""
Statistics orchestration across data types.

For a sample table and a chosen control group, rows are split by data type
and every data type is processed independently: descriptive statistics per
group, then Welch's t-test of every non-control group against the control.
Data types share no state, so they are fanned out one task each and merged by
the calling process once each task finishes.

Classes
-------
StatsCalculator : Runs the per-data-type computation, sequentially or in a pool

Functions
---------
compute_data_type_stats : Statistics for every group of one data type
split_by_data_type : Raw per-group values for every data type
compute_all_stats : Functional shortcut for StatsCalculator.compute_all
get_values_for_data_type_and_group : Raw values for one data type and group
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Sequence

import numpy as np
from tqdm import tqdm

from groupstats.logger import init_custom_logger
from .core import SIGNIFICANCE_THRESHOLD, ChartData, DataTypeStats, StatsConfig
from .data import DATA_TYPE_COL, GROUP_COL, VALUE_COL, TableLike, clean_table
from .descriptive import compute_descriptive_stats
from .significance import welch_ttest

_logger = init_custom_logger(__name__)

ValuesByGroup = Dict[str, np.ndarray]


def compute_data_type_stats(
    values_by_group: Mapping[str, Sequence[float]],
    data_type: str,
    control_group: str,
    alpha: float = SIGNIFICANCE_THRESHOLD
) -> DataTypeStats:
    """
    Compute statistics for all groups within a data type.

    The control group is always present in the result (with count 0 if it
    has no values here) and never carries a p-value. Each other group gets
    its standardized mean difference from control when the control standard
    deviation is positive, and a Welch's t-test when the control sample is
    non-empty.

    Parameters
    ----------
    values_by_group : mapping of str to sequence of float
        Raw values for each group of this data type.
    data_type : str
        Name of the data type.
    control_group : str
        Name of the control group.
    alpha : float
        Significance threshold for the t-test.

    Returns
    -------
    DataTypeStats
    """
    control_values = np.asarray(values_by_group.get(control_group, ()), dtype=float)
    control_stats = replace(compute_descriptive_stats(control_values), group_name=control_group)
    control_mean = control_stats.mean
    control_std = control_stats.std

    group_stats = {control_group: control_stats}
    for group_name, values in values_by_group.items():
        if group_name == control_group:
            continue

        updates = {"group_name": group_name}
        gs = compute_descriptive_stats(values)

        # Standardized mean difference
        if control_std > 0.0 and not np.isnan(control_mean):
            updates["std_diff_from_control"] = (gs.mean - control_mean) / control_std

        if len(control_values) > 0:
            p_value, is_significant = welch_ttest(values, control_values, alpha=alpha)
            updates["p_value"] = p_value
            updates["is_significant"] = is_significant

        group_stats[group_name] = replace(gs, **updates)

    return DataTypeStats(
        data_type=data_type,
        control_group=control_group,
        group_stats=group_stats,
    )


def split_by_data_type(table: TableLike) -> Dict[str, ValuesByGroup]:
    """
    Group raw values by data type, then by group.

    Data types come out sorted; groups keep their first-appearance order and
    values keep their row order, so downstream layouts are deterministic.
    """
    df = clean_table(table)
    split: Dict[str, ValuesByGroup] = {}
    for data_type, type_df in df.groupby(DATA_TYPE_COL, sort=True):
        split[str(data_type)] = {
            str(group): group_df[VALUE_COL].to_numpy(dtype=float)
            for group, group_df in type_df.groupby(GROUP_COL, sort=False)
        }
    return split


def _data_type_task(
    data_type: str,
    values_by_group: ValuesByGroup,
    control_group: str,
    alpha: float
) -> DataTypeStats:
    return compute_data_type_stats(values_by_group, data_type, control_group, alpha)


@dataclass
class StatsCalculator:
    """
    Compares every group against a control group, for every data type.

    Attributes
    ----------
    control_group : str
        Baseline group all other groups are compared against. If it matches
        no group of a data type, no t-tests are run for that data type.
    config : StatsConfig
        Significance level, worker count and progress display.
    failures : dict
        Data types whose computation raised during the last run, mapped to
        the error message. Those data types are missing from the results.

    Examples
    --------
    >>> calc = StatsCalculator("Control", config=StatsConfig(threads=4))
    >>> all_stats = calc.compute_all(df)
    >>> all_stats["Weight"].get_ordered_groups()
    ['Control', 'A', 'B']
    """
    control_group: str
    config: StatsConfig = field(default_factory=StatsConfig)
    failures: Dict[str, str] = field(default_factory=dict, init=False)
    _logger: Optional[logging.Logger] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self._logger = _logger

    def compute_all(self, table: TableLike) -> Dict[str, DataTypeStats]:
        """
        Compute statistics for all data types.

        Parameters
        ----------
        table : pd.DataFrame or iterable of mappings
            Sample table with group, data_type and value columns.

        Returns
        -------
        dict
            Data type mapped to its DataTypeStats.
        """
        return self._compute(split_by_data_type(table))

    def compute_chart_data(
        self,
        table: TableLike,
        stats: Optional[Mapping[str, DataTypeStats]] = None
    ) -> Dict[str, ChartData]:
        """
        Bundle raw per-group values with the statistics of each data type.

        Parameters
        ----------
        table : pd.DataFrame or iterable of mappings
            Sample table with group, data_type and value columns.
        stats : mapping, optional
            Previously computed statistics for the same table. Computed here
            if not provided.

        Returns
        -------
        dict
            Data type mapped to its ChartData. Data types without statistics
            (failed tasks) are left out.
        """
        split = split_by_data_type(table)
        if stats is None:
            stats = self._compute(split)

        chart_data = {}
        for data_type, values_by_group in split.items():
            if data_type not in stats:
                continue
            chart_data[data_type] = ChartData(
                data_type=data_type,
                data_by_group=values_by_group,
                stats=stats[data_type],
            )
        return chart_data

    def _compute(self, split: Mapping[str, ValuesByGroup]) -> Dict[str, DataTypeStats]:
        self.failures = {}
        results: Dict[str, DataTypeStats] = {}
        if not split:
            self._logger.warning("No valid rows to analyze")
            return results

        if self.control_group not in {g for groups in split.values() for g in groups}:
            self._logger.warning(
                f"Control group '{self.control_group}' not found; no t-tests will be run"
            )

        desc = "Computing statistics per data type"
        alpha = self.config.alpha
        if self.config.threads == 1 or len(split) == 1:
            for data_type, values_by_group in tqdm(split.items(), total=len(split), desc=desc,
                                                   disable=not self.config.show_progress):
                try:
                    results[data_type] = _data_type_task(
                        data_type, values_by_group, self.control_group, alpha
                    )
                except Exception as e:
                    self._record_failure(data_type, e)
        else:
            with ProcessPoolExecutor(max_workers=self.config.threads) as executor:
                logging.disable(logging.INFO)
                try:
                    futures = {
                        executor.submit(_data_type_task, data_type, values_by_group,
                                        self.control_group, alpha): data_type
                        for data_type, values_by_group in split.items()
                    }
                    for future in tqdm(as_completed(futures), total=len(futures), desc=desc,
                                       disable=not self.config.show_progress):
                        data_type = futures[future]
                        try:
                            results[data_type] = future.result()
                        except Exception as e:
                            self._record_failure(data_type, e)
                finally:
                    logging.disable(logging.NOTSET)

        n_sig = sum(1 for s in results.values() if s.has_significant_results())
        self._logger.info(
            f"Computed statistics for {len(results)} data type(s); "
            f"{n_sig} with significant differences from '{self.control_group}'"
        )
        # Sorted so the mapping does not depend on task completion order
        return {data_type: results[data_type] for data_type in sorted(results)}

    def _record_failure(self, data_type: str, error: Exception) -> None:
        self.failures[data_type] = f"{type(error).__name__}: {error}"
        self._logger.warning(f"WARNING: statistics for data type '{data_type}' failed: {error}")


def compute_all_stats(
    table: TableLike,
    control_group: str,
    config: Optional[StatsConfig] = None
) -> Dict[str, DataTypeStats]:
    """
    Compute statistics for all data types of `table`.

    See StatsCalculator.compute_all.
    """
    calc = StatsCalculator(control_group, config=config or StatsConfig())
    return calc.compute_all(table)


def get_values_for_data_type_and_group(
    table: TableLike,
    data_type: str,
    group: str
) -> np.ndarray:
    """
    Get values for a specific data type and group, in row order.

    These are the same values the statistics table is computed from.
    """
    df = clean_table(table)
    mask = (df[DATA_TYPE_COL] == data_type) & (df[GROUP_COL] == group)
    return df.loc[mask, VALUE_COL].to_numpy(dtype=float)
