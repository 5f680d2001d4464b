"""
Synthetic sample tables with KNOWN statistical properties.

Used to check that the engine returns the expected results.

Functions
---------
generate_sample_table : Long-format table with chosen group shifts
generate_wide_table : Wide table with one column per data type
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd


def generate_sample_table(
    groups: Optional[Dict[str, float]] = None,
    data_types: Optional[List[str]] = None,
    n_per_group: int = 30,
    mean_control: float = 10.0,
    sd: float = 2.0,
    seed: int = 42
) -> Tuple[pd.DataFrame, Dict]:
    """
    Generate a (group, data_type, value) table with known mean shifts.

    Parameters
    ----------
    groups : dict, optional
        Group name mapped to its mean shift in units of `sd`. The group with
        shift 0 listed first is reported as the control.
        Default is {"Control": 0.0, "A": 0.0, "B": 2.0}.
    data_types : list of str, optional
        Data types to generate. Default is ["Weight", "Length"].
    n_per_group : int
        Values per group and data type. Default is 30.
    mean_control : float
        Mean of unshifted groups. Default is 10.0.
    sd : float
        Standard deviation of every group. Default is 2.0.
    seed : int
        Random seed for reproducibility. Default is 42.

    Returns
    -------
    df : pd.DataFrame
        Table with 'group', 'data_type' and 'value' columns.
    expected : dict
        Expected properties, including the control group and which groups
        should differ significantly from it.

    Examples
    --------
    >>> df, expected = generate_sample_table(n_per_group=50)
    >>> expected["should_be_significant"]
    {'A': False, 'B': True}
    """
    if groups is None:
        groups = {"Control": 0.0, "A": 0.0, "B": 2.0}
    if data_types is None:
        data_types = ["Weight", "Length"]
    rng = np.random.default_rng(seed)

    control = next((g for g, shift in groups.items() if shift == 0.0), None)
    frames = []
    for data_type in data_types:
        for group, shift in groups.items():
            values = rng.normal(mean_control + shift * sd, sd, n_per_group)
            frames.append(pd.DataFrame({
                "group": group,
                "data_type": data_type,
                "value": values,
            }))
    df = pd.concat(frames, ignore_index=True)

    expected = {
        "control_group": control,
        "true_means": {g: mean_control + shift * sd for g, shift in groups.items()},
        "sd": sd,
        "n_per_group": n_per_group,
        "should_be_significant": {
            g: abs(shift) >= 1.0 and n_per_group >= 15
            for g, shift in groups.items() if g != control
        },
    }
    return df, expected


def generate_wide_table(
    n_per_group: int = 10,
    seed: int = 42
) -> pd.DataFrame:
    """
    Generate a wide table: a 'Treatment' column and one column per measure.

    A few NaN cells are included to exercise row filtering.
    """
    rng = np.random.default_rng(seed)
    treatments = ["Control"] * n_per_group + ["Drug"] * n_per_group
    df = pd.DataFrame({
        "Treatment": treatments,
        "Weight": rng.normal(10.0, 1.0, 2 * n_per_group),
        "Length": rng.normal(5.0, 0.5, 2 * n_per_group),
    })
    df.loc[0, "Weight"] = np.nan
    df.loc[1, "Length"] = np.nan
    return df
