"""
Preparation of the (group, data_type, value) sample table.

The engine works on a long-format table with exactly three columns. Rows
without a usable group, data type or finite value are dropped here, before
any statistics are computed.

Functions
---------
clean_table : Coerce and filter a table to the engine's three columns
stack_to_long : Stack wide data columns into data_type/value rows
prepare_data : Build the long table in "single" or "multi" column mode
get_data_types : Sorted unique data types
get_groups : Sorted unique groups
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

GROUP_COL = "group"
DATA_TYPE_COL = "data_type"
VALUE_COL = "value"
TABLE_COLUMNS = [GROUP_COL, DATA_TYPE_COL, VALUE_COL]

TableLike = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def _label_series(series: pd.Series) -> pd.Series:
    """Convert labels to stripped strings, missing labels to empty strings."""
    labels = series.astype(object).where(series.notna(), "")
    return labels.map(lambda v: str(v).strip().strip('"'))


def clean_table(table: TableLike) -> pd.DataFrame:
    """
    Return the engine's view of a sample table.

    Parameters
    ----------
    table : pd.DataFrame or iterable of mappings
        Rows with 'group', 'data_type' and 'value' entries.

    Returns
    -------
    pd.DataFrame
        Table with string `group` and `data_type` and float64 `value`.
        Rows with a non-finite value or an empty group/data type are removed.
        Row order is preserved and the index is reset.
    """
    df = table if isinstance(table, pd.DataFrame) else pd.DataFrame(list(table))

    missing_cols = set(TABLE_COLUMNS) - set(df.columns)
    if missing_cols:
        raise ValueError(f"Sample table is missing required columns: {sorted(missing_cols)}")

    if len(df) == 0:
        return pd.DataFrame({
            GROUP_COL: pd.Series(dtype=object),
            DATA_TYPE_COL: pd.Series(dtype=object),
            VALUE_COL: pd.Series(dtype=float),
        })

    out = pd.DataFrame({
        GROUP_COL: _label_series(df[GROUP_COL]),
        DATA_TYPE_COL: _label_series(df[DATA_TYPE_COL]),
        VALUE_COL: pd.to_numeric(df[VALUE_COL], errors="coerce").astype(float),
    })
    keep = (
        np.isfinite(out[VALUE_COL].to_numpy())
        & (out[GROUP_COL] != "")
        & (out[DATA_TYPE_COL] != "")
    )
    return out[keep].reset_index(drop=True)


def stack_to_long(
    df: pd.DataFrame,
    group_col: str,
    data_cols: List[str]
) -> pd.DataFrame:
    """
    Transform multi-column data to long format (stack operation).

    Each of `data_cols` becomes a data type; rows keep their group label.
    Columns listed in `data_cols` but absent from `df` are skipped.

    Returns
    -------
    pd.DataFrame
        Cleaned table with columns group, data_type, value.
    """
    if group_col not in df.columns:
        raise ValueError(f"Group column '{group_col}' not found in DataFrame")

    present = [col for col in data_cols if col in df.columns]
    if not present:
        return clean_table(pd.DataFrame(columns=TABLE_COLUMNS))

    long_df = df[[group_col] + present].melt(
        id_vars=[group_col],
        value_vars=present,
        var_name=DATA_TYPE_COL,
        value_name=VALUE_COL,
    )
    long_df = long_df.rename(columns={group_col: GROUP_COL})
    return clean_table(long_df[TABLE_COLUMNS])


def prepare_data(
    df: pd.DataFrame,
    mode: str,
    group_col: str,
    data_type_col: Optional[str] = None,
    value_col: Optional[str] = None,
    data_cols: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Prepare a loaded table for the engine.

    Parameters
    ----------
    df : pd.DataFrame
        Loaded data.
    mode : str
        "single": data is already long; `data_type_col` and `value_col`
        name the data type and value columns.
        "multi": each column of `data_cols` is one data type.
    group_col : str
        Column holding the group labels.

    Returns
    -------
    pd.DataFrame
        Cleaned table with columns group, data_type, value.

    Examples
    --------
    >>> long_df = prepare_data(raw, "multi", group_col="Treatment",
    ...                        data_cols=["Weight", "Length"])
    """
    if mode == "single":
        if data_type_col is None or value_col is None:
            raise ValueError("Single mode requires data_type_col and value_col")
        missing_cols = {group_col, data_type_col, value_col} - set(df.columns)
        if missing_cols:
            raise ValueError(f"Columns not found in DataFrame: {sorted(missing_cols)}")
        long_df = pd.DataFrame({
            GROUP_COL: df[group_col],
            DATA_TYPE_COL: df[data_type_col],
            VALUE_COL: df[value_col],
        })
        return clean_table(long_df)
    if mode == "multi":
        if not data_cols:
            raise ValueError("Multi mode requires data_cols")
        return stack_to_long(df, group_col, data_cols)
    raise ValueError(f"mode must be 'single' or 'multi', got '{mode}'")


def get_data_types(df: pd.DataFrame) -> List[str]:
    """Sorted unique data types of a prepared table."""
    return sorted(df[DATA_TYPE_COL].dropna().astype(str).unique())


def get_groups(df: pd.DataFrame) -> List[str]:
    """Sorted unique groups of a prepared table."""
    return sorted(df[GROUP_COL].dropna().astype(str).unique())
