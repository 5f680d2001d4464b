import pytest
import pandas as pd
from groupstats.stats.synthetic import generate_sample_table, generate_wide_table

@pytest.fixture(scope="session")
def sample_table():
    """
    Long-format table with a control, an unshifted group 'A' and a
    strongly shifted group 'B', for two data types.
    """
    df, expected = generate_sample_table(n_per_group=40, seed=7)
    return df, expected

@pytest.fixture
def wide_table():
    """
    Wide table with a 'Treatment' column and one column per measure.
    """
    return generate_wide_table()

@pytest.fixture
def small_table():
    """
    Hand-written table with known values
    """
    return pd.DataFrame({
        'group': ['Control'] * 4 + ['A'] * 4 + ['B'] * 3,
        'data_type': ['Weight'] * 11,
        'value': [1.0, 2.0, 3.0, 4.0, 2.0, 3.0, 4.0, 5.0, 10.0, 11.0, 12.0],
    })
