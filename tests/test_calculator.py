# imports
import math
import pytest
import numpy as np
import pandas as pd
from groupstats.stats import calculator
from groupstats.stats.core import DataTypeStats, GroupStats, StatsConfig
from groupstats.stats.calculator import (
    StatsCalculator,
    compute_data_type_stats,
    compute_all_stats,
    split_by_data_type,
    get_values_for_data_type_and_group,
)

# Data model
def test_ordered_groups():
    """
    Control first, the rest sorted
    """
    stats = DataTypeStats('Weight', 'Control', {
        'B': GroupStats('B'), 'Control': GroupStats('Control'), 'A': GroupStats('A'),
    })
    assert stats.get_ordered_groups() == ['Control', 'A', 'B']
    no_control = DataTypeStats('Weight', 'Missing', {'B': GroupStats('B'), 'A': GroupStats('A')})
    assert no_control.get_ordered_groups() == ['A', 'B']

def test_has_significant_results():
    """
    Only non-control groups count as significant results
    """
    only_control = DataTypeStats('W', 'Control', {
        'Control': GroupStats('Control', is_significant=True),
        'A': GroupStats('A', p_value=0.5),
    })
    assert only_control.has_significant_results() is False
    with_sig = DataTypeStats('W', 'Control', {
        'Control': GroupStats('Control'),
        'A': GroupStats('A', p_value=0.01, is_significant=True),
    })
    assert with_sig.has_significant_results() is True

def test_config_validation():
    """
    Invalid configuration values raise ValueError
    """
    with pytest.raises(ValueError):
        StatsConfig(alpha=1.5)
    with pytest.raises(ValueError):
        StatsConfig(threads=0)
    with pytest.raises(ValueError):
        StatsConfig(whisker_coef=-1)

# Per-data-type statistics
def test_compute_data_type_stats(small_table):
    """
    Control and non-control group statistics for known values
    """
    values = split_by_data_type(small_table)['Weight']
    stats = compute_data_type_stats(values, 'Weight', 'Control')
    control = stats.group_stats['Control']
    assert control.count == 4
    assert control.mean == 2.5
    assert control.p_value is None
    assert control.std_diff_from_control is None
    assert control.is_significant is False

    group_a = stats.group_stats['A']
    assert group_a.group_name == 'A'
    assert group_a.std_diff_from_control == pytest.approx(1.0 / control.std)
    assert 0.05 < group_a.p_value < 1.0
    assert group_a.is_significant is False

    group_b = stats.group_stats['B']
    assert group_b.is_significant is True
    assert group_b.p_value <= 0.05
    assert stats.has_significant_results()

def test_missing_control_group(small_table):
    """
    Without control values no t-test or standardized difference is computed
    """
    stats = compute_all_stats(small_table, 'Nobody')['Weight']
    assert stats.group_stats['Nobody'].count == 0
    assert stats.get_ordered_groups()[0] == 'Nobody'
    for group in ('A', 'B', 'Control'):
        gs = stats.group_stats[group]
        assert gs.p_value is None
        assert gs.std_diff_from_control is None
        assert gs.is_significant is False

def test_zero_variance_control():
    """
    Constant control: no standardized difference, t-test still defined
    """
    values = {'Control': [3.0, 3.0, 3.0], 'A': [3.0, 3.0, 3.0], 'B': [1.0, 2.0, 3.0]}
    stats = compute_data_type_stats(values, 'W', 'Control')
    assert stats.group_stats['A'].std_diff_from_control is None
    assert stats.group_stats['A'].p_value == 1.0
    assert stats.group_stats['A'].is_significant is False
    assert stats.group_stats['B'].p_value is not None

def test_single_observation_groups():
    """
    Groups too small for a t-test get a NaN p-value, never significant
    """
    values = {'Control': [1.0, 2.0, 3.0], 'A': [5.0]}
    gs = compute_data_type_stats(values, 'W', 'Control').group_stats['A']
    assert gs.count == 1
    assert math.isnan(gs.p_value)
    assert gs.is_significant is False

def test_significance_invariant(sample_table):
    """
    is_significant always implies a p-value at or below alpha
    """
    df, _ = sample_table
    for stats in compute_all_stats(df, 'Control').values():
        for gs in stats.group_stats.values():
            if gs.is_significant:
                assert gs.p_value is not None and gs.p_value <= 0.05

def test_expected_significance(sample_table):
    """
    A strongly shifted group is flagged, across every data type
    """
    df, expected = sample_table
    all_stats = compute_all_stats(df, expected['control_group'])
    assert sorted(all_stats) == ['Length', 'Weight']
    for stats in all_stats.values():
        assert stats.group_stats['B'].is_significant is True
        assert stats.group_stats['Control'].count == expected['n_per_group']

# Table handling
def test_rows_are_filtered():
    """
    Non-finite values and empty labels never reach the statistics
    """
    df = pd.DataFrame({
        'group': ['Control', 'Control', 'A', '', None, 'A', 'A'],
        'data_type': ['W', 'W', 'W', 'W', 'W', None, 'W'],
        'value': [1.0, np.nan, 2.0, 3.0, 4.0, 5.0, np.inf],
    })
    stats = compute_all_stats(df, 'Control')
    assert list(stats) == ['W']
    assert stats['W'].group_stats['Control'].count == 1
    assert stats['W'].group_stats['A'].count == 1

def test_rows_as_mappings():
    """
    A list of row dictionaries is accepted as the table
    """
    rows = [
        {'group': 'Control', 'data_type': 'W', 'value': 1.0},
        {'group': 'Control', 'data_type': 'W', 'value': 2.0},
        {'group': 'A', 'data_type': 'W', 'value': 3.0},
    ]
    stats = compute_all_stats(rows, 'Control')
    assert stats['W'].group_stats['Control'].mean == 1.5

def test_empty_table():
    """
    An empty table gives no results
    """
    df = pd.DataFrame(columns=['group', 'data_type', 'value'])
    assert compute_all_stats(df, 'Control') == {}

def test_get_values_for_data_type_and_group(small_table):
    """
    Raw values in row order
    """
    values = get_values_for_data_type_and_group(small_table, 'Weight', 'B')
    np.testing.assert_array_equal(values, [10.0, 11.0, 12.0])
    assert len(get_values_for_data_type_and_group(small_table, 'Length', 'B')) == 0

# Orchestration
def test_determinism(sample_table):
    """
    Two runs on the same table give identical statistics
    """
    df, _ = sample_table
    first = compute_all_stats(df, 'Control')
    second = compute_all_stats(df, 'Control')
    assert first == second

def test_parallel_matches_sequential(sample_table):
    """
    The process pool gives the same results as the sequential path
    """
    df, _ = sample_table
    sequential = compute_all_stats(df, 'Control', StatsConfig(threads=1))
    parallel = compute_all_stats(df, 'Control', StatsConfig(threads=2))
    assert sequential == parallel

def test_failure_isolation(small_table, monkeypatch):
    """
    One failing data type does not stop the others
    """
    original = calculator.compute_data_type_stats

    def flaky(values_by_group, data_type, control_group, alpha):
        if data_type == 'Bad':
            raise RuntimeError('boom')
        return original(values_by_group, data_type, control_group, alpha)

    monkeypatch.setattr(calculator, 'compute_data_type_stats', flaky)
    bad = small_table.assign(data_type='Bad')
    calc = StatsCalculator('Control')
    results = calc.compute_all(pd.concat([small_table, bad], ignore_index=True))
    assert list(results) == ['Weight']
    assert 'Bad' in calc.failures
    assert 'boom' in calc.failures['Bad']

def test_failure_isolation_in_pool():
    """
    A data type failing inside a worker process is recorded; the others complete
    """
    split = {
        'Good1': {'Control': np.array([1., 2., 3.]), 'A': np.array([2., 3., 4.])},
        'Good2': {'Control': np.array([5., 6., 7.]), 'A': np.array([5., 7., 9.])},
        'Bad': {'Control': np.array(['x'], dtype=object)},
    }
    calc = StatsCalculator('Control', config=StatsConfig(threads=2))
    results = calc._compute(split)
    assert list(results) == ['Good1', 'Good2']
    assert list(calc.failures) == ['Bad']
    assert calc.failures['Bad'].startswith('ValueError')
    assert results['Good1'].group_stats['A'].count == 3

def test_compute_chart_data(small_table):
    """
    Chart data bundles raw values with the matching statistics
    """
    calc = StatsCalculator('Control')
    all_stats = calc.compute_all(small_table)
    chart_data = calc.compute_chart_data(small_table, stats=all_stats)
    data = chart_data['Weight']
    assert data.stats is all_stats['Weight']
    np.testing.assert_array_equal(data.values_for('A'), [2.0, 3.0, 4.0, 5.0])
    assert len(data.values_for('Missing')) == 0
    for group, values in data.data_by_group.items():
        assert data.stats.group_stats[group].count == len(values)
