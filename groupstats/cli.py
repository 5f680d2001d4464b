#!/usr/bin/env python
# import
## batteries
import os
import sys
import json
import logging
import argparse
## 3rd party
import pandas as pd
## import from package
from groupstats.logger import init_custom_logger, set_log_level
from groupstats.stats import (
    StatsCalculator,
    StatsConfig,
    build_chart_geometry,
    combined_stats_table,
    order_data_types,
    prepare_data,
)

# logging
_logger = init_custom_logger(__name__)

# argparse
class CustomFormatter(argparse.ArgumentDefaultsHelpFormatter,
                      argparse.RawDescriptionHelpFormatter):
    pass

def parse_args(argv=None):
    desc = 'Group Stats CLI'
    epi = """DESCRIPTION:
    Compare every group against a control group for each data type of a CSV
    table, and write the statistics table (and optionally chart geometry).

    single mode: the CSV is long-format; --data-type-col and --value-col name
    the data type and value columns.
    multi mode: each column listed in --data-cols is one data type.
    """
    parser = argparse.ArgumentParser(description=desc, epilog=epi,
                                     formatter_class=CustomFormatter)
    parser.add_argument('csv_file', type=str,
                        help='Input CSV file')
    parser.add_argument('--control-group', type=str, required=True,
                        help='Group all other groups are compared against')
    parser.add_argument('--mode', type=str, default='single', choices=['single', 'multi'],
                        help='Layout of the input table')
    parser.add_argument('--group-col', type=str, default='group',
                        help='Column holding the group labels')
    parser.add_argument('--data-type-col', type=str, default='data_type',
                        help='Column holding the data type (single mode)')
    parser.add_argument('--value-col', type=str, default='value',
                        help='Column holding the values (single mode)')
    parser.add_argument('--data-cols', type=str, nargs='+', default=None,
                        help='Columns to analyze as data types (multi mode)')
    parser.add_argument('--alpha', type=float, default=0.05,
                        help='Significance level for the t-test')
    parser.add_argument('--geometry', action='store_true', default=False,
                        help='Also write chart geometry as JSON, one file per data type')
    parser.add_argument('--output-dir', type=str, default='groupstats_output',
                        help='Directory to save the output files')
    parser.add_argument('--threads', type=int, default=1,
                        help='Number of parallel processes')
    parser.add_argument('--debug', action='store_true', default=False,
                        help='Debug mode')
    return parser.parse_args(argv)

def _safe_name(data_type: str) -> str:
    return ''.join(c if c.isalnum() or c in '-_.' else '_' for c in data_type)

## main interface function
def main(argv=None):
    # parse args
    args = parse_args(argv)
    if args.debug:
        set_log_level(_logger, logging.DEBUG)

    # check input
    if not os.path.exists(args.csv_file):
        sys.exit(f'CSV file does not exist: {args.csv_file}')
    os.makedirs(args.output_dir, exist_ok=True)

    # load and prepare the table
    raw = pd.read_csv(args.csv_file)
    try:
        table = prepare_data(
            raw,
            mode=args.mode,
            group_col=args.group_col,
            data_type_col=args.data_type_col,
            value_col=args.value_col,
            data_cols=args.data_cols,
        )
    except ValueError as e:
        sys.exit(f'Invalid input table: {e}')
    _logger.debug(f'Prepared {len(table)} rows from {len(raw)} input rows')

    # compute statistics
    config = StatsConfig(alpha=args.alpha, threads=args.threads, show_progress=args.threads > 1)
    calc = StatsCalculator(args.control_group, config=config)
    all_stats = calc.compute_all(table)

    outfile = os.path.join(args.output_dir, 'group_stats.csv')
    combined_stats_table(all_stats).to_csv(outfile, index=False)
    _logger.info(f'Statistics table saved to: {outfile}')

    # geometry
    if args.geometry:
        chart_data = calc.compute_chart_data(table, stats=all_stats)
        for data_type in order_data_types(all_stats):
            geometry = build_chart_geometry(chart_data[data_type], config)
            outfile = os.path.join(args.output_dir, f'geometry_{_safe_name(data_type)}.json')
            with open(outfile, 'w') as f:
                json.dump(geometry.to_dict(), f, indent=2)
            _logger.info(f'  Geometry for \'{data_type}\' saved to: {outfile}')

    # Status
    for data_type in order_data_types(all_stats):
        if all_stats[data_type].has_significant_results():
            print(f'Significant differences from {args.control_group}: {data_type}')
    for data_type, error in calc.failures.items():
        print(f'WARNING: {data_type} failed: {error}', file=sys.stderr)
    print(f"Output written to: {args.output_dir}")
    return 0 if not calc.failures else 1


## script main
if __name__ == '__main__':
    sys.exit(main())
