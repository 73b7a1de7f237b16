"""
postfix-sheet: Main Entry Point
===============================
Evaluates a grid of postfix formulas read from a delimited text file (or an
``.xlsx`` worksheet) and prints or saves the resolved values.

Usage:
    postfix-sheet [config_file] --input <grid.csv>
    postfix-sheet --input <grid.csv> --format xlsx --output results.xlsx
    postfix-sheet --input <grid.csv> --graph dependencies.png
"""

import argparse
import logging
import os
import sys

import yaml

from .config import OUTPUT_FORMATS, load_config
from .lineage import render_lineage
from .reader import read_grid
from .renderer import render_text, write_csv, write_workbook
from .session import Spreadsheet


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Evaluate a grid of postfix cell formulas'
    )
    parser.add_argument(
        'config', nargs='?', default='config.yaml',
        help='Path to config YAML file (default: config.yaml)'
    )
    parser.add_argument(
        '--input', '-i', type=str, required=True,
        help='Delimited text file or .xlsx workbook to evaluate'
    )
    parser.add_argument(
        '--output', '-o', type=str, default=None,
        help='Output file (required for csv and xlsx formats)'
    )
    parser.add_argument(
        '--format', '-f', choices=OUTPUT_FORMATS, default=None,
        help='Output format (overrides config)'
    )
    parser.add_argument(
        '--delimiter', '-d', type=str, default=None,
        help='Cell delimiter for text input (overrides config)'
    )
    parser.add_argument(
        '--sheet', type=str, default=None,
        help='Worksheet name for .xlsx input (overrides config)'
    )
    parser.add_argument(
        '--graph', '-g', type=str, default=None,
        help='Also render the dependency graph to this PNG file'
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        help='Logging level: DEBUG, INFO, WARNING, ERROR'
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ValueError, yaml.YAMLError) as e:
        setup_logging(args.log_level or 'INFO')
        logging.getLogger(__name__).error(f"Invalid config {args.config}: {e}")
        sys.exit(1)
    delimiter = args.delimiter or config['delimiter']
    output_format = args.format or config['output_format']
    sheet = args.sheet or config.get('sheet')
    error_token = config['error_token']

    setup_logging(args.log_level or config['log_level'])
    logger = logging.getLogger(__name__)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)
    if output_format != 'text' and not args.output:
        logger.error(f"--output is required for format '{output_format}'")
        sys.exit(1)

    session = Spreadsheet()
    try:
        rows = read_grid(args.input, delimiter, sheet)
    except KeyError:
        logger.error(f"Worksheet not found in {args.input}: {sheet}")
        sys.exit(1)
    report = session.load_rows(rows)
    max_col, max_row = session.bounds
    logger.info(f"Grid {max_col + 1} columns x {max_row + 1} rows: "
                f"{report.resolved} resolved, {report.errors} errors, "
                f"{report.cyclic} cyclic")

    if output_format == 'text':
        text = render_text(session, error_token)
        if args.output:
            with open(args.output, 'w') as f:
                f.write(text)
            logger.info(f"Wrote results to {args.output}")
        else:
            sys.stdout.write(text)
    elif output_format == 'csv':
        write_csv(session, args.output, delimiter, error_token)
    else:
        write_workbook(session, args.output, error_token)

    if args.graph:
        render_lineage(session, args.graph)
    return 0


if __name__ == '__main__':
    main()
