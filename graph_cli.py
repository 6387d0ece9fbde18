#!/usr/bin/env python3
"""
Command-line interface for the table grapher.
Generates a line graph from the first numeric column of the tables on a page
(or in a local HTML / JSON grid file).

Usage:
    table-grapher https://en.wikipedia.org/wiki/... [--output graph.png] [--column 2]
    table-grapher --html-file page.html
    table-grapher --grid-file table.json
    table-grapher --list
"""

import sys
import json
import asyncio
import argparse
from typing import List, Optional

import config
from config_validator import validate_config
from logging_config import setup_logging
from error_handler import (
    ConfigurationError, ErrorContext, ErrorSeverity, GraphGenerationError, describe_error,
    log_error_with_context,
)
from chart_renderer import format_number
from graph_service import GraphService, GraphResult
from url_utils import validate_source_url


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="table-grapher",
        description="Generate a graph from numeric data in HTML tables",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("url", nargs="?", help="The page URL to process")
    source.add_argument("--html-file", help="Read tables from a local HTML file instead of fetching")
    source.add_argument("--grid-file", help="Read a single table from a JSON array of rows")
    source.add_argument("--list", action="store_true", help="List previously generated graphs")
    parser.add_argument("--output", help="Output path for the graph image (default: a new file in GRAPH_OUTPUT_DIR)")
    parser.add_argument("--column", type=int, help="Specific column index to plot (optional)")
    parser.add_argument("--wikipedia-only", action="store_true",
                        help="Reject URLs that are not Wikipedia pages")
    return parser


def load_grid_file(path: str) -> List[List[str]]:
    """Read a JSON grid (list of rows of cell strings)."""
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, list) or not all(isinstance(row, list) for row in data):
        raise ValueError(f"{path} must contain a JSON array of rows")
    return [[str(cell) for cell in row] for row in data]


def print_result(result: GraphResult):
    print(f"✓ Using table {result.table_index + 1} ({result.table_rows} rows x {result.table_columns} columns)")
    print(f"  Found {len(result.numeric_columns)} numeric column(s): {result.numeric_columns}")
    print(f"  Column {result.column_index}: {result.column_name or 'unnamed'}")
    print(f"  Extracted {result.point_count} data points")
    print(f"  Min: {format_number(result.minimum)}")
    print(f"  Max: {format_number(result.maximum)}")
    print(f"  Average: {format_number(result.mean)}")
    print("✓ Graph generated successfully!")
    print(f"Output saved to: {result.path}")
    print(f"URL: {result.url}")


def print_graphs(service: GraphService):
    graphs = service.list_graphs()
    if not graphs:
        print("No graphs generated yet.")
        return
    print(f"{len(graphs)} graph(s):")
    for graph in graphs:
        print(f"  {graph['url']}  ({graph['path']})")


async def run(args: argparse.Namespace, service: Optional[GraphService] = None) -> int:
    """Execute one CLI invocation and return the exit status."""
    if args.column is not None and args.column < 0:
        print("❌ Error: --column must be a non-negative index")
        return 1

    service = service or GraphService()

    if args.list:
        print_graphs(service)
        return 0

    try:
        with ErrorContext("Graph generation", severity=ErrorSeverity.MEDIUM):
            if args.grid_file:
                print(f"Reading grid: {args.grid_file}")
                result = service.generate_from_tables(
                    [load_grid_file(args.grid_file)], column=args.column, output_path=args.output
                )
            elif args.html_file:
                print(f"Reading HTML file: {args.html_file}")
                with open(args.html_file, encoding="utf-8") as handle:
                    html = handle.read()
                result = service.generate_from_html(html, column=args.column, output_path=args.output)
            else:
                url = validate_source_url(args.url, wikipedia_only=args.wikipedia_only)
                print(f"Fetching page: {url}")
                result = await service.generate_from_url(url, column=args.column, output_path=args.output)
    except GraphGenerationError as e:
        print(f"❌ Error: {describe_error(e)}")
        return 1
    except (OSError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1
    except Exception as e:
        print(f"❌ Error: {describe_error(e)}")
        return 1

    print_result(result)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    try:
        validate_config(config)
    except ConfigurationError as e:
        log_error_with_context(e, "Configuration", ErrorSeverity.CRITICAL)
        print(f"❌ Configuration error: {e}")
        return 1
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
