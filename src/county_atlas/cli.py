"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from county_atlas import __version__
from county_atlas.analysis.serialization import correlation_to_dict
from county_atlas.config import get_settings
from county_atlas.datasources.geometry import filter_by_id_prefix, parse_feature_collection
from county_atlas.datasources.tables import read_source
from county_atlas.errors import DegenerateInputError, ParseError, SourceUnavailableError
from county_atlas.flows.build import build_all
from county_atlas.flows.fetch import fetch_all
from county_atlas.log import configure_logging
from county_atlas.pipeline import choropleth, dataset_from_text, scatter
from county_atlas.reference.sources import (
    BLACK_POPULATION,
    HYPERTENSION,
    INCOME,
    ChoroplethView,
    ScatterView,
)

JOIN_LAYOUTS = {
    "income": INCOME,
    "rate": HYPERTENSION,
    "demographic": BLACK_POPULATION,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="county-atlas",
        description="County income and health data: choropleth joins and correlation analysis",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    subparsers.add_parser("refresh", help="Fetch inputs and build all outputs")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Correlate an income extract with a rate file"
    )
    analyze_parser.add_argument("income_csv", type=Path, help="Income report export")
    analyze_parser.add_argument("rate_csv", type=Path, help="county,rate file")
    analyze_parser.add_argument(
        "--x-scale",
        type=float,
        default=0.001,
        help="Multiplier for income values (default: 0.001, i.e. thousands)",
    )
    analyze_parser.add_argument(
        "--outliers",
        type=int,
        default=None,
        help="Number of outliers to report (default: outlier_count from settings)",
    )
    analyze_parser.add_argument("--json", action="store_true", help="Print JSON output")

    join_parser = subparsers.add_parser("join", help="Check how many counties a CSV matches")
    join_parser.add_argument("csv", type=Path, help="CSV extract")
    join_parser.add_argument("geojson", type=Path, help="County FeatureCollection file")
    join_parser.add_argument(
        "--layout",
        choices=sorted(JOIN_LAYOUTS),
        default="income",
        help="Layout of the CSV (default: income)",
    )
    join_parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Feature id prefix (default: state_fips_prefix from settings)",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Data dir: {settings.data_dir}")
    print(f"Sources: {settings.sources_base_url or settings.sources_dir}")
    print(f"State prefix: {settings.state_fips_prefix}")
    return 0


def cmd_refresh(_args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: fetch inputs then build outputs."""
    print("Fetching inputs...")
    fetch_all()

    print("Building outputs...")
    result = build_all()

    print(f"Done. {len(result.get('outputs', {}))} outputs written.")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the 'analyze' command."""
    settings = get_settings()
    k = args.outliers if args.outliers is not None else settings.outlier_count
    view = ScatterView("cli", INCOME, HYPERTENSION, x_scale=args.x_scale)
    try:
        income = dataset_from_text(INCOME, read_source(args.income_csv), view.x_scale)
        rates = dataset_from_text(HYPERTENSION, read_source(args.rate_csv))
        result = scatter(view, income, rates, k)
    except (SourceUnavailableError, ParseError, DegenerateInputError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(correlation_to_dict(result), indent=2))
        return 0

    print(f"Counties: {result.size_n}")
    print(f"Slope: {result.slope:.4f}")
    print(f"Intercept: {result.intercept:.4f}")
    print(f"Correlation: {result.correlation:.3f}")
    ex = result.extrema
    print(f"Highest rate: {ex.max_y.label} ({ex.max_y.y:.1f})")
    print(f"Lowest rate: {ex.min_y.label} ({ex.min_y.y:.1f})")
    print(f"Highest income: {ex.max_x.label} ({ex.max_x.x:.1f})")
    print(f"Lowest income: {ex.min_x.label} ({ex.min_x.x:.1f})")
    for outlier in result.outliers:
        print(f"Outlier: {outlier.label} (residual {outlier.residual:.2f})")
    return 0


def cmd_join(args: argparse.Namespace) -> int:
    """Handle the 'join' command."""
    settings = get_settings()
    prefix = args.prefix if args.prefix is not None else settings.state_fips_prefix
    spec = JOIN_LAYOUTS[args.layout]
    try:
        dataset = dataset_from_text(spec, read_source(args.csv))
        doc = json.loads(read_source(args.geojson))
    except (SourceUnavailableError, ParseError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not isinstance(doc, dict):
        print(f"Error: {args.geojson} is not a GeoJSON object", file=sys.stderr)
        return 1

    features = filter_by_id_prefix(parse_feature_collection(doc), prefix)
    result = choropleth(ChoroplethView(args.layout, spec), features, dataset)
    print(f"Matched: {result.matched_count}/{result.total}")
    for name in result.unmatched_names:
        print(f"No data: {name}")
    warning = result.quality_warning(settings.min_match_fraction)
    if warning is not None:
        print(f"Warning: {warning}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(
        "DEBUG" if args.debug or settings.debug else settings.log_level,
        settings.log_format,
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "refresh": cmd_refresh,
        "analyze": cmd_analyze,
        "join": cmd_join,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
