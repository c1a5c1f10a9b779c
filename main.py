"""Sales insight entrypoint."""

from __future__ import annotations

import argparse
import sys
from typing import List

from sales_insight.application.report_service import run_reporting_pipeline
from sales_insight.application.sorting import DIRECTIONS, SORT_KEYS, SortOptions
from sales_insight.config import load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Categorize sales exports and build major/minor/product reports.",
    )
    parser.add_argument("inputs", nargs="+", help="Sales export workbooks (one per period, in order)")
    parser.add_argument("--output-dir", default=None, help="Directory for JSON/Excel outputs")
    parser.add_argument("--sort", dest="sort_key", choices=SORT_KEYS, default="amount")
    parser.add_argument("--direction", choices=DIRECTIONS, default="desc")
    parser.add_argument("--search", dest="search_term", default="", help="Keep majors whose name contains this")
    parser.add_argument("--no-ai", action="store_true", help="Skip the AI fallback categorization")
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        if args.output_dir:
            settings = settings.with_output_dir(args.output_dir)
        options = SortOptions(sort_key=args.sort_key, direction=args.direction, search_term=args.search_term)
        run_reporting_pipeline(args.inputs, settings, options=options, use_ai=not args.no_ai)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
