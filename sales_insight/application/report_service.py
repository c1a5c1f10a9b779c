"""Sales insight pipeline: load, categorize, aggregate, export."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from functools import partial
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Sequence

import polars as pl

from sales_insight.application.aggregation import (
    CategoryTree,
    aggregate,
    category_breakdown,
    compare_periods,
    top_products,
    trend_points,
)
from sales_insight.application.classification_service import BatchClassifier, classify_periods
from sales_insight.application.reporting.export_frames import (
    analyzed_period_frame,
    comparison_frame,
    percent_columns,
)
from sales_insight.application.reporting.rendering import (
    comparison_comment,
    period_overall_comment,
    top_products_comment,
    tree_comment_lines,
)
from sales_insight.application.sorting import SortOptions, sort_and_filter
from sales_insight.config import Settings
from sales_insight.domain.categorizer import classify, rule_table
from sales_insight.domain.models import Period
from sales_insight.infrastructure.excel_repository import load_periods, save_output_workbook
from sales_insight.infrastructure.fallback_classifier import build_fallback_classifier
from sales_insight.infrastructure.report_exporter import save_summary_json

TOP_PRODUCT_LIMIT = 10


@dataclass(frozen=True)
class ReportResult:
    periods: List[Period]
    tree: CategoryTree
    summary: Dict[str, Any]
    output_json_path: Path
    output_excel_path: Path
    excel_saved: bool
    excel_error_message: str


def _period_summary(period: Period) -> Dict[str, Any]:
    return {
        "name": period.name,
        "items": len(period.items),
        "total_gross_amount": period.total_gross_amount,
        "total_net_amount": period.total_net_amount,
        "total_net_quantity": period.total_net_quantity,
        "total_net_count": period.total_net_count,
        "top_products": [
            {
                "name": item.product_name,
                "net_amount": item.net_amount,
                "net_quantity": item.net_quantity,
            }
            for item in top_products(period, limit=TOP_PRODUCT_LIMIT)
        ],
    }


def _output_stem(periods: Sequence[Period], today: date) -> str:
    if len(periods) == 1:
        return f"{periods[0].name}_analyzed"
    return f"Comparison_Analysis_{today.isoformat()}"


def _excel_sheets(periods: Sequence[Period], tree: CategoryTree) -> Dict[str, pl.DataFrame]:
    if len(periods) == 1:
        return {"analyzed": analyzed_period_frame(periods[0])}
    return {"comparison": comparison_frame(tree)}


def run_reporting_pipeline(
    input_paths: Sequence[str | Path],
    settings: Settings,
    options: SortOptions | None = None,
    fallback: BatchClassifier | None = None,
    use_ai: bool = True,
    today: date | None = None,
) -> ReportResult:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    options = options or SortOptions()
    options.validate(len(input_paths))
    today = today or date.today()

    raw_periods = load_periods([Path(path) for path in input_paths])
    _mark("load_periods")

    if fallback is None:
        fallback = build_fallback_classifier(settings, enabled=use_ai)
    classifier = partial(classify, rules=rule_table(include_catch_all=settings.rule_catch_all))
    classification = classify_periods(raw_periods, fallback=fallback, classifier=classifier)
    periods = classification.periods
    _mark("classify_periods")

    full_tree = aggregate(periods)
    view_tree = sort_and_filter(full_tree, options)
    _mark("aggregate")

    comparison = compare_periods(periods) if len(periods) == 2 else None
    summary: Dict[str, Any] = {
        "mode": "SINGLE" if len(periods) == 1 else "COMPARE",
        "periods": [_period_summary(period) for period in periods],
        "sort": {
            "sort_key": options.sort_key,
            "direction": options.direction,
            "search_term": options.search_term,
        },
        "comparison": comparison.to_dict() if comparison is not None else None,
        "trend": trend_points(periods) if len(periods) > 2 else None,
        "category_breakdown": category_breakdown(full_tree),
        "tree": view_tree.to_dict(),
        "classification": classification.stats.to_dict(),
    }
    _mark("build_summary")

    output_dir = settings.output_dir
    stem = _output_stem(periods, today)
    output_json_path = output_dir / f"{stem}.json"
    output_excel_path = output_dir / f"{stem}.xlsx"
    save_summary_json(output_json_path, summary)
    _mark("save_json")

    sheets = _excel_sheets(periods, full_tree)
    sheet_percent_columns = {column for frame in sheets.values() for column in percent_columns(frame)}
    _mark("build_excel_frames")
    excel_saved, excel_error_message = save_output_workbook(output_excel_path, sheets, sheet_percent_columns)
    _mark("save_excel")
    total_elapsed = perf_counter() - pipeline_start

    stats = classification.stats
    print(
        "Summary prepared: "
        f"periods={len(periods)}, "
        f"majors={len(view_tree.majors)}, "
        f"rule_items={stats.rule_items}, "
        f"fallback_items={stats.fallback_items}"
    )
    for period in periods:
        print(period_overall_comment(period))
    if comparison is not None:
        print(comparison_comment(comparison))
    for line in tree_comment_lines(view_tree):
        print(line)
    if len(periods) == 1:
        print(f"Top Products: {top_products_comment(top_products(periods[0], limit=TOP_PRODUCT_LIMIT))}")
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    print(f"Stage Timing: {stage_text}")
    print(f"Total Elapsed: {total_elapsed:.3f}s")
    print(f"Saved JSON: {output_json_path}")
    if excel_saved:
        print(f"Saved Excel: {output_excel_path}")
    else:
        print(f"Excel save skipped (file may be open/locked): {excel_error_message}")

    return ReportResult(
        periods=list(periods),
        tree=view_tree,
        summary=summary,
        output_json_path=output_json_path,
        output_excel_path=output_excel_path,
        excel_saved=excel_saved,
        excel_error_message=excel_error_message,
    )
