"""Polars frames for the analyzed-period and comparison Excel exports."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import polars as pl

from sales_insight.application.aggregation import CategoryTree, aggregate
from sales_insight.application.reporting.metrics import safe_share
from sales_insight.application.sorting import korean_sort_key
from sales_insight.domain.models import Period

MAJOR_COLUMN = "대분류"
MINOR_COLUMN = "소분류"
PRODUCT_COLUMN = "상품명"
NET_COUNT_COLUMN = "최종결제수"
NET_QUANTITY_COLUMN = "최종수량"
NET_AMOUNT_COLUMN = "최종금액"
MAJOR_SHARE_COLUMN = "대분류 비중(전체)"
MINOR_SHARE_COLUMN = "소분류 비중(대분류내)"
PRODUCT_SHARE_COLUMN = "상품 비중(소분류내)"
SHARE_COLUMNS: List[str] = [MAJOR_SHARE_COLUMN, MINOR_SHARE_COLUMN, PRODUCT_SHARE_COLUMN]

# (label, metric) pairs for two-period growth columns.
GROWTH_COLUMNS: List[tuple[str, str]] = [
    ("결제건수", "count"),
    ("수량", "quantity"),
    ("금액", "amount"),
]


def _fraction(percent: float) -> float:
    return percent / 100


def period_labels(periods: Sequence[Period]) -> List[str]:
    """Column prefixes per period; repeated names get a numeric suffix."""
    labels: List[str] = []
    seen: Dict[str, int] = {}
    for period in periods:
        count = seen.get(period.name, 0)
        labels.append(period.name if count == 0 else f"{period.name}_{count + 1}")
        seen[period.name] = count + 1
    return labels


def analyzed_period_frame(period: Period) -> pl.DataFrame:
    """Original columns of one period plus category, net and share columns."""
    tree = aggregate([period])
    items = sorted(
        period.items,
        key=lambda item: (
            korean_sort_key(item.category.major if item.category else ""),
            korean_sort_key(item.category.minor if item.category else ""),
            -item.net_amount,
        ),
    )

    rows: List[Dict[str, Any]] = []
    for item in items:
        if item.category is None:
            raise ValueError(f"Unclassified line item cannot be exported: '{item.product_name}'")
        major = tree.majors[item.category.major]
        minor = major.minors[item.category.minor]

        row: Dict[str, Any] = dict(item.raw)
        row.update(
            {
                MAJOR_COLUMN: item.category.major,
                MINOR_COLUMN: item.category.minor,
                NET_COUNT_COLUMN: item.net_count,
                NET_QUANTITY_COLUMN: item.net_quantity,
                NET_AMOUNT_COLUMN: item.net_amount,
                MAJOR_SHARE_COLUMN: _fraction(major.shares[0]),
                MINOR_SHARE_COLUMN: _fraction(minor.shares[0]),
                # Per row, so repeated product rows split the minor's quantity.
                PRODUCT_SHARE_COLUMN: _fraction(safe_share(item.net_quantity, minor.stats[0].quantity)),
            }
        )
        rows.append(row)
    return pl.DataFrame(rows, infer_schema_length=None)


def comparison_frame(tree: CategoryTree) -> pl.DataFrame:
    """One row per product with per-period net values and shares.

    With exactly two periods, delta and rate columns are appended (rates as
    fractions).
    """
    labels = period_labels(tree.periods)
    entries = sorted(
        tree.iter_products(),
        key=lambda entry: (
            korean_sort_key(entry[0].name),
            korean_sort_key(entry[1].name),
            korean_sort_key(entry[2].name),
        ),
    )

    rows: List[Dict[str, Any]] = []
    for major, minor, product in entries:
        row: Dict[str, Any] = {
            MAJOR_COLUMN: major.name,
            MINOR_COLUMN: minor.name,
            PRODUCT_COLUMN: product.name,
        }
        for idx, label in enumerate(labels):
            stats = product.stats[idx]
            row[f"{label}_{NET_COUNT_COLUMN}"] = stats.count
            row[f"{label}_{NET_QUANTITY_COLUMN}"] = stats.quantity
            row[f"{label}_{NET_AMOUNT_COLUMN}"] = stats.amount
            row[f"{label}_{MAJOR_SHARE_COLUMN}"] = _fraction(major.shares[idx])
            row[f"{label}_{MINOR_SHARE_COLUMN}"] = _fraction(minor.shares[idx])
            row[f"{label}_{PRODUCT_SHARE_COLUMN}"] = _fraction(product.shares[idx])
        if tree.is_two_period:
            for label, metric in GROWTH_COLUMNS:
                growth = product.growth(metric)
                row[f"{label} 증감"] = growth.delta
                row[f"{label} 증감률(%)"] = _fraction(growth.percent)
        rows.append(row)

    if not rows:
        return pl.DataFrame({MAJOR_COLUMN: [], MINOR_COLUMN: [], PRODUCT_COLUMN: []})
    return pl.DataFrame(rows)


def percent_columns(frame: pl.DataFrame) -> List[str]:
    return [column for column in frame.columns if "비중" in column or "증감률" in column]
