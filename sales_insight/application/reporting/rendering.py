"""Text rendering helpers for the console summary."""

from __future__ import annotations

from typing import List, Sequence

from sales_insight.application.aggregation import CategoryTree, MajorNode, PeriodComparison
from sales_insight.application.reporting.metrics import (
    fmt_number,
    fmt_number_signed,
    fmt_pct,
    fmt_won,
    fmt_won_signed,
    trend,
)
from sales_insight.domain.models import LineItem, Period

_TREND_KR = {"up": "상승", "down": "하락", "flat": "보합", "unknown": "N/A"}


def period_overall_comment(period: Period) -> str:
    return (
        f"{period.name}: 순매출 {fmt_won(period.total_net_amount)}, "
        f"순수량 {fmt_number(period.total_net_quantity)}개, "
        f"순결제 {fmt_number(period.total_net_count)}건 "
        f"(총 결제금액 {fmt_won(period.total_gross_amount)}, 상품 {len(period.items)}행)"
    )


def comparison_comment(comparison: PeriodComparison) -> str:
    amount = comparison.amount
    return (
        f"{comparison.prev_name} → {comparison.curr_name} 순매출 "
        f"{fmt_won_signed(amount.delta)}({fmt_pct(amount.percent)})로 {_TREND_KR[trend(amount.delta)]}. "
        f"수량 {fmt_number_signed(comparison.quantity.delta)}({fmt_pct(comparison.quantity.percent)}), "
        f"결제건수 {fmt_number_signed(comparison.count.delta)}({fmt_pct(comparison.count.percent)})."
    )


def major_comment(major: MajorNode, is_two_period: bool) -> str:
    if is_two_period:
        growth = major.growth("amount")
        return (
            f"{major.name}: {fmt_won(growth.curr)} "
            f"({fmt_won_signed(growth.delta)}, {fmt_pct(growth.percent)}), "
            f"비중 {fmt_pct(major.shares[-1], signed=False)}"
        )
    shares = " / ".join(fmt_pct(share, signed=False) for share in major.shares)
    return f"{major.name}: {fmt_won(major.total('amount'))}, 비중 {shares}"


def tree_comment_lines(tree: CategoryTree, limit: int = 10) -> List[str]:
    if not tree.majors:
        return ["조건에 맞는 대분류가 없습니다."]
    lines = [
        f"{idx}) {major_comment(major, tree.is_two_period)}"
        for idx, major in enumerate(tree.majors.values(), start=1)
    ]
    if len(lines) > limit:
        hidden = len(lines) - limit
        lines = lines[:limit] + [f"... 외 {hidden}개 대분류"]
    return lines


def top_products_comment(items: Sequence[LineItem]) -> str:
    if not items:
        return "상위 상품이 없습니다."
    return " | ".join(
        f"{idx}) {item.product_name} {fmt_won(item.net_amount)}" for idx, item in enumerate(items, start=1)
    )
