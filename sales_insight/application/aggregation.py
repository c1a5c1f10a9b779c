"""Hierarchical major -> minor -> product aggregation across periods."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence

from sales_insight.application.reporting.metrics import Growth, safe_share
from sales_insight.domain.models import METRICS, LineItem, MetricTuple, Period


def _zero_stats(period_count: int) -> List[MetricTuple]:
    return [MetricTuple() for _ in range(period_count)]


@dataclass
class _Node:
    name: str
    stats: List[MetricTuple]
    shares: List[float] = field(default_factory=list)

    def total(self, metric: str) -> float:
        return sum(stats.get(metric) for stats in self.stats)

    def growth(self, metric: str) -> Growth:
        if len(self.stats) != 2:
            raise ValueError(f"Growth needs exactly 2 periods, node '{self.name}' has {len(self.stats)}")
        return Growth(prev=self.stats[0].get(metric), curr=self.stats[1].get(metric))

    def _base_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "stats": [
                {"quantity": stats.quantity, "amount": stats.amount, "count": stats.count}
                for stats in self.stats
            ],
            "shares": list(self.shares),
        }
        if len(self.stats) == 2:
            payload["growth"] = {metric: self.growth(metric).to_dict() for metric in METRICS}
        return payload


@dataclass
class ProductNode(_Node):
    def to_dict(self) -> Dict[str, Any]:
        return self._base_dict()


@dataclass
class MinorNode(_Node):
    products: Dict[str, ProductNode] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = self._base_dict()
        payload["products"] = [product.to_dict() for product in self.products.values()]
        return payload


@dataclass
class MajorNode(_Node):
    minors: Dict[str, MinorNode] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = self._base_dict()
        payload["minors"] = [minor.to_dict() for minor in self.minors.values()]
        return payload


@dataclass
class CategoryTree:
    periods: tuple[Period, ...]
    majors: Dict[str, MajorNode] = field(default_factory=dict)

    @property
    def period_count(self) -> int:
        return len(self.periods)

    @property
    def is_two_period(self) -> bool:
        return len(self.periods) == 2

    def iter_products(self) -> Iterator[tuple[MajorNode, MinorNode, ProductNode]]:
        for major in self.majors.values():
            for minor in major.minors.values():
                for product in minor.products.values():
                    yield major, minor, product

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periods": [period.name for period in self.periods],
            "majors": [major.to_dict() for major in self.majors.values()],
        }


def _accumulate(tree: CategoryTree, period_idx: int, item: LineItem) -> None:
    if item.category is None:
        raise ValueError(f"Unclassified line item reached aggregation: '{item.product_name}'")

    period_count = tree.period_count
    major_name = item.category.major
    minor_name = item.category.minor

    major = tree.majors.get(major_name)
    if major is None:
        major = MajorNode(name=major_name, stats=_zero_stats(period_count))
        tree.majors[major_name] = major
    minor = major.minors.get(minor_name)
    if minor is None:
        minor = MinorNode(name=minor_name, stats=_zero_stats(period_count))
        major.minors[minor_name] = minor
    product = minor.products.get(item.product_name)
    if product is None:
        product = ProductNode(name=item.product_name, stats=_zero_stats(period_count))
        minor.products[item.product_name] = product

    net = item.net
    product.stats[period_idx] = product.stats[period_idx] + net
    minor.stats[period_idx] = minor.stats[period_idx] + net
    major.stats[period_idx] = major.stats[period_idx] + net


def _assign_shares(tree: CategoryTree) -> None:
    # Shares are quantity-based at every level.
    period_range = range(tree.period_count)
    for major in tree.majors.values():
        major.shares = [
            safe_share(major.stats[idx].quantity, tree.periods[idx].total_net_quantity) for idx in period_range
        ]
        for minor in major.minors.values():
            minor.shares = [safe_share(minor.stats[idx].quantity, major.stats[idx].quantity) for idx in period_range]
            for product in minor.products.values():
                product.shares = [
                    safe_share(product.stats[idx].quantity, minor.stats[idx].quantity) for idx in period_range
                ]


def aggregate(periods: Sequence[Period]) -> CategoryTree:
    """Build the category tree with per-period net tuples and shares."""
    if not periods:
        raise ValueError("aggregate requires at least one period")

    tree = CategoryTree(periods=tuple(periods))
    for period_idx, period in enumerate(tree.periods):
        for item in period.items:
            _accumulate(tree, period_idx, item)
    _assign_shares(tree)
    return tree


@dataclass(frozen=True)
class PeriodComparison:
    prev_name: str
    curr_name: str
    amount: Growth
    quantity: Growth
    count: Growth

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prev": self.prev_name,
            "curr": self.curr_name,
            "amount": self.amount.to_dict(),
            "quantity": self.quantity.to_dict(),
            "count": self.count.to_dict(),
        }


def compare_periods(periods: Sequence[Period]) -> PeriodComparison:
    """Top-line before/after comparison of two periods' net totals."""
    if len(periods) != 2:
        raise ValueError(f"compare_periods requires exactly 2 periods, got {len(periods)}")
    prev, curr = periods
    return PeriodComparison(
        prev_name=prev.name,
        curr_name=curr.name,
        amount=Growth(prev=prev.total_net_amount, curr=curr.total_net_amount),
        quantity=Growth(prev=prev.total_net_quantity, curr=curr.total_net_quantity),
        count=Growth(prev=prev.total_net_count, curr=curr.total_net_count),
    )


def trend_points(periods: Sequence[Period]) -> List[Dict[str, Any]]:
    return [
        {"name": period.name, "amount": period.total_net_amount, "quantity": period.total_net_quantity}
        for period in periods
    ]


def category_breakdown(tree: CategoryTree) -> List[Dict[str, Any]]:
    """Net amount per major per period (in period order), largest total first."""
    rows: List[Dict[str, Any]] = []
    for major in tree.majors.values():
        amounts = [stats.amount for stats in major.stats]
        rows.append(
            {
                "name": major.name,
                "amounts": amounts,
                "total_amount": sum(amounts),
            }
        )
    rows.sort(key=lambda row: -row["total_amount"])
    return rows


def top_products(period: Period, limit: int = 10) -> List[LineItem]:
    return sorted(period.items, key=lambda item: -item.net_amount)[:limit]
