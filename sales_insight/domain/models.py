"""Domain models for categorized sales line items and periods."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

METRICS: tuple[str, ...] = ("quantity", "amount", "count")


def _to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class MetricTuple:
    """Net quantity, net amount and net transaction count of one node for one period."""

    quantity: float = 0.0
    amount: float = 0.0
    count: float = 0.0

    def __add__(self, other: "MetricTuple") -> "MetricTuple":
        return MetricTuple(
            quantity=self.quantity + other.quantity,
            amount=self.amount + other.amount,
            count=self.count + other.count,
        )

    def __sub__(self, other: "MetricTuple") -> "MetricTuple":
        return MetricTuple(
            quantity=self.quantity - other.quantity,
            amount=self.amount - other.amount,
            count=self.count - other.count,
        )

    def get(self, metric: str) -> float:
        if metric not in METRICS:
            raise ValueError(f"Unknown metric: {metric}")
        return getattr(self, metric)


@dataclass(frozen=True)
class CategoryPair:
    major: str
    minor: str


# Unclassified / other; assigned when neither the rules nor the fallback resolve a name.
UNCLASSIFIED = CategoryPair(major="미분류", minor="기타")


@dataclass(frozen=True)
class CategoryMapping:
    """One fallback classification result."""

    product_name: str
    major: str
    minor: str

    @property
    def pair(self) -> CategoryPair:
        return CategoryPair(major=self.major, minor=self.minor)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CategoryMapping":
        return cls(
            product_name=str(row["productName"]),
            major=str(row["major"]),
            minor=str(row["minor"]),
        )


@dataclass(frozen=True)
class LineItem:
    """One normalized source row. Net values are derived and may be negative."""

    product_name: str
    paid_quantity: float = 0.0
    refund_quantity: float = 0.0
    paid_count: float = 0.0
    refund_count: float = 0.0
    paid_amount: float = 0.0
    refund_amount: float = 0.0
    category: CategoryPair | None = None
    share: float | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def net_quantity(self) -> float:
        return self.paid_quantity - self.refund_quantity

    @property
    def net_count(self) -> float:
        return self.paid_count - self.refund_count

    @property
    def net_amount(self) -> float:
        return self.paid_amount - self.refund_amount

    @property
    def net(self) -> MetricTuple:
        return MetricTuple(quantity=self.net_quantity, amount=self.net_amount, count=self.net_count)

    @property
    def is_classified(self) -> bool:
        return self.category is not None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], raw: Mapping[str, Any] | None = None) -> "LineItem":
        return cls(
            product_name=str(row.get("product_name", "") or "").strip(),
            paid_quantity=_to_float(row.get("paid_quantity")),
            refund_quantity=_to_float(row.get("refund_quantity")),
            paid_count=_to_float(row.get("paid_count")),
            refund_count=_to_float(row.get("refund_count")),
            paid_amount=_to_float(row.get("paid_amount")),
            refund_amount=_to_float(row.get("refund_amount")),
            raw=dict(raw or {}),
        )

    def with_category(self, category: CategoryPair) -> "LineItem":
        if self.category is not None:
            raise ValueError(f"Category already assigned for '{self.product_name}': {self.category}")
        return replace(self, category=category)


@dataclass(frozen=True)
class Period:
    """One uploaded dataset with totals derived from its items."""

    name: str
    items: tuple[LineItem, ...]
    total_gross_amount: float
    total_net_amount: float
    total_net_quantity: float
    total_net_count: float

    @classmethod
    def from_items(cls, name: str, items: Iterable[LineItem]) -> "Period":
        collected = list(items)
        if not collected:
            raise ValueError(f"Period '{name}' has no line items")

        total_net_quantity = sum(item.net_quantity for item in collected)
        with_share = tuple(
            replace(
                item,
                share=(item.net_quantity / total_net_quantity * 100) if total_net_quantity > 0 else 0.0,
            )
            for item in collected
        )
        return cls(
            name=name,
            items=with_share,
            total_gross_amount=sum(item.paid_amount for item in collected),
            total_net_amount=sum(item.net_amount for item in collected),
            total_net_quantity=total_net_quantity,
            total_net_count=sum(item.net_count for item in collected),
        )

    def with_items(self, items: Iterable[LineItem]) -> "Period":
        return Period.from_items(self.name, items)

    @property
    def totals(self) -> MetricTuple:
        return MetricTuple(
            quantity=self.total_net_quantity,
            amount=self.total_net_amount,
            count=self.total_net_count,
        )

    @property
    def unclassified_names(self) -> list[str]:
        return [item.product_name for item in self.items if not item.is_classified]
