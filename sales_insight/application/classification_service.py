"""Application service for the rule pass + fallback categorization use case."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

from sales_insight.domain.categorizer import classify
from sales_insight.domain.models import UNCLASSIFIED, CategoryPair, LineItem, Period


class BatchClassifier(Protocol):
    def classify_batch(self, names: Sequence[str]) -> dict[str, CategoryPair]: ...


@dataclass(frozen=True)
class ClassificationStats:
    rule_items: int
    fallback_items: int
    fallback_names: int

    def to_dict(self) -> dict[str, int]:
        return {
            "rule_items": self.rule_items,
            "fallback_items": self.fallback_items,
            "fallback_names": self.fallback_names,
        }


@dataclass(frozen=True)
class ClassificationResult:
    periods: list[Period]
    stats: ClassificationStats


def _apply_rules(items: Sequence[LineItem], classifier: Callable[[str], CategoryPair | None]) -> list[LineItem]:
    output: list[LineItem] = []
    for item in items:
        if item.is_classified:
            output.append(item)
            continue
        pair = classifier(item.product_name)
        output.append(item.with_category(pair) if pair is not None else item)
    return output


def classify_periods(
    periods: Sequence[Period],
    fallback: BatchClassifier,
    classifier: Callable[[str], CategoryPair | None] = classify,
) -> ClassificationResult:
    """Categorize every item of every period before any aggregation runs.

    Rule results are final. Names the rules leave unresolved are sent to the
    fallback once, as a single deduplicated batch across all periods.
    """
    rule_passed = [_apply_rules(period.items, classifier) for period in periods]
    rule_items = sum(1 for items in rule_passed for item in items if item.is_classified)

    pending = list(dict.fromkeys(item.product_name for items in rule_passed for item in items if not item.is_classified))
    mapping = fallback.classify_batch(pending) if pending else {}

    finished: list[Period] = []
    fallback_items = 0
    for period, items in zip(periods, rule_passed):
        backfilled: list[LineItem] = []
        for item in items:
            if not item.is_classified:
                item = item.with_category(mapping.get(item.product_name, UNCLASSIFIED))
                fallback_items += 1
            backfilled.append(item)
        finished.append(period.with_items(backfilled))

    return ClassificationResult(
        periods=finished,
        stats=ClassificationStats(
            rule_items=rule_items,
            fallback_items=fallback_items,
            fallback_names=len(pending),
        ),
    )
