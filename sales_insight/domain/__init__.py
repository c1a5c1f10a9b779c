"""Domain layer package."""

from .categorizer import RULES, CategoryRule, classify, rule_table
from .models import UNCLASSIFIED, CategoryMapping, CategoryPair, LineItem, MetricTuple, Period

__all__ = [
    "CategoryRule",
    "RULES",
    "classify",
    "rule_table",
    "UNCLASSIFIED",
    "CategoryMapping",
    "CategoryPair",
    "LineItem",
    "MetricTuple",
    "Period",
]
