"""Per-level ordering and major-level search over the category tree."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple, TypeVar

from sales_insight.application.aggregation import CategoryTree, MajorNode, MinorNode, ProductNode, _Node

SORT_KEYS: tuple[str, ...] = ("amount", "quantity", "count", "name", "growth_amount", "growth_quantity")
GROWTH_SORT_KEYS: dict[str, str] = {"growth_amount": "amount", "growth_quantity": "quantity"}
DIRECTIONS: tuple[str, ...] = ("asc", "desc")

NodeT = TypeVar("NodeT", bound=_Node)


def _char_rank(char: str) -> int:
    if char.isspace() or unicodedata.category(char).startswith(("P", "S")):
        return 0
    if char.isdigit():
        return 1
    code = ord(char)
    if 0xAC00 <= code <= 0xD7A3 or 0x1100 <= code <= 0x11FF or 0x3130 <= code <= 0x318F:
        return 2
    if 0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DBF or 0xF900 <= code <= 0xFAFF:
        return 3
    if char.isascii() and char.isalpha():
        return 4
    return 5


def korean_sort_key(text: str) -> Tuple[Tuple[int, str], ...]:
    """Collation key in Korean locale order.

    Symbols, digits, Hangul in dictionary order, Hanja, then Latin
    (case-insensitive).
    """
    normalized = unicodedata.normalize("NFC", text)
    return tuple((_char_rank(char), char.casefold()) for char in normalized)


@dataclass(frozen=True)
class SortOptions:
    sort_key: str = "amount"
    direction: str = "desc"
    search_term: str = ""

    def validate(self, period_count: int) -> None:
        if self.sort_key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {self.sort_key} (expected one of {list(SORT_KEYS)})")
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.direction} (expected 'asc' or 'desc')")
        if self.sort_key in GROWTH_SORT_KEYS and period_count != 2:
            raise ValueError(f"Sort key '{self.sort_key}' requires exactly 2 periods, got {period_count}")


def sort_value(node: _Node, sort_key: str) -> float:
    growth_metric = GROWTH_SORT_KEYS.get(sort_key)
    if growth_metric is not None:
        return node.growth(growth_metric).delta
    return node.total(sort_key)


def _ordered(nodes: Iterable[NodeT], options: SortOptions) -> List[NodeT]:
    descending = options.direction == "desc"
    if options.sort_key == "name":
        return sorted(nodes, key=lambda node: korean_sort_key(node.name), reverse=descending)
    return sorted(nodes, key=lambda node: sort_value(node, options.sort_key), reverse=descending)


def matches_search(name: str, search_term: str) -> bool:
    return search_term.casefold() in name.casefold()


def _sorted_minor(minor: MinorNode, options: SortOptions) -> MinorNode:
    products: List[ProductNode] = _ordered(minor.products.values(), options)
    return replace(minor, products={product.name: product for product in products})


def _sorted_major(major: MajorNode, options: SortOptions) -> MajorNode:
    minors = [_sorted_minor(minor, options) for minor in _ordered(major.minors.values(), options)]
    return replace(major, minors={minor.name: minor for minor in minors})


def sort_and_filter(tree: CategoryTree, options: SortOptions | None = None) -> CategoryTree:
    """Return a new tree with majors filtered by search term and every sibling group ordered."""
    options = options or SortOptions()
    options.validate(tree.period_count)

    kept = [major for major in tree.majors.values() if matches_search(major.name, options.search_term)]
    majors = [_sorted_major(major, options) for major in _ordered(kept, options)]
    return CategoryTree(periods=tree.periods, majors={major.name: major for major in majors})
