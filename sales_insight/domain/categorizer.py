"""Rule-based product categorization as an ordered decision list.

Rules are evaluated top to bottom and the first match wins. Keyword tests are
plain substring containment on the product name as given (case-sensitive, no
normalization), so more specific rules must precede broader ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from sales_insight.domain.models import CategoryPair

DEFAULT_MINOR = "기타"

BOOKSHELF_600_CODES: tuple[str, ...] = (
    "DSCC065N",
    "DSCC065SN",
    "DSCC065SSN",
    "DSCC066",
    "DSCC066S",
    "DSCC066SS",
    "DSCC465S",
    "DSCC465SS",
    "DSCC466S",
    "DSCC466SS",
    "DSCAB0605",
    "DSCAB0605S",
    "DSCAB0606",
    "DSCAB0606S",
)
BOARD_CODES: tuple[str, ...] = ("DSBAB1117M", "DSBAB0817M", "DSBAA0817M", "DSBAA1117M")


class Predicate(Protocol):
    def __call__(self, name: str) -> bool: ...


@dataclass(frozen=True)
class ContainsAny:
    keywords: tuple[str, ...]

    def __call__(self, name: str) -> bool:
        return any(keyword in name for keyword in self.keywords)


@dataclass(frozen=True)
class AllOf:
    predicates: tuple[Predicate, ...]

    def __call__(self, name: str) -> bool:
        return all(predicate(name) for predicate in self.predicates)


@dataclass(frozen=True)
class Not:
    predicate: Predicate

    def __call__(self, name: str) -> bool:
        return not self.predicate(name)


@dataclass(frozen=True)
class Always:
    def __call__(self, name: str) -> bool:
        return True


def contains(*keywords: str) -> ContainsAny:
    return ContainsAny(tuple(keywords))


def all_of(*predicates: Predicate) -> AllOf:
    return AllOf(tuple(predicates))


@dataclass(frozen=True)
class MinorChoice:
    matches: Predicate
    minor: str


@dataclass(frozen=True)
class RuleOverride:
    """Sends a rule's match to a different pair before the minor is chosen."""

    matches: Predicate
    pair: CategoryPair


@dataclass(frozen=True)
class CategoryRule:
    name: str
    matches: Predicate
    major: str
    default_minor: str = DEFAULT_MINOR
    minors: tuple[MinorChoice, ...] = ()
    overrides: tuple[RuleOverride, ...] = ()

    def resolve(self, product_name: str) -> CategoryPair:
        for override in self.overrides:
            if override.matches(product_name):
                return override.pair
        for choice in self.minors:
            if choice.matches(product_name):
                return CategoryPair(major=self.major, minor=choice.minor)
        return CategoryPair(major=self.major, minor=self.default_minor)


def _fixed(name: str, matches: Predicate, major: str, minor: str) -> CategoryRule:
    return CategoryRule(name=name, matches=matches, major=major, default_minor=minor)


def _choices(*pairs: tuple[Predicate, str]) -> tuple[MinorChoice, ...]:
    return tuple(MinorChoice(matches=predicate, minor=minor) for predicate, minor in pairs)


ACCESSORY = CategoryPair(major="악세서리", minor=DEFAULT_MINOR)
FOUR_OR_SIX_SEATS = contains("4인", "6인")
DEEP_WOOD = contains("목제깊은", "깊은 목제")

CATCH_ALL_RULE = _fixed("catch-all", Always(), ACCESSORY.major, ACCESSORY.minor)

RULES: tuple[CategoryRule, ...] = (
    _fixed("accessory-priority", contains("가방걸이", "수직배선커버"), ACCESSORY.major, ACCESSORY.minor),
    _fixed("motion-control", contains("컨트롤"), "모션데스크", "컨트롤"),
    _fixed("standing-desk", contains("스탠딩데스크"), "책상", "스탠딩데스크"),
    _fixed("deep-wood-bookshelf", DEEP_WOOD, "책장", "목제깊은책장"),
    CategoryRule(
        name="bookshelf-600",
        matches=ContainsAny(BOOKSHELF_600_CODES),
        major="600폭 책장",
        default_minor="일반형",
        minors=_choices(
            (contains("깊은"), "깊은수납형"),
            (contains("서랍"), "서랍형"),
        ),
    ),
    CategoryRule(
        name="board",
        matches=ContainsAny(BOARD_CODES),
        major="보드",
        minors=_choices(
            (contains("화이트"), "화이트보드"),
            (contains("목제"), "목제보드"),
        ),
    ),
    CategoryRule(
        name="desk-set",
        matches=contains("책상세트"),
        major="책상세트",
        minors=_choices(
            (contains("모션 멀티"), "모션멀티"),
            (contains("모션 책상"), "모션책상세트"),
            (all_of(contains("멀티책상"), Not(contains("모션"))), "멀티세트"),
            (contains("콘센트형"), "콘센트형 책상세트"),
            (contains("멀티세트"), "멀티세트"),
        ),
    ),
    CategoryRule(
        name="study-room",
        matches=contains("800x600 독서실", "낮은 칸막이", "스터디룸"),
        major="독서실",
        minors=_choices(
            (contains("800x600 독서실"), "독서실책상"),
            (contains("낮은 칸막이"), "낮은칸막이"),
            (contains("스터디룸"), "스터디룸"),
        ),
    ),
    CategoryRule(
        name="motion-desk",
        matches=contains("프리미엄", "플러스", "포레그", "스마트", "알파"),
        major="모션데스크",
        minors=_choices(
            (contains("프리미엄"), "프리미엄"),
            (contains("플러스"), "플러스"),
            (contains("테이블 포레그", "데스크 포레그", "포레그"), "포레그"),
            (contains("스마트"), "스마트"),
            (contains("알파"), "알파"),
        ),
    ),
    CategoryRule(
        name="drawer",
        matches=contains("3단 서랍", "슬림서랍", "400폭 서랍"),
        major="서랍",
        minors=_choices(
            (contains("3단 슬림서랍"), "3단슬림서랍"),
            (contains("2단 슬림서랍"), "2단슬림서랍"),
            (contains("400폭 서랍"), "400폭서랍"),
            (contains("3단 서랍"), "600폭서랍"),
        ),
    ),
    _fixed("h-frame-desk", contains("h형", "H형"), "책상", "H형"),
    _fixed("table-chair-set", all_of(FOUR_OR_SIX_SEATS, contains("의자", "벤치")), "테이블", "의자세트"),
    _fixed("bench", contains("벤치"), "의자", "벤치"),
    CategoryRule(
        name="partition-screen",
        matches=contains("파티션", "스크린", "페트 3면"),
        major="파티션/스크린",
        overrides=(RuleOverride(matches=contains("악세서리"), pair=ACCESSORY),),
        minors=_choices(
            (contains("라이트파티션"), "라이트파티션"),
            (contains("페트 3면"), "페트3면"),
            (contains("펠트"), "펠트"),
            (contains("전면"), "목제"),
            (contains("파티션"), "파티션"),
        ),
    ),
    _fixed("s01", contains("S01"), "S01", "S01"),
    _fixed("steel-shelf", contains("철제선반장"), "철제선반장", "철제선반장"),
    _fixed("hanger", contains("행거"), "행거", "행거"),
    _fixed("chair", contains("의자"), "의자", "의자"),
    CategoryRule(
        name="monitor-stand",
        matches=contains("받침대"),
        major="모니터받침대",
        default_minor="모니터받침대",
        minors=_choices((contains("고속"), "고무충")),
    ),
    CategoryRule(
        name="desk",
        matches=contains("컴퓨터 책상", "멀티데스크", "멀티테이블", "베이직", "노트북", "하부가림"),
        major="책상",
        minors=_choices(
            (contains("컴퓨터 책상"), "컴퓨터책상"),
            (contains("멀티데스크"), "멀티데스크"),
            (contains("멀티테이블"), "멀티테이블"),
            (contains("베이직"), "베이직"),
            (contains("노트북"), "노트북"),
            (contains("하부가림"), "하부가림"),
        ),
    ),
    CategoryRule(
        name="bookshelf",
        matches=contains("책장"),
        major="책장",
        overrides=(RuleOverride(matches=contains("액세서리"), pair=ACCESSORY),),
        minors=_choices(
            (DEEP_WOOD, "목제깊은책장"),
            (contains("목제"), "목제"),
            (contains("철제"), "철제"),
        ),
    ),
    CategoryRule(
        name="table",
        matches=contains("테이블"),
        major="테이블",
        minors=_choices(
            (all_of(FOUR_OR_SIX_SEATS, contains("세트")), "4/6인세트"),
            (contains("1600x800 타원형"), "타원형"),
            (contains("600폭 타원형"), "타원형사이드"),
            (contains("빅테이블"), "빅테이블"),
            (contains("550x550"), "550"),
            (contains("식탁 세트"), "식탁세트"),
            (contains("소파테이블"), "소파테이블"),
            (contains("스탠딩"), "스탠딩"),
            (contains("원형"), "원형"),
            (FOUR_OR_SIX_SEATS, "4/6인 테이블"),
            (contains("다목적"), "다목적"),
        ),
    ),
    CATCH_ALL_RULE,
)


def rule_table(include_catch_all: bool = True) -> tuple[CategoryRule, ...]:
    if include_catch_all:
        return RULES
    return tuple(rule for rule in RULES if rule is not CATCH_ALL_RULE)


def matching_rule(product_name: str, rules: Sequence[CategoryRule] = RULES) -> CategoryRule | None:
    for rule in rules:
        if rule.matches(product_name):
            return rule
    return None


def classify(product_name: str, rules: Sequence[CategoryRule] = RULES) -> CategoryPair | None:
    """Return the pair of the first matching rule, or None when nothing matches."""
    rule = matching_rule(product_name, rules)
    if rule is None:
        return None
    return rule.resolve(product_name)
