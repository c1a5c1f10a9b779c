import pytest

from conftest import make_item, make_period
from sales_insight.application.aggregation import aggregate
from sales_insight.application.sorting import SortOptions, korean_sort_key, sort_and_filter


def _tree():
    prev = make_period(
        "1월",
        make_item("사무용 의자", qty=10, amount=1000, count=9, category=("의자", "의자")),
        make_item("원목 벤치", qty=1, amount=5000, count=1, category=("의자", "벤치")),
        make_item("행거 1200", qty=3, amount=300, count=3, category=("행거", "행거")),
        make_item("Desk A", qty=2, amount=2000, count=1, category=("Desk", "기타")),
    )
    curr = make_period(
        "2월",
        make_item("사무용 의자", qty=2, amount=200, count=2, category=("의자", "의자")),
        make_item("원목 벤치", qty=2, amount=9000, count=2, category=("의자", "벤치")),
        make_item("행거 1200", qty=9, amount=900, count=1, category=("행거", "행거")),
        make_item("Desk A", qty=2, amount=2000, count=1, category=("Desk", "기타")),
    )
    return aggregate([prev, curr])


def _major_names(tree):
    return list(tree.majors)


class TestSortKeys:

    def test_default_is_amount_desc(self):
        # totals: 의자 15200, Desk 4000, 행거 1200
        assert _major_names(sort_and_filter(_tree())) == ["의자", "Desk", "행거"]

    def test_amount_asc(self):
        tree = sort_and_filter(_tree(), SortOptions(sort_key="amount", direction="asc"))
        assert _major_names(tree) == ["행거", "Desk", "의자"]

    def test_quantity(self):
        tree = sort_and_filter(_tree(), SortOptions(sort_key="quantity"))
        assert _major_names(tree) == ["의자", "행거", "Desk"]

    def test_count(self):
        tree = sort_and_filter(_tree(), SortOptions(sort_key="count"))
        assert _major_names(tree) == ["의자", "행거", "Desk"]

    def test_name_asc_hangul_before_latin(self):
        tree = sort_and_filter(_tree(), SortOptions(sort_key="name", direction="asc"))
        assert _major_names(tree) == ["의자", "행거", "Desk"]

    def test_name_desc(self):
        tree = sort_and_filter(_tree(), SortOptions(sort_key="name", direction="desc"))
        assert _major_names(tree) == ["Desk", "행거", "의자"]

    def test_growth_amount_by_delta(self):
        # deltas: 의자 +3200, 행거 +600, Desk 0
        tree = sort_and_filter(_tree(), SortOptions(sort_key="growth_amount"))
        assert _major_names(tree) == ["의자", "행거", "Desk"]

    def test_growth_quantity_by_delta(self):
        # deltas: 의자 -7, 행거 +6, Desk 0
        tree = sort_and_filter(_tree(), SortOptions(sort_key="growth_quantity"))
        assert _major_names(tree) == ["행거", "Desk", "의자"]

    def test_sort_applies_to_every_level(self):
        tree = sort_and_filter(_tree(), SortOptions(sort_key="amount", direction="desc"))
        assert list(tree.majors["의자"].minors) == ["벤치", "의자"]
        tree = sort_and_filter(_tree(), SortOptions(sort_key="quantity", direction="desc"))
        assert list(tree.majors["의자"].minors) == ["의자", "벤치"]

    def test_input_tree_not_mutated(self):
        tree = _tree()
        before = _major_names(tree)
        sort_and_filter(tree, SortOptions(sort_key="name", direction="asc"))
        assert _major_names(tree) == before


class TestSearch:

    def test_filters_majors_only(self):
        tree = sort_and_filter(_tree(), SortOptions(search_term="의자"))
        assert _major_names(tree) == ["의자"]
        assert set(tree.majors["의자"].minors) == {"의자", "벤치"}

    def test_case_insensitive(self):
        tree = sort_and_filter(_tree(), SortOptions(search_term="desk"))
        assert _major_names(tree) == ["Desk"]

    def test_product_names_not_searched(self):
        tree = sort_and_filter(_tree(), SortOptions(search_term="벤치"))
        assert _major_names(tree) == []

    def test_empty_search_keeps_all(self):
        assert len(sort_and_filter(_tree(), SortOptions(search_term="")).majors) == 3


class TestValidation:

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            sort_and_filter(_tree(), SortOptions(sort_key="margin"))

    def test_unknown_direction(self):
        with pytest.raises(ValueError):
            sort_and_filter(_tree(), SortOptions(direction="sideways"))

    def test_growth_key_needs_two_periods(self):
        period = make_period("1월", make_item("행거", qty=1, category=("행거", "행거")))
        with pytest.raises(ValueError):
            sort_and_filter(aggregate([period]), SortOptions(sort_key="growth_amount"))


class TestKoreanCollation:

    def test_order_groups(self):
        names = ["가방", "abc", "123", "(특가)", "Banana", "나무"]
        assert sorted(names, key=korean_sort_key) == ["(특가)", "123", "가방", "나무", "abc", "Banana"]

    def test_hangul_dictionary_order(self):
        assert sorted(["하", "가", "다", "나"], key=korean_sort_key) == ["가", "나", "다", "하"]

    def test_real_majors_in_locale_order(self):
        names = ["S01", "의자", "Desk", "행거", "600폭 책장"]
        assert sorted(names, key=korean_sort_key) == ["600폭 책장", "의자", "행거", "Desk", "S01"]

    def test_hanja_between_hangul_and_latin(self):
        assert sorted(["A", "木", "가"], key=korean_sort_key) == ["가", "木", "A"]

    def test_prefix_sorts_first(self):
        assert sorted(["책상세트", "책상"], key=korean_sort_key) == ["책상", "책상세트"]
