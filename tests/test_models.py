import pytest

from conftest import make_item, make_period
from sales_insight.domain.models import (
    UNCLASSIFIED,
    CategoryMapping,
    CategoryPair,
    LineItem,
    MetricTuple,
    Period,
)


class TestMetricTuple:

    def test_zero_default(self):
        assert MetricTuple() == MetricTuple(quantity=0.0, amount=0.0, count=0.0)

    def test_add_and_sub(self):
        a = MetricTuple(quantity=2, amount=100, count=1)
        b = MetricTuple(quantity=3, amount=50, count=2)
        assert a + b == MetricTuple(quantity=5, amount=150, count=3)
        assert b - a == MetricTuple(quantity=1, amount=-50, count=1)

    def test_get_unknown_metric(self):
        with pytest.raises(ValueError):
            MetricTuple().get("margin")


class TestLineItem:

    def test_net_values(self):
        item = make_item("책상", qty=5, amount=500, count=4, refund_qty=1, refund_amount=100, refund_count=1)
        assert item.net_quantity == 4
        assert item.net_amount == 400
        assert item.net_count == 3
        assert item.net == MetricTuple(quantity=4, amount=400, count=3)

    def test_net_may_be_negative(self):
        item = make_item("책상", qty=1, amount=100, refund_qty=3, refund_amount=300)
        assert item.net_quantity == -2
        assert item.net_amount == -200

    def test_category_assigned_once(self):
        item = make_item("책상").with_category(CategoryPair("책상", "기타"))
        assert item.is_classified
        with pytest.raises(ValueError):
            item.with_category(UNCLASSIFIED)

    def test_from_row_coerces_missing_values(self):
        item = LineItem.from_row({"product_name": "  의자 ", "paid_quantity": "3", "paid_amount": None})
        assert item.product_name == "의자"
        assert item.paid_quantity == 3.0
        assert item.paid_amount == 0.0
        assert item.refund_count == 0.0

    def test_raw_is_not_part_of_equality(self):
        a = LineItem.from_row({"product_name": "의자"}, raw={"상품명": "의자"})
        b = LineItem.from_row({"product_name": "의자"}, raw={"상품명": "의자", "비고": "x"})
        assert a == b


class TestPeriod:

    def test_totals_are_item_sums(self):
        period = make_period(
            "1월",
            make_item("a", qty=2, amount=200, count=1),
            make_item("b", qty=3, amount=300, count=2, refund_qty=1, refund_amount=100),
        )
        assert period.total_gross_amount == 500
        assert period.total_net_amount == 400
        assert period.total_net_quantity == 4
        assert period.total_net_count == 3
        assert period.totals == MetricTuple(quantity=4, amount=400, count=3)

    def test_item_shares_by_quantity(self):
        period = make_period("1월", make_item("a", qty=1), make_item("b", qty=3))
        assert [item.share for item in period.items] == [25.0, 75.0]

    def test_item_shares_zero_when_total_not_positive(self):
        period = make_period("1월", make_item("a", qty=1, refund_qty=1, amount=10))
        assert period.items[0].share == 0.0

    def test_empty_period_rejected(self):
        with pytest.raises(ValueError):
            Period.from_items("빈 기간", [])

    def test_with_items_keeps_name(self):
        period = make_period("1월", make_item("a", qty=1))
        updated = period.with_items([make_item("a", qty=1, category=("책상", "기타"))])
        assert updated.name == "1월"
        assert updated.unclassified_names == []
        assert period.unclassified_names == ["a"]


class TestUnclassified:

    def test_sentinel_is_unclassified_other(self):
        assert UNCLASSIFIED == CategoryPair(major="미분류", minor="기타")


class TestCategoryMapping:

    def test_from_row(self):
        mapping = CategoryMapping.from_row({"productName": "전기포트", "major": "가전", "minor": "주방가전"})
        assert mapping.pair == CategoryPair("가전", "주방가전")
