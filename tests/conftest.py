from pathlib import Path

import pytest

from sales_insight.config import Settings
from sales_insight.domain.models import CategoryMapping, CategoryPair, LineItem, Period


ROOT = Path(__file__).parent.parent


def make_item(name, qty=0.0, amount=0.0, count=0.0, refund_qty=0.0, refund_amount=0.0, refund_count=0.0, category=None):
    item = LineItem(
        product_name=name,
        paid_quantity=qty,
        refund_quantity=refund_qty,
        paid_count=count,
        refund_count=refund_count,
        paid_amount=amount,
        refund_amount=refund_amount,
    )
    if category is not None:
        item = item.with_category(CategoryPair(*category))
    return item


def make_period(name, *items):
    return Period.from_items(name, items)


class StubCategoryService:
    """Records every batch it receives and answers from a fixed table."""

    def __init__(self, table=None, error=None):
        self.table = table or {}
        self.error = error
        self.calls = []

    def __call__(self, names):
        self.calls.append(list(names))
        if self.error is not None:
            raise self.error
        return [
            CategoryMapping(product_name=name, major=pair[0], minor=pair[1])
            for name, pair in self.table.items()
        ]


class StubFallback:
    """`classify_batch` double that tracks calls without any service."""

    def __init__(self, mapping=None):
        self.mapping = mapping or {}
        self.calls = []

    def classify_batch(self, names):
        names = list(names)
        self.calls.append(names)
        return {name: self.mapping.get(name, CategoryPair("미분류", "기타")) for name in names}


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def period_factory():
    return make_period


@pytest.fixture
def stub_service():
    return StubCategoryService


@pytest.fixture
def stub_fallback():
    return StubFallback


@pytest.fixture
def settings(tmp_path):
    return Settings(api_key=None, model="test-model", output_dir=tmp_path / "output", rule_catch_all=True)


@pytest.fixture
def write_workbook(tmp_path):
    """Write a single-sheet workbook with openpyxl and return its path."""
    from openpyxl import Workbook

    def _write(filename, headers, rows):
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.append(headers)
        for row in rows:
            worksheet.append(row)
        path = tmp_path / filename
        workbook.save(path)
        return path

    return _write
