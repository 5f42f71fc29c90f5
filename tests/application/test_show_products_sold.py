"""Tests for the Products Sold report."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pos.application.show_products_sold import ShowProductsSoldHandler
from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Category, Product
from pos.domain.model.value_objects import Money
from pos.domain.service.local_time import LocalCalendar
from tests.fakes import FakeProductRepository, FakeSaleRepository, make_sale

LATTE = Product(id="1", name="Latte", price=Money.of("3.50"), stock=100, category=Category.HOT_DRINK)
SCONE = Product(id="2", name="Scone", price=Money.of("2.80"), stock=100, category=Category.PASTRY)


def _at(day: int) -> datetime:
    return datetime(2025, 12, day, 14, tzinfo=timezone.utc)


def _handler() -> ShowProductsSoldHandler:
    sales = [
        make_sale("KFE-000001", _at(1), [(LATTE, 9)]),
        make_sale("KFE-000002", _at(2), [(LATTE, 2), (SCONE, 1)]),
        make_sale("KFE-000003", _at(2), [(SCONE, 3)]),
        make_sale("KFE-000004", _at(2), [(LATTE, 50)], cancelled=True),
        make_sale("KFE-000005", _at(3), [(SCONE, 9)]),
    ]
    return ShowProductsSoldHandler(
        FakeSaleRepository(sales), FakeProductRepository([LATTE, SCONE]), LocalCalendar()
    )


class TestShowProductsSold:

    def test_only_the_requested_day_counts(self):
        report = _handler().handle("2025-12-02", "2025-12-02")
        rows = {r.product_id: r for r in report.rows}
        assert rows["1"].total_quantity == 2
        assert rows["1"].total_revenue == Decimal("7.00")
        assert rows["2"].total_quantity == 4
        assert rows["2"].total_revenue == Decimal("11.20")

    def test_summary(self):
        report = _handler().handle("2025-12-02", "2025-12-02")
        assert report.total_products == 2
        assert report.total_items_sold == 6
        assert report.total_revenue == Decimal("18.20")
        assert report.total_sales == 2

    def test_rows_ordered_by_quantity(self):
        report = _handler().handle("2025-12-02", "2025-12-02")
        assert [r.product_id for r in report.rows] == ["2", "1"]

    def test_period_echoed(self):
        report = _handler().handle("2025-12-01", "2025-12-03", use_local_date=False)
        assert report.period.start_date == "2025-12-01"
        assert report.period.use_local_date is False
        assert report.total_items_sold == 24

    def test_empty_window(self):
        report = _handler().handle("2025-11-01", "2025-11-30")
        assert report.rows == []
        assert report.total_revenue == Decimal("0.00")

    def test_dates_required(self):
        with pytest.raises(ValidationError, match="startDate and endDate are required"):
            _handler().handle(None, "2025-12-02")


class TestShowProductsSoldLocalDay:

    def _handler(self) -> ShowProductsSoldHandler:
        # 03:00 UTC on the 3rd is 21:00 on the 2nd at -06:00
        late = make_sale("KFE-000001", datetime(2025, 12, 3, 3, tzinfo=timezone.utc), [(LATTE, 4)])
        morning = make_sale("KFE-000002", datetime(2025, 12, 3, 15, tzinfo=timezone.utc), [(SCONE, 1)])
        return ShowProductsSoldHandler(
            FakeSaleRepository([late, morning]),
            FakeProductRepository([LATTE, SCONE]),
            LocalCalendar(timedelta(hours=-6)),
        )

    def test_late_sale_counts_on_previous_local_day(self):
        report = self._handler().handle("2025-12-02", "2025-12-02")
        assert [(r.product_id, r.total_quantity) for r in report.rows] == [("1", 4)]
        assert report.total_sales == 1

    def test_late_sale_absent_from_next_local_day(self):
        report = self._handler().handle("2025-12-03", "2025-12-03")
        assert [r.product_id for r in report.rows] == ["2"]

    def test_utc_mode_uses_the_unshifted_day(self):
        report = self._handler().handle("2025-12-03", "2025-12-03", use_local_date=False)
        assert report.total_sales == 2
