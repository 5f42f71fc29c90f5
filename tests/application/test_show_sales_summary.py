"""Tests for the Sales Summary report."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from pos.application.show_sales_summary import ShowSalesSummaryHandler
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.service.local_time import LocalCalendar
from tests.fakes import FakeSaleRepository, make_sale

LATTE = Product(id="1", name="Latte", price=Money.of("4.00"), stock=100)

# 02:00 UTC on the 31st is 20:00 on the 30th at -06:00
NOW = datetime(2025, 12, 31, 2, tzinfo=timezone.utc)


def _handler() -> ShowSalesSummaryHandler:
    sales = [
        make_sale("KFE-000001", datetime(2025, 12, 30, 16, tzinfo=timezone.utc), [(LATTE, 1)]),
        make_sale("KFE-000002", datetime(2025, 12, 31, 1, tzinfo=timezone.utc), [(LATTE, 2)]),
        make_sale("KFE-000003", datetime(2025, 12, 25, 12, tzinfo=timezone.utc), [(LATTE, 3)]),
        make_sale("KFE-000004", datetime(2025, 11, 1, 12, tzinfo=timezone.utc), [(LATTE, 4)]),
        make_sale(
            "KFE-000005",
            datetime(2025, 12, 30, 17, tzinfo=timezone.utc),
            [(LATTE, 10)],
            cancelled=True,
        ),
    ]
    return ShowSalesSummaryHandler(
        FakeSaleRepository(sales), LocalCalendar(timedelta(hours=-6)), clock=lambda: NOW
    )


class TestShowSalesSummary:

    def test_today_uses_local_day(self):
        report = _handler().handle()
        assert report.today_date == "2025-12-30"
        assert report.today.sales == 2
        assert report.today.revenue == Decimal("12.00")
        assert report.today.average_ticket == Decimal("6.00")

    def test_trailing_week(self):
        report = _handler().handle()
        assert report.week.sales == 3
        assert report.week.revenue == Decimal("24.00")

    def test_all_time(self):
        report = _handler().handle()
        assert report.all_time.sales == 4
        assert report.all_time.revenue == Decimal("40.00")
        assert report.average_ticket == Decimal("10.00")

    def test_utc_mode(self):
        report = _handler().handle(use_local_date=False)
        assert report.today_date == "2025-12-31"
        assert report.today.sales == 1
        assert report.use_local_date is False
