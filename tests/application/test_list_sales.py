"""Tests for the ListSales query."""

from datetime import datetime, timedelta, timezone

import pytest

from pos.application.list_sales import ListSalesHandler
from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.service.local_time import LocalCalendar
from tests.fakes import FakeSaleRepository, make_sale

LATTE = Product(id="1", name="Latte", price=Money.of("3.50"), stock=100)


def _handler(count: int = 5) -> ListSalesHandler:
    sales = [
        make_sale(
            f"KFE-{n:06d}",
            datetime(2025, 12, n, 15, tzinfo=timezone.utc),
            [(LATTE, 1)],
            cancelled=(n == 2),
        )
        for n in range(1, count + 1)
    ]
    return ListSalesHandler(FakeSaleRepository(sales), LocalCalendar(timedelta(hours=-6)))


class TestListSales:

    def test_newest_first(self):
        page = _handler().handle()
        assert [s.sale_number for s in page.sales][:2] == ["KFE-000005", "KFE-000004"]

    def test_includes_cancelled_sales(self):
        page = _handler().handle()
        statuses = {s.sale_number: s.status for s in page.sales}
        assert statuses["KFE-000002"] == "CANCELLED"

    def test_pagination(self):
        page = _handler(count=5).handle(page=2, limit=2)
        assert [s.sale_number for s in page.sales] == ["KFE-000003", "KFE-000002"]
        assert page.total_pages == 3
        assert page.total_items == 5
        assert page.period is None

    def test_window_filter(self):
        page = _handler().handle(start_date="2025-12-02", end_date="2025-12-03")
        assert [s.sale_number for s in page.sales] == ["KFE-000003", "KFE-000002"]
        assert page.period.start_date == "2025-12-02"

    def test_local_time_of_day(self):
        page = _handler(count=1).handle()
        assert page.sales[0].local_time == "09:00:00"

    def test_invalid_page_rejected(self):
        with pytest.raises(ValidationError, match="page must be a positive integer"):
            _handler().handle(page=0)
