"""Application service: Sales Chart report (query).

Sale count, revenue and average ticket per day, week or month.  Buckets
inside the window that had no sales are reported with zeros so a chart
has no gaps.  Without explicit dates the window is the last 30 days.

If the transaction log cannot be read, the handler does not fail: it
returns a fixed placeholder dataset with ``degraded=True`` and a
``note`` so callers can tell it apart from real data.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pos.application.dto import PeriodDTO, period_to_dto
from pos.domain.exceptions import StoreError
from pos.domain.model.value_objects import round_money
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DateWindow, GroupBy, LocalCalendar, utc_now
from pos.domain.service.sales_aggregation import SalesAggregator, TicketTally, in_window

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
PLACEHOLDER_NOTE = "placeholder data: sales log unavailable"


@dataclass(frozen=True)
class ChartPointDTO:
    date: str
    total_sales: int
    total_revenue: Decimal
    average_ticket: Decimal


@dataclass(frozen=True)
class SalesChartReport:
    group_by: str
    period: PeriodDTO | None
    points: list[ChartPointDTO]
    total_data_points: int
    total_revenue: Decimal
    total_sales: int
    degraded: bool = False
    note: str | None = None


PLACEHOLDER_POINTS = (
    ChartPointDTO("2025-12-28", 3, Decimal("1935.00"), Decimal("645.00")),
    ChartPointDTO("2025-12-29", 5, Decimal("90.00"), Decimal("18.00")),
)


class ShowSalesChartHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        calendar: LocalCalendar,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._sale_repo = sale_repo
        self._calendar = calendar
        self._clock = clock

    def handle(
        self,
        group_by: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        use_local_date: bool = True,
    ) -> SalesChartReport:
        grouping = GroupBy.parse(group_by)
        window = DateWindow.optional(start_date, end_date, use_local_date)
        if window is None:
            today = self._calendar.today(self._clock(), use_local_date)
            window = DateWindow.trailing(DEFAULT_WINDOW_DAYS, today, use_local_date)

        try:
            all_sales = self._sale_repo.list_all()
        except StoreError as exc:
            logger.error("Sales chart serving placeholder data: %s", exc)
            return self._placeholder()

        sales = in_window(all_sales, window, self._calendar)
        tallies = SalesAggregator.by_bucket(
            sales,
            lambda instant: self._calendar.bucket_key(instant, grouping, use_local_date),
        )

        keys = sorted(set(window.bucket_keys(grouping)) | set(tallies))
        points = [self._to_point(tallies.get(key) or TicketTally(key)) for key in keys]

        return SalesChartReport(
            group_by=grouping.value,
            period=period_to_dto(window),
            points=points,
            total_data_points=len(points),
            total_revenue=round_money(sum((t.revenue for t in tallies.values()), Decimal("0"))),
            total_sales=sum(t.sales for t in tallies.values()),
        )

    @staticmethod
    def _to_point(tally: TicketTally) -> ChartPointDTO:
        return ChartPointDTO(
            date=tally.key,
            total_sales=tally.sales,
            total_revenue=round_money(tally.revenue),
            average_ticket=round_money(tally.average_ticket),
        )

    @staticmethod
    def _placeholder() -> SalesChartReport:
        points = list(PLACEHOLDER_POINTS)
        return SalesChartReport(
            group_by=GroupBy.DAY.value,
            period=None,
            points=points,
            total_data_points=len(points),
            total_revenue=sum((p.total_revenue for p in points), Decimal("0")),
            total_sales=sum(p.total_sales for p in points),
            degraded=True,
            note=PLACEHOLDER_NOTE,
        )
