"""Application service: Sales Summary report (query).

Sale count, revenue and average ticket for today, the trailing seven days
and all time, plus the all-time average ticket.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pos.domain.model.value_objects import round_money
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DAY_FORMAT, DateWindow, LocalCalendar, utc_now
from pos.domain.service.sales_aggregation import SalesAggregator, TicketTally, in_window

TRAILING_DAYS = 7


@dataclass(frozen=True)
class WindowTotalsDTO:
    sales: int
    revenue: Decimal
    average_ticket: Decimal


@dataclass(frozen=True)
class SalesSummaryReport:
    today_date: str
    use_local_date: bool
    today: WindowTotalsDTO
    week: WindowTotalsDTO
    all_time: WindowTotalsDTO
    average_ticket: Decimal


def _totals_to_dto(tally: TicketTally) -> WindowTotalsDTO:
    return WindowTotalsDTO(
        sales=tally.sales,
        revenue=round_money(tally.revenue),
        average_ticket=round_money(tally.average_ticket),
    )


class ShowSalesSummaryHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        calendar: LocalCalendar,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._sale_repo = sale_repo
        self._calendar = calendar
        self._clock = clock

    def handle(self, use_local_date: bool = True) -> SalesSummaryReport:
        today = self._calendar.today(self._clock(), use_local_date)
        sales = in_window(self._sale_repo.list_all(), None, self._calendar)

        today_window = DateWindow(today, today, use_local_date)
        week_window = DateWindow.trailing(TRAILING_DAYS, today, use_local_date)

        all_time = SalesAggregator.totals(sales, "all")
        return SalesSummaryReport(
            today_date=today.strftime(DAY_FORMAT),
            use_local_date=use_local_date,
            today=_totals_to_dto(
                SalesAggregator.totals(in_window(sales, today_window, self._calendar), "today")
            ),
            week=_totals_to_dto(
                SalesAggregator.totals(in_window(sales, week_window, self._calendar), "week")
            ),
            all_time=_totals_to_dto(all_time),
            average_ticket=round_money(all_time.average_ticket),
        )
