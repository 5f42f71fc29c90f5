"""Application service: Sales by Category report (query).

Products without a category are reported under an explicit
"uncategorized" row.  A category with no sales has no row at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos.application.dto import (
    CategorySalesDTO,
    PeriodDTO,
    category_tally_to_dto,
    period_to_dto,
)
from pos.domain.model.value_objects import round_money
from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DateWindow, LocalCalendar
from pos.domain.service.sales_aggregation import (
    SalesAggregator,
    in_window,
    rank_categories,
)


@dataclass(frozen=True)
class SalesByCategoryReport:
    period: PeriodDTO | None
    rows: list[CategorySalesDTO]
    total_categories: int
    total_revenue: Decimal


class ShowSalesByCategoryHandler:

    def __init__(
        self,
        sale_repo: SaleRepository,
        product_repo: ProductRepository,
        calendar: LocalCalendar,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._calendar = calendar

    def handle(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        use_local_date: bool = True,
    ) -> SalesByCategoryReport:
        window = DateWindow.optional(start_date, end_date, use_local_date)

        sales = in_window(self._sale_repo.list_all(), window, self._calendar)
        aggregator = SalesAggregator(self._product_repo.list_all())
        tallies = rank_categories(aggregator.by_category(sales))

        return SalesByCategoryReport(
            period=period_to_dto(window),
            rows=[category_tally_to_dto(t) for t in tallies],
            total_categories=len(tallies),
            total_revenue=round_money(sum((t.revenue for t in tallies), Decimal("0"))),
        )
