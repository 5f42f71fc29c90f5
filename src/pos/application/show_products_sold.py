"""Application service: Products Sold report (query).

Which products sold, how many units and for how much, between two
calendar days (both required, inclusive).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from pos.application.dto import (
    PeriodDTO,
    ProductSalesDTO,
    period_to_dto,
    product_tally_to_dto,
)
from pos.domain.model.value_objects import round_money
from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DateWindow, LocalCalendar
from pos.domain.service.sales_aggregation import SalesAggregator, in_window, rank_products

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductsSoldReport:
    period: PeriodDTO
    rows: list[ProductSalesDTO]
    total_products: int
    total_items_sold: int
    total_revenue: Decimal
    total_sales: int


class ShowProductsSoldHandler:

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
        start_date: str | None,
        end_date: str | None,
        use_local_date: bool = True,
    ) -> ProductsSoldReport:
        window = DateWindow.parse(start_date, end_date, use_local_date)

        all_sales = self._sale_repo.list_all()
        sales = in_window(all_sales, window, self._calendar)
        logger.debug(
            "Products sold %s..%s: %d of %d sales in window",
            window.start_day,
            window.end_day,
            len(sales),
            len(all_sales),
        )

        aggregator = SalesAggregator(self._product_repo.list_all())
        tallies = rank_products(aggregator.by_product(sales))

        return ProductsSoldReport(
            period=period_to_dto(window),
            rows=[product_tally_to_dto(t) for t in tallies],
            total_products=len(tallies),
            total_items_sold=sum(t.quantity for t in tallies),
            total_revenue=round_money(sum((t.revenue for t in tallies), Decimal("0"))),
            total_sales=len(sales),
        )
