"""Application service: Products Chart report (query).

One report, several views of the same sale set:

* the top products by quantity or revenue,
* those top products grouped by category,
* a daily quantity/revenue trend per top product,
* a summary over every product that matched the filters.

All views are derived from a single fetch of the transaction log and the
catalog, so they always agree with each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos.application.dto import (
    CategorySalesDTO,
    PeriodDTO,
    ProductSalesDTO,
    category_tally_to_dto,
    period_to_dto,
    product_tally_to_dto,
)
from pos.application.show_top_products import validate_ranking
from pos.domain.model.value_objects import round_money
from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DateWindow, LocalCalendar
from pos.domain.service.sales_aggregation import (
    ProductTrend,
    SalesAggregator,
    average,
    group_categories,
    in_window,
    rank_products,
)

DEFAULT_TOP = 10


@dataclass(frozen=True)
class TrendPointDTO:
    date: str
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class ProductTrendDTO:
    product_id: str
    product_name: str
    points: list[TrendPointDTO]


@dataclass(frozen=True)
class ProductsChartReport:
    top: int
    sort_by: str
    category: str | None
    period: PeriodDTO | None
    rows: list[ProductSalesDTO]
    categories: list[CategorySalesDTO]
    trends: list[ProductTrendDTO]
    total_products: int
    total_items_sold: int
    total_revenue: Decimal
    average_price: Decimal


def _trend_to_dto(trend: ProductTrend) -> ProductTrendDTO:
    return ProductTrendDTO(
        product_id=trend.product_id,
        product_name=trend.product_name,
        points=[
            TrendPointDTO(date=d.day, quantity=d.quantity, revenue=round_money(d.revenue))
            for d in trend.ordered()
        ],
    )


class ShowProductsChartHandler:

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
        top: int = DEFAULT_TOP,
        sort_by: str = "quantity",
        category: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        use_local_date: bool = True,
    ) -> ProductsChartReport:
        validate_ranking(top, sort_by)
        window = DateWindow.optional(start_date, end_date, use_local_date)

        sales = in_window(self._sale_repo.list_all(), window, self._calendar)
        aggregator = SalesAggregator(self._product_repo.list_all())

        ranked = rank_products(aggregator.by_product(sales, category), sort_by)
        leaders = ranked[:top]
        trends = aggregator.trend(
            sales,
            [t.product_id for t in leaders],
            lambda instant: self._calendar.day_of(instant, use_local_date),
        )

        prices = [
            price
            for price in (aggregator.price_of(t.product_id) for t in ranked)
            if price is not None
        ]

        return ProductsChartReport(
            top=top,
            sort_by=sort_by,
            category=category,
            period=period_to_dto(window),
            rows=[product_tally_to_dto(t) for t in leaders],
            categories=[category_tally_to_dto(c) for c in group_categories(leaders)],
            trends=[_trend_to_dto(t) for t in trends],
            total_products=len(ranked),
            total_items_sold=sum(t.quantity for t in ranked),
            total_revenue=round_money(sum((t.revenue for t in ranked), Decimal("0"))),
            average_price=round_money(average(sum(prices, Decimal("0")), len(prices))),
        )
