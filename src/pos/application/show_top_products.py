"""Application service: Top Products report (query)."""

from __future__ import annotations

from dataclasses import dataclass

from pos.application.dto import (
    PeriodDTO,
    ProductSalesDTO,
    period_to_dto,
    product_tally_to_dto,
)
from pos.domain.exceptions import ValidationError
from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DateWindow, LocalCalendar
from pos.domain.service.sales_aggregation import (
    SORT_KEYS,
    SalesAggregator,
    in_window,
    rank_products,
)

DEFAULT_LIMIT = 3


@dataclass(frozen=True)
class TopProductsReport:
    rows: list[ProductSalesDTO]
    limit: int
    sort_by: str
    category: str | None
    period: PeriodDTO | None
    total_products_analyzed: int


def validate_ranking(limit: int, sort_by: str) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError("limit must be a positive integer")
    if sort_by not in SORT_KEYS:
        raise ValidationError(
            f"Invalid sortBy '{sort_by}'. Expected one of: {', '.join(SORT_KEYS)}"
        )


class ShowTopProductsHandler:

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
        limit: int = DEFAULT_LIMIT,
        sort_by: str = "quantity",
        category: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        use_local_date: bool = True,
    ) -> TopProductsReport:
        """Best sellers by quantity (or revenue), at most *limit* rows."""
        validate_ranking(limit, sort_by)
        window = DateWindow.optional(start_date, end_date, use_local_date)

        sales = in_window(self._sale_repo.list_all(), window, self._calendar)
        aggregator = SalesAggregator(self._product_repo.list_all())
        ranked = rank_products(aggregator.by_product(sales, category), sort_by)

        return TopProductsReport(
            rows=[product_tally_to_dto(t) for t in ranked[:limit]],
            limit=limit,
            sort_by=sort_by,
            category=category,
            period=period_to_dto(window),
            total_products_analyzed=len(ranked),
        )
