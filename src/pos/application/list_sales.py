"""Application service: List Sales use case (query).

Pages through the transaction log, newest first, optionally restricted to
a window of calendar days.  Cancelled sales are listed too: this is a view
of the log, not a report.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pos.application.dto import PeriodDTO, SaleDTO, period_to_dto, sale_to_dto
from pos.domain.exceptions import ValidationError
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import DateWindow, LocalCalendar


@dataclass(frozen=True)
class SalesPageDTO:
    sales: list[SaleDTO]
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    period: PeriodDTO | None


class ListSalesHandler:

    def __init__(self, sale_repo: SaleRepository, calendar: LocalCalendar) -> None:
        self._sale_repo = sale_repo
        self._calendar = calendar

    def handle(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        use_local_date: bool = True,
        page: int = 1,
        limit: int = 10,
    ) -> SalesPageDTO:
        if page < 1:
            raise ValidationError("page must be a positive integer")
        if limit < 1:
            raise ValidationError("limit must be a positive integer")

        window = DateWindow.optional(start_date, end_date, use_local_date)

        sales = self._sale_repo.list_all()
        if window is not None:
            sales = [s for s in sales if window.contains(s.recorded_at, self._calendar)]
        sales.sort(key=lambda s: (s.recorded_at, s.sale_number), reverse=True)

        offset = (page - 1) * limit
        return SalesPageDTO(
            sales=[sale_to_dto(s, self._calendar) for s in sales[offset:offset + limit]],
            current_page=page,
            total_pages=math.ceil(len(sales) / limit),
            total_items=len(sales),
            items_per_page=limit,
            period=period_to_dto(window),
        )
