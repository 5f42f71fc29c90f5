"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Monetary fields are
Decimals already rounded to cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pos.domain.model.sale import Sale
from pos.domain.model.value_objects import round_money
from pos.domain.service.local_time import DateWindow, LocalCalendar
from pos.domain.service.sales_aggregation import CategoryTally, ProductTally


@dataclass(frozen=True)
class SaleItemSpec:
    """Input: what the cashier rang up (product id + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class SaleLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class SaleDTO:
    """Output: a complete sale, with its local day and time of day."""

    sale_number: str
    status: str
    payment_method: str
    seller: str
    items: list[SaleLineItemDTO]
    total: Decimal
    recorded_at: str  # ISO 8601, UTC
    local_date: str
    local_time: str


@dataclass(frozen=True)
class PeriodDTO:
    """Output: the reporting window a result was computed for."""

    start_date: str
    end_date: str
    use_local_date: bool


def sale_to_dto(sale: Sale, calendar: LocalCalendar) -> SaleDTO:
    return SaleDTO(
        sale_number=sale.sale_number,
        status=sale.status.value,
        payment_method=sale.payment_method.value,
        seller=sale.seller,
        items=[
            SaleLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=item.unit_price.rounded(),
                subtotal=item.subtotal.rounded(),
            )
            for item in sale.items
        ],
        total=sale.total.rounded(),
        recorded_at=sale.recorded_at.isoformat(),
        local_date=calendar.local_day(sale.recorded_at),
        local_time=calendar.local_time(sale.recorded_at),
    )


def period_to_dto(window: DateWindow | None) -> PeriodDTO | None:
    if window is None:
        return None
    return PeriodDTO(
        start_date=window.start_day,
        end_date=window.end_day,
        use_local_date=window.use_local,
    )


@dataclass(frozen=True)
class ProductSalesDTO:
    """Output: one product's row in a product report."""

    product_id: str
    product_name: str
    category: str
    total_quantity: int
    total_revenue: Decimal
    line_items: int


@dataclass(frozen=True)
class CategorySalesDTO:
    """Output: one category's row in a category breakdown."""

    category: str
    total_quantity: int
    total_revenue: Decimal
    line_items: int
    product_count: int


def product_tally_to_dto(tally: ProductTally) -> ProductSalesDTO:
    return ProductSalesDTO(
        product_id=tally.product_id,
        product_name=tally.product_name,
        category=tally.category,
        total_quantity=tally.quantity,
        total_revenue=round_money(tally.revenue),
        line_items=tally.line_items,
    )


def category_tally_to_dto(tally: CategoryTally) -> CategorySalesDTO:
    return CategorySalesDTO(
        category=tally.category,
        total_quantity=tally.quantity,
        total_revenue=round_money(tally.revenue),
        line_items=tally.line_items,
        product_count=len(tally.product_ids),
    )
