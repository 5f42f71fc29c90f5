"""Domain service: sales aggregation.

Every report follows the same shape: take one list of sales, keep the
completed ones, expand their line items and fold them into tallies keyed by
product, category, calendar bucket or (product, day).  Each fold is a single
pass; ordering is applied once afterwards by the ``rank_*`` helpers.

Revenue is accumulated as exact Decimal.  Rounding happens when the
application layer builds its DTOs, never here.

Product names and categories are resolved against the catalog passed to
``SalesAggregator``.  A line whose product is no longer in the catalog keeps
its snapshot name and is counted as uncategorized.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from pos.domain.model.product import Product
from pos.domain.model.sale import Sale, SaleLineItem
from pos.domain.service.local_time import DateWindow, LocalCalendar

UNCATEGORIZED = "uncategorized"

SORT_KEYS = ("quantity", "revenue")


def completed(sales: Iterable[Sale]) -> Iterator[Sale]:
    """Only completed sales take part in any report."""
    return (sale for sale in sales if sale.is_completed)


def in_window(
    sales: Iterable[Sale], window: DateWindow | None, calendar: LocalCalendar
) -> list[Sale]:
    """Completed sales whose recorded instant falls inside *window*."""
    if window is None:
        return list(completed(sales))
    return [s for s in completed(sales) if window.contains(s.recorded_at, calendar)]


def average(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return Decimal("0")
    return total / count


# ---------------------------------------------------------------------------
# Tallies
# ---------------------------------------------------------------------------


@dataclass
class ProductTally:
    product_id: str
    product_name: str
    category: str
    quantity: int = 0
    revenue: Decimal = Decimal("0")
    line_items: int = 0

    def add(self, item: SaleLineItem) -> None:
        self.quantity += item.quantity.value
        self.revenue += item.subtotal.amount
        self.line_items += 1


@dataclass
class CategoryTally:
    category: str
    quantity: int = 0
    revenue: Decimal = Decimal("0")
    line_items: int = 0
    product_ids: set[str] = field(default_factory=set)

    def add(self, item: SaleLineItem) -> None:
        self.quantity += item.quantity.value
        self.revenue += item.subtotal.amount
        self.line_items += 1
        self.product_ids.add(item.product_id)


@dataclass
class TicketTally:
    """Sale count and revenue of a group of whole sales."""

    key: str
    sales: int = 0
    revenue: Decimal = Decimal("0")

    def add(self, sale: Sale) -> None:
        self.sales += 1
        self.revenue += sale.total.amount

    @property
    def average_ticket(self) -> Decimal:
        return average(self.revenue, self.sales)


@dataclass
class DailyTally:
    day: str
    quantity: int = 0
    revenue: Decimal = Decimal("0")


@dataclass
class ProductTrend:
    product_id: str
    product_name: str
    days: dict[str, DailyTally]

    def add(self, day: str, item: SaleLineItem) -> None:
        tally = self.days.setdefault(day, DailyTally(day))
        tally.quantity += item.quantity.value
        tally.revenue += item.subtotal.amount

    def ordered(self) -> list[DailyTally]:
        return [self.days[day] for day in sorted(self.days)]


# ---------------------------------------------------------------------------
# Folds
# ---------------------------------------------------------------------------


class SalesAggregator:

    def __init__(self, catalog: Iterable[Product]) -> None:
        self._catalog = {product.id: product for product in catalog}

    def category_of(self, product_id: str) -> str:
        product = self._catalog.get(product_id)
        if product is None or product.category is None:
            return UNCATEGORIZED
        return product.category.value

    def name_of(self, item: SaleLineItem) -> str:
        product = self._catalog.get(item.product_id)
        return product.name if product is not None else item.product_name

    def price_of(self, product_id: str) -> Decimal | None:
        product = self._catalog.get(product_id)
        return product.price.amount if product is not None else None

    def by_product(
        self, sales: Iterable[Sale], category: str | None = None
    ) -> list[ProductTally]:
        tallies: dict[str, ProductTally] = {}
        for sale in completed(sales):
            for item in sale.items:
                item_category = self.category_of(item.product_id)
                if category is not None and item_category != category:
                    continue
                tally = tallies.get(item.product_id)
                if tally is None:
                    tally = tallies[item.product_id] = ProductTally(
                        product_id=item.product_id,
                        product_name=self.name_of(item),
                        category=item_category,
                    )
                tally.add(item)
        return list(tallies.values())

    def by_category(self, sales: Iterable[Sale]) -> list[CategoryTally]:
        tallies: dict[str, CategoryTally] = {}
        for sale in completed(sales):
            for item in sale.items:
                key = self.category_of(item.product_id)
                tallies.setdefault(key, CategoryTally(key)).add(item)
        return list(tallies.values())

    @staticmethod
    def by_bucket(
        sales: Iterable[Sale], key_of: Callable[[datetime], str]
    ) -> dict[str, TicketTally]:
        tallies: dict[str, TicketTally] = {}
        for sale in completed(sales):
            key = key_of(sale.recorded_at)
            tallies.setdefault(key, TicketTally(key)).add(sale)
        return tallies

    @staticmethod
    def totals(sales: Iterable[Sale], key: str = "all") -> TicketTally:
        tally = TicketTally(key)
        for sale in completed(sales):
            tally.add(sale)
        return tally

    def trend(
        self,
        sales: Iterable[Sale],
        product_ids: Iterable[str],
        day_of: Callable[[datetime], str],
    ) -> list[ProductTrend]:
        """Per-product daily quantity and revenue, in *product_ids* order."""
        wanted = list(product_ids)
        wanted_ids = set(wanted)
        trends: dict[str, ProductTrend] = {}
        for sale in completed(sales):
            day = day_of(sale.recorded_at)
            for item in sale.items:
                if item.product_id not in wanted_ids:
                    continue
                trend = trends.get(item.product_id)
                if trend is None:
                    trend = trends[item.product_id] = ProductTrend(
                        product_id=item.product_id,
                        product_name=self.name_of(item),
                        days={},
                    )
                trend.add(day, item)
        return [trends[pid] for pid in wanted if pid in trends]


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def rank_products(tallies: Iterable[ProductTally], sort_by: str = "quantity") -> list[ProductTally]:
    """Descending by the chosen metric, ties by product id."""
    if sort_by == "revenue":
        return sorted(tallies, key=lambda t: (-t.revenue, t.product_id))
    return sorted(tallies, key=lambda t: (-t.quantity, t.product_id))


def rank_categories(tallies: Iterable[CategoryTally]) -> list[CategoryTally]:
    """Descending revenue, ties by category name."""
    return sorted(tallies, key=lambda t: (-t.revenue, t.category))


def group_categories(tallies: Iterable[ProductTally]) -> list[CategoryTally]:
    """Re-fold already computed product tallies by their category."""
    groups: dict[str, CategoryTally] = {}
    for tally in tallies:
        group = groups.setdefault(tally.category, CategoryTally(tally.category))
        group.quantity += tally.quantity
        group.revenue += tally.revenue
        group.line_items += tally.line_items
        group.product_ids.add(tally.product_id)
    return rank_categories(groups.values())
