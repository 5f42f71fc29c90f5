"""Sale aggregate: one completed point-of-sale transaction.

The Sale is an aggregate root that owns its line items.  Once created, its
items, total and recorded instant never change; only the status may move
from COMPLETED to CANCELLED.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money, Quantity


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"

    @staticmethod
    def parse(raw: str | None) -> PaymentMethod:
        if raw is None or not raw.strip():
            raise ValidationError("Payment method is required")
        try:
            return PaymentMethod(raw.strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in PaymentMethod)
            raise ValidationError(
                f"Unknown payment method '{raw}'. Expected one of: {allowed}"
            ) from None


class SaleStatus(Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class SaleLineItem:
    """Captures product, quantity and price at the moment of sale.

    ``subtotal`` is computed once by ``capture()`` and stored; it is never
    recomputed from a product whose price may have changed since.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # snapshot
    subtotal: Money

    @staticmethod
    def capture(product: Product, quantity: Quantity) -> SaleLineItem:
        return SaleLineItem(
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price=product.price,
            subtotal=product.price * quantity.value,
        )


MAX_LINE_ITEMS = 100


@dataclass
class Sale:
    """Aggregate root for sales.

    Use the ``Sale.create()`` factory for new sales — it enforces all
    invariants.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted sales without re-validating.
    """

    sale_number: str
    items: list[SaleLineItem]
    total: Money
    payment_method: PaymentMethod
    seller: str
    recorded_at: datetime
    status: SaleStatus = SaleStatus.COMPLETED

    # --- Factory (used for NEW sales only) ------------------------------------

    @staticmethod
    def create(
        sale_number: str,
        items: list[SaleLineItem],
        payment_method: PaymentMethod,
        seller: str,
        recorded_at: datetime,
    ) -> Sale:
        """Create a new completed sale, enforcing all invariants."""
        if not sale_number:
            raise ValidationError("Sale number is required")

        if not items:
            raise ValidationError("Sale must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per sale")

        if not seller or not seller.strip():
            raise ValidationError("Seller is required")

        if recorded_at.tzinfo is None or recorded_at.utcoffset() != timedelta(0):
            raise ValidationError("recorded_at must be a UTC timestamp")

        return Sale(
            sale_number=sale_number,
            items=list(items),
            total=sum_subtotals(items),
            payment_method=payment_method,
            seller=seller.strip(),
            recorded_at=recorded_at,
        )

    # --- State transitions ----------------------------------------------------

    def cancel(self) -> None:
        """Transition COMPLETED -> CANCELLED."""
        if self.status == SaleStatus.CANCELLED:
            raise ValidationError(f"Sale {self.sale_number} is already cancelled")
        self.status = SaleStatus.CANCELLED

    # --- Computed properties --------------------------------------------------

    @property
    def is_completed(self) -> bool:
        return self.status == SaleStatus.COMPLETED

    @property
    def total_matches_items(self) -> bool:
        return self.total == sum_subtotals(self.items)


def sum_subtotals(items: list[SaleLineItem]) -> Money:
    result = Money.zero()
    for item in items:
        result = result + item.subtotal
    return result
