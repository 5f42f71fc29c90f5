"""Product aggregate.

Products live independently of sales. They carry the current price and the
stock level that committed sales draw down.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pos.domain.exceptions import InsufficientStockError, ValidationError
from pos.domain.model.value_objects import Money


class Category(Enum):
    HOT_DRINK = "Hot Drink"
    COLD_DRINK = "Cold Drink"
    PASTRY = "Pastry"
    SANDWICH = "Sandwich"
    OTHER = "Other"

    @staticmethod
    def parse(raw: str) -> Category:
        for category in Category:
            if raw.strip().lower() in (category.value.lower(), category.name.lower()):
                return category
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category '{raw}'. Expected one of: {allowed}")


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``stock`` is never negative
    - ``price`` and ``cost`` are never negative (enforced by Money)

    ``category`` may be None for legacy records; reports group those
    products explicitly instead of dropping them.
    """

    id: str
    name: str
    price: Money
    stock: int = 0
    category: Category | None = None
    cost: Money = Money.zero()
    is_active: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.stock, bool) or not isinstance(self.stock, int):
            raise ValidationError(
                f"Stock must be an integer, got {type(self.stock).__name__}"
            )
        if self.stock < 0:
            raise ValidationError(f"Stock for {self.name} cannot be negative")

    def take_stock(self, quantity: int) -> None:
        """Remove *quantity* units for a sale.

        Raises InsufficientStockError, leaving stock untouched, when fewer
        than *quantity* units are available.
        """
        if quantity <= 0:
            raise ValidationError("Stock quantity to take must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(
                product_name=self.name, available=self.stock, requested=quantity
            )
        self.stock -= quantity

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing sales because sale line items
        capture a price snapshot at sale time.
        """
        self.price = new_price
