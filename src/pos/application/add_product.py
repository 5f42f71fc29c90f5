"""Application service: Add Product use case."""

from __future__ import annotations

from pos.domain.exceptions import ValidationError
from pos.domain.model.product import Category, Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        price: str,
        stock: int,
        category: str | None = None,
        cost: str = "0",
    ) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        with self._uow as uow:
            existing = uow.products.get_by_name(name.strip())
            if existing is not None:
                raise ValidationError(f"Product '{name}' already exists")

            # Auto-assign ID based on existing products
            numeric_ids = [int(p.id) for p in uow.products.list_all() if p.id.isdigit()]
            next_id = str(max(numeric_ids, default=0) + 1)

            product = Product(
                id=next_id,
                name=name.strip(),
                price=Money.of(price),
                stock=stock,
                category=Category.parse(category) if category else None,
                cost=Money.of(cost),
            )
            uow.products.save(product)
            uow.commit()

        return product
