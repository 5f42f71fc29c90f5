"""JSON-document-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from pos.domain.exceptions import StoreError, ValidationError
from pos.domain.model.product import Category, Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.product_repository import ProductRepository
from pos.infrastructure.persistence.json_store import StoreSnapshot


class JsonProductRepository(ProductRepository):

    def __init__(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._records():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Product | None:
        for raw in self._records():
            if raw["name"].lower() == name.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records()]

    def save(self, product: Product) -> None:
        records = self._records()
        for i, raw in enumerate(records):
            if raw["id"] == product.id:
                records[i] = self._to_raw(product)
                return
        records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "category": product.category.value if product.category else None,
            "price": str(product.price.amount),
            "cost": str(product.cost.amount),
            "stock": product.stock,
            "is_active": product.is_active,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        try:
            category = raw.get("category")
            return Product(
                id=raw["id"],
                name=raw["name"],
                category=Category(category) if category else None,
                price=Money(Decimal(raw["price"])),
                cost=Money(Decimal(raw.get("cost", "0"))),
                stock=raw.get("stock", 0),
                is_active=raw.get("is_active", True),
            )
        except (KeyError, ValueError, ArithmeticError, ValidationError) as exc:
            raise StoreError(f"Malformed product record {raw!r}: {exc}") from exc

    def _records(self) -> list[dict]:
        return self._snapshot.document["products"]
