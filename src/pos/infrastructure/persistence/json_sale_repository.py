"""JSON-document-backed implementation of SaleRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pos.domain.exceptions import StoreError, ValidationError
from pos.domain.model.sale import PaymentMethod, Sale, SaleLineItem, SaleStatus
from pos.domain.model.value_objects import Money, Quantity
from pos.domain.repository.sale_repository import SaleRepository
from pos.infrastructure.persistence.json_store import StoreSnapshot


class JsonSaleRepository(SaleRepository):

    def __init__(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot

    # --- SaleRepository interface ---------------------------------------------

    def next_sequence(self) -> int:
        document = self._snapshot.document
        # Stores written before the counter existed start from the log size
        current = document.get("sale_sequence", len(document["sales"]))
        if isinstance(current, bool) or not isinstance(current, int) or current < 0:
            raise StoreError(f"Corrupt sale counter: {current!r}")
        document["sale_sequence"] = current + 1
        return current + 1

    def get_by_number(self, sale_number: str) -> Sale | None:
        for raw in self._records():
            if raw["sale_number"] == sale_number:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Sale]:
        return [self._to_domain(raw) for raw in self._records()]

    def add(self, sale: Sale) -> None:
        if any(raw["sale_number"] == sale.sale_number for raw in self._records()):
            raise StoreError(f"Duplicate sale number {sale.sale_number}")
        self._records().append(self._to_raw(sale))

    def save(self, sale: Sale) -> None:
        records = self._records()
        for i, raw in enumerate(records):
            if raw["sale_number"] == sale.sale_number:
                records[i] = self._to_raw(sale)
                return
        raise StoreError(f"Sale {sale.sale_number} is not in the log")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(sale: Sale) -> dict:
        return {
            "sale_number": sale.sale_number,
            "status": sale.status.value,
            "payment_method": sale.payment_method.value,
            "seller": sale.seller,
            "recorded_at": sale.recorded_at.isoformat(),
            "total": str(sale.total.amount),
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "subtotal": str(item.subtotal.amount),
                }
                for item in sale.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Sale:
        try:
            items = [
                SaleLineItem(
                    product_id=i["product_id"],
                    product_name=i["product_name"],
                    quantity=Quantity(i["quantity"]),
                    unit_price=Money(Decimal(i["unit_price"])),
                    subtotal=Money(Decimal(i["subtotal"])),
                )
                for i in raw["items"]
            ]
            return Sale(
                sale_number=raw["sale_number"],
                items=items,
                total=Money(Decimal(raw["total"])),
                payment_method=PaymentMethod(raw["payment_method"]),
                seller=raw["seller"],
                recorded_at=datetime.fromisoformat(raw["recorded_at"]),
                status=SaleStatus(raw["status"]),
            )
        except (KeyError, ValueError, ArithmeticError, ValidationError) as exc:
            raise StoreError(f"Malformed sale record {raw.get('sale_number')!r}: {exc}") from exc

    def _records(self) -> list[dict]:
        return self._snapshot.document["sales"]
