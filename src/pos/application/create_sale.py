"""Application service: Create Sale use case.

This is the only use case that mutates stock.  Everything after request
validation runs inside a single unit of work, so a sale either commits
completely (stock decrements, counter increment, sale record) or leaves
the store untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from pos.application.dto import SaleDTO, SaleItemSpec, sale_to_dto
from pos.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    StoreError,
    ValidationError,
)
from pos.domain.model.sale import PaymentMethod, Sale, SaleLineItem
from pos.domain.model.value_objects import Quantity
from pos.domain.repository.unit_of_work import UnitOfWork
from pos.domain.service.local_time import LocalCalendar, utc_now
from pos.domain.service.sale_numbering import SaleNumberGenerator

logger = logging.getLogger(__name__)


class CreateSaleHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        calendar: LocalCalendar,
        numbering: SaleNumberGenerator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._calendar = calendar
        self._numbering = numbering or SaleNumberGenerator(clock=clock)
        self._clock = clock

    def handle(
        self,
        item_specs: list[SaleItemSpec],
        payment_method: str | None,
        seller: str | None,
    ) -> SaleDTO:
        """Record a sale.

        Steps:
        1. Validate the request shape (no store access).
        2. For each line, in request order: load the product, take the
           stock, snapshot the current price.
        3. Number the sale from the counter of the same unit of work.
        4. Stamp the true UTC instant.
        5. Persist and commit.
        """
        try:
            method, quantities = self._validate(item_specs, payment_method, seller)
            sale = self._record(item_specs, quantities, method, seller)
        except DomainException as exc:
            logger.warning("Sale rejected: %s", exc)
            raise
        except StoreError as exc:
            logger.error("Sale could not be stored: %s", exc)
            raise

        logger.info(
            "Recorded sale %s (%d items, total=%s, seller=%s)",
            sale.sale_number,
            len(sale.items),
            sale.total,
            sale.seller,
        )
        return sale_to_dto(sale, self._calendar)

    # --- Steps ----------------------------------------------------------------

    @staticmethod
    def _validate(
        item_specs: list[SaleItemSpec],
        payment_method: str | None,
        seller: str | None,
    ) -> tuple[PaymentMethod, list[Quantity]]:
        if not item_specs:
            raise ValidationError("Sale must contain at least one item")

        quantities: list[Quantity] = []
        for spec in item_specs:
            if not spec.product_id or not str(spec.product_id).strip():
                raise ValidationError("Each item needs a productId and a quantity")
            quantities.append(Quantity(spec.quantity))

        if not seller or not seller.strip():
            raise ValidationError("Seller is required")

        return PaymentMethod.parse(payment_method), quantities

    def _record(
        self,
        item_specs: list[SaleItemSpec],
        quantities: list[Quantity],
        method: PaymentMethod,
        seller: str,
    ) -> Sale:
        with self._uow as uow:
            line_items: list[SaleLineItem] = []

            for spec, quantity in zip(item_specs, quantities):
                product = uow.products.get_by_id(spec.product_id.strip())
                if product is None:
                    raise EntityNotFoundError(f"Product {spec.product_id} not found")
                if not product.is_active:
                    raise ValidationError(f"Product {product.name} is not for sale")

                product.take_stock(quantity.value)
                uow.products.save(product)
                line_items.append(SaleLineItem.capture(product, quantity))

            sale = Sale.create(
                sale_number=self._numbering.next_number(uow.sales),
                items=line_items,
                payment_method=method,
                seller=seller,
                recorded_at=self._clock().astimezone(timezone.utc),
            )
            uow.sales.add(sale)
            uow.commit()

        return sale
