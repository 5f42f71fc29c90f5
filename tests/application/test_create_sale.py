"""Integration tests for the CreateSale use case.

Uses the in-memory unit of work — no file I/O.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pos.application.create_sale import CreateSaleHandler
from pos.application.dto import SaleItemSpec
from pos.domain.exceptions import (
    CommitError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from pos.domain.model.product import Category, Product
from pos.domain.model.value_objects import Money
from pos.domain.service.local_time import LocalCalendar
from tests.fakes import FakeUnitOfWork

NOW = datetime(2025, 12, 31, 3, 15, tzinfo=timezone.utc)


def _setup(
    products: list[Product] | None = None,
    fail_commit: bool = False,
    offset_hours: int = -6,
) -> tuple[CreateSaleHandler, FakeUnitOfWork]:
    """Build handler over a fake unit of work, optionally pre-loaded with products."""
    if products is None:
        products = [
            Product(id="1", name="Latte", price=Money.of("3.50"), stock=10, category=Category.HOT_DRINK),
            Product(id="2", name="Croissant", price=Money.of("2.25"), stock=5, category=Category.PASTRY),
            Product(id="3", name="Bagel", price=Money.of("1.75"), stock=3),
        ]
    uow = FakeUnitOfWork(products=products, fail_commit=fail_commit)
    handler = CreateSaleHandler(
        uow=uow,
        calendar=LocalCalendar(timedelta(hours=offset_hours)),
        clock=lambda: NOW,
    )
    return handler, uow


class TestCreateSaleHappyPath:

    def test_creates_sale_with_correct_total(self):
        handler, _ = _setup()
        dto = handler.handle([SaleItemSpec("1", 2), SaleItemSpec("2", 1)], "cash", "Ana")
        assert dto.total == Decimal("9.25")
        assert dto.status == "COMPLETED"
        assert dto.payment_method == "cash"
        assert dto.seller == "Ana"
        assert len(dto.items) == 2

    def test_line_items_snapshot_name_and_price(self):
        handler, _ = _setup()
        dto = handler.handle([SaleItemSpec("1", 3)], "card", "Ana")
        (item,) = dto.items
        assert item.product_name == "Latte"
        assert item.unit_price == Decimal("3.50")
        assert item.subtotal == Decimal("10.50")

    def test_decrements_stock(self):
        handler, uow = _setup()
        handler.handle([SaleItemSpec("1", 4), SaleItemSpec("2", 5)], "cash", "Ana")
        assert uow.products.get_by_id("1").stock == 6
        assert uow.products.get_by_id("2").stock == 0

    def test_persists_sale_and_commits_once(self):
        handler, uow = _setup()
        dto = handler.handle([SaleItemSpec("1", 1)], "cash", "Ana")
        assert uow.sales.get_by_number(dto.sale_number) is not None
        assert uow.commits == 1

    def test_sequential_numbers(self):
        handler, _ = _setup()
        first = handler.handle([SaleItemSpec("1", 1)], "cash", "Ana")
        second = handler.handle([SaleItemSpec("1", 1)], "cash", "Ana")
        assert first.sale_number == "KFE-000001"
        assert second.sale_number == "KFE-000002"

    def test_records_utc_instant_and_local_day(self):
        handler, uow = _setup()
        dto = handler.handle([SaleItemSpec("1", 1)], "cash", "Ana")
        assert dto.recorded_at == "2025-12-31T03:15:00+00:00"
        assert dto.local_date == "2025-12-30"
        assert dto.local_time == "21:15:00"
        assert uow.sales.get_by_number(dto.sale_number).recorded_at == NOW


class TestCreateSalePriceLock:

    def test_price_change_does_not_touch_recorded_sale(self):
        handler, uow = _setup()
        dto = handler.handle([SaleItemSpec("1", 2)], "cash", "Ana")

        latte = uow.products.get_by_id("1")
        latte.update_price(Money.of("9.99"))
        uow.products.save(latte)

        saved = uow.sales.get_by_number(dto.sale_number)
        assert str(saved.total) == "$7.00"
        assert saved.items[0].unit_price == Money.of("3.50")


class TestCreateSaleValidation:

    def test_empty_item_list_rejected(self):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            handler.handle([], "cash", "Ana")
        assert uow.commits == 0

    def test_zero_quantity_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle([SaleItemSpec("1", 0)], "cash", "Ana")

    def test_blank_product_id_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="productId"):
            handler.handle([SaleItemSpec(" ", 1)], "cash", "Ana")

    def test_missing_seller_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Seller is required"):
            handler.handle([SaleItemSpec("1", 1)], "cash", "")

    def test_unknown_payment_method_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Unknown payment method"):
            handler.handle([SaleItemSpec("1", 1)], "cheque", "Ana")

    def test_unknown_product(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product 42 not found"):
            handler.handle([SaleItemSpec("42", 1)], "cash", "Ana")

    def test_inactive_product_rejected(self):
        retired = Product(id="1", name="Eggnog", price=Money.of("4"), stock=5, is_active=False)
        handler, _ = _setup(products=[retired])
        with pytest.raises(ValidationError, match="not for sale"):
            handler.handle([SaleItemSpec("1", 1)], "cash", "Ana")


class TestCreateSaleAtomicity:

    def test_insufficient_stock_message(self):
        handler, uow = _setup()
        with pytest.raises(
            InsufficientStockError,
            match="Insufficient stock for Bagel. Available: 3, requested: 5",
        ):
            handler.handle([SaleItemSpec("3", 5)], "cash", "Ana")
        assert uow.products.get_by_id("3").stock == 3

    def test_failure_on_second_item_rolls_back_first(self):
        handler, uow = _setup()
        with pytest.raises(InsufficientStockError):
            handler.handle([SaleItemSpec("1", 2), SaleItemSpec("3", 4)], "cash", "Ana")
        assert uow.products.get_by_id("1").stock == 10
        assert uow.sales.list_all() == []
        assert uow.commits == 0

    def test_failed_sale_does_not_consume_a_number(self):
        handler, _ = _setup()
        with pytest.raises(InsufficientStockError):
            handler.handle([SaleItemSpec("3", 4)], "cash", "Ana")
        dto = handler.handle([SaleItemSpec("3", 1)], "cash", "Ana")
        assert dto.sale_number == "KFE-000001"

    def test_commit_failure_leaves_store_untouched(self):
        handler, uow = _setup(fail_commit=True)
        with pytest.raises(CommitError):
            handler.handle([SaleItemSpec("1", 2)], "cash", "Ana")
        assert uow.products.get_by_id("1").stock == 10
        assert uow.sales.list_all() == []
        assert uow.sales.sequence == 0
