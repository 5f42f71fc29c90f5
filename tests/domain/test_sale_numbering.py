"""Unit tests for sale number generation."""

import logging
from datetime import datetime, timezone

from pos.domain.service.sale_numbering import SaleNumberGenerator
from tests.fakes import FakeSaleRepository

FIXED = datetime(2025, 12, 30, 12, 0, 0, 123000, tzinfo=timezone.utc)


class TestSaleNumberGenerator:

    def test_first_number(self):
        assert SaleNumberGenerator().next_number(FakeSaleRepository()) == "KFE-000001"

    def test_numbers_are_sequential(self):
        repo = FakeSaleRepository()
        generator = SaleNumberGenerator()
        numbers = [generator.next_number(repo) for _ in range(3)]
        assert numbers == ["KFE-000001", "KFE-000002", "KFE-000003"]

    def test_custom_prefix(self):
        assert SaleNumberGenerator(prefix="TDA-").format(42) == "TDA-000042"

    def test_fallback_when_counter_broken(self, caplog):
        generator = SaleNumberGenerator(clock=lambda: FIXED)
        millis = int(FIXED.timestamp() * 1000)
        with caplog.at_level(logging.WARNING, logger="pos"):
            number = generator.next_number(FakeSaleRepository(broken_counter=True))
        assert number == f"KFE-{millis % 1_000_000:06d}"
        assert "non-sequential" in caplog.text
