"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from pos.domain.service.local_time import LocalCalendar
from pos.domain.service.sale_numbering import SaleNumberGenerator
from pos.infrastructure.config import Settings, load_settings
from pos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from pos.infrastructure.persistence.json_sale_repository import JsonSaleRepository
from pos.infrastructure.persistence.json_store import JsonStore, StoreSnapshot
from pos.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


def store() -> JsonStore:
    return JsonStore(settings().store_path)


def calendar() -> LocalCalendar:
    return LocalCalendar(settings().utc_offset)


def sale_numbering() -> SaleNumberGenerator:
    return SaleNumberGenerator(prefix=settings().sale_prefix)


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(store())


def read_repositories() -> tuple[JsonProductRepository, JsonSaleRepository]:
    """Read-only repositories over one lazily loaded snapshot of the store."""
    snapshot = StoreSnapshot(store())
    return JsonProductRepository(snapshot), JsonSaleRepository(snapshot)
