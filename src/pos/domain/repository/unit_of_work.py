"""Abstract unit of work.

A unit of work is the atomic scope of one write use case: every product
mutation, the sale counter and the sale insert either commit together or
not at all.  Leaving the ``with`` block without ``commit()`` discards
everything done inside it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.repository.product_repository import ProductRepository
from pos.domain.repository.sale_repository import SaleRepository


class UnitOfWork(ABC):

    products: ProductRepository
    sales: SaleRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change of this unit of work durable.

        Raises CommitError if the store rejects the write.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes. Safe to call after commit."""
