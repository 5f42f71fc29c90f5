"""Abstract repository for the Sale aggregate (the transaction log)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.sale import Sale


class SaleRepository(ABC):

    @abstractmethod
    def next_sequence(self) -> int:
        """Advance and return the sale counter.

        Must be called inside a unit of work: the increment is persisted
        by the same commit as the sale that uses it.
        """

    @abstractmethod
    def get_by_number(self, sale_number: str) -> Sale | None:
        """Return a sale by its number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Sale]:
        """Return every sale, in insertion order."""

    @abstractmethod
    def add(self, sale: Sale) -> None:
        """Append a new sale to the log."""

    @abstractmethod
    def save(self, sale: Sale) -> None:
        """Persist a status change on an existing sale."""
