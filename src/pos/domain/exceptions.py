"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Storage faults are *not* domain exceptions: they derive from StoreError and
are reported as server-side failures.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """A sale asked for more units than the product has in stock."""

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, requested: {requested}"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class StoreError(Exception):
    """The underlying store could not be read or written."""


class CommitError(StoreError):
    """A unit of work failed while committing; nothing was persisted."""
