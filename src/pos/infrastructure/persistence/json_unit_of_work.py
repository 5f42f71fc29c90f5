"""JSON-document-backed UnitOfWork.

Entering the unit of work takes the store's write lock and loads a private
copy of the document; repositories mutate that copy only.  ``commit()``
replaces the file atomically.  Leaving the block releases the lock and
drops the copy, so anything not committed is gone.
"""

from __future__ import annotations

import logging

from pos.domain.repository.unit_of_work import UnitOfWork
from pos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from pos.infrastructure.persistence.json_sale_repository import JsonSaleRepository
from pos.infrastructure.persistence.json_store import JsonStore, StoreSnapshot

logger = logging.getLogger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._snapshot: StoreSnapshot | None = None

    def __enter__(self) -> JsonUnitOfWork:
        self._store.lock.acquire()
        try:
            snapshot = StoreSnapshot(self._store)
            snapshot.document  # load under the lock
        except BaseException:
            self._store.lock.release()
            raise
        self._snapshot = snapshot
        self.products = JsonProductRepository(snapshot)
        self.sales = JsonSaleRepository(snapshot)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._store.lock.release()

    def commit(self) -> None:
        if self._snapshot is None:
            raise RuntimeError("commit() called outside of the unit of work")
        self._store.replace(self._snapshot.document)
        self._snapshot = None
        logger.debug("Committed store %s", self._store.file_path)

    def rollback(self) -> None:
        if self._snapshot is not None:
            logger.debug("Discarding uncommitted changes to %s", self._store.file_path)
        self._snapshot = None
