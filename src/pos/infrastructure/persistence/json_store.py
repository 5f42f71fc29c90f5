"""JSON document store shared by the product and sale repositories.

The whole store is one document::

    {"products": [...], "sales": [...], "sale_sequence": 0}

Writes replace the file atomically (temp file + ``os.replace``), so a
reader sees either the previous or the new committed document.  Writers
serialize on a lock shared by every JsonStore pointing at the same file.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from pos.domain.exceptions import CommitError, StoreError

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _locks_guard:
        lock = _locks.get(path)
        if lock is None:
            lock = _locks[path] = threading.RLock()
        return lock


def empty_document() -> dict:
    return {"products": [], "sales": [], "sale_sequence": 0}


class JsonStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self.lock = _lock_for(self._file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> dict:
        if not self._file_path.exists():
            return empty_document()
        try:
            document = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read store {self._file_path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StoreError(f"Store {self._file_path} is not a JSON object")
        document.setdefault("products", [])
        document.setdefault("sales", [])
        return document

    def replace(self, document: dict) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".store-", suffix=".json", dir=self._file_path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(json.dumps(document, indent=2) + "\n")
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise CommitError(f"Cannot write store {self._file_path}: {exc}") from exc


class StoreSnapshot:
    """A copy of the store document, loaded on first use."""

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._document: dict | None = None

    @property
    def document(self) -> dict:
        if self._document is None:
            self._document = self._store.load()
        return self._document
