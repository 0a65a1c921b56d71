"""Document store interface and the in-memory implementation.

A store holds JSON-like documents in named collections. Writes may contain
the ``SERVER_TIMESTAMP`` sentinel, which the store replaces with its own
clock reading. Readings from one store are strictly increasing.
"""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from order_lifecycle.models.common import to_iso, utc_now


class _ServerTimestamp:
    """Singleton sentinel; copies must stay identical to the original."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    def __copy__(self) -> "_ServerTimestamp":
        return self

    def __deepcopy__(self, memo: dict) -> "_ServerTimestamp":
        return self


SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentNotFound(Exception):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id


class PreconditionFailed(Exception):
    """A conditional update found a different value than expected."""

    def __init__(self, field: str, expected: Any, actual: Any):
        super().__init__(f"{field}: expected {expected!r}, found {actual!r}")
        self.field = field
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any]


class ServerClock:
    """UTC clock that never returns the same reading twice."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last: datetime | None = None

    def now(self) -> datetime:
        with self._lock:
            now = utc_now()
            if self._last is not None and now <= self._last:
                now = self._last + timedelta(microseconds=1)
            self._last = now
            return now


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def resolve_server_values(fields: dict[str, Any], timestamp: str) -> dict[str, Any]:
    return {
        k: (timestamp if v is SERVER_TIMESTAMP else v) for k, v in fields.items()
    }


class DocumentStore(ABC):
    @abstractmethod
    def add(self, collection: str, data: dict[str, Any]) -> Document:
        """Insert a document under a new id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Document | None:
        """Fetch a document, or None if it does not exist."""

    @abstractmethod
    def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        where: tuple[str, Any] | None = None,
    ) -> Document:
        """Merge fields into an existing document.

        With ``where=(field, value)`` the write only happens if the stored
        field still equals value; otherwise PreconditionFailed is raised.
        Raises DocumentNotFound if the document does not exist.
        """

    @abstractmethod
    def query(self, collection: str, field: str, value: Any) -> list[Document]:
        """All documents whose top-level field equals value."""


class MemoryDocumentStore(DocumentStore):
    """Thread-safe dict-backed store used by tests and the memory backend."""

    def __init__(self, clock: ServerClock | None = None):
        self.clock = clock or ServerClock()
        self._lock = threading.Lock()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def add(self, collection: str, data: dict[str, Any]) -> Document:
        with self._lock:
            doc_id = new_document_id()
            stored = copy.deepcopy(resolve_server_values(data, to_iso(self.clock.now())))
            self._collections.setdefault(collection, {})[doc_id] = stored
            return Document(doc_id, copy.deepcopy(stored))

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._lock:
            stored = self._collections.get(collection, {}).get(doc_id)
            if stored is None:
                return None
            return Document(doc_id, copy.deepcopy(stored))

    def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        where: tuple[str, Any] | None = None,
    ) -> Document:
        with self._lock:
            stored = self._collections.get(collection, {}).get(doc_id)
            if stored is None:
                raise DocumentNotFound(collection, doc_id)
            if where is not None:
                field, expected = where
                if stored.get(field) != expected:
                    raise PreconditionFailed(field, expected, stored.get(field))
            stored.update(
                copy.deepcopy(resolve_server_values(fields, to_iso(self.clock.now())))
            )
            return Document(doc_id, copy.deepcopy(stored))

    def query(self, collection: str, field: str, value: Any) -> list[Document]:
        with self._lock:
            return [
                Document(doc_id, copy.deepcopy(data))
                for doc_id, data in self._collections.get(collection, {}).items()
                if data.get(field) == value
            ]
