"""Test doubles and builders shared across test modules."""

from typing import Any

from order_lifecycle.models.order import CallerContext, OrderDraft
from order_lifecycle.storage.document_store import MemoryDocumentStore

BUYER = CallerContext(uid="B")
SELLER = CallerContext(uid="S")
STRANGER = CallerContext(uid="X")
ADMIN = CallerContext(uid="ops-1", is_admin=True)


class CountingStore(MemoryDocumentStore):
    """Memory store that counts every access."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def add(self, collection, data):
        self.calls += 1
        return super().add(collection, data)

    def get(self, collection, doc_id):
        self.calls += 1
        return super().get(collection, doc_id)

    def update(self, collection, doc_id, fields, where=None):
        self.calls += 1
        return super().update(collection, doc_id, fields, where=where)

    def query(self, collection, field, value):
        self.calls += 1
        return super().query(collection, field, value)


def make_draft(**overrides: Any) -> OrderDraft:
    fields: dict[str, Any] = {
        "buyer_id": "B",
        "seller_id": "S",
        "listing_id": "listing-1",
        "category": "grains",
        "price": 12.5,
        "quantity": 4,
        "currency": "KES",
    }
    fields.update(overrides)
    return OrderDraft(**fields)
