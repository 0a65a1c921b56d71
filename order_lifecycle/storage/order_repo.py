"""Repository mapping Order entities to documents in the ``orders`` collection."""

import math
from numbers import Real
from typing import Any

from order_lifecycle.errors import ConflictError, NotFoundError, ValidationError
from order_lifecycle.models.common import IdentityId, OrderId, from_iso
from order_lifecycle.models.order import Order, OrderDraft, OrderStatus
from order_lifecycle.models.policy import ActorRole
from order_lifecycle.storage.document_store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentNotFound,
    DocumentStore,
    PreconditionFailed,
)

ORDERS_COLLECTION = "orders"


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' is required and must be a non-empty string.", field)
    return value


def _require_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise ValidationError(f"'{field}' must be a finite number.", field)
    return value


def validate_draft(draft: OrderDraft) -> None:
    """Raise ValidationError naming the first field that fails."""
    buyer_id = _require_text(draft.buyer_id, "buyerId")
    seller_id = _require_text(draft.seller_id, "sellerId")
    _require_text(draft.listing_id, "listingId")
    _require_text(draft.category, "category")
    if _require_number(draft.price, "price") < 0:
        raise ValidationError("'price' must not be negative.", "price")
    if _require_number(draft.quantity, "quantity") <= 0:
        raise ValidationError("'quantity' must be greater than zero.", "quantity")
    if draft.total_price is not None and _require_number(draft.total_price, "totalPrice") < 0:
        raise ValidationError("'totalPrice' must not be negative.", "totalPrice")
    if buyer_id == seller_id:
        raise ValidationError("'buyerId' and 'sellerId' must differ.", "sellerId")
    if draft.currency is not None:
        _require_text(draft.currency, "currency")


def _from_document(doc: Document) -> Order:
    d = doc.data
    return Order(
        id=doc.id,
        buyer_id=d["buyerId"],
        seller_id=d["sellerId"],
        listing_id=d["listingId"],
        category=d["category"],
        price=d["price"],
        quantity=d["quantity"],
        total_price=d["totalPrice"],
        currency=d["currency"],
        status=OrderStatus(d["status"]),
        created_at=from_iso(d["createdAt"]),
        updated_at=from_iso(d["updatedAt"]),
        listing_name=d.get("listingName"),
    )


class OrderRepository:
    def __init__(self, store: DocumentStore, default_currency: str = "USD"):
        self.store = store
        self.default_currency = default_currency

    def create(self, draft: OrderDraft) -> Order:
        """Validate and persist a new order in ``pending_payment``."""
        validate_draft(draft)
        total_price = draft.total_price
        if total_price is None:
            total_price = draft.price * draft.quantity
        data: dict[str, Any] = {
            "buyerId": draft.buyer_id,
            "sellerId": draft.seller_id,
            "listingId": draft.listing_id,
            "category": draft.category,
            "price": draft.price,
            "quantity": draft.quantity,
            "totalPrice": total_price,
            "currency": draft.currency or self.default_currency,
            "status": OrderStatus.PENDING_PAYMENT.value,
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        }
        if draft.listing_name is not None:
            data["listingName"] = draft.listing_name
        doc = self.store.add(ORDERS_COLLECTION, data)
        return _from_document(doc)

    def get_by_id(self, order_id: OrderId) -> Order:
        doc = self.store.get(ORDERS_COLLECTION, order_id)
        if doc is None:
            raise NotFoundError(order_id)
        return _from_document(doc)

    def list_by_participant(
        self,
        identity_id: IdentityId,
        role: ActorRole | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        """Orders where identity is buyer or seller, newest first, each once.

        ``role`` narrows to purchases (BUYER) or sales (SELLER).
        """
        fields = {
            None: ("buyerId", "sellerId"),
            ActorRole.BUYER: ("buyerId",),
            ActorRole.SELLER: ("sellerId",),
        }[role]

        by_id: dict[str, Order] = {}
        for field in fields:
            for doc in self.store.query(ORDERS_COLLECTION, field, identity_id):
                by_id[doc.id] = _from_document(doc)

        orders = sorted(by_id.values(), key=lambda o: (o.created_at, o.id), reverse=True)
        if limit is not None:
            orders = orders[:limit]
        return orders

    def update_status(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        expected_status: OrderStatus | None = None,
    ) -> Order:
        """Overwrite status and refresh updatedAt.

        With ``expected_status`` the write is conditional on the stored
        status being unchanged; a mismatch raises ConflictError.
        """
        where = None
        if expected_status is not None:
            where = ("status", expected_status.value)
        try:
            doc = self.store.update(
                ORDERS_COLLECTION,
                order_id,
                {"status": new_status.value, "updatedAt": SERVER_TIMESTAMP},
                where=where,
            )
        except DocumentNotFound:
            raise NotFoundError(order_id) from None
        except PreconditionFailed as e:
            raise ConflictError(order_id, e.expected, e.actual) from None
        return _from_document(doc)
