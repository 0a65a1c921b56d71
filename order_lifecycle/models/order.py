"""Order entity, status enumeration and caller identity."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from order_lifecycle.models.common import IdentityId, OrderId, to_iso


class OrderStatus(StrEnum):
    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class CallerContext:
    """Verified identity supplied by the upstream identity provider."""

    uid: IdentityId
    is_admin: bool = False


@dataclass(frozen=True)
class OrderDraft:
    """Everything needed to create an order except server-assigned fields."""

    buyer_id: Any
    seller_id: Any
    listing_id: Any
    category: Any
    price: Any
    quantity: Any
    total_price: Any = None
    currency: Any = None
    listing_name: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderDraft":
        """Build a draft from a camelCase request payload.

        Missing keys become None and are rejected later by validation.
        """
        return cls(
            buyer_id=data.get("buyerId"),
            seller_id=data.get("sellerId"),
            listing_id=data.get("listingId"),
            category=data.get("category"),
            price=data.get("price"),
            quantity=data.get("quantity"),
            total_price=data.get("totalPrice"),
            currency=data.get("currency"),
            listing_name=data.get("listingName"),
        )


@dataclass(frozen=True)
class Order:
    id: OrderId
    buyer_id: IdentityId
    seller_id: IdentityId
    listing_id: str
    category: str
    price: float
    quantity: float
    total_price: float
    currency: str
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    listing_name: str | None = None

    def involves(self, identity_id: IdentityId) -> bool:
        return identity_id in (self.buyer_id, self.seller_id)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation returned to callers."""
        data: dict[str, Any] = {
            "id": self.id,
            "buyerId": self.buyer_id,
            "sellerId": self.seller_id,
            "listingId": self.listing_id,
            "category": self.category,
            "price": self.price,
            "quantity": self.quantity,
            "totalPrice": self.total_price,
            "currency": self.currency,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }
        if self.listing_name is not None:
            data["listingName"] = self.listing_name
        return data
