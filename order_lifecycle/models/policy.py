"""Authorization models: actor roles, decision rules, transition records."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from order_lifecycle.models.common import IdentityId, OrderId, to_iso
from order_lifecycle.models.order import Order, OrderStatus


class ActorRole(StrEnum):
    ADMIN = "admin"
    BUYER = "buyer"
    SELLER = "seller"
    UNRELATED = "unrelated"


class DecisionRule(StrEnum):
    TERMINAL_STATUS = "TERMINAL_STATUS"
    ADMIN = "ADMIN"
    SELLER_EDGE = "SELLER_EDGE"
    BUYER_EDGE = "BUYER_EDGE"
    EARLY_CANCEL = "EARLY_CANCEL"
    UNRELATED_ACTOR = "UNRELATED_ACTOR"
    DEFAULT_DENY = "DEFAULT_DENY"


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    rule: DecisionRule
    detail: str


@dataclass(frozen=True)
class TransitionEvent:
    """Published to listeners after a status change has been persisted."""

    order: Order
    from_status: OrderStatus
    actor_id: IdentityId
    actor_role: ActorRole
    admin_override: bool

    @property
    def to_status(self) -> OrderStatus:
        return self.order.status


@dataclass(frozen=True)
class TransitionRecord:
    order_id: OrderId
    from_status: OrderStatus
    to_status: OrderStatus
    actor_id: IdentityId
    actor_role: ActorRole
    admin_override: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "orderId": self.order_id,
            "fromStatus": self.from_status.value,
            "toStatus": self.to_status.value,
            "actorId": self.actor_id,
            "actorRole": self.actor_role.value,
            "adminOverride": self.admin_override,
            "createdAt": to_iso(self.created_at),
        }
