"""Actor role derivation: who is the caller with respect to one order."""

from order_lifecycle.models.order import CallerContext, Order
from order_lifecycle.models.policy import ActorRole


def classify_role(caller: CallerContext, order: Order) -> ActorRole:
    if caller.is_admin:
        return ActorRole.ADMIN
    if caller.uid == order.buyer_id:
        return ActorRole.BUYER
    if caller.uid == order.seller_id:
        return ActorRole.SELLER
    return ActorRole.UNRELATED


def can_read(role: ActorRole) -> bool:
    return role is not ActorRole.UNRELATED
