"""Status transition policy: pure decision, no I/O.

Rules in precedence order:
  1. terminal current status denies everyone, admin included
  2. admin may move a non-terminal order to any status
  3. seller: pending_payment -> paid, pending_payment|paid -> shipped
  4. buyer: shipped -> delivered, delivered -> completed
  5. buyer or seller: pending_payment -> cancelled
  6. unrelated callers are denied
  7. anything else is denied
"""

from typing import Any

from order_lifecycle.errors import InvalidStatusError
from order_lifecycle.models.order import OrderStatus
from order_lifecycle.models.policy import ActorRole, DecisionRule, TransitionDecision

S = OrderStatus

SELLER_EDGES = frozenset({
    (S.PENDING_PAYMENT, S.PAID),
    (S.PENDING_PAYMENT, S.SHIPPED),
    (S.PAID, S.SHIPPED),
})

BUYER_EDGES = frozenset({
    (S.SHIPPED, S.DELIVERED),
    (S.DELIVERED, S.COMPLETED),
})

CANCEL_EDGE = (S.PENDING_PAYMENT, S.CANCELLED)

PARTICIPANT_EDGES = SELLER_EDGES | BUYER_EDGES | {CANCEL_EDGE}


def parse_status(value: Any) -> OrderStatus:
    """Coerce a requested status, raising InvalidStatusError if unknown."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatusError(value) from None


def is_admin_override(current: OrderStatus, requested: OrderStatus) -> bool:
    """True when no buyer or seller could have made this move."""
    return (current, requested) not in PARTICIPANT_EDGES


class TransitionPolicy:
    def __init__(self, allow_ship_before_payment: bool = True):
        self.allow_ship_before_payment = allow_ship_before_payment

    def evaluate(
        self, role: ActorRole, current: Any, requested: Any
    ) -> TransitionDecision:
        requested = parse_status(requested)
        current = OrderStatus(current)
        role = ActorRole(role)
        edge = f"{current} -> {requested}"

        if current.is_terminal:
            return TransitionDecision(
                False, DecisionRule.TERMINAL_STATUS, f"'{current}' is terminal"
            )

        if role is ActorRole.ADMIN:
            return TransitionDecision(True, DecisionRule.ADMIN, edge)

        if role is ActorRole.SELLER and (current, requested) in self._seller_edges():
            return TransitionDecision(True, DecisionRule.SELLER_EDGE, edge)

        if role is ActorRole.BUYER and (current, requested) in BUYER_EDGES:
            return TransitionDecision(True, DecisionRule.BUYER_EDGE, edge)

        if role in (ActorRole.BUYER, ActorRole.SELLER) and (current, requested) == CANCEL_EDGE:
            return TransitionDecision(True, DecisionRule.EARLY_CANCEL, edge)

        if role is ActorRole.UNRELATED:
            return TransitionDecision(
                False, DecisionRule.UNRELATED_ACTOR, "caller is not a party to the order"
            )

        return TransitionDecision(
            False, DecisionRule.DEFAULT_DENY, f"{role} may not move {edge}"
        )

    def can_transition(self, role: ActorRole, current: Any, requested: Any) -> bool:
        return self.evaluate(role, current, requested).allowed

    def _seller_edges(self) -> frozenset:
        if self.allow_ship_before_payment:
            return SELLER_EDGES
        return SELLER_EDGES - {(S.PENDING_PAYMENT, S.SHIPPED)}


_DEFAULT_POLICY = TransitionPolicy()


def can_transition(role: ActorRole, current: Any, requested: Any) -> bool:
    """Decision under the default rules (ship-before-payment allowed)."""
    return _DEFAULT_POLICY.can_transition(role, current, requested)
