"""Order lifecycle service: the callable surface over orders.

Each operation authenticates first, validates input second and only then
touches the document store. Store failures that are not part of the error
taxonomy are logged and reported as an opaque InternalError.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from order_lifecycle.errors import (
    InternalError,
    OrderServiceError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)
from order_lifecycle.models.order import CallerContext, Order, OrderDraft
from order_lifecycle.models.policy import ActorRole, TransitionEvent, TransitionRecord
from order_lifecycle.policy.roles import can_read, classify_role
from order_lifecycle.policy.transitions import (
    TransitionPolicy,
    is_admin_override,
    parse_status,
)
from order_lifecycle.service.listeners import TransitionListener
from order_lifecycle.storage.order_repo import OrderRepository
from order_lifecycle.storage.transition_repo import TransitionRepository

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except OrderServiceError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure while trying to %s", action)
        raise InternalError(f"Unable to {action}.") from e


def _require_caller(caller: CallerContext | None) -> CallerContext:
    if caller is None or not caller.uid:
        raise UnauthenticatedError()
    return caller


def _require_order_id(order_id: Any) -> str:
    if not isinstance(order_id, str) or not order_id.strip():
        raise ValidationError("Order ID is required.", "orderId")
    return order_id


class OrderLifecycleService:
    def __init__(
        self,
        orders: OrderRepository,
        transitions: TransitionRepository,
        policy: TransitionPolicy | None = None,
        listeners: Sequence[TransitionListener] = (),
        compare_and_set: bool = True,
        max_list_limit: int = 200,
    ):
        self.orders = orders
        self.transitions = transitions
        self.policy = policy or TransitionPolicy()
        self.listeners = list(listeners)
        self.compare_and_set = compare_and_set
        self.max_list_limit = max_list_limit

    def create_order(self, caller: CallerContext | None, draft: OrderDraft) -> Order:
        """Create an order in ``pending_payment``.

        Callers are trusted internal flows (offer acceptance); no role check
        beyond authentication is made here.
        """
        _require_caller(caller)
        with _store_errors("create order"):
            order = self.orders.create(draft)
        logger.info(
            "Created order %s: buyer=%s seller=%s listing=%s",
            order.id, order.buyer_id, order.seller_id, order.listing_id,
        )
        return order

    def get_order(self, caller: CallerContext | None, order_id: Any) -> Order:
        caller = _require_caller(caller)
        order_id = _require_order_id(order_id)
        with _store_errors("retrieve order"):
            order = self.orders.get_by_id(order_id)
        self._check_read(caller, order)
        return order

    def list_my_orders(
        self,
        caller: CallerContext | None,
        role: Any = None,
        limit: Any = None,
    ) -> list[Order]:
        """Orders the caller buys or sells, newest first.

        ``role`` ("buyer" or "seller") restricts to purchases or sales.
        """
        caller = _require_caller(caller)
        role = self._parse_list_role(role)
        if limit is not None:
            if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
                raise ValidationError("'limit' must be a positive integer.", "limit")
            if limit > self.max_list_limit:
                raise ValidationError(
                    f"'limit' must not exceed {self.max_list_limit}.", "limit"
                )
        with _store_errors("retrieve user orders"):
            return self.orders.list_by_participant(caller.uid, role=role, limit=limit)

    def update_order_status(
        self,
        caller: CallerContext | None,
        order_id: Any,
        requested_status: Any,
    ) -> Order:
        caller = _require_caller(caller)
        order_id = _require_order_id(order_id)
        if requested_status is None or requested_status == "":
            raise ValidationError("Status is required.", "status")
        status = parse_status(requested_status)

        with _store_errors("update order status"):
            order = self.orders.get_by_id(order_id)
            role = classify_role(caller, order)
            decision = self.policy.evaluate(role, order.status, status)
            if not decision.allowed:
                logger.warning(
                    "Denied %s -> %s on order %s for %s (%s): %s",
                    order.status, status, order_id, caller.uid, role,
                    decision.rule,
                )
                raise PermissionDeniedError(
                    f"Role '{role}' does not have permission to change the status "
                    f"from '{order.status}' to '{status}'.",
                    role=role.value,
                    current_status=order.status.value,
                    requested_status=status.value,
                )
            expected = order.status if self.compare_and_set else None
            updated = self.orders.update_status(order_id, status, expected_status=expected)

        logger.info(
            "Order %s status %s -> %s by %s (%s)",
            order_id, order.status, status, caller.uid, role,
        )
        self._publish(
            TransitionEvent(
                order=updated,
                from_status=order.status,
                actor_id=caller.uid,
                actor_role=role,
                admin_override=(
                    role is ActorRole.ADMIN and is_admin_override(order.status, status)
                ),
            )
        )
        return updated

    def get_order_history(
        self, caller: CallerContext | None, order_id: Any
    ) -> list[TransitionRecord]:
        """Status transitions of an order, oldest first. Same access as get_order."""
        caller = _require_caller(caller)
        order_id = _require_order_id(order_id)
        with _store_errors("retrieve order history"):
            order = self.orders.get_by_id(order_id)
            self._check_read(caller, order)
            return self.transitions.list_for_order(order_id)

    def _check_read(self, caller: CallerContext, order: Order) -> None:
        if not can_read(classify_role(caller, order)):
            raise PermissionDeniedError(
                "You do not have permission to view this order."
            )

    def _parse_list_role(self, role: Any) -> ActorRole | None:
        if role is None:
            return None
        if role in (ActorRole.BUYER, ActorRole.SELLER):
            return ActorRole(role)
        raise ValidationError("'role' must be 'buyer' or 'seller'.", "role")

    def _publish(self, event: TransitionEvent) -> None:
        # The status write has already happened; listeners cannot undo it
        for listener in self.listeners:
            try:
                listener.on_transition(event)
            except Exception:
                logger.exception(
                    "Transition listener %s failed for order %s",
                    type(listener).__name__, event.order.id,
                )
