"""Observers notified after an order status change has been persisted."""

import logging
from typing import Protocol

from order_lifecycle.models.policy import TransitionEvent
from order_lifecycle.storage.transition_repo import TransitionRepository

logger = logging.getLogger(__name__)


class TransitionListener(Protocol):
    def on_transition(self, event: TransitionEvent) -> None: ...


class AuditTrailListener:
    """Records every transition; admin overrides are also logged separately."""

    def __init__(self, transitions: TransitionRepository):
        self.transitions = transitions

    def on_transition(self, event: TransitionEvent) -> None:
        self.transitions.record(event)
        if event.admin_override:
            logger.warning(
                "Admin override on order %s by %s: %s -> %s",
                event.order.id,
                event.actor_id,
                event.from_status,
                event.to_status,
            )
