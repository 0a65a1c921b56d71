"""Repository for the order status transition audit trail."""

from order_lifecycle.models.common import OrderId, from_iso
from order_lifecycle.models.order import OrderStatus
from order_lifecycle.models.policy import ActorRole, TransitionEvent, TransitionRecord
from order_lifecycle.storage.document_store import SERVER_TIMESTAMP, DocumentStore

TRANSITIONS_COLLECTION = "order_transitions"


class TransitionRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def record(self, event: TransitionEvent) -> str:
        """Persist one transition. Returns the document id."""
        doc = self.store.add(
            TRANSITIONS_COLLECTION,
            {
                "orderId": event.order.id,
                "fromStatus": event.from_status.value,
                "toStatus": event.to_status.value,
                "actorId": event.actor_id,
                "actorRole": event.actor_role.value,
                "adminOverride": event.admin_override,
                "createdAt": SERVER_TIMESTAMP,
            },
        )
        return doc.id

    def list_for_order(self, order_id: OrderId) -> list[TransitionRecord]:
        """All transitions of one order, oldest first."""
        records = [
            TransitionRecord(
                order_id=d.data["orderId"],
                from_status=OrderStatus(d.data["fromStatus"]),
                to_status=OrderStatus(d.data["toStatus"]),
                actor_id=d.data["actorId"],
                actor_role=ActorRole(d.data["actorRole"]),
                admin_override=bool(d.data["adminOverride"]),
                created_at=from_iso(d.data["createdAt"]),
            )
            for d in self.store.query(TRANSITIONS_COLLECTION, "orderId", order_id)
        ]
        return sorted(records, key=lambda r: r.created_at)
