"""Wiring: open the configured store and assemble the service around it."""

from order_lifecycle.config.schema import ServiceConfig, StorageBackend
from order_lifecycle.policy.transitions import TransitionPolicy
from order_lifecycle.service.lifecycle import OrderLifecycleService
from order_lifecycle.service.listeners import AuditTrailListener, TransitionListener
from order_lifecycle.storage.database import connect, run_migrations
from order_lifecycle.storage.document_store import DocumentStore, MemoryDocumentStore
from order_lifecycle.storage.order_repo import OrderRepository
from order_lifecycle.storage.sqlite_store import SqliteDocumentStore
from order_lifecycle.storage.transition_repo import TransitionRepository


def open_store(config: ServiceConfig, db_path: str | None = None) -> DocumentStore:
    if config.storage.backend == StorageBackend.MEMORY:
        return MemoryDocumentStore()
    conn = connect(db_path or config.storage.db_path, config.storage.busy_timeout)
    run_migrations(conn)
    return SqliteDocumentStore(conn)


def build_service(
    config: ServiceConfig,
    store: DocumentStore,
    extra_listeners: list[TransitionListener] | None = None,
) -> OrderLifecycleService:
    transitions = TransitionRepository(store)
    listeners: list[TransitionListener] = [AuditTrailListener(transitions)]
    listeners.extend(extra_listeners or [])
    return OrderLifecycleService(
        orders=OrderRepository(store, default_currency=config.orders.default_currency),
        transitions=transitions,
        policy=TransitionPolicy(
            allow_ship_before_payment=config.orders.allow_ship_before_payment
        ),
        listeners=listeners,
        compare_and_set=config.orders.compare_and_set,
        max_list_limit=config.orders.max_list_limit,
    )
