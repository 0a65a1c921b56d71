"""FastAPI binding of the order lifecycle service as callable RPC endpoints.

Caller identity comes from headers set by the upstream identity provider
(gateway); they are trusted as given.

Run with:
    uvicorn order_lifecycle.api:app
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from order_lifecycle.config.loader import load_config
from order_lifecycle.config.schema import ServiceConfig, StorageBackend
from order_lifecycle.errors import InternalError, OrderServiceError
from order_lifecycle.models.order import CallerContext, OrderDraft
from order_lifecycle.service.factory import build_service, open_store
from order_lifecycle.service.lifecycle import OrderLifecycleService
from order_lifecycle.storage.document_store import DocumentStore, MemoryDocumentStore
from order_lifecycle.storage.sqlite_store import SqliteDocumentStore

logger = logging.getLogger(__name__)

HTTP_STATUS = {
    "invalid-argument": 400,
    "unauthenticated": 401,
    "permission-denied": 403,
    "not-found": 404,
    "failed-precondition": 409,
    "internal": 500,
}

TRUE_VALUES = {"1", "true", "yes"}


# Fields are loosely typed so that the service reports invalid input in
# its own error shape rather than a framework 422.

class CreateOrderRequest(BaseModel):
    buyerId: Any = None
    sellerId: Any = None
    listingId: Any = None
    category: Any = None
    price: Any = None
    quantity: Any = None
    totalPrice: Any = None
    currency: Any = None
    listingName: Any = None


class OrderIdRequest(BaseModel):
    orderId: Any = None


class ListOrdersRequest(BaseModel):
    role: Any = None
    limit: Any = None


class UpdateStatusRequest(BaseModel):
    orderId: Any = None
    status: Any = None


def _error_response(code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS.get(code, 500),
        content={"error": {"status": code, "message": message}},
    )


def create_app(
    config: ServiceConfig | None = None, store: DocumentStore | None = None
) -> FastAPI:
    """Build the app. A given store is shared by all requests; otherwise
    each request opens its own SQLite connection."""
    config = config or ServiceConfig()
    if store is None and config.storage.backend == StorageBackend.MEMORY:
        store = MemoryDocumentStore()

    app = FastAPI(title="Order Lifecycle Service", version="0.1.0")
    if config.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.api.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @contextmanager
    def _service() -> Iterator[OrderLifecycleService]:
        if store is not None:
            yield build_service(config, store)
            return
        try:
            request_store = open_store(config)
        except Exception as e:
            logger.exception("Unable to open order store")
            raise InternalError("Unable to reach the order store.") from e
        try:
            yield build_service(config, request_store)
        finally:
            if isinstance(request_store, SqliteDocumentStore):
                request_store.close()

    def _caller(request: Request) -> CallerContext | None:
        uid = request.headers.get(config.api.caller_id_header, "").strip()
        if not uid:
            return None
        admin = request.headers.get(config.api.admin_header, "").strip().lower()
        return CallerContext(uid=uid, is_admin=admin in TRUE_VALUES)

    @app.exception_handler(OrderServiceError)
    async def _handle_service_error(request: Request, exc: OrderServiceError):
        return _error_response(exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _handle_bad_request(request: Request, exc: RequestValidationError):
        return _error_response("invalid-argument", "Malformed request body.")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/rpc/createOrder")
    def create_order(body: CreateOrderRequest, request: Request):
        with _service() as service:
            order = service.create_order(
                _caller(request), OrderDraft.from_dict(body.model_dump())
            )
        return {"orderId": order.id, "message": "Order created successfully."}

    @app.post("/rpc/getOrder")
    def get_order(body: OrderIdRequest, request: Request):
        with _service() as service:
            return service.get_order(_caller(request), body.orderId).to_dict()

    @app.post("/rpc/listMyOrders")
    def list_my_orders(request: Request, body: ListOrdersRequest | None = None):
        body = body or ListOrdersRequest()
        with _service() as service:
            orders = service.list_my_orders(
                _caller(request), role=body.role, limit=body.limit
            )
        return [o.to_dict() for o in orders]

    @app.post("/rpc/updateOrderStatus")
    def update_order_status(body: UpdateStatusRequest, request: Request):
        with _service() as service:
            order = service.update_order_status(
                _caller(request), body.orderId, body.status
            )
        return {"success": True, "message": f"Order status updated to {order.status}."}

    @app.post("/rpc/getOrderHistory")
    def get_order_history(body: OrderIdRequest, request: Request):
        with _service() as service:
            records = service.get_order_history(_caller(request), body.orderId)
        return [r.to_dict() for r in records]

    return app


app = create_app(load_config(os.environ.get("ORDER_LIFECYCLE_CONFIG")))
