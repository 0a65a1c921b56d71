"""Tests for actor role derivation."""

from datetime import UTC, datetime

from order_lifecycle.models.order import CallerContext, Order, OrderStatus
from order_lifecycle.models.policy import ActorRole
from order_lifecycle.policy.roles import can_read, classify_role


def _order() -> Order:
    now = datetime.now(UTC)
    return Order(
        id="o1",
        buyer_id="B",
        seller_id="S",
        listing_id="l1",
        category="grains",
        price=1.0,
        quantity=1,
        total_price=1.0,
        currency="USD",
        status=OrderStatus.PENDING_PAYMENT,
        created_at=now,
        updated_at=now,
    )


class TestClassifyRole:
    def test_buyer(self):
        assert classify_role(CallerContext("B"), _order()) == ActorRole.BUYER

    def test_seller(self):
        assert classify_role(CallerContext("S"), _order()) == ActorRole.SELLER

    def test_unrelated(self):
        assert classify_role(CallerContext("Z"), _order()) == ActorRole.UNRELATED

    def test_admin_regardless_of_id(self):
        order = _order()
        for uid in ("B", "S", "Z"):
            assert classify_role(CallerContext(uid, is_admin=True), order) == ActorRole.ADMIN


class TestCanRead:
    def test_parties_and_admin_may_read(self):
        assert can_read(ActorRole.ADMIN)
        assert can_read(ActorRole.BUYER)
        assert can_read(ActorRole.SELLER)

    def test_unrelated_may_not_read(self):
        assert not can_read(ActorRole.UNRELATED)
