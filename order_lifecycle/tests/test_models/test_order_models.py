"""Tests for order entity helpers and status enumeration."""

from datetime import UTC, datetime

from order_lifecycle.models.order import Order, OrderDraft, OrderStatus


def _make_order(**overrides) -> Order:
    fields = dict(
        id="o1",
        buyer_id="B",
        seller_id="S",
        listing_id="l1",
        category="grains",
        price=10.0,
        quantity=2,
        total_price=20.0,
        currency="USD",
        status=OrderStatus.PENDING_PAYMENT,
        created_at=datetime(2026, 3, 1, 8, 0, tzinfo=UTC),
        updated_at=datetime(2026, 3, 1, 8, 0, tzinfo=UTC),
    )
    fields.update(overrides)
    return Order(**fields)


class TestOrderStatus:
    def test_terminal_statuses(self):
        assert OrderStatus.COMPLETED.is_terminal
        assert OrderStatus.CANCELLED.is_terminal

    def test_non_terminal_statuses(self):
        for s in ("pending_payment", "paid", "shipped", "delivered"):
            assert OrderStatus(s).is_terminal is False


class TestOrder:
    def test_to_dict_uses_camel_case(self):
        d = _make_order().to_dict()
        assert d["buyerId"] == "B"
        assert d["sellerId"] == "S"
        assert d["status"] == "pending_payment"
        assert d["createdAt"] == "2026-03-01T08:00:00.000000+00:00"
        assert "listingName" not in d

    def test_listing_name_included_when_set(self):
        d = _make_order(listing_name="Maize, 50kg").to_dict()
        assert d["listingName"] == "Maize, 50kg"

    def test_involves(self):
        order = _make_order()
        assert order.involves("B")
        assert order.involves("S")
        assert not order.involves("X")


class TestOrderDraft:
    def test_from_dict(self):
        draft = OrderDraft.from_dict(
            {
                "buyerId": "B",
                "sellerId": "S",
                "listingId": "l1",
                "category": "grains",
                "price": 3,
                "quantity": 7,
            }
        )
        assert draft.buyer_id == "B"
        assert draft.quantity == 7
        assert draft.total_price is None
        assert draft.currency is None

    def test_from_dict_missing_keys_are_none(self):
        draft = OrderDraft.from_dict({})
        assert draft.buyer_id is None
        assert draft.price is None
