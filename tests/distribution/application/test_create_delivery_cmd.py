"""Application tests for delivery creation — one delivery per order."""

import json
from unittest.mock import MagicMock, patch

import pytest
from distribution.delivery.creation import CreateDeliveryFromOrder, open_delivery
from distribution.delivery.delivery import Delivery, StatusUpdate
from distribution.delivery.queries import delivery_for_order
from distribution.order.placement import PlaceOrder
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, TransactionError


def _place_order():
    items = json.dumps(
        [{"sku": {"code": "SKU-1", "name": "Item", "packet_price": 4.0, "box_price": 40.0}, "quantity": 1}]
    )
    return current_domain.process(PlaceOrder(shop_id="shop-001", items=items), asynchronous=False)


def _create_delivery(order_id):
    return current_domain.process(CreateDeliveryFromOrder(order_id=order_id), asynchronous=False)


class TestCreateDeliveryFromOrder:
    def test_returns_existing_delivery(self):
        order_id = _place_order()
        existing = delivery_for_order(order_id)
        assert _create_delivery(order_id) == str(existing.id)

    def test_repeated_creation_keeps_one_delivery(self):
        order_id = _place_order()
        _create_delivery(order_id)
        _create_delivery(order_id)
        deliveries = current_domain.repository_for(Delivery)._dao.query.filter(order_id=order_id).all().items
        assert len(deliveries) == 1

    def test_existing_delivery_is_unchanged(self):
        order_id = _place_order()
        before = delivery_for_order(order_id)
        _create_delivery(order_id)
        after = delivery_for_order(order_id)
        assert after.tracking_number == before.tracking_number
        assert len(after.history) == 1

    def test_unknown_order_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _create_delivery("no-such-order")

    def test_creates_delivery_when_none_exists(self):
        with patch("distribution.delivery.order_events.BOOTSTRAP_ATTEMPTS", 0):
            order_id = _place_order()
        assert delivery_for_order(order_id) is None

        delivery_id = _create_delivery(order_id)
        delivery = current_domain.repository_for(Delivery).get(delivery_id)
        assert delivery.order_id == order_id
        assert delivery.status == "Packaging"

    def test_tracking_number_not_reused(self):
        order_id = _place_order()
        taken = delivery_for_order(order_id).tracking_number

        with patch("distribution.delivery.order_events.BOOTSTRAP_ATTEMPTS", 0):
            other_order = _place_order()
        numbers = iter([taken, "TR-654321"])
        with patch("distribution.delivery.creation.generate_tracking_number", side_effect=lambda: next(numbers)):
            delivery_id = _create_delivery(other_order)

        assert current_domain.repository_for(Delivery).get(delivery_id).tracking_number == "TR-654321"


class TestConcurrentCreation:
    """A creation that loses the race for an order resolves to the winner's delivery."""

    def test_unique_violation_returns_existing_delivery(self):
        order_id = _place_order()
        existing = delivery_for_order(order_id)

        # Both creations see no delivery; only the second lookup finds the winner's
        with patch("distribution.delivery.creation.delivery_for_order", side_effect=[None, existing]):
            delivery_id = open_delivery(order_id)

        assert delivery_id == str(existing.id)
        deliveries = current_domain.repository_for(Delivery)._dao.query.filter(order_id=order_id).all().items
        assert len(deliveries) == 1

    def test_rejected_delivery_leaves_no_history_rows(self):
        order_id = _place_order()
        existing = delivery_for_order(order_id)

        with patch("distribution.delivery.creation.delivery_for_order", side_effect=[None, existing]):
            open_delivery(order_id)

        updates = current_domain.repository_for(StatusUpdate)._dao.query.all().items
        assert len(updates) == 1

    def test_commit_failure_returns_existing_delivery(self):
        order_id = _place_order()
        existing = delivery_for_order(order_id)

        with patch("distribution.delivery.creation.current_domain", new_callable=MagicMock) as mock_domain:
            mock_domain.process.side_effect = TransactionError(
                "Unit of Work commit failed: duplicate key value violates unique constraint"
            )
            assert open_delivery(order_id) == str(existing.id)

    def test_commit_failure_without_delivery_propagates(self):
        with patch("distribution.delivery.order_events.BOOTSTRAP_ATTEMPTS", 0):
            order_id = _place_order()

        with patch("distribution.delivery.creation.current_domain", new_callable=MagicMock) as mock_domain:
            mock_domain.process.side_effect = TransactionError("Unit of Work commit failed: connection reset")
            with pytest.raises(TransactionError):
                open_delivery(order_id)

    def test_unknown_order_still_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            open_delivery("no-such-order")
