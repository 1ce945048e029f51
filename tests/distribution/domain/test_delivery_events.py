"""Tests for Delivery domain events — each transition raises the right event."""

import pytest
from distribution.delivery.delivery import Delivery, InvalidTransition
from distribution.delivery.events import (
    DeliveryCancelled,
    DeliveryCreated,
    DeliveryRelocated,
    DeliveryStatusAdvanced,
)


def _make_delivery():
    return Delivery.create(order_id="ord-001", shop_id="shop-001", tracking_number="TR-424242")


class TestDeliveryCreatedEvent:
    def test_raises_event(self):
        delivery = _make_delivery()
        assert len(delivery._events) == 1
        assert isinstance(delivery._events[0], DeliveryCreated)

    def test_event_carries_tracking_number(self):
        event = _make_delivery()._events[0]
        assert event.tracking_number == "TR-424242"
        assert event.order_id == "ord-001"
        assert event.status == "Packaging"


class TestDeliveryStatusAdvancedEvent:
    def test_advance_raises_event(self):
        delivery = _make_delivery()
        delivery._events.clear()
        delivery.advance("Transit", notes="Loaded", updated_by="emp-1")
        event = delivery._events[0]
        assert isinstance(event, DeliveryStatusAdvanced)
        assert event.from_status == "Packaging"
        assert event.to_status == "Transit"
        assert event.notes == "Loaded"
        assert event.location == "Warehouse"


class TestDeliveryCancelledEvent:
    def test_cancel_raises_event(self):
        delivery = _make_delivery()
        delivery._events.clear()
        delivery.cancel("Shop closed", cancelled_by="emp-2")
        event = delivery._events[0]
        assert isinstance(event, DeliveryCancelled)
        assert event.reason == "Shop closed"
        assert event.from_status == "Packaging"

    def test_rejected_cancel_raises_nothing(self):
        delivery = _make_delivery()
        delivery.cancel("Shop closed")
        delivery._events.clear()
        with pytest.raises(InvalidTransition):
            delivery.cancel("Again")
        assert delivery._events == []


class TestDeliveryRelocatedEvent:
    def test_relocate_raises_event(self):
        delivery = _make_delivery()
        delivery._events.clear()
        delivery.relocate("Nagpur Hub")
        assert isinstance(delivery._events[0], DeliveryRelocated)
        assert delivery._events[0].location == "Nagpur Hub"
