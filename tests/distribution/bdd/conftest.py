"""Shared BDD fixtures and step definitions for deliveries."""

import pytest
from distribution.delivery.delivery import Delivery
from distribution.delivery.events import (
    DeliveryCancelled,
    DeliveryCreated,
    DeliveryRelocated,
    DeliveryStatusAdvanced,
)
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_EVENT_CLASSES = {
    "DeliveryCreated": DeliveryCreated,
    "DeliveryStatusAdvanced": DeliveryStatusAdvanced,
    "DeliveryCancelled": DeliveryCancelled,
    "DeliveryRelocated": DeliveryRelocated,
}

_PHASES = ["Transit", "ShipToOutlet", "OutForDelivery", "Delivered"]


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a new delivery", target_fixture="delivery")
def new_delivery():
    delivery = Delivery.create(order_id="ord-bdd-001", shop_id="shop-bdd")
    delivery._events.clear()
    return delivery


@given(parsers.cfparse('a delivery in "{status}" state'), target_fixture="delivery")
def delivery_in_state(status):
    delivery = Delivery.create(order_id="ord-bdd-002", shop_id="shop-bdd")
    if status == "Cancelled":
        delivery.cancel("Set up for scenario")
    else:
        for phase in _PHASES:
            if delivery.status == status:
                break
            delivery.advance(phase)
    delivery._events.clear()
    return delivery


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the delivery status is "{status}"'))
def delivery_status_is(delivery, status):
    assert delivery.status == status


@then(parsers.cfparse("the delivery has {count:d} history entries"))
def delivery_history_count(delivery, count):
    assert len(delivery.history) == count


@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} event is raised"))
def delivery_event_raised(delivery, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in delivery._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in delivery._events]}"
