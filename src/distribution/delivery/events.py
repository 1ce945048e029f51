"""Delivery domain events — immutable facts about a delivery's progress.

Every event carries the tracking number so tracking views can be keyed by it
without reading the aggregate back.
"""

from protean.fields import DateTime, Identifier, String, Text

from distribution.domain import distribution


@distribution.event(part_of="Delivery")
class DeliveryCreated:
    """A delivery was opened for a placed order."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    tracking_number = String(required=True)
    status = String(required=True)
    current_location = String()
    estimated_delivery_date = DateTime(required=True)
    created_at = DateTime(required=True)


@distribution.event(part_of="Delivery")
class DeliveryStatusAdvanced:
    """A delivery moved to the next phase."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    notes = Text()
    location = String()
    updated_by = String()
    occurred_at = DateTime(required=True)


@distribution.event(part_of="Delivery")
class DeliveryCancelled:
    """A delivery was cancelled before it reached the shop."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    from_status = String(required=True)
    reason = String(required=True, max_length=500)
    cancelled_by = String()
    cancelled_at = DateTime(required=True)


@distribution.event(part_of="Delivery")
class DeliveryRelocated:
    __version__ = 1

    delivery_id = Identifier(required=True)
    tracking_number = String(required=True)
    location = String(required=True)
    relocated_at = DateTime(required=True)
