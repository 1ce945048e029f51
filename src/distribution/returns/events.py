"""Return order domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from distribution.domain import distribution


@distribution.event(part_of="ReturnOrder")
class ReturnOrderCreated:
    """A shop returned part or all of a previously placed order."""

    __version__ = 1

    return_order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    linked_order_id = Identifier(required=True)
    reason_code = String(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    created_at = DateTime(required=True)
