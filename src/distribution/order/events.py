"""Order domain events — facts recorded by the order ledger."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from distribution.domain import distribution


@distribution.event(part_of="Order")
class OrderPlaced:
    """A shop's order was priced and recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    employee_id = Identifier()
    item_count = Integer(required=True)
    discount_code = String()
    total_amount = Float(required=True)
    discount_amount = Float(required=True)
    final_amount = Float(required=True)
    placed_at = DateTime(required=True)


@distribution.event(part_of="Order")
class OrderRevised:
    """An order's line items were replaced and its totals recomputed."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    discount_amount = Float(required=True)
    final_amount = Float(required=True)
    revised_at = DateTime(required=True)


@distribution.event(part_of="Order")
class DiscountApplied:
    __version__ = 1

    order_id = Identifier(required=True)
    discount_code = String(required=True)
    discount_amount = Float(required=True)
    final_amount = Float(required=True)
    applied_at = DateTime(required=True)
