"""Order modification — administrative revision and discount commands.

Neither command touches the order's delivery.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from distribution.domain import distribution
from distribution.order.order import Order


@distribution.command(part_of="Order")
class ReviseOrder:
    """Replace an order's lines and recompute its totals."""

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {sku, quantity, unit_type}
    discount_code = String(max_length=50)


@distribution.command(part_of="Order")
class ApplyDiscount:
    order_id = Identifier(required=True)
    discount_code = String(required=True, max_length=50)


@distribution.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(ReviseOrder)
    def revise_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        order.revise(
            shop_id=command.shop_id,
            items_data=items_data,
            discount_code=command.discount_code,
        )
        repo.add(order)

    @handle(ApplyDiscount)
    def apply_discount(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.apply_discount(command.discount_code)
        repo.add(order)
