"""Order placement — command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from distribution.domain import distribution
from distribution.order.order import Order

logger = structlog.get_logger(__name__)


@distribution.command(part_of="Order")
class PlaceOrder:
    """Record a new order for a shop."""

    shop_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {sku, quantity, unit_type}
    discount_code = String(max_length=50)
    employee_id = Identifier()


@distribution.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        order = Order.place(
            shop_id=command.shop_id,
            items_data=items_data,
            discount_code=command.discount_code,
            employee_id=command.employee_id,
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            shop_id=str(order.shop_id),
            final_amount=order.final_amount,
        )
        return str(order.id)
