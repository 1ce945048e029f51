"""Order removal — command and handler.

Deleting an order leaves its delivery in place; the delivery keeps the
order id it was created for.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from distribution.domain import distribution
from distribution.order.order import Order

logger = structlog.get_logger(__name__)


@distribution.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


@distribution.command_handler(part_of=Order)
class DeleteOrderHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        repo._dao.delete(order)
        logger.info("Order deleted", order_id=str(command.order_id))
