"""Return order creation — command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from distribution.domain import distribution
from distribution.order.order import Order
from distribution.returns.queries import returned_so_far
from distribution.returns.return_order import ReturnOrder

logger = structlog.get_logger(__name__)


@distribution.command(part_of="ReturnOrder")
class CreateReturnOrder:
    """Return part or all of a previously placed order."""

    shop_id = Identifier(required=True)
    linked_order_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {sku, quantity, unit_type}
    reason_code = String(required=True, max_length=30)
    notes = Text()
    employee_id = Identifier()


@distribution.command_handler(part_of=ReturnOrder)
class CreateReturnOrderHandler:
    @handle(CreateReturnOrder)
    def create_return_order(self, command):
        linked_order = current_domain.repository_for(Order).get(command.linked_order_id)
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        return_order = ReturnOrder.create(
            shop_id=command.shop_id,
            linked_order=linked_order,
            items_data=items_data,
            reason_code=command.reason_code,
            notes=command.notes,
            employee_id=command.employee_id,
            already_returned=returned_so_far(str(linked_order.id)),
        )
        current_domain.repository_for(ReturnOrder).add(return_order)
        logger.info(
            "Return order created",
            return_order_id=str(return_order.id),
            linked_order_id=str(linked_order.id),
            reason_code=return_order.reason_code,
        )
        return str(return_order.id)
