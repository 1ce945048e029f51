"""Delivery creation — command and handler.

A placed order gets exactly one delivery. Creating a delivery for an order
that already has one returns the existing delivery unchanged, so the command
is safe to repeat.
"""

import structlog
from protean import handle
from protean.exceptions import TransactionError, ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from distribution.delivery.delivery import Delivery, generate_tracking_number
from distribution.delivery.queries import delivery_for_order, tracking_number_in_use
from distribution.domain import distribution
from distribution.order.order import Order

logger = structlog.get_logger(__name__)


@distribution.command(part_of="Delivery")
class CreateDeliveryFromOrder:
    """Open the delivery for a placed order."""

    order_id = Identifier(required=True)


def _unused_tracking_number() -> str:
    tracking_number = generate_tracking_number()
    while tracking_number_in_use(tracking_number):
        tracking_number = generate_tracking_number()
    return tracking_number


def open_delivery(order_id: str) -> str:
    """Process CreateDeliveryFromOrder and return the id of the order's delivery.

    Two creations for the same order can both pass the existence check. The
    loser fails either on the unique ``order_id`` check at save time or on the
    database constraint at commit; its unit of work is rolled back, and the
    delivery stored by the winner is returned instead.
    """
    try:
        return current_domain.process(CreateDeliveryFromOrder(order_id=order_id), asynchronous=False)
    except (ValidationError, TransactionError) as exc:
        existing = delivery_for_order(order_id)
        if existing is None:
            raise
        logger.info(
            "Concurrent delivery creation resolved to existing delivery",
            order_id=str(order_id),
            delivery_id=str(existing.id),
            error=str(exc),
        )
        return str(existing.id)


@distribution.command_handler(part_of=Delivery)
class CreateDeliveryHandler:
    @handle(CreateDeliveryFromOrder)
    def create_delivery(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)

        existing = delivery_for_order(order.id)
        if existing is not None:
            logger.info(
                "Delivery already exists for order",
                order_id=str(order.id),
                delivery_id=str(existing.id),
            )
            return str(existing.id)

        delivery = Delivery.create(
            order_id=str(order.id),
            shop_id=str(order.shop_id),
            tracking_number=_unused_tracking_number(),
        )
        current_domain.repository_for(Delivery).add(delivery)

        logger.info(
            "Delivery created",
            delivery_id=str(delivery.id),
            order_id=str(order.id),
            tracking_number=delivery.tracking_number,
        )
        return str(delivery.id)
