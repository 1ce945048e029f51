"""Delivery cancellation — command and handler.

Cancels a delivery that has not yet been delivered.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from distribution.delivery.delivery import Delivery
from distribution.domain import distribution

logger = structlog.get_logger(__name__)


@distribution.command(part_of="Delivery")
class CancelDelivery:
    """Cancel a delivery before it reaches the shop."""

    delivery_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    cancelled_by = String(max_length=100)
    notes = Text()


@distribution.command_handler(part_of=Delivery)
class CancelDeliveryHandler:
    @handle(CancelDelivery)
    def cancel_delivery(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.cancel(command.reason, cancelled_by=command.cancelled_by, notes=command.notes)
        repo.add(delivery)
        logger.info(
            "Delivery cancelled",
            delivery_id=str(delivery.id),
            order_id=str(delivery.order_id),
        )
