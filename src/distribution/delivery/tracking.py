"""Delivery tracking — status advancement and location updates."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from distribution.delivery.delivery import Delivery
from distribution.domain import distribution

logger = structlog.get_logger(__name__)


@distribution.command(part_of="Delivery")
class AdvanceDeliveryStatus:
    """Move a delivery to its next phase (or to Cancelled, with notes as the reason)."""

    delivery_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    notes = Text()
    updated_by = String(max_length=100)


@distribution.command(part_of="Delivery")
class UpdateDeliveryLocation:
    delivery_id = Identifier(required=True)
    location = String(required=True, max_length=200)


@distribution.command_handler(part_of=Delivery)
class TrackingHandler:
    @handle(AdvanceDeliveryStatus)
    def advance_status(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        previous = delivery.status
        delivery.advance(command.status, notes=command.notes, updated_by=command.updated_by)
        repo.add(delivery)
        logger.info(
            "Delivery status advanced",
            delivery_id=str(delivery.id),
            from_status=previous,
            to_status=delivery.status,
        )

    @handle(UpdateDeliveryLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.relocate(command.location)
        repo.add(delivery)
