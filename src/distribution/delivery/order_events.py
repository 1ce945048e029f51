"""Fulfillment coordination — opens a delivery whenever an order is placed.

The order is already stored when OrderPlaced is handled, so a failure here
never undoes the placement. Failures that can pass on their own are retried a
few times and then logged; the delivery can still be created later with
CreateDeliveryFromOrder, which returns the existing delivery if one was opened
in the meantime.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.mixins import handle

from distribution.delivery.creation import open_delivery
from distribution.domain import distribution
from distribution.order.events import OrderPlaced
from distribution.order.order import Order

logger = structlog.get_logger(__name__)

BOOTSTRAP_ATTEMPTS = 3


@distribution.event_handler(part_of=Order)
class OrderFulfillmentHandler:
    """Creates the delivery for each newly placed order."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        for attempt in range(1, BOOTSTRAP_ATTEMPTS + 1):
            try:
                delivery_id = open_delivery(str(event.order_id))
            except ValidationError as e:
                logger.error(
                    "Delivery could not be created for order",
                    order_id=str(event.order_id),
                    error=str(e.messages),
                )
                return
            except ObjectNotFoundError as e:
                logger.error(
                    "Order no longer exists, no delivery opened",
                    order_id=str(event.order_id),
                    error=str(e),
                )
                return
            except Exception as e:
                logger.warning(
                    "Delivery creation attempt failed",
                    order_id=str(event.order_id),
                    attempt=attempt,
                    error=str(e),
                )
                continue

            logger.info(
                "Delivery opened for placed order",
                order_id=str(event.order_id),
                delivery_id=delivery_id,
            )
            return

        logger.error(
            "Giving up on delivery creation for order",
            order_id=str(event.order_id),
            attempts=BOOTSTRAP_ATTEMPTS,
        )
