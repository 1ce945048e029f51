"""Read helpers for deliveries.

Lookups go straight to the repository so a read always reflects the last
committed state of the delivery.
"""

from datetime import date

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from distribution.delivery.delivery import Delivery, DeliveryStatus

DELIVERY_VIEWS = ("all", "active", "cancelled", "delayed")


def get_delivery(delivery_id: str) -> Delivery:
    """Fetch a delivery, raising ObjectNotFoundError when it does not exist."""
    return current_domain.repository_for(Delivery).get(delivery_id)


def delivery_for_order(order_id: str) -> Delivery | None:
    results = current_domain.repository_for(Delivery)._dao.query.filter(order_id=str(order_id)).all()
    if not results or not results.items:
        return None
    return results.first


def tracking_number_in_use(tracking_number: str) -> bool:
    results = current_domain.repository_for(Delivery)._dao.query.filter(tracking_number=tracking_number).all()
    return bool(results and results.items)


def list_deliveries(view: str = "all", today: date | None = None) -> list[Delivery]:
    """Deliveries newest first, narrowed to one of ``DELIVERY_VIEWS``.

    ``active`` is everything not cancelled (delivered ones included),
    ``delayed`` is every open delivery past its estimated date.
    """
    if view not in DELIVERY_VIEWS:
        raise ValidationError({"view": [f"Unknown view: {view}. Use one of {', '.join(DELIVERY_VIEWS)}"]})

    deliveries = current_domain.repository_for(Delivery)._dao.query.all().items
    if view == "active":
        deliveries = [d for d in deliveries if d.status != DeliveryStatus.CANCELLED.value]
    elif view == "cancelled":
        deliveries = [d for d in deliveries if d.status == DeliveryStatus.CANCELLED.value]
    elif view == "delayed":
        deliveries = [d for d in deliveries if d.is_delayed(today)]
    return sorted(deliveries, key=lambda d: d.created_at, reverse=True)
