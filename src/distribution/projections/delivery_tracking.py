"""Delivery tracking — shop-facing view looked up by tracking number."""

import json

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from distribution.delivery.delivery import Delivery
from distribution.delivery.events import (
    DeliveryCancelled,
    DeliveryCreated,
    DeliveryRelocated,
    DeliveryStatusAdvanced,
)
from distribution.domain import distribution


@distribution.projection
class DeliveryTrackingView:
    tracking_number = String(identifier=True, required=True, max_length=20)
    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    shop_id = Identifier()
    current_status = String(required=True)
    current_location = String()
    estimated_delivery_date = DateTime()
    events_json = Text()  # JSON list of status changes
    cancellation_reason = String(max_length=500)
    updated_at = DateTime()


def _append_event(view, status: str, location: str | None, notes: str | None, occurred_at) -> None:
    existing = json.loads(view.events_json) if view.events_json else []
    existing.append(
        {
            "status": status,
            "location": location,
            "notes": notes,
            "occurred_at": occurred_at.isoformat() if occurred_at else None,
        }
    )
    view.events_json = json.dumps(existing)


@distribution.projector(projector_for=DeliveryTrackingView, aggregates=[Delivery])
class DeliveryTrackingProjector:
    @on(DeliveryCreated)
    def on_delivery_created(self, event):
        view = DeliveryTrackingView(
            tracking_number=event.tracking_number,
            delivery_id=event.delivery_id,
            order_id=event.order_id,
            shop_id=event.shop_id,
            current_status=event.status,
            current_location=event.current_location,
            estimated_delivery_date=event.estimated_delivery_date,
            events_json=json.dumps([]),
            updated_at=event.created_at,
        )
        _append_event(view, event.status, event.current_location, None, event.created_at)
        current_domain.repository_for(DeliveryTrackingView).add(view)

    @on(DeliveryStatusAdvanced)
    def on_status_advanced(self, event):
        repo = current_domain.repository_for(DeliveryTrackingView)
        view = repo.get(event.tracking_number)
        view.current_status = event.to_status
        view.updated_at = event.occurred_at
        _append_event(view, event.to_status, event.location, event.notes, event.occurred_at)
        repo.add(view)

    @on(DeliveryCancelled)
    def on_delivery_cancelled(self, event):
        repo = current_domain.repository_for(DeliveryTrackingView)
        view = repo.get(event.tracking_number)
        view.current_status = "Cancelled"
        view.cancellation_reason = event.reason
        view.updated_at = event.cancelled_at
        _append_event(view, "Cancelled", view.current_location, event.reason, event.cancelled_at)
        repo.add(view)

    @on(DeliveryRelocated)
    def on_delivery_relocated(self, event):
        repo = current_domain.repository_for(DeliveryTrackingView)
        view = repo.get(event.tracking_number)
        view.current_location = event.location
        view.updated_at = event.relocated_at
        repo.add(view)
