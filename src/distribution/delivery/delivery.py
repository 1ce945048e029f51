"""Delivery aggregate (CQRS) — the consignment carrying an order to its shop.

A delivery is opened when an order is placed and then moves through a fixed
sequence of phases. It can be cancelled from any phase before it is
delivered. Delivered and Cancelled are final.

State Machine:
    PACKAGING → TRANSIT → SHIP_TO_OUTLET → OUT_FOR_DELIVERY → DELIVERED
    {PACKAGING, TRANSIT, SHIP_TO_OUTLET, OUT_FOR_DELIVERY} → CANCELLED

Every transition appends one entry to the status history, which also starts
with an entry for the initial Packaging phase. Entries are never changed or
removed.
"""

import random
from datetime import UTC, date, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from distribution.delivery.events import (
    DeliveryCancelled,
    DeliveryCreated,
    DeliveryRelocated,
    DeliveryStatusAdvanced,
)
from distribution.domain import distribution


# ---------------------------------------------------------------------------
# Enums and constants
# ---------------------------------------------------------------------------
class DeliveryStatus(Enum):
    PACKAGING = "Packaging"
    TRANSIT = "Transit"
    SHIP_TO_OUTLET = "ShipToOutlet"
    OUT_FOR_DELIVERY = "OutForDelivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_PHASE_SEQUENCE = [
    DeliveryStatus.PACKAGING,
    DeliveryStatus.TRANSIT,
    DeliveryStatus.SHIP_TO_OUTLET,
    DeliveryStatus.OUT_FOR_DELIVERY,
    DeliveryStatus.DELIVERED,
]

TERMINAL_STATUSES = {DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED}

ESTIMATED_TRANSIT_DAYS = 3
INITIAL_LOCATION = "Warehouse"
INITIAL_NOTE = "Order received and processing started"


class InvalidTransition(ValidationError):
    """A delivery was asked to skip a phase or to leave a final state."""


def generate_tracking_number() -> str:
    return f"TR-{random.randint(100000, 999999)}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@distribution.value_object(part_of="Delivery")
class CancellationReason:
    """Why, when and by whom a delivery was cancelled."""

    reason = String(required=True, max_length=500)
    cancelled_by = String(max_length=100)
    cancelled_at = DateTime(required=True)
    notes = Text()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@distribution.entity(part_of="Delivery")
class StatusUpdate:
    """One entry of the status history."""

    sequence = Integer(required=True, min_value=1)
    status = String(required=True, max_length=20, choices=DeliveryStatus)
    timestamp = DateTime(required=True)
    notes = Text()
    location = String(max_length=200)
    updated_by = String(max_length=100)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@distribution.aggregate
class Delivery:
    order_id = Identifier(required=True, unique=True)
    shop_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=DeliveryStatus,
        default=DeliveryStatus.PACKAGING.value,
    )
    current_location = String(max_length=200)
    estimated_delivery_date = DateTime()
    actual_delivery_date = DateTime()
    tracking_number = String(max_length=20, unique=True)
    status_history = HasMany(StatusUpdate)
    cancellation_reason = ValueObject(CancellationReason)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, order_id: str, shop_id: str, tracking_number: str | None = None):
        """Open a delivery for a placed order, starting in Packaging at the warehouse."""
        now = datetime.now(UTC)
        delivery = cls(
            order_id=order_id,
            shop_id=shop_id,
            status=DeliveryStatus.PACKAGING.value,
            current_location=INITIAL_LOCATION,
            estimated_delivery_date=now + timedelta(days=ESTIMATED_TRANSIT_DAYS),
            tracking_number=tracking_number or generate_tracking_number(),
            created_at=now,
            updated_at=now,
        )
        delivery._record(DeliveryStatus.PACKAGING, now, notes=INITIAL_NOTE)
        delivery.raise_(
            DeliveryCreated(
                delivery_id=str(delivery.id),
                order_id=str(order_id),
                shop_id=str(shop_id),
                tracking_number=delivery.tracking_number,
                status=delivery.status,
                current_location=delivery.current_location,
                estimated_delivery_date=delivery.estimated_delivery_date,
                created_at=now,
            )
        )
        return delivery

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def history(self) -> list[StatusUpdate]:
        """Status history in the order the entries were recorded."""
        return sorted(self.status_history or [], key=lambda update: update.sequence)

    @property
    def is_terminal(self) -> bool:
        return DeliveryStatus(self.status) in TERMINAL_STATUSES

    def next_status(self) -> DeliveryStatus | None:
        """The phase that follows the current one, or None once the delivery is final."""
        current = DeliveryStatus(self.status)
        if current in TERMINAL_STATUSES:
            return None
        return _PHASE_SEQUENCE[_PHASE_SEQUENCE.index(current) + 1]

    def is_delayed(self, today: date | None = None) -> bool:
        """True when an open delivery is past its estimated date.

        Only calendar dates are compared: a delivery due today is not late
        until tomorrow.
        """
        if not self.estimated_delivery_date or self.is_terminal:
            return False
        today = today or datetime.now(UTC).date()
        return today > self.estimated_delivery_date.date()

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: DeliveryStatus) -> None:
        current = DeliveryStatus(self.status)
        if current in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Delivery is already {current.value}"]})
        if target_status == DeliveryStatus.CANCELLED:
            return
        if target_status != self.next_status():
            raise InvalidTransition({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _record(
        self,
        status: DeliveryStatus,
        timestamp: datetime,
        notes: str | None = None,
        updated_by: str | None = None,
    ) -> None:
        self.add_status_history(
            StatusUpdate(
                sequence=len(self.status_history or []) + 1,
                status=status.value,
                timestamp=timestamp,
                notes=notes,
                location=self.current_location,
                updated_by=updated_by,
            )
        )

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def advance(self, new_status: str, notes: str | None = None, updated_by: str | None = None) -> None:
        """Move the delivery to ``new_status``.

        Advancing to Cancelled is a cancellation, and ``notes`` is then the
        cancellation reason.
        """
        try:
            target = DeliveryStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown delivery status: {new_status}"]}) from None

        if target == DeliveryStatus.CANCELLED:
            self.cancel(reason=notes, cancelled_by=updated_by)
            return

        self._assert_can_transition(target)
        now = datetime.now(UTC)
        previous = self.status
        self.status = target.value
        if target == DeliveryStatus.DELIVERED:
            self.actual_delivery_date = now
        self._record(target, now, notes=notes, updated_by=updated_by)
        self.updated_at = now
        self.raise_(
            DeliveryStatusAdvanced(
                delivery_id=str(self.id),
                order_id=str(self.order_id),
                tracking_number=self.tracking_number,
                from_status=previous,
                to_status=target.value,
                notes=notes,
                location=self.current_location,
                updated_by=updated_by,
                occurred_at=now,
            )
        )

    def cancel(self, reason: str | None, cancelled_by: str | None = None, notes: str | None = None) -> None:
        """Cancel the delivery from any phase before Delivered."""
        self._assert_can_transition(DeliveryStatus.CANCELLED)
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["A cancellation reason is required"]})

        now = datetime.now(UTC)
        previous = self.status
        self.status = DeliveryStatus.CANCELLED.value
        self.cancellation_reason = CancellationReason(
            reason=reason,
            cancelled_by=cancelled_by,
            cancelled_at=now,
            notes=notes,
        )
        self._record(DeliveryStatus.CANCELLED, now, notes=reason, updated_by=cancelled_by)
        self.updated_at = now
        self.raise_(
            DeliveryCancelled(
                delivery_id=str(self.id),
                order_id=str(self.order_id),
                tracking_number=self.tracking_number,
                from_status=previous,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    def relocate(self, location: str) -> None:
        """Record where the consignment currently is; later history entries carry it."""
        if self.is_terminal:
            raise ValidationError({"current_location": [f"Delivery is already {self.status}"]})
        if not location or not location.strip():
            raise ValidationError({"current_location": ["Location is required"]})

        now = datetime.now(UTC)
        self.current_location = location
        self.updated_at = now
        self.raise_(
            DeliveryRelocated(
                delivery_id=str(self.id),
                tracking_number=self.tracking_number,
                location=location,
                relocated_at=now,
            )
        )
