"""ReturnOrder aggregate (CQRS) — goods a shop sends back against an order.

A return order always points at the order it reverses. Its lines are priced
with the same unit-price rule as orders, and the quantity returned for any
SKU and unit type can never exceed what was ordered, counting everything
already returned against the same order.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from distribution.domain import distribution
from distribution.returns.events import ReturnOrderCreated
from distribution.shared.pricing import parse_lines, total_of
from distribution.shared.sku import SkuSnapshot, UnitType


class ReturnReason(Enum):
    DAMAGED = "DAMAGED"
    DEFECTIVE = "DEFECTIVE"
    WRONG_ITEM = "WRONG_ITEM"
    CUSTOMER_CHANGED_MIND = "CUSTOMER_CHANGED_MIND"
    EXPIRED = "EXPIRED"
    OTHER = "OTHER"


@distribution.entity(part_of="ReturnOrder")
class ReturnItem:
    sku = ValueObject(SkuSnapshot)
    quantity = Integer(required=True, min_value=1)
    unit_type = String(max_length=10, choices=UnitType, default=UnitType.PACKET.value)
    line_amount = Float(required=True, min_value=0.0)


@distribution.aggregate
class ReturnOrder:
    shop_id = Identifier(required=True)
    linked_order_id = Identifier(required=True)
    items = HasMany(ReturnItem)
    reason_code = String(required=True, max_length=30, choices=ReturnReason)
    notes = Text()
    employee_id = Identifier()
    total_amount = Float(default=0.0)
    created_at = DateTime()

    @classmethod
    def create(
        cls,
        shop_id: str,
        linked_order,
        items_data: list[dict],
        reason_code: str,
        notes: str | None = None,
        employee_id: str | None = None,
        already_returned: dict[tuple[str, str], int] | None = None,
    ):
        """Record a return against ``linked_order``.

        ``already_returned`` holds the quantities returned by earlier return
        orders for the same order, keyed by (SKU code, unit type).
        """
        if not shop_id:
            raise ValidationError({"shop_id": ["Shop is required"]})
        if str(linked_order.shop_id) != str(shop_id):
            raise ValidationError({"linked_order_id": ["Order was placed by a different shop"]})
        if reason_code not in [r.value for r in ReturnReason]:
            raise ValidationError({"reason_code": [f"Unknown return reason: {reason_code}"]})

        lines = parse_lines(items_data)
        _assert_returnable(lines, linked_order.ordered_quantities(), already_returned or {})

        now = datetime.now(UTC)
        return_order = cls(
            shop_id=shop_id,
            linked_order_id=str(linked_order.id),
            reason_code=reason_code,
            notes=notes,
            employee_id=employee_id,
            total_amount=total_of(lines),
            created_at=now,
        )
        for line in lines:
            return_order.add_items(ReturnItem(**line))

        return_order.raise_(
            ReturnOrderCreated(
                return_order_id=str(return_order.id),
                shop_id=shop_id,
                linked_order_id=str(linked_order.id),
                reason_code=reason_code,
                item_count=len(lines),
                total_amount=return_order.total_amount,
                created_at=now,
            )
        )
        return return_order

    def returned_quantities(self) -> dict[tuple[str, str], int]:
        quantities: dict[tuple[str, str], int] = {}
        for item in self.items or []:
            key = (item.sku.code, item.unit_type)
            quantities[key] = quantities.get(key, 0) + item.quantity
        return quantities


def _assert_returnable(
    lines: list[dict],
    ordered: dict[tuple[str, str], int],
    already_returned: dict[tuple[str, str], int],
) -> None:
    requested: dict[tuple[str, str], int] = {}
    for line in lines:
        key = (line["sku"].code, line["unit_type"])
        requested[key] = requested.get(key, 0) + line["quantity"]

    for (code, unit_type), quantity in requested.items():
        if (code, unit_type) not in ordered:
            raise ValidationError({"items": [f"{code} ({unit_type}) is not part of the linked order"]})
        remaining = ordered[(code, unit_type)] - already_returned.get((code, unit_type), 0)
        if quantity > remaining:
            raise ValidationError(
                {"items": [f"Cannot return {quantity} x {code} ({unit_type}); only {remaining} left to return"]}
            )
