"""Order aggregate (CQRS) — a shop's purchase recorded by the order ledger.

An order is priced once, when it is placed: each line carries a snapshot of
the SKU it was sold at, and the totals are computed from those snapshots.
After placement an order only changes through an administrative revision
(full replacement of its lines), a discount, or deletion.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from distribution.domain import distribution
from distribution.order.events import DiscountApplied, OrderPlaced, OrderRevised
from distribution.shared.pricing import discount_for, parse_lines, total_of
from distribution.shared.sku import SkuSnapshot, UnitType


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@distribution.entity(part_of="Order")
class OrderItem:
    """A priced line: a SKU snapshot, how many, and whether packets or boxes."""

    sku = ValueObject(SkuSnapshot)
    quantity = Integer(required=True, min_value=1)
    unit_type = String(max_length=10, choices=UnitType, default=UnitType.PACKET.value)
    line_amount = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@distribution.aggregate
class Order:
    shop_id = Identifier(required=True)
    employee_id = Identifier()
    items = HasMany(OrderItem)
    discount_code = String(max_length=50)
    total_amount = Float(default=0.0)
    discount_amount = Float(default=0.0)
    final_amount = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        shop_id: str,
        items_data: list[dict],
        discount_code: str | None = None,
        employee_id: str | None = None,
    ):
        """Price and record a new order for a shop."""
        if not shop_id:
            raise ValidationError({"shop_id": ["Shop is required"]})
        lines = parse_lines(items_data)

        now = datetime.now(UTC)
        order = cls(
            shop_id=shop_id,
            employee_id=employee_id,
            discount_code=discount_code or None,
            created_at=now,
            updated_at=now,
        )
        order._replace_lines(lines, discount_code)
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                shop_id=shop_id,
                employee_id=employee_id,
                item_count=len(lines),
                discount_code=order.discount_code,
                total_amount=order.total_amount,
                discount_amount=order.discount_amount,
                final_amount=order.final_amount,
                placed_at=now,
            )
        )
        return order

    def _replace_lines(self, lines: list[dict], discount_code: str | None) -> None:
        for item in list(self.items or []):
            self.remove_items(item)
        for line in lines:
            self.add_items(OrderItem(**line))

        self.total_amount = total_of(lines)
        self.discount_amount = discount_for(self.total_amount, discount_code)
        self.final_amount = self.total_amount - self.discount_amount

    # -------------------------------------------------------------------
    # Administrative changes
    # -------------------------------------------------------------------
    def revise(self, shop_id: str, items_data: list[dict], discount_code: str | None = None) -> None:
        """Replace the order's lines and recompute its totals."""
        if not shop_id:
            raise ValidationError({"shop_id": ["Shop is required"]})
        lines = parse_lines(items_data)

        now = datetime.now(UTC)
        self.shop_id = shop_id
        self.discount_code = discount_code or None
        self._replace_lines(lines, discount_code)
        self.updated_at = now
        self.raise_(
            OrderRevised(
                order_id=str(self.id),
                shop_id=shop_id,
                item_count=len(lines),
                total_amount=self.total_amount,
                discount_amount=self.discount_amount,
                final_amount=self.final_amount,
                revised_at=now,
            )
        )

    def apply_discount(self, discount_code: str) -> None:
        """Apply a discount code to an already placed order."""
        if not discount_code:
            raise ValidationError({"discount_code": ["Discount code is required"]})

        now = datetime.now(UTC)
        self.discount_code = discount_code
        self.discount_amount = discount_for(self.total_amount, discount_code)
        self.final_amount = self.total_amount - self.discount_amount
        self.updated_at = now
        self.raise_(
            DiscountApplied(
                order_id=str(self.id),
                discount_code=discount_code,
                discount_amount=self.discount_amount,
                final_amount=self.final_amount,
                applied_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def ordered_quantities(self) -> dict[tuple[str, str], int]:
        """Quantity ordered per (SKU code, unit type)."""
        quantities: dict[tuple[str, str], int] = {}
        for item in self.items or []:
            key = (item.sku.code, item.unit_type)
            quantities[key] = quantities.get(key, 0) + item.quantity
        return quantities
