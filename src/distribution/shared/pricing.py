"""Line pricing and discount rules shared by orders and return orders.

A line costs quantity × unit price, where the unit price is the SKU's box
price for box lines and its packet price otherwise. Any non-empty discount
code takes a flat 10% off the total, rounded half up to a whole amount.
Codes are not checked against a registry.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

from distribution.shared.sku import SkuSnapshot, UnitType

DISCOUNT_RATE = Decimal("0.10")

_UNIT_TYPES = [u.value for u in UnitType]


def line_amount(sku: SkuSnapshot, quantity: int, unit_type: str) -> float:
    return sku.price_for(unit_type) * quantity


def discount_for(total_amount: float, discount_code: str | None) -> float:
    if not discount_code:
        return 0.0
    discount = (Decimal(str(total_amount)) * DISCOUNT_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(discount)


def parse_lines(items_data: list[dict] | None) -> list[dict]:
    """Validate raw line item data and price each line.

    Returns one dict per line with ``sku`` (a SkuSnapshot), ``quantity``,
    ``unit_type`` and ``line_amount``, in input order.
    """
    if not items_data:
        raise ValidationError({"items": ["At least one line item is required"]})

    lines = []
    for position, item in enumerate(items_data, start=1):
        sku_data = item.get("sku")
        if not sku_data:
            raise ValidationError({"items": [f"Line {position}: SKU is required"]})
        sku = sku_data if isinstance(sku_data, SkuSnapshot) else SkuSnapshot(**sku_data)

        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": [f"Line {position}: quantity must be a positive whole number"]})

        unit_type = item.get("unit_type") or UnitType.PACKET.value
        if unit_type not in _UNIT_TYPES:
            raise ValidationError({"items": [f"Line {position}: unit type must be one of {', '.join(_UNIT_TYPES)}"]})

        lines.append(
            {
                "sku": sku,
                "quantity": quantity,
                "unit_type": unit_type,
                "line_amount": line_amount(sku, quantity, unit_type),
            }
        )
    return lines


def total_of(lines: list[dict]) -> float:
    return sum(line["line_amount"] for line in lines)
