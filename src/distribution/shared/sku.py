"""SKU snapshot value object and the unit types a SKU is sold in."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text

from distribution.domain import distribution


class UnitType(Enum):
    PACKET = "packet"
    BOX = "box"


@distribution.value_object
class SkuSnapshot:
    """Catalogue data for a SKU, copied onto a line item when it is recorded.

    The copy is what prices the line. Later catalogue price changes never
    reach orders or returns that were already recorded.
    """

    code: String(required=True, max_length=50)
    name: String(required=True, max_length=255)
    description: Text()
    packet_price: Float(required=True, min_value=0.0)
    box_price: Float(required=True, min_value=0.0)

    @invariant.post
    def code_must_not_be_blank(self):
        if not self.code.strip():
            raise ValidationError({"code": ["SKU code must not be blank"]})

    def price_for(self, unit_type: str) -> float:
        """Unit price for one packet or one box."""
        if UnitType(unit_type) == UnitType.BOX:
            return self.box_price
        return self.packet_price
