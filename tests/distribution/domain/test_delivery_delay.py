"""Tests for delay detection — calendar dates only, open deliveries only."""

from datetime import UTC, date, datetime

from distribution.delivery.delivery import Delivery


def _delivery_due(estimated):
    delivery = Delivery.create(order_id="ord-001", shop_id="shop-001")
    delivery.estimated_delivery_date = estimated
    return delivery


class TestIsDelayed:
    def test_not_delayed_on_the_due_date(self):
        delivery = _delivery_due(datetime(2024, 3, 10, 18, 30, tzinfo=UTC))
        assert delivery.is_delayed(today=date(2024, 3, 10)) is False

    def test_delayed_the_day_after(self):
        delivery = _delivery_due(datetime(2024, 3, 10, 0, 5, tzinfo=UTC))
        assert delivery.is_delayed(today=date(2024, 3, 11)) is True

    def test_not_delayed_before_due_date(self):
        delivery = _delivery_due(datetime(2024, 3, 10, tzinfo=UTC))
        assert delivery.is_delayed(today=date(2024, 3, 9)) is False

    def test_delivered_is_never_delayed(self):
        delivery = _delivery_due(datetime(2024, 3, 10, tzinfo=UTC))
        for phase in ["Transit", "ShipToOutlet", "OutForDelivery", "Delivered"]:
            delivery.advance(phase)
        assert delivery.is_delayed(today=date(2024, 4, 1)) is False

    def test_cancelled_is_never_delayed(self):
        delivery = _delivery_due(datetime(2024, 3, 10, tzinfo=UTC))
        delivery.cancel("Shop closed")
        assert delivery.is_delayed(today=date(2024, 4, 1)) is False

    def test_no_estimate_is_never_delayed(self):
        delivery = _delivery_due(None)
        assert delivery.is_delayed(today=date(2024, 4, 1)) is False

    def test_fresh_delivery_is_not_delayed_today(self):
        delivery = Delivery.create(order_id="ord-001", shop_id="shop-001")
        assert delivery.is_delayed() is False
