"""Application tests for order revision, discounts and deletion."""

import json

import pytest
from distribution.delivery.queries import delivery_for_order
from distribution.order.modification import ApplyDiscount, ReviseOrder
from distribution.order.order import Order
from distribution.order.placement import PlaceOrder
from distribution.order.queries import list_orders
from distribution.order.removal import DeleteOrder
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _sku(code="SKU-TEA-100"):
    return {"code": code, "name": f"Item {code}", "packet_price": 10.0, "box_price": 30.0}


def _items_json(quantity=5):
    return json.dumps([{"sku": _sku(), "quantity": quantity, "unit_type": "packet"}])


def _place_order(shop_id="shop-001"):
    return current_domain.process(PlaceOrder(shop_id=shop_id, items=_items_json()), asynchronous=False)


class TestReviseOrder:
    def test_recomputes_totals(self):
        order_id = _place_order()
        current_domain.process(
            ReviseOrder(order_id=order_id, shop_id="shop-001", items=_items_json(quantity=8), discount_code="X"),
            asynchronous=False,
        )
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == 80.0
        assert order.final_amount == 72.0
        assert len(order.items) == 1

    def test_leaves_delivery_untouched(self):
        order_id = _place_order()
        before = delivery_for_order(order_id)
        current_domain.process(
            ReviseOrder(order_id=order_id, shop_id="shop-001", items=_items_json(quantity=2)),
            asynchronous=False,
        )
        after = delivery_for_order(order_id)
        assert after.id == before.id
        assert len(after.history) == 1

    def test_invalid_revision_keeps_order(self):
        order_id = _place_order()
        with pytest.raises(ValidationError):
            current_domain.process(
                ReviseOrder(order_id=order_id, shop_id="shop-001", items=json.dumps([])),
                asynchronous=False,
            )
        assert current_domain.repository_for(Order).get(order_id).total_amount == 50.0

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                ReviseOrder(order_id="missing", shop_id="shop-001", items=_items_json()),
                asynchronous=False,
            )


class TestApplyDiscount:
    def test_applies_flat_discount(self):
        order_id = _place_order()
        current_domain.process(ApplyDiscount(order_id=order_id, discount_code="LOYAL"), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.discount_amount == 5.0
        assert order.final_amount == 45.0


class TestDeleteOrder:
    def test_removes_order(self):
        order_id = _place_order()
        current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Order).get(order_id)

    def test_delivery_survives_deletion(self):
        order_id = _place_order()
        current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
        assert delivery_for_order(order_id) is not None

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteOrder(order_id="missing"), asynchronous=False)


class TestListOrders:
    def test_filters_by_shop(self):
        _place_order(shop_id="shop-a")
        _place_order(shop_id="shop-b")
        _place_order(shop_id="shop-a")
        assert len(list_orders()) == 3
        assert {o.shop_id for o in list_orders("shop-a")} == {"shop-a"}
        assert len(list_orders("shop-a")) == 2

    def test_newest_first(self):
        first = _place_order()
        second = _place_order()
        assert [str(o.id) for o in list_orders()] == [second, first]
