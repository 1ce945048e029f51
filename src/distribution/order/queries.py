"""Read helpers for orders."""

from protean.utils.globals import current_domain

from distribution.order.order import Order


def get_order(order_id: str) -> Order:
    """Fetch an order, raising ObjectNotFoundError when it does not exist."""
    return current_domain.repository_for(Order).get(order_id)


def list_orders(shop_id: str | None = None) -> list[Order]:
    """All orders, newest first, optionally limited to one shop."""
    dao = current_domain.repository_for(Order)._dao
    if shop_id:
        orders = dao.query.filter(shop_id=shop_id).all().items
    else:
        orders = dao.query.all().items
    return sorted(orders, key=lambda o: o.created_at, reverse=True)
