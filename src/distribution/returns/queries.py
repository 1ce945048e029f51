"""Read helpers for return orders."""

from protean.utils.globals import current_domain

from distribution.returns.return_order import ReturnOrder


def get_return_order(return_order_id: str) -> ReturnOrder:
    return current_domain.repository_for(ReturnOrder).get(return_order_id)


def returns_for_order(order_id: str) -> list[ReturnOrder]:
    dao = current_domain.repository_for(ReturnOrder)._dao
    return dao.query.filter(linked_order_id=order_id).all().items


def list_return_orders(linked_order_id: str | None = None) -> list[ReturnOrder]:
    """All return orders, newest first, optionally for one order."""
    if linked_order_id:
        return_orders = returns_for_order(linked_order_id)
    else:
        return_orders = current_domain.repository_for(ReturnOrder)._dao.query.all().items
    return sorted(return_orders, key=lambda r: r.created_at, reverse=True)


def returned_so_far(order_id: str) -> dict[tuple[str, str], int]:
    """Quantities already returned against an order, keyed by (SKU code, unit type)."""
    totals: dict[tuple[str, str], int] = {}
    for return_order in returns_for_order(order_id):
        for key, quantity in return_order.returned_quantities().items():
            totals[key] = totals.get(key, 0) + quantity
    return totals
