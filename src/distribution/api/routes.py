"""FastAPI routes for the distribution console.

Thin adapters that translate HTTP requests into domain commands and read
aggregates back for GET requests. The acting employee, when known, comes
from the ``X-Employee-Id`` header.
"""

import json

from fastapi import APIRouter, Header, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from distribution.api.schemas import (
    AdvanceStatusRequest,
    ApplyDiscountRequest,
    CancelDeliveryRequest,
    CreateDeliveryRequest,
    CreateReturnOrderRequest,
    DeliveryIdResponse,
    DeliveryListResponse,
    DeliveryResponse,
    LineItemResponse,
    OrderIdResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    ReturnOrderIdResponse,
    ReturnOrderListResponse,
    ReturnOrderResponse,
    ReviseOrderRequest,
    StatusResponse,
    StatusUpdateResponse,
    TrackingEventResponse,
    TrackingResponse,
    UpdateLocationRequest,
)
from distribution.delivery.cancellation import CancelDelivery
from distribution.delivery.creation import open_delivery
from distribution.delivery.queries import delivery_for_order, get_delivery, list_deliveries
from distribution.delivery.tracking import AdvanceDeliveryStatus, UpdateDeliveryLocation
from distribution.order.modification import ApplyDiscount, ReviseOrder
from distribution.order.placement import PlaceOrder
from distribution.order.queries import get_order, list_orders
from distribution.order.removal import DeleteOrder
from distribution.projections.delivery_tracking import DeliveryTrackingView
from distribution.returns.creation import CreateReturnOrder
from distribution.returns.queries import get_return_order, list_return_orders


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _items_json(items) -> str:
    return json.dumps([item.model_dump() for item in items])


def _line_items(items) -> list[LineItemResponse]:
    return [
        LineItemResponse(
            sku_code=item.sku.code,
            sku_name=item.sku.name,
            quantity=item.quantity,
            unit_type=item.unit_type,
            line_amount=item.line_amount,
        )
        for item in items or []
    ]


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        shop_id=str(order.shop_id),
        employee_id=str(order.employee_id) if order.employee_id else None,
        items=_line_items(order.items),
        discount_code=order.discount_code,
        total_amount=order.total_amount,
        discount_amount=order.discount_amount,
        final_amount=order.final_amount,
        created_at=_iso(order.created_at),
        updated_at=_iso(order.updated_at),
    )


def _return_order_response(return_order) -> ReturnOrderResponse:
    return ReturnOrderResponse(
        return_order_id=str(return_order.id),
        shop_id=str(return_order.shop_id),
        linked_order_id=str(return_order.linked_order_id),
        items=_line_items(return_order.items),
        reason_code=return_order.reason_code,
        notes=return_order.notes,
        employee_id=str(return_order.employee_id) if return_order.employee_id else None,
        total_amount=return_order.total_amount,
        created_at=_iso(return_order.created_at),
    )


def _delivery_response(delivery) -> DeliveryResponse:
    return DeliveryResponse(
        delivery_id=str(delivery.id),
        order_id=str(delivery.order_id),
        shop_id=str(delivery.shop_id),
        status=delivery.status,
        current_location=delivery.current_location,
        tracking_number=delivery.tracking_number,
        estimated_delivery_date=_iso(delivery.estimated_delivery_date),
        actual_delivery_date=_iso(delivery.actual_delivery_date),
        is_delayed=delivery.is_delayed(),
        cancellation_reason=delivery.cancellation_reason.reason if delivery.cancellation_reason else None,
        status_history=[
            StatusUpdateResponse(
                status=update.status,
                timestamp=update.timestamp.isoformat(),
                notes=update.notes,
                location=update.location,
                updated_by=update.updated_by,
            )
            for update in delivery.history
        ],
        created_at=_iso(delivery.created_at),
        updated_at=_iso(delivery.updated_at),
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, x_employee_id: str | None = Header(default=None)) -> OrderIdResponse:
    """Place an order; its delivery is opened automatically."""
    command = PlaceOrder(
        shop_id=body.shop_id,
        items=_items_json(body.items),
        discount_code=body.discount_code,
        employee_id=x_employee_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("", response_model=OrderListResponse)
async def get_orders(shop_id: str | None = None) -> OrderListResponse:
    return OrderListResponse(orders=[_order_response(o) for o in list_orders(shop_id)])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order_by_id(order_id: str) -> OrderResponse:
    try:
        order = get_order(order_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found") from None
    return _order_response(order)


@order_router.put("/{order_id}", response_model=StatusResponse)
async def revise_order(order_id: str, body: ReviseOrderRequest) -> StatusResponse:
    """Replace an order's lines. The delivery is left as it is."""
    command = ReviseOrder(
        order_id=order_id,
        shop_id=body.shop_id,
        items=_items_json(body.items),
        discount_code=body.discount_code,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="order_revised")


@order_router.put("/{order_id}/discount", response_model=StatusResponse)
async def apply_discount(order_id: str, body: ApplyDiscountRequest) -> StatusResponse:
    command = ApplyDiscount(order_id=order_id, discount_code=body.discount_code)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="discount_applied")


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str) -> StatusResponse:
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse(status="order_deleted")


# ---------------------------------------------------------------------------
# Return Order Router
# ---------------------------------------------------------------------------
return_router = APIRouter(prefix="/returns", tags=["returns"])


@return_router.post("", status_code=201, response_model=ReturnOrderIdResponse)
async def create_return_order(
    body: CreateReturnOrderRequest, x_employee_id: str | None = Header(default=None)
) -> ReturnOrderIdResponse:
    """Return goods against a previously placed order."""
    command = CreateReturnOrder(
        shop_id=body.shop_id,
        linked_order_id=body.linked_order_id,
        items=_items_json(body.items),
        reason_code=body.reason_code,
        notes=body.notes,
        employee_id=x_employee_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return ReturnOrderIdResponse(return_order_id=result)


@return_router.get("", response_model=ReturnOrderListResponse)
async def get_return_orders(linked_order_id: str | None = None) -> ReturnOrderListResponse:
    return ReturnOrderListResponse(
        return_orders=[_return_order_response(r) for r in list_return_orders(linked_order_id)]
    )


@return_router.get("/{return_order_id}", response_model=ReturnOrderResponse)
async def get_return_order_by_id(return_order_id: str) -> ReturnOrderResponse:
    try:
        return_order = get_return_order(return_order_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Return order {return_order_id} not found") from None
    return _return_order_response(return_order)


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@delivery_router.post("", status_code=201, response_model=DeliveryIdResponse)
async def create_delivery(body: CreateDeliveryRequest) -> DeliveryIdResponse:
    """Open the delivery for an order, or return the one it already has."""
    try:
        result = open_delivery(body.order_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Order {body.order_id} not found") from None
    return DeliveryIdResponse(delivery_id=result)


@delivery_router.get("", response_model=DeliveryListResponse)
async def get_deliveries(view: str = "all") -> DeliveryListResponse:
    """List deliveries: all, active, cancelled or delayed."""
    return DeliveryListResponse(deliveries=[_delivery_response(d) for d in list_deliveries(view)])


@delivery_router.get("/by-order/{order_id}", response_model=DeliveryResponse)
async def get_delivery_for_order(order_id: str) -> DeliveryResponse:
    delivery = delivery_for_order(order_id)
    if delivery is None:
        raise HTTPException(status_code=404, detail=f"No delivery for order {order_id}")
    return _delivery_response(delivery)


@delivery_router.get("/tracking/{tracking_number}", response_model=TrackingResponse)
async def track_delivery(tracking_number: str) -> TrackingResponse:
    try:
        view = current_domain.repository_for(DeliveryTrackingView).get(tracking_number)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown tracking number {tracking_number}") from None

    events = json.loads(view.events_json) if view.events_json else []
    return TrackingResponse(
        tracking_number=view.tracking_number,
        delivery_id=str(view.delivery_id),
        order_id=str(view.order_id),
        current_status=view.current_status,
        current_location=view.current_location,
        estimated_delivery_date=_iso(view.estimated_delivery_date),
        cancellation_reason=view.cancellation_reason,
        events=[TrackingEventResponse(**event) for event in events],
    )


@delivery_router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery_by_id(delivery_id: str) -> DeliveryResponse:
    try:
        delivery = get_delivery(delivery_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Delivery {delivery_id} not found") from None
    return _delivery_response(delivery)


@delivery_router.put("/{delivery_id}/status", response_model=StatusResponse)
async def advance_status(
    delivery_id: str, body: AdvanceStatusRequest, x_employee_id: str | None = Header(default=None)
) -> StatusResponse:
    """Move a delivery to its next phase."""
    command = AdvanceDeliveryStatus(
        delivery_id=delivery_id,
        status=body.status,
        notes=body.notes,
        updated_by=x_employee_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="status_updated")


@delivery_router.put("/{delivery_id}/cancel", response_model=StatusResponse)
async def cancel_delivery(
    delivery_id: str, body: CancelDeliveryRequest, x_employee_id: str | None = Header(default=None)
) -> StatusResponse:
    command = CancelDelivery(
        delivery_id=delivery_id,
        reason=body.reason,
        cancelled_by=x_employee_id,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="delivery_cancelled")


@delivery_router.put("/{delivery_id}/location", response_model=StatusResponse)
async def update_location(delivery_id: str, body: UpdateLocationRequest) -> StatusResponse:
    command = UpdateDeliveryLocation(delivery_id=delivery_id, location=body.location)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="location_updated")
