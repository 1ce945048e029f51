"""Pydantic API schemas for the distribution console.

These are the external API contracts, separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class SkuPayload(BaseModel):
    code: str
    name: str
    description: str | None = None
    packet_price: float = Field(..., ge=0)
    box_price: float = Field(..., ge=0)


class LineItemRequest(BaseModel):
    sku: SkuPayload
    quantity: int
    unit_type: str = "packet"


class PlaceOrderRequest(BaseModel):
    shop_id: str
    items: list[LineItemRequest]
    discount_code: str | None = None


class ReviseOrderRequest(BaseModel):
    shop_id: str
    items: list[LineItemRequest]
    discount_code: str | None = None


class ApplyDiscountRequest(BaseModel):
    discount_code: str = Field(..., min_length=1, max_length=50)


class CreateReturnOrderRequest(BaseModel):
    shop_id: str
    linked_order_id: str
    items: list[LineItemRequest]
    reason_code: str
    notes: str | None = None


class CreateDeliveryRequest(BaseModel):
    order_id: str


class AdvanceStatusRequest(BaseModel):
    status: str
    notes: str | None = None


class CancelDeliveryRequest(BaseModel):
    reason: str = Field(..., max_length=500)
    notes: str | None = None


class UpdateLocationRequest(BaseModel):
    location: str = Field(..., min_length=1, max_length=200)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class OrderIdResponse(BaseModel):
    order_id: str


class ReturnOrderIdResponse(BaseModel):
    return_order_id: str


class DeliveryIdResponse(BaseModel):
    delivery_id: str


class LineItemResponse(BaseModel):
    sku_code: str
    sku_name: str
    quantity: int
    unit_type: str
    line_amount: float


class OrderResponse(BaseModel):
    order_id: str
    shop_id: str
    employee_id: str | None = None
    items: list[LineItemResponse]
    discount_code: str | None = None
    total_amount: float
    discount_amount: float
    final_amount: float
    created_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class ReturnOrderResponse(BaseModel):
    return_order_id: str
    shop_id: str
    linked_order_id: str
    items: list[LineItemResponse]
    reason_code: str
    notes: str | None = None
    employee_id: str | None = None
    total_amount: float
    created_at: str | None = None


class ReturnOrderListResponse(BaseModel):
    return_orders: list[ReturnOrderResponse]


class StatusUpdateResponse(BaseModel):
    status: str
    timestamp: str
    notes: str | None = None
    location: str | None = None
    updated_by: str | None = None


class DeliveryResponse(BaseModel):
    delivery_id: str
    order_id: str
    shop_id: str
    status: str
    current_location: str | None = None
    tracking_number: str
    estimated_delivery_date: str | None = None
    actual_delivery_date: str | None = None
    is_delayed: bool
    cancellation_reason: str | None = None
    status_history: list[StatusUpdateResponse]
    created_at: str | None = None
    updated_at: str | None = None


class DeliveryListResponse(BaseModel):
    deliveries: list[DeliveryResponse]


class TrackingEventResponse(BaseModel):
    status: str
    location: str | None = None
    notes: str | None = None
    occurred_at: str | None = None


class TrackingResponse(BaseModel):
    tracking_number: str
    delivery_id: str
    order_id: str
    current_status: str
    current_location: str | None = None
    estimated_delivery_date: str | None = None
    cancellation_reason: str | None = None
    events: list[TrackingEventResponse]
