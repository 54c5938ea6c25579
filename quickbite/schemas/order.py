from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import uuid

from pydantic import BaseModel, Field

from quickbite.models.order import OrderStatus, PaymentStatus


class OrderItemRequest(BaseModel):
    """Schema for a single item in the order request."""
    menu_item_id: uuid.UUID
    quantity: int


class OrderRequest(BaseModel):
    """
    Schema for the full order placement request body.
    Required-field checks live in the OrderBuilder so they surface as domain errors.
    """
    restaurant_id: Optional[uuid.UUID] = None
    items: List[OrderItemRequest] = Field(default_factory=list)
    delivery_address: str = ""
    payment_method: str = ""


class OrderStatusUpdate(BaseModel):
    """Schema for updating an order status. Unknown values are rejected by the service."""
    status: str


class OrderStatusResponse(BaseModel):
    """Response schema after a status change or cancellation."""
    order_id: uuid.UUID
    status: OrderStatus
    total_amount: Decimal
    message: str


class OrderItemDetail(BaseModel):
    """
    A line item inside the detailed order response.
    `price` is the snapshot taken at order time; name, image and veg flag are
    read from the menu item as it is now.
    """
    id: uuid.UUID
    order_id: uuid.UUID
    menu_item_id: uuid.UUID
    quantity: int
    price: Decimal
    created_at: datetime
    item_name: str
    item_image: str
    is_veg: bool


class OrderDetail(BaseModel):
    """Order header joined with restaurant name and line items."""
    id: uuid.UUID
    user_id: uuid.UUID
    restaurant_id: uuid.UUID
    restaurant_name: str
    status: OrderStatus
    subtotal: Decimal
    delivery_fee: Decimal
    total_amount: Decimal
    delivery_address: str
    payment_method: str
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemDetail]
