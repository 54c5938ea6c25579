import logging
from fastapi import APIRouter, Depends, status
from uuid import UUID

from quickbite.api.deps import (
    Identity,
    get_current_identity,
    get_order_builder,
    get_order_lifecycle,
    get_order_query_service,
    require_restaurant_owner,
    run_with_deadline,
)
from quickbite.core.errors import DomainError
from quickbite.schemas.order import OrderRequest, OrderStatusResponse, OrderStatusUpdate
from quickbite.schemas.response import SuccessResponse
from quickbite.services.order_builder import OrderBuilder
from quickbite.services.order_lifecycle import OrderLifecycle
from quickbite.services.order_query import OrderQueryService

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(
    request_data: OrderRequest,
    identity: Identity = Depends(get_current_identity),
    builder: OrderBuilder = Depends(get_order_builder),
):
    """Places a new order for the calling customer."""
    log.info("CreateOrder: user %s ordering from restaurant %s", identity.user_id, request_data.restaurant_id)
    try:
        order = await run_with_deadline(builder.place_order(request_data, identity.user_id))
    except DomainError as e:
        log.warning("CreateOrder rejected for user %s: %s", identity.user_id, e)
        raise
    log.info("CreateOrder: order %s created successfully", order.id)
    return SuccessResponse(data=order.model_dump(mode="json"))


@router.get("/my/list", response_model=SuccessResponse)
async def list_my_orders_endpoint(
    identity: Identity = Depends(get_current_identity),
    queries: OrderQueryService = Depends(get_order_query_service),
):
    """Order history of the calling customer, newest first."""
    orders = await run_with_deadline(queries.list_customer_orders(identity.user_id))
    return SuccessResponse(data=[o.model_dump(mode="json") for o in orders])


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(
    order_id: UUID,
    identity: Identity = Depends(get_current_identity),
    queries: OrderQueryService = Depends(get_order_query_service),
):
    """Fetches details for a specific order placed by the caller."""
    order = await run_with_deadline(queries.get_order(order_id, identity.user_id))
    return SuccessResponse(data=order.model_dump(mode="json"))


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(
    order_id: UUID,
    payload: OrderStatusUpdate,
    identity: Identity = Depends(require_restaurant_owner),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """
    Updates status (e.g. 'confirmed', 'preparing', 'out_for_delivery', 'delivered').
    Only the owner of the order's restaurant may call this.
    """
    log.info("UpdateOrderStatus: order %s to status %s by user %s", order_id, payload.status, identity.user_id)
    try:
        order = await run_with_deadline(lifecycle.update_status(order_id, payload.status, identity.user_id))
    except DomainError as e:
        log.warning("UpdateOrderStatus rejected for order %s: %s", order_id, e)
        raise
    data = OrderStatusResponse(
        order_id=order.id,
        status=order.status,
        total_amount=order.total_amount,
        message=f"Order status successfully updated to {order.status.value}",
    ).model_dump(mode="json")
    return SuccessResponse(data=data)


@router.post("/{order_id}/cancel", response_model=SuccessResponse)
async def cancel_order_endpoint(
    order_id: UUID,
    identity: Identity = Depends(get_current_identity),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Cancels the caller's own order while it is still pending or confirmed."""
    try:
        order = await run_with_deadline(lifecycle.cancel_order(order_id, identity.user_id))
    except DomainError as e:
        log.warning("CancelOrder rejected for order %s: %s", order_id, e)
        raise
    data = OrderStatusResponse(
        order_id=order.id,
        status=order.status,
        total_amount=order.total_amount,
        message="Order cancelled.",
    ).model_dump(mode="json")
    return SuccessResponse(data=data)
