import logging
from typing import List, Optional, Union
from uuid import UUID

from tortoise import connections

from quickbite.core.errors import NotOrderOwner, OrderNotFound
from quickbite.models.order import Order
from quickbite.schemas.order import OrderDetail, OrderItemDetail
from quickbite.services.authorization import AuthorizationResolver, ResourceRef, same_user

log = logging.getLogger(__name__)


def to_order_detail(order: Order) -> OrderDetail:
    """
    Builds the display view of an order whose `restaurant` and
    `items__menu_item` relations are already fetched.
    """
    items = [
        OrderItemDetail(
            id=item.id,
            order_id=order.id,
            menu_item_id=item.menu_item_id,
            quantity=item.quantity,
            price=item.price,
            created_at=item.created_at,
            # Display metadata is live, only the price is frozen
            item_name=item.menu_item.name,
            item_image=item.menu_item.image_url,
            is_veg=item.menu_item.is_veg,
        )
        for item in sorted(order.items, key=lambda i: i.created_at)
    ]
    return OrderDetail(
        id=order.id,
        user_id=order.user_id,
        restaurant_id=order.restaurant_id,
        restaurant_name=order.restaurant.name,
        status=order.status,
        subtotal=order.total_amount - order.delivery_fee,
        delivery_fee=order.delivery_fee,
        total_amount=order.total_amount,
        delivery_address=order.delivery_address,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=items,
    )


class OrderQueryService:
    """Read-only assembly of order views."""

    def __init__(self, resolver: Optional[AuthorizationResolver] = None, connection_name: str = "default"):
        self.connection_name = connection_name
        self.resolver = resolver or AuthorizationResolver(connection_name)

    def _orders(self):
        # Pre-fetch related entities to minimize DB queries (N+1 avoidance)
        return (
            Order.all()
            .using_db(connections.get(self.connection_name))
            .prefetch_related("restaurant", "items__menu_item")
        )

    async def fetch_detail(self, order_id: UUID) -> Optional[OrderDetail]:
        """Loads one order view without any identity check."""
        order = await self._orders().filter(id=order_id).first()
        return to_order_detail(order) if order else None

    async def get_order(self, order_id: UUID, acting_user_id: Union[UUID, str]) -> OrderDetail:
        """Single-order view; only the customer who placed the order may read it."""
        detail = await self.fetch_detail(order_id)
        if detail is None:
            raise OrderNotFound(order_id)
        if not same_user(detail.user_id, acting_user_id):
            log.warning("User %s tried to read order %s owned by another customer", acting_user_id, order_id)
            raise NotOrderOwner()
        return detail

    async def list_customer_orders(self, user_id: Union[UUID, str]) -> List[OrderDetail]:
        orders = await self._orders().filter(user_id=user_id).order_by("-created_at")
        return [to_order_detail(o) for o in orders]

    async def list_restaurant_orders(self, restaurant_id: UUID, acting_user_id: Union[UUID, str]) -> List[OrderDetail]:
        """Restaurant order queue, newest first. Owner only."""
        await self.resolver.require_owner(ResourceRef.restaurant(restaurant_id), acting_user_id)
        orders = await self._orders().filter(restaurant_id=restaurant_id).order_by("-created_at")
        return [to_order_detail(o) for o in orders]
