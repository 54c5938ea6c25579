import logging
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from tortoise.transactions import in_transaction

from quickbite.core.config import DELIVERY_FEE
from quickbite.core.errors import (
    InvalidQuantity,
    ItemNotFound,
    ItemUnavailable,
    RestaurantUnavailable,
    ValidationFailed,
)
from quickbite.models.catalog import MenuItem, Restaurant
from quickbite.models.order import Order, OrderItem, OrderStatus, PaymentStatus
from quickbite.schemas.order import OrderDetail, OrderRequest
from quickbite.services.order_query import OrderQueryService

log = logging.getLogger(__name__)

CENTS = Decimal("0.01")
MAX_ITEM_QUANTITY = 1000
# Largest value orders.total_amount (max_digits=14, decimal_places=2) can hold
MAX_ORDER_TOTAL = Decimal("999999999999.99")


def check_required_fields(request: OrderRequest) -> None:
    """Shape checks that need no catalog lookups; first violation wins."""
    if request.restaurant_id is None:
        raise ValidationFailed("restaurant_id is required")
    if not request.items:
        raise ValidationFailed("order must contain at least one item")
    if not request.delivery_address.strip():
        raise ValidationFailed("delivery_address is required")
    if not request.payment_method.strip():
        raise ValidationFailed("payment_method is required")


class OrderBuilder:
    """
    Turns a raw order request into a persisted Order and its OrderItems.

    Catalog prices are read once and copied onto each OrderItem; the order
    total is computed from those copies, so later menu price edits never
    touch existing orders.
    """

    def __init__(
        self,
        query_service: Optional[OrderQueryService] = None,
        delivery_fee: Decimal = DELIVERY_FEE,
        connection_name: str = "default",
    ):
        self.connection_name = connection_name
        self.delivery_fee = Decimal(delivery_fee).quantize(CENTS)
        self.query_service = query_service or OrderQueryService(connection_name=connection_name)

    async def place_order(self, request: OrderRequest, user_id: Union[UUID, str]) -> OrderDetail:
        check_required_fields(request)

        # Header and line items commit together or not at all
        async with in_transaction(self.connection_name) as conn:
            restaurant = await Restaurant.get_or_none(id=request.restaurant_id).using_db(conn)
            if not restaurant or not restaurant.is_active:
                raise RestaurantUnavailable()

            # Only items on this restaurant's menu are orderable
            menu_item_ids = [it.menu_item_id for it in request.items]
            menu_items = await MenuItem.filter(
                id__in=menu_item_ids, category__restaurant__id=restaurant.id
            ).using_db(conn)
            menu_map = {str(m.id): m for m in menu_items}

            subtotal = Decimal("0")
            lines = []
            for it in request.items:
                if it.quantity <= 0:
                    raise InvalidQuantity()
                if it.quantity > MAX_ITEM_QUANTITY:
                    raise InvalidQuantity(f"item quantity must be at most {MAX_ITEM_QUANTITY}")
                menu = menu_map.get(str(it.menu_item_id))
                if not menu:
                    raise ItemNotFound(it.menu_item_id)
                if not menu.is_available:
                    raise ItemUnavailable(menu.name)

                subtotal += menu.price * it.quantity
                lines.append((menu, it.quantity, menu.price))

            total_amount = (subtotal + self.delivery_fee).quantize(CENTS)
            if total_amount > MAX_ORDER_TOTAL:
                raise ValidationFailed("order total exceeds the maximum allowed amount")

            order = await Order.create(
                user_id=user_id,
                restaurant=restaurant,
                status=OrderStatus.PENDING,
                total_amount=total_amount,
                delivery_fee=self.delivery_fee,
                delivery_address=request.delivery_address.strip(),
                payment_method=request.payment_method.strip(),
                payment_status=PaymentStatus.PENDING,
                using_db=conn,
            )

            for menu, quantity, price in lines:
                await OrderItem.create(
                    order=order,
                    menu_item=menu,
                    quantity=quantity,
                    price=price,
                    using_db=conn,
                )

        log.info(
            "Order %s placed by user %s at restaurant %s (%d items, total %s)",
            order.id, user_id, restaurant.id, len(lines), order.total_amount,
        )
        return await self.query_service.fetch_detail(order.id)
