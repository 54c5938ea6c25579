"""
Order status state machine.

    pending -> confirmed -> preparing -> ready -> out_for_delivery -> delivered
    any non-terminal status -> cancelled

`delivered` and `cancelled` are terminal. By default any non-terminal order
may move to any status (the historical behaviour); with strict transitions
enabled only the next forward step, or `cancelled`, is accepted.
"""
import logging
from typing import Any, Optional, Union
from uuid import UUID

from tortoise import timezone
from tortoise.transactions import in_transaction

from quickbite.core.config import STRICT_STATUS_TRANSITIONS
from quickbite.core.errors import (
    InvalidStatus,
    InvalidTransition,
    NotOrderOwner,
    OrderAlreadyFinal,
    OrderNotCancellable,
    OrderNotFound,
    StaleStatus,
)
from quickbite.models.order import Order, OrderStatus
from quickbite.services.authorization import AuthorizationResolver, ResourceRef, same_user

log = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})
CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})
FORWARD_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)


def parse_status(value: Union[str, OrderStatus]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(str(value))


def check_transition(current: OrderStatus, target: OrderStatus, strict: bool) -> None:
    """Raises if `current -> target` is not allowed."""
    if current in TERMINAL_STATUSES:
        raise OrderAlreadyFinal(current.value)
    if not strict or target == OrderStatus.CANCELLED:
        return
    position = FORWARD_SEQUENCE.index(current)
    if FORWARD_SEQUENCE[position + 1] != target:
        raise InvalidTransition(current.value, target.value)


class OrderLifecycle:
    """Sole write path for Order.status."""

    def __init__(
        self,
        resolver: Optional[AuthorizationResolver] = None,
        strict_transitions: bool = STRICT_STATUS_TRANSITIONS,
        connection_name: str = "default",
    ):
        self.connection_name = connection_name
        self.resolver = resolver or AuthorizationResolver(connection_name)
        self.strict_transitions = strict_transitions

    async def _load_for_update(self, order_id: UUID, conn: Any) -> Order:
        # Row lock where the backend supports it; apply_status re-checks anyway
        order = await Order.filter(id=order_id).select_for_update().using_db(conn).first()
        if not order:
            raise OrderNotFound(order_id)
        return order

    async def apply_status(self, order: Order, new_status: OrderStatus, conn: Any = None) -> Order:
        """
        Compare-and-swap write: the UPDATE only matches if the row still holds
        the status `order` was read with. Raises StaleStatus otherwise.
        """
        expected = order.status
        updated = await Order.filter(id=order.id, status=expected).using_db(conn).update(
            status=new_status, updated_at=timezone.now()
        )
        if not updated:
            log.warning("Lost status race on order %s (expected %s)", order.id, expected.value)
            raise StaleStatus(order.id, expected.value)
        order.status = new_status
        log.info("Order %s status %s -> %s", order.id, expected.value, new_status.value)
        return order

    async def update_status(
        self, order_id: UUID, new_status: Union[str, OrderStatus], acting_user_id: Union[UUID, str]
    ) -> Order:
        """Owner of the order's restaurant moves the order to `new_status`."""
        status = parse_status(new_status)

        async with in_transaction(self.connection_name) as conn:
            order = await self._load_for_update(order_id, conn)
            await self.resolver.require_owner(
                ResourceRef.restaurant(order.restaurant_id), acting_user_id, conn=conn
            )
            check_transition(order.status, status, self.strict_transitions)
            await self.apply_status(order, status, conn=conn)

        return order

    async def cancel_order(self, order_id: UUID, acting_user_id: Union[UUID, str]) -> Order:
        """The customer who placed the order cancels it while still pending or confirmed."""
        async with in_transaction(self.connection_name) as conn:
            order = await self._load_for_update(order_id, conn)
            if not same_user(order.user_id, acting_user_id):
                log.warning("User %s tried to cancel order %s owned by another customer", acting_user_id, order_id)
                raise NotOrderOwner()
            if order.status not in CANCELLABLE_STATUSES:
                raise OrderNotCancellable(order.status.value)
            await self.apply_status(order, OrderStatus.CANCELLED, conn=conn)

        return order
