"""
Domain errors raised by the service layer.

Five kinds exist: ValidationFailed, NotFound, Unauthorized, Conflict and
Unavailable. Every concrete error subclasses exactly one of them and carries a
snake_case ``code`` plus a human-readable ``message``. The HTTP layer maps the
kind to a status code (see quickbite.core.exception_handlers); services never retry.
"""
from typing import Optional
from uuid import UUID


class DomainError(Exception):
    """Base class for every error the core surfaces to its caller."""
    kind = "domain_error"
    code = "domain_error"
    status_code = 400
    default_message = "Request could not be processed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ----------- Error kinds -----------

class ValidationFailed(DomainError):
    kind = "validation_failed"
    code = "validation_failed"
    status_code = 400
    default_message = "Invalid input data."


class NotFound(DomainError):
    kind = "not_found"
    code = "not_found"
    status_code = 404
    default_message = "Resource not found."


class Unauthorized(DomainError):
    kind = "unauthorized"
    code = "unauthorized"
    status_code = 403
    default_message = "You are not allowed to perform this action."


class Conflict(DomainError):
    kind = "conflict"
    code = "conflict"
    status_code = 409
    default_message = "Request conflicts with the current state of the resource."


class Unavailable(DomainError):
    kind = "unavailable"
    code = "unavailable"
    status_code = 503
    default_message = "Service temporarily unavailable, try again."


# ----------- Validation -----------

class RestaurantUnavailable(ValidationFailed):
    code = "restaurant_unavailable"
    default_message = "restaurant is currently closed"


class InvalidQuantity(ValidationFailed):
    code = "invalid_quantity"
    default_message = "item quantity must be greater than 0"


class ItemUnavailable(ValidationFailed):
    code = "item_unavailable"

    def __init__(self, item_name: str):
        self.item_name = item_name
        super().__init__(f"item is not available: {item_name}")


class InvalidStatus(ValidationFailed):
    code = "invalid_status"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"invalid order status: {status}")


# ----------- Not found -----------

class ResourceNotFound(NotFound):
    """A lookup by identifier found nothing. ``level`` names the resource type."""

    def __init__(self, level: str, resource_id: Optional[UUID] = None, message: Optional[str] = None):
        self.level = level
        self.resource_id = resource_id
        self.code = f"{level}_not_found"
        super().__init__(message or f"{level.replace('_', ' ')} not found")


class ParentNotFound(ResourceNotFound):
    """A link in the ownership chain (item -> category -> restaurant) did not resolve."""


class ItemNotFound(ResourceNotFound):
    def __init__(self, menu_item_id: UUID):
        super().__init__("menu_item", menu_item_id, f"menu item not found: {menu_item_id}")


class OrderNotFound(ResourceNotFound):
    def __init__(self, order_id: UUID):
        super().__init__("order", order_id)


# ----------- Authorization -----------

class NotOwner(Unauthorized):
    code = "not_restaurant_owner"
    default_message = "unauthorized: you don't own this restaurant"


class NotOrderOwner(Unauthorized):
    code = "not_order_owner"
    default_message = "unauthorized: you don't own this order"


class InvalidCredentials(Unauthorized):
    code = "invalid_credentials"
    status_code = 401
    default_message = "invalid email or password"


# ----------- Conflicts -----------

class OrderAlreadyFinal(Conflict):
    code = "order_already_final"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Order is already in a final state: {status}. Status cannot be updated.")


class OrderNotCancellable(Conflict):
    code = "order_not_cancellable"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Cannot cancel order in status {status}")


class InvalidTransition(Conflict):
    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move order from {current} to {target}")


class StaleStatus(Conflict):
    """The order's status changed between read and write."""
    code = "stale_status"

    def __init__(self, order_id: UUID, expected: str):
        self.order_id = order_id
        self.expected = expected
        super().__init__(f"Order {order_id} is no longer {expected}; reload and retry.")


class HasDependents(Conflict):
    code = "has_dependents"


class DuplicateEmail(Conflict):
    code = "duplicate_email"
    default_message = "email is already registered"
