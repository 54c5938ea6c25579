"""
Ownership-chain authorization.

Every owner-guarded mutation resolves the restaurant that ultimately owns the
target resource (menu item -> category -> restaurant -> owner) through this
module, so the three-hop walk exists in exactly one place.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union
from uuid import UUID

from tortoise import connections

from quickbite.core.errors import NotOwner, ParentNotFound
from quickbite.models.catalog import MenuCategory, MenuItem, Restaurant

log = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    RESTAURANT = "restaurant"
    CATEGORY = "category"
    MENU_ITEM = "menu_item"


@dataclass(frozen=True)
class ResourceRef:
    """Points at a catalog resource whose owner must be resolved."""
    kind: ResourceKind
    id: UUID

    @classmethod
    def restaurant(cls, restaurant_id: UUID) -> "ResourceRef":
        return cls(ResourceKind.RESTAURANT, restaurant_id)

    @classmethod
    def category(cls, category_id: UUID) -> "ResourceRef":
        return cls(ResourceKind.CATEGORY, category_id)

    @classmethod
    def menu_item(cls, menu_item_id: UUID) -> "ResourceRef":
        return cls(ResourceKind.MENU_ITEM, menu_item_id)


@dataclass(frozen=True)
class OwnerResolution:
    """
    Tagged result of an ownership walk.

    Either ``owner_id``/``restaurant_id`` are set (resolved), or ``missing``
    names the first link of the chain that did not resolve.
    """
    owner_id: Optional[UUID] = None
    restaurant_id: Optional[UUID] = None
    missing: Optional[ResourceKind] = None

    @property
    def resolved(self) -> bool:
        return self.missing is None

    def is_owner(self, user_id: Union[UUID, str]) -> bool:
        return self.resolved and same_user(self.owner_id, user_id)


def same_user(a: Union[UUID, str, None], b: Union[UUID, str, None]) -> bool:
    """Compares user ids that may arrive as UUID objects or strings."""
    if a is None or b is None:
        return False
    return str(a) == str(b)


class AuthorizationResolver:
    def __init__(self, connection_name: str = "default"):
        self.connection_name = connection_name

    async def resolve_owner(self, ref: ResourceRef, conn: Any = None) -> OwnerResolution:
        """Walks item -> category -> restaurant; at most three lookups."""
        conn = conn or connections.get(self.connection_name)
        restaurant_id = ref.id if ref.kind == ResourceKind.RESTAURANT else None
        category_id = ref.id if ref.kind == ResourceKind.CATEGORY else None

        if ref.kind == ResourceKind.MENU_ITEM:
            item = await MenuItem.get_or_none(id=ref.id).using_db(conn)
            if not item:
                return OwnerResolution(missing=ResourceKind.MENU_ITEM)
            category_id = item.category_id

        if category_id is not None:
            category = await MenuCategory.get_or_none(id=category_id).using_db(conn)
            if not category:
                return OwnerResolution(missing=ResourceKind.CATEGORY)
            restaurant_id = category.restaurant_id

        restaurant = await Restaurant.get_or_none(id=restaurant_id).using_db(conn)
        if not restaurant:
            return OwnerResolution(missing=ResourceKind.RESTAURANT)
        return OwnerResolution(owner_id=restaurant.owner_id, restaurant_id=restaurant.id)

    async def require_owner(self, ref: ResourceRef, user_id: Union[UUID, str], conn: Any = None) -> OwnerResolution:
        """
        Resolves the owner of `ref` and checks it against `user_id`.

        Raises ParentNotFound (carrying the level that failed) or NotOwner.
        """
        resolution = await self.resolve_owner(ref, conn=conn)
        if not resolution.resolved:
            log.warning("Ownership chain broken at %s while resolving %s %s", resolution.missing.value, ref.kind.value, ref.id)
            raise ParentNotFound(resolution.missing.value, ref.id)
        if not resolution.is_owner(user_id):
            log.warning("User %s is not the owner of %s %s", user_id, ref.kind.value, ref.id)
            raise NotOwner()
        return resolution
