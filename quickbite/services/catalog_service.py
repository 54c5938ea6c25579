import logging
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from tortoise import connections
from tortoise.transactions import in_transaction

from quickbite.core.errors import HasDependents, ResourceNotFound, ValidationFailed
from quickbite.models.catalog import MenuCategory, MenuItem, Restaurant
from quickbite.models.order import Order, OrderItem
from quickbite.schemas.catalog import (
    CategoryRequest,
    MenuItemRequest,
    MenuItemUpdateRequest,
    RestaurantRequest,
    RestaurantUpdateRequest,
)
from quickbite.services.authorization import AuthorizationResolver, ResourceRef

log = logging.getLogger(__name__)

UserId = Union[UUID, str]

# Largest value menu_items.price (max_digits=12, decimal_places=2) can hold
MAX_MENU_PRICE = Decimal("9999999999.99")


def _check_restaurant_fields(req: RestaurantRequest) -> None:
    if not req.name.strip() or not req.address.strip() or not req.city.strip():
        raise ValidationFailed("name, address and city are required")


def _check_menu_item_fields(name: str, price: Decimal) -> None:
    if not name.strip() or price <= 0:
        raise ValidationFailed("name and valid price are required")
    if price > MAX_MENU_PRICE:
        raise ValidationFailed(f"price must not exceed {MAX_MENU_PRICE}")


class CatalogService:
    """
    Restaurants, menu categories and menu items.

    Reads are public. Every mutation except restaurant creation goes through
    the ownership resolver. Deletes refuse to orphan children: a restaurant
    with categories or orders, a category with items, or an item that appears
    in any order cannot be removed.
    """

    def __init__(self, resolver: Optional[AuthorizationResolver] = None, connection_name: str = "default"):
        self.connection_name = connection_name
        self.resolver = resolver or AuthorizationResolver(connection_name)

    def _db(self):
        return connections.get(self.connection_name)

    # ====== RESTAURANTS ======

    async def create_restaurant(self, req: RestaurantRequest, owner_id: UserId) -> Restaurant:
        _check_restaurant_fields(req)
        restaurant = await Restaurant.create(
            owner_id=owner_id,
            name=req.name.strip(),
            description=req.description,
            address=req.address.strip(),
            city=req.city.strip(),
            image_url=req.image_url,
            is_active=True,
            rating=0.0,
            using_db=self._db(),
        )
        log.info("Restaurant %s created by owner %s", restaurant.id, owner_id)
        return restaurant

    async def get_restaurant(self, restaurant_id: UUID) -> Restaurant:
        restaurant = await Restaurant.get_or_none(id=restaurant_id).using_db(self._db())
        if not restaurant:
            raise ResourceNotFound("restaurant", restaurant_id)
        return restaurant

    async def list_restaurants(self, city: Optional[str] = None) -> List[Restaurant]:
        """Public listing: active restaurants only, best rated first."""
        query = Restaurant.filter(is_active=True).using_db(self._db())
        if city:
            query = query.filter(city__iexact=city.strip())
        return await query.order_by("-rating", "-created_at")

    async def list_owner_restaurants(self, owner_id: UserId) -> List[Restaurant]:
        return await Restaurant.filter(owner_id=owner_id).using_db(self._db()).order_by("-created_at")

    async def update_restaurant(self, restaurant_id: UUID, req: RestaurantUpdateRequest, user_id: UserId) -> Restaurant:
        await self.resolver.require_owner(ResourceRef.restaurant(restaurant_id), user_id)
        _check_restaurant_fields(req)

        restaurant = await self.get_restaurant(restaurant_id)
        changes = {
            "name": req.name.strip(),
            "description": req.description,
            "address": req.address.strip(),
            "city": req.city.strip(),
            "image_url": req.image_url,
        }
        # Omitted is_active keeps the current value
        if req.is_active is not None:
            changes["is_active"] = req.is_active
        restaurant.update_from_dict(changes)
        await restaurant.save(using_db=self._db())
        log.info("Restaurant %s updated by owner %s (active=%s)", restaurant_id, user_id, restaurant.is_active)
        return restaurant

    async def delete_restaurant(self, restaurant_id: UUID, user_id: UserId) -> None:
        async with in_transaction(self.connection_name) as conn:
            await self.resolver.require_owner(ResourceRef.restaurant(restaurant_id), user_id, conn=conn)
            if await MenuCategory.filter(restaurant_id=restaurant_id).using_db(conn).exists():
                raise HasDependents("restaurant still has menu categories; delete them first")
            if await Order.filter(restaurant_id=restaurant_id).using_db(conn).exists():
                raise HasDependents("restaurant has order history; deactivate it instead")
            await Restaurant.filter(id=restaurant_id).using_db(conn).delete()
        log.info("Restaurant %s deleted by owner %s", restaurant_id, user_id)

    # ====== MENU CATEGORIES ======

    async def create_category(self, req: CategoryRequest, user_id: UserId) -> MenuCategory:
        if not req.name.strip():
            raise ValidationFailed("category name is required")
        await self.resolver.require_owner(ResourceRef.restaurant(req.restaurant_id), user_id)

        category = await MenuCategory.create(
            restaurant_id=req.restaurant_id,
            name=req.name.strip(),
            display_order=req.display_order,
            using_db=self._db(),
        )
        log.info("Category %s created in restaurant %s", category.id, req.restaurant_id)
        return category

    async def list_categories(self, restaurant_id: UUID) -> List[MenuCategory]:
        return await MenuCategory.filter(restaurant_id=restaurant_id).using_db(self._db()).order_by("display_order")

    async def delete_category(self, category_id: UUID, user_id: UserId) -> None:
        async with in_transaction(self.connection_name) as conn:
            await self.resolver.require_owner(ResourceRef.category(category_id), user_id, conn=conn)
            if await MenuItem.filter(category_id=category_id).using_db(conn).exists():
                raise HasDependents("category still has menu items; delete them first")
            await MenuCategory.filter(id=category_id).using_db(conn).delete()
        log.info("Category %s deleted by owner %s", category_id, user_id)

    # ====== MENU ITEMS ======

    async def create_menu_item(self, req: MenuItemRequest, user_id: UserId) -> MenuItem:
        _check_menu_item_fields(req.name, req.price)
        await self.resolver.require_owner(ResourceRef.category(req.category_id), user_id)

        item = await MenuItem.create(
            category_id=req.category_id,
            name=req.name.strip(),
            description=req.description,
            price=req.price,
            image_url=req.image_url,
            is_available=True,
            is_veg=req.is_veg,
            using_db=self._db(),
        )
        log.info("Menu item %s created in category %s", item.id, req.category_id)
        return item

    async def get_menu_item(self, menu_item_id: UUID) -> MenuItem:
        item = await MenuItem.get_or_none(id=menu_item_id).using_db(self._db())
        if not item:
            raise ResourceNotFound("menu_item", menu_item_id)
        return item

    async def list_menu_items(self, category_id: UUID) -> List[MenuItem]:
        return await MenuItem.filter(category_id=category_id).using_db(self._db()).order_by("created_at")

    async def update_menu_item(self, menu_item_id: UUID, req: MenuItemUpdateRequest, user_id: UserId) -> MenuItem:
        """Price changes here only affect future orders; placed orders keep their snapshot."""
        _check_menu_item_fields(req.name, req.price)
        await self.resolver.require_owner(ResourceRef.menu_item(menu_item_id), user_id)

        item = await self.get_menu_item(menu_item_id)
        item.update_from_dict({
            "name": req.name.strip(),
            "description": req.description,
            "price": req.price,
            "image_url": req.image_url,
            "is_available": req.is_available,
            "is_veg": req.is_veg,
        })
        await item.save(using_db=self._db())
        log.info("Menu item %s updated by owner %s", menu_item_id, user_id)
        return item

    async def delete_menu_item(self, menu_item_id: UUID, user_id: UserId) -> None:
        async with in_transaction(self.connection_name) as conn:
            await self.resolver.require_owner(ResourceRef.menu_item(menu_item_id), user_id, conn=conn)
            if await OrderItem.filter(menu_item_id=menu_item_id).using_db(conn).exists():
                raise HasDependents("menu item appears in past orders; mark it unavailable instead")
            await MenuItem.filter(id=menu_item_id).using_db(conn).delete()
        log.info("Menu item %s deleted by owner %s", menu_item_id, user_id)
