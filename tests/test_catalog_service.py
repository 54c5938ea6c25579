import pytest
from decimal import Decimal
from uuid import uuid4

from quickbite.core.errors import HasDependents, NotOwner, ParentNotFound, ResourceNotFound, ValidationFailed
from quickbite.models import MenuCategory, MenuItem, Restaurant
from quickbite.schemas.catalog import (
    CategoryRequest,
    MenuItemRequest,
    MenuItemUpdateRequest,
    RestaurantRequest,
    RestaurantUpdateRequest,
)
from quickbite.services.catalog_service import MAX_MENU_PRICE, CatalogService


@pytest.fixture
def catalog():
    return CatalogService()


def restaurant_request(**overrides):
    data = {"name": "Curry Corner", "address": "5 Oak Ave", "city": "Springfield", "description": "North Indian"}
    data.update(overrides)
    return RestaurantRequest(**data)


# ====== RESTAURANTS ======

@pytest.mark.asyncio
async def test_create_restaurant_is_active_and_owned(catalog, owner):
    restaurant = await catalog.create_restaurant(restaurant_request(name="  Curry Corner  "), owner.id)

    assert restaurant.name == "Curry Corner"
    assert restaurant.is_active is True
    assert restaurant.rating == 0.0
    assert restaurant.owner_id == owner.id


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "address", "city"])
async def test_create_restaurant_requires_fields(catalog, owner, field):
    with pytest.raises(ValidationFailed):
        await catalog.create_restaurant(restaurant_request(**{field: " "}), owner.id)
    assert await Restaurant.all().count() == 0


@pytest.mark.asyncio
async def test_get_unknown_restaurant(catalog, db):
    with pytest.raises(ResourceNotFound) as excinfo:
        await catalog.get_restaurant(uuid4())
    assert excinfo.value.code == "restaurant_not_found"


@pytest.mark.asyncio
async def test_public_listing_filters_city_and_hides_inactive(catalog, owner, restaurant):
    await Restaurant.create(owner=owner, name="Top Rated", address="2 Main St", city="springfield", rating=4.8)
    await Restaurant.create(owner=owner, name="Closed", address="3 Main St", city="Springfield", is_active=False)
    await Restaurant.create(owner=owner, name="Far Away", address="1 Long Rd", city="Shelbyville")

    names = [r.name for r in await catalog.list_restaurants(city="SPRINGFIELD")]
    assert names == ["Top Rated", "Spice Hub"]

    everything = [r.name for r in await catalog.list_restaurants()]
    assert "Far Away" in everything
    assert "Closed" not in everything


@pytest.mark.asyncio
async def test_owner_listing_includes_inactive(catalog, owner, other_owner, restaurant):
    await Restaurant.create(owner=owner, name="Closed", address="3 Main St", city="Springfield", is_active=False)
    await Restaurant.create(owner=other_owner, name="Rival", address="4 Main St", city="Springfield")

    names = {r.name for r in await catalog.list_owner_restaurants(owner.id)}
    assert names == {"Spice Hub", "Closed"}


@pytest.mark.asyncio
async def test_update_restaurant_can_deactivate(catalog, owner, restaurant):
    req = RestaurantUpdateRequest(name="Spice Hub", address="1 Main St", city="Springfield", is_active=False)
    updated = await catalog.update_restaurant(restaurant.id, req, owner.id)

    assert updated.is_active is False
    assert (await Restaurant.get(id=restaurant.id)).is_active is False


@pytest.mark.asyncio
async def test_update_restaurant_checks_owner_before_fields(catalog, other_owner, restaurant):
    req = RestaurantUpdateRequest(name="", address="", city="")
    with pytest.raises(NotOwner):
        await catalog.update_restaurant(restaurant.id, req, other_owner.id)


@pytest.mark.asyncio
async def test_delete_empty_restaurant(catalog, owner, restaurant):
    await catalog.delete_restaurant(restaurant.id, owner.id)
    assert not await Restaurant.filter(id=restaurant.id).exists()


@pytest.mark.asyncio
async def test_delete_restaurant_with_categories_is_refused(catalog, owner, restaurant, category):
    with pytest.raises(HasDependents):
        await catalog.delete_restaurant(restaurant.id, owner.id)
    assert await Restaurant.filter(id=restaurant.id).exists()


@pytest.mark.asyncio
async def test_delete_restaurant_by_stranger(catalog, other_owner, restaurant):
    with pytest.raises(NotOwner):
        await catalog.delete_restaurant(restaurant.id, other_owner.id)


# ====== MENU CATEGORIES ======

@pytest.mark.asyncio
async def test_create_and_list_categories_in_display_order(catalog, owner, restaurant):
    await catalog.create_category(CategoryRequest(restaurant_id=restaurant.id, name="Drinks", display_order=3), owner.id)
    await catalog.create_category(CategoryRequest(restaurant_id=restaurant.id, name="Starters", display_order=1), owner.id)

    names = [c.name for c in await catalog.list_categories(restaurant.id)]
    assert names == ["Starters", "Drinks"]


@pytest.mark.asyncio
async def test_create_category_requires_name(catalog, owner, restaurant):
    with pytest.raises(ValidationFailed):
        await catalog.create_category(CategoryRequest(restaurant_id=restaurant.id, name=""), owner.id)


@pytest.mark.asyncio
async def test_create_category_in_someone_elses_restaurant(catalog, other_owner, restaurant):
    with pytest.raises(NotOwner):
        await catalog.create_category(CategoryRequest(restaurant_id=restaurant.id, name="Sneaky"), other_owner.id)
    assert await MenuCategory.all().count() == 0


@pytest.mark.asyncio
async def test_create_category_in_unknown_restaurant(catalog, owner):
    with pytest.raises(ParentNotFound) as excinfo:
        await catalog.create_category(CategoryRequest(restaurant_id=uuid4(), name="Ghost"), owner.id)
    assert excinfo.value.level == "restaurant"


@pytest.mark.asyncio
async def test_delete_category_with_items_is_refused(catalog, owner, category, menu_item):
    with pytest.raises(HasDependents):
        await catalog.delete_category(category.id, owner.id)


@pytest.mark.asyncio
async def test_delete_empty_category(catalog, owner, category):
    await catalog.delete_category(category.id, owner.id)
    assert not await MenuCategory.filter(id=category.id).exists()


# ====== MENU ITEMS ======

@pytest.mark.asyncio
async def test_create_menu_item(catalog, owner, category):
    req = MenuItemRequest(category_id=category.id, name="Masala Dosa", price=Decimal("80.00"), is_veg=True)
    item = await catalog.create_menu_item(req, owner.id)

    assert item.is_available is True
    assert item.price == Decimal("80.00")
    assert [i.name for i in await catalog.list_menu_items(category.id)] == ["Masala Dosa"]


@pytest.mark.asyncio
@pytest.mark.parametrize("name, price", [("", Decimal("10")), ("Dosa", Decimal("0")), ("Dosa", Decimal("-1"))])
async def test_create_menu_item_validation(catalog, owner, category, name, price):
    with pytest.raises(ValidationFailed):
        await catalog.create_menu_item(MenuItemRequest(category_id=category.id, name=name, price=price), owner.id)


@pytest.mark.asyncio
async def test_create_menu_item_in_unknown_category(catalog, owner):
    req = MenuItemRequest(category_id=uuid4(), name="Dosa", price=Decimal("10"))
    with pytest.raises(ParentNotFound) as excinfo:
        await catalog.create_menu_item(req, owner.id)
    assert excinfo.value.level == "category"


@pytest.mark.asyncio
async def test_update_menu_item_by_owner(catalog, owner, menu_item):
    req = MenuItemUpdateRequest(name="Paneer Tikka", price=Decimal("130.00"), is_available=False, is_veg=True)
    item = await catalog.update_menu_item(menu_item.id, req, owner.id)

    assert item.price == Decimal("130.00")
    assert item.is_available is False


@pytest.mark.asyncio
async def test_update_menu_item_by_stranger(catalog, other_owner, menu_item):
    req = MenuItemUpdateRequest(name="Hijacked", price=Decimal("1.00"))
    with pytest.raises(NotOwner):
        await catalog.update_menu_item(menu_item.id, req, other_owner.id)
    assert (await MenuItem.get(id=menu_item.id)).name == "Paneer Tikka"


@pytest.mark.asyncio
async def test_get_unknown_menu_item(catalog, db):
    with pytest.raises(ResourceNotFound):
        await catalog.get_menu_item(uuid4())


@pytest.mark.asyncio
async def test_ordered_menu_item_cannot_be_deleted(catalog, owner, menu_item, placed_order):
    with pytest.raises(HasDependents):
        await catalog.delete_menu_item(menu_item.id, owner.id)
    assert await MenuItem.filter(id=menu_item.id).exists()


@pytest.mark.asyncio
async def test_delete_unordered_menu_item(catalog, owner, second_item):
    await catalog.delete_menu_item(second_item.id, owner.id)
    assert not await MenuItem.filter(id=second_item.id).exists()


@pytest.mark.asyncio
async def test_restaurant_with_orders_cannot_be_deleted(catalog, owner, restaurant, placed_order):
    with pytest.raises(HasDependents):
        await catalog.delete_restaurant(restaurant.id, owner.id)


@pytest.mark.asyncio
async def test_menu_price_beyond_column_precision_is_rejected(catalog, owner, category, menu_item):
    too_big = MAX_MENU_PRICE + Decimal("0.01")
    with pytest.raises(ValidationFailed):
        await catalog.create_menu_item(MenuItemRequest(category_id=category.id, name="Gold Platter", price=too_big), owner.id)
    with pytest.raises(ValidationFailed):
        await catalog.update_menu_item(menu_item.id, MenuItemUpdateRequest(name="Paneer Tikka", price=too_big), owner.id)
    assert (await MenuItem.get(id=menu_item.id)).price == Decimal("120.00")


@pytest.mark.asyncio
async def test_update_without_is_active_keeps_restaurant_closed(catalog, owner, restaurant):
    restaurant.is_active = False
    await restaurant.save()

    req = RestaurantUpdateRequest(name="Spice Hub Express", address="1 Main St", city="Springfield")
    updated = await catalog.update_restaurant(restaurant.id, req, owner.id)

    assert updated.name == "Spice Hub Express"
    assert updated.is_active is False
    assert (await Restaurant.get(id=restaurant.id)).is_active is False


@pytest.mark.asyncio
async def test_update_can_reopen_restaurant(catalog, owner, restaurant):
    restaurant.is_active = False
    await restaurant.save()

    req = RestaurantUpdateRequest(name="Spice Hub", address="1 Main St", city="Springfield", is_active=True)
    updated = await catalog.update_restaurant(restaurant.id, req, owner.id)
    assert updated.is_active is True
