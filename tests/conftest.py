"""Shared pytest fixtures: an in-memory Tortoise database and a small catalog."""
from decimal import Decimal

import pytest
import pytest_asyncio

from quickbite.core.db import init_db, close_db
from quickbite.models import MenuCategory, MenuItem, Restaurant, User, UserRole
from quickbite.schemas.order import OrderItemRequest, OrderRequest
from quickbite.services.order_builder import OrderBuilder


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite schema per test."""
    await init_db(db_url="sqlite://:memory:")
    yield
    await close_db()


async def make_user(email: str, role: UserRole = UserRole.CUSTOMER) -> User:
    return await User.create(name=email.split("@")[0], email=email, password_hash="not-a-real-hash", role=role)


@pytest_asyncio.fixture
async def owner(db) -> User:
    return await make_user("owner@example.com", UserRole.RESTAURANT_OWNER)


@pytest_asyncio.fixture
async def other_owner(db) -> User:
    return await make_user("rival@example.com", UserRole.RESTAURANT_OWNER)


@pytest_asyncio.fixture
async def customer(db) -> User:
    return await make_user("alice@example.com")


@pytest_asyncio.fixture
async def other_customer(db) -> User:
    return await make_user("bob@example.com")


@pytest_asyncio.fixture
async def restaurant(owner) -> Restaurant:
    return await Restaurant.create(owner=owner, name="Spice Hub", address="1 Main St", city="Springfield")


@pytest_asyncio.fixture
async def category(restaurant) -> MenuCategory:
    return await MenuCategory.create(restaurant=restaurant, name="Mains", display_order=1)


@pytest_asyncio.fixture
async def menu_item(category) -> MenuItem:
    return await MenuItem.create(
        category=category, name="Paneer Tikka", price=Decimal("120.00"), image_url="http://img/paneer.png", is_veg=True
    )


@pytest_asyncio.fixture
async def second_item(category) -> MenuItem:
    return await MenuItem.create(category=category, name="Butter Naan", price=Decimal("35.50"))


@pytest.fixture
def builder() -> OrderBuilder:
    return OrderBuilder(delivery_fee=Decimal("50.00"))


def build_order_request(restaurant_id, *lines, address="12 Elm St", payment="card") -> OrderRequest:
    """Builds an OrderRequest from (menu_item_id, quantity) pairs."""
    return OrderRequest(
        restaurant_id=restaurant_id,
        items=[OrderItemRequest(menu_item_id=item_id, quantity=qty) for item_id, qty in lines],
        delivery_address=address,
        payment_method=payment,
    )


@pytest_asyncio.fixture
async def placed_order(builder, restaurant, menu_item, customer):
    """A pending order for 2 x menu_item placed by `customer`."""
    return await builder.place_order(build_order_request(restaurant.id, (menu_item.id, 2)), customer.id)


@pytest.fixture
def order_request():
    return build_order_request
