# quickbite/scripts/seed_data.py
import asyncio
import logging
from decimal import Decimal

from quickbite.core.config import LOG_LEVEL
from quickbite.core.db import init_db, close_db
from quickbite.core.logging_config import configure_logging
from quickbite.core.security import hash_password
from quickbite.models import MenuCategory, MenuItem, Restaurant, User, UserRole

log = logging.getLogger("quickbite.seed")

DEMO_PASSWORD = "demo-password"


async def seed():
    owner, _ = await User.get_or_create(
        email="owner@quickbite.local",
        defaults={"name": "Demo Owner", "password_hash": hash_password(DEMO_PASSWORD), "role": UserRole.RESTAURANT_OWNER},
    )
    customer, _ = await User.get_or_create(
        email="customer@quickbite.local",
        defaults={"name": "Demo Customer", "password_hash": hash_password(DEMO_PASSWORD), "role": UserRole.CUSTOMER},
    )
    log.info("Users: owner=%s customer=%s (password %r)", owner.id, customer.id, DEMO_PASSWORD)

    rest, _ = await Restaurant.get_or_create(
        owner=owner, name="Demo Restaurant",
        defaults={"address": "12 Elm St", "city": "Springfield"},
    )
    log.info("Restaurant: %s", rest.id)

    mains, _ = await MenuCategory.get_or_create(restaurant=rest, name="Mains", defaults={"display_order": 1})
    drinks, _ = await MenuCategory.get_or_create(restaurant=rest, name="Drinks", defaults={"display_order": 2})

    # Create menu items
    m1, _ = await MenuItem.get_or_create(category=mains, name="Paneer Wrap", defaults={"price": Decimal("149.00"), "is_veg": True})
    m2, _ = await MenuItem.get_or_create(category=mains, name="Chili Paneer Rice", defaults={"price": Decimal("199.00"), "is_veg": True})
    m3, _ = await MenuItem.get_or_create(category=drinks, name="Cold Drink", defaults={"price": Decimal("49.00"), "is_veg": True})

    log.info("Menu items: %s %s %s", m1.id, m2.id, m3.id)


async def main():
    configure_logging(LOG_LEVEL)
    await init_db()
    try:
        await seed()
    finally:
        await close_db()

if __name__ == "__main__":
    asyncio.run(main())
