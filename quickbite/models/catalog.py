from tortoise import fields, models
import uuid


class Restaurant(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    owner = fields.ForeignKeyField("models.User", related_name="restaurants", on_delete=fields.RESTRICT)
    name = fields.CharField(max_length=255)
    description = fields.TextField(default="")
    address = fields.CharField(max_length=512)
    city = fields.CharField(max_length=128)
    image_url = fields.CharField(max_length=1024, default="")
    is_active = fields.BooleanField(default=True) # Gates public listing and order acceptance
    rating = fields.FloatField(default=0.0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "restaurants"
        indexes = [
            ("owner_id",),              # Owner's restaurant list
            ("is_active", "city"),      # Public listing by city
        ]


class MenuCategory(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="categories", on_delete=fields.RESTRICT)
    name = fields.CharField(max_length=255)
    display_order = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "menu_categories"
        indexes = [
            ("restaurant_id", "display_order"),
        ]


class MenuItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    category = fields.ForeignKeyField("models.MenuCategory", related_name="items", on_delete=fields.RESTRICT)
    name = fields.CharField(max_length=255)
    description = fields.TextField(default="")
    price = fields.DecimalField(max_digits=12, decimal_places=2) # Live price; orders snapshot it
    image_url = fields.CharField(max_length=1024, default="")
    is_available = fields.BooleanField(default=True)
    is_veg = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("category_id",),
            ("category_id", "is_available"),
        ]
