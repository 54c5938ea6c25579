from enum import Enum
from tortoise import fields, models
import uuid


class OrderStatus(str, Enum):
    PENDING = "pending"  # Initial state, set at creation
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"  # Terminal
    CANCELLED = "cancelled"  # Terminal


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="orders", on_delete=fields.RESTRICT)
    restaurant = fields.ForeignKeyField("models.Restaurant", related_name="orders", on_delete=fields.RESTRICT)
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.PENDING)
    total_amount = fields.DecimalField(max_digits=14, decimal_places=2) # Item subtotal + delivery fee
    delivery_fee = fields.DecimalField(max_digits=12, decimal_places=2)
    delivery_address = fields.TextField()
    payment_method = fields.CharField(max_length=64)
    payment_status = fields.CharEnumField(PaymentStatus, default=PaymentStatus.PENDING)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("restaurant_id", "created_at"),  # Restaurant order queue
            ("user_id", "created_at"),        # Customer order history
            ("status",),                      # Status-based filtering
        ]


class OrderItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order = fields.ForeignKeyField("models.Order", related_name="items", on_delete=fields.CASCADE)
    menu_item = fields.ForeignKeyField("models.MenuItem", related_name="order_items", on_delete=fields.RESTRICT)
    quantity = fields.IntField()
    price = fields.DecimalField(max_digits=12, decimal_places=2) # Frozen at order time, never updated
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "order_items"
        indexes = [
            ("order_id",),              # Order line items
            ("menu_item_id",),          # Guards menu item deletion
        ]
