import enum

from tortoise import fields, models
from ...common.models import TimestampMixin, generate_ksuid
from ...common.schemas import to_money


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"
    REFUNDED = "Refunded"
    RETURN_CANCELLED = "Return Cancelled"


class Order(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    # Storefront customer; customers live outside the admin database
    customer_id = fields.IntField(db_index=True)

    full_name = fields.CharField(max_length=255)
    phone_number = fields.CharField(max_length=50, null=True)
    address = fields.CharField(max_length=255, null=True)
    city = fields.CharField(max_length=100, null=True)
    state_province = fields.CharField(max_length=100, null=True)
    postal_code = fields.CharField(max_length=20, null=True)
    delivery_address = fields.TextField(null=True)
    payment_method = fields.CharField(max_length=50, null=True)
    tracking_number = fields.CharField(max_length=100, null=True)

    status = fields.CharEnumField(OrderStatus, max_length=50, default=OrderStatus.PENDING)
    order_date = fields.DatetimeField(description="Stored in UTC")
    in_sales_report = fields.BooleanField(default=True)
    is_rated = fields.BooleanField(default=False)

    subtotal = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    delivery_fee = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = fields.DecimalField(max_digits=10, decimal_places=2, default=0)

    items: fields.ReverseRelation["OrderItem"]
    feedback: fields.ReverseRelation["OrderFeedback"]

    async def save(self, *args, **kwargs):
        # total always reflects goods plus delivery at write time
        self.total = to_money(self.subtotal) + to_money(self.delivery_fee)
        update_fields = kwargs.get("update_fields")
        if update_fields and ("subtotal" in update_fields or "delivery_fee" in update_fields):
            kwargs["update_fields"] = list(update_fields) + ["total"]
        await super().save(*args, **kwargs)

    def __str__(self):
        return f"Order {self.public_id} - Status: {self.status}"

    class Meta:
        table = "orders"


class OrderItem(models.Model):
    id = fields.IntField(primary_key=True)
    order: fields.ForeignKeyRelation[Order] = fields.ForeignKeyField(
        "models.Order", related_name="items", on_delete=fields.CASCADE
    )
    product: fields.ForeignKeyRelation["Product"] = fields.ForeignKeyField(
        "models.Product", related_name="order_items", on_delete=fields.RESTRICT
    )
    # Snapshots taken at purchase time, independent of the product's current data
    name = fields.CharField(max_length=255)
    quantity = fields.IntField()
    price = fields.DecimalField(max_digits=10, decimal_places=2)

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    class Meta:
        table = "ordered_products"


class OrderFeedback(models.Model):
    id = fields.IntField(primary_key=True)
    order: fields.ForeignKeyRelation[Order] = fields.ForeignKeyField(
        "models.Order", related_name="feedback", on_delete=fields.CASCADE
    )
    feedback = fields.TextField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "order_feedback"
        ordering = ["created_at"]


# Statuses handled through the return/refund view rather than the sales view
RETURN_STATUSES = frozenset(
    {OrderStatus.RETURNED, OrderStatus.REFUNDED, OrderStatus.RETURN_CANCELLED}
)
