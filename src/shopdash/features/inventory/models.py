"""Data models for the product catalog: Product, its Stock row and ProductRating."""

from tortoise import fields, models
from ...common.models import TimestampMixin, generate_ksuid


class Product(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    price = fields.DecimalField(
        max_digits=10, decimal_places=2, default=0, description="Current list price"
    )
    image_url = fields.CharField(max_length=512, null=True)
    category = fields.CharField(max_length=100, null=True)
    supplier_id = fields.IntField(null=True)
    # Soft delete: hidden from the catalog and analytics, kept for order history
    deleted = fields.BooleanField(default=False)

    stock: fields.BackwardOneToOneRelation["Stock"]
    ratings: fields.ReverseRelation["ProductRating"]
    order_items: fields.ReverseRelation["OrderItem"]

    def __str__(self):
        return f"{self.name} (Price: {self.price})"

    class Meta:
        table = "products"


class Stock(models.Model):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    product: fields.OneToOneRelation[Product] = fields.OneToOneField(
        "models.Product", related_name="stock", on_delete=fields.CASCADE
    )
    quantity = fields.IntField(default=0)
    last_updated = fields.DatetimeField(auto_now=True)

    def __str__(self):
        return f"Stock {self.public_id}: {self.quantity}"

    class Meta:
        table = "product_stocks"


class ProductRating(models.Model):
    id = fields.IntField(primary_key=True)
    product: fields.ForeignKeyRelation[Product] = fields.ForeignKeyField(
        "models.Product", related_name="ratings", on_delete=fields.CASCADE
    )
    rating = fields.DecimalField(max_digits=3, decimal_places=1)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "product_ratings"
