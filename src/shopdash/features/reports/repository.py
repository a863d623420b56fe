"""Data access for the report engine.

The report services never query models directly: they are handed a
``ReportRepository`` and get typed records back. All date ranges are UTC
``[start, end)`` bounds already compiled from display-local days by the caller.
"""
import datetime
from typing import Protocol

from ..inventory.models import Product, ProductRating, Stock
from ..orders.models import Order, OrderItem
from .records import (
    OrderLineRecord, OrderRecord, ProductFacts, ProductOrderLineRecord,
    ProductRecord, RatingRecord, SaleLineRecord, StockRecord,
)


class ReportRepository(Protocol):
    async def orders_between(
        self, start: datetime.datetime, end: datetime.datetime
    ) -> list[OrderRecord]: ...

    async def sale_lines_between(
        self, start: datetime.datetime, end: datetime.datetime
    ) -> list[SaleLineRecord]: ...

    async def product_facts(self) -> ProductFacts: ...

    async def rated_product_count(
        self, start: datetime.datetime, end: datetime.datetime
    ) -> int: ...

    async def active_product_count(self) -> int: ...

    async def total_stock(self) -> int: ...


class TortoiseReportRepository:
    """``ReportRepository`` backed by the application's Tortoise models."""

    async def orders_between(self, start, end):
        rows = await (
            Order.filter(order_date__gte=start, order_date__lt=end)
            .order_by("order_date", "id")
            .values(
                "id", "customer_id", "status", "order_date", "in_sales_report",
                "subtotal", "delivery_fee", "total",
            )
        )
        if not rows:
            return []

        lines_by_order = {}
        line_rows = await OrderItem.filter(order_id__in=[row["id"] for row in rows]).order_by("id").values(
            "order_id", "product_id", "quantity", "price"
        )
        for line in line_rows:
            lines_by_order.setdefault(line["order_id"], []).append(OrderLineRecord(
                product_id=line["product_id"], quantity=line["quantity"], price=line["price"]
            ))

        return [
            OrderRecord(**row, lines=tuple(lines_by_order.get(row["id"], ())))
            for row in rows
        ]

    async def sale_lines_between(self, start, end):
        rows = await (
            OrderItem.filter(order__order_date__gte=start, order__order_date__lt=end)
            .order_by("id")
            .values(
                "order_id",
                "quantity",
                "price",
                order_date="order__order_date",
                full_name="order__full_name",
                status="order__status",
                in_sales_report="order__in_sales_report",
                product_name="name",
                image_url="product__image_url",
            )
        )
        return [SaleLineRecord(**row) for row in rows]

    async def product_facts(self):
        products = await Product.filter(deleted=False).order_by("id").values(
            "id", "public_id", "name", "description", "price", "image_url", "category"
        )
        product_ids = [row["id"] for row in products]
        if not product_ids:
            return ProductFacts()

        order_lines = await (
            OrderItem.filter(product_id__in=product_ids)
            .order_by("id")
            .values(
                "product_id",
                "order_id",
                "quantity",
                order_status="order__status",
                order_date="order__order_date",
            )
        )
        ratings = await ProductRating.filter(product_id__in=product_ids).order_by("id").values(
            "id", "product_id", "rating", "created_at"
        )
        stocks = await Stock.filter(product_id__in=product_ids).values(
            "public_id", "product_id", "quantity"
        )
        return ProductFacts(
            products=tuple(ProductRecord(**row) for row in products),
            order_lines=tuple(ProductOrderLineRecord(**row) for row in order_lines),
            ratings=tuple(RatingRecord(**row) for row in ratings),
            stocks=tuple(StockRecord(**row) for row in stocks),
        )

    async def rated_product_count(self, start, end):
        product_ids = await (
            ProductRating.filter(created_at__gte=start, created_at__lt=end)
            .distinct()
            .values_list("product_id", flat=True)
        )
        return len(set(product_ids))

    async def active_product_count(self):
        return await Product.filter(deleted=False).count()

    async def total_stock(self):
        quantities = await Stock.filter(product__deleted=False).values_list("quantity", flat=True)
        return sum(quantities)


def get_report_repository() -> ReportRepository:
    return TortoiseReportRepository()
