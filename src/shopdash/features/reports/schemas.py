"""Dashboard report response schemas.

Field names follow Python conventions here and are emitted in camelCase,
which is what the dashboard's chart components read.
"""
import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...common.schemas import Money


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Sales over time
class DailySalesEntry(CamelModel):
    period: str  # day name, Sunday first
    orders: int
    total: Money


class WeeklySalesEntry(CamelModel):
    period: str
    orders: int
    total: Money
    cancelled_orders: int
    cancelled_total: Money


class MonthlySalesEntry(CamelModel):
    month: int
    order_count: int
    total: Money


class YearlySalesEntry(CamelModel):
    period: str
    orders: int
    total: Money
    cancelled_orders: int
    cancelled_total: Money


class SalesDataResponse(CamelModel):
    period_sales: Money
    total_quantity: int
    total_orders: int
    total_customers: int


# Line-level drill-downs
class OrderDetail(BaseModel):
    order_date: datetime.datetime
    full_name: str
    product_name: str
    quantity: int
    price: Money
    image_url: Optional[str] = None


class ProductDetail(OrderDetail):
    total_amount: Money


class ProductDetailsResponse(CamelModel):
    total_sales: Money
    products: List[ProductDetail]


# Catalog counters
class RatedProductsCountResponse(CamelModel):
    rated_products_count: int


class TotalProductsResponse(CamelModel):
    total_products: int


class TotalStockResponse(CamelModel):
    total_stock: int


# Product analytics
class ProductAnalyticsItem(BaseModel):
    public_id: str
    name: str
    description: Optional[str] = None
    price: Money
    image_url: Optional[str] = None
    category: Optional[str] = None
    current_stock: int
    avg_rating: Money
    order_count: int
    is_saleable: bool


class ProductAnalyticsResponse(CamelModel):
    saleable_products: List[ProductAnalyticsItem]
    non_saleable_products: List[ProductAnalyticsItem]
    total_products: int
    saleable_count: int
    non_saleable_count: int


class ProductPerformanceItem(BaseModel):
    public_id: str
    name: str
    description: Optional[str] = None
    price: Money
    image_url: Optional[str] = None
    category: Optional[str] = None
    total_orders: int
    total_units_sold: int
    recent_sales: int
    average_rating: Money
    rating_count: int
    current_stock: int
    stock_id: Optional[str] = None
    latest_rating_date: Optional[datetime.datetime] = None
    returned_count: int


class ProductPerformanceResponse(CamelModel):
    performance: List[ProductPerformanceItem]
    saleable_products: List[ProductPerformanceItem]
    non_saleable_products: List[ProductPerformanceItem]
    rated_products: List[ProductPerformanceItem]
