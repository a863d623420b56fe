"""Typed rows handed from the data-access layer to the report engine.

The store hands back strings, floats and naive datetimes depending on the
backend. These models pin each value to one type at the boundary: counts are
``int``, money is a 2dp ``Decimal`` and timestamps are aware UTC datetimes.
The aggregation and classification code never coerces anything itself.
"""
import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict

from ...common.schemas import to_money
from ..orders.models import OrderStatus


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


Cents = Annotated[Decimal, BeforeValidator(to_money)]
UtcDatetime = Annotated[datetime.datetime, AfterValidator(_as_utc)]


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class OrderLineRecord(Record):
    product_id: int
    quantity: int
    price: Cents

    @property
    def extended_amount(self) -> Decimal:
        return self.quantity * self.price


class OrderRecord(Record):
    id: int
    customer_id: int
    status: OrderStatus
    order_date: UtcDatetime
    in_sales_report: bool
    subtotal: Cents
    delivery_fee: Cents
    total: Cents
    lines: tuple[OrderLineRecord, ...] = ()

    @property
    def units(self) -> int:
        return sum(line.quantity for line in self.lines)


class SaleLineRecord(Record):
    """One ordered product joined with its order and current product data."""

    order_id: int
    order_date: UtcDatetime
    full_name: str
    status: OrderStatus
    in_sales_report: bool
    product_name: str
    quantity: int
    price: Cents
    image_url: Optional[str] = None

    @property
    def extended_amount(self) -> Decimal:
        return self.quantity * self.price


class ProductRecord(Record):
    id: int
    public_id: str
    name: str
    description: Optional[str] = None
    price: Cents
    image_url: Optional[str] = None
    category: Optional[str] = None


class ProductOrderLineRecord(Record):
    """An order line reduced to what product classification needs."""

    product_id: int
    order_id: int
    order_status: OrderStatus
    order_date: UtcDatetime
    quantity: int


class RatingRecord(Record):
    id: int
    product_id: int
    rating: Decimal
    created_at: UtcDatetime


class StockRecord(Record):
    public_id: str
    product_id: int
    quantity: int


class ProductFacts(Record):
    """Everything known about the active catalog, in query order."""

    products: tuple[ProductRecord, ...] = ()
    order_lines: tuple[ProductOrderLineRecord, ...] = ()
    ratings: tuple[RatingRecord, ...] = ()
    stocks: tuple[StockRecord, ...] = ()
