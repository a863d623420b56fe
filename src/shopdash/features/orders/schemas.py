from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import datetime

from ...common.schemas import Money
from .models import OrderStatus


class OrderSummary(BaseModel):
    """An order as listed on the dashboard; ``order_date`` is in display time."""

    public_id: str
    customer_id: int
    full_name: str
    phone_number: Optional[str] = None
    delivery_address: Optional[str] = None
    payment_method: Optional[str] = None
    tracking_number: Optional[str] = None
    status: OrderStatus
    order_date: datetime.datetime
    in_sales_report: bool
    subtotal: Money
    delivery_fee: Money
    total: Money
    ordered_products: Optional[str] = Field(None, description="e.g. 'Mug (2), Tea (1)'")


class ReturnRequest(BaseModel):
    public_id: str
    customer_id: int
    full_name: str
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    postal_code: Optional[str] = None
    delivery_address: Optional[str] = None
    payment_method: Optional[str] = None
    subtotal: Money
    delivery_fee: Money
    total: Money
    order_date: datetime.datetime
    tracking_number: Optional[str] = None
    status: OrderStatus
    in_sales_report: bool
    is_rated: bool
    feedback: Optional[str] = None
    feedback_created_at: Optional[datetime.datetime] = None
    ordered_products: Optional[str] = None


class OrderProduct(BaseModel):
    product_public_id: str
    name: str
    image_url: Optional[str] = None
    quantity: int
    price: Money

    model_config = ConfigDict(protected_namespaces=())


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderDateUpdate(BaseModel):
    order_date: datetime.datetime = Field(
        ..., description="New order date in display time; an offset, if given, is honoured"
    )


class OrderStatusResponse(BaseModel):
    message: str
    status: OrderStatus


class OrderDateResponse(BaseModel):
    message: str
    updated_date: datetime.datetime


class OrderMessageResponse(BaseModel):
    message: str

