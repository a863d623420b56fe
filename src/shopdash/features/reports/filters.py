"""Business rules deciding what an order counts toward in the reports.

- Sales revenue and units sold: ``Delivered`` orders still included in the
  sales report.
- Cancelled total: ``Cancelled`` orders, whatever the inclusion flag says.
- Raw order count and distinct customers: every order in the queried range.
- Returns view: ``Returned``, ``Refunded`` and ``Return Cancelled`` orders.

Sales and cancelled are disjoint by construction, and so are sales and returns.
"""
import enum

from ..orders.models import OrderStatus, RETURN_STATUSES
from .records import OrderRecord


class Contribution(str, enum.Enum):
    SALES = "sales"
    CANCELLED = "cancelled"
    ORDER_COUNT = "order_count"
    CUSTOMER_COUNT = "customer_count"
    RETURNS = "returns"


def counts_toward_sales(status: OrderStatus, in_sales_report: bool) -> bool:
    return status is OrderStatus.DELIVERED and bool(in_sales_report)


def counts_toward_cancelled(status: OrderStatus) -> bool:
    return status is OrderStatus.CANCELLED


def is_return(status: OrderStatus) -> bool:
    return status in RETURN_STATUSES


def counts_toward_units_sold(status: OrderStatus) -> bool:
    """Product demand (performance tiers) counts every order that was not cancelled."""
    return status is not OrderStatus.CANCELLED


def classify_order(order: OrderRecord) -> frozenset[Contribution]:
    """Everything ``order`` contributes to, assuming it lies in the queried range."""
    contributions = {Contribution.ORDER_COUNT, Contribution.CUSTOMER_COUNT}
    if counts_toward_sales(order.status, order.in_sales_report):
        contributions.add(Contribution.SALES)
    if counts_toward_cancelled(order.status):
        contributions.add(Contribution.CANCELLED)
    if is_return(order.status):
        contributions.add(Contribution.RETURNS)
    return frozenset(contributions)
