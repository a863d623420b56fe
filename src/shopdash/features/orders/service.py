"""Order monitoring: listing, status changes, date edits and sales-report exclusion.

Order timestamps are stored in UTC and leave this module in display time; a
date typed in by the admin is converted back before it is persisted.
"""
import datetime
import logging
from typing import List, Optional

from fastapi import HTTPException, status

from ...core.timezone import to_display, to_storage
from .models import Order, OrderFeedback, OrderItem, OrderStatus, RETURN_STATUSES
from .schemas import (
    OrderSummary, ReturnRequest, OrderProduct, OrderDateUpdate,
    OrderDateResponse, OrderStatusResponse,
)

logger = logging.getLogger(__name__)


async def _get_order(order_public_id: str) -> Order:
    order = await Order.get_or_none(public_id=order_public_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


def _products_summary(items: List[OrderItem], bullet: str = "", separator: str = ", ") -> str:
    return separator.join(f"{bullet}{item.name} ({item.quantity})" for item in items)


def _to_order_summary(order: Order) -> OrderSummary:
    return OrderSummary(
        public_id=order.public_id,
        customer_id=order.customer_id,
        full_name=order.full_name,
        phone_number=order.phone_number,
        delivery_address=order.delivery_address,
        payment_method=order.payment_method,
        tracking_number=order.tracking_number,
        status=order.status,
        order_date=to_display(order.order_date),
        in_sales_report=order.in_sales_report,
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        total=order.total,
        ordered_products=_products_summary(list(order.items)) or None,
    )


async def list_sales_report_orders() -> List[OrderSummary]:
    """Orders still counted in the sales report, newest first."""
    try:
        orders = (
            await Order.filter(in_sales_report=True)
            .prefetch_related("items")
            .order_by("-order_date", "-id")
        )
    except Exception as e:
        logger.error(f"Error fetching orders: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while fetching orders",
        )
    return [_to_order_summary(order) for order in orders]


async def get_order_products(order_public_id: str) -> List[OrderProduct]:
    order = await _get_order(order_public_id)
    items = await OrderItem.filter(order_id=order.id).prefetch_related("product").order_by("id")
    return [
        OrderProduct(
            product_public_id=item.product.public_id,
            name=item.product.name,
            image_url=item.product.image_url,
            quantity=item.quantity,
            price=item.price,
        )
        for item in items
    ]


async def update_order_status(order_public_id: str, new_status: OrderStatus) -> OrderStatusResponse:
    order = await _get_order(order_public_id)
    logger.info(f"Updating order status: {order_public_id} {order.status.value} -> {new_status.value}")
    order.status = new_status
    await order.save(update_fields=["status"])
    return OrderStatusResponse(message="Order status updated successfully", status=new_status)


async def cancel_order(order_public_id: str) -> None:
    order = await _get_order(order_public_id)
    order.status = OrderStatus.CANCELLED
    await order.save(update_fields=["status"])


async def update_order_date(order_public_id: str, date_in: OrderDateUpdate) -> OrderDateResponse:
    """
    Moves an order to a new date entered in display time.

    The value is stored in UTC and echoed back in display time, so re-opening
    the edit form shows exactly what was typed (to the minute).
    """
    order = await _get_order(order_public_id)
    order.order_date = to_storage(date_in.order_date)
    await order.save(update_fields=["order_date"])
    return OrderDateResponse(
        message="Order date updated successfully",
        updated_date=to_display(order.order_date),
    )


async def remove_from_sales_report(order_public_id: str) -> None:
    order = await _get_order(order_public_id)
    order.in_sales_report = False
    await order.save(update_fields=["in_sales_report"])
    logger.info(f"Order {order_public_id} removed from sales report")


async def list_return_requests() -> List[ReturnRequest]:
    """
    Orders in a return/refund state with their most recent feedback.

    ``Returned`` orders come first since they still need action; the rest
    follow by most recent feedback, orders without feedback last.
    """
    try:
        orders = await Order.filter(status__in=list(RETURN_STATUSES)).prefetch_related("items", "feedback")
    except Exception as e:
        logger.error(f"Error fetching return requests: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while fetching return requests",
        )

    requests = []
    for order in orders:
        latest: Optional[OrderFeedback] = max(order.feedback, key=lambda f: f.created_at, default=None)
        requests.append(ReturnRequest(
            public_id=order.public_id,
            customer_id=order.customer_id,
            full_name=order.full_name,
            phone_number=order.phone_number,
            address=order.address,
            city=order.city,
            state_province=order.state_province,
            postal_code=order.postal_code,
            delivery_address=order.delivery_address,
            payment_method=order.payment_method,
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            total=order.total,
            order_date=to_display(order.order_date),
            tracking_number=order.tracking_number,
            status=order.status,
            in_sales_report=order.in_sales_report,
            is_rated=order.is_rated,
            feedback=latest.feedback if latest else None,
            feedback_created_at=to_display(latest.created_at) if latest else None,
            ordered_products=_products_summary(list(order.items), bullet="• ", separator="\n") or None,
        ))

    # Stable sorts: newest feedback first, then Returned ahead of the rest
    oldest = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
    requests.sort(key=lambda r: r.feedback_created_at or oldest, reverse=True)
    requests.sort(key=lambda r: r.status != OrderStatus.RETURNED)
    return requests
