import datetime
from decimal import Decimal

import httpx

from shopdash.features.inventory.models import Product
from shopdash.features.orders.models import Order, OrderFeedback, OrderItem, OrderStatus

UTC = datetime.timezone.utc


async def setup_test_order(
    order_date: datetime.datetime = datetime.datetime(2024, 3, 1, 2, 30, tzinfo=UTC),
    status: OrderStatus = OrderStatus.DELIVERED,
    **kwargs,
) -> Order:
    # Helper to create an order with two lines
    product = await Product.create(name="Mug", price=Decimal("7.50"), image_url="https://cdn.example.com/mug.png")
    tea = await Product.create(name="Tea", price=Decimal("4.00"))
    order = await Order.create(
        customer_id=42,
        full_name="Grace Buyer",
        status=status,
        order_date=order_date,
        subtotal=Decimal("19.00"),
        delivery_fee=Decimal("5.00"),
        **kwargs,
    )
    await OrderItem.create(order=order, product=product, name="Mug", quantity=2, price=Decimal("7.50"))
    await OrderItem.create(order=order, product=tea, name="Tea", quantity=1, price=Decimal("4.00"))
    return order


async def test_orders_require_admin(client: httpx.AsyncClient):
    response = await client.get("/api/v1/orders/")
    assert response.status_code == 401


async def test_total_is_subtotal_plus_delivery_fee():
    order = await setup_test_order()
    assert order.total == Decimal("24.00")

    order.delivery_fee = Decimal("2.50")
    await order.save(update_fields=["delivery_fee"])
    await order.refresh_from_db()
    assert order.total == Decimal("21.50")


async def test_list_orders_in_display_time(admin_client: httpx.AsyncClient):
    older = await setup_test_order()
    newer = await setup_test_order(order_date=datetime.datetime(2024, 3, 2, 2, 30, tzinfo=UTC))
    await setup_test_order(in_sales_report=False)

    response = await admin_client.get("/api/v1/orders/")
    assert response.status_code == 200, response.text
    data = response.json()

    assert [o["public_id"] for o in data] == [newer.public_id, older.public_id]
    assert data[1]["order_date"].startswith("2024-03-01T10:30:00")
    assert data[1]["total"] == 24.0
    assert data[1]["ordered_products"] == "Mug (2), Tea (1)"


async def test_get_order_products(admin_client: httpx.AsyncClient):
    order = await setup_test_order()
    response = await admin_client.get(f"/api/v1/orders/{order.public_id}/products")
    assert response.status_code == 200, response.text
    data = response.json()
    assert [(p["name"], p["quantity"], p["price"]) for p in data] == [("Mug", 2, 7.5), ("Tea", 1, 4.0)]
    assert data[0]["image_url"] == "https://cdn.example.com/mug.png"


async def test_unknown_order_is_404(admin_client: httpx.AsyncClient):
    response = await admin_client.get("/api/v1/orders/nonexistent/products")
    assert response.status_code == 404
    assert response.json()["detail"] == "Order not found"

    response = await admin_client.put("/api/v1/orders/nonexistent/cancel")
    assert response.status_code == 404


async def test_update_status_and_cancel(admin_client: httpx.AsyncClient):
    order = await setup_test_order(status=OrderStatus.PENDING)

    response = await admin_client.put(
        f"/api/v1/orders/{order.public_id}/status", json={"status": "Shipped"}
    )
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "Shipped"
    await order.refresh_from_db()
    assert order.status == OrderStatus.SHIPPED

    response = await admin_client.put(f"/api/v1/orders/{order.public_id}/cancel")
    assert response.status_code == 200
    await order.refresh_from_db()
    assert order.status == OrderStatus.CANCELLED


async def test_invalid_status_is_rejected(admin_client: httpx.AsyncClient):
    order = await setup_test_order()
    response = await admin_client.put(
        f"/api/v1/orders/{order.public_id}/status", json={"status": "Lost"}
    )
    assert response.status_code == 422


async def test_update_order_date_round_trips_display_time(admin_client: httpx.AsyncClient):
    order = await setup_test_order()
    response = await admin_client.put(
        f"/api/v1/orders/{order.public_id}", json={"order_date": "2024-04-10T09:15:00"}
    )
    assert response.status_code == 200, response.text
    assert response.json()["updated_date"].startswith("2024-04-10T09:15:00")

    await order.refresh_from_db()
    assert order.order_date == datetime.datetime(2024, 4, 10, 1, 15, tzinfo=UTC)


async def test_remove_from_sales_report(admin_client: httpx.AsyncClient):
    order = await setup_test_order()
    response = await admin_client.delete(f"/api/v1/orders/{order.public_id}/salesreport")
    assert response.status_code == 200, response.text
    await order.refresh_from_db()
    assert order.in_sales_report is False

    listed = (await admin_client.get("/api/v1/orders/")).json()
    assert order.public_id not in [o["public_id"] for o in listed]


async def test_return_requests_put_returned_first(admin_client: httpx.AsyncClient):
    refunded = await setup_test_order(status=OrderStatus.REFUNDED)
    returned_old = await setup_test_order(status=OrderStatus.RETURNED)
    returned_new = await setup_test_order(status=OrderStatus.RETURNED)
    await setup_test_order(status=OrderStatus.DELIVERED)

    await OrderFeedback.create(
        order=refunded, feedback="Arrived broken", created_at=datetime.datetime(2024, 3, 9, tzinfo=UTC)
    )
    await OrderFeedback.create(
        order=returned_old, feedback="Wrong size", created_at=datetime.datetime(2024, 3, 3, tzinfo=UTC)
    )
    await OrderFeedback.create(
        order=returned_new, feedback="First note", created_at=datetime.datetime(2024, 3, 4, tzinfo=UTC)
    )
    await OrderFeedback.create(
        order=returned_new, feedback="Changed my mind", created_at=datetime.datetime(2024, 3, 5, tzinfo=UTC)
    )

    response = await admin_client.get("/api/v1/orders/return-requests")
    assert response.status_code == 200, response.text
    data = response.json()

    assert [r["public_id"] for r in data] == [
        returned_new.public_id, returned_old.public_id, refunded.public_id,
    ]
    assert data[0]["feedback"] == "Changed my mind"
    assert data[0]["ordered_products"] == "• Mug (2)\n• Tea (1)"
