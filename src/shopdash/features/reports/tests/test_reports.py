import datetime
from decimal import Decimal

import httpx

from shopdash.core.timezone import display_today, to_storage
from shopdash.features.inventory.models import Product, ProductRating, Stock
from shopdash.features.orders.models import Order, OrderItem, OrderStatus
from shopdash.features.reports.periods import DAY_NAMES

UTC = datetime.timezone.utc


async def create_product(name: str = "Desk Lamp", price: str = "25.00", stock: int = 5, **kwargs) -> Product:
    product = await Product.create(name=name, price=Decimal(price), **kwargs)
    if stock is not None:
        await Stock.create(product=product, quantity=stock)
    return product


async def create_order(
    order_date: datetime.datetime,
    lines=(),
    status: str = "Delivered",
    subtotal: str = "100.00",
    delivery_fee: str = "0.00",
    customer_id: int = 1,
    in_sales_report: bool = True,
) -> Order:
    order = await Order.create(
        customer_id=customer_id,
        full_name="Grace Buyer",
        status=OrderStatus(status),
        order_date=order_date,
        in_sales_report=in_sales_report,
        subtotal=Decimal(subtotal),
        delivery_fee=Decimal(delivery_fee),
    )
    for product, quantity, price in lines:
        await OrderItem.create(
            order=order, product=product, name=product.name, quantity=quantity, price=Decimal(price)
        )
    return order


def display_at(day: datetime.date, hour: int) -> datetime.datetime:
    """UTC instant of ``hour`` o'clock display time on ``day``."""
    return to_storage(datetime.datetime.combine(day, datetime.time(hour)))


async def test_reports_require_admin(client: httpx.AsyncClient):
    response = await client.get("/api/v1/reports/daily-sales")
    assert response.status_code == 401


async def test_report_lengths_are_fixed_without_data(admin_client: httpx.AsyncClient):
    expected = {"daily-sales": 7, "weekly-sales": 7, "monthly-sales": 12, "yearly-sales": 5}
    for report, length in expected.items():
        response = await admin_client.get(f"/api/v1/reports/{report}")
        assert response.status_code == 200, response.text
        assert len(response.json()) == length


async def test_daily_sales_exclude_delivery_fee(admin_client: httpx.AsyncClient):
    now = datetime.datetime.now(UTC)
    product = await create_product()
    order = await create_order(
        now, lines=[(product, 2, "250.00")], subtotal="500.00", delivery_fee="50.00"
    )
    assert order.total == Decimal("550.00")

    response = await admin_client.get("/api/v1/reports/daily-sales")
    assert response.status_code == 200, response.text
    data = response.json()

    assert [entry["period"] for entry in data] == list(DAY_NAMES)
    today_name = DAY_NAMES[(display_today().weekday() + 1) % 7]
    today = next(entry for entry in data if entry["period"] == today_name)
    assert today == {"period": today_name, "orders": 1, "total": 500.0}
    assert sum(entry["orders"] for entry in data) == 1


async def test_weekly_and_yearly_sales_report_cancellations(admin_client: httpx.AsyncClient):
    now = datetime.datetime.now(UTC)
    await create_order(now, subtotal="80.00")
    await create_order(now, status="Cancelled", subtotal="45.50")
    await create_order(now, in_sales_report=False, subtotal="999.00")

    weekly = (await admin_client.get("/api/v1/reports/weekly-sales")).json()
    current_week = weekly[-1]
    assert current_week["period"].startswith("Week ")
    assert current_week["orders"] == 1
    assert current_week["total"] == 80.0
    assert current_week["cancelledOrders"] == 1
    assert current_week["cancelledTotal"] == 45.5

    yearly = (await admin_client.get("/api/v1/reports/yearly-sales")).json()
    this_year = str(display_today().year)
    assert [entry["period"] for entry in yearly][-1] == this_year
    assert yearly[-1]["cancelledTotal"] == 45.5
    assert yearly[0] == {
        "period": str(display_today().year - 4),
        "orders": 0,
        "total": 0.0,
        "cancelledOrders": 0,
        "cancelledTotal": 0.0,
    }


async def test_monthly_sales_zero_fill_empty_months(admin_client: httpx.AsyncClient):
    await create_order(display_at(datetime.date(2023, 2, 10), 12), subtotal="40.00")
    await create_order(display_at(datetime.date(2023, 4, 10), 12), subtotal="60.00")

    response = await admin_client.get("/api/v1/reports/monthly-sales", params={"year": "2023"})
    assert response.status_code == 200, response.text
    data = response.json()

    assert [entry["month"] for entry in data] == list(range(1, 13))
    assert data[1] == {"month": 2, "orderCount": 1, "total": 40.0}
    assert data[2] == {"month": 3, "orderCount": 0, "total": 0.0}
    assert data[3] == {"month": 4, "orderCount": 1, "total": 60.0}


async def test_monthly_sales_with_bad_year_uses_current_year(admin_client: httpx.AsyncClient):
    await create_order(datetime.datetime.now(UTC), subtotal="12.00")
    response = await admin_client.get("/api/v1/reports/monthly-sales", params={"year": "next"})
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 12
    assert sum(entry["total"] for entry in data) == 12.0


async def test_sales_data_for_a_given_day(admin_client: httpx.AsyncClient):
    day = datetime.date(2023, 6, 1)
    product = await create_product()
    await create_order(
        display_at(day, 10), lines=[(product, 3, "100.00")],
        subtotal="300.00", delivery_fee="50.00", customer_id=1,
    )
    await create_order(display_at(day, 11), status="Cancelled", subtotal="20.00", customer_id=2)
    await create_order(display_at(day, 23), status="Pending", subtotal="20.00", customer_id=1)
    await create_order(display_at(datetime.date(2023, 6, 2), 1), subtotal="900.00", customer_id=3)

    response = await admin_client.get("/api/v1/reports/sales-data", params={"date": "2023-06-01"})
    assert response.status_code == 200, response.text
    assert response.json() == {
        "periodSales": 300.0,
        "totalQuantity": 3,
        "totalOrders": 3,
        "totalCustomers": 2,
    }


async def test_order_details_in_display_time(admin_client: httpx.AsyncClient):
    day = datetime.date(2023, 6, 1)
    product = await create_product(name="Teapot", image_url="https://cdn.example.com/teapot.png")
    await create_order(display_at(day, 10), lines=[(product, 2, "15.00")], subtotal="30.00")
    await create_order(display_at(day, 12), lines=[(product, 9, "15.00")], status="Returned")

    response = await admin_client.get("/api/v1/reports/order-details", params={"date": "2023-06-01"})
    assert response.status_code == 200, response.text
    data = response.json()
    assert len(data) == 1
    assert data[0]["product_name"] == "Teapot"
    assert data[0]["quantity"] == 2
    assert data[0]["price"] == 15.0
    assert data[0]["image_url"] == "https://cdn.example.com/teapot.png"
    assert data[0]["order_date"].startswith("2023-06-01T10:00:00")
    assert data[0]["order_date"].endswith("+08:00")


async def test_product_details_for_current_year(admin_client: httpx.AsyncClient):
    now = datetime.datetime.now(UTC)
    mug = await create_product(name="Mug")
    bowl = await create_product(name="Bowl")
    await create_order(now, lines=[(mug, 2, "7.50"), (bowl, 1, "20.00")], subtotal="35.00")
    await create_order(now, lines=[(mug, 4, "7.50")], status="Cancelled", subtotal="30.00")

    response = await admin_client.get("/api/v1/reports/product-details", params={"timeframe": "yearly"})
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["totalSales"] == 35.0
    assert [(p["product_name"], p["total_amount"]) for p in data["products"]] == [("Bowl", 20.0), ("Mug", 15.0)]

    fallback = await admin_client.get("/api/v1/reports/product-details", params={"timeframe": "fortnightly"})
    assert fallback.status_code == 200
    assert fallback.json()["totalSales"] == 35.0


async def test_catalog_counters(admin_client: httpx.AsyncClient):
    lamp = await create_product(stock=5)
    await create_product(name="Chair", stock=7)
    await create_product(name="Retired", stock=100, deleted=True)
    await create_product(name="No stock row", stock=None)
    await ProductRating.create(product=lamp, rating=Decimal("4.0"))

    products = await admin_client.get("/api/v1/reports/total-products")
    assert products.json() == {"totalProducts": 3}
    stock = await admin_client.get("/api/v1/reports/total-stock")
    assert stock.json() == {"totalStock": 12}
    rated = await admin_client.get("/api/v1/reports/rated-products-count", params={"timeFrame": "today"})
    assert rated.json() == {"ratedProductsCount": 1}
    yesterday = await admin_client.get("/api/v1/reports/rated-products-count", params={"timeFrame": "yesterday"})
    assert yesterday.json() == {"ratedProductsCount": 0}


async def test_product_analytics(admin_client: httpx.AsyncClient):
    now = datetime.datetime.now(UTC)
    good = await create_product(name="Good", stock=5)
    unsold = await create_product(name="Unsold", stock=5)
    await create_product(name="Deleted", stock=5, deleted=True)
    await create_order(now, lines=[(good, 1, "25.00")], status="Pending")
    await ProductRating.create(product=good, rating=Decimal("4.0"))
    await ProductRating.create(product=good, rating=Decimal("3.0"))
    await ProductRating.create(product=unsold, rating=Decimal("5.0"))

    response = await admin_client.get("/api/v1/reports/product-analytics")
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["totalProducts"] == 2
    assert data["saleableCount"] == 1
    assert data["nonSaleableCount"] == 1
    saleable = data["saleableProducts"][0]
    assert saleable["name"] == "Good"
    assert saleable["avg_rating"] == 3.5
    assert saleable["order_count"] == 1
    assert saleable["is_saleable"] is True
    assert data["nonSaleableProducts"][0]["name"] == "Unsold"


async def test_product_performance_tiers_may_overlap(admin_client: httpx.AsyncClient):
    now = datetime.datetime.now(UTC)
    busy = await create_product(name="Busy", stock=5)
    quiet = await create_product(name="Quiet", stock=5)
    await create_order(now - datetime.timedelta(days=60), lines=[(busy, 8, "25.00")])
    await create_order(now - datetime.timedelta(days=1), lines=[(busy, 2, "25.00")])
    await create_order(now - datetime.timedelta(days=1), lines=[(quiet, 20, "25.00")], status="Cancelled")
    await ProductRating.create(product=quiet, rating=Decimal("2.0"))

    response = await admin_client.get("/api/v1/reports/product-performance")
    assert response.status_code == 200, response.text
    data = response.json()

    assert [p["name"] for p in data["performance"]] == ["Busy", "Quiet"]
    assert [p["name"] for p in data["saleableProducts"]] == ["Busy"]
    assert [p["name"] for p in data["nonSaleableProducts"]] == ["Busy"]
    assert [p["name"] for p in data["ratedProducts"]] == ["Quiet"]
    busy_stats = data["performance"][0]
    assert busy_stats["total_units_sold"] == 10
    assert busy_stats["recent_sales"] == 2
    assert busy_stats["total_orders"] == 2
    quiet_stats = data["performance"][1]
    assert quiet_stats["total_units_sold"] == 0
    assert quiet_stats["total_orders"] == 1
