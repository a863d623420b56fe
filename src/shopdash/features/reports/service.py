"""
Reports Service Module

Builds the dashboard reports: sales over time at four granularities, single-day
and current-period drill-downs, product saleability and performance tiers, and
a few catalog counters.

Every function takes the ``ReportRepository`` to read from and an optional
``now`` (aware, any offset) so that "today" can be pinned in tests. Dates in
query parameters are display-local; they are turned into UTC bounds here and
unparseable values fall back to the current period rather than failing.
"""

import contextlib
import datetime
import logging
from typing import List, Optional

from fastapi import HTTPException, status

from ...common.schemas import to_money
from ...core.timezone import display_now, local_day_bounds, local_range_bounds, to_display
from .aggregator import aggregate, sales_lines, summarize, total_amount
from .classifier import ProductStats, classify
from .periods import (
    Granularity, RatingWindow, current_period, expected_periods,
    resolve_date, resolve_year, span,
)
from .records import SaleLineRecord
from .repository import ReportRepository
from .schemas import (
    DailySalesEntry, WeeklySalesEntry, MonthlySalesEntry, YearlySalesEntry,
    SalesDataResponse, OrderDetail, ProductDetail, ProductDetailsResponse,
    RatedProductsCountResponse, TotalProductsResponse, TotalStockResponse,
    ProductAnalyticsItem, ProductAnalyticsResponse,
    ProductPerformanceItem, ProductPerformanceResponse,
)

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _store_errors(what: str):
    """Turn any failure while reading ``what`` into an opaque 500."""
    try:
        yield
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching {what}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching {what}",
        )


async def _bucketed_orders(
    repo: ReportRepository,
    granularity: Granularity,
    now: Optional[datetime.datetime],
    what: str,
    year: Optional[int] = None,
):
    periods = expected_periods(granularity, display_now(now).date(), year=year)
    start, end = local_range_bounds(*span(periods))
    with _store_errors(what):
        orders = await repo.orders_between(start, end)
    return aggregate(granularity, periods, orders)


async def get_daily_sales(
    repo: ReportRepository, now: Optional[datetime.datetime] = None
) -> List[DailySalesEntry]:
    """Sales for each day of the current Sunday-to-Saturday week."""
    buckets = await _bucketed_orders(repo, Granularity.DAILY, now, "daily sales data")
    return [
        DailySalesEntry(period=b.period.label, orders=b.orders, total=b.revenue)
        for b in buckets
    ]


async def get_weekly_sales(
    repo: ReportRepository, now: Optional[datetime.datetime] = None
) -> List[WeeklySalesEntry]:
    """Sales and cancellations for the last seven ISO weeks, oldest first."""
    buckets = await _bucketed_orders(repo, Granularity.WEEKLY, now, "weekly sales data")
    return [
        WeeklySalesEntry(
            period=b.period.label,
            orders=b.orders,
            total=b.revenue,
            cancelled_orders=b.cancelled_orders,
            cancelled_total=b.cancelled_total,
        )
        for b in buckets
    ]


async def get_monthly_sales(
    repo: ReportRepository,
    year: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> List[MonthlySalesEntry]:
    """Sales for the twelve months of ``year``.

    Args:
        repo: Data source.
        year: Raw query value; anything that is not a usable year means the
            current one.
        now: Overrides the current instant.
    """
    report_year = resolve_year(year, display_now(now).date())
    buckets = await _bucketed_orders(
        repo, Granularity.MONTHLY, now, "monthly sales data", year=report_year
    )
    return [
        MonthlySalesEntry(month=b.period.key[1], order_count=b.orders, total=b.revenue)
        for b in buckets
    ]


async def get_yearly_sales(
    repo: ReportRepository, now: Optional[datetime.datetime] = None
) -> List[YearlySalesEntry]:
    buckets = await _bucketed_orders(repo, Granularity.YEARLY, now, "yearly sales data")
    return [
        YearlySalesEntry(
            period=b.period.label,
            orders=b.orders,
            total=b.revenue,
            cancelled_orders=b.cancelled_orders,
            cancelled_total=b.cancelled_total,
        )
        for b in buckets
    ]


async def get_sales_data(
    repo: ReportRepository,
    date: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> SalesDataResponse:
    """Headline figures for one display-local day (default today).

    ``total_orders`` and ``total_customers`` count every order placed that day,
    whatever its status; only the sales and quantity figures apply the sales rule.
    """
    day = resolve_date(date, display_now(now).date())
    start, end = local_day_bounds(day)
    with _store_errors("sales data"):
        orders = await repo.orders_between(start, end)
    summary = summarize(orders)
    return SalesDataResponse(
        period_sales=summary.period_sales,
        total_quantity=summary.total_quantity,
        total_orders=summary.total_orders,
        total_customers=summary.total_customers,
    )


def _to_order_detail(line: SaleLineRecord) -> OrderDetail:
    return OrderDetail(
        order_date=to_display(line.order_date),
        full_name=line.full_name,
        product_name=line.product_name,
        quantity=line.quantity,
        price=line.price,
        image_url=line.image_url,
    )


async def get_order_details(
    repo: ReportRepository,
    date: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> List[OrderDetail]:
    """Products sold on one display-local day, newest order first."""
    day = resolve_date(date, display_now(now).date())
    start, end = local_day_bounds(day)
    with _store_errors("order details"):
        lines = await repo.sale_lines_between(start, end)
    return [_to_order_detail(line) for line in sales_lines(lines)]


async def get_product_details(
    repo: ReportRepository,
    timeframe: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> ProductDetailsResponse:
    """Products sold in the current day, week, month or year.

    ``totalSales`` is the sum of quantity times purchase price over the listed
    lines. An unknown timeframe is treated as "daily".
    """
    granularity = Granularity.parse(timeframe, Granularity.DAILY)
    period = current_period(granularity, display_now(now).date())
    start, end = local_range_bounds(period.start, period.end)
    with _store_errors("product details"):
        lines = sales_lines(await repo.sale_lines_between(start, end))
    products = [
        ProductDetail(
            **_to_order_detail(line).model_dump(),
            total_amount=to_money(line.extended_amount),
        )
        for line in lines
    ]
    return ProductDetailsResponse(total_sales=total_amount(lines), products=products)


async def get_rated_products_count(
    repo: ReportRepository,
    time_frame: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> RatedProductsCountResponse:
    window = RatingWindow.parse(time_frame)
    first_day, last_day = window.days(display_now(now).date())
    start, end = local_range_bounds(first_day, last_day)
    with _store_errors("rated products count"):
        count = await repo.rated_product_count(start, end)
    return RatedProductsCountResponse(rated_products_count=count)


async def get_total_products(repo: ReportRepository) -> TotalProductsResponse:
    with _store_errors("total products"):
        count = await repo.active_product_count()
    return TotalProductsResponse(total_products=count)


async def get_total_stock(repo: ReportRepository) -> TotalStockResponse:
    with _store_errors("total stock"):
        total = await repo.total_stock()
    return TotalStockResponse(total_stock=total)


async def _classified_catalog(repo: ReportRepository, now: Optional[datetime.datetime], what: str):
    with _store_errors(what):
        facts = await repo.product_facts()
    return classify(
        facts.products, facts.order_lines, facts.ratings, facts.stocks, now=display_now(now)
    )


def _to_analytics_item(stats: ProductStats) -> ProductAnalyticsItem:
    product = stats.product
    return ProductAnalyticsItem(
        public_id=product.public_id,
        name=product.name,
        description=product.description,
        price=product.price,
        image_url=product.image_url,
        category=product.category,
        current_stock=stats.current_stock,
        avg_rating=to_money(stats.average_rating),
        order_count=stats.order_count,
        is_saleable=stats.is_saleable,
    )


async def get_product_analytics(
    repo: ReportRepository, now: Optional[datetime.datetime] = None
) -> ProductAnalyticsResponse:
    """Split the active catalog into saleable and non-saleable products."""
    result = await _classified_catalog(repo, now, "product analytics")
    saleable = [_to_analytics_item(s) for s in result.saleable]
    non_saleable = [_to_analytics_item(s) for s in result.non_saleable]
    return ProductAnalyticsResponse(
        saleable_products=saleable,
        non_saleable_products=non_saleable,
        total_products=len(result.products),
        saleable_count=len(saleable),
        non_saleable_count=len(non_saleable),
    )


def _to_performance_item(stats: ProductStats) -> ProductPerformanceItem:
    product = stats.product
    return ProductPerformanceItem(
        public_id=product.public_id,
        name=product.name,
        description=product.description,
        price=product.price,
        image_url=product.image_url,
        category=product.category,
        total_orders=stats.order_count,
        total_units_sold=stats.total_units_sold,
        recent_sales=stats.recent_sales,
        average_rating=to_money(stats.average_rating),
        rating_count=stats.rating_count,
        current_stock=stats.current_stock,
        stock_id=stats.stock_public_id,
        latest_rating_date=(
            to_display(stats.latest_rating_date) if stats.latest_rating_date else None
        ),
        returned_count=stats.returned_count,
    )


async def get_product_performance(
    repo: ReportRepository, now: Optional[datetime.datetime] = None
) -> ProductPerformanceResponse:
    """Performance tiers of the active catalog.

    The response keeps the dashboard's key names: ``saleableProducts`` holds the
    top performers and ``nonSaleableProducts`` the low performers. A product
    can appear in both.
    """
    result = await _classified_catalog(repo, now, "product performance")
    performance = sorted(result.products, key=lambda s: s.total_units_sold, reverse=True)
    return ProductPerformanceResponse(
        performance=[_to_performance_item(s) for s in performance],
        saleable_products=[_to_performance_item(s) for s in result.top_performers],
        non_saleable_products=[_to_performance_item(s) for s in result.low_performers],
        rated_products=[_to_performance_item(s) for s in result.recently_rated],
    )
