"""Product saleability and performance tiers.

A product is saleable when it has been ordered at least once, its average
rating is at least 3.5 and it has stock. Performance tiers are computed
independently of each other, so one product may be both a top and a low
performer: lifetime demand and recent demand are different questions.
"""
import datetime
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..orders.models import OrderStatus
from .filters import counts_toward_units_sold
from .records import ProductOrderLineRecord, ProductRecord, RatingRecord, StockRecord

logger = logging.getLogger(__name__)

SALEABLE_MIN_AVERAGE_RATING = Decimal("3.5")
TOP_PERFORMER_MIN_UNITS = 8  # exclusive
LOW_PERFORMER_RECENT_UNITS = (1, 3)  # inclusive
PERFORMANCE_WINDOW_DAYS = 14
RECENT_RATING_WINDOW_DAYS = 7


@dataclass(frozen=True)
class ProductStats:
    product: ProductRecord
    order_count: int = 0
    total_units_sold: int = 0
    recent_sales: int = 0
    average_rating: Decimal = Decimal("0")
    rating_count: int = 0
    current_stock: int = 0
    stock_public_id: Optional[str] = None
    latest_rating_date: Optional[datetime.datetime] = None
    returned_count: int = 0
    is_saleable: bool = False


@dataclass(frozen=True)
class ProductClassification:
    products: list[ProductStats]
    saleable: list[ProductStats]
    non_saleable: list[ProductStats]
    top_performers: list[ProductStats]
    low_performers: list[ProductStats]
    recently_rated: list[ProductStats]


def is_saleable(order_count: int, average_rating: Decimal, current_stock: int) -> bool:
    # Compared unrounded: 3.49 stays below the threshold
    return (
        order_count > 0
        and average_rating >= SALEABLE_MIN_AVERAGE_RATING
        and current_stock > 0
    )


def is_top_performer(stats: ProductStats) -> bool:
    return stats.total_units_sold > TOP_PERFORMER_MIN_UNITS


def is_low_performer(stats: ProductStats) -> bool:
    low, high = LOW_PERFORMER_RECENT_UNITS
    return stats.current_stock > 0 and low <= stats.recent_sales <= high


def _average(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return Decimal("0")
    return sum(values, Decimal("0")) / len(values)


def classify(
    products: Iterable[ProductRecord],
    order_lines: Iterable[ProductOrderLineRecord],
    ratings: Iterable[RatingRecord],
    stocks: Iterable[StockRecord],
    *,
    now: datetime.datetime,
    window_days: int = PERFORMANCE_WINDOW_DAYS,
    rated_window_days: int = RECENT_RATING_WINDOW_DAYS,
) -> ProductClassification:
    """Work out per-product statistics and sort the catalog into tiers.

    Args:
        products: Active (non-deleted) products in query order. The order is
            kept wherever two products tie.
        order_lines: Order lines for those products, any order status.
        ratings: Ratings for those products.
        stocks: Stock rows; a product without one has zero stock.
        now: Current instant (aware). Both trailing windows end here.
        window_days: Length of the recent-sales window.
        rated_window_days: Length of the recently-rated window.

    Returns:
        The statistics for every product plus each tier. Top performers are
        ranked by lifetime units and low performers by recent units, both
        descending.
    """
    sales_since = now - datetime.timedelta(days=window_days)
    rated_since = now - datetime.timedelta(days=rated_window_days)

    orders_by_product = defaultdict(set)
    returned_by_product = defaultdict(set)
    units_by_product = defaultdict(int)
    recent_by_product = defaultdict(int)
    for line in order_lines:
        orders_by_product[line.product_id].add(line.order_id)
        if line.order_status is OrderStatus.RETURNED:
            returned_by_product[line.product_id].add(line.order_id)
        if not counts_toward_units_sold(line.order_status):
            continue
        units_by_product[line.product_id] += line.quantity
        if line.order_date >= sales_since:
            recent_by_product[line.product_id] += line.quantity

    ratings_by_product = defaultdict(list)
    for rating in ratings:
        ratings_by_product[rating.product_id].append(rating)

    stock_by_product = {stock.product_id: stock for stock in stocks}

    all_stats = []
    for product in products:
        product_ratings = ratings_by_product.get(product.id, [])
        stock = stock_by_product.get(product.id)
        order_count = len(orders_by_product.get(product.id, ()))
        average_rating = _average([r.rating for r in product_ratings])
        current_stock = stock.quantity if stock else 0
        all_stats.append(ProductStats(
            product=product,
            order_count=order_count,
            total_units_sold=units_by_product.get(product.id, 0),
            recent_sales=recent_by_product.get(product.id, 0),
            average_rating=average_rating,
            rating_count=len(product_ratings),
            current_stock=current_stock,
            stock_public_id=stock.public_id if stock else None,
            latest_rating_date=max((r.created_at for r in product_ratings), default=None),
            returned_count=len(returned_by_product.get(product.id, ())),
            is_saleable=is_saleable(order_count, average_rating, current_stock),
        ))

    top = sorted(
        (s for s in all_stats if is_top_performer(s)),
        key=lambda s: s.total_units_sold,
        reverse=True,
    )
    low = sorted(
        (s for s in all_stats if is_low_performer(s)),
        key=lambda s: s.recent_sales,
        reverse=True,
    )
    rated = [
        s for s in all_stats
        if s.latest_rating_date is not None and s.latest_rating_date >= rated_since
    ]
    logger.debug(
        f"Classified {len(all_stats)} products: {len(top)} top, {len(low)} low, {len(rated)} recently rated"
    )

    return ProductClassification(
        products=all_stats,
        saleable=[s for s in all_stats if s.is_saleable],
        non_saleable=[s for s in all_stats if not s.is_saleable],
        top_performers=top,
        low_performers=low,
        recently_rated=rated,
    )
