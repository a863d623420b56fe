"""Period aggregation of order records.

``aggregate`` partitions orders by the period their display-local date falls
in, totals each partition and lays the totals over the full period sequence,
so every expected period is present and periods without orders come out as
zeros. Revenue is the order subtotal: delivery fees are never sales.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from ...common.schemas import to_money
from ...core.timezone import to_display
from .filters import Contribution, classify_order, counts_toward_sales
from .periods import Granularity, Period, period_key
from .records import OrderRecord, SaleLineRecord

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PeriodBucket:
    period: Period
    revenue: Decimal = ZERO
    orders: int = 0
    units: int = 0
    cancelled_orders: int = 0
    cancelled_total: Decimal = ZERO


@dataclass(frozen=True)
class SalesSummary:
    period_sales: Decimal
    total_quantity: int
    total_orders: int
    total_customers: int


@dataclass
class _Tally:
    revenue: Decimal = ZERO
    orders: int = 0
    units: int = 0
    cancelled_orders: int = 0
    cancelled_total: Decimal = ZERO
    customers: set = field(default_factory=set)

    def add(self, order: OrderRecord, contributions: frozenset) -> None:
        if Contribution.SALES in contributions:
            self.revenue += order.subtotal
            self.orders += 1
            self.units += order.units
        if Contribution.CANCELLED in contributions:
            self.cancelled_orders += 1
            self.cancelled_total += order.subtotal


def aggregate(
    granularity: Granularity,
    periods: Sequence[Period],
    orders: Iterable[OrderRecord],
) -> list[PeriodBucket]:
    """Total ``orders`` into one bucket per period of ``periods``.

    Args:
        granularity: Granularity the periods were built for.
        periods: The complete expected period sequence, in chronological order.
        orders: Orders read for the range covered by ``periods``. Orders whose
            period is not in ``periods`` are skipped.

    Returns:
        One bucket per period, in the order of ``periods``.
    """
    tallies = {period.key: _Tally() for period in periods}
    dropped = 0
    for order in orders:
        key = period_key(granularity, to_display(order.order_date).date())
        tally = tallies.get(key)
        if tally is None:
            dropped += 1
            continue
        tally.add(order, classify_order(order))
    if dropped:
        logger.debug(f"{dropped} order(s) outside the {granularity.value} report range were skipped")

    return [
        PeriodBucket(
            period=period,
            revenue=to_money(tallies[period.key].revenue),
            orders=tallies[period.key].orders,
            units=tallies[period.key].units,
            cancelled_orders=tallies[period.key].cancelled_orders,
            cancelled_total=to_money(tallies[period.key].cancelled_total),
        )
        for period in periods
    ]


def summarize(orders: Iterable[OrderRecord]) -> SalesSummary:
    """Headline figures for a set of orders from one date range.

    Order and customer counts include every order regardless of status; only
    the sales figures go through the sales rule.
    """
    tally = _Tally()
    order_count = 0
    for order in orders:
        contributions = classify_order(order)
        tally.add(order, contributions)
        if Contribution.ORDER_COUNT in contributions:
            order_count += 1
        if Contribution.CUSTOMER_COUNT in contributions:
            tally.customers.add(order.customer_id)
    return SalesSummary(
        period_sales=to_money(tally.revenue),
        total_quantity=tally.units,
        total_orders=order_count,
        total_customers=len(tally.customers),
    )


def sales_lines(lines: Iterable[SaleLineRecord]) -> list[SaleLineRecord]:
    """Lines of orders that count toward sales, newest order first, then by amount."""
    qualifying = [line for line in lines if counts_toward_sales(line.status, line.in_sales_report)]
    qualifying.sort(key=lambda line: line.extended_amount, reverse=True)
    qualifying.sort(key=lambda line: line.order_date, reverse=True)
    return qualifying


def total_amount(lines: Iterable[SaleLineRecord]) -> Decimal:
    return to_money(sum((line.extended_amount for line in lines), ZERO))
