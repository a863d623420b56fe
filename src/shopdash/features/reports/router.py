import logging
from fastapi import APIRouter, Depends, Query
from typing import Annotated, List, Optional

from ..auth.security import get_current_admin
from .repository import ReportRepository, get_report_repository
from .schemas import (
    DailySalesEntry, WeeklySalesEntry, MonthlySalesEntry, YearlySalesEntry,
    SalesDataResponse, OrderDetail, ProductDetailsResponse,
    RatedProductsCountResponse, TotalProductsResponse, TotalStockResponse,
    ProductAnalyticsResponse, ProductPerformanceResponse,
)
from . import service as report_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    # Every dashboard report is admin-only
    dependencies=[Depends(get_current_admin)],
)

Repository = Annotated[ReportRepository, Depends(get_report_repository)]

# Query values are plain strings on purpose: a bad year, date or timeframe
# falls back to the current period instead of a 422.


@router.get("/daily-sales", response_model=List[DailySalesEntry])
async def get_daily_sales(repo: Repository):
    return await report_service.get_daily_sales(repo)


@router.get("/weekly-sales", response_model=List[WeeklySalesEntry])
async def get_weekly_sales(repo: Repository):
    return await report_service.get_weekly_sales(repo)


@router.get("/monthly-sales", response_model=List[MonthlySalesEntry])
async def get_monthly_sales(
    repo: Repository,
    year: Optional[str] = Query(None, description="Four digit year, defaults to the current year"),
):
    return await report_service.get_monthly_sales(repo, year=year)


@router.get("/yearly-sales", response_model=List[YearlySalesEntry])
async def get_yearly_sales(repo: Repository):
    return await report_service.get_yearly_sales(repo)


@router.get("/sales-data", response_model=SalesDataResponse)
async def get_sales_data(
    repo: Repository,
    date: Optional[str] = Query(None, description="Display-local date (YYYY-MM-DD), defaults to today"),
):
    return await report_service.get_sales_data(repo, date=date)


@router.get("/order-details", response_model=List[OrderDetail])
async def get_order_details(
    repo: Repository,
    date: Optional[str] = Query(None, description="Display-local date (YYYY-MM-DD), defaults to today"),
):
    return await report_service.get_order_details(repo, date=date)


@router.get("/product-details", response_model=ProductDetailsResponse)
async def get_product_details(
    repo: Repository,
    timeframe: Optional[str] = Query(None, description="daily, weekly, monthly or yearly"),
):
    return await report_service.get_product_details(repo, timeframe=timeframe)


@router.get("/rated-products-count", response_model=RatedProductsCountResponse)
async def get_rated_products_count(
    repo: Repository,
    time_frame: Optional[str] = Query(
        None, alias="timeFrame", description="today, yesterday, lastWeek or lastMonth"
    ),
):
    return await report_service.get_rated_products_count(repo, time_frame=time_frame)


@router.get("/total-products", response_model=TotalProductsResponse)
async def get_total_products(repo: Repository):
    return await report_service.get_total_products(repo)


@router.get("/total-stock", response_model=TotalStockResponse)
async def get_total_stock(repo: Repository):
    return await report_service.get_total_stock(repo)


@router.get("/product-analytics", response_model=ProductAnalyticsResponse)
async def get_product_analytics(repo: Repository):
    return await report_service.get_product_analytics(repo)


@router.get("/product-performance", response_model=ProductPerformanceResponse)
async def get_product_performance(repo: Repository):
    return await report_service.get_product_performance(repo)
