from fastapi import APIRouter, Depends
from typing import List

from ..auth.security import get_current_admin

from .schemas import (
    OrderSummary, ReturnRequest, OrderProduct, OrderStatusUpdate,
    OrderDateUpdate, OrderStatusResponse, OrderDateResponse, OrderMessageResponse,
)
from . import service

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    dependencies=[Depends(get_current_admin)],
    responses={404: {"description": "Order not found"}},
)


@router.get("/", response_model=List[OrderSummary])
async def list_orders():
    return await service.list_sales_report_orders()


@router.get("/return-requests", response_model=List[ReturnRequest])
async def list_return_requests():
    return await service.list_return_requests()


@router.get("/{order_public_id}/products", response_model=List[OrderProduct])
async def get_order_products(order_public_id: str):
    return await service.get_order_products(order_public_id)


@router.put("/{order_public_id}/status", response_model=OrderStatusResponse)
async def update_order_status(order_public_id: str, status_in: OrderStatusUpdate):
    return await service.update_order_status(order_public_id, status_in.status)


@router.put("/{order_public_id}/cancel", response_model=OrderMessageResponse)
async def cancel_order(order_public_id: str):
    await service.cancel_order(order_public_id)
    return {"message": "Order cancelled successfully"}


@router.put("/{order_public_id}", response_model=OrderDateResponse)
async def update_order_date(order_public_id: str, date_in: OrderDateUpdate):
    return await service.update_order_date(order_public_id, date_in)


@router.delete("/{order_public_id}/salesreport", response_model=OrderMessageResponse)
async def remove_order_from_sales_report(order_public_id: str):
    await service.remove_from_sales_report(order_public_id)
    return {"message": "Order removed from sales report successfully"}
