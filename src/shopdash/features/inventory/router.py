"""API routes for managing products and their stock."""
from fastapi import APIRouter, Response, status, Query, Depends
from typing import Annotated

from .schemas import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    PaginatedProductResponse,
    StockCreate,
    StockUpdate,
    StockResponse,
    PaginatedStockResponse,
)
from . import service

from ..auth.models import Admin
from ..auth.security import get_current_admin

router = APIRouter(
    prefix="/inventory",
    tags=["Products", "Stocks"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/products/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    tags=["Products"],
)
async def create_product(
    product_in: ProductCreate,
    current_admin: Annotated[Admin, Depends(get_current_admin)],
):
    return await service.create_product(product_in)


@router.get(
    "/products/",
    response_model=PaginatedProductResponse,
    summary="List all active products",
    tags=["Products"],
)
async def list_products(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(10, ge=1, le=100, description="Number of products per page"),
):
    return await service.list_products(page, size)


@router.get(
    "/products/{product_public_id}",
    response_model=ProductResponse,
    summary="Get a specific product",
    tags=["Products"],
)
async def get_product(product_public_id: str):
    return await service.get_product(product_public_id)


@router.put(
    "/products/{product_public_id}",
    response_model=ProductResponse,
    summary="Update a product",
    tags=["Products"],
)
async def update_product(
    product_public_id: str,
    product_in: ProductUpdate,
    current_admin: Annotated[Admin, Depends(get_current_admin)],
):
    return await service.update_product(product_public_id, product_in)


@router.delete(
    "/products/{product_public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft delete a product",
    tags=["Products"],
)
async def delete_product(
    product_public_id: str,
    current_admin: Annotated[Admin, Depends(get_current_admin)],
):
    await service.delete_product(product_public_id)
    return None


# --- Stock Endpoints ---
@router.get(
    "/stocks/",
    response_model=PaginatedStockResponse,
    summary="List stock rows",
    tags=["Stocks"],
)
async def list_stocks(
    current_admin: Annotated[Admin, Depends(get_current_admin)],
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
):
    return await service.list_stocks(page, size)


@router.post(
    "/stocks/",
    response_model=StockResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add stock to a product",
    tags=["Stocks"],
)
async def add_stock(
    stock_in: StockCreate,
    response: Response,
    current_admin: Annotated[Admin, Depends(get_current_admin)],
):
    stock, created = await service.add_stock(stock_in)
    if not created:
        response.status_code = status.HTTP_200_OK
    return stock


@router.put(
    "/stocks/{stock_public_id}",
    response_model=StockResponse,
    summary="Set, add to or subtract from a stock row",
    tags=["Stocks"],
)
async def update_stock(
    stock_public_id: str,
    stock_in: StockUpdate,
    current_admin: Annotated[Admin, Depends(get_current_admin)],
):
    return await service.update_stock(stock_public_id, stock_in)


@router.delete(
    "/stocks/{stock_public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stock row",
    tags=["Stocks"],
)
async def delete_stock(
    stock_public_id: str,
    current_admin: Annotated[Admin, Depends(get_current_admin)],
):
    await service.delete_stock(stock_public_id)
    return None
