import logging
import math
from typing import Optional

from fastapi import HTTPException, status
from tortoise.transactions import in_transaction

from .models import Product, Stock
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

logger = logging.getLogger(__name__)


def _current_stock(product: Product) -> int:
    """Stock quantity of a product whose ``stock`` relation has been fetched."""
    stock = getattr(product, "stock", None)
    return stock.quantity if isinstance(stock, Stock) else 0


def _to_product_response(product: Product) -> ProductResponse:
    """Converts a Product model instance (stock prefetched) to a ProductResponse schema."""
    return ProductResponse(
        public_id=product.public_id,
        name=product.name,
        description=product.description,
        price=product.price,
        image_url=product.image_url,
        category=product.category,
        supplier_id=product.supplier_id,
        current_stock=_current_stock(product),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


async def _get_active_product(product_public_id: str) -> Product:
    product = await Product.get_or_none(public_id=product_public_id, deleted=False)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product


async def create_product(product_in: ProductCreate) -> ProductResponse:
    """
    Creates a new product.

    Args:
        product_in: The data for the new product.

    Returns:
        The created product, with a current stock of 0.
    """
    try:
        product = await Product.create(**product_in.model_dump())
        await product.fetch_related("stock")
        return _to_product_response(product)
    except Exception as e:
        logger.error(f"Error adding product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error adding product",
        )


async def list_products(page: int, size: int) -> PaginatedProductResponse:
    """
    Lists products that have not been soft deleted.

    Args:
        page: The page number.
        size: The number of products per page.

    Returns:
        A page of products together with paging totals.
    """
    offset = (page - 1) * size
    products = (
        await Product.filter(deleted=False)
        .prefetch_related("stock")
        .order_by("id")
        .offset(offset)
        .limit(size)
    )
    total = await Product.filter(deleted=False).count()
    return PaginatedProductResponse(
        products=[_to_product_response(p) for p in products],
        current_page=page,
        total_pages=math.ceil(total / size),
        total_items=total,
    )


async def get_product(product_public_id: str) -> ProductResponse:
    product = await _get_active_product(product_public_id)
    await product.fetch_related("stock")
    return _to_product_response(product)


async def update_product(product_public_id: str, product_in: ProductUpdate) -> ProductResponse:
    """
    Replaces the descriptive fields and price of a product.

    Args:
        product_public_id: The public ID of the product to update.
        product_in: The new product data.

    Returns:
        The updated product.
    """
    product = await _get_active_product(product_public_id)
    for key, value in product_in.model_dump().items():
        setattr(product, key, value)
    await product.save()
    await product.fetch_related("stock")
    return _to_product_response(product)


async def delete_product(product_public_id: str):
    """
    Soft deletes a product and removes its stock row.

    Historical order lines keep pointing at the product, so sales reports
    for past periods are unaffected.
    """
    product = await _get_active_product(product_public_id)
    product.deleted = True
    await product.save(update_fields=["deleted"])
    await Stock.filter(product_id=product.id).delete()
    logger.info(f"Product {product_public_id} marked as deleted")
    return None


def _to_stock_response(stock: Stock) -> StockResponse:
    return StockResponse(
        public_id=stock.public_id,
        product_public_id=stock.product.public_id,
        name=stock.product.name,
        quantity=stock.quantity,
        last_updated=stock.last_updated,
    )


async def list_stocks(page: int, size: int) -> PaginatedStockResponse:
    """Lists stock rows of active products, most recently updated first."""
    offset = (page - 1) * size
    query = Stock.filter(product__deleted=False)
    stocks = (
        await query.prefetch_related("product")
        .order_by("-last_updated", "-id")
        .offset(offset)
        .limit(size)
    )
    total = await Stock.filter(product__deleted=False).count()
    return PaginatedStockResponse(
        stocks=[_to_stock_response(s) for s in stocks],
        current_page=page,
        total_pages=math.ceil(total / size),
        total_items=total,
    )


async def add_stock(stock_in: StockCreate) -> tuple[StockResponse, bool]:
    """
    Adds units to a product's stock, creating the stock row if needed.

    The product row is locked for the whole read-modify-write, so concurrent
    adds to one product are serialized and only the first one creates the row.

    Returns:
        The stock row and whether it was newly created.
    """
    async with in_transaction() as conn:
        product = await (
            Product.filter(public_id=stock_in.product_public_id, deleted=False)
            .using_db(conn)
            .select_for_update()
            .first()
        )
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found or has been deleted",
            )
        stock = await Stock.filter(product_id=product.id).using_db(conn).select_for_update().first()
        created = stock is None
        if created:
            stock = await Stock.create(product=product, quantity=stock_in.quantity, using_db=conn)
        else:
            stock.quantity += stock_in.quantity
            await stock.save(using_db=conn, update_fields=["quantity", "last_updated"])
    await stock.fetch_related("product")
    return _to_stock_response(stock), created


async def update_stock(stock_public_id: str, stock_in: StockUpdate) -> StockResponse:
    """
    Applies a set/add/subtract operation to a stock row. Quantity never drops below 0.
    """
    async with in_transaction() as conn:
        stock = await Stock.filter(public_id=stock_public_id).using_db(conn).select_for_update().first()
        if not stock:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Stock entry not found"
            )
        if stock_in.operation == "add":
            new_quantity = stock.quantity + stock_in.quantity
        elif stock_in.operation == "subtract":
            new_quantity = stock.quantity - stock_in.quantity
        else:
            new_quantity = stock_in.quantity
        stock.quantity = max(0, new_quantity)
        await stock.save(using_db=conn, update_fields=["quantity", "last_updated"])
    await stock.fetch_related("product")
    return _to_stock_response(stock)


async def delete_stock(stock_public_id: str):
    stock = await Stock.get_or_none(public_id=stock_public_id)
    if not stock:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Stock not found"
        )
    await stock.delete()
    return None

