from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
import datetime

from ...common.schemas import Money


# --- Product Schemas ---
class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Name of the product")
    description: Optional[str] = Field(None, description="Longer product description")
    price: Money = Field(default=0, ge=0, decimal_places=2, description="Current list price")
    image_url: Optional[str] = Field(None, max_length=512)
    category: Optional[str] = Field(None, max_length=100)
    supplier_id: Optional[int] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    pass


class ProductResponse(ProductBase):
    public_id: str = Field(..., description="Public unique identifier for the product (KSUID)")
    current_stock: int = Field(0, description="On-hand quantity, 0 when the product has no stock row")
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class PaginatedProductResponse(BaseModel):
    products: List[ProductResponse]
    current_page: int
    total_pages: int
    total_items: int


# --- Stock Schemas ---
class StockCreate(BaseModel):
    product_public_id: str = Field(..., description="Public ID of the product to stock")
    quantity: int = Field(..., ge=0, description="Units to add to the product's stock")


class StockUpdate(BaseModel):
    quantity: int = Field(..., ge=0)
    operation: Literal["set", "add", "subtract"] = Field(
        "set", description="How quantity is applied to the current stock"
    )


class StockResponse(BaseModel):
    public_id: str
    product_public_id: str
    name: str
    quantity: int
    last_updated: datetime.datetime


class PaginatedStockResponse(BaseModel):
    stocks: List[StockResponse]
    current_page: int
    total_pages: int
    total_items: int


