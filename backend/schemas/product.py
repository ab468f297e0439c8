# backend/schemas/product.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict

SKU_PATTERN = r"^[A-Za-z0-9\-_]+$"
# Integer columns are 32-bit on PostgreSQL
MAX_QUANTITY = 2_147_483_647


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared writable attributes for product payloads
class ProductBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: str = Field("", max_length=1000)
    price: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    sku: str = Field(..., min_length=3, max_length=50, pattern=SKU_PATTERN,
                     description="Letters, digits, hyphens and underscores; stored upper-case")
    stock_quantity: int = Field(0, ge=0, le=MAX_QUANTITY)
    category: str = Field(..., min_length=2, max_length=100)
    is_active: bool = True


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Schema for full (PUT) product updates
class ProductUpdate(ProductBase):
    pass


# Schema for PATCH /products/{id}/stock
class StockUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
    operation: str = Field("add", description="'add' or 'subtract'")


# Full product representation
class ProductOut(ORMBase):
    id: UUID
    name: str
    description: str
    price: Decimal
    sku: str
    stock_quantity: int
    category: str
    is_active: bool
    is_available: bool
    is_deleted: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class DiscountPriceOut(BaseModel):
    product_id: UUID
    price: Decimal
    discount_percentage: Decimal
    discounted_price: Decimal
