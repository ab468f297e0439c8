from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from models.order import OrderStatus
from schemas.product import MAX_QUANTITY


# Input schema for a single line of a new order
class OrderLineIn(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
    # Omitted -> the product's current price is used
    unit_price: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2)
    discount: Decimal = Field(Decimal("0"), ge=0, max_digits=18, decimal_places=2)


# Input schema for creating a new order
class OrderCreate(BaseModel):
    number: str = Field(..., min_length=3, max_length=50)
    description: str = Field("", max_length=500)
    products: List[OrderLineIn] = Field(..., min_length=1)


# Input schema for PUT /orders/{id}
class OrderUpdate(BaseModel):
    id: UUID
    number: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., max_length=500)
    status: OrderStatus


# Input schema for attaching a product to an existing order
class AddProductToOrder(OrderLineIn):
    order_id: UUID


# Output schema for an individual order line
class OrderLineOut(BaseModel):
    product_id: UUID
    product_name: str
    product_sku: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total_price: Decimal


# Simplified order representation for listings
class OrderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    number: str
    description: str
    amount: Decimal
    status: OrderStatus
    status_description: str
    order_date: datetime


# Output schema representing the full order details
class OrderOut(OrderSummary):
    product_count: int
    total_quantity: int
    products: List[OrderLineOut]
    is_deleted: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
