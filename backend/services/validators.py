# backend/services/validators.py
from decimal import Decimal
from typing import List

from repositories.order import OrderRepository
from schemas.order import OrderCreate

ORDER_NUMBER_MIN, ORDER_NUMBER_MAX = 3, 20
ORDER_DESCRIPTION_MIN, ORDER_DESCRIPTION_MAX = 10, 500


def normalize_sku(sku: str) -> str:
    return (sku or "").strip().upper()


def product_rule_errors(sku: str, price, stock_quantity: int) -> List[str]:
    """Business rules a product must satisfy before it is stored."""
    errors = []
    if not sku or len(sku) < 3:
        errors.append("Invalid SKU format")
    if price is None or Decimal(str(price)) <= 0:
        errors.append("Price must be greater than zero")
    if stock_quantity is None or stock_quantity < 0:
        errors.append("Stock quantity cannot be negative")
    return errors


def validate_create_order(dto: OrderCreate, orders: OrderRepository) -> List[str]:
    """Rule-set for new orders. Returns every broken rule, empty when the order is valid."""
    errors = []

    number = dto.number or ""
    if not number.strip():
        errors.append("Order number is required")
    elif len(number) < ORDER_NUMBER_MIN:
        errors.append(f"Number must have at least {ORDER_NUMBER_MIN} characters")
    elif len(number) > ORDER_NUMBER_MAX:
        errors.append(f"Number must have at most {ORDER_NUMBER_MAX} characters")
    elif orders.number_exists(number):
        errors.append("This order number already exists")

    description = dto.description or ""
    if not description.strip():
        errors.append("Description is required")
    elif len(description) < ORDER_DESCRIPTION_MIN:
        errors.append(f"Description must have at least {ORDER_DESCRIPTION_MIN} characters")
    elif len(description) > ORDER_DESCRIPTION_MAX:
        errors.append(f"Description must have at most {ORDER_DESCRIPTION_MAX} characters")

    if not dto.products:
        errors.append("At least one product must be associated with the order")

    seen = set()
    for index, line in enumerate(dto.products or []):
        if line.product_id is None:
            errors.append(f"products[{index}]: Product ID is required")
        elif line.product_id in seen:
            errors.append(f"products[{index}]: Product {line.product_id} is listed more than once")
        else:
            seen.add(line.product_id)
        if line.quantity is None or line.quantity <= 0:
            errors.append(f"products[{index}]: Quantity must be greater than zero")

    return errors
