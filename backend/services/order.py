# backend/services/order.py
import logging
from datetime import date
from decimal import Decimal
from typing import List
from uuid import UUID

from models.order import Order, OrderProduct, OrderStatus
from models.product import Product
from repositories.base import Visibility
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from schemas.order import (
    AddProductToOrder, OrderCreate, OrderLineIn, OrderLineOut, OrderOut, OrderSummary, OrderUpdate,
)
from schemas.result import Err, Ok, Result
from services.operations import service_operation
from services.validators import validate_create_order

logger = logging.getLogger(__name__)


# Map Order model to the detailed response schema
def order_to_out(order: Order) -> OrderOut:
    lines: List[OrderLineOut] = []
    for item in order.items:
        product = item.product
        lines.append(OrderLineOut(
            product_id=item.product_id,
            product_name=product.name if product else "Unknown product",
            product_sku=product.sku if product else "-",
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount=item.discount,
            total_price=item.line_total,
        ))
    return OrderOut(
        id=order.id,
        number=order.number,
        description=order.description,
        amount=order.total_amount,
        status=order.status,
        status_description=order.status.description,
        order_date=order.order_date,
        product_count=order.product_count,
        total_quantity=order.total_quantity,
        products=lines,
        is_deleted=order.is_deleted,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# Map Order model to the listing schema (no line detail)
def order_to_summary(order: Order) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        number=order.number,
        description=order.description,
        amount=order.total_amount,
        status=order.status,
        status_description=order.status.description,
        order_date=order.order_date,
    )


def _summaries(orders: List[Order]) -> List[OrderSummary]:
    return [order_to_summary(o) for o in orders]


def _build_line(line: OrderLineIn, product: Product) -> OrderProduct:
    """New order line. Without an explicit unit price the product's current price is snapshotted."""
    unit_price = line.unit_price if line.unit_price is not None else Decimal(str(product.price))
    discount = line.discount or Decimal("0")
    if discount > line.quantity * unit_price:
        raise ValueError(f"Discount for product {product.id} cannot exceed the line subtotal")
    return OrderProduct(
        product_id=product.id,
        quantity=line.quantity,
        unit_price=unit_price,
        discount=discount,
    )


class OrderService:
    """Order aggregate operations. Every method returns an Ok/Err envelope."""

    def __init__(self, orders: OrderRepository, products: ProductRepository):
        self.orders = orders
        self.products = products
        self.db = orders.db

    # =========================
    # READ
    # =========================
    @service_operation("retrieving order")
    def get_by_id(self, order_id: UUID) -> Result[OrderOut]:
        order = self.orders.get_with_products(order_id)
        if order is None:
            return Err.not_found("Order not found")
        return Ok(data=order_to_out(order))

    @service_operation("retrieving order")
    def get_by_number(self, number: str) -> Result[OrderOut]:
        order = self.orders.get_by_number(number)
        if order is None:
            return Err.not_found("Order not found")
        return Ok(data=order_to_out(order))

    @service_operation("retrieving orders")
    def get_all(self, *, scope: Visibility) -> Result[List[OrderSummary]]:
        return Ok(data=_summaries(self.orders.list(scope=scope, with_items=True)))

    def get_active(self) -> Result[List[OrderSummary]]:
        return self.get_all(scope=Visibility.ACTIVE)

    @service_operation("retrieving orders by status")
    def get_by_status(self, status: OrderStatus) -> Result[List[OrderSummary]]:
        return Ok(data=_summaries(self.orders.get_by_status(status, with_items=True)))

    @service_operation("retrieving orders by date range")
    def get_by_date_range(self, start: date, end: date) -> Result[List[OrderSummary]]:
        if start > end:
            return Err.invalid("Start date must not be after end date")
        return Ok(data=_summaries(self.orders.get_by_date_range(start, end, with_items=True)))

    @service_operation("retrieving orders by product")
    def get_by_product(self, product_id: UUID) -> Result[List[OrderSummary]]:
        return Ok(data=_summaries(self.orders.get_by_product_id(product_id, with_items=True)))

    # =========================
    # WRITE
    # =========================
    @service_operation("creating order")
    def create(self, dto: OrderCreate) -> Result[OrderOut]:
        errors = validate_create_order(dto, self.orders)
        if errors:
            return Err.invalid(*errors)

        # Every referenced product must exist before anything is written
        lines: List[OrderProduct] = []
        for line in dto.products:
            product = self.products.get_by_id(line.product_id, scope=Visibility.ACTIVE)
            if product is None:
                return Err.invalid(f"Product with ID {line.product_id} not found")
            lines.append(_build_line(line, product))

        # Order and lines go out in one commit
        created = self.orders.add(Order(number=dto.number, description=dto.description, items=lines))

        order = self.orders.get_with_products(created.id)
        logger.info("Order %s created with %d line(s), amount %s", order.number, order.product_count, order.total_amount)
        return Ok(data=order_to_out(order), message="Order created successfully")

    @service_operation("updating order")
    def update(self, dto: OrderUpdate) -> Result[OrderOut]:
        order = self.orders.get_by_id(dto.id, scope=Visibility.ACTIVE, with_items=True)
        if order is None:
            return Err.not_found("Order not found")

        if order.number != dto.number and self.orders.number_exists(dto.number):
            return Err.conflict("This order number already exists")

        order.number = dto.number
        order.description = dto.description
        order.status = dto.status

        updated = self.orders.update(order)
        return Ok(data=order_to_out(updated), message="Order updated successfully")

    @service_operation("deleting order")
    def delete(self, order_id: UUID) -> Result[None]:
        if not self.orders.exists(order_id):
            return Err.not_found("Order not found")
        if not self.orders.delete(order_id):
            return Err.internal("Error deleting order")
        logger.info("Order %s deleted", order_id)
        return Ok(message="Order deleted successfully")

    @service_operation("adding product to order")
    def add_product_to_order(self, dto: AddProductToOrder) -> Result[None]:
        order = self.orders.get_by_id(dto.order_id, scope=Visibility.ACTIVE, with_items=True)
        if order is None:
            return Err.invalid("Order not found")

        product = self.products.get_by_id(dto.product_id, scope=Visibility.ACTIVE)
        if product is None:
            return Err.invalid("Product not found")

        if order.find_item(dto.product_id) is not None:
            return Err.invalid("Product is already associated with this order")

        order.items.append(_build_line(dto, product))
        self.orders.update(order)
        return Ok(message="Product added to order successfully")

    @service_operation("removing product from order")
    def remove_product_from_order(self, order_id: UUID, product_id: UUID) -> Result[None]:
        order = self.orders.get_with_products(order_id)
        if order is None:
            return Err.invalid("Order not found")

        item = order.find_item(product_id)
        if item is None:
            return Err.invalid("Product is not associated with this order")

        order.items.remove(item)
        self.orders.update(order)
        return Ok(message="Product removed from order successfully")

    # =========================
    # STATUS TRANSITIONS
    # =========================
    @service_operation("approving order")
    def approve_order(self, order_id: UUID) -> Result[None]:
        order = self.orders.get_by_id(order_id, scope=Visibility.ACTIVE)
        if order is None:
            return Err.not_found("Order not found")

        if not order.can_approve():
            return Err.invalid("Order cannot be approved in current status")

        order.approve()
        self.orders.update(order)
        logger.info("Order %s approved", order.number)
        return Ok(message="Order approved successfully")

    @service_operation("canceling order")
    def cancel_order(self, order_id: UUID) -> Result[None]:
        order = self.orders.get_by_id(order_id, scope=Visibility.ACTIVE)
        if order is None:
            return Err.not_found("Order not found")

        if not order.can_cancel():
            return Err.invalid("Order cannot be canceled in current status")

        order.cancel()
        self.orders.update(order)
        logger.info("Order %s canceled", order.number)
        return Ok(message="Order canceled successfully")
