import enum
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Enum, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.base import BaseEntity, utcnow


# Lifecycle states of an order; values match the integers exposed by the API
class OrderStatus(enum.IntEnum):
    PENDING = 1
    PROCESSING = 2
    APPROVED = 3
    REJECTED = 4
    CANCELED = 5
    COMPLETED = 6

    @property
    def description(self) -> str:
        return self.name.capitalize()


class Order(BaseEntity, Base):
    __tablename__ = "orders"

    number = Column(String(50), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    order_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    status = Column(Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING, index=True)

    # The order owns its lines; the amount is always derived from them
    items = relationship(
        "OrderProduct", back_populates="order",
        cascade="all, delete-orphan", order_by="OrderProduct.added_date",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("order_date", utcnow())
        kwargs.setdefault("status", OrderStatus.PENDING)
        super().__init__(**kwargs)

    @property
    def product_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def amount(self) -> Decimal:
        return self.total_amount

    def find_item(self, product_id):
        return next((item for item in self.items if item.product_id == product_id), None)

    def can_cancel(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.PROCESSING)

    def cancel(self) -> bool:
        if not self.can_cancel():
            return False
        self.status = OrderStatus.CANCELED
        self.updated_at = utcnow()
        return True

    def can_approve(self) -> bool:
        return self.status == OrderStatus.PENDING

    def approve(self) -> bool:
        if not self.can_approve():
            return False
        self.status = OrderStatus.APPROVED
        self.updated_at = utcnow()
        return True


# A single line of an order: product, quantity and the unit price at the moment it was added
class OrderProduct(Base):
    __tablename__ = "order_products"

    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), primary_key=True)
    # RESTRICT keeps order history intact when somebody hard-deletes a product
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="RESTRICT"), primary_key=True, index=True)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    unit_price = Column(Numeric(18, 2), nullable=False)
    discount = Column(Numeric(18, 2), CheckConstraint("discount >= 0"), nullable=False, default=0)
    added_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    def __init__(self, **kwargs):
        kwargs.setdefault("quantity", 1)
        kwargs.setdefault("discount", Decimal("0"))
        kwargs.setdefault("added_date", utcnow())
        super().__init__(**kwargs)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * Decimal(str(self.unit_price)) - Decimal(str(self.discount))
