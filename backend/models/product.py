# backend/models/product.py
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, Boolean, CheckConstraint
from database import Base
from models.base import BaseEntity

# Model Product
# A single catalog item: descriptive data, unit price and warehouse stock.
# The SKU is stored normalised (upper-case) and is unique among active products;
# uniqueness is checked by the service, since soft-deleted rows keep their SKU.
class Product(BaseEntity, Base):
    __tablename__ = "products"

    name = Column(String(200), nullable=False, index=True)
    description = Column(String(1000), nullable=False, default="")
    sku = Column(String(50), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)

    # Price and stock are guarded by constraints as well as by the service layer.
    price = Column(Numeric(18, 2), CheckConstraint("price >= 0"), nullable=False)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)

    def __init__(self, **kwargs):
        kwargs.setdefault("description", "")
        kwargs.setdefault("stock_quantity", 0)
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @property
    def is_available(self) -> bool:
        """A product can be sold when it is active and has stock left."""
        return bool(self.is_active) and (self.stock_quantity or 0) > 0

    def is_sku_valid(self) -> bool:
        return bool(self.sku) and len(self.sku) >= 3

    def calculate_discount_price(self, discount_percentage) -> Decimal:
        """Price after a percentage discount; the percentage must lie in [0, 100]."""
        pct = Decimal(str(discount_percentage))
        if pct < 0 or pct > 100:
            raise ValueError("Discount must be between 0 and 100")
        return Decimal(str(self.price)) * (1 - pct / 100)

    def try_reduce_stock(self, quantity: int) -> bool:
        """Take ``quantity`` units out of stock. Leaves stock untouched and returns False if not possible."""
        if quantity <= 0 or quantity > (self.stock_quantity or 0):
            return False
        self.stock_quantity -= quantity
        return True
