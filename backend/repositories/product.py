# backend/repositories/product.py
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func

from models.product import Product
from repositories.base import BaseRepository, Visibility


class ProductRepository(BaseRepository[Product]):
    model = Product

    def _active(self):
        return self._query(Visibility.ACTIVE)

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return self._active().filter(func.lower(Product.sku) == sku.strip().lower()).first()

    def get_by_category(self, category: str) -> List[Product]:
        return (
            self._active()
            .filter(func.lower(Product.category) == category.strip().lower())
            .order_by(Product.name)
            .all()
        )

    def get_available(self) -> List[Product]:
        return (
            self._active()
            .filter(Product.is_active.is_(True), Product.stock_quantity > 0)
            .order_by(Product.name)
            .all()
        )

    def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> List[Product]:
        return (
            self._active()
            .filter(Product.price >= min_price, Product.price <= max_price)
            .order_by(Product.price)
            .all()
        )

    def get_low_stock(self, threshold: int = 10) -> List[Product]:
        return (
            self._active()
            .filter(Product.is_active.is_(True), Product.stock_quantity <= threshold)
            .order_by(Product.stock_quantity)
            .all()
        )

    def is_sku_unique(self, sku: str, exclude_id: Optional[UUID] = None) -> bool:
        query = self._active().filter(func.lower(Product.sku) == sku.strip().lower())
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is None
