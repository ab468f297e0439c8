# backend/repositories/order.py
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Query, selectinload

from models.order import Order, OrderProduct, OrderStatus
from repositories.base import BaseRepository, Visibility


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class OrderRepository(BaseRepository[Order]):
    model = Order

    def _scoped(self, scope: Visibility, with_items: bool) -> Query:
        query = self._query(scope)
        if with_items:
            query = query.options(selectinload(Order.items).selectinload(OrderProduct.product))
        return query

    def get_by_id(self, entity_id: UUID, *, scope: Visibility, with_items: bool = False) -> Optional[Order]:
        return self._scoped(scope, with_items).filter(Order.id == entity_id).first()

    def list(self, *, scope: Visibility, with_items: bool = False) -> List[Order]:
        return self._scoped(scope, with_items).order_by(Order.order_date.desc()).all()

    def get_with_products(self, order_id: UUID) -> Optional[Order]:
        return self.get_by_id(order_id, scope=Visibility.ACTIVE, with_items=True)

    def get_by_number(self, number: str) -> Optional[Order]:
        return self._scoped(Visibility.ACTIVE, True).filter(Order.number == number).first()

    def get_by_status(self, status: OrderStatus, with_items: bool = False) -> List[Order]:
        return (
            self._scoped(Visibility.ACTIVE, with_items)
            .filter(Order.status == status)
            .order_by(Order.order_date.desc())
            .all()
        )

    def get_by_date_range(self, start: date, end: date, with_items: bool = False) -> List[Order]:
        """Orders placed between ``start`` and ``end``, both days included."""
        if isinstance(start, datetime):
            start = start.date()
        if isinstance(end, datetime):
            end = end.date()
        return (
            self._scoped(Visibility.ACTIVE, with_items)
            .filter(
                Order.order_date >= _start_of_day(start),
                Order.order_date < _start_of_day(end + timedelta(days=1)),
            )
            .order_by(Order.order_date.desc())
            .all()
        )

    def get_by_product_id(self, product_id: UUID, with_items: bool = False) -> List[Order]:
        return (
            self._scoped(Visibility.ACTIVE, with_items)
            .filter(Order.items.any(OrderProduct.product_id == product_id))
            .order_by(Order.order_date.desc())
            .all()
        )

    def number_exists(self, number: str) -> bool:
        return self._query(Visibility.ACTIVE).filter(Order.number == number).first() is not None
