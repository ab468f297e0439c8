# backend/dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from services.order import OrderService
from services.product import ProductService


# One session per request; FastAPI caches get_db so every provider below shares it
def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def get_order_repository(db: Session = Depends(get_db)) -> OrderRepository:
    return OrderRepository(db)


def get_product_service(
    products: ProductRepository = Depends(get_product_repository),
) -> ProductService:
    return ProductService(products)


def get_order_service(
    orders: OrderRepository = Depends(get_order_repository),
    products: ProductRepository = Depends(get_product_repository),
) -> OrderService:
    return OrderService(orders, products)
