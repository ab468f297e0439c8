# backend/routes/products.py
from decimal import Decimal
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from dependencies import get_product_service
from repositories.base import Visibility
from services.product import ProductService
from utils.audit import client_ip, write_log
from utils.responses import to_response
import schemas.product as product_schemas
from schemas.result import Err, Ok

router = APIRouter(prefix="/products", tags=["Products"])

NOT_FOUND = {404: {"model": Err}}
BAD_REQUEST = {400: {"model": Err}}


def _audit(db: Session, request: Request, action: str, result, **meta):
    write_log(
        db, action=action, resource="products",
        status="SUCCESS" if result.success else "FAIL",
        ip=client_ip(request),
        meta={k: str(v) for k, v in meta.items()},
    )


# =========================
# LISTS
# =========================
@router.get("", response_model=Ok[List[product_schemas.ProductOut]], responses=BAD_REQUEST)
def list_products(
    include_deleted: bool = Query(False, description="Include soft-deleted products"),
    service: ProductService = Depends(get_product_service),
):
    scope = Visibility.ALL if include_deleted else Visibility.ACTIVE
    return to_response(service.get_all(scope=scope))


@router.get("/available", response_model=Ok[List[product_schemas.ProductOut]], responses=BAD_REQUEST)
def list_available_products(service: ProductService = Depends(get_product_service)):
    """Active products with stock left."""
    return to_response(service.get_available())


@router.get("/price-range", response_model=Ok[List[product_schemas.ProductOut]], responses=BAD_REQUEST)
def list_products_by_price_range(
    min_price: Decimal = Query(...),
    max_price: Decimal = Query(...),
    service: ProductService = Depends(get_product_service),
):
    return to_response(service.get_by_price_range(min_price, max_price))


@router.get("/low-stock", response_model=Ok[List[product_schemas.ProductOut]], responses=BAD_REQUEST)
def list_low_stock_products(
    threshold: int = Query(settings.LOW_STOCK_THRESHOLD),
    service: ProductService = Depends(get_product_service),
):
    return to_response(service.get_low_stock_products(threshold))


@router.get("/category/{category}", response_model=Ok[List[product_schemas.ProductOut]], responses=BAD_REQUEST)
def list_products_by_category(category: str, service: ProductService = Depends(get_product_service)):
    return to_response(service.get_by_category(category))


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/sku/{sku}", response_model=Ok[product_schemas.ProductOut], responses=NOT_FOUND)
def get_product_by_sku(sku: str, service: ProductService = Depends(get_product_service)):
    return to_response(service.get_by_sku(sku))


@router.get("/{product_id}", response_model=Ok[product_schemas.ProductOut], responses=NOT_FOUND)
def get_product(product_id: UUID, service: ProductService = Depends(get_product_service)):
    return to_response(service.get_by_id(product_id))


@router.get("/{product_id}/discount-price", response_model=Ok[product_schemas.DiscountPriceOut],
            responses={**NOT_FOUND, **BAD_REQUEST})
def get_discount_price(
    product_id: UUID,
    percentage: Decimal = Query(..., description="Discount in percent, 0-100"),
    service: ProductService = Depends(get_product_service),
):
    return to_response(service.get_discount_price(product_id, percentage))


# =========================
# CREATE / UPDATE
# =========================
@router.post("", status_code=status.HTTP_201_CREATED,
             response_model=Ok[product_schemas.ProductOut], responses=BAD_REQUEST)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
):
    result = service.create(payload)
    if not result.success:
        _audit(db, request, "PRODUCT_CREATE", result, sku=payload.sku)
        return to_response(result)

    _audit(db, request, "PRODUCT_CREATE", result, id=result.data.id, sku=result.data.sku)
    location = str(request.url_for("get_product", product_id=str(result.data.id)))
    return to_response(result, success_status=status.HTTP_201_CREATED, headers={"Location": location})


@router.put("/{product_id}", response_model=Ok[product_schemas.ProductOut],
            responses={**NOT_FOUND, **BAD_REQUEST})
def update_product(
    product_id: UUID,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
):
    result = service.update(product_id, payload)
    _audit(db, request, "PRODUCT_UPDATE", result, id=product_id)
    return to_response(result)


@router.patch("/{product_id}/stock", response_model=Ok[product_schemas.ProductOut],
              responses={**NOT_FOUND, **BAD_REQUEST})
def update_product_stock(
    product_id: UUID,
    payload: product_schemas.StockUpdate,
    request: Request,
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
):
    result = service.update_stock(product_id, payload)
    _audit(db, request, "STOCK_ADJUSTMENT", result,
           id=product_id, operation=payload.operation, quantity=payload.quantity)
    return to_response(result)


# =========================
# DELETE
# =========================
@router.delete("/{product_id}", response_model=Ok[None], responses=NOT_FOUND)
def delete_product(
    product_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    service: ProductService = Depends(get_product_service),
):
    result = service.delete(product_id)
    _audit(db, request, "PRODUCT_DELETE", result, id=product_id)
    return to_response(result)
