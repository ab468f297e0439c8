from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_order_service
from models.order import OrderStatus
from repositories.base import Visibility
from services.order import OrderService
from utils.audit import client_ip, write_log
from utils.responses import error_response, to_response
from schemas.order import AddProductToOrder, OrderCreate, OrderOut, OrderSummary, OrderUpdate
from schemas.result import Err, Ok

router = APIRouter(prefix="/orders", tags=["Orders"])

NOT_FOUND = {404: {"model": Err}}
BAD_REQUEST = {400: {"model": Err}}


# Record the outcome of a mutating request in the audit log
def _audit(db: Session, request: Request, action: str, result, **meta):
    write_log(
        db, action=action, resource="orders",
        status="SUCCESS" if result.success else "FAIL",
        ip=client_ip(request),
        meta={k: str(v) for k, v in meta.items()},
    )


# List orders; soft-deleted ones only on request
@router.get("", response_model=Ok[List[OrderSummary]], responses=BAD_REQUEST)
def list_orders(
    include_deleted: bool = Query(False),
    service: OrderService = Depends(get_order_service),
):
    scope = Visibility.ALL if include_deleted else Visibility.ACTIVE
    return to_response(service.get_all(scope=scope))


@router.get("/by-number/{number}", response_model=Ok[OrderOut], responses=NOT_FOUND)
def get_order_by_number(number: str, service: OrderService = Depends(get_order_service)):
    return to_response(service.get_by_number(number))


# Status is the integer value of OrderStatus (1 = Pending ... 6 = Completed)
@router.get("/by-status/{order_status}", response_model=Ok[List[OrderSummary]], responses=BAD_REQUEST)
def list_orders_by_status(order_status: int, service: OrderService = Depends(get_order_service)):
    # An unknown value raises ValueError, answered with 400 by the global handler
    return to_response(service.get_by_status(OrderStatus(order_status)))


# Both days are included
@router.get("/date-range", response_model=Ok[List[OrderSummary]], responses=BAD_REQUEST)
def list_orders_by_date_range(
    start: date = Query(..., description="YYYY-MM-DD"),
    end: date = Query(..., description="YYYY-MM-DD"),
    service: OrderService = Depends(get_order_service),
):
    return to_response(service.get_by_date_range(start, end))


@router.get("/by-product/{product_id}", response_model=Ok[List[OrderSummary]], responses=BAD_REQUEST)
def list_orders_by_product(product_id: UUID, service: OrderService = Depends(get_order_service)):
    return to_response(service.get_by_product(product_id))


@router.get("/{order_id}", response_model=Ok[OrderOut], responses=NOT_FOUND)
def get_order(order_id: UUID, service: OrderService = Depends(get_order_service)):
    return to_response(service.get_by_id(order_id))


# Create an order with its lines
@router.post("", status_code=status.HTTP_201_CREATED, response_model=Ok[OrderOut], responses=BAD_REQUEST)
def create_order(
    payload: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    result = service.create(payload)
    if not result.success:
        _audit(db, request, "ORDER_CREATE", result, number=payload.number)
        return to_response(result)

    _audit(db, request, "ORDER_CREATE", result, id=result.data.id, number=result.data.number)
    location = str(request.url_for("get_order", order_id=str(result.data.id)))
    return to_response(result, success_status=status.HTTP_201_CREATED, headers={"Location": location})


@router.put("/{order_id}", response_model=Ok[OrderOut], responses={**NOT_FOUND, **BAD_REQUEST})
def update_order(
    order_id: UUID,
    payload: OrderUpdate,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    if order_id != payload.id:
        return error_response(status.HTTP_400_BAD_REQUEST, "Operation failed", ["URL ID does not match object ID"])

    result = service.update(payload)
    _audit(db, request, "ORDER_UPDATE", result, id=order_id, status=payload.status.name)
    return to_response(result)


# Soft delete
@router.delete("/{order_id}", response_model=Ok[None], responses=NOT_FOUND)
def delete_order(
    order_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    result = service.delete(order_id)
    _audit(db, request, "ORDER_DELETE", result, id=order_id)
    return to_response(result)


# Attach another product to an existing order
@router.post("/add-product", response_model=Ok[None], responses=BAD_REQUEST)
def add_product_to_order(
    payload: AddProductToOrder,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    result = service.add_product_to_order(payload)
    _audit(db, request, "ORDER_ADD_PRODUCT", result, order_id=payload.order_id, product_id=payload.product_id)
    return to_response(result)


@router.delete("/{order_id}/products/{product_id}", response_model=Ok[None], responses=BAD_REQUEST)
def remove_product_from_order(
    order_id: UUID,
    product_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    result = service.remove_product_from_order(order_id, product_id)
    _audit(db, request, "ORDER_REMOVE_PRODUCT", result, order_id=order_id, product_id=product_id)
    return to_response(result)


# Status transitions
@router.patch("/{order_id}/approve", response_model=Ok[None], responses={**NOT_FOUND, **BAD_REQUEST})
def approve_order(
    order_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    result = service.approve_order(order_id)
    _audit(db, request, "ORDER_APPROVE", result, id=order_id)
    return to_response(result)


@router.patch("/{order_id}/cancel", response_model=Ok[None], responses={**NOT_FOUND, **BAD_REQUEST})
def cancel_order(
    order_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    service: OrderService = Depends(get_order_service),
):
    result = service.cancel_order(order_id)
    _audit(db, request, "ORDER_CANCEL", result, id=order_id)
    return to_response(result)
