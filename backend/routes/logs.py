# backend/routes/logs.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from repositories.log import LogRepository
from schemas.log import LogOut, LogPage
from schemas.result import Err, Ok
from utils.responses import to_response

router = APIRouter(prefix="/logs", tags=["Logs"])


# Audit trail of product and order mutations, newest first
@router.get("", response_model=Ok[LogPage], responses={400: {"model": Err}})
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Substring of the action, e.g. ORDER_"),
    resource: Optional[str] = Query(None, description="products or orders"),
    status: Optional[str] = Query(None, description="SUCCESS or FAIL"),
    date_from: Optional[date] = Query(None, description="From date (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="To date (YYYY-MM-DD), inclusive"),
    db: Session = Depends(get_db),
):
    if date_from and date_to and date_from > date_to:
        return to_response(Err.invalid("date_from must not be after date_to"))

    total, logs = LogRepository(db).search(
        page=page, page_size=page_size,
        action=action, resource=resource, status=status,
        date_from=date_from, date_to=date_to,
    )
    body = LogPage(
        items=[LogOut.model_validate(entry) for entry in logs],
        total=total,
        page=page,
        page_size=page_size,
    )
    return to_response(Ok(data=body))
