from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session
from models.log import Log


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def write_log(db: Session, *, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()
