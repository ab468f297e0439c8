# backend/models/base.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Visibility of a stored row; DELETED rows stay in the table but drop out of active queries
class RecordStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


# Columns shared by every aggregate root (products, orders)
class BaseEntity:
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    record_status = Column(
        Enum(RecordStatus, name="record_status"),
        nullable=False,
        default=RecordStatus.ACTIVE,
        index=True,
    )

    def __init__(self, **kwargs):
        # Column defaults only apply on flush; set them up front so new entities behave
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("created_at", utcnow())
        kwargs.setdefault("record_status", RecordStatus.ACTIVE)
        super().__init__(**kwargs)

    @property
    def is_deleted(self) -> bool:
        return self.record_status == RecordStatus.DELETED

    def mark_deleted(self) -> None:
        self.record_status = RecordStatus.DELETED
        self.updated_at = utcnow()
