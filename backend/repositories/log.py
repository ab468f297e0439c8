# backend/repositories/log.py
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Query, Session

from models.log import Log


class LogRepository:
    """Read side of the audit trail; rows are written by utils.audit."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        action: Optional[str],
        resource: Optional[str],
        status: Optional[str],
        date_from: Optional[date],
        date_to: Optional[date],
    ) -> Query:
        query = self.db.query(Log)
        if action:
            query = query.filter(Log.action.ilike(f"%{action}%"))
        if resource:
            query = query.filter(Log.resource == resource.strip().lower())
        if status:
            query = query.filter(Log.status == status.strip().upper())
        # date_to covers the whole day
        if date_from:
            query = query.filter(Log.ts >= datetime.combine(date_from, time.min, tzinfo=timezone.utc))
        if date_to:
            query = query.filter(Log.ts < datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc))
        return query

    def search(
        self,
        *,
        page: int,
        page_size: int,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Tuple[int, List[Log]]:
        """Newest first. Returns the total count of matches and the requested page."""
        query = self._filtered(action, resource, status, date_from, date_to)
        total = query.count()
        items = (
            query.order_by(Log.ts.desc(), Log.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return total, items
