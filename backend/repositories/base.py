# backend/repositories/base.py
import enum
from typing import Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.orm import Query, Session

from models.base import BaseEntity, RecordStatus, utcnow

ModelT = TypeVar("ModelT", bound=BaseEntity)


# Which rows a query should see; callers always say which one they want
class Visibility(str, enum.Enum):
    ACTIVE = "active"
    ALL = "all"


class BaseRepository(Generic[ModelT]):
    """
    Common CRUD for aggregate roots (products, orders).

    Writes commit immediately: one repository call is one unit of work,
    which is all the service layer needs.
    """

    model: Type[ModelT]

    def __init__(self, db: Session, model: Optional[Type[ModelT]] = None):
        self.db = db
        if model is not None:
            self.model = model

    # ---- queries ----
    def _query(self, scope: Visibility) -> Query:
        query = self.db.query(self.model)
        if scope == Visibility.ACTIVE:
            query = query.filter(self.model.record_status == RecordStatus.ACTIVE)
        return query

    def get_by_id(self, entity_id: UUID, *, scope: Visibility) -> Optional[ModelT]:
        return self._query(scope).filter(self.model.id == entity_id).first()

    def list(self, *, scope: Visibility) -> List[ModelT]:
        return self._query(scope).all()

    def get_all(self) -> List[ModelT]:
        return self.list(scope=Visibility.ALL)

    def get_active(self) -> List[ModelT]:
        return self.list(scope=Visibility.ACTIVE)

    def exists(self, entity_id: UUID) -> bool:
        return self._query(Visibility.ACTIVE).filter(self.model.id == entity_id).first() is not None

    # ---- writes ----
    def add(self, entity: ModelT) -> ModelT:
        entity.created_at = utcnow()
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelT) -> ModelT:
        entity.updated_at = utcnow()
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: UUID) -> bool:
        """Soft delete. False when the row is missing or already deleted."""
        entity = self.get_by_id(entity_id, scope=Visibility.ALL)
        if entity is None or entity.is_deleted:
            return False
        entity.mark_deleted()
        self.db.commit()
        return True

    def delete_permanently(self, entity_id: UUID) -> bool:
        entity = self.get_by_id(entity_id, scope=Visibility.ALL)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True
