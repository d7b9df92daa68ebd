"""
Tenant-bound service base.

Every service is constructed with the caller's tenant id and reaches tenant
data only through ``_scoped``, so a query that forgets the tenant filter
cannot be written by accident.
"""
import logging
from typing import Any, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.exceptions import ConflictError, NotFoundError

ModelT = TypeVar("ModelT")

logger = logging.getLogger(__name__)


def commit_or_conflict(db: Session, conflict_message: str = "Resource already exists") -> None:
    """Commit the unit of work; unique-constraint violations surface as Conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity violation: {e.orig}")
        raise ConflictError(conflict_message) from e
    except Exception:
        db.rollback()
        raise


class BaseService:
    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id
        self._logger = logging.getLogger(self.__class__.__module__)

    def _scoped(self, model: Type[ModelT]) -> Query:
        return self.db.query(model).filter(model.tenant_id == self.tenant_id)

    def _get_or_404(self, model: Type[ModelT], entity_id: Any, message: str) -> ModelT:
        entity = self._scoped(model).filter(model.id == entity_id).first()
        if entity is None:
            raise NotFoundError(message)
        return entity

    def _commit(self, conflict_message: str = "Resource already exists") -> None:
        commit_or_conflict(self.db, conflict_message)
