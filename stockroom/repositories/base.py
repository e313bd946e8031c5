# stockroom/repositories/base.py
import uuid
from typing import Any, Generic, TypeVar

from sqlmodel import Session, col, select

from stockroom.models.soft_delete import DeleteScope, SoftDeleteMixin, utcnow

ModelT = TypeVar("ModelT", bound=SoftDeleteMixin)


def apply_scope(stmt: Any, model: type[SoftDeleteMixin], scope: DeleteScope) -> Any:
    """
    Add the deletion-marker filter for `scope` to a select statement.
    """
    if scope is DeleteScope.ACTIVE:
        return stmt.where(col(model.deleted_at).is_(None))
    if scope is DeleteScope.DELETED:
        return stmt.where(col(model.deleted_at).is_not(None))
    return stmt


class SoftDeleteRepository(Generic[ModelT]):
    """
    Data access shared by every soft-deletable table.

    NOTE:
      - No commits here. Services own the transaction boundary and call
        session.commit() / session.rollback().
      - Every query states its scope explicitly.
    """

    model: type[ModelT]

    def get_by_id(self, session: Session, entity_id: uuid.UUID) -> ModelT | None:
        """Return the row in any state, or None."""
        return session.get(self.model, entity_id)

    def get_active(self, session: Session, entity_id: uuid.UUID) -> ModelT | None:
        obj = session.get(self.model, entity_id)
        if obj is None or obj.deleted_at is not None:
            return None
        return obj

    def get_deleted(self, session: Session, entity_id: uuid.UUID) -> ModelT | None:
        obj = session.get(self.model, entity_id)
        if obj is None or obj.deleted_at is None:
            return None
        return obj

    def list(
        self,
        session: Session,
        scope: DeleteScope = DeleteScope.ACTIVE,
        skip: int = 0,
        limit: int = 50,
    ) -> list[ModelT]:
        stmt = apply_scope(select(self.model), self.model, scope)
        stmt = (
            stmt.order_by(col(self.model.created_at).desc())  # type: ignore[attr-defined]
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def find_active_by(
        self,
        session: Session,
        field: str,
        value: Any,
        exclude_id: uuid.UUID | None = None,
    ) -> ModelT | None:
        """
        Look up an active row by a unique key (name, email, product_code).

        `exclude_id` skips the row being updated or restored.
        """
        stmt = select(self.model).where(
            getattr(self.model, field) == value,
            col(self.model.deleted_at).is_(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(getattr(self.model, "id") != exclude_id)
        return session.exec(stmt).first()

    def add(self, session: Session, obj: ModelT) -> ModelT:
        """
        Insert or update without committing; flush so ids and constraint
        violations surface inside the caller's transaction.
        """
        session.add(obj)
        session.flush()
        session.refresh(obj)
        return obj

    def mark_deleted(self, session: Session, obj: ModelT) -> ModelT:
        obj.deleted_at = utcnow()
        return self.add(session, obj)

    def delete(self, session: Session, obj: ModelT) -> None:
        """Physically remove the row."""
        session.delete(obj)
        session.flush()
