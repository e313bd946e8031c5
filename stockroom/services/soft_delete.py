# stockroom/services/soft_delete.py
import logging
import uuid
from typing import Generic

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from stockroom.core.errors import ConflictError, NotFoundError
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.base import ModelT, SoftDeleteRepository

logger = logging.getLogger(__name__)


class SoftDeleteService(Generic[ModelT]):
    """
    Lifecycle shared by every soft-deletable entity.

      active --soft_delete--> deleted --restore--> active
      any state --permanently_delete--> gone

    Subclasses name the entity, pick their NotFoundError subclass, and
    report unique-key collisions through `_restore_conflict`.
    """

    entity_name: str = "Entity"
    not_found_error: type[NotFoundError] = NotFoundError

    def __init__(self, repo: SoftDeleteRepository[ModelT]):
        self.repo = repo

    # ----- Hooks -----

    def _restore_conflict(self, session: Session, obj: ModelT) -> ConflictError | None:
        """
        Return the error to raise if restoring `obj` would create a second
        active row with the same unique key.
        """
        return None

    def _delete_owned_rows(self, session: Session, obj: ModelT) -> None:
        """Remove child rows that cannot outlive `obj` (images, line items)."""

    # ----- Helpers -----

    def _commit(self, session: Session, conflict_message: str) -> None:
        """
        Commit, turning unique index violations into ConflictError.
        """
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            logger.info("%s: %s", conflict_message, exc.orig)
            raise ConflictError(conflict_message)

    # ----- Queries -----

    def get_active(self, session: Session, entity_id: uuid.UUID) -> ModelT:
        obj = self.repo.get_active(session, entity_id)
        if obj is None:
            raise self.not_found_error(
                f"{self.entity_name} not found",
                id=str(entity_id),
            )
        return obj

    def list(
        self,
        session: Session,
        scope: DeleteScope = DeleteScope.ACTIVE,
        skip: int = 0,
        limit: int = 50,
    ) -> list[ModelT]:
        return self.repo.list(session, scope=scope, skip=skip, limit=limit)

    # ----- Lifecycle -----

    def soft_delete(self, session: Session, entity_id: uuid.UUID) -> ModelT:
        obj = self.repo.get_active(session, entity_id)
        if obj is None:
            raise self.not_found_error(
                f"{self.entity_name} not found or already deleted",
                id=str(entity_id),
            )
        self.repo.mark_deleted(session, obj)
        session.commit()
        session.refresh(obj)
        logger.info("%s %s soft deleted", self.entity_name, entity_id)
        return obj

    def restore(self, session: Session, entity_id: uuid.UUID) -> ModelT:
        obj = self.repo.get_deleted(session, entity_id)
        if obj is None:
            raise self.not_found_error(
                f"{self.entity_name} not found or is not deleted",
                id=str(entity_id),
            )

        conflict = self._restore_conflict(session, obj)
        if conflict is not None:
            raise conflict

        obj.deleted_at = None
        session.add(obj)
        self._commit(
            session,
            f"Cannot restore {self.entity_name.lower()}: it conflicts with an active one",
        )
        session.refresh(obj)
        logger.info("%s %s restored", self.entity_name, entity_id)
        return obj

    def permanently_delete(self, session: Session, entity_id: uuid.UUID) -> None:
        obj = self.repo.get_by_id(session, entity_id)
        if obj is None:
            raise self.not_found_error(
                f"{self.entity_name} not found",
                id=str(entity_id),
            )

        try:
            self._delete_owned_rows(session, obj)
            self.repo.delete(session, obj)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError(
                f"{self.entity_name} is still referenced and cannot be permanently deleted",
                id=str(entity_id),
            )
        logger.info("%s %s permanently deleted", self.entity_name, entity_id)
