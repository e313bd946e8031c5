# stockroom/services/category_service.py
import uuid

from sqlmodel import Session

from stockroom.core.errors import CategoryNotFoundError, ConflictError
from stockroom.models.category import Category
from stockroom.repositories.category_repo import CategoryRepository
from stockroom.schemas.category import CategoryCreate, CategoryUpdate
from stockroom.services.codes import category_prefix
from stockroom.services.soft_delete import SoftDeleteService


class CategoryService(SoftDeleteService[Category]):
    """
    Business logic for categories.

    Responsibilities:
      - name uniqueness among active categories (create, rename, restore)
      - names must be able to produce a product code prefix
    """

    entity_name = "Category"
    not_found_error = CategoryNotFoundError

    def __init__(self, repo: CategoryRepository):
        super().__init__(repo)
        self.repo: CategoryRepository = repo

    def _name_taken(self, name: str) -> ConflictError:
        return ConflictError("Category name already exists", name=name)

    def _restore_conflict(self, session: Session, obj: Category) -> ConflictError | None:
        if self.repo.get_active_by_name(session, obj.name, exclude_id=obj.id):
            return ConflictError(
                "Cannot restore category. Category name now conflicts with an active category.",
                name=obj.name,
            )
        return None

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        # Rejects names that cannot produce a product code prefix
        category_prefix(payload.name)
        if self.repo.get_active_by_name(session, payload.name):
            raise self._name_taken(payload.name)

        category = Category(name=payload.name, description=payload.description)
        session.add(category)
        self._commit(session, "Category name already exists")
        session.refresh(category)
        return category

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = self.get_active(session, category_id)

        if payload.name is not None and payload.name != category.name:
            category_prefix(payload.name)
            if self.repo.get_active_by_name(session, payload.name, exclude_id=category.id):
                raise self._name_taken(payload.name)
            category.name = payload.name

        if payload.description is not None:
            category.description = payload.description

        session.add(category)
        self._commit(session, "Category name already exists")
        session.refresh(category)
        return category
