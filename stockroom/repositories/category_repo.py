# stockroom/repositories/category_repo.py
import uuid

from sqlmodel import Session

from stockroom.models.category import Category
from stockroom.repositories.base import SoftDeleteRepository


class CategoryRepository(SoftDeleteRepository[Category]):
    """
    Data access layer for Category.
    """

    model = Category

    def get_active_by_name(
        self,
        session: Session,
        name: str,
        exclude_id: uuid.UUID | None = None,
    ) -> Category | None:
        return self.find_active_by(session, "name", name, exclude_id=exclude_id)
