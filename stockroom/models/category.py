# stockroom/models/category.py
import uuid
from datetime import datetime

from sqlmodel import Field

from stockroom.models.soft_delete import SoftDeleteMixin, active_unique_index, utcnow


class Category(SoftDeleteMixin, table=True):
    """
    Product category. Its name drives the product code prefix
    ("Footwear" -> "FOO").
    """

    __tablename__ = "categories"
    __table_args__ = (active_unique_index("uq_categories_active_name", "name"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Unique among active categories",
    )

    description: str = Field(default="")

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )
