# stockroom/models/product.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from stockroom.models.soft_delete import SoftDeleteMixin, active_unique_index, utcnow


class Product(SoftDeleteMixin, table=True):
    """
    Catalog entry. Stock batches belong to a product.

    product_code:
      - generated on create as <PREFIX><NNN>, e.g. FOO001
      - unique among active products (partial unique index)
    """

    __tablename__ = "products"
    __table_args__ = (
        active_unique_index("uq_products_active_code", "product_code"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
    )

    product_code: str = Field(
        max_length=6,
        index=True,
        description="Generated code, e.g. FOO001",
    )

    description: str = Field(default="")

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        index=True,
    )

    # Not set at creation time; used as the order total fallback.
    price: float | None = Field(
        default=None,
        description="Unit price",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )


class ProductImage(SQLModel, table=True):
    """
    Image URL attached to a product, kept in display order.
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    image_url: str

    sort_order: int = Field(
        default=0,
        ge=0,
    )
