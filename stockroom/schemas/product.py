# stockroom/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


def _clean_urls(urls: list[str]) -> list[str]:
    cleaned = [u.strip() for u in urls]
    if any(not u for u in cleaned):
        raise ValueError("image urls cannot be empty")
    return cleaned


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    Backend derives:
      - product_code from the category name (e.g. "Footwear" -> FOO001)
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str = ""
    category_id: uuid.UUID
    price: float | None = Field(default=None, gt=0)
    images: list[str] = Field(default_factory=list, max_length=5)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[str]) -> list[str]:
        return _clean_urls(v)


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.

    - product_code may be set manually; it must keep the PREFIX+NNN format
      and stay unique among active products.
    - images, when given, replace the whole list.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    product_code: str | None = None
    description: str | None = None
    category_id: uuid.UUID | None = None
    price: float | None = Field(default=None, gt=0)
    images: list[str] | None = Field(default=None, max_length=5)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("product_code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip().upper()

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return _clean_urls(v)


class ProductRead(SQLModel):
    id: uuid.UUID
    name: str
    product_code: str
    description: str
    category_id: uuid.UUID
    price: float | None
    images: list[str]
    created_at: datetime
    deleted_at: datetime | None
