# stockroom/schemas/customer.py
import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CustomerCreate(SQLModel):
    """
    Payload for creating a customer.

    Validation rules:
      - email must be a valid EmailStr (unique among active customers,
        checked by the service)
      - text fields cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: EmailStr
    phone: str
    address: str
    city: str
    state: str

    @field_validator("first_name", "last_name", "phone", "address", "city", "state")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class CustomerUpdate(SQLModel):
    """
    Partial update. An email change is checked for conflicts.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None

    @field_validator("first_name", "last_name", "phone", "address", "city", "state")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class CustomerRead(SQLModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    created_at: datetime
    deleted_at: datetime | None
