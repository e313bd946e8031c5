# stockroom/schemas/order.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class OrderLineItem(SQLModel):
    """
    One requested line: take `quantity` units from stock batch `stock_id`.
    """

    model_config = ConfigDict(extra="forbid")

    stock_id: uuid.UUID
    quantity: int = Field(gt=0)


class OrderCreate(SQLModel):
    """
    Payload for placing an order.

    - items must be non-empty (checked by the service, reported as 400).
    - total_amount is optional; when missing or not a positive number the
      backend derives it from product prices.
    """

    model_config = ConfigDict(extra="forbid")

    customer_id: uuid.UUID
    items: list[OrderLineItem]
    total_amount: float | None = None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    customer_id: uuid.UUID
    total_amount: float
    status: str
    created_at: datetime
    canceled_at: datetime | None = None
    deleted_at: datetime | None


class OrderItemRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    stock_id: uuid.UUID
    batch_number: str | None = None
    product_id: uuid.UUID | None = None
    product_name: str | None = None
    product_code: str | None = None
    quantity: int
    unit_price: float | None


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    Customer and product details are filled in for display.
    """

    customer_name: str | None = None
    customer_email: str | None = None
    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Status is free-form text ("pending", "shipped", "on hold", ...).
    "canceled" is reserved: cancel the order instead, which returns its stock.
    """

    model_config = ConfigDict(extra="forbid")

    status: str = Field(max_length=50)

    @field_validator("status")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("status cannot be empty")
        return v
