# stockroom/models/order.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from stockroom.models.soft_delete import SoftDeleteMixin, utcnow

DEFAULT_ORDER_STATUS = "pending"
CANCELED_ORDER_STATUS = "canceled"


class Order(SoftDeleteMixin, table=True):
    """
    Customer order.

    Either persisted together with all of its stock deductions, or not at
    all (see OrderService.place_order).
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(
        foreign_key="customers.id",
        index=True,
    )

    total_amount: float = Field(
        description="Caller-supplied total, or derived from product prices",
    )

    # Free-form; pending on creation. "canceled" is reserved for cancel_order
    status: str = Field(
        default=DEFAULT_ORDER_STATUS,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    # Set once by cancel_order; stock is given back only when this goes
    # from NULL to a timestamp
    canceled_at: datetime | None = Field(default=None)


class OrderItem(SQLModel, table=True):
    """
    Line item: a quantity taken from one stock batch.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    stock_id: uuid.UUID = Field(
        foreign_key="stocks.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    # Product price at time of order, None if the product had no price
    unit_price: float | None = None

    # Preserves the order in which the caller listed the items
    position: int = Field(default=0, ge=0)
