# stockroom/schemas/stock.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class StockCreate(SQLModel):
    """
    Payload for receiving a new stock batch.

    Backend derives:
      - batch_number = BATCH_<productCode>_<DDMMYY>
      - last_restocked = now
      - low_stock_alert = DEFAULT_LOW_STOCK_ALERT when omitted
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(ge=0)
    size: str
    price: float = Field(ge=0)
    supplier: str
    low_stock_alert: int | None = Field(default=None, ge=0)

    @field_validator("size", "supplier")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class StockAdjust(SQLModel):
    """
    Manual batch update. Any quantity change is followed by a low-stock
    check (quantity <= low_stock_alert).
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    size: str | None = None
    low_stock_alert: int | None = Field(default=None, ge=0)
    supplier: str | None = None

    @field_validator("size", "supplier")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class StockRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None = None
    product_code: str | None = None
    batch_number: str
    quantity: int
    size: str
    price: float
    supplier: str
    low_stock_alert: int
    last_restocked: datetime
    created_at: datetime
    deleted_at: datetime | None


class LowStockCheckResult(SQLModel):
    """
    Result of a low-stock sweep.
    """

    alerts_sent: int
    batches: list[StockRead]
