# stockroom/models/stock.py
import uuid
from datetime import datetime

from sqlmodel import Field

from stockroom.models.soft_delete import SoftDeleteMixin, utcnow


class Stock(SoftDeleteMixin, table=True):
    """
    A stock batch: one receipt of a product with its own quantity on hand
    and low-stock threshold.

    quantity is never negative. Order deductions go through a conditional
    UPDATE (see StockRepository.deduct), never read-modify-write.
    """

    __tablename__ = "stocks"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    # BATCH_<productCode>_<DDMMYY>, not unique
    batch_number: str = Field(index=True)

    quantity: int = Field(
        ge=0,
        description="Units on hand",
    )

    size: str
    price: float = Field(ge=0)
    supplier: str

    low_stock_alert: int = Field(
        default=5,
        ge=0,
        description="Alert threshold",
    )

    last_restocked: datetime = Field(default_factory=utcnow)

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )
