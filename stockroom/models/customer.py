# stockroom/models/customer.py
import uuid
from datetime import datetime

from sqlmodel import Field

from stockroom.models.soft_delete import SoftDeleteMixin, active_unique_index, utcnow


class Customer(SoftDeleteMixin, table=True):
    """
    Buyer referenced by orders. Customers do not log in.
    """

    __tablename__ = "customers"
    __table_args__ = (active_unique_index("uq_customers_active_email", "email"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)

    email: str = Field(
        index=True,
        description="Unique among active customers",
    )

    phone: str
    address: str
    city: str
    state: str

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )
