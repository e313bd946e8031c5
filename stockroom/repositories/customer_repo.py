# stockroom/repositories/customer_repo.py
import uuid

from sqlmodel import Session

from stockroom.models.customer import Customer
from stockroom.repositories.base import SoftDeleteRepository


class CustomerRepository(SoftDeleteRepository[Customer]):
    """
    Data access layer for Customer.
    """

    model = Customer

    def get_active_by_email(
        self,
        session: Session,
        email: str,
        exclude_id: uuid.UUID | None = None,
    ) -> Customer | None:
        return self.find_active_by(session, "email", email, exclude_id=exclude_id)
