# stockroom/services/customer_service.py
import uuid

from sqlmodel import Session

from stockroom.core.errors import ConflictError, CustomerNotFoundError
from stockroom.models.customer import Customer
from stockroom.repositories.customer_repo import CustomerRepository
from stockroom.schemas.customer import CustomerCreate, CustomerUpdate
from stockroom.services.soft_delete import SoftDeleteService


class CustomerService(SoftDeleteService[Customer]):
    """
    Business logic for customers: email uniqueness among active customers.
    """

    entity_name = "Customer"
    not_found_error = CustomerNotFoundError

    def __init__(self, repo: CustomerRepository):
        super().__init__(repo)
        self.repo: CustomerRepository = repo

    def _restore_conflict(self, session: Session, obj: Customer) -> ConflictError | None:
        if self.repo.get_active_by_email(session, obj.email, exclude_id=obj.id):
            return ConflictError(
                "Cannot restore customer. Email now conflicts with an active customer.",
                email=obj.email,
            )
        return None

    def create_customer(self, session: Session, payload: CustomerCreate) -> Customer:
        email = str(payload.email)
        if self.repo.get_active_by_email(session, email):
            raise ConflictError("Email already exists", email=email)

        customer = Customer(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=email,
            phone=payload.phone,
            address=payload.address,
            city=payload.city,
            state=payload.state,
        )
        session.add(customer)
        self._commit(session, "Email already exists")
        session.refresh(customer)
        return customer

    def update_customer(
        self,
        session: Session,
        customer_id: uuid.UUID,
        payload: CustomerUpdate,
    ) -> Customer:
        customer = self.get_active(session, customer_id)

        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in data:
            data["email"] = str(data["email"])
            if data["email"] != customer.email and self.repo.get_active_by_email(
                session, data["email"], exclude_id=customer.id
            ):
                raise ConflictError("Email already exists", email=data["email"])

        for field, value in data.items():
            setattr(customer, field, value)

        session.add(customer)
        self._commit(session, "Email already exists")
        session.refresh(customer)
        return customer
