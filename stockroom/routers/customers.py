# stockroom/routers/customers.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from stockroom.core.auth import require_admin, require_auth
from stockroom.database import get_session
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.customer_repo import CustomerRepository
from stockroom.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from stockroom.services.customer_service import CustomerService

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    dependencies=[Depends(require_auth)],
)

repo = CustomerRepository()
service = CustomerService(repo)


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    session: Session = Depends(get_session),
):
    return service.create_customer(session, payload)


@router.get("", response_model=list[CustomerRead])
def list_customers(
    session: Session = Depends(get_session),
    scope: DeleteScope = DeleteScope.ACTIVE,
    skip: int = 0,
    limit: int = 50,
):
    return service.list(session, scope=scope, skip=skip, limit=limit)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_active(session, customer_id)


@router.patch("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: uuid.UUID,
    payload: CustomerUpdate,
    session: Session = Depends(get_session),
):
    return service.update_customer(session, customer_id, payload)


@router.delete("/{customer_id}", response_model=CustomerRead)
def soft_delete_customer(
    customer_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.soft_delete(session, customer_id)


@router.post("/{customer_id}/restore", response_model=CustomerRead)
def restore_customer(
    customer_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Restore a soft-deleted customer. 409 if the email is now taken.
    """
    return service.restore(session, customer_id)


@router.delete(
    "/{customer_id}/permanent",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def permanently_delete_customer(
    customer_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.permanently_delete(session, customer_id)
    return None
