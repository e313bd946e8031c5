# stockroom/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from stockroom.core.auth import require_admin, require_auth
from stockroom.core.notifications import get_notifier
from stockroom.database import get_session
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.customer_repo import CustomerRepository
from stockroom.repositories.order_repo import OrderRepository
from stockroom.repositories.product_repo import ProductRepository
from stockroom.repositories.stock_repo import StockRepository
from stockroom.repositories.user_repo import UserRepository
from stockroom.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from stockroom.services.order_service import OrderService
from stockroom.services.stock_service import StockService

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    dependencies=[Depends(require_auth)],
)

order_repo = OrderRepository()
customer_repo = CustomerRepository()
stock_repo = StockRepository()
product_repo = ProductRepository()
stock_service = StockService(stock_repo, product_repo, UserRepository(), get_notifier())
service = OrderService(order_repo, customer_repo, stock_repo, product_repo, stock_service)


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def place_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
):
    """
    Place an order against stock batches.

    All-or-nothing: on 404 (customer/stock), 400 (no items),
    409 (insufficient stock) or 503 (storage failure) no stock is
    deducted and no order exists.
    """
    return service.place_order(session, payload)


@router.get("", response_model=list[OrderWithItemsRead])
def list_orders(
    session: Session = Depends(get_session),
    scope: DeleteScope = DeleteScope.ACTIVE,
    skip: int = 0,
    limit: int = 50,
):
    return service.list_orders(session, scope=scope, skip=skip, limit=limit)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_order(session, order_id)


@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Set a free-form status on an active order. Stock is not touched.
    """
    return service.update_status(session, order_id, payload)


@router.post("/{order_id}/cancel", response_model=OrderWithItemsRead)
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Cancel the order and return its quantities to the stock batches.
    """
    return service.cancel_order(session, order_id)


@router.delete("/{order_id}", response_model=OrderRead)
def soft_delete_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.soft_delete(session, order_id)


@router.post("/{order_id}/restore", response_model=OrderRead)
def restore_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.restore(session, order_id)


@router.delete(
    "/{order_id}/permanent",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def permanently_delete_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Irreversible (admin only). Line items are deleted with the order;
    stock is not restored.
    """
    service.permanently_delete(session, order_id)
    return None
