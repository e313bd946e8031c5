# stockroom/routers/stocks.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from stockroom.core.auth import require_admin, require_auth
from stockroom.core.notifications import get_notifier
from stockroom.database import get_session
from stockroom.models.soft_delete import DeleteScope
from stockroom.repositories.product_repo import ProductRepository
from stockroom.repositories.stock_repo import StockRepository
from stockroom.repositories.user_repo import UserRepository
from stockroom.schemas.stock import (
    LowStockCheckResult,
    StockAdjust,
    StockCreate,
    StockRead,
)
from stockroom.services.stock_service import StockService

router = APIRouter(
    prefix="/stocks",
    tags=["Stocks"],
    dependencies=[Depends(require_auth)],
)

repo = StockRepository()
product_repo = ProductRepository()
user_repo = UserRepository()
service = StockService(repo, product_repo, user_repo, get_notifier())


@router.post("", response_model=StockRead, status_code=status.HTTP_201_CREATED)
def create_stock_batch(
    payload: StockCreate,
    session: Session = Depends(get_session),
):
    """
    Receive a new batch. batch_number is BATCH_<productCode>_<DDMMYY>.
    """
    return service.to_read(session, service.create_stock_batch(session, payload))


@router.get("", response_model=list[StockRead])
def list_stocks(
    session: Session = Depends(get_session),
    scope: DeleteScope = DeleteScope.ACTIVE,
    skip: int = 0,
    limit: int = 50,
):
    stocks = service.list(session, scope=scope, skip=skip, limit=limit)
    return [service.to_read(session, s) for s in stocks]


@router.get("/low-stock", response_model=list[StockRead])
def list_low_stock(session: Session = Depends(get_session)):
    """
    Active batches at or below their low-stock alert.
    """
    return [service.to_read(session, s) for s in service.list_low_stock(session)]


@router.post("/check-low-stock", response_model=LowStockCheckResult)
def check_low_stock(session: Session = Depends(get_session)):
    """
    Send a low-stock alert for every active batch at or below its threshold.
    """
    return service.check_low_stock(session)


@router.get("/{stock_id}", response_model=StockRead)
def get_stock(
    stock_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.to_read(session, service.get_active(session, stock_id))


@router.patch("/{stock_id}", response_model=StockRead)
def adjust_stock(
    stock_id: uuid.UUID,
    payload: StockAdjust,
    session: Session = Depends(get_session),
):
    """
    Manual update. Alerts all users if quantity ends up <= low_stock_alert.
    """
    return service.to_read(session, service.adjust_stock(session, stock_id, payload))


@router.delete("/{stock_id}", response_model=StockRead)
def soft_delete_stock(
    stock_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.to_read(session, service.soft_delete(session, stock_id))


@router.post("/{stock_id}/restore", response_model=StockRead)
def restore_stock(
    stock_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.to_read(session, service.restore(session, stock_id))


@router.delete(
    "/{stock_id}/permanent",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def permanently_delete_stock(
    stock_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Irreversible (admin only). 409 while order lines reference the batch.
    """
    service.permanently_delete(session, stock_id)
    return None
