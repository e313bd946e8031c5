# stockroom/services/stock_service.py
import logging
import uuid
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from stockroom.core.config import get_settings
from stockroom.core.errors import (
    InsufficientStockError,
    ProductNotFoundError,
    StockNotFoundError,
)
from stockroom.core.notifications import (
    LowStockEvent,
    LowStockNotifier,
    dispatch_low_stock,
)
from stockroom.models.soft_delete import utcnow
from stockroom.models.stock import Stock
from stockroom.repositories.product_repo import ProductRepository
from stockroom.repositories.stock_repo import StockRepository
from stockroom.repositories.user_repo import UserRepository
from stockroom.schemas.stock import LowStockCheckResult, StockAdjust, StockCreate, StockRead
from stockroom.services.codes import batch_number
from stockroom.services.soft_delete import SoftDeleteService

logger = logging.getLogger(__name__)


# Two threshold policies, kept apart on purpose:
#   - after an order deduction the batch is low once it drops BELOW the alert
#   - after a manual adjustment (and in the sweep) it is low AT the alert too


def is_low_after_order(stock: Stock) -> bool:
    return stock.quantity < stock.low_stock_alert


def is_low_after_adjust(stock: Stock) -> bool:
    return stock.quantity <= stock.low_stock_alert


class StockService(SoftDeleteService[Stock]):
    """
    Stock ledger: quantity on hand per batch.

    Responsibilities:
      - batch creation with generated batch numbers
      - atomic deduct / restore used by order placement and cancellation
      - manual adjustments followed by a low-stock check
      - low-stock alerts, always dispatched after commit
    """

    entity_name = "Stock"
    not_found_error = StockNotFoundError

    def __init__(
        self,
        repo: StockRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        notifier: LowStockNotifier,
    ):
        super().__init__(repo)
        self.repo: StockRepository = repo
        self.product_repo = product_repo
        self.user_repo = user_repo
        self.notifier = notifier

    # ----- Ledger operations (run inside the caller's transaction) -----

    def deduct(self, session: Session, stock: Stock, qty: int, product_name: str) -> int:
        """
        Take `qty` units from the batch and return the new quantity.

        Raises InsufficientStockError if the batch does not have `qty` left
        at the moment of the update, including when a concurrent order
        consumed it after our availability check.
        """
        new_quantity = self.repo.deduct(session, stock, qty)
        if new_quantity is None:
            session.refresh(stock)
            raise InsufficientStockError(
                f"Insufficient stock for {product_name}. Available: {stock.quantity}",
                product_name=product_name,
                batch_number=stock.batch_number,
                stock_id=str(stock.id),
                available=stock.quantity,
                requested=qty,
            )
        return new_quantity

    def restore_quantity(self, session: Session, stock: Stock, qty: int) -> int:
        """Give back `qty` units taken by an earlier deduction."""
        return self.repo.restore(session, stock, qty)

    @staticmethod
    def low_stock_event(stock: Stock, product_name: str) -> LowStockEvent:
        return LowStockEvent(
            product_name=product_name,
            batch_number=stock.batch_number,
            quantity=stock.quantity,
        )

    # ----- Notifications -----

    def dispatch_after_commit(
        self,
        session: Session,
        events: Sequence[LowStockEvent],
    ) -> None:
        """
        Send committed low-stock events to every registered user.

        Best-effort: failures are logged and never reach the caller.
        """
        if not events:
            return
        try:
            recipients = self.user_repo.list_emails(session)
        except SQLAlchemyError:
            logger.exception("Could not load low stock alert recipients")
            return
        logger.info(
            "Dispatching %d low stock alert(s) to %d recipient(s)",
            len(events),
            len(recipients),
        )
        dispatch_low_stock(self.notifier, events, recipients)

    def _product_name(self, session: Session, stock: Stock) -> str | None:
        product = self.product_repo.get_by_id(session, stock.product_id)
        return product.name if product else None

    def to_read(self, session: Session, stock: Stock) -> StockRead:
        """Batch with its product's name and code filled in."""
        read = StockRead.model_validate(stock)
        product = self.product_repo.get_by_id(session, stock.product_id)
        if product is not None:
            read.product_name = product.name
            read.product_code = product.product_code
        return read

    # ----- Commands -----

    def create_stock_batch(self, session: Session, payload: StockCreate) -> Stock:
        """
        Receive a new batch for an active product.

        batch_number = BATCH_<productCode>_<DDMMYY> (creation date, UTC).
        """
        product = self.product_repo.get_active(session, payload.product_id)
        if product is None:
            raise ProductNotFoundError("Invalid product ID", id=str(payload.product_id))

        now = utcnow()
        low_stock_alert = payload.low_stock_alert
        if low_stock_alert is None:
            low_stock_alert = get_settings().DEFAULT_LOW_STOCK_ALERT

        stock = Stock(
            product_id=product.id,
            batch_number=batch_number(product.product_code, now.date()),
            quantity=payload.quantity,
            size=payload.size,
            price=payload.price,
            supplier=payload.supplier,
            low_stock_alert=low_stock_alert,
            last_restocked=now,
            created_at=now,
        )
        session.add(stock)
        session.commit()
        session.refresh(stock)
        logger.info("Created stock batch %s (%s)", stock.batch_number, stock.id)
        return stock

    def adjust_stock(
        self,
        session: Session,
        stock_id: uuid.UUID,
        payload: StockAdjust,
    ) -> Stock:
        """
        Manual partial update of an active batch.

        Always bumps last_restocked. After commit, alerts if
        quantity <= low_stock_alert.
        """
        stock = self.get_active(session, stock_id)

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(stock, field, value)
        stock.last_restocked = utcnow()

        session.add(stock)
        session.commit()
        session.refresh(stock)

        if is_low_after_adjust(stock):
            product_name = self._product_name(session, stock)
            if product_name is None:
                logger.warning("Stock %s has no product; skipping low stock alert", stock.id)
            else:
                self.dispatch_after_commit(
                    session, [self.low_stock_event(stock, product_name)]
                )
        return stock

    # ----- Low stock sweep -----

    def list_low_stock(self, session: Session) -> list[Stock]:
        return self.repo.list_at_or_below_threshold(session)

    def check_low_stock(self, session: Session) -> LowStockCheckResult:
        """
        Alert for every active batch at or below its threshold.
        """
        batches = self.list_low_stock(session)
        events: list[LowStockEvent] = []
        for stock in batches:
            product_name = self._product_name(session, stock)
            if product_name is not None:
                events.append(self.low_stock_event(stock, product_name))

        self.dispatch_after_commit(session, events)
        return LowStockCheckResult(
            alerts_sent=len(events),
            batches=[self.to_read(session, s) for s in batches],
        )
