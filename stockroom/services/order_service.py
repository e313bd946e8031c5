# stockroom/services/order_service.py
import logging
import math
import time
import uuid

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlmodel import Session

from stockroom.core.config import get_settings
from stockroom.core.errors import (
    AppError,
    ConflictError,
    CustomerNotFoundError,
    InsufficientStockError,
    InvalidInputError,
    OrderNotFoundError,
    StockNotFoundError,
    TransactionError,
)
from stockroom.core.notifications import LowStockEvent
from stockroom.models.order import (
    CANCELED_ORDER_STATUS,
    DEFAULT_ORDER_STATUS,
    Order,
    OrderItem,
)
from stockroom.models.soft_delete import DeleteScope
from stockroom.models.stock import Stock
from stockroom.repositories.customer_repo import CustomerRepository
from stockroom.repositories.order_repo import OrderRepository
from stockroom.repositories.product_repo import ProductRepository
from stockroom.repositories.stock_repo import StockRepository
from stockroom.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from stockroom.services.soft_delete import SoftDeleteService
from stockroom.services.stock_service import StockService, is_low_after_order

logger = logging.getLogger(__name__)


class OrderService(SoftDeleteService[Order]):
    """
    Business logic for orders.

    Responsibilities:
      - place an order as one all-or-nothing transaction:
        customer check, per-line stock deduction, total, persistence
      - queue low-stock alerts and send them only after commit
      - free-form status updates, cancellation with stock restore
    """

    entity_name = "Order"
    not_found_error = OrderNotFoundError

    def __init__(
        self,
        repo: OrderRepository,
        customer_repo: CustomerRepository,
        stock_repo: StockRepository,
        product_repo: ProductRepository,
        stock_service: StockService,
    ):
        super().__init__(repo)
        self.repo: OrderRepository = repo
        self.customer_repo = customer_repo
        self.stock_repo = stock_repo
        self.product_repo = product_repo
        self.stock_service = stock_service

    def _delete_owned_rows(self, session: Session, obj: Order) -> None:
        self.repo.delete_items(session, obj.id)

    # -------- Order placement --------

    def place_order(self, session: Session, payload: OrderCreate) -> OrderWithItemsRead:
        """
        Place an order, or fail with nothing persisted.

        Steps (one transaction):
          1. Customer must exist and be active.
          2. At least one line item.
          3. Per line, in the listed order: load the batch, check the
             quantity, deduct it with a conditional UPDATE, queue a
             low-stock event if the batch dropped below its alert.
          4. Resolve the total (caller's value or sum of price * qty).
          5. Insert Order + OrderItems (status 'pending').
          6. Commit.
        After commit:
          7. Dispatch queued low-stock events (best-effort).

        Any error rolls the session back, which discards every deduction
        made so far. Transient store errors (lock timeout, deadlock,
        serialization failure) are retried from step 1.
        """
        settings = get_settings()
        max_attempts = max(1, settings.ORDER_TX_MAX_ATTEMPTS)
        attempt = 0

        while True:
            attempt += 1
            try:
                order, items, events = self._place_order_once(session, payload)
                break
            except AppError:
                session.rollback()
                raise
            except OperationalError as exc:
                session.rollback()
                if attempt >= max_attempts:
                    logger.error(
                        "Order transaction failed after %d attempt(s): %s",
                        attempt,
                        exc.orig,
                    )
                    raise TransactionError(
                        "Order creation failed due to a storage error. Please retry.",
                        attempts=attempt,
                    )
                logger.warning(
                    "Transient failure placing order (attempt %d/%d): %s",
                    attempt,
                    max_attempts,
                    exc.orig,
                )
                time.sleep(settings.ORDER_TX_RETRY_BACKOFF * attempt)
            except SQLAlchemyError:
                session.rollback()
                logger.exception("Order transaction failed")
                raise TransactionError(
                    "Order creation failed due to a storage error.",
                )

        logger.info(
            "Order %s placed for customer %s (%d line(s), total %.2f)",
            order.id,
            order.customer_id,
            len(items),
            order.total_amount,
        )
        self.stock_service.dispatch_after_commit(session, events)
        return self._build_order_with_items_dto(session, order, items)

    def _place_order_once(
        self,
        session: Session,
        payload: OrderCreate,
    ) -> tuple[Order, list[OrderItem], list[LowStockEvent]]:
        # 1) Customer
        customer = self.customer_repo.get_active(session, payload.customer_id)
        if customer is None:
            raise CustomerNotFoundError(
                "Customer not found",
                id=str(payload.customer_id),
            )

        # 2) Line items
        if not payload.items:
            raise InvalidInputError(
                "Order must contain at least one item",
                field="items",
            )

        # 3) Deduct stock line by line
        # One event per batch, even when the batch is listed on several lines;
        # the last line leaves the lowest quantity
        events: dict[uuid.UUID, LowStockEvent] = {}
        stocks: list[Stock] = []

        for line in payload.items:
            stock = self.stock_repo.get_active_fresh(session, line.stock_id)
            if stock is None:
                raise StockNotFoundError(
                    f"Stock not found: {line.stock_id}",
                    id=str(line.stock_id),
                )

            product = self.product_repo.get_by_id(session, stock.product_id)
            product_name = product.name if product else str(stock.product_id)

            if line.quantity > stock.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product_name}. Available: {stock.quantity}",
                    product_name=product_name,
                    batch_number=stock.batch_number,
                    stock_id=str(stock.id),
                    available=stock.quantity,
                    requested=line.quantity,
                )

            self.stock_service.deduct(session, stock, line.quantity, product_name)

            if is_low_after_order(stock):
                events[stock.id] = self.stock_service.low_stock_event(stock, product_name)
            stocks.append(stock)

        # 4) Prices are read per line from the database, inside this transaction
        unit_prices = [
            self.product_repo.current_price(session, stock.product_id)
            for stock in stocks
        ]
        total_amount = self._resolve_total(payload, unit_prices)

        # 5) Persist
        order = self.repo.create_order(
            session,
            Order(
                customer_id=customer.id,
                total_amount=total_amount,
                status=DEFAULT_ORDER_STATUS,
            ),
        )
        items = self.repo.create_items(
            session,
            [
                OrderItem(
                    order_id=order.id,
                    stock_id=line.stock_id,
                    quantity=line.quantity,
                    unit_price=price,
                    position=idx,
                )
                for idx, (line, price) in enumerate(zip(payload.items, unit_prices))
            ],
        )

        # 6) Commit
        session.commit()
        session.refresh(order)
        return order, items, list(events.values())

    @staticmethod
    def _resolve_total(payload: OrderCreate, unit_prices: list[float | None]) -> float:
        """
        Caller's total when it is a finite positive number, otherwise the
        sum of price * quantity (a product without a price counts as 0).
        """
        supplied = payload.total_amount
        if supplied is not None and math.isfinite(supplied) and supplied > 0:
            return supplied

        total = 0.0
        for line, price in zip(payload.items, unit_prices):
            if price:
                total += price * line.quantity
        return total

    # -------- Queries --------

    def get_order(self, session: Session, order_id: uuid.UUID) -> OrderWithItemsRead:
        order = self.repo.get_active(session, order_id)
        if order is None:
            raise OrderNotFoundError(
                "Order not found or has been deleted",
                id=str(order_id),
            )
        items = self.repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(session, order, items)

    def list_orders(
        self,
        session: Session,
        scope: DeleteScope = DeleteScope.ACTIVE,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderWithItemsRead]:
        orders = self.list(session, scope=scope, skip=skip, limit=limit)
        return [
            self._build_order_with_items_dto(
                session, o, self.repo.list_items_for_order(session, o.id)
            )
            for o in orders
        ]

    # -------- Status --------

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Set a status string on an active order. No stock side effects.

        "canceled" is reserved for cancel_order (it gives stock back), and a
        canceled order keeps its status for good.
        """
        order = self.repo.get_active(session, order_id)
        if order is None:
            raise OrderNotFoundError(
                "Order not found or has been deleted",
                id=str(order_id),
            )

        if payload.status.lower() == CANCELED_ORDER_STATUS:
            raise InvalidInputError(
                "Use the cancel operation to cancel an order",
                field="status",
            )
        if order.canceled_at is not None:
            raise ConflictError(
                "Order is canceled and its status can no longer change",
                id=str(order_id),
            )

        order.status = payload.status
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def cancel_order(self, session: Session, order_id: uuid.UUID) -> OrderWithItemsRead:
        """
        Cancel an active order and put its quantities back on the batches.

        Stock is restored only together with the first setting of
        canceled_at, a conditional UPDATE, so an order gives its stock back
        at most once, even under concurrent cancels.
        """
        order = self.repo.get_active(session, order_id)
        if order is None:
            raise OrderNotFoundError(
                "Order not found or has been deleted",
                id=str(order_id),
            )

        try:
            if not self.repo.mark_canceled(session, order):
                session.rollback()
                raise ConflictError("Order is already canceled", id=str(order_id))

            items = self.repo.list_items_for_order(session, order.id)
            for item in items:
                stock = self.stock_repo.get_by_id(session, item.stock_id)
                if stock is not None:
                    self.stock_service.restore_quantity(session, stock, item.quantity)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Order cancellation failed")
            raise TransactionError("Order cancellation failed due to a storage error.")

        session.refresh(order)
        logger.info("Order %s canceled, %d line(s) restored", order.id, len(items))
        return self._build_order_with_items_dto(session, order, items)

    # -------- Helper DTO builders --------

    def _build_order_with_items_dto(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        customer = self.customer_repo.get_by_id(session, order.customer_id)
        return OrderWithItemsRead(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=(
                f"{customer.first_name} {customer.last_name}" if customer else None
            ),
            customer_email=customer.email if customer else None,
            total_amount=order.total_amount,
            status=order.status,
            created_at=order.created_at,
            canceled_at=order.canceled_at,
            deleted_at=order.deleted_at,
            items=[self._build_item_dto(session, it) for it in items],
        )

    def _build_item_dto(self, session: Session, item: OrderItem) -> OrderItemRead:
        stock = self.stock_repo.get_by_id(session, item.stock_id)
        product = (
            self.product_repo.get_by_id(session, stock.product_id) if stock else None
        )
        return OrderItemRead(
            id=item.id,
            order_id=item.order_id,
            stock_id=item.stock_id,
            batch_number=stock.batch_number if stock else None,
            product_id=product.id if product else None,
            product_name=product.name if product else None,
            product_code=product.product_code if product else None,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
