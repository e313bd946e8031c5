# stockroom/repositories/order_repo.py
import uuid

from sqlalchemy import update
from sqlmodel import Session, col, select

from stockroom.models.order import CANCELED_ORDER_STATUS, Order, OrderItem
from stockroom.models.soft_delete import utcnow
from stockroom.repositories.base import SoftDeleteRepository

_orders = Order.__table__  # type: ignore[attr-defined]


class OrderRepository(SoftDeleteRepository[Order]):
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here; order placement is a multi-step transaction.
        The service is responsible for calling session.commit().
    """

    model = Order

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    # ---- Order items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(col(OrderItem.position))
        )
        return list(session.exec(stmt).all())

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        for item in items:
            session.refresh(item)
        return items

    def delete_items(self, session: Session, order_id: uuid.UUID) -> None:
        for item in self.list_items_for_order(session, order_id):
            session.delete(item)
        session.flush()

    def mark_canceled(self, session: Session, order: Order) -> bool:
        """
        Flip an active, never-canceled order to canceled and stamp
        canceled_at. Returns False when the order was already canceled
        (possibly by a concurrent request) or deleted.
        """
        stmt = (
            update(_orders)
            .where(
                _orders.c.id == order.id,
                _orders.c.canceled_at.is_(None),
                _orders.c.deleted_at.is_(None),
            )
            .values(status=CANCELED_ORDER_STATUS, canceled_at=utcnow())
        )
        result = session.connection().execute(stmt)
        if result.rowcount != 1:
            return False
        session.refresh(order)
        return True
