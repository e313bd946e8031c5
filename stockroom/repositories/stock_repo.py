# stockroom/repositories/stock_repo.py
import uuid

from sqlalchemy import update
from sqlmodel import Session, col, select

from stockroom.models.stock import Stock
from stockroom.repositories.base import SoftDeleteRepository

_stocks = Stock.__table__  # type: ignore[attr-defined]


class StockRepository(SoftDeleteRepository[Stock]):
    """
    Data access layer for stock batches.

    Quantity changes made on behalf of orders are single conditional UPDATE
    statements executed on the session's connection, so they join the
    caller's transaction and cannot interleave with a concurrent
    read-check-write on the same batch.
    """

    model = Stock

    def deduct(self, session: Session, stock: Stock, qty: int) -> int | None:
        """
        quantity -= qty, only if the batch is active and has at least `qty`.

        Returns the new quantity, or None when no row matched (batch gone or
        not enough left, possibly because a concurrent order got there first).
        """
        stmt = (
            update(_stocks)
            .where(
                _stocks.c.id == stock.id,
                _stocks.c.quantity >= qty,
                _stocks.c.deleted_at.is_(None),
            )
            .values(quantity=_stocks.c.quantity - qty)
        )
        result = session.connection().execute(stmt)
        if result.rowcount != 1:
            return None
        session.refresh(stock)
        return stock.quantity

    def restore(self, session: Session, stock: Stock, qty: int) -> int:
        """
        quantity += qty. Reverses an earlier deduction.
        """
        stmt = (
            update(_stocks)
            .where(_stocks.c.id == stock.id)
            .values(quantity=_stocks.c.quantity + qty)
        )
        session.connection().execute(stmt)
        session.refresh(stock)
        return stock.quantity

    def list_at_or_below_threshold(self, session: Session) -> list[Stock]:
        """Active batches with quantity <= low_stock_alert."""
        stmt = (
            select(Stock)
            .where(
                col(Stock.quantity) <= col(Stock.low_stock_alert),
                col(Stock.deleted_at).is_(None),
            )
            .order_by(col(Stock.quantity))
        )
        return list(session.exec(stmt).all())

    def get_active_fresh(self, session: Session, stock_id: uuid.UUID) -> Stock | None:
        """
        Active batch re-read from the database, bypassing any stale copy
        in the session's identity map.
        """
        stmt = (
            select(Stock)
            .where(Stock.id == stock_id, col(Stock.deleted_at).is_(None))
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()
