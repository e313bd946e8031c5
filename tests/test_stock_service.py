# tests/test_stock_service.py

import pytest

from stockroom.core.errors import InsufficientStockError, ProductNotFoundError, StockNotFoundError
from stockroom.core.notifications import LowStockEvent, dispatch_low_stock
from stockroom.models.stock import Stock
from stockroom.schemas.stock import StockAdjust, StockCreate
from stockroom.services.stock_service import is_low_after_adjust, is_low_after_order


class ExplodingNotifier:
    def notify_low_stock(self, product_name, batch_number, quantity, recipient_emails):
        raise RuntimeError("smtp is down")


def test_threshold_policies_differ_at_the_boundary():
    at_threshold = Stock(
        product_id=None, batch_number="B", quantity=5, size="M",
        price=1.0, supplier="S", low_stock_alert=5,
    )
    assert is_low_after_adjust(at_threshold)
    assert not is_low_after_order(at_threshold)

    at_threshold.quantity = 4
    assert is_low_after_order(at_threshold)


def test_create_stock_batch_generates_batch_number(session, stock_service, make_product):
    product = make_product(code="FOO007")

    stock = stock_service.create_stock_batch(
        session,
        StockCreate(product_id=product.id, quantity=12, size="L", price=30.0, supplier="Acme"),
    )

    assert stock.batch_number.startswith("BATCH_FOO007_")
    assert len(stock.batch_number) == len("BATCH_FOO007_") + 6
    assert stock.quantity == 12
    assert stock.low_stock_alert == 5


def test_create_stock_batch_for_deleted_product_is_not_found(
    session, stock_service, make_product
):
    product = make_product()
    product.deleted_at = product.created_at
    session.add(product)
    session.commit()

    with pytest.raises(ProductNotFoundError):
        stock_service.create_stock_batch(
            session,
            StockCreate(product_id=product.id, quantity=1, size="L", price=1.0, supplier="Acme"),
        )


def test_adjust_to_threshold_notifies_all_users(
    session, stock_service, notifier, make_product, make_stock, make_user
):
    make_user("a@acme.io")
    make_user("b@acme.io")
    product = make_product(name="Trail Runner")
    stock = make_stock(product, quantity=20, low_stock_alert=5)

    updated = stock_service.adjust_stock(session, stock.id, StockAdjust(quantity=5))

    assert updated.quantity == 5
    assert notifier.calls == [
        {
            "product_name": "Trail Runner",
            "batch_number": stock.batch_number,
            "quantity": 5,
            "recipients": ["a@acme.io", "b@acme.io"],
        }
    ]


def test_adjust_above_threshold_does_not_notify(
    session, stock_service, notifier, make_product, make_stock, make_user
):
    make_user()
    product = make_product()
    stock = make_stock(product, quantity=20, low_stock_alert=5)

    stock_service.adjust_stock(session, stock.id, StockAdjust(quantity=6))

    assert notifier.calls == []


def test_adjust_bumps_last_restocked(session, stock_service, make_product, make_stock):
    product = make_product()
    stock = make_stock(product)
    before = stock.last_restocked

    updated = stock_service.adjust_stock(session, stock.id, StockAdjust(supplier="Other"))

    assert updated.supplier == "Other"
    assert updated.last_restocked.replace(tzinfo=None) >= before.replace(tzinfo=None)


def test_adjust_deleted_batch_is_not_found(session, stock_service, make_product, make_stock):
    product = make_product()
    stock = make_stock(product)
    stock_service.soft_delete(session, stock.id)

    with pytest.raises(StockNotFoundError):
        stock_service.adjust_stock(session, stock.id, StockAdjust(quantity=1))


def test_deduct_refuses_to_go_negative(session, stock_service, make_product, make_stock):
    product = make_product()
    stock = make_stock(product, quantity=3)

    with pytest.raises(InsufficientStockError) as exc:
        stock_service.deduct(session, stock, 4, product.name)
    session.rollback()

    assert exc.value.context["available"] == 3
    assert exc.value.context["requested"] == 4
    session.refresh(stock)
    assert stock.quantity == 3


def test_deduct_and_restore(session, stock_service, make_product, make_stock):
    product = make_product()
    stock = make_stock(product, quantity=10)

    assert stock_service.deduct(session, stock, 4, product.name) == 6
    assert stock_service.restore_quantity(session, stock, 4) == 10
    session.commit()


def test_check_low_stock_sweeps_active_batches(
    session, stock_service, notifier, make_product, make_stock, make_user
):
    make_user()
    product = make_product()
    low = make_stock(product, quantity=2, low_stock_alert=5, batch="BATCH_FOO001_010125")
    make_stock(product, quantity=50, low_stock_alert=5, batch="BATCH_FOO001_020125")
    deleted = make_stock(product, quantity=0, low_stock_alert=5, batch="BATCH_FOO001_030125")
    stock_service.soft_delete(session, deleted.id)

    result = stock_service.check_low_stock(session)

    assert result.alerts_sent == 1
    assert [b.id for b in result.batches] == [low.id]
    assert [c["batch_number"] for c in notifier.calls] == ["BATCH_FOO001_010125"]


def test_dispatch_swallows_notifier_failures():
    events = [LowStockEvent(product_name="P", batch_number="B", quantity=1)]

    dispatch_low_stock(ExplodingNotifier(), events, ["a@acme.io"])


def test_dispatch_sends_every_event(notifier):
    events = [
        LowStockEvent(product_name="P", batch_number="B1", quantity=1),
        LowStockEvent(product_name="P", batch_number="B2", quantity=0),
    ]

    dispatch_low_stock(notifier, events, ["a@acme.io"])

    assert [c["batch_number"] for c in notifier.calls] == ["B1", "B2"]
