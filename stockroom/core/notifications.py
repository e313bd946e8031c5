# stockroom/core/notifications.py
"""
Low-stock notification dispatch.

Services never notify from inside a transaction. They collect
LowStockEvent values while working, commit, and only then hand the events
to `dispatch_low_stock`. The default notifier sends email on a small
background thread pool, so SMTP latency or failure never reaches the
request that triggered the alert.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Protocol, Sequence

from stockroom.core import email_client
from stockroom.core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LowStockEvent:
    product_name: str
    batch_number: str
    quantity: int


class LowStockNotifier(Protocol):
    def notify_low_stock(
        self,
        product_name: str,
        batch_number: str,
        quantity: int,
        recipient_emails: Sequence[str],
    ) -> None:
        """Fire-and-forget. Must return quickly."""
        ...


class EmailLowStockNotifier:
    """
    Sends one email per low-stock event to all recipients.

    Sending happens on a ThreadPoolExecutor; errors are logged by the worker.
    """

    def __init__(self, max_workers: int | None = None):
        workers = max_workers or get_settings().NOTIFIER_MAX_WORKERS
        self._executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="low-stock-notifier",
        )

    def notify_low_stock(
        self,
        product_name: str,
        batch_number: str,
        quantity: int,
        recipient_emails: Sequence[str],
    ) -> None:
        if not recipient_emails:
            logger.info(
                "Low stock on %s (%s) but there are no recipients",
                product_name,
                batch_number,
            )
            return
        self._executor.submit(
            self._send,
            product_name,
            batch_number,
            quantity,
            list(recipient_emails),
        )

    @staticmethod
    def _send(
        product_name: str,
        batch_number: str,
        quantity: int,
        recipient_emails: list[str],
    ) -> None:
        subject = f"Low Stock Alert: {product_name} from {batch_number}"
        text_body = (
            f"The stock for {product_name} from batch {batch_number} is low. "
            f"Current quantity: {quantity}. Please restock soon."
        )
        try:
            email_client.send_email(recipient_emails, subject, text_body)
        except Exception:
            logger.exception("Error sending low stock alert for %s", batch_number)
            return
        logger.info(
            "Low stock alert for %s sent to %d recipient(s)",
            batch_number,
            len(recipient_emails),
        )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


@lru_cache
def get_notifier() -> EmailLowStockNotifier:
    """
    Process-wide notifier shared by every router.
    """
    return EmailLowStockNotifier()


def dispatch_low_stock(
    notifier: LowStockNotifier,
    events: Iterable[LowStockEvent],
    recipient_emails: Sequence[str],
) -> None:
    """
    Hand committed low-stock events to the notifier.

    Never raises: a broken notifier is logged and the caller carries on.
    """
    for event in events:
        try:
            notifier.notify_low_stock(
                event.product_name,
                event.batch_number,
                event.quantity,
                recipient_emails,
            )
        except Exception:
            logger.exception(
                "Failed to dispatch low stock alert for %s", event.batch_number
            )
