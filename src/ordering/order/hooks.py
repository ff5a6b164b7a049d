"""Side-effect hooks around the paid transition.

The mark-paid step calls these capabilities but does not implement them, so
each can be switched on independently:

- ``StockLedger`` runs inside the mark-paid transaction. The default
  ``DisabledStockLedger`` leaves stock untouched; ``SqlStockLedger``
  decrements ``products.stock`` for each order item.
- ``OrderNotifier`` runs after the transaction has committed. Its failures are
  logged and never undo the payment.
"""

from abc import ABC, abstractmethod

import structlog

logger = structlog.get_logger(__name__)


class StockLedger(ABC):
    @abstractmethod
    async def decrement(self, uow, items) -> None:
        """Take the ordered quantities out of stock within ``uow``."""
        ...


class DisabledStockLedger(StockLedger):
    async def decrement(self, uow, items) -> None:  # noqa: ARG002
        logger.debug("Stock decrement disabled", item_count=len(items))


class SqlStockLedger(StockLedger):
    async def decrement(self, uow, items) -> None:
        for item in items:
            await uow.products.decrement_stock(item.product_id, item.qty)


class OrderNotifier(ABC):
    @abstractmethod
    async def order_paid(self, order_id: str) -> None:
        """Tell the customer their order has been paid."""
        ...


class LoggingNotifier(OrderNotifier):
    # TODO: send the order confirmation email through an SMTP or provider-backed notifier
    async def order_paid(self, order_id: str) -> None:
        logger.info("Order confirmation queued", order_id=order_id)
