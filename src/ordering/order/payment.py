"""Order payment: the one-way transition to paid."""

from datetime import UTC, datetime

import structlog

from ordering.errors import AlreadyPaid, OrderNotFound
from ordering.order.order import PaymentResult

logger = structlog.get_logger(__name__)


async def mark_order_paid(domain, order_id: str, payment_result: PaymentResult) -> None:
    """Mark an order paid and store the final payment result.

    Raises ``OrderNotFound`` for an unknown order and ``AlreadyPaid`` if the
    order is, or concurrently becomes, paid. Neither is caught here. The
    is_paid flag, paid_at and payment_result are written in one transaction,
    together with any stock movement from the configured ``StockLedger``.
    """
    async with domain.uow() as uow:
        order = await uow.orders.get(order_id, with_items=True)
        if order is None:
            raise OrderNotFound()
        order.assert_payable()

        await domain.stock_ledger.decrement(uow, order.items)

        paid_at = datetime.now(UTC)
        if not await uow.orders.mark_paid(order_id, payment_result, paid_at):
            raise AlreadyPaid()
        await uow.commit()

    domain.order_views.invalidate(order_id)
    logger.info(
        "Order marked as paid",
        order_id=order_id,
        payment_id=payment_result.id,
        price_paid=payment_result.price_paid,
    )

    try:
        await domain.notifier.order_paid(order_id)
    except Exception:
        logger.exception("Order confirmation failed", order_id=order_id)
