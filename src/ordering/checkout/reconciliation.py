"""Payment reconciliation between orders and the payment processor.

Per order the payment moves through:

    Unpaid --create_payment_intent--> IntentCreated --capture_payment--> Paid

``create_payment_intent`` asks the processor for an intent covering the order
total and stores a placeholder payment result holding the intent id. It is not
deduplicated: a second call creates a second remote intent and replaces the
placeholder. A paid order is refused with ``AlreadyPaid``, before the processor
is asked and again when the placeholder is written.

``capture_payment`` captures the intent the client approved. The capture must
report ``COMPLETED`` and carry the id stored on the order; otherwise nothing on
the order changes. A good capture is handed to ``mark_order_paid``.

No database transaction is held open while waiting on the processor.
"""

import structlog

from ordering.errors import AlreadyPaid, GatewayError, OrderNotFound, PaymentMismatch
from ordering.order.order import PaymentResult
from ordering.order.payment import mark_order_paid
from payments.gateway import GatewayError as ProcessorError

logger = structlog.get_logger(__name__)

CAPTURE_COMPLETED = "COMPLETED"


async def create_payment_intent(domain, order_id: str) -> str:
    """Create a processor intent for the order total. Returns the intent id."""
    async with domain.uow() as uow:
        order = await uow.orders.get(order_id)
        if order is None:
            raise OrderNotFound()
        order.assert_payable()
        amount = order.total_price

    try:
        intent = await domain.payment_gateway.create_order(amount)
    except ProcessorError as exc:
        raise GatewayError(exc.message) from exc

    async with domain.uow() as uow:
        if not await uow.orders.record_intent(order_id, PaymentResult.placeholder(intent.id)):
            raise AlreadyPaid()
        await uow.commit()

    domain.order_views.invalidate(order_id)
    logger.info("Payment intent created", order_id=order_id, intent_id=intent.id, amount=str(amount))
    return intent.id


async def capture_payment(domain, order_id: str, external_order_id: str) -> PaymentResult:
    """Capture an approved intent and mark the order paid."""
    async with domain.uow() as uow:
        order = await uow.orders.get(order_id)
        if order is None:
            raise OrderNotFound()
        stored = order.stored_payment

    try:
        capture = await domain.payment_gateway.capture_order(external_order_id)
    except ProcessorError as exc:
        raise GatewayError(exc.message) from exc

    if capture is None or capture.status != CAPTURE_COMPLETED or stored is None or capture.id != stored.id:
        logger.warning(
            "Payment capture rejected",
            order_id=order_id,
            capture_status=capture.status if capture else None,
            capture_matches_intent=bool(capture and stored and capture.id == stored.id),
        )
        raise PaymentMismatch()

    payment_result = PaymentResult(
        id=capture.id,
        status=capture.status,
        email_address=capture.payer_email,
        price_paid=capture.amount_paid or "0",
    )
    await mark_order_paid(domain, order_id, payment_result)
    return payment_result
