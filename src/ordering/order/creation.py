"""Order commit transaction.

Turns a validated payload and the cart it came from into an Order. In a single
unit of work it inserts the order row, one order item per cart line, and
resets the source cart. Either all three happen or none do.

Two submissions of the same cart that both start before either commits will
both succeed and create two orders. Callers serialize checkout per session.
"""

import structlog
from sqlalchemy.exc import SQLAlchemyError

from ordering.cart.cart import CartSnapshot
from ordering.errors import OrderNotCreated
from ordering.order.order import Order
from ordering.order.validation import OrderPayload

logger = structlog.get_logger(__name__)


async def commit_order(domain, payload: OrderPayload, cart: CartSnapshot) -> str:
    """Persist the order and its items and clear the cart. Returns the order id."""
    try:
        async with domain.uow() as uow:
            order = Order.place(payload, cart.items)
            uow.orders.add(order)
            await uow.carts.clear(cart.id)
            await uow.commit()
    except (SQLAlchemyError, LookupError) as exc:
        logger.warning(
            "Order commit rolled back",
            user_id=payload.user_id,
            cart_id=cart.id,
            error=exc.__class__.__name__,
        )
        raise OrderNotCreated() from exc

    logger.info(
        "Order created",
        order_id=order.id,
        user_id=payload.user_id,
        cart_id=cart.id,
        item_count=len(cart.items),
        total_price=str(payload.total_price),
    )
    return order.id
