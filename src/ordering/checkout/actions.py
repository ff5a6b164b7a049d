"""Checkout actions: the request-facing operations of order finalization.

Each action is one short unit of work triggered by a request. Actions never
let a business failure escape: every exception is caught at the boundary and
returned as a failed ``ActionResult`` with a short message, an optional
redirect hint and the error code. ``NavigationSignal`` is the one exception
that always propagates, so the web layer can perform the redirect.
"""

import functools
from typing import Any

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict, Field

from ordering.checkout.reconciliation import capture_payment, create_payment_intent
from ordering.errors import CheckoutError, NavigationSignal
from ordering.identity import Identity
from ordering.order.creation import commit_order
from ordering.order.lookup import OrderDetail, find_order
from ordering.order.order import PaymentResult
from ordering.order.payment import mark_order_paid
from ordering.order.validation import require_authenticated, validate_checkout
from ordering.utils.formatting import format_error

logger = structlog.get_logger(__name__)


class ActionResult(BaseModel):
    success: bool
    message: str = ""
    redirect_to: str | None = None
    data: dict[str, Any] | None = None
    error: str | None = None


class PayPalApproval(BaseModel):
    """Payload the PayPal buttons post back after the buyer approves."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderID", min_length=1)


def flow_boundary(action):
    """Convert every failure of ``action`` into a failed ActionResult."""

    @functools.wraps(action)
    async def wrapper(*args, **kwargs) -> ActionResult:
        try:
            return await action(*args, **kwargs)
        except NavigationSignal:
            raise
        except CheckoutError as exc:
            logger.warning(f"{action.__name__} rejected", error=exc.code, reason=exc.message)
            return ActionResult(success=False, message=exc.message, redirect_to=exc.redirect_to, error=exc.code)
        except pydantic.ValidationError as exc:
            logger.warning(f"{action.__name__} rejected", error="ValidationError", error_count=exc.error_count())
            return ActionResult(success=False, message=format_error(exc), error="ValidationError")
        except Exception as exc:
            logger.error(f"{action.__name__} failed", error=exc.__class__.__name__, exc_info=True)
            return ActionResult(success=False, message=format_error(exc), error="UnexpectedError")

    return wrapper


@flow_boundary
async def create_order(domain, identity: Identity | None) -> ActionResult:
    """Create an order from the identity's cart and saved checkout details."""
    user_id = require_authenticated(identity)
    profile = await domain.profiles.get_profile(user_id)
    cart = await domain.carts.get_cart(identity)

    payload = validate_checkout(identity, cart, profile)
    order_id = await commit_order(domain, payload, cart)

    return ActionResult(
        success=True,
        message="Order created successfully",
        redirect_to=f"/order/{order_id}",
        data={"order_id": order_id},
    )


async def get_order_by_id(domain, order_id: str) -> OrderDetail | None:
    """Read an order with its items and owner; None when it does not exist."""
    return await find_order(domain, order_id)


@flow_boundary
async def create_paypal_order(domain, order_id: str) -> ActionResult:
    intent_id = await create_payment_intent(domain, order_id)
    return ActionResult(
        success=True,
        message="Item order created successfully",
        data={"intent_id": intent_id},
    )


@flow_boundary
async def approve_paypal_order(domain, order_id: str, data) -> ActionResult:
    approval = data if isinstance(data, PayPalApproval) else PayPalApproval.model_validate(data)
    await capture_payment(domain, order_id, approval.order_id)
    return ActionResult(success=True, message="Your order has been paid")


@flow_boundary
async def update_order_to_paid(domain, order_id: str, payment_result: PaymentResult) -> ActionResult:
    """Mark an order paid with an externally confirmed payment result.

    ``AlreadyPaid`` and ``OrderNotFound`` come back as failed results tagged
    with their code so the caller can tell them apart.
    """
    await mark_order_paid(domain, order_id, payment_result)
    return ActionResult(success=True, message="Order paid successfully")
