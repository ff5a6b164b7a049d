"""FastAPI routes for the Ordering domain: checkout and PayPal payment."""

import hmac

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import RedirectResponse

from ordering.api.schemas import ApprovePayPalOrderRequest, PaymentResultRequest
from ordering.checkout.actions import (
    ActionResult,
    approve_paypal_order,
    create_order,
    create_paypal_order,
    get_order_by_id,
    update_order_to_paid,
)
from ordering.config import Settings, get_settings
from ordering.domain import OrderingDomain
from ordering.errors import NavigationSignal
from ordering.identity import Identity
from ordering.order.lookup import OrderDetail


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------
def get_domain(request: Request) -> OrderingDomain:
    return request.app.state.ordering


def get_identity(x_user_id: str | None = Header(default=None)) -> Identity:
    """Identity asserted by the upstream auth gateway via ``X-User-ID``."""
    return Identity(user_id=x_user_id or None)


def require_internal_caller(
    x_internal_token: str = Header(default=""),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject callers that do not present the shared ``X-Internal-Token``."""
    expected = settings.INTERNAL_API_TOKEN
    if not expected or not hmac.compare_digest(x_internal_token.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid internal token")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NavigationSignal)
    async def navigate(request: Request, exc: NavigationSignal):  # noqa: ARG001
        return RedirectResponse(url=exc.location, status_code=303)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", response_model=ActionResult)
async def place_order(
    identity: Identity = Depends(get_identity),
    domain: OrderingDomain = Depends(get_domain),
) -> ActionResult:
    return await create_order(domain, identity)


@order_router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: str,
    identity: Identity = Depends(get_identity),
    domain: OrderingDomain = Depends(get_domain),
) -> OrderDetail:
    """Order detail for its owner. Other callers get a 404."""
    if not identity.is_authenticated:
        raise HTTPException(status_code=401, detail="User is not authenticated")
    order = await get_order_by_id(domain, order_id)
    if order is None or order.user_id != identity.user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@order_router.post("/{order_id}/paypal", response_model=ActionResult)
async def create_paypal_payment(order_id: str, domain: OrderingDomain = Depends(get_domain)) -> ActionResult:
    return await create_paypal_order(domain, order_id)


@order_router.post("/{order_id}/paypal/approve", response_model=ActionResult)
async def approve_paypal_payment(
    order_id: str,
    body: ApprovePayPalOrderRequest,
    domain: OrderingDomain = Depends(get_domain),
) -> ActionResult:
    return await approve_paypal_order(domain, order_id, {"orderID": body.order_id})


# ---------------------------------------------------------------------------
# Internal Router (service-to-service)
# ---------------------------------------------------------------------------
internal_router = APIRouter(
    prefix="/internal/orders",
    tags=["internal"],
    dependencies=[Depends(require_internal_caller)],
)


@internal_router.put("/{order_id}/paid", response_model=ActionResult)
async def mark_paid(
    order_id: str,
    body: PaymentResultRequest,
    domain: OrderingDomain = Depends(get_domain),
) -> ActionResult:
    return await update_order_to_paid(domain, order_id, body.to_payment_result())
