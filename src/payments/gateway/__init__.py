"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- PayPalGateway for production
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.paypal_adapter import PayPalGateway
from payments.gateway.port import CaptureResult, GatewayError, IntentResult, PaymentGateway

__all__ = [
    "CaptureResult",
    "FakeGateway",
    "GatewayError",
    "IntentResult",
    "PayPalGateway",
    "PaymentGateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def _build_default() -> PaymentGateway:
    from ordering.config import get_settings

    settings = get_settings()
    if settings.PAYMENT_GATEWAY == "paypal":
        return PayPalGateway(
            client_id=settings.PAYPAL_CLIENT_ID,
            app_secret=settings.PAYPAL_APP_SECRET,
            base_url=settings.PAYPAL_API_URL,
            currency=settings.PAYPAL_CURRENCY,
            timeout=settings.PAYPAL_TIMEOUT,
        )
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_default()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
