"""Payment gateway port (abstract interface).

Defines the contract that payment processor adapters implement. Checkout
talks to the processor only through this port, so PayPalGateway (production)
and FakeGateway (dev/test) are interchangeable.

The port has two operations: create an intent for an amount, and capture a
previously created intent. Transport, authentication and processor-side
failures surface as ``GatewayError``. Adapters do not retry.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


class GatewayError(Exception):
    """The payment processor could not be reached or refused the request."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class IntentResult:
    """A payment intent registered with the processor."""

    id: str
    status: str | None = None


@dataclass(frozen=True)
class CaptureResult:
    """Result of capturing a payment intent."""

    id: str
    status: str
    payer_email: str = ""
    amount_paid: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    async def create_order(self, amount: Decimal) -> IntentResult:
        """Register a payment intent for ``amount`` and return its id."""
        ...

    @abstractmethod
    async def capture_order(self, intent_id: str) -> CaptureResult:
        """Capture the funds authorized for ``intent_id``."""
        ...
