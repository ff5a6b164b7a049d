"""Configurable fake payment gateway for development and testing.

This adapter simulates the processor without any external calls. It can be
configured at runtime to fail outright, to report a capture that did not
complete, or to return a capture id different from the intent id. That makes
every reconciliation branch reachable from tests.
"""

from decimal import Decimal
from uuid import uuid4

from payments.gateway.port import CaptureResult, GatewayError, IntentResult, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment processor unavailable"
        self.capture_status: str = "COMPLETED"
        self.capture_id: str | None = None
        self.payer_email: str = "buyer@example.com"
        self.intents: dict[str, Decimal] = {}
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Payment processor unavailable",
        capture_status: str = "COMPLETED",
        capture_id: str | None = None,
        payer_email: str = "buyer@example.com",
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.capture_status = capture_status
        self.capture_id = capture_id
        self.payer_email = payer_email

    async def create_order(self, amount: Decimal) -> IntentResult:
        self.calls.append({"method": "create_order", "amount": amount})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        intent_id = f"FAKE-{uuid4().hex[:16].upper()}"
        self.intents[intent_id] = Decimal(amount)
        return IntentResult(id=intent_id, status="CREATED")

    async def capture_order(self, intent_id: str) -> CaptureResult:
        self.calls.append({"method": "capture_order", "intent_id": intent_id})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        amount = self.intents.get(intent_id, Decimal("0"))
        return CaptureResult(
            id=self.capture_id or intent_id,
            status=self.capture_status,
            payer_email=self.payer_email,
            amount_paid=f"{amount:.2f}",
        )
