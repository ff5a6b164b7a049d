"""PayPal payment gateway adapter (Orders API v2).

Each call opens a short-lived ``httpx.AsyncClient``, exchanges the client
credentials for an access token and then issues the request:

- create intent: ``POST /v2/checkout/orders`` with intent ``CAPTURE`` and a
  single purchase unit for the order total
- capture: ``POST /v2/checkout/orders/{id}/capture``

Any transport failure or non-2xx response becomes a ``GatewayError``. There is
no retry here; the timeout comes from configuration.
"""

from decimal import ROUND_HALF_UP, Decimal

import httpx
import structlog

from payments.gateway.port import CaptureResult, GatewayError, IntentResult, PaymentGateway

logger = structlog.get_logger(__name__)


def format_amount(amount: Decimal) -> str:
    """Render an amount the way PayPal expects it: two decimals, no grouping."""
    return str(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _malformed(action: str) -> GatewayError:
    logger.warning("PayPal returned a malformed response", action=action)
    return GatewayError(f"PayPal {action} failed: malformed response")


class PayPalGateway(PaymentGateway):
    """Production PayPal gateway adapter."""

    def __init__(
        self,
        client_id: str,
        app_secret: str,
        base_url: str = "https://api-m.sandbox.paypal.com",
        currency: str = "USD",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client_id = client_id
        self.app_secret = app_secret
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        response = await client.post(
            "/v1/oauth2/token",
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.app_secret),
        )
        data = self._handle_response(response, "authentication")
        token = data.get("access_token")
        if not token:
            raise _malformed("authentication")
        return token

    async def _post(self, path: str, action: str, json: dict | None = None) -> dict:
        try:
            async with self._client() as client:
                token = await self._access_token(client)
                response = await client.post(
                    path,
                    json=json,
                    headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
                )
                return self._handle_response(response, action)
        except httpx.HTTPError as exc:
            logger.error("PayPal request failed", action=action, error=str(exc))
            raise GatewayError(f"PayPal {action} failed: {exc.__class__.__name__}") from exc

    @staticmethod
    def _handle_response(response: httpx.Response, action: str) -> dict:
        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                data = None
            if not isinstance(data, dict):
                raise _malformed(action)
            return data

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        detail = body.get("message") or body.get("error_description") or body.get("name") or response.text
        logger.warning("PayPal rejected request", action=action, status_code=response.status_code, detail=detail)
        raise GatewayError(f"PayPal {action} failed: {detail}")

    async def create_order(self, amount: Decimal) -> IntentResult:
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {"amount": {"currency_code": self.currency, "value": format_amount(amount)}},
            ],
        }
        data = await self._post("/v2/checkout/orders", "create order", json=payload)
        if not data.get("id"):
            raise _malformed("create order")
        return IntentResult(id=data["id"], status=data.get("status"))

    async def capture_order(self, intent_id: str) -> CaptureResult:
        data = await self._post(f"/v2/checkout/orders/{intent_id}/capture", "capture")

        try:
            amount_paid = None
            units = data.get("purchase_units") or []
            if units:
                captures = (units[0].get("payments") or {}).get("captures") or []
                if captures:
                    amount_paid = (captures[0].get("amount") or {}).get("value")

            return CaptureResult(
                id=data.get("id", ""),
                status=data.get("status", ""),
                payer_email=(data.get("payer") or {}).get("email_address", ""),
                amount_paid=amount_paid,
            )
        except (AttributeError, IndexError, KeyError, TypeError) as exc:
            raise _malformed("capture") from exc
