"""Tests for the PayPal adapter against a mocked Orders API."""

import json
from decimal import Decimal

import httpx
import pytest
from payments.gateway.paypal_adapter import PayPalGateway, format_amount
from payments.gateway.port import CaptureResult, GatewayError, IntentResult


class FakePayPal:
    """Records requests and answers like the PayPal sandbox."""

    def __init__(self, order_response=None, capture_response=None, token_status=200):
        self.requests = []
        self.order_response = order_response or httpx.Response(
            201, json={"id": "5O190127TN364715T", "status": "CREATED"}
        )
        self.capture_response = capture_response or httpx.Response(
            201,
            json={
                "id": "5O190127TN364715T",
                "status": "COMPLETED",
                "payer": {"email_address": "a@b.com"},
                "purchase_units": [{"payments": {"captures": [{"amount": {"currency_code": "USD", "value": "27.00"}}]}}],
            },
        )
        self.token_status = token_status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/oauth2/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client", "error_description": "Client Authentication failed"})
            return httpx.Response(200, json={"access_token": "A21AAF", "token_type": "Bearer"})
        if request.url.path.endswith("/capture"):
            return self.capture_response
        return self.order_response


def _gateway(paypal) -> PayPalGateway:
    return PayPalGateway(
        client_id="client",
        app_secret="secret",
        base_url="https://api-m.sandbox.paypal.com",
        transport=httpx.MockTransport(paypal),
    )


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [(Decimal("27"), "27.00"), (Decimal("10.5"), "10.50"), (Decimal("0.005"), "0.01"), (Decimal("1234.56"), "1234.56")],
    )
    def test_two_decimals(self, amount, expected):
        assert format_amount(amount) == expected


class TestCreateOrder:
    async def test_returns_intent(self):
        paypal = FakePayPal()

        result = await _gateway(paypal).create_order(Decimal("27.00"))

        assert isinstance(result, IntentResult)
        assert result.id == "5O190127TN364715T"
        assert result.status == "CREATED"

    async def test_authenticates_with_client_credentials(self):
        paypal = FakePayPal()

        await _gateway(paypal).create_order(Decimal("27.00"))

        token_request, order_request = paypal.requests
        assert token_request.url.path == "/v1/oauth2/token"
        assert token_request.headers["authorization"].startswith("Basic ")
        assert b"grant_type=client_credentials" in token_request.content
        assert order_request.headers["authorization"] == "Bearer A21AAF"

    async def test_sends_capture_intent_for_total(self):
        paypal = FakePayPal()

        await _gateway(paypal).create_order(Decimal("27"))

        body = json.loads(paypal.requests[1].content)
        assert paypal.requests[1].url.path == "/v2/checkout/orders"
        assert body == {
            "intent": "CAPTURE",
            "purchase_units": [{"amount": {"currency_code": "USD", "value": "27.00"}}],
        }

    async def test_rejected_request(self):
        paypal = FakePayPal(
            order_response=httpx.Response(422, json={"name": "UNPROCESSABLE_ENTITY", "message": "The requested action could not be performed"})
        )

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal create order failed: The requested action could not be performed"

    async def test_failed_authentication(self):
        paypal = FakePayPal(token_status=401)

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal authentication failed: Client Authentication failed"
        assert len(paypal.requests) == 1

    async def test_transport_failure(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = PayPalGateway(client_id="client", app_secret="secret", transport=httpx.MockTransport(unreachable))

        with pytest.raises(GatewayError) as exc:
            await gateway.create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal create order failed: ConnectError"


class TestCaptureOrder:
    async def test_returns_capture_details(self):
        paypal = FakePayPal()

        result = await _gateway(paypal).capture_order("5O190127TN364715T")

        assert result == CaptureResult(
            id="5O190127TN364715T",
            status="COMPLETED",
            payer_email="a@b.com",
            amount_paid="27.00",
        )
        assert paypal.requests[1].url.path == "/v2/checkout/orders/5O190127TN364715T/capture"

    async def test_capture_without_captures(self):
        paypal = FakePayPal(capture_response=httpx.Response(201, json={"id": "X", "status": "PENDING"}))

        result = await _gateway(paypal).capture_order("X")

        assert result.status == "PENDING"
        assert result.payer_email == ""
        assert result.amount_paid is None

    async def test_non_json_error_body(self):
        paypal = FakePayPal(capture_response=httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).capture_order("X")

        assert exc.value.message == "PayPal capture failed: Bad Gateway"


class _MalformedPayPal(FakePayPal):
    """Answers the token request with a custom response."""

    def __init__(self, token_response, **kwargs):
        super().__init__(**kwargs)
        self.token_response = token_response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/oauth2/token":
            self.requests.append(request)
            return self.token_response
        return super().__call__(request)


class TestMalformedResponses:
    async def test_token_without_access_token(self):
        paypal = _MalformedPayPal(httpx.Response(200, json={"token_type": "Bearer"}))

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal authentication failed: malformed response"
        assert len(paypal.requests) == 1

    async def test_token_body_is_not_json(self):
        paypal = _MalformedPayPal(httpx.Response(200, text="<html>maintenance</html>"))

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal authentication failed: malformed response"

    async def test_created_order_without_id(self):
        paypal = FakePayPal(order_response=httpx.Response(201, json={"status": "CREATED"}))

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal create order failed: malformed response"

    async def test_created_order_body_is_not_json(self):
        paypal = FakePayPal(order_response=httpx.Response(201, text="OK"))

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).create_order(Decimal("27.00"))

        assert exc.value.message == "PayPal create order failed: malformed response"

    async def test_capture_body_is_a_list(self):
        paypal = FakePayPal(capture_response=httpx.Response(201, json=[{"id": "X"}]))

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).capture_order("X")

        assert exc.value.message == "PayPal capture failed: malformed response"

    async def test_capture_with_malformed_purchase_units(self):
        paypal = FakePayPal(
            capture_response=httpx.Response(201, json={"id": "X", "status": "COMPLETED", "purchase_units": "none"})
        )

        with pytest.raises(GatewayError) as exc:
            await _gateway(paypal).capture_order("X")

        assert exc.value.message == "PayPal capture failed: malformed response"
