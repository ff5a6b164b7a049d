"""Tests for the checkout error taxonomy and user-facing messages."""

import pytest
from ordering.errors import (
    AlreadyPaid,
    CheckoutError,
    EmptyCart,
    GatewayError,
    NavigationSignal,
    OrderNotFound,
    PaymentMismatch,
)
from ordering.utils.formatting import GENERIC_MESSAGE, format_error
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError


class _Body(BaseModel):
    qty: int = Field(ge=1)


class TestTaxonomy:
    @pytest.mark.parametrize(
        "error_cls, code",
        [(EmptyCart, "EmptyCart"), (OrderNotFound, "OrderNotFound"), (AlreadyPaid, "AlreadyPaid")],
    )
    def test_codes(self, error_cls, code):
        assert error_cls().code == code

    def test_empty_cart_defaults_to_cart_redirect(self):
        assert EmptyCart().redirect_to == "/cart"

    def test_order_not_found_has_no_redirect(self):
        assert OrderNotFound().redirect_to is None

    def test_custom_message(self):
        assert GatewayError("PayPal capture failed: DECLINED").message == "PayPal capture failed: DECLINED"

    def test_navigation_signal_is_not_a_checkout_error(self):
        assert not issubclass(NavigationSignal, CheckoutError)
        assert NavigationSignal("/sign-in").location == "/sign-in"


class TestFormatError:
    def test_checkout_error_uses_its_message(self):
        assert format_error(PaymentMismatch()) == "Error in PayPal payment"

    def test_validation_error_lists_fields(self):
        with pytest.raises(PydanticValidationError) as exc:
            _Body(qty=0)

        assert format_error(exc.value).startswith("qty: ")

    def test_unexpected_error_is_generic(self):
        assert format_error(RuntimeError("db password is hunter2")) == GENERIC_MESSAGE
