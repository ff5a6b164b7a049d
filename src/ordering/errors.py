"""Checkout error taxonomy.

Every business-rule violation in the order and payment flows is a
``CheckoutError``. Flow boundaries turn these into failed ``ActionResult``
values. ``NavigationSignal`` is deliberately not part of the hierarchy: it is a
control value asking the web layer to redirect, and boundaries re-raise it.
"""


class CheckoutError(Exception):
    code = "CheckoutError"
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, redirect_to: str | None = None) -> None:
        self.message = message or self.default_message
        self.redirect_to = redirect_to
        super().__init__(self.message)


class Unauthenticated(CheckoutError):
    code = "Unauthenticated"
    default_message = "User is not authenticated"


class UserNotFound(CheckoutError):
    code = "UserNotFound"
    default_message = "User not found"


class EmptyCart(CheckoutError):
    code = "EmptyCart"
    default_message = "Cart is empty"

    def __init__(self, message: str | None = None, redirect_to: str | None = "/cart") -> None:
        super().__init__(message, redirect_to)


class MissingAddress(CheckoutError):
    code = "MissingAddress"
    default_message = "No shipping address"

    def __init__(self, message: str | None = None, redirect_to: str | None = "/shipping-address") -> None:
        super().__init__(message, redirect_to)


class MissingPaymentMethod(CheckoutError):
    code = "MissingPaymentMethod"
    default_message = "No payment method"

    def __init__(self, message: str | None = None, redirect_to: str | None = "/payment-method") -> None:
        super().__init__(message, redirect_to)


class ValidationError(CheckoutError):
    """Order payload failed schema validation.

    ``errors`` keeps the field-level messages (``{"field": ["msg", ...]}``) in
    the same shape domain validation errors use elsewhere in ShopStream.
    """

    code = "ValidationError"
    default_message = "Invalid order data"

    def __init__(self, errors: dict[str, list[str]] | None = None, message: str | None = None) -> None:
        self.errors = errors or {}
        super().__init__(message)


class OrderNotCreated(CheckoutError):
    code = "OrderNotCreated"
    default_message = "Order not created"


class OrderNotFound(CheckoutError):
    code = "OrderNotFound"
    default_message = "Order not found"


class AlreadyPaid(CheckoutError):
    code = "AlreadyPaid"
    default_message = "Order is already paid"


class GatewayError(CheckoutError):
    code = "GatewayError"
    default_message = "Error in PayPal payment"


class PaymentMismatch(CheckoutError):
    code = "PaymentMismatch"
    default_message = "Error in PayPal payment"


class NavigationSignal(Exception):
    """Request for the surrounding web framework to navigate to ``location``."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)
