"""Order validation: checkout preconditions and the insert-order schema.

Preconditions are checked in a fixed order, the first failure wins:

1. an authenticated identity          -> Unauthenticated
2. a cart with at least one item      -> EmptyCart (redirect /cart)
3. a saved shipping address           -> MissingAddress (redirect /shipping-address)
4. a saved payment method             -> MissingPaymentMethod (redirect /payment-method)

The payload handed to the commit transaction is then checked against
``OrderPayload``; a schema violation becomes ``ValidationError``.
"""

from decimal import Decimal

import pydantic
from pydantic import BaseModel, Field

from ordering.cart.cart import CartSnapshot
from ordering.customer.customer import ShippingAddress, UserProfile
from ordering.errors import EmptyCart, MissingAddress, MissingPaymentMethod, Unauthenticated, ValidationError
from ordering.identity import Identity


class OrderPayload(BaseModel):
    user_id: str = Field(min_length=1)
    shipping_address: ShippingAddress
    payment_method: str = Field(min_length=1)
    items_price: Decimal = Field(ge=0, decimal_places=2)
    shipping_price: Decimal = Field(ge=0, decimal_places=2)
    tax_price: Decimal = Field(ge=0, decimal_places=2)
    total_price: Decimal = Field(ge=0, decimal_places=2)


def require_authenticated(identity: Identity | None) -> str:
    if identity is None or not identity.is_authenticated:
        raise Unauthenticated()
    return identity.user_id


def validate_checkout(identity: Identity | None, cart: CartSnapshot | None, profile: UserProfile) -> OrderPayload:
    """Gate checkout and build the order payload from the cart and profile."""
    require_authenticated(identity)

    if cart is None or cart.is_empty:
        raise EmptyCart()
    if not profile.address:
        raise MissingAddress()
    if not profile.payment_method:
        raise MissingPaymentMethod()

    try:
        return OrderPayload(
            user_id=profile.id,
            shipping_address=profile.address,
            payment_method=profile.payment_method,
            items_price=cart.items_price,
            shipping_price=cart.shipping_price,
            tax_price=cart.tax_price,
            total_price=cart.total_price,
        )
    except pydantic.ValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "order"
            errors.setdefault(field, []).append(error["msg"])
        raise ValidationError(errors) from exc
