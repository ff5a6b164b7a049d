"""Shopping cart as seen by checkout.

Cart pricing and item management belong to the cart service; checkout only
reads the current cart through ``CartProvider`` and, inside the order commit
transaction, resets it. Items are stored on the cart row as a JSON list, each
entry a priced snapshot of the product when it was added.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field
from sqlalchemy import JSON, Numeric, String, select
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from ordering.identity import Identity
from ordering.utils.db import Base

ZERO = Decimal("0")


class Cart(Base):
    __tablename__ = "carts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str | None] = mapped_column(String(36), index=True)
    session_cart_id: Mapped[str | None] = mapped_column(String(255))
    items: Mapped[list] = mapped_column(JSON, default=list)
    items_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO)
    shipping_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO)
    tax_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO)

    def clear(self) -> None:
        """Empty the cart and zero every price field."""
        self.items = []
        self.items_price = ZERO
        self.shipping_price = ZERO
        self.tax_price = ZERO
        self.total_price = ZERO


class CartLine(BaseModel):
    product_id: str
    name: str
    slug: str
    image: str | None = None
    price: Decimal = Field(ge=0)
    qty: int = Field(ge=1)


class CartSnapshot(BaseModel):
    id: str
    user_id: str | None = None
    items: list[CartLine] = []
    items_price: Decimal = ZERO
    shipping_price: Decimal = ZERO
    tax_price: Decimal = ZERO
    total_price: Decimal = ZERO

    @property
    def is_empty(self) -> bool:
        return not self.items

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartSnapshot":
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            items=[CartLine(**item) for item in cart.items or []],
            items_price=cart.items_price,
            shipping_price=cart.shipping_price,
            tax_price=cart.tax_price,
            total_price=cart.total_price,
        )


class CartProvider(ABC):
    @abstractmethod
    async def get_cart(self, identity: Identity) -> CartSnapshot | None:
        """Return the identity's current cart, or None when it has none."""
        ...


class SqlCartProvider(CartProvider):
    def __init__(self, session_factory: async_sessionmaker) -> None:
        self.session_factory = session_factory

    async def get_cart(self, identity: Identity) -> CartSnapshot | None:
        if not identity.user_id:
            return None

        async with self.session_factory() as session:
            cart = (await session.execute(select(Cart).where(Cart.user_id == identity.user_id))).scalars().first()
            if cart is None:
                return None
            return CartSnapshot.from_cart(cart)
