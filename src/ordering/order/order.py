"""Order aggregate: the durable record created from a cart at checkout.

An Order is written together with its OrderItem children in one transaction
and never changes shape afterwards. Prices and the shipping address are
snapshots taken at commit time. The only later mutations are payment ones:

    Unpaid --payment intent--> IntentCreated --mark paid--> Paid

``payment_result`` is an embedded JSON document. It holds a placeholder (intent
id, empty status and email, zero paid) once a payment intent exists and is
overwritten with the captured values when the order is paid. ``is_paid`` moves
from false to true exactly once.
"""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordering.customer.customer import User
from ordering.errors import AlreadyPaid
from ordering.utils.db import Base


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
class PaymentResult(BaseModel):
    """Payment processor outcome stored on the order.

    Serialized with the processor-facing keys ``id``, ``status``,
    ``email_address`` and ``pricePaid``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: str = ""
    email_address: str = ""
    price_paid: str = Field(default="0", alias="pricePaid")

    @classmethod
    def placeholder(cls, intent_id: str) -> "PaymentResult":
        return cls(id=intent_id, status="", email_address="", price_paid="0")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
class OrderItem(Base):
    """A line of an order, denormalized from the cart at commit time.

    Name, slug, image and price are copies; later catalogue changes do not
    affect them. Items are only ever created with their order.
    """

    __tablename__ = "order_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"))
    qty: Mapped[int] = mapped_column(Integer)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255))
    image: Mapped[str | None] = mapped_column(String(500))

    order: Mapped["Order"] = relationship(back_populates="items")


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)
    shipping_address: Mapped[dict] = mapped_column(JSON)
    payment_method: Mapped[str] = mapped_column(String(50))
    items_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    shipping_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    tax_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    payment_result: Mapped[dict | None] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    items: Mapped[list[OrderItem]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by=OrderItem.name,
    )
    user: Mapped[User] = relationship()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, payload, lines) -> "Order":
        """Build a new unpaid order and its items from a validated payload.

        Args:
            payload: ``OrderPayload`` produced by the order validator.
            lines: Cart lines to copy into order items.
        """
        order = cls(
            id=str(uuid4()),
            user_id=payload.user_id,
            shipping_address=payload.shipping_address.model_dump(),
            payment_method=payload.payment_method,
            items_price=payload.items_price,
            shipping_price=payload.shipping_price,
            tax_price=payload.tax_price,
            total_price=payload.total_price,
            is_paid=False,
            paid_at=None,
            payment_result=None,
            created_at=datetime.now(UTC),
        )
        order.items = [
            OrderItem(
                id=str(uuid4()),
                product_id=line.product_id,
                qty=line.qty,
                price=line.price,
                name=line.name,
                slug=line.slug,
                image=line.image,
            )
            for line in lines
        ]
        return order

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    @property
    def stored_payment(self) -> PaymentResult | None:
        if not self.payment_result:
            return None
        return PaymentResult.model_validate(self.payment_result)

    def assert_payable(self) -> None:
        if self.is_paid:
            raise AlreadyPaid()
