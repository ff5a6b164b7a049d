"""Product reference data.

Ordering only needs enough of the catalogue to link order items to a product
and, when stock tracking is switched on, to decrement stock on payment.
"""

from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from ordering.utils.db import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    image: Mapped[str | None] = mapped_column(String(500))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    stock: Mapped[int] = mapped_column(Integer, default=0)
