"""Customer profile as seen by checkout: saved shipping address and payment method.

Profile storage belongs to the identity context. Checkout reads it through
``UserProfileProvider``; the SQL-backed provider reads the ``users`` table that
the order lookup also joins against for the owner's name and email.
"""

from abc import ABC, abstractmethod
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import JSON, String
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from ordering.errors import UserNotFound
from ordering.utils.db import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(255), default="NO_NAME")
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    address: Mapped[dict | None] = mapped_column(JSON)
    payment_method: Mapped[str | None] = mapped_column(String(50))


class ShippingAddress(BaseModel):
    """A delivery address captured at checkout time.

    Once copied onto an Order it is a snapshot; later edits to the customer's
    saved address do not reach existing orders.
    """

    full_name: str
    street_address: str
    city: str
    postal_code: str
    country: str
    lat: float | None = None
    lng: float | None = None


class UserProfile(BaseModel):
    id: str
    name: str
    email: str
    address: ShippingAddress | None = None
    payment_method: str | None = None


class UserProfileProvider(ABC):
    @abstractmethod
    async def get_profile(self, user_id: str) -> UserProfile:
        """Return the user's profile, raising ``UserNotFound`` when there is none."""
        ...


class SqlUserProfileProvider(UserProfileProvider):
    def __init__(self, session_factory: async_sessionmaker) -> None:
        self.session_factory = session_factory

    async def get_profile(self, user_id: str) -> UserProfile:
        async with self.session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise UserNotFound()
            return UserProfile(
                id=user.id,
                name=user.name,
                email=user.email,
                address=user.address or None,
                payment_method=user.payment_method or None,
            )
