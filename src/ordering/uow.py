"""Transactional unit of work for checkout writes.

A ``UnitOfWork`` is an async context manager exposing one typed repository per
table. Everything done through it is committed by ``commit()``; leaving the
block with an exception, or without committing, discards all of it.

    async with uow_factory() as uow:
        uow.orders.add(order)
        await uow.carts.clear(cart_id)
        await uow.commit()
"""

from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from ordering.cart.cart import Cart
from ordering.catalogue.product import Product
from ordering.customer.customer import User
from ordering.order.order import Order, PaymentResult


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------
class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str) -> User | None:
        return await self.session.get(User, user_id)


class ProductRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, product_id: str) -> Product | None:
        return await self.session.get(Product, product_id)

    async def decrement_stock(self, product_id: str, qty: int) -> None:
        await self.session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock - qty)
            .execution_options(synchronize_session=False)
        )


class CartRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, cart_id: str) -> Cart | None:
        return await self.session.get(Cart, cart_id)

    async def clear(self, cart_id: str) -> Cart:
        cart = await self.get(cart_id)
        if cart is None:
            raise LookupError(f"Cart {cart_id} does not exist")
        cart.clear()
        return cart


class OrderRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def add(self, order: Order) -> None:
        self.session.add(order)

    async def get(self, order_id: str, with_items: bool = False) -> Order | None:
        query = select(Order).where(Order.id == order_id)
        if with_items:
            query = query.options(selectinload(Order.items))
        return (await self.session.execute(query)).scalars().first()

    async def get_detail(self, order_id: str) -> Order | None:
        """Fetch an order with its items and owning user loaded."""
        query = (
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items), selectinload(Order.user))
        )
        return (await self.session.execute(query)).scalars().first()

    async def record_intent(self, order_id: str, placeholder: PaymentResult) -> bool:
        """Store the placeholder payment result of a new intent on an unpaid order.

        Returns False when the order is missing or already paid.
        """
        result = await self.session.execute(
            update(Order)
            .where(Order.id == order_id, Order.is_paid.is_(False))
            .values(payment_result=placeholder.to_record())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_paid(self, order_id: str, payment_result: PaymentResult, paid_at: datetime) -> bool:
        """Flip ``is_paid`` to true if it is still false.

        Returns False when no unpaid order matched, which means another
        transaction got there first.
        """
        result = await self.session.execute(
            update(Order)
            .where(Order.id == order_id, Order.is_paid.is_(False))
            .values(is_paid=True, paid_at=paid_at, payment_result=payment_result.to_record())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


# ---------------------------------------------------------------------------
# Unit of Work
# ---------------------------------------------------------------------------
class UnitOfWork(ABC):
    users: UserRepository
    products: ProductRepository
    carts: CartRepository
    orders: OrderRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            await self.rollback()
        await self.close()

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...

    async def close(self) -> None:
        return None


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: async_sessionmaker) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.users = UserRepository(self.session)
        self.products = ProductRepository(self.session)
        self.carts = CartRepository(self.session)
        self.orders = OrderRepository(self.session)
        return self

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def close(self) -> None:
        await self.session.close()
