"""Ordering bounded context: order finalization and payment reconciliation.

``OrderingDomain`` bundles the collaborators every checkout operation needs:
the unit of work factory, the cart and profile providers, the payment gateway
and the side-effect hooks. Operations receive it explicitly instead of reading
ambient state.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import async_sessionmaker

from ordering.cart.cart import CartProvider, SqlCartProvider
from ordering.customer.customer import SqlUserProfileProvider, UserProfileProvider
from ordering.order.hooks import DisabledStockLedger, LoggingNotifier, OrderNotifier, StockLedger
from ordering.order.lookup import OrderViewCache
from ordering.uow import SqlAlchemyUnitOfWork, UnitOfWork
from payments.gateway import PaymentGateway, get_gateway


@dataclass
class OrderingDomain:
    uow_factory: Callable[[], UnitOfWork]
    carts: CartProvider
    profiles: UserProfileProvider
    gateway: PaymentGateway | None = None
    stock_ledger: StockLedger = field(default_factory=DisabledStockLedger)
    notifier: OrderNotifier = field(default_factory=LoggingNotifier)
    order_views: OrderViewCache = field(default_factory=OrderViewCache)

    def uow(self) -> UnitOfWork:
        return self.uow_factory()

    @property
    def payment_gateway(self) -> PaymentGateway:
        """The configured gateway, or the process-wide one from the factory."""
        return self.gateway or get_gateway()


def build_domain(session_factory: async_sessionmaker, **overrides) -> OrderingDomain:
    """Wire the SQL-backed collaborators around ``session_factory``."""
    return OrderingDomain(
        uow_factory=lambda: SqlAlchemyUnitOfWork(session_factory),
        carts=SqlCartProvider(session_factory),
        profiles=SqlUserProfileProvider(session_factory),
        **overrides,
    )
