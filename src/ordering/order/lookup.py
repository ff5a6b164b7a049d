"""Order detail lookup and its view cache."""

from datetime import datetime
from decimal import Decimal

from cachetools import TTLCache
from pydantic import BaseModel

from ordering.order.order import Order, PaymentResult


class OrderItemView(BaseModel):
    id: str
    product_id: str
    qty: int
    price: Decimal
    name: str
    slug: str
    image: str | None = None


class OrderOwner(BaseModel):
    name: str
    email: str


class OrderDetail(BaseModel):
    id: str
    user_id: str
    shipping_address: dict
    payment_method: str
    items_price: Decimal
    shipping_price: Decimal
    tax_price: Decimal
    total_price: Decimal
    is_paid: bool
    paid_at: datetime | None = None
    payment_result: PaymentResult | None = None
    created_at: datetime | None = None
    items: list[OrderItemView] = []
    user: OrderOwner | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderDetail":
        return cls(
            id=order.id,
            user_id=order.user_id,
            shipping_address=order.shipping_address,
            payment_method=order.payment_method,
            items_price=order.items_price,
            shipping_price=order.shipping_price,
            tax_price=order.tax_price,
            total_price=order.total_price,
            is_paid=order.is_paid,
            paid_at=order.paid_at,
            payment_result=order.stored_payment,
            created_at=order.created_at,
            items=[
                OrderItemView(
                    id=item.id,
                    product_id=item.product_id,
                    qty=item.qty,
                    price=item.price,
                    name=item.name,
                    slug=item.slug,
                    image=item.image,
                )
                for item in order.items
            ],
            user=OrderOwner(name=order.user.name, email=order.user.email) if order.user else None,
        )


class OrderViewCache:
    """Bounded in-process cache of paid order details, keyed by order id.

    Only paid orders are cached: paid is terminal, so a cached view can never
    go stale. Entries expire after ``ttl`` seconds and the least recently used
    ones are evicted past ``maxsize``.
    """

    def __init__(self, maxsize: int = 1024, ttl: float = 300.0) -> None:
        self._views: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    def get(self, order_id: str) -> OrderDetail | None:
        view = self._views.get(order_id)
        return view.model_copy(deep=True) if view is not None else None

    def put(self, view: OrderDetail) -> None:
        if not view.is_paid:
            return
        self._views[view.id] = view.model_copy(deep=True)

    def invalidate(self, order_id: str) -> None:
        self._views.pop(order_id, None)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._views

    def __len__(self) -> int:
        return len(self._views)


async def find_order(domain, order_id: str) -> OrderDetail | None:
    """Read an order with its items and the owner's name and email."""
    cached = domain.order_views.get(order_id)
    if cached is not None:
        return cached

    async with domain.uow() as uow:
        order = await uow.orders.get_detail(order_id)
        if order is None:
            return None
        view = OrderDetail.from_order(order)

    domain.order_views.put(view)
    return view
