from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest
from sqlalchemy import func, select

DEFAULT_ADDRESS = {
    "full_name": "Ada Lovelace",
    "street_address": "12 Analytical Row",
    "city": "London",
    "postal_code": "N1 9GU",
    "country": "UK",
}


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture()
async def engine(tmp_path):
    from ordering.utils.db import create_engine, drop_db, setup_db

    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'checkout.db'}")
    await setup_db(engine)

    yield engine

    await drop_db(engine)
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    from ordering.utils.db import create_session_factory

    return create_session_factory(engine)


@pytest.fixture()
def gateway():
    from payments.gateway import FakeGateway, reset_gateway, set_gateway

    fake = FakeGateway()
    set_gateway(fake)

    yield fake

    reset_gateway()


@pytest.fixture()
def domain(session_factory, gateway):
    from ordering.domain import build_domain

    return build_domain(session_factory, gateway=gateway)


class Seeder:
    """Writes users, products and carts straight into the test database."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def user(self, address=DEFAULT_ADDRESS, payment_method="PayPal", **fields):
        from ordering.customer.customer import User

        fields.setdefault("name", "Ada Lovelace")
        fields.setdefault("email", f"user-{uuid4().hex[:8]}@example.com")
        user = User(address=address, payment_method=payment_method, **fields)
        async with self.session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    async def product(self, name="Widget", price="10.00", stock=5, **fields):
        from ordering.catalogue.product import Product

        fields.setdefault("slug", name.lower().replace(" ", "-"))
        product = Product(name=name, price=Decimal(price), stock=stock, image=f"/images/{name.lower()}.jpg", **fields)
        async with self.session_factory() as session:
            session.add(product)
            await session.commit()
        return product

    async def cart(self, user, items=(), shipping_price="0.00", tax_price="0.00"):
        from ordering.cart.cart import Cart

        items = [dict(item) for item in items]
        items_price = sum((Decimal(item["price"]) * item["qty"] for item in items), Decimal("0"))
        cart = Cart(
            user_id=user.id,
            items=items,
            items_price=items_price,
            shipping_price=Decimal(shipping_price),
            tax_price=Decimal(tax_price),
            total_price=items_price + Decimal(shipping_price) + Decimal(tax_price),
        )
        async with self.session_factory() as session:
            session.add(cart)
            await session.commit()
        return cart

    @staticmethod
    def line(product, qty=1):
        return {
            "product_id": product.id,
            "name": product.name,
            "slug": product.slug,
            "image": product.image,
            "price": str(product.price),
            "qty": qty,
        }

    async def get(self, model, id_):
        async with self.session_factory() as session:
            return await session.get(model, id_)

    async def count(self, model) -> int:
        async with self.session_factory() as session:
            return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.fixture()
def seed(session_factory):
    return Seeder(session_factory)
