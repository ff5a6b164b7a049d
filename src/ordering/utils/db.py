from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def create_engine(database_uri: str) -> AsyncEngine:
    """Create the async engine for the ordering database.

    SQLite does not enforce foreign keys unless asked to on every connection;
    order items must fail to insert when they reference an unknown product.
    """
    engine = create_async_engine(database_uri)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):  # noqa: ARG001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


def _load_models():
    # Importing the model modules registers their tables on Base.metadata
    import ordering.cart.cart  # noqa: F401
    import ordering.catalogue.product  # noqa: F401
    import ordering.customer.customer  # noqa: F401
    import ordering.order.order  # noqa: F401


async def setup_db(engine: AsyncEngine):
    """Setup database schema"""
    _load_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(engine: AsyncEngine):
    """Drop database schema"""
    _load_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
