"""ShopStream checkout FastAPI application.

Serves order finalization and PayPal payment reconciliation over HTTP.
Configuration comes from ``CHECKOUT_*`` environment variables.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.api.routes import internal_router, order_router, register_exception_handlers
from ordering.config import get_settings
from ordering.domain import build_domain
from ordering.order.lookup import OrderViewCache
from ordering.utils.db import create_engine, create_session_factory, setup_db
from ordering.utils.logging import configure_logging, logger


# ---------------------------------------------------------------------------
# Lifespan: database and ordering domain
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)

    engine = create_engine(settings.DATABASE_URL)
    await setup_db(engine)
    app.state.ordering = build_domain(
        create_session_factory(engine),
        order_views=OrderViewCache(settings.ORDER_VIEW_CACHE_SIZE, settings.ORDER_VIEW_CACHE_TTL),
    )
    logger.info("Checkout service started", env=settings.ENV, gateway=settings.PAYMENT_GATEWAY)

    yield

    await engine.dispose()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ShopStream Checkout API",
    description="Order finalization and payment reconciliation",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(order_router)
app.include_router(internal_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "env": settings.ENV,
            "payment_gateway": settings.PAYMENT_GATEWAY,
        }
    )
