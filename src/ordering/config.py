"""Runtime configuration for the Ordering context.

Values come from the environment (prefix ``CHECKOUT_``) or a local ``.env``
file. ``ENV`` selects the overlay the same way ``PROTEAN_ENV`` used to:
``test`` runs against the fake payment gateway unless told otherwise.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CHECKOUT_", env_file=".env", extra="ignore")

    ENV: str = "development"
    DATABASE_URL: str = "sqlite+aiosqlite:///./checkout.db"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    PAYMENT_GATEWAY: str = "fake"  # fake | paypal
    PAYPAL_CLIENT_ID: str = ""
    PAYPAL_APP_SECRET: str = ""
    PAYPAL_API_URL: str = "https://api-m.sandbox.paypal.com"
    PAYPAL_CURRENCY: str = "USD"
    PAYPAL_TIMEOUT: float = 30.0

    # Shared secret for service-to-service routes; empty disables them
    INTERNAL_API_TOKEN: str = ""

    ORDER_VIEW_CACHE_SIZE: int = 1024
    ORDER_VIEW_CACHE_TTL: float = 300.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
