# stockroom/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres in production, SQLite works for local/tests)
      - JWT_SECRET (HS256 signing secret shared with the identity provider)

    SMTP settings are read separately by app-level email client
    (see stockroom/core/email_client.py).
    """

    PROJECT_NAME: str = "Stockroom Inventory API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Inventory rules
    DEFAULT_LOW_STOCK_ALERT: int = 5

    # Order transaction: retries for transient store failures
    # (lock timeouts, serialization failures, deadlocks)
    ORDER_TX_MAX_ATTEMPTS: int = 3
    ORDER_TX_RETRY_BACKOFF: float = 0.05

    # Product code generation: retries after unique index collisions
    PRODUCT_CODE_MAX_ATTEMPTS: int = 5

    # Background workers for low-stock notifications
    NOTIFIER_MAX_WORKERS: int = 2

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
