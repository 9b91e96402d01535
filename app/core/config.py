# app/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres or SQLite connection string)
      - JWT_SECRET (HS256 secret shared with the auth service that issues tokens)

    Optional:
      - SMTP_* / ADMIN_EMAIL   : order notification emails
      - ZALO_OA_ACCESS_TOKEN / ADMIN_ZALO_USER_ID : Zalo OA chat push
      - ALLOW_OVERSELL, PRICE_SOURCE : order placement policy
      - LOW_STOCK_THRESHOLD : catalog stock overview
    """

    PROJECT_NAME: str = "Flower Shop API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # JWT verification (issuance lives in the auth service)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Order placement policy
    # True  -> stock is clamped at 0 and the order always goes through
    # False -> a line without enough stock aborts the whole order (409)
    ALLOW_OVERSELL: bool = True
    # "client"  -> trust the price sent with each line
    # "catalog" -> re-read the price from products at order time
    PRICE_SOURCE: Literal["client", "catalog"] = "client"

    # Catalog dashboard: products at or below this stock count as "low"
    LOW_STOCK_THRESHOLD: int = 5

    # SMTP
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Flower Shop"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    # Where "new order" alerts go
    ADMIN_EMAIL: str | None = None

    # Zalo Official Account push
    ZALO_API_BASE: str = "https://openapi.zalo.me/v3.0"
    ZALO_OA_ACCESS_TOKEN: str | None = None
    ADMIN_ZALO_USER_ID: str | None = None
    ZALO_TIMEOUT_SECONDS: float = 10.0

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
