"""
Application Settings for ScriptFlow

Centralized configuration using Pydantic Settings with .env support.
All environment variables are validated at startup.
"""

from functools import lru_cache
from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Provider secrets are optional at load time so that the API can boot in
    development without billing configured; the webhook endpoints refuse
    traffic (500) until their secret is present.
    """

    # Application Settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    app_url: str = "http://localhost:3000"

    # CORS Configuration
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Clerk (identity provider)
    clerk_webhook_secret: Optional[str] = None
    clerk_jwks_url: Optional[str] = None
    clerk_issuer: Optional[str] = None

    # Stripe (payment provider)
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_price_id_creator: str = "price_1SgC5qBWrZ7c9WmM3dYU8uUu"
    stripe_price_id_pro: str = "price_1SgC8wBWrZ7c9WmMkNYBYQiy"

    # Database Configuration (SQLModel/SQLAlchemy)
    database_url: Optional[str] = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    database_echo: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_price_ids(self) -> "Settings":
        """Paid plans must map to distinct Stripe prices."""
        if self.stripe_price_id_creator == self.stripe_price_id_pro:
            raise ValueError(
                "STRIPE_PRICE_ID_CREATOR and STRIPE_PRICE_ID_PRO must differ"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment.lower() == "development"

    @property
    def billing_url(self) -> str:
        """Billing page used for checkout success/cancel and portal return."""
        return f"{self.app_url.rstrip('/')}/dashboard/billing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export for direct import
settings = get_settings()
