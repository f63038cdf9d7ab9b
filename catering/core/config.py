"""Application configuration."""
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # Business
    business_name: str = "Catering"
    tax_rate: Decimal = Decimal("0.12")

    # Orders
    order_number_prefix: str = "ORD"
    order_number_retries: int = 0  # regenerate-and-retry attempts on number clash

    # Menu
    menu_file: Optional[str] = None  # YAML loaded at startup when the catalog is empty

    # Inventory
    expiry_lookahead_days: int = 30

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
