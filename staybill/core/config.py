"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using the mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/staybill.db"
    return "sqlite:///./staybill.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "StayBill"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database - defaults to the volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Billing defaults for new properties
    DEFAULT_TARIFF: str = "0.75"
    DEFAULT_SETTLEMENT_MODE: str = "monitoring"

    # Guest message rendering and delivery
    MESSAGE_LOCALE: str = "en"
    CURRENCY_SYMBOL: str = "R$"
    PHONE_COUNTRY_CODE: str = "55"
    MESSAGING_BASE_URL: str = "https://wa.me"

    # stay_first | stay_only | profile_only
    PAYMENT_KEY_POLICY: str = "stay_first"


settings = Settings()
