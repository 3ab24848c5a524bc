"""Order ingestion backend — configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./orders.db"
    DATABASE_ECHO: bool = False

    # Timezone used to date orders exported without an order date
    TIMEZONE: str = "Asia/Kolkata"

    # Customer identity
    PHONE_NATIONAL_PREFIX: str = "91"
    PHONE_LOCAL_LENGTH: int = 10
    CUSTOMER_PLACEHOLDER: str = "N/A"

    # Product master
    PRODUCT_PLACEHOLDER: str = "Unknown Product"

    # Reconciliation (column holding bill numbers in the source export)
    RECONCILIATION_BILL_COLUMN: str = "Invoice Number"

    # Upload dirs
    UPLOAD_DIR: str = "./data/uploads"

    # HTTP
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
