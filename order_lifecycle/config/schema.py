"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class StorageBackend(StrEnum):
    SQLITE = "sqlite"
    MEMORY = "memory"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    backend: StorageBackend = StorageBackend.SQLITE
    db_path: str = "data/orders.db"
    # Seconds a writer waits for a competing connection's lock
    busy_timeout: float = Field(default=5.0, gt=0)


class OrderRulesConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_currency: str = Field(default="USD", min_length=3, max_length=3)
    # Sellers may ship before confirming payment (cash-on-delivery flows)
    allow_ship_before_payment: bool = True
    compare_and_set: bool = True
    max_list_limit: int = Field(default=200, ge=1)


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    caller_id_header: str = "X-Caller-Id"
    admin_header: str = "X-Caller-Admin"
    cors_origins: list[str] = []


class LoggingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ServiceConfig(BaseModel):
    model_config = {"extra": "forbid"}

    storage: StorageConfig = StorageConfig()
    orders: OrderRulesConfig = OrderRulesConfig()
    api: ApiConfig = ApiConfig()
    logging: LoggingConfig = LoggingConfig()
