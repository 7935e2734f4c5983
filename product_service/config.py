from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PRODUCT_DATABASE_URL: str
    SERVICE_NAME: str = "product-service"
    # Address this instance advertises to the registry.
    SERVICE_HOST: str = "localhost"
    SERVICE_PORT: int = 9001
    REGISTRY_URL: str = ""
    REGISTRY_TIMEOUT: float = 2.0
    LEASE_TTL: int = 30
    HEARTBEAT_INTERVAL: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
