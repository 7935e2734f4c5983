from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    PRODUCT_SERVICE_NAME: str = "product-service"
    # Comma separated base URLs; when set, the registry is not consulted.
    PRODUCT_SERVICE_URLS: str = ""
    REGISTRY_URL: str = ""
    REGISTRY_TIMEOUT: float = 2.0
    PRODUCT_SERVICE_TIMEOUT: float = 5.0
    CB_PRODUCT_FAIL_MAX: int = 5
    CB_PRODUCT_RESET_TIMEOUT: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def product_service_urls(self) -> list[str]:
        return [url.strip().rstrip("/") for url in self.PRODUCT_SERVICE_URLS.split(",") if url.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
