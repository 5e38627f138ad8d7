from functools import lru_cache
from typing import Optional
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_ID, DEBUG,
    PROVIDER_BASE_URL, HTTP_TIMEOUT_SECONDS, UNIT_DECIMALS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "FX Form"
    debug: bool = False
    version: str = "0.1.0"

    # Open Exchange Rates access; both endpoints need the key
    app_id: Optional[str] = None
    provider_base_url: AnyHttpUrl = "https://openexchangerates.org/api"  # type: ignore[assignment]
    http_timeout_seconds: float = 5.0
    http_retries: int = 0  # provider calls are single-shot unless configured
    http_backoff_seconds: float = 0.5

    # Display precision
    amount_decimals: int = 2
    unit_decimals: int = 6

    # Initial menu selections once the catalog is loaded
    default_from_currency: str = "USD"
    default_to_currency: str = "EUR"

    def init_post_load(self) -> None:
        """Normalize derived fields and validate ranges."""
        if self.amount_decimals < 0 or self.unit_decimals < 0:
            raise ValueError("amount_decimals and unit_decimals must be >= 0")
        if self.http_retries < 0:
            raise ValueError("http_retries must be >= 0")
        self.default_from_currency = self.default_from_currency.upper()
        self.default_to_currency = self.default_to_currency.upper()

    @property
    def provider_root(self) -> str:
        return str(self.provider_base_url).rstrip("/")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
