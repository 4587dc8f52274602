import logging
import os
from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"

_KNOWN_PORTFOLIO_ENV_KEYS = {
    "PORTFOLIO_DATABASE_URL",
    "PORTFOLIO_MARKET_DATA_PROVIDER",
    "PORTFOLIO_HTTP_TIMEOUT_SECONDS",
    "PORTFOLIO_UNDERREPRESENTED_THRESHOLD",
    "PORTFOLIO_RECOMMENDATION_LIMIT",
    "PORTFOLIO_RECOMMENDATION_BACKFILL",
    "PORTFOLIO_RECOMMENDATION_CATALOG",
    "PORTFOLIO_ANALYTICS_RANDOM_FALLBACK",
    "PORTFOLIO_ANALYTICS_SEED",
}


class MarketDataProvider(str, Enum):
    ALPHA_VANTAGE = "alpha_vantage"
    STATIC = "static"


class CatalogSource(str, Enum):
    STATIC = "static"
    LIVE = "live"


def _warn_unknown_prefixed_env(prefix: str, known_keys: set[str]) -> None:
    unknown = sorted(key for key in os.environ if key.startswith(prefix) and key not in known_keys)
    if unknown:
        logger.warning("Unknown %s env vars ignored: %s", prefix, ", ".join(unknown))


class Settings(BaseSettings):
    """Application settings sourced from environment variables."""

    alpha_vantage_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "alpha_vantage_api_key", "ALPHA_VANTAGE_API_KEY", "vite_alpha_vantage_api_key", "VITE_ALPHA_VANTAGE_API_KEY"
        ),
    )
    alpha_vantage_base_url: str = Field(
        default=DEFAULT_ALPHA_VANTAGE_URL,
        validation_alias=AliasChoices("alpha_vantage_base_url", "ALPHA_VANTAGE_BASE_URL"),
    )
    market_data_provider: MarketDataProvider | None = Field(
        default=None,
        validation_alias=AliasChoices("market_data_provider", "PORTFOLIO_MARKET_DATA_PROVIDER"),
    )
    http_timeout_seconds: float = Field(
        default=10,
        gt=0,
        validation_alias=AliasChoices("http_timeout_seconds", "PORTFOLIO_HTTP_TIMEOUT_SECONDS"),
    )
    database_url: str = Field(
        default="sqlite:///./data/portfolio.db",
        validation_alias=AliasChoices("database_url", "PORTFOLIO_DATABASE_URL", "DATABASE_URL"),
    )
    underrepresented_threshold: float = Field(
        default=5.0,
        ge=0,
        le=100,
        validation_alias=AliasChoices("underrepresented_threshold", "PORTFOLIO_UNDERREPRESENTED_THRESHOLD"),
    )
    recommendation_limit: int = Field(
        default=2,
        ge=0,
        validation_alias=AliasChoices("recommendation_limit", "PORTFOLIO_RECOMMENDATION_LIMIT"),
    )
    recommendation_backfill: bool = Field(
        default=True,
        validation_alias=AliasChoices("recommendation_backfill", "PORTFOLIO_RECOMMENDATION_BACKFILL"),
    )
    recommendation_catalog: CatalogSource = Field(
        default=CatalogSource.STATIC,
        validation_alias=AliasChoices("recommendation_catalog", "PORTFOLIO_RECOMMENDATION_CATALOG"),
    )
    analytics_random_fallback: bool = Field(
        default=False,
        validation_alias=AliasChoices("analytics_random_fallback", "PORTFOLIO_ANALYTICS_RANDOM_FALLBACK"),
    )
    analytics_seed: int | None = Field(
        default=None,
        validation_alias=AliasChoices("analytics_seed", "PORTFOLIO_ANALYTICS_SEED"),
    )

    @field_validator("market_data_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @model_validator(mode="after")
    def _apply_defaults_and_warn(self) -> "Settings":
        if self.market_data_provider is None:
            self.market_data_provider = (
                MarketDataProvider.ALPHA_VANTAGE if self.alpha_vantage_api_key else MarketDataProvider.STATIC
            )
        if self.market_data_provider is MarketDataProvider.ALPHA_VANTAGE and not self.alpha_vantage_api_key:
            logger.warning("Alpha Vantage provider selected without ALPHA_VANTAGE_API_KEY; the provider cannot start")
        if self.recommendation_catalog is CatalogSource.LIVE and self.market_data_provider is MarketDataProvider.STATIC:
            logger.warning("Live recommendation catalog uses the static provider; results match the static catalog")
        if self.analytics_seed is not None and not self.analytics_random_fallback:
            logger.warning("PORTFOLIO_ANALYTICS_SEED is set but the random fallback is disabled")

        _warn_unknown_prefixed_env("PORTFOLIO_", _KNOWN_PORTFOLIO_ENV_KEYS)
        return self

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached accessor so we only load settings once per process."""
    return Settings()
