from __future__ import annotations

import logging

import pytest

from core.settings import CatalogSource, MarketDataProvider, Settings

_ENV_KEYS = (
    "ALPHA_VANTAGE_API_KEY",
    "VITE_ALPHA_VANTAGE_API_KEY",
    "PORTFOLIO_MARKET_DATA_PROVIDER",
    "PORTFOLIO_DATABASE_URL",
    "DATABASE_URL",
    "PORTFOLIO_RECOMMENDATION_LIMIT",
    "PORTFOLIO_RECOMMENDATION_CATALOG",
    "PORTFOLIO_ANALYTICS_SEED",
    "PORTFOLIO_ANALYTICS_RANDOM_FALLBACK",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_api_key_use_static_provider() -> None:
    settings = Settings()

    assert settings.market_data_provider is MarketDataProvider.STATIC
    assert settings.database_url == "sqlite:///./data/portfolio.db"
    assert settings.underrepresented_threshold == 5.0
    assert settings.recommendation_limit == 2
    assert settings.recommendation_backfill is True
    assert settings.recommendation_catalog is CatalogSource.STATIC
    assert settings.analytics_random_fallback is False


def test_api_key_selects_alpha_vantage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VITE_ALPHA_VANTAGE_API_KEY", "demo")

    settings = Settings()

    assert settings.alpha_vantage_api_key == "demo"
    assert settings.market_data_provider is MarketDataProvider.ALPHA_VANTAGE


def test_explicit_provider_overrides_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "demo")
    monkeypatch.setenv("PORTFOLIO_MARKET_DATA_PROVIDER", " STATIC ")

    assert Settings().market_data_provider is MarketDataProvider.STATIC


def test_env_file_is_read(tmp_path) -> None:
    (tmp_path / ".env").write_text("PORTFOLIO_RECOMMENDATION_LIMIT=4\n", encoding="utf-8")

    assert Settings().recommendation_limit == 4


def test_unknown_prefixed_env_is_warned(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("PORTFOLIO_TYPO", "1")

    with caplog.at_level(logging.WARNING, logger="core.settings"):
        Settings()

    assert "PORTFOLIO_TYPO" in caplog.text


def test_seed_without_fallback_is_warned(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("PORTFOLIO_ANALYTICS_SEED", "3")

    with caplog.at_level(logging.WARNING, logger="core.settings"):
        settings = Settings()

    assert settings.analytics_seed == 3
    assert "random fallback is disabled" in caplog.text
