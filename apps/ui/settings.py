from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UiSettings(BaseSettings):
    """Settings for the Streamlit dashboard."""

    api_base_url: str = Field(
        default="http://localhost:8000", validation_alias=AliasChoices("api_base_url", "API_BASE_URL")
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="", extra="ignore")
