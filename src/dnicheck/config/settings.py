"""
Application settings using Pydantic.

Provides environment-based configuration loading with DNICHECK_ prefix.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DECOLECTA_URL = "https://api.decolecta.com/v1/reniec/dni"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DNICHECK_",
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = []

    # HTTP client settings
    http_timeout: float = 15.0

    # Identity providers, tried in order
    identity_providers: list[str] = ["consultasperu", "decolecta"]

    # ConsultasPeru (primary)
    consultasperu_api_url: str | None = None
    consultasperu_token: str | None = None

    # Decolecta / RENIEC (fallback)
    decolecta_api_url: str = DEFAULT_DECOLECTA_URL
    decolecta_token: str | None = None

    # Google Sheets directory
    google_sheet_id: str | None = None
    google_sheet_range: str | None = None
    google_sheet_contact_col_index: int = 0
    google_sheet_code_col_index: int = 1
    google_service_account_json: str | None = None
    google_service_account_key_file: str | None = None

    # Client
    api_base_url: str = "http://localhost:8000"

    @field_validator(
        "consultasperu_api_url",
        "consultasperu_token",
        "decolecta_token",
        "google_sheet_id",
        "google_sheet_range",
        "google_service_account_json",
        "google_service_account_key_file",
        mode="before",
    )
    @classmethod
    def _blank_is_absent(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("decolecta_api_url", mode="before")
    @classmethod
    def _default_decolecta_url(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return DEFAULT_DECOLECTA_URL
        return value.strip() if isinstance(value, str) else value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def consultasperu_config(self) -> ConsultasPeruConfig:
        return ConsultasPeruConfig(
            api_url=self.consultasperu_api_url,
            token=self.consultasperu_token,
            timeout=self.http_timeout,
        )

    def decolecta_config(self) -> DecolectaConfig:
        return DecolectaConfig(
            api_url=self.decolecta_api_url,
            token=self.decolecta_token,
            timeout=self.http_timeout,
        )

    def directory_config(self) -> DirectoryConfig:
        return DirectoryConfig(
            spreadsheet_id=self.google_sheet_id,
            cell_range=self.google_sheet_range,
            contact_col_index=self.google_sheet_contact_col_index,
            code_col_index=self.google_sheet_code_col_index,
            service_account_json=self.google_service_account_json,
            service_account_key_file=self.google_service_account_key_file,
        )


@dataclass(frozen=True)
class ConsultasPeruConfig:
    """Connection settings for the primary identity provider."""

    api_url: str | None
    token: str | None
    timeout: float = 15.0


@dataclass(frozen=True)
class DecolectaConfig:
    """Connection settings for the fallback identity provider."""

    api_url: str = DEFAULT_DECOLECTA_URL
    token: str | None = None
    timeout: float = 15.0


@dataclass(frozen=True)
class DirectoryConfig:
    """Spreadsheet coordinates and credentials for the contact directory."""

    spreadsheet_id: str | None
    cell_range: str | None
    contact_col_index: int = 0
    code_col_index: int = 1
    service_account_json: str | None = None
    service_account_key_file: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.spreadsheet_id and self.cell_range)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
