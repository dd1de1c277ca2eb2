"""Application configuration utilities."""
from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Central gateway settings loaded from environment variables.

    Exchange credentials are intentionally absent: every proxied request
    carries its own keys in headers and nothing is kept between requests.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field("0.0.0.0", alias="GATEWAY_HOST")
    port: int = Field(8003, alias="PORT", ge=1, le=65535)
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    environment: str = Field("development", alias="ENVIRONMENT")

    bingx_base_url: str = Field("https://open-api.bingx.com", alias="BINGX_BASE_URL")
    mexc_base_url: str = Field("https://contract.mexc.com", alias="MEXC_BASE_URL")
    bitget_base_url: str = Field("https://api.bitget.com", alias="BITGET_BASE_URL")

    bingx_recv_window: int = Field(60_000, alias="BINGX_RECV_WINDOW", ge=1)

    upstream_timeout_seconds: float = Field(30.0, alias="UPSTREAM_TIMEOUT_SECONDS", gt=0)
    upstream_connect_timeout_seconds: float = Field(
        10.0, alias="UPSTREAM_CONNECT_TIMEOUT_SECONDS", gt=0
    )

    force_https: bool = Field(False, alias="FORCE_HTTPS")
    allowed_hosts: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"], alias="ALLOWED_HOSTS"
    )
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    telemetry_enabled: bool = Field(False, alias="TELEMETRY_ENABLED")
    telemetry_service_name: str = Field("exchange-gateway", alias="TELEMETRY_SERVICE_NAME")
    telemetry_otlp_endpoint: Optional[str] = Field(default=None, alias="TELEMETRY_OTLP_ENDPOINT")
    telemetry_otlp_headers: dict[str, str] | None = Field(
        default=None, alias="TELEMETRY_OTLP_HEADERS"
    )
    telemetry_sample_ratio: float = Field(
        0.1, alias="TELEMETRY_SAMPLE_RATIO", ge=0.0, le=1.0
    )

    @field_validator("allowed_hosts", "cors_allow_origins", mode="before")
    @classmethod
    def _split_list_values(cls, value: object) -> object:
        """Accept JSON arrays as well as comma or semicolon separated lists."""

        if not isinstance(value, str):
            return value
        if value.lstrip().startswith("["):
            return json.loads(value)
        items = [item.strip() for item in value.replace(";", ",").split(",") if item.strip()]
        return items or ["*"]

    @model_validator(mode="after")
    def _normalise_settings(self) -> "Settings":
        """Strip trailing slashes from upstream hosts and upper-case the log level."""

        self.bingx_base_url = self.bingx_base_url.rstrip("/")
        self.mexc_base_url = self.mexc_base_url.rstrip("/")
        self.bitget_base_url = self.bitget_base_url.rstrip("/")
        self.log_level = self.log_level.upper()
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
