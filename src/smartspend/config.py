"""Typed configuration loader for the SmartSpend assistant."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Iterable, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

PaymentMethod = Literal["cash", "credit", "debit", "digital"]

DEFAULT_ACTIONABLE_CONFIDENCE = 0.3


class Settings(BaseSettings):
    """Environment-backed settings using Pydantic's BaseSettings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    telegram_token: SecretStr | None = Field(default=None, alias="TELEGRAM_TOKEN")
    telegram_webhook_secret: str | None = Field(
        default=None, alias="TELEGRAM_WEBHOOK_SECRET"
    )
    telegram_allowed_users: Annotated[list[int], NoDecode] = Field(
        default_factory=list, alias="TELEGRAM_ALLOWED_USERS"
    )

    actionable_confidence: float = Field(
        default=DEFAULT_ACTIONABLE_CONFIDENCE,
        ge=0.0,
        le=1.0,
        alias="ACTIONABLE_CONFIDENCE",
    )
    default_payment_method: PaymentMethod = Field(
        default="credit", alias="DEFAULT_PAYMENT_METHOD"
    )
    category_taxonomy_file: Path | None = Field(
        default=None, alias="CATEGORY_TAXONOMY_FILE"
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("telegram_allowed_users", mode="before")
    @classmethod
    def _parse_allowed_users(cls, value: object) -> list[int]:
        if value in (None, ""):
            return []
        if isinstance(value, int):
            return [value]
        if isinstance(value, str):
            chunks = [chunk.strip() for chunk in value.split(",")]
            return [int(chunk) for chunk in chunks if chunk]
        if isinstance(value, Iterable):
            return [int(item) for item in value]
        raise TypeError("TELEGRAM_ALLOWED_USERS must be a CSV string or list")

    @field_validator("default_payment_method", mode="before")
    @classmethod
    def _normalize_payment_method(cls, value: str | None) -> str:
        return (value or "credit").strip().lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str | None) -> str:
        return (value or "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


__all__ = [
    "DEFAULT_ACTIONABLE_CONFIDENCE",
    "PaymentMethod",
    "Settings",
    "get_settings",
]
