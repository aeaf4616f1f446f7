"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.search.schema import Operator


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    `SEARCH_OPERATORS` is the operator whitelist handed to the dispatcher; when unset every
    supported operator is enabled.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    search_operators: Annotated[list[str] | None, NoDecode] = Field(
        default=None, alias="SEARCH_OPERATORS"
    )
    search_page_size: int = Field(default=50, ge=1, alias="SEARCH_PAGE_SIZE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("search_operators", mode="before")
    @classmethod
    def split_operator_list(cls, value: object) -> object:
        """Accept a comma-separated string (`"from,to,amount"`) as well as a list."""

        if isinstance(value, str):
            return [part.strip().lower() for part in value.split(",") if part.strip()]
        return value

    @field_validator("search_operators")
    @classmethod
    def validate_known_operators(cls, value: list[str] | None) -> list[str] | None:
        """Reject operator names the search layer does not implement."""

        if value is None:
            return None
        known = {op.value for op in Operator}
        unknown = [name for name in value if name not in known]
        if unknown:
            raise ValueError(f"unknown search operator(s): {', '.join(unknown)}")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        # Raising here is fine: caller can decide how to handle startup errors.
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
