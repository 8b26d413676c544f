from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator

from app.core.tax_years import DEFAULT_TAX_YEAR, SUPPORTED_TAX_YEARS

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    default_tax_year: str = Field(default_factory=lambda: os.getenv("DEFAULT_TAX_YEAR", DEFAULT_TAX_YEAR))
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    telemetry_log_dir: str | None = Field(default_factory=lambda: os.getenv("TELEMETRY_LOG_DIR") or None)

    model_config = ConfigDict(frozen=True)

    @field_validator("default_tax_year", mode="before")
    @classmethod
    def _validate_tax_year(cls, value: str) -> str:
        year = (value or DEFAULT_TAX_YEAR).strip()
        if year not in SUPPORTED_TAX_YEARS:
            raise ValueError(
                f"DEFAULT_TAX_YEAR must be one of {', '.join(SUPPORTED_TAX_YEARS)}, got {year}"
            )
        return year

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        upper = (value or "INFO").upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {upper}")
        return upper

    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
