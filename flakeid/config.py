from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .layout import MAX_DATACENTER_ID, MAX_MACHINE_ID


class Settings(BaseSettings):
    datacenter_id: int = Field(0, alias="IDGEN_DATACENTER_ID", ge=0, le=MAX_DATACENTER_ID)
    machine_id: int = Field(0, alias="IDGEN_MACHINE_ID", ge=0, le=MAX_MACHINE_ID)
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field("INFO", alias="IDGEN_LOG_LEVEL")
    log_format: Literal["console", "json"] = Field("console", alias="IDGEN_LOG_FORMAT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str | None) -> str:
        if value and str(value).strip():
            return str(value).strip().upper()
        return "INFO"

    @field_validator("log_format", mode="before")
    @classmethod
    def _normalize_format(cls, value: str | None) -> str:
        if value and str(value).strip():
            return str(value).strip().lower()
        return "console"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
