from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DeletePolicy = Literal["orphan", "block", "cascade"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(True, alias="LOG_JSON")

    default_currency: str = Field("USD", alias="DEFAULT_CURRENCY")
    default_bill_title: str = Field("Untitled bill", alias="DEFAULT_BILL_TITLE")
    bill_delete_policy: DeletePolicy = Field("orphan", alias="BILL_DELETE_POLICY")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
