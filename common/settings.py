# common/settings.py
from __future__ import annotations

import sys
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    # -------- Gateway / server ----------
    hub_port: int = Field(8080, alias="HUB_PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # -------- Entry storage ----------
    # One JSON document; entries live under the STORAGE_KEY slot.
    storage_path: str = Field(".runtime/storage.json", alias="STORAGE_PATH")
    storage_key: str = Field("entries", alias="STORAGE_KEY")

    # pydantic-settings config
    model_config = SettingsConfigDict(
        env_file=".env",                 # load env from repo root
        env_file_encoding="utf-8",
        case_sensitive=False,            # allow lower/upper in env
        populate_by_name=True,
        extra="ignore",                  # ignore unknown env keys
    )

    @field_validator("storage_key")
    @classmethod
    def _key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("STORAGE_KEY must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


def _pretty_fail(msg: str) -> None:
    # Print a friendly error once (useful with uvicorn reload)
    print(f"\n[settings] {msg}\n", file=sys.stderr)
    sys.exit(1)


try:
    settings = Settings()
except Exception as e:
    _pretty_fail(
        "Invalid settings. Check .env (repo root); all keys are optional:\n"
        "  HUB_PORT=8080\n"
        "  LOG_LEVEL=INFO\n"
        "  STORAGE_PATH=.runtime/storage.json\n"
        "  STORAGE_KEY=entries\n\n"
        f"Raw error: {e}"
    )
