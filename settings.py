from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


_DATABASE_URL_ENV = "DATABASE_URL"
_TABLE_NAME_ENV = "MEASUREMENT_TABLE_NAME"
_CREATE_SCHEMA_ENV = "RELAY_CREATE_SCHEMA"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    measurement_table: str
    create_schema: bool
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    # Real environment variables take precedence over the .env file.
    load_dotenv(".env", override=False)
    return Settings(
        database_url=_read_str_env(_DATABASE_URL_ENV, "sqlite:///./tmp/measurements.db"),
        measurement_table=_read_str_env(_TABLE_NAME_ENV, "temperaturmessung"),
        create_schema=_read_bool_env(_CREATE_SCHEMA_ENV, False),
        log_level=_read_log_level("INFO"),
    )
