from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_COLLECTION_NAME_ENV = "ENERGY_COLLECTION_NAME"
_STORE_PATH_ENV = "ENERGY_STORE_PATH"
_RANDOM_SEED_ENV = "SEED_RANDOM_SEED"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    collection_name: str
    store_path: Optional[str]
    random_seed: Optional[int]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_random_seed() -> Optional[int]:
    value = os.getenv(_RANDOM_SEED_ENV)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


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
    return Settings(
        collection_name=_read_str_env(_COLLECTION_NAME_ENV, "energy_readings"),
        store_path=_read_optional_env(_STORE_PATH_ENV, "./tmp/energy_readings.json"),
        random_seed=_read_random_seed(),
        log_level=_read_log_level("INFO"),
    )
