"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    admin_token: str
    invoice_tax_rate: float
    default_check_in_hour: int
    default_check_out_hour: int
    seed_default_rooms: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests call ``get_settings.cache_clear()``."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Smart Hotel Scheduler"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        admin_token=os.getenv("ADMIN_TOKEN", ""),
        invoice_tax_rate=_env_float("INVOICE_TAX_RATE", 0.10),
        default_check_in_hour=_env_int("DEFAULT_CHECK_IN_HOUR", 14),
        default_check_out_hour=_env_int("DEFAULT_CHECK_OUT_HOUR", 11),
        seed_default_rooms=_env_bool("SEED_DEFAULT_ROOMS", True),
    )
