"""Environment-driven configuration objects for the storefront layer."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .exceptions import ConfigurationException

DEFAULT_CATALOG_API_URL = "https://fakestoreapi.com/"
DEFAULT_CATALOG_API_TIMEOUT = 30.0
DEFAULT_DATABASE_PATH = "storefront.db"


def _str_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from e


@dataclass(slots=True)
class CatalogApiConfig:
    base_url: str
    timeout_seconds: float


@dataclass(slots=True)
class Settings:
    catalog_api: CatalogApiConfig
    database_path: str
    refresh_local_on_remote_success: bool
    seed_local_catalog: bool
    log_level: str


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    base_url = os.getenv("CATALOG_API_URL", "").strip() or DEFAULT_CATALOG_API_URL
    timeout = _float_env("CATALOG_API_TIMEOUT", DEFAULT_CATALOG_API_TIMEOUT)
    if timeout <= 0:
        raise ConfigurationException("CATALOG_API_TIMEOUT must be greater than zero")

    catalog_api = CatalogApiConfig(base_url=base_url, timeout_seconds=timeout)

    # Seeding is on unless explicitly disabled
    seed_raw = os.getenv("SEED_LOCAL_CATALOG")
    seed_local_catalog = True if seed_raw is None else _str_to_bool(seed_raw)

    return Settings(
        catalog_api=catalog_api,
        database_path=os.getenv("STOREFRONT_DB_PATH", "").strip() or DEFAULT_DATABASE_PATH,
        refresh_local_on_remote_success=_str_to_bool(os.getenv("CATALOG_REFRESH_LOCAL")),
        seed_local_catalog=seed_local_catalog,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
