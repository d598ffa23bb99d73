"""
Environment-driven configuration for the dashboard backend.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class StoreConfig(BaseModel):
    database_url: Optional[str] = None
    """SQLAlchemy URL; unset keeps activity in memory for the life of the process"""

    table_name: str = "daily_activity"

    seed_sample_data: bool = True
    """Preload the five January 2024 sample days into an empty store"""

    @classmethod
    def from_env(cls) -> "StoreConfig":
        return cls(
            database_url=os.getenv("SDR_DASHBOARD_DATABASE_URL") or None,
            table_name=os.getenv("SDR_DASHBOARD_TABLE", "daily_activity"),
            seed_sample_data=_env_bool("SDR_DASHBOARD_SEED_SAMPLE_DATA", True),
        )


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls) -> "ServerConfig":
        defaults = cls()
        return cls(
            host=os.getenv("SDR_DASHBOARD_HOST", defaults.host),
            port=_env_int("PORT", defaults.port),
            cors_origins=_env_list("SDR_DASHBOARD_CORS_ORIGINS", defaults.cors_origins),
        )


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(level=os.getenv("SDR_DASHBOARD_LOG_LEVEL", "INFO").upper())


class DashboardConfig(BaseModel):
    store: StoreConfig = StoreConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "DashboardConfig":
        if dotenv:
            load_dotenv()
        return cls(
            store=StoreConfig.from_env(),
            server=ServerConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    cfg = config or LoggingConfig.from_env()
    level = getattr(logging, cfg.level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger("sdr_dashboard").setLevel(level)
