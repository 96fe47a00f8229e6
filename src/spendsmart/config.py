"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Configuration built once at startup and handed to each component."""

    APP_NAME = "SpendSmart"
    DB_FILENAME = "spendsmart.db"
    MAX_ACTIVE_BUDGETS = 10
    RECENT_TRANSACTIONS = 10
    SEED_MODES = {"if-empty", "force", "off"}
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SPENDSMART_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("SPENDSMART_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("SPENDSMART_DATABASE_URL", self._build_sqlite_url())
        self.TOKEN_TTL_MINUTES = _env_int("SPENDSMART_TOKEN_TTL_MINUTES", 60)
        self.REFRESH_TOKEN_TTL_DAYS = _env_int("SPENDSMART_REFRESH_TOKEN_TTL_DAYS", 7)
        self.RESET_CODE_TTL_MINUTES = _env_int("SPENDSMART_RESET_CODE_TTL_MINUTES", 60)

        self.MAIL_HOST = os.getenv("SPENDSMART_MAIL_HOST", "smtp.gmail.com")
        self.MAIL_PORT = _env_int("SPENDSMART_MAIL_PORT", 465)
        self.MAIL_USE_SSL = _env_bool("SPENDSMART_MAIL_USE_SSL", default=True)
        self.MAIL_USERNAME = os.getenv("SPENDSMART_MAIL_USERNAME")
        self.MAIL_PASSWORD = os.getenv("SPENDSMART_MAIL_PASSWORD")
        self.MAIL_SENDER = os.getenv("SPENDSMART_MAIL_SENDER") or self.MAIL_USERNAME

        self.ASYNC_ALERTS = _env_bool("SPENDSMART_ASYNC_ALERTS", default=not self.TESTING)
        self.SEED_CATEGORIES = os.getenv("SPENDSMART_SEED_CATEGORIES", "if-empty").strip().lower()
        if self.SEED_CATEGORIES not in self.SEED_MODES:
            raise ValueError(
                f"SPENDSMART_SEED_CATEGORIES must be one of {sorted(self.SEED_MODES)}"
            )

        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("SPENDSMART_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("SPENDSMART_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def mail_configured(self) -> bool:
        return bool(self.MAIL_USERNAME and self.MAIL_PASSWORD)

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite: alert checks run inline on the request thread."""

    TESTING = True
