"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

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
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc


def _env_decimal(name: str, default: str) -> Decimal:
    value = os.getenv(name)
    if value is None or not value.strip():
        return Decimal(default)
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {value!r}.") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtSage"
    TESTING = False
    JSON_SORT_KEYS = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("DEBTSAGE_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTSAGE_DEV_MODE", default=True)
        self.DEFAULT_EXTRA_PAYMENT = _env_decimal("DEBTSAGE_DEFAULT_EXTRA_PAYMENT", "200")
        self.HORIZON_MONTHS = _env_int("DEBTSAGE_HORIZON_MONTHS", 600)
        self.ASYNC_JOBS = _env_bool("DEBTSAGE_ASYNC_JOBS", default=True)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("DEBTSAGE_SECRET_KEY must be set in non-dev mode.")
        if self.HORIZON_MONTHS <= 0:
            raise ValueError("DEBTSAGE_HORIZON_MONTHS must be a positive number of months.")
        if self.DEFAULT_EXTRA_PAYMENT < 0:
            raise ValueError("DEBTSAGE_DEFAULT_EXTRA_PAYMENT cannot be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and other runtime files live."""

        data_root = os.getenv("DEBTSAGE_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            local_app_data = os.getenv("LOCALAPPDATA") or (Path.home() / "AppData" / "Local")
            fallback_path = Path(local_app_data).expanduser() / self.APP_NAME
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()


class DevConfig(BaseConfig):
    """Development configuration."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite; jobs run inline."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.ASYNC_JOBS = False
