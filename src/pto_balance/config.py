"""
Configuration module for the PTO balance system.

Single source of truth for:
- Where the saved plan (config + selected days) lives, locally or in Azure
- Default timeline window and holiday catalog span
- Log level for the CLI / API

All values can be overridden via environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Optional

REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_STATE_PATH = REPO_ROOT / "pto_state.json"


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_log_level(name: str, default: str) -> str:
    value = (os.getenv(name) or default).strip().upper()
    if isinstance(logging.getLevelName(value), int):
        return value
    return default


@dataclass
class Config:
    """
    Runtime configuration for the PTO balance system.

    All fields default from environment variables but can be overridden
    programmatically by constructing Config(...) manually if needed.
    """

    state_path: Path = DEFAULT_STATE_PATH

    # Azure Blob Storage, to keep the saved plan in the cloud
    azure_blob_connection_string: Optional[str] = None
    azure_blob_container_name: Optional[str] = None
    azure_blob_name: str = "pto/state.json"

    default_window_months: int = 6
    holiday_years_before: int = 1
    holiday_years_after: int = 5

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Construct a Config object by reading environment variables.

        Environment variables (all optional):
        - PTO_STATE_PATH
        - PTO_AZURE_BLOB_CONNECTION_STRING
        - PTO_AZURE_BLOB_CONTAINER_NAME
        - PTO_AZURE_BLOB_NAME
        - PTO_DEFAULT_WINDOW_MONTHS  (6 or 12)
        - PTO_HOLIDAY_YEARS_BEFORE / PTO_HOLIDAY_YEARS_AFTER  (int)
        - PTO_LOG_LEVEL  (DEBUG, INFO, WARNING, ...)
        """
        window = _get_env_int("PTO_DEFAULT_WINDOW_MONTHS", default=6)
        return cls(
            state_path=Path(os.getenv("PTO_STATE_PATH", str(DEFAULT_STATE_PATH))),
            azure_blob_connection_string=os.getenv("PTO_AZURE_BLOB_CONNECTION_STRING"),
            azure_blob_container_name=os.getenv("PTO_AZURE_BLOB_CONTAINER_NAME"),
            azure_blob_name=os.getenv("PTO_AZURE_BLOB_NAME", "pto/state.json"),
            default_window_months=window if window in (6, 12) else 6,
            holiday_years_before=max(0, _get_env_int("PTO_HOLIDAY_YEARS_BEFORE", default=1)),
            holiday_years_after=max(1, _get_env_int("PTO_HOLIDAY_YEARS_AFTER", default=5)),
            log_level=_get_env_log_level("PTO_LOG_LEVEL", default="WARNING"),
        )


# Convenience singleton-style accessor if you want a shared config
_DEFAULT_CONFIG: Optional[Config] = None


def get_config(force_reload: bool = False) -> Config:
    """
    Return a process-wide Config instance.

    Use `force_reload=True` if environment variables changed at runtime
    and you want to refresh.
    """
    global _DEFAULT_CONFIG
    if _DEFAULT_CONFIG is None or force_reload:
        _DEFAULT_CONFIG = Config.from_env()
    return _DEFAULT_CONFIG


def configure_logging(config: Optional[Config] = None) -> None:
    cfg = config or get_config()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
