"""Fixture configuration loaded from environment variables and .env file."""

from __future__ import annotations

import logging
import sys
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hypercore_fixtures.core.constants import DEFAULT_RPC_URL

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

DEFAULT_RPC_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "data/hypercore_fixtures.log"


class Settings(BaseSettings):
    """Simulated core fixture configuration.

    Values are loaded from environment variables with fallback to .env file.
    No field fails validation: anything unparseable falls back to its
    default so a stray environment value cannot break setup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Mode selection
    fork_mode: bool = False
    rpc_url: str = DEFAULT_RPC_URL
    fork_block: int | None = None
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT

    # Logging
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("fork_mode", mode="before")
    @classmethod
    def parse_fork_mode(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if v is None:
            return False
        text = str(v).strip().lower()
        if text in _TRUTHY:
            return True
        if text not in _FALSY:
            logger.warning("Unrecognized FORK_MODE value %r, defaulting to offline", v)
        return False

    @field_validator("rpc_url", mode="before")
    @classmethod
    def parse_rpc_url(cls, v: Any) -> str:
        text = "" if v is None else str(v)
        if not text.strip():
            return DEFAULT_RPC_URL
        if not text.lower().startswith(("http://", "https://")):
            logger.warning("Ignoring RPC_URL %r (not an http(s) URL), using default", text)
            return DEFAULT_RPC_URL
        return text

    @field_validator("fork_block", mode="before")
    @classmethod
    def parse_fork_block(cls, v: Any) -> int | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        try:
            block = int(str(v).strip(), 0)
        except ValueError:
            logger.warning("Ignoring FORK_BLOCK %r (not an integer), using latest", v)
            return None
        if block < 0:
            logger.warning("Ignoring negative FORK_BLOCK %d, using latest", block)
            return None
        return block

    @field_validator("rpc_timeout", mode="before")
    @classmethod
    def parse_rpc_timeout(cls, v: Any) -> float:
        try:
            timeout = float(v)
        except (TypeError, ValueError):
            return DEFAULT_RPC_TIMEOUT
        return timeout if timeout > 0 else DEFAULT_RPC_TIMEOUT

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> str:
        level = "" if v is None else str(v).strip().upper()
        if level in _LOG_LEVELS:
            return level
        if level:
            logger.warning("Unknown LOG_LEVEL %r, using %s", v, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL


def setup_logging(level: str = DEFAULT_LOG_LEVEL, log_file: str | None = LOG_FILE) -> None:
    """Send fixture logs to stdout and, when its directory exists, to ``log_file``.

    Calling it again replaces the handlers instead of stacking them. Unknown
    levels fall back to INFO, as ``Settings.log_level`` does.
    """
    console_level = getattr(logging, level.upper(), None)
    if not isinstance(console_level, int):
        console_level = logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(console_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    handlers: list[logging.Handler] = [console_handler]

    if log_file is not None:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError:
            pass
        else:
            file_handler.setLevel(logging.DEBUG)
            handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


# Module-level singleton
settings = Settings()
