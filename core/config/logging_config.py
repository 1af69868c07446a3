#!/usr/bin/env python3
"""Logging configuration

Level and format for the root logger, optional file output, and the
third-party loggers held at WARNING so request logs stay readable.
"""
import os
from dataclasses import dataclass, field
from typing import Tuple

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_QUIET_LOGGERS = ("httpx", "httpcore", "google", "urllib3", "asyncpg", "PIL")


def _csv(val: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in val.split(",") if part.strip())


@dataclass
class LoggingConfig:
    """Root logger settings"""
    log_level: str = "INFO"
    log_format: str = DEFAULT_FORMAT
    date_format: str = "%Y-%m-%d %H:%M:%S"
    log_file: str = ""
    enable_console: bool = True

    # uvicorn request lines
    access_log: bool = True
    quiet_loggers: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_QUIET_LOGGERS)

    @classmethod
    def from_env(cls) -> 'LoggingConfig':
        """Load logging config from environment variables"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            log_level=os.getenv("LOG_LEVEL", "DEBUG" if env in ("development", "dev") else "INFO"),
            log_format=os.getenv("LOG_FORMAT", DEFAULT_FORMAT),
            date_format=os.getenv("LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S"),
            log_file=os.getenv("LOG_FILE", ""),
            enable_console=os.getenv("LOG_CONSOLE", "true").lower() == "true",
            access_log=os.getenv("LOG_ACCESS", "true").lower() == "true",
            quiet_loggers=_csv(os.getenv("LOG_QUIET_LOGGERS", ",".join(DEFAULT_QUIET_LOGGERS))),
        )
