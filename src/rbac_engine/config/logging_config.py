"""Centralized logging configuration for rbac-engine.

Log level and format are taken from the environment so the same build can run
quietly in production and verbosely while debugging invalidation issues.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict, Optional


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


class LoggingConfig:
    """Logging configuration manager."""

    # Engine modules that are chatty at INFO
    DEFAULT_QUIET_MODULES = [
        "rbac_engine.features.cache.adapters",
        "rbac_engine.features.invalidation.adapters",
    ]

    # Third-party modules that should only log errors
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
        "asyncio",
        "redis",
    ]

    @classmethod
    def build_config(
        cls,
        log_level: Optional[str] = None,
        log_format: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build a ``dictConfig`` mapping.

        Args:
            log_level: Root level, defaults to ``LOG_LEVEL`` or INFO
            log_format: One of simple/detailed/json, defaults to ``LOG_FORMAT``

        Returns:
            Dictionary accepted by ``logging.config.dictConfig``
        """
        level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
        fmt_name = (log_format or os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value)).lower()
        try:
            fmt = LogFormat(fmt_name)
        except ValueError:
            fmt = LogFormat.SIMPLE
        enable_sql_logging = os.getenv("ENABLE_SQL_LOGGING", "false").lower() == "true"

        config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": FORMAT_STRINGS[fmt],
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {},
        }

        for module in cls.DEFAULT_QUIET_MODULES:
            config["loggers"][module] = {
                "level": "WARNING" if level != "DEBUG" else "DEBUG",
                "handlers": ["console"],
                "propagate": False,
            }

        for module in cls.ERROR_ONLY_MODULES:
            config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        if not enable_sql_logging:
            config["loggers"]["asyncpg"] = {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            }

        return config

    @classmethod
    def configure(
        cls,
        log_level: Optional[str] = None,
        log_format: Optional[str] = None,
    ) -> None:
        """Apply logging configuration from arguments or environment."""
        config = cls.build_config(log_level, log_format)
        logging.config.dictConfig(config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={config['root']['level']}")

