"""RBAC admin API entry point."""

import logging

import uvicorn

from .config.logging_config import LoggingConfig
from .config.settings import get_settings

settings = get_settings()
LoggingConfig.configure(settings.log_level, settings.log_format)

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the application."""
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")

    uvicorn.run(
        "rbac_engine.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
