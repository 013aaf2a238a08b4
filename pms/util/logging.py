"""Stdlib logging setup for the interface layer and third-party libraries.

Services log through logfire; this only configures the ``logging`` module
used by routes, middleware and the libraries underneath them.
"""

import logging
import sys

from pms.config import Settings

# Libraries that log every request or query at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "asyncpg")


def setup_logging(settings: Settings) -> None:
    """Configure root and ``pms`` loggers for the current environment.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Statement logging is controlled by DATABASE__ECHO, not by debug
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database.echo else logging.WARNING
    )

    logging.getLogger("pms").setLevel(level)
    logging.getLogger(__name__).info(
        f"Logging configured for {settings.environment} "
        f"at {logging.getLevelName(level)}"
    )
