"""Centralized logging configuration for svcinstall.

All entry points should call configure_logging() early.

Logging Levels:
- DEBUG: Native commands being run, detection results
- INFO: Completed installs, rollbacks that succeeded
- WARNING: Recoverable issues
- ERROR: Rollback failures (never raised, only logged)
"""

import logging
import os

from svcinstall.config.paths import LOG_LEVEL_ENV_VAR

DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - svcinstall.service.backends.systemd -> service
    - svcinstall.config.models -> config
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "svcinstall":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return super().format(record)


def resolve_log_level(level: str | None = None) -> str:
    """Pick the log level from the argument, the environment, or the default."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    level = level.upper()
    if level not in LOG_LEVELS:
        level = DEFAULT_LOG_LEVEL
    return level


def configure_logging(level: str | None = None, use_rich: bool = False) -> None:
    """Configure logging for svcinstall.

    Call this once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses SVCINSTALL_LOG_LEVEL env var or WARNING.
        use_rich: Use Rich handler for colorful output on stderr.
    """
    log_level = getattr(logging, resolve_log_level(level))

    console_handler: logging.Handler
    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        console_handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[console_handler],
        force=True,
    )
