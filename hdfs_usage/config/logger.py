"""
Logging configuration using loguru.

Provides structured logging with JSON output in production
and pretty-printed output in development.
"""

import sys

from loguru import logger

from hdfs_usage.config.settings import settings


def _text_formatter(record: dict) -> str:
    """Format log record for text output, conditionally showing extras.

    Only includes the {extra} section if it contains data, preventing
    empty braces from appearing in logs.
    """
    base_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    if record["extra"]:
        base_format += " | {extra}"

    return base_format + "\n{exception}"


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure loguru logger.

    Falls back to HDFS_USAGE_LOG_LEVEL and HDFS_USAGE_LOG_FORMAT when
    arguments are not given:
    - text format: Pretty-printed colorful logs to stderr
    - json format: JSON-formatted logs to stderr for container logging

    Logs go to stderr so CLI output on stdout stays machine readable.
    """
    logger.remove()

    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()

    if log_format == "text":
        logger.add(
            sys.stderr,
            format=_text_formatter,
            level=level,
            colorize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=level,
            serialize=True,  # JSON output
        )

    logger.debug(f"Logging configured (level={level}, format={log_format})")
