"""Logging setup for regwatch.

Loggers returned by :func:`get_check_logger` are bound to the registry or
image a check is working on, and the formatter appends that context to
every line::

    WARNING: Check failed: GET https://ghcr.io/v2/owner/name/tags/list: not found image=ghcr.io/owner/name:1.0.0
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping

PACKAGE_LOGGER = "regwatch"

# Record attributes appended to a line, in this order
CONTEXT_FIELDS = ("registry", "image")


class CheckContextFormatter(logging.Formatter):
    """Formatter appending the registry and image a record was logged for."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{field}={getattr(record, field)}"
            for field in CONTEXT_FIELDS
            if getattr(record, field, None)
        ]
        if not context:
            return message
        return f"{message} {' '.join(context)}"


def configure_logging(level: str = "WARNING") -> None:
    """Send regwatch logs to stderr at the given level.

    Calling it again replaces the previous setup.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(CheckContextFormatter("%(levelname)s: %(message)s"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    logger.handlers = [handler]
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a module, placed under the package logger."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


class CheckLogger(logging.LoggerAdapter):
    """Logger bound to the registry or image of one check."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_check_logger(
    name: str,
    image: str | None = None,
    registry: str | None = None,
) -> CheckLogger:
    """Get a module logger bound to an image or a registry.

    Args:
        name: Module name
        image: Image reference being checked
        registry: Registry API host, for messages about a whole batch group

    Returns:
        CheckLogger adding the given context to each record
    """
    return CheckLogger(get_logger(name), {"image": image, "registry": registry})
