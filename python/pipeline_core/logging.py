"""Structured logging for pipeline_core.

This module provides structured logging functions on top of the standard
library ``logging`` package. All records go to the ``pipeline_core``
logger; structured fields are attached to the record as ``fields`` and
appended to the message so they survive plain formatters.

Example:
    >>> from pipeline_core import log_info, log_error
    >>>
    >>> log_info("Pipeline configured", {
    ...     "correlation_id": "abc-123",
    ...     "middleware": "3"
    ... })
    >>>
    >>> try:
    ...     await pipeline.handle(request, destination)
    ... except Exception as e:
    ...     log_error(f"Request failed: {e}", {
    ...         "correlation_id": "abc-123",
    ...         "error_type": type(e).__name__
    ...     })
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Union

from .types import LogContext

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "pipeline_core"
LOG_LEVEL_ENV = "PIPELINE_CORE_LOG_LEVEL"

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG = logging.getLogger(LOGGER_NAME)

Fields = Optional[Union[dict[str, Any], LogContext]]


def configure_logging(level: str | None = None) -> int:
    """Set the level of the ``pipeline_core`` logger.

    The ``PIPELINE_CORE_LOG_LEVEL`` environment variable takes precedence
    over the given level.

    Args:
        level: One of trace, debug, info, warn, error. Defaults to info.

    Returns:
        The numeric level that was applied.

    Raises:
        ValueError: If the level name is unknown.
    """
    name = (os.environ.get(LOG_LEVEL_ENV) or level or "info").lower()
    if name not in _LEVELS:
        raise ValueError(f"Unknown log level: '{name}'")
    LOG.setLevel(_LEVELS[name])
    return _LEVELS[name]


def log_error(message: str, fields: Fields = None) -> None:
    """Log at ERROR. ``fields`` may be a dict or a LogContext."""
    _log(logging.ERROR, message, fields)


def log_warn(message: str, fields: Fields = None) -> None:
    _log(logging.WARNING, message, fields)


def log_info(message: str, fields: Fields = None) -> None:
    _log(logging.INFO, message, fields)


def log_debug(message: str, fields: Fields = None) -> None:
    """Log at DEBUG.

    Example:
        >>> log_debug("Resolved middleware", {"middleware": "auth", "kind": "instance"})
    """
    _log(logging.DEBUG, message, fields)


def log_trace(message: str, fields: Fields = None) -> None:
    """Log at TRACE, used for per-position chain entry."""
    _log(TRACE, message, fields)


def _log(level: int, message: str, fields: Fields) -> None:
    if not LOG.isEnabledFor(level):
        return
    flat = _flatten(fields)
    if flat:
        message = f"{message} [{' '.join(f'{k}={v}' for k, v in flat.items())}]"
    LOG.log(level, message, extra={"fields": flat})


def _flatten(fields: Fields) -> dict[str, str]:
    """Stringify field values; LogContext drops unset entries."""
    if fields is None:
        return {}
    if isinstance(fields, LogContext):
        fields = fields.model_dump(exclude_none=True)
    return {key: str(value) for key, value in fields.items()}


__all__ = [
    "TRACE",
    "configure_logging",
    "log_debug",
    "log_error",
    "log_info",
    "log_trace",
    "log_warn",
]
