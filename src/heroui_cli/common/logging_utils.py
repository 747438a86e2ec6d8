"""Logging helpers: setup, structured context and timing."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, Optional

from ..constants import Constants

_SENSITIVE_QUERY = re.compile(r"(?i)((?:token|key|secret|password|auth)[^=&]*=)[^&#]*")
_USERINFO = re.compile(r"^(\w+://)[^/@]+@")


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging for CLI use.

    Args:
        level: Logging level name, e.g. "DEBUG".
        log_file: Optional path; when given, logs go to this file instead of stderr.
    """
    numeric = getattr(logging, str(level).upper(), logging.INFO)
    handlers = []
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler())
    logging.basicConfig(
        level=numeric,
        format=Constants.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload, dropping fields that are None."""
    return {k: v for k, v in fields.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip credentials and secret query values from a URL for logging."""
    if not url:
        return url
    cleaned = _USERINFO.sub(r"\1[REDACTED]@", url)
    return _SENSITIVE_QUERY.sub(r"\1[REDACTED]", cleaned)


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Milliseconds elapsed so far, or total once the block has exited."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000, 2)
