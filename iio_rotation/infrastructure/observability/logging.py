"""Logging setup for iio-rotation.

Every module logs through a plain ``logging.getLogger(__name__)`` child of the
root logger; only :func:`configure_logging` installs a handler. Records go to
stderr so that ``--print-config`` output on stdout stays clean, and fields
bound with :func:`log_context` are appended to each line::

    2024-05-01 12:00:00,000 - iio_rotation.services.watcher - INFO - Orientation changed [previous=normal current=leftup]
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_LOGGERS = ("asyncio", "dbus_fast")

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})
_handler: logging.Handler | None = None


class ContextualFormatter(logging.Formatter):
    """Formatter that appends the active :func:`log_context` fields."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _log_context.get()
        if fields:
            suffix = " ".join(f"{key}={value}" for key, value in fields.items())
            record.msg = f"{record.msg} [{suffix}]"
        return super().format(record)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every record logged inside the block.

    Nested blocks add to the outer fields and restore them on exit.
    """
    token = _log_context.set({**_log_context.get(), **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


def configure_logging(
    level: int = logging.INFO,
    third_party_level: int = logging.WARNING,
) -> None:
    """Route application records to stderr at ``level``.

    Safe to call more than once: the handler installed by a previous call is
    replaced, so the level and the target stream always follow the latest
    call. Handlers installed by anything else are left alone.
    """
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    root.addHandler(_handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``; it inherits level and handler from root."""
    return logging.getLogger(name)
