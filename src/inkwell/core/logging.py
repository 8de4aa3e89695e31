"""
Log setup for Inkwell.

Records emitted while a request is being served are prefixed with that
request's id, which `RequestIdMiddleware` binds for the duration of the
request. Timestamps are always UTC.
"""

import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import InkwellSettings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(request_tag)s%(name)s: %(message)s"

request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def bind_request_id(value: str) -> Token:
    """
    Attach `value` to every record logged from the current context.

    >>> token = bind_request_id("4f1c...")
    >>> release_request_id(token)
    """
    return request_id.set(value)


def release_request_id(token: Token) -> None:
    request_id.reset(token)


class TraceFormatter(logging.Formatter):
    """
    ISO-8601 UTC timestamps and a `[request-id] ` tag.

    The tag is exposed to the format string as `request_tag` and is empty
    outside a request.
    """

    def formatTime(self, record, datefmt=None):  # noqa: N802
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            return created.strftime(datefmt)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        current = request_id.get()
        record.request_tag = f"[{current}] " if current else ""
        return super().format(record)


def setup_logging(settings: InkwellSettings, logger_name: str = "") -> logging.Logger:
    """
    Install Inkwell's handlers from `settings`.

    Logs go to stdout, and also to a rotating `settings.LOG_FILE` when one
    is configured. Existing handlers on the target logger are replaced, so
    calling this twice does not duplicate output.

    Args:
        settings: Supplies `LOG_LEVEL`, `LOG_FILE` and the rotation limits.
        logger_name: Configure only this logger instead of the root one.
            A named logger stops propagating to the root.

    Returns:
        The configured logger.

    Example:
        >>> setup_logging(InkwellSettings(LOG_LEVEL="DEBUG"))
        <RootLogger root (DEBUG)>
    """
    target = logging.getLogger(logger_name or None)
    for handler in target.handlers:
        handler.close()
    target.handlers.clear()
    target.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    formatter = TraceFormatter(LOG_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    target.addHandler(console)

    if logger_name:
        target.propagate = False

    if settings.LOG_FILE:
        path = Path(settings.LOG_FILE).resolve()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path,
                maxBytes=settings.LOG_FILE_MAX_BYTES,
                backupCount=settings.LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        except OSError as e:
            # Keep serving with console logging only
            target.warning("Cannot write log file %s: %s", path, e)
        else:
            file_handler.setFormatter(formatter)
            target.addHandler(file_handler)

    return target
