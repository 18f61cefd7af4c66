"""JSON-lines file logging with an optional stderr mirror."""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]

_FILE_MARKER = "_snipweave_file"
_CONSOLE_MARKER = "_snipweave_console"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields are nested under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = _extra_fields(record)
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Return the logger ``name`` writing JSON lines under ``log_dir``.

    The file defaults to ``<last name segment>.log``. When ``log_dir`` is not
    writable a directory under the system temp dir is used instead, and the
    returned path says where records actually go. ``verbose`` logs DEBUG and
    mirrors records to stderr. Calling this again for the same logger reuses
    its handlers.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    log_name = filename or name.rsplit(".", 1)[-1] + ".log"
    handler = _attach_file_handler(
        logger,
        _writable_log_file(log_dir, log_name),
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))
    _set_console(logger, enabled=verbose)
    return logger, Path(handler.baseFilename)


def _coerce_level(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: _coerce_value(value)
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES
    }


def _coerce_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _coerce_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_coerce_value(item) for item in value]
    return repr(value)


def _writable_log_file(log_dir: Path, log_name: str) -> Path:
    for directory in (log_dir, _fallback_log_dir()):
        target = directory / log_name
        try:
            directory.mkdir(parents=True, exist_ok=True)
            target.touch(exist_ok=True)
        except PermissionError:
            continue
        return target
    raise PermissionError(f"No writable log directory for {log_name}")


def _attach_file_handler(
    logger: logging.Logger,
    path: Path,
    *,
    max_bytes: int,
    backup_count: int,
) -> RotatingFileHandler:
    for existing in logger.handlers:
        if getattr(existing, _FILE_MARKER, False):
            if existing.baseFilename != str(path):  # type: ignore[attr-defined]
                # A closed handler reopens its file on the next emit.
                existing.close()
                existing.baseFilename = str(path)  # type: ignore[attr-defined]
            return existing  # type: ignore[return-value]

    try:
        handler = RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except PermissionError:
        handler = RotatingFileHandler(
            _writable_log_file(_fallback_log_dir(), path.name),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _FILE_MARKER, True)
    logger.addHandler(handler)
    return handler


def _set_console(logger: logging.Logger, *, enabled: bool) -> None:
    current = [h for h in logger.handlers if getattr(h, _CONSOLE_MARKER, False)]
    if enabled and not current:
        console = logging.StreamHandler(stream=sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        setattr(console, _CONSOLE_MARKER, True)
        logger.addHandler(console)
    elif not enabled:
        for handler in current:
            logger.removeHandler(handler)
            handler.close()


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "snipweave-logs"
