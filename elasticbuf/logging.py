"""Leveled, printf-style logging with a process-wide default logger.

The environment variable ``ELASTICBUF_LOGGING_LEVEL`` holds the integer level
of the default logger, ``ELASTICBUF_LOGGING_FILE`` a file to log into instead
of standard error.
"""

from __future__ import annotations

import enum
import logging as _std
import os
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Callable

LEVEL_ENV = "ELASTICBUF_LOGGING_LEVEL"
FILE_ENV = "ELASTICBUF_LOGGING_FILE"

_MAX_FILE_BYTES = 100 * 1024 * 1024
_MAX_BACKUPS = 2


class Level(enum.IntEnum):
    """Logging levels; higher is more severe."""

    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    DPANIC = 3
    PANIC = 4
    FATAL = 5

    def __str__(self) -> str:
        return self.name.lower()


_STD_LEVELS = {
    Level.DEBUG: _std.DEBUG,
    Level.INFO: _std.INFO,
    Level.WARN: _std.WARNING,
    Level.ERROR: _std.ERROR,
    Level.DPANIC: 45,
    Level.PANIC: 48,
    Level.FATAL: _std.CRITICAL,
}
_STD_NAMES = {std: level.name for level, std in _STD_LEVELS.items()}


def _level_name(level: int) -> str:
    try:
        return str(Level(level))
    except ValueError:
        return f"Level({level})"


def _threshold(level: int) -> int:
    if level < Level.DEBUG:
        return 1
    if level > Level.FATAL:
        return _std.CRITICAL + 1
    return _STD_LEVELS[Level(level)]


class _Formatter(_std.Formatter):
    def format(self, record: _std.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).astimezone().isoformat()
        name = _STD_NAMES.get(record.levelno, record.levelname)
        return f"{stamp}\t{name}\t{record.filename}:{record.lineno}\t{record.getMessage()}"


class _StderrHandler(_std.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at the time of each record."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    def emit(self, record: _std.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)

    def flush(self) -> None:
        self.stream = sys.stderr
        super().flush()


class Logger:
    """Logs printf-style formatted messages at a minimum level."""

    def __init__(self, handler: _std.Handler, level: int = Level.INFO, name: str = "elasticbuf") -> None:
        self._logger = _std.Logger(name)
        self._logger.setLevel(_threshold(level))
        self._logger.propagate = False
        handler.setFormatter(_Formatter())
        self._logger.addHandler(handler)

    def _log(self, level: Level, format: str, args: tuple, stacklevel: int) -> None:
        self._logger.log(_STD_LEVELS[level], format, *args, stacklevel=stacklevel)

    def _flush(self) -> None:
        for handler in self._logger.handlers:
            handler.flush()

    def debugf(self, format: str, *args) -> None:
        """Log at DEBUG level."""
        self._log(Level.DEBUG, format, args, 3)

    def infof(self, format: str, *args) -> None:
        """Log at INFO level."""
        self._log(Level.INFO, format, args, 3)

    def warnf(self, format: str, *args) -> None:
        """Log at WARN level."""
        self._log(Level.WARN, format, args, 3)

    def errorf(self, format: str, *args) -> None:
        """Log at ERROR level."""
        self._log(Level.ERROR, format, args, 3)

    def fatalf(self, format: str, *args) -> None:
        """Log at FATAL level, then exit with status 1."""
        self._log(Level.FATAL, format, args, 3)
        self._flush()
        raise SystemExit(1)


def create_logger_as_local_file(local_file_path: str, log_level: int) -> tuple[Logger, Callable[[], None]]:
    """Create a logger writing to a size-rotated local file; return it and its flush function."""
    if not local_file_path:
        raise ValueError("invalid local logger path")
    handler = RotatingFileHandler(
        local_file_path,
        maxBytes=_MAX_FILE_BYTES,
        backupCount=_MAX_BACKUPS,
        encoding="utf-8",
    )
    logger = Logger(handler, log_level, name=f"elasticbuf.file:{local_file_path}")
    return logger, logger._flush


def _parse_level(raw: str) -> int:
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise ValueError(f"invalid {LEVEL_ENV}, invalid syntax: {raw!r}")
    value = int(raw)
    if not -128 <= value <= 127:
        raise ValueError(f"invalid {LEVEL_ENV}, value out of range: {raw!r}")
    return value


def _init_default() -> tuple[int, Logger, Callable[[], None] | None]:
    level = Level.INFO
    raw = os.environ.get(LEVEL_ENV, "")
    if raw:
        level = _parse_level(raw)
    file_name = os.environ.get(FILE_ENV, "")
    if file_name:
        try:
            logger, flush = create_logger_as_local_file(file_name, level)
        except (OSError, ValueError) as exc:
            raise ValueError(f"invalid {FILE_ENV}, {exc}") from exc
        return level, logger, flush
    return level, Logger(_StderrHandler(), level), None


_default_level, _default_logger, _flush_logs = _init_default()


def get_default_logger() -> Logger:
    """Return the default logger."""
    return _default_logger


def log_level() -> str:
    """Return the name of the default logging level."""
    return _level_name(_default_level)


def cleanup() -> None:
    """Flush the default logger's output, if it writes to a file."""
    if _flush_logs is not None:
        _flush_logs()


def error(err) -> None:
    """Log ``err`` at ERROR level unless it is None."""
    if err is not None:
        _default_logger._log(Level.ERROR, "error occurs during runtime, %s", (err,), 4)


def debugf(format: str, *args) -> None:
    """Log at DEBUG level with the default logger."""
    _default_logger._log(Level.DEBUG, format, args, 4)


def infof(format: str, *args) -> None:
    """Log at INFO level with the default logger."""
    _default_logger._log(Level.INFO, format, args, 4)


def warnf(format: str, *args) -> None:
    """Log at WARN level with the default logger."""
    _default_logger._log(Level.WARN, format, args, 4)


def errorf(format: str, *args) -> None:
    """Log at ERROR level with the default logger."""
    _default_logger._log(Level.ERROR, format, args, 4)


def fatalf(format: str, *args) -> None:
    """Log at FATAL level with the default logger, then exit with status 1."""
    _default_logger._log(Level.FATAL, format, args, 4)
    _default_logger._flush()
    raise SystemExit(1)