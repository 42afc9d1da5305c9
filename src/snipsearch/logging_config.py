"""
Logging for snipsearch.

Every engine logs through a SearchLogger, a thin wrapper over a stdlib
``logging.Logger`` that attaches structured fields (``operation``, ``query``,
``file_path`` ...) to each record. The fields show up as ``key=value`` pairs
with the structured format and as JSON keys with the json format.

Events:
    search_start / search_complete: one pair per aggregation (INFO)
    file_error: a file that could not be read (ERROR)
    export: a report written to disk (INFO)
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import time
from enum import Enum
from pathlib import Path
from typing import Any, TextIO

import orjson


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def number(self) -> int:
        return logging.getLevelName(self.value)


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"
    STRUCTURED = "structured"


# attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Structured fields attached to ``record`` by SearchLogger."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **record_fields(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode("utf-8")


class StructuredFormatter(logging.Formatter):
    """``time [LEVEL] logger: message | key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{self.formatTime(record, self.datefmt)} [{record.levelname}] "
            f"{record.name}: {record.getMessage()}"
        )
        fields = record_fields(record)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _make_formatter(format_type: LogFormat) -> logging.Formatter:
    if format_type == LogFormat.JSON:
        return JsonFormatter()
    if format_type == LogFormat.STRUCTURED:
        return StructuredFormatter()
    if format_type == LogFormat.DETAILED:
        return logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
        )
    return logging.Formatter("%(levelname)s: %(message)s")


class SearchLogger:
    """
    Named logger with console and optional rotating-file output.

    Creating a SearchLogger for a name replaces the handlers previously
    installed on that name, so configuring twice never duplicates output.
    """

    def __init__(
        self,
        name: str = "snipsearch",
        level: LogLevel = LogLevel.INFO,
        format_type: LogFormat = LogFormat.SIMPLE,
        log_file: Path | None = None,
        max_file_size: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        enable_console: bool = True,
        enable_file: bool = False,
        stream: TextIO | None = None,
    ):
        self.name = name
        self.level = level
        self.format_type = format_type
        self.log_file = log_file

        self.logger = logging.getLogger(name)
        self.logger.handlers.clear()

        handlers: list[logging.Handler] = []
        if enable_console:
            handlers.append(logging.StreamHandler(stream or sys.stderr))
        if enable_file and log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    log_file, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
                )
            )
        formatter = _make_formatter(format_type)
        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.set_level(level)

    def set_level(self, level: LogLevel) -> None:
        self.level = level
        self.logger.setLevel(level.number)
        for handler in self.logger.handlers:
            handler.setLevel(level.number)

    def info(self, message: str, **fields: Any) -> None:
        self.logger.info(message, extra=fields)

    def error(self, message: str, **fields: Any) -> None:
        self.logger.error(message, extra=fields)

    def log_search_start(self, query: str, num_files: int, **fields: Any) -> None:
        self.info(
            f"Collecting snippets for '{query}' from {num_files} files",
            operation="search_start",
            query=query,
            num_files=num_files,
            **fields,
        )

    def log_search_complete(
        self, query: str, matched: int, num_files: int, elapsed_ms: float, **fields: Any
    ) -> None:
        self.info(
            f"Snippets collected: query='{query}', matched={matched}/{num_files}, "
            f"time={elapsed_ms:.2f}ms",
            operation="search_complete",
            query=query,
            matched=matched,
            num_files=num_files,
            elapsed_ms=elapsed_ms,
            **fields,
        )

    def log_file_error(self, file_path: str, error: str, **fields: Any) -> None:
        """A file was skipped because it could not be read."""
        self.error(
            f"Unreadable file skipped: {file_path} - {error}",
            operation="file_error",
            file_path=file_path,
            error=error,
            **fields,
        )

    def log_export(self, destination: str, results: int, **fields: Any) -> None:
        self.info(
            f"Report with {results} results written to {destination}",
            operation="export",
            destination=destination,
            results=results,
            **fields,
        )


_global_logger: SearchLogger | None = None


def get_logger() -> SearchLogger:
    """Logger used by engines created without one."""
    global _global_logger
    if _global_logger is None:
        _global_logger = SearchLogger()
    return _global_logger


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    format_type: LogFormat = LogFormat.SIMPLE,
    log_file: Path | None = None,
    enable_console: bool = True,
    enable_file: bool = False,
    **kwargs: Any,
) -> SearchLogger:
    """Replace the global logger; engines created afterwards use it."""
    global _global_logger
    _global_logger = SearchLogger(
        level=level,
        format_type=format_type,
        log_file=log_file,
        enable_console=enable_console,
        enable_file=enable_file,
        **kwargs,
    )
    return _global_logger


def disable_logging() -> None:
    get_logger().logger.setLevel(logging.CRITICAL + 1)


def enable_debug_logging() -> None:
    get_logger().set_level(LogLevel.DEBUG)
