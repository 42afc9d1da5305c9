"""
Error handling and reporting for snipsearch.

Errors fall into four kinds. Argument, destination and prerequisite errors are
raised to the caller immediately; file errors are local to one file and are
absorbed into that file's result so a batch always completes.

Error Kinds:
    - INVALID_ARGUMENT: negative half-window, bad configuration, missing directory
    - FILE_UNREADABLE: a file cannot be opened, read or decoded
    - DESTINATION_EXISTS: an export target is already present
    - PREREQUISITE_MISSING: an operation was requested out of order

Classes:
    ErrorKind: Error classification
    ErrorSeverity: Error severity levels (LOW, MEDIUM, HIGH, CRITICAL)
    ErrorInfo: Detailed error information container
    ErrorCollector: Batch error collection and analysis
    SearchError: Base exception class for snipsearch errors

Functions:
    handle_file_error: Turn a per-file exception into an ErrorInfo
    create_error_report: Generate a human-readable error report

Example:
    >>> from snipsearch.error_handling import ErrorCollector, handle_file_error
    >>> from pathlib import Path
    >>>
    >>> collector = ErrorCollector()
    >>> try:
    ...     Path("missing.txt").read_text()
    ... except OSError as e:
    ...     info = handle_file_error(Path("missing.txt"), "read", e, collector)
    >>> collector.get_summary()["total_errors"]
    1
"""

from __future__ import annotations

import sys
import threading
import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorKind(str, Enum):
    """Error kinds surfaced by the extractor, aggregator and exporter."""

    INVALID_ARGUMENT = "invalid_argument"
    FILE_UNREADABLE = "file_unreadable"
    DESTINATION_EXISTS = "destination_exists"
    PREREQUISITE_MISSING = "prerequisite_missing"
    UNKNOWN = "unknown"


@dataclass
class ErrorInfo:
    """Detailed error information."""

    kind: ErrorKind
    severity: ErrorSeverity
    message: str
    file_path: Path | None = None
    reason: str | None = None
    exception_type: str | None = None
    traceback_str: str | None = None
    timestamp: float = field(default_factory=time.time)
    context: dict[str, Any] = field(default_factory=dict)
    suggestions: list[str] = field(default_factory=list)


class SearchError(Exception):
    """Base exception for snipsearch errors."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        file_path: Path | None = None,
        suggestions: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.kind: ErrorKind = kind
        self.severity: ErrorSeverity = severity
        self.file_path: Path | None = file_path
        self.suggestions: list[str] = suggestions or []
        self.context: dict[str, Any] = context or {}
        self.timestamp: float = time.time()


class InvalidArgumentError(SearchError, ValueError):
    """A caller-supplied argument or configuration value is invalid."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            kind=ErrorKind.INVALID_ARGUMENT,
            severity=ErrorSeverity.HIGH,
            suggestions=[
                "Use a half-window of 0 or more (0 returns only the matched line)",
                "Check the search configuration values",
            ],
            context=context,
        )


class FileUnreadableError(SearchError):
    """A file could not be opened, read or decoded."""

    def __init__(
        self,
        message: str,
        file_path: Path,
        reason: str = "io",
        context: dict[str, Any] | None = None,
    ) -> None:
        merged_context: dict[str, Any] = {}
        if context:
            merged_context.update(context)
        merged_context["reason"] = reason

        super().__init__(
            message,
            kind=ErrorKind.FILE_UNREADABLE,
            severity=ErrorSeverity.MEDIUM,
            file_path=file_path,
            suggestions=_FILE_SUGGESTIONS.get(reason, []),
            context=merged_context,
        )
        self.reason: str = reason


class DestinationExistsError(SearchError, FileExistsError):
    """An export destination already exists and will not be overwritten."""

    def __init__(self, message: str, file_path: Path) -> None:
        super().__init__(
            message,
            kind=ErrorKind.DESTINATION_EXISTS,
            severity=ErrorSeverity.HIGH,
            file_path=file_path,
            suggestions=["Choose a new output path", "Remove the existing file first"],
        )


class PrerequisiteMissingError(SearchError):
    """An operation was requested before the state it depends on exists."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            kind=ErrorKind.PREREQUISITE_MISSING,
            severity=ErrorSeverity.MEDIUM,
            suggestions=["Run a search before exporting its report"],
            context=context,
        )


_FILE_SUGGESTIONS: dict[str, list[str]] = {
    "missing": ["Check that the index is up to date with the file system"],
    "directory": ["Only regular files can be searched"],
    "permission": ["Check file permissions", "Run with appropriate user privileges"],
    "encoding": ["Try a different encoding", "Check if the file is binary"],
    "io": ["Check that the file is readable and not locked by another process"],
}


class ErrorCollector:
    """Collects and manages errors during a search."""

    def __init__(self, max_errors: int = 100) -> None:
        self.max_errors = max_errors
        self.errors: list[ErrorInfo] = []
        self.error_counts: dict[ErrorKind, int] = {}
        self._lock = threading.Lock()

    def add_error_info(self, info: ErrorInfo) -> None:
        """Add an already classified error."""
        with self._lock:
            if len(self.errors) < self.max_errors:
                self.errors.append(info)
            self.error_counts[info.kind] = self.error_counts.get(info.kind, 0) + 1

    def add_error(self, exception: Exception, file_path: Path | None = None) -> ErrorInfo:
        """Add an exception to the collection and return its ErrorInfo."""
        info = error_info_from_exception(exception, file_path)
        self.add_error_info(info)
        return info

    def get_errors_by_kind(self, kind: ErrorKind) -> list[ErrorInfo]:
        return [error for error in self.errors if error.kind == kind]

    def get_errors_by_severity(self, severity: ErrorSeverity) -> list[ErrorInfo]:
        return [error for error in self.errors if error.severity == severity]

    def has_errors(self) -> bool:
        return bool(self.error_counts)

    def get_summary(self) -> dict[str, Any]:
        """Get error summary statistics."""
        return {
            "total_errors": sum(self.error_counts.values()),
            "by_kind": {kind.value: count for kind, count in self.error_counts.items()},
            "by_severity": {
                severity.value: len(self.get_errors_by_severity(severity))
                for severity in ErrorSeverity
            },
        }

    def clear(self) -> None:
        """Clear all collected errors."""
        with self._lock:
            self.errors.clear()
            self.error_counts.clear()


def error_info_from_exception(exception: Exception, file_path: Path | None = None) -> ErrorInfo:
    """Build an ErrorInfo from any exception, keeping SearchError details."""
    if isinstance(exception, SearchError):
        return ErrorInfo(
            kind=exception.kind,
            severity=exception.severity,
            message=exception.message,
            file_path=exception.file_path or file_path,
            reason=exception.context.get("reason"),
            exception_type=type(exception).__name__,
            traceback_str=traceback.format_exc() if sys.exc_info()[0] else None,
            context=dict(exception.context),
            suggestions=list(exception.suggestions),
        )
    return ErrorInfo(
        kind=ErrorKind.UNKNOWN,
        severity=ErrorSeverity.MEDIUM,
        message=str(exception),
        file_path=file_path,
        exception_type=type(exception).__name__,
        traceback_str=traceback.format_exc() if sys.exc_info()[0] else None,
    )


def classify_file_error(exception: BaseException) -> str:
    """Return the reason a file could not be read."""
    if isinstance(exception, FileNotFoundError):
        return "missing"
    if isinstance(exception, (IsADirectoryError, NotADirectoryError)):
        return "directory"
    if isinstance(exception, PermissionError):
        return "permission"
    if isinstance(exception, UnicodeError):
        return "encoding"
    return "io"


def handle_file_error(
    file_path: Path,
    operation: str,
    exception: Exception,
    error_collector: ErrorCollector | None = None,
    logger: Any | None = None,
) -> ErrorInfo:
    """
    Convert a per-file exception into an ErrorInfo of kind FILE_UNREADABLE.

    Args:
        file_path: Path to the file that caused the error
        operation: Operation being performed (e.g., "read", "extract")
        exception: The exception that occurred
        error_collector: Optional error collector to add the error to
        logger: Optional SearchLogger to log the error

    Returns:
        The ErrorInfo that was recorded
    """
    reason = classify_file_error(exception)
    error = FileUnreadableError(
        f"Cannot {operation} file {file_path}: {exception}", file_path, reason=reason
    )
    info = error_info_from_exception(error, file_path)
    info.exception_type = type(exception).__name__

    if error_collector is not None:
        error_collector.add_error_info(info)

    if logger is not None:
        logger.log_file_error(str(file_path), info.message, file_operation=operation, reason=reason)

    return info


def create_error_report(error_collector: ErrorCollector) -> str:
    """Create a human-readable error report."""
    if not error_collector.has_errors():
        return "No errors occurred during the search operation."

    summary = error_collector.get_summary()

    report = ["Search Error Report", "=" * 50, ""]
    report.append(f"Total errors: {summary['total_errors']}")
    report.append("")

    report.append("Errors by kind:")
    for kind, count in summary["by_kind"].items():
        report.append(f"  {kind}: {count}")
    report.append("")

    unreadable = error_collector.get_errors_by_kind(ErrorKind.FILE_UNREADABLE)
    if unreadable:
        report.append("Unreadable files:")
        for error in unreadable:
            report.append(f"  - {error.file_path} ({error.reason})")
            if error.suggestions:
                report.append(f"    Suggestions: {', '.join(error.suggestions)}")
        report.append("")

    return "\n".join(report).rstrip()
