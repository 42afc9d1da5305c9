"""
Core data types for snipsearch.

Key Types:
    OutputFormat: Enumeration of supported output formats
    MatchWindow: The snippet captured around the first match in one file
    SearchReport: All windows produced for one query, plus search metadata
    Outcome: Explicit success-or-error result for callers that prefer not to catch

Example:
    >>> from snipsearch.extractor import extract
    >>> window = extract(["apple", "banana", "Cherry", "date", "egg"], "cherry", 1)
    >>> (window.start_line, window.query_line, window.end_line, window.line_count)
    (2, 3, 4, 3)
    >>> window.text
    'banana\\n<b>Cherry</b>\\ndate'
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Generic, TypeVar

from .error_handling import ErrorInfo, ErrorKind, SearchError

T = TypeVar("T")


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True, slots=True)
class MatchWindow:
    """
    The context window around the first match of a query in one file.

    Attributes:
        file_path: Identifier of the source file, as given by the caller
        query_line: 1-based line of the first match, 0 when nothing matched
        start_line: First line (1-based, inclusive) of the window, None without a match
        end_line: Last line (1-based, inclusive) of the window, None without a match
        line_count: end_line - start_line + 1, or 0 without a match
        text: Newline-joined window with the match wrapped in highlight markers
        match_span: (start_col, end_col) of the match in the unhighlighted query line
        failure: Why the file could not be read, None when it was read
    """

    file_path: str
    query_line: int = 0
    start_line: int | None = None
    end_line: int | None = None
    line_count: int = 0
    text: str = ""
    match_span: tuple[int, int] | None = None
    failure: ErrorInfo | None = field(default=None, compare=False)

    @classmethod
    def no_match(cls, file_path: str, failure: ErrorInfo | None = None) -> MatchWindow:
        return cls(file_path=file_path, failure=failure)

    @property
    def matched(self) -> bool:
        return self.query_line != 0

    @property
    def failed(self) -> bool:
        return self.failure is not None

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n") if self.matched else []

    @property
    def match_index(self) -> int | None:
        """Index of the query line within ``lines``."""
        if not self.matched or self.start_line is None:
            return None
        return self.query_line - self.start_line


@dataclass(frozen=True, slots=True)
class SearchReport:
    """
    Snippets for every file processed by one query.

    ``num_results`` counts the file identifiers that were processed, matched
    or not. ``windows`` preserves input order and is read-only.
    """

    query: str
    directory: str
    extension: str
    num_results: int
    windows: Mapping[str, MatchWindow] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "windows", MappingProxyType(dict(self.windows)))

    def __len__(self) -> int:
        return len(self.windows)

    def __iter__(self) -> Iterator[str]:
        return iter(self.windows)

    def get(self, key: str) -> MatchWindow | None:
        return self.windows.get(key)

    @property
    def matched(self) -> dict[str, MatchWindow]:
        return {k: w for k, w in self.windows.items() if w.matched}

    @property
    def failures(self) -> dict[str, MatchWindow]:
        return {k: w for k, w in self.windows.items() if w.failed}


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Either a value or the SearchError that prevented it."""

    value: T | None = None
    error: SearchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
