"""
Configuration module for snipsearch.

This module defines the SearchConfig class, the central configuration object
for snippet extraction and aggregation.

Classes:
    KeyStrategy: How files are keyed in a SearchReport
    SearchConfig: Main configuration class with all search parameters

Key Configuration Areas:
    - Window: half-window size, highlight markers, file encoding
    - Aggregation: report keys, optional thread pool
    - File listing: recursion and result cap for directory searches
    - Output: format selection

Example:
    >>> from snipsearch.config import SearchConfig, KeyStrategy
    >>>
    >>> config = SearchConfig(
    ...     half_window=3,
    ...     key_strategy=KeyStrategy.FULL_PATH,
    ...     parallel=True,
    ...     workers=4,
    ... )
    >>> config.validate()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from .error_handling import InvalidArgumentError
from .types import OutputFormat

DEFAULT_HIGHLIGHT_START = "<b>"
DEFAULT_HIGHLIGHT_END = "</b>"


class KeyStrategy(str, Enum):
    # final path component; files sharing a name in different directories collide
    BASENAME = "basename"
    FULL_PATH = "full_path"


@dataclass(slots=True)
class SearchConfig:
    # Window
    half_window: int = 2
    highlight_start: str = DEFAULT_HIGHLIGHT_START
    highlight_end: str = DEFAULT_HIGHLIGHT_END
    encoding: str = "utf-8"

    # Aggregation
    key_strategy: KeyStrategy = KeyStrategy.BASENAME
    parallel: bool = False
    workers: int = 0  # 0 = auto(cpu_count)
    parallel_threshold: int = 8  # below this many files extraction stays sequential

    # Directory listing
    recursive: bool = False
    max_results: int | None = None

    # Output
    output_format: OutputFormat = OutputFormat.TEXT

    @property
    def markers(self) -> tuple[str, str]:
        return self.highlight_start, self.highlight_end

    def resolve_workers(self) -> int:
        return self.workers or min(32, (os.cpu_count() or 4))

    def validate(self) -> None:
        """Raise InvalidArgumentError for values no search can run with."""
        validate_half_window(self.half_window)
        if not self.highlight_start or not self.highlight_end:
            raise InvalidArgumentError(
                "Highlight markers must be non-empty strings",
                context={"highlight_start": self.highlight_start, "highlight_end": self.highlight_end},
            )
        if self.workers < 0:
            raise InvalidArgumentError(
                f"workers must be 0 (auto) or positive, got {self.workers}",
                context={"workers": self.workers},
            )
        if self.max_results is not None and self.max_results <= 0:
            raise InvalidArgumentError(
                f"max_results must be positive when set, got {self.max_results}",
                context={"max_results": self.max_results},
            )


def validate_half_window(half_window: int) -> int:
    """Return ``half_window`` if it is a non-negative int, else raise InvalidArgumentError."""
    if isinstance(half_window, bool) or not isinstance(half_window, int):
        raise InvalidArgumentError(
            f"Half-window must be an integer, got {type(half_window).__name__}",
            context={"half_window": half_window},
        )
    if half_window < 0:
        raise InvalidArgumentError(
            "Half-window must be greater or equal to 0. Passing in 0 will return "
            "the single line of the queried string.",
            context={"half_window": half_window},
        )
    return half_window
