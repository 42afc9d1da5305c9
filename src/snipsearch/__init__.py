"""
snipsearch: context snippets and per-query reports for text search results.

Given the files a search index returned for a query, snipsearch finds the
first case-insensitive occurrence of the query in each file, captures a
configurable number of lines around it with the match highlighted, and
collects the windows into one report that can be printed or exported as JSON.

Key Features:
    - **Bounded memory**: one forward pass per file, at most K earlier lines held
    - **Precise line numbers**: start, end and query line for every window
    - **Batch safe**: unreadable files are recorded, never abort a report
    - **Exports**: historical nested JSON shape or a flattened variant, never overwriting
    - **Rich output**: plain text or highlighted console rendering

Main Classes:
    SnippetSearch: Aggregates windows over a list of files into a SearchReport
    SearchConfig: Configuration for window size, markers, keys and parallelism
    MatchWindow: Snippet and line numbers for one file
    SearchReport: All windows for one query

Example Usage:
    >>> from snipsearch import SnippetSearch, SearchConfig
    >>> engine = SnippetSearch(SearchConfig(half_window=2))
    >>> report = engine.search_directory("testdir", ".txt", "goat")
    >>> engine.export("goat.json")
"""

from .api import SnippetSearch
from .config import KeyStrategy, SearchConfig
from .error_handling import (
    DestinationExistsError,
    ErrorKind,
    FileUnreadableError,
    InvalidArgumentError,
    PrerequisiteMissingError,
    SearchError,
)
from .extractor import extract, extract_file, highlight_line
from .formatter import format_report, format_text, render_highlight_console
from .logging_config import configure_logging, disable_logging, enable_debug_logging, get_logger
from .report import from_wire, load_report, to_flat, to_json_bytes, to_wire, write_report
from .types import MatchWindow, Outcome, OutputFormat, SearchReport

__version__ = "0.1.0"
__license__ = "MIT"
__description__ = "Context snippets and per-query reports for text search results"

__all__ = [
    # Main classes
    "SnippetSearch",
    "SearchConfig",
    "KeyStrategy",
    # Data types
    "MatchWindow",
    "SearchReport",
    "Outcome",
    "OutputFormat",
    # Extraction
    "extract",
    "extract_file",
    "highlight_line",
    # Export and formatting
    "to_wire",
    "to_flat",
    "to_json_bytes",
    "write_report",
    "from_wire",
    "load_report",
    "format_report",
    "format_text",
    "render_highlight_console",
    # Logging
    "configure_logging",
    "get_logger",
    "enable_debug_logging",
    "disable_logging",
    # Exceptions
    "SearchError",
    "ErrorKind",
    "InvalidArgumentError",
    "FileUnreadableError",
    "DestinationExistsError",
    "PrerequisiteMissingError",
    # Package metadata
    "__version__",
    "__license__",
    "__description__",
]
