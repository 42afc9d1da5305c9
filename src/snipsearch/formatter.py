"""
Output formatting module for snipsearch.

This module renders a SearchReport as plain text, JSON, or rich console output.

Key Functions:
    format_report: Main entry point for formatting a report in any supported format
    format_text: Plain text with line numbers and optional match highlighting
    render_highlight_console: Rich console output with the match emphasised

Example:
    >>> from snipsearch.formatter import format_report
    >>> from snipsearch.types import OutputFormat
    >>> print(format_report(report, OutputFormat.TEXT))
    >>> print(format_report(report, OutputFormat.JSON))
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.text import Text

from .config import DEFAULT_HIGHLIGHT_END, DEFAULT_HIGHLIGHT_START
from .report import to_json_bytes
from .types import MatchWindow, OutputFormat, SearchReport
from .utils import replace_markers

TEXT_MARKERS = ("[[", "]]")
MATCH_STYLE = "bold reverse"


def _split_query_line(line: str, window: MatchWindow, markers: tuple[str, str]) -> tuple[str, str, str]:
    """Split the highlighted query line into (prefix, match, suffix)."""
    sentinel = ("\x00", "\x01")
    marked = replace_markers(line, markers, sentinel, window.match_span)
    head, sep, tail = marked.partition(sentinel[0])
    if not sep:
        return line, "", ""
    middle, _, rest = tail.partition(sentinel[1])
    return head, middle, rest


def _header_lines(report: SearchReport) -> list[str]:
    return [
        f'Searched for "{report.query}"',
        f"Directory: {report.directory}",
        f"Extension: {report.extension}",
        f"Number of results found: {report.num_results}",
    ]


def _status_line(key: str, window: MatchWindow) -> str:
    if window.failure is not None:
        return f"{key}: unreadable ({window.failure.reason or 'io'}) - {window.failure.message}"
    if not window.matched:
        return f"{key}: no match"
    return f"{key}:{window.start_line}-{window.end_line} (query line {window.query_line})"


def format_text(
    report: SearchReport,
    highlight: bool = True,
    markers: tuple[str, str] = (DEFAULT_HIGHLIGHT_START, DEFAULT_HIGHLIGHT_END),
) -> str:
    """
    Format a report as plain text with line numbers.

    Args:
        report: Report to format
        highlight: Show the match between ``[[`` and ``]]``; when False the markers are removed
        markers: Highlight markers the report was built with

    Returns:
        Formatted text, for example::

            Searched for "cherry"
            Directory: docs
            Extension: .txt
            Number of results found: 1

            fruit.txt:2-4 (query line 3)
                 2 | banana
                 3 | [[Cherry]]
                 4 | date
    """
    out: list[str] = _header_lines(report)
    replacement = TEXT_MARKERS if highlight else ("", "")
    for key, window in report.windows.items():
        out.append("")
        out.append(_status_line(key, window))
        if not window.matched or window.start_line is None:
            continue
        for idx, line in enumerate(window.lines):
            if idx == window.match_index:
                line = replace_markers(line, markers, replacement, window.match_span)
            out.append(f"{window.start_line + idx:6d} | {line}")
    return "\n".join(out)


def render_highlight_console(
    report: SearchReport,
    console: Console | None = None,
    markers: tuple[str, str] = (DEFAULT_HIGHLIGHT_START, DEFAULT_HIGHLIGHT_END),
) -> None:
    """Render a report to the console with rich, emphasising each match."""
    if console is None:
        console = Console()
    # query and paths are user text; Text never parses them as markup
    console.print(Text(f'Searched for "{report.query}"', style="bold"))
    console.print(
        Text(
            f"directory={report.directory} extension={report.extension} "
            f"results={report.num_results}",
            style="dim",
        )
    )
    for key, window in report.windows.items():
        console.print()
        status = Text(_status_line(key, window), style="red" if window.failed else "bold")
        console.print(status)
        if not window.matched or window.start_line is None:
            continue
        for idx, line in enumerate(window.lines):
            number = Text(f"{window.start_line + idx:6d} | ", style="dim")
            if idx == window.match_index:
                prefix, match, suffix = _split_query_line(line, window, markers)
                console.print(Text.assemble(number, prefix, (match, MATCH_STYLE), suffix))
            else:
                console.print(Text.assemble(number, line))


def format_report(report: SearchReport, fmt: OutputFormat) -> str:
    """Format a report according to the specified output format."""
    if fmt == OutputFormat.JSON:
        return to_json_bytes(report).decode("utf-8")
    if fmt == OutputFormat.HIGHLIGHT:
        # rich rendering only makes sense on a real terminal
        if sys.stdout.isatty():
            render_highlight_console(report)
            return ""
        return format_text(report, highlight=True)
    return format_text(report, highlight=False)
