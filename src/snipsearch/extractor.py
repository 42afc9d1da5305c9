"""
Snippet extraction for snipsearch.

This module finds the first case-insensitive occurrence of a query in a
sequence of lines and captures the lines around it in a single forward pass.
At most ``half_window`` earlier lines are ever held in memory, in a
``collections.deque`` bounded by ``maxlen``; the input is not read past the
last line of the window.

Functions:
    extract: Build a MatchWindow from any iterable of lines
    extract_file: Build a MatchWindow from a file, absorbing read errors
    find_match_offset: Offset of the query in a line under case folding
    highlight_line: Wrap the first occurrence of the query with markers

Example:
    >>> from snipsearch.extractor import extract
    >>> window = extract(["one", "TWO", "three"], "two", 0)
    >>> window.text
    '<b>TWO</b>'
    >>> (window.start_line, window.query_line, window.end_line)
    (2, 2, 2)
"""

from __future__ import annotations

import os
from collections import deque
from collections.abc import Iterable
from contextlib import closing
from itertools import islice
from pathlib import Path
from typing import Any

from .config import DEFAULT_HIGHLIGHT_END, DEFAULT_HIGHLIGHT_START, validate_half_window
from .error_handling import ErrorCollector, handle_file_error
from .types import MatchWindow
from .utils import highlight_span, iter_lines

DEFAULT_MARKERS = (DEFAULT_HIGHLIGHT_START, DEFAULT_HIGHLIGHT_END)


def fold(text: str) -> str:
    """Case folding used for matching; simple lower-casing, not locale aware."""
    return text.lower()


def find_match_offset(line: str, query: str) -> int:
    """Return the offset of ``query`` in the folded ``line``, or -1."""
    return fold(line).find(fold(query))


def _match_span(line: str, offset: int, length: int) -> tuple[int, int]:
    """
    Map a match at ``offset`` of length ``length`` in ``fold(line)`` back to
    character offsets in ``line``.

    Some characters fold to more than one character (``"İ".lower()`` is two
    code points), so folded and original offsets can drift apart. A partly
    covered character is included whole.
    """
    if length == 0:
        return 0, 0
    start: int | None = None
    end = offset + length
    pos = 0
    for i, ch in enumerate(line):
        pos_next = pos + len(fold(ch))
        if start is None and offset < pos_next:
            start = i
        if end <= pos_next:
            return start if start is not None else i, i + 1
        pos = pos_next
    return (len(line) if start is None else start), len(line)


def highlight_line(
    line: str, query: str, markers: tuple[str, str] = DEFAULT_MARKERS
) -> str | None:
    """Wrap the first occurrence of ``query`` in ``line`` with ``markers``, keeping its casing."""
    offset = find_match_offset(line, query)
    if offset < 0:
        return None
    return highlight_span(line, _match_span(line, offset, len(fold(query))), markers)


def extract(
    lines: Iterable[str],
    query: str,
    half_window: int,
    *,
    file_path: str = "",
    markers: tuple[str, str] = DEFAULT_MARKERS,
) -> MatchWindow:
    """
    Capture the window of lines around the first line containing ``query``.

    Args:
        lines: Lines without terminators; a ``str`` is split with ``splitlines()``
        query: Text to look for, compared case-insensitively
        half_window: Lines of context kept on each side of the match (K >= 0)
        file_path: Identifier recorded on the returned window
        markers: Highlight start and end markers

    Returns:
        MatchWindow for the first match, or a window with ``query_line == 0``

    Raises:
        InvalidArgumentError: ``half_window`` is negative; nothing is read

    Note:
        An empty query is contained in every line, so line 1 is reported
        with an empty marker pair at its start.
    """
    validate_half_window(half_window)
    if isinstance(lines, str):
        lines = lines.splitlines()

    folded_query = fold(query)
    before: deque[str] = deque(maxlen=half_window)
    source = iter(lines)
    previous = ""

    for line_no, line in enumerate(source, start=1):
        if line_no > 1 and half_window:
            before.append(previous)

        folded_line = fold(line)
        if folded_query in folded_line:
            start_line = line_no - len(before)
            span = _match_span(line, folded_line.find(folded_query), len(folded_query))
            after = list(islice(source, half_window))
            end_line = line_no + len(after)
            text = "\n".join([*before, highlight_span(line, span, markers), *after])
            return MatchWindow(
                file_path=file_path,
                query_line=line_no,
                start_line=start_line,
                end_line=end_line,
                line_count=end_line - start_line + 1,
                text=text,
                match_span=span,
            )

        previous = line

    return MatchWindow.no_match(file_path)


def extract_file(
    path: str | os.PathLike[str],
    query: str,
    half_window: int,
    *,
    encoding: str = "utf-8",
    markers: tuple[str, str] = DEFAULT_MARKERS,
    error_collector: ErrorCollector | None = None,
    logger: Any | None = None,
) -> MatchWindow:
    """
    Extract the window for ``query`` from the file at ``path``.

    The file is streamed and closed as soon as the window is complete. A file
    that cannot be opened, read or decoded yields a no-match window whose
    ``failure`` describes the problem; this function does not raise for I/O.

    Raises:
        InvalidArgumentError: ``half_window`` is negative; the file is not opened
    """
    validate_half_window(half_window)
    file_path = os.fspath(path)
    try:
        with closing(iter_lines(Path(file_path), encoding=encoding)) as lines:
            return extract(lines, query, half_window, file_path=file_path, markers=markers)
    except (OSError, UnicodeError) as e:
        failure = handle_file_error(Path(file_path), "read", e, error_collector, logger)
        return MatchWindow.no_match(file_path, failure=failure)
