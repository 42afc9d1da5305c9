"""
Report export for snipsearch.

A SearchReport is exported as JSON in one of two shapes. The historical shape
nests each result as a positional list of single-key objects:

    {
        "extension": ".txt",
        "query": "cherry",
        "directory": "docs",
        "number of results found": 1,
        "results": [
            [
                {"file name": "fruit.txt"},
                {"buffer": "banana\\n<b>Cherry</b>\\ndate"},
                {"lines": [
                    {"line start": 2},
                    {"line end": 4},
                    {"query line": 3},
                    {"number of lines": 3}
                ]}
            ]
        ]
    }

The flattened shape (``flat=True``) uses one object per result with the same
field names. Windows without a match export ``0`` for both line bounds.

Reports are only ever written to new files: an existing destination is left
untouched and DestinationExistsError is raised.

Functions:
    to_wire / to_flat: Build the JSON-ready payload
    to_json_bytes: Serialize with orjson
    write_report: Write a report to a new file
    from_wire / load_report: Parse either shape back into a SearchReport
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import orjson

from .error_handling import (
    DestinationExistsError,
    ErrorInfo,
    ErrorKind,
    ErrorSeverity,
    InvalidArgumentError,
)
from .types import MatchWindow, SearchReport

EXTENSION = "extension"
QUERY = "query"
DIRECTORY = "directory"
NUM_RESULTS = "number of results found"
RESULTS = "results"
FILE_NAME = "file name"
BUFFER = "buffer"
LINES = "lines"
LINE_START = "line start"
LINE_END = "line end"
QUERY_LINE = "query line"
NUM_LINES = "number of lines"
ERROR = "error"


def _header(report: SearchReport) -> dict[str, Any]:
    return {
        EXTENSION: report.extension,
        QUERY: report.query,
        DIRECTORY: report.directory,
        NUM_RESULTS: report.num_results,
    }


def _line_numbers(window: MatchWindow) -> tuple[int, int, int, int]:
    if not window.matched:
        return 0, 0, 0, 0
    return window.start_line or 0, window.end_line or 0, window.query_line, window.line_count


def to_wire(report: SearchReport) -> dict[str, Any]:
    """Payload in the historical nested shape."""
    results = []
    for key, window in report.windows.items():
        start, end, query_line, count = _line_numbers(window)
        results.append(
            [
                {FILE_NAME: key},
                {BUFFER: window.text},
                {
                    LINES: [
                        {LINE_START: start},
                        {LINE_END: end},
                        {QUERY_LINE: query_line},
                        {NUM_LINES: count},
                    ]
                },
            ]
        )
    return {**_header(report), RESULTS: results}


def to_flat(report: SearchReport) -> dict[str, Any]:
    """Payload with one flat object per result."""
    results = []
    for key, window in report.windows.items():
        start, end, query_line, count = _line_numbers(window)
        entry: dict[str, Any] = {
            FILE_NAME: key,
            BUFFER: window.text,
            LINE_START: start,
            LINE_END: end,
            QUERY_LINE: query_line,
            NUM_LINES: count,
        }
        if window.failure is not None:
            entry[ERROR] = window.failure.message
        results.append(entry)
    return {**_header(report), RESULTS: results}


def to_json_bytes(report: SearchReport, *, flat: bool = False) -> bytes:
    """Serialize a report with orjson (two-space indentation)."""
    payload = to_flat(report) if flat else to_wire(report)
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def write_report(
    report: SearchReport, destination: str | os.PathLike[str], *, flat: bool = False
) -> Path:
    """
    Write ``report`` as JSON to a new file at ``destination``.

    Raises:
        DestinationExistsError: ``destination`` already exists; it is not modified
    """
    dest = Path(destination)
    if dest.exists():
        raise DestinationExistsError(f"File already exists, failed to write: {dest}", dest)

    payload = to_json_bytes(report, flat=flat)
    try:
        f = dest.open("xb")
    except FileExistsError as e:
        # created between the check and the open
        raise DestinationExistsError(f"File already exists, failed to write: {dest}", dest) from e

    try:
        with f:
            f.write(payload)
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    return dest


def _merge(parts: Any, what: str) -> dict[str, Any]:
    if isinstance(parts, dict):
        return parts
    if not isinstance(parts, list) or not all(isinstance(p, dict) for p in parts):
        raise InvalidArgumentError(f"Malformed report: {what} must be an object or a list of objects")
    merged: dict[str, Any] = {}
    for part in parts:
        merged.update(part)
    return merged


def _window_from_entry(entry: dict[str, Any]) -> tuple[str, MatchWindow]:
    numbers = _merge(entry.get(LINES, entry), "line numbers")
    try:
        key = str(entry[FILE_NAME])
        text = str(entry[BUFFER])
        query_line = int(numbers[QUERY_LINE])
        start = int(numbers[LINE_START])
        end = int(numbers[LINE_END])
        count = int(numbers[NUM_LINES])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Malformed report result: {e}") from e

    failure = None
    if entry.get(ERROR):
        failure = ErrorInfo(
            kind=ErrorKind.FILE_UNREADABLE,
            severity=ErrorSeverity.MEDIUM,
            message=str(entry[ERROR]),
            file_path=Path(key),
        )

    if query_line == 0:
        return key, MatchWindow.no_match(key, failure=failure)
    return key, MatchWindow(
        file_path=key,
        query_line=query_line,
        start_line=start,
        end_line=end,
        line_count=count,
        text=text,
        failure=failure,
    )


def from_wire(data: dict[str, Any]) -> SearchReport:
    """Rebuild a SearchReport from either exported shape."""
    if not isinstance(data, dict):
        raise InvalidArgumentError("Malformed report: top level must be an object")
    try:
        results = data[RESULTS]
        header = (str(data[QUERY]), str(data[DIRECTORY]), str(data[EXTENSION]), int(data[NUM_RESULTS]))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Malformed report header: {e}") from e
    if not isinstance(results, list):
        raise InvalidArgumentError("Malformed report: results must be a list")

    windows = dict(_window_from_entry(_merge(entry, "result")) for entry in results)
    query, directory, extension, num_results = header
    return SearchReport(
        query=query,
        directory=directory,
        extension=extension,
        num_results=num_results,
        windows=windows,
    )


def load_report(path: str | os.PathLike[str]) -> SearchReport:
    """Read a report written by write_report."""
    try:
        data = orjson.loads(Path(path).read_bytes())
    except orjson.JSONDecodeError as e:
        raise InvalidArgumentError(f"Report is not valid JSON: {e}") from e
    return from_wire(data)
