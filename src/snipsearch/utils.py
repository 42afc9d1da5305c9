"""
Utility functions and helpers for snipsearch.

Key Functions:
    File Operations:
        - iter_lines: Stream a text file line by line without loading it whole
        - list_files: Files of a directory whose names end with an extension

    Keys and Markers:
        - file_key: Report key for a file identifier
        - highlight_span: Wrap a column span of a line with a marker pair
        - replace_markers: Swap highlight markers for another pair
        - strip_markers: Remove highlight markers from a line

Example:
    >>> from snipsearch.utils import list_files, iter_lines
    >>> for path in list_files("docs", ".txt"):
    ...     first = next(iter_lines(path), None)
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from pathlib import Path

import pathspec

from .config import KeyStrategy

_GLOB_SPECIAL = re.compile(r"([\[\]*?!\\])")


def iter_lines(path: Path, encoding: str = "utf-8") -> Iterator[str]:
    """
    Yield the lines of a text file with line terminators removed.

    The file is opened lazily on first iteration and closed when the generator
    is exhausted or closed, so a caller that stops early releases the handle.
    ``\\n``, ``\\r\\n`` and ``\\r`` all end a line (universal newlines).
    """
    with Path(path).open("r", encoding=encoding, newline=None) as f:
        for line in f:
            yield line[:-1] if line.endswith("\n") else line


def build_pathspec(
    include: list[str], exclude: list[str]
) -> tuple[pathspec.GitIgnoreSpec, pathspec.GitIgnoreSpec]:
    inc = pathspec.GitIgnoreSpec.from_lines(include or ["**/*"])
    exc = pathspec.GitIgnoreSpec.from_lines(exclude or [])
    return inc, exc


def extension_pattern(extension: str) -> str:
    """gitignore-style pattern selecting names that end with ``extension``."""
    return "*" + _GLOB_SPECIAL.sub(r"\\\1", extension)


def list_files(
    directory: str | os.PathLike[str],
    extension: str,
    recursive: bool = False,
    exclude: list[str] | None = None,
    follow_symlinks: bool = False,
) -> list[Path]:
    """
    List regular files under ``directory`` whose names end with ``extension``.

    Only the top level is listed unless ``recursive`` is set; excluded
    directories are pruned during traversal. The result is sorted so repeated
    searches see files in the same order.
    """
    root = Path(directory)
    inc, exc = build_pathspec([extension_pattern(extension)], exclude or [])
    found: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
        if not recursive:
            dirnames.clear()
        elif dirnames:
            # prune excluded subtrees in place so os.walk never enters them
            for d in list(dirnames):
                rel_dir = (Path(dirpath) / d).relative_to(root).as_posix() + "/"
                if exc.match_file(rel_dir):
                    dirnames.remove(d)

        for name in filenames:
            p = Path(dirpath) / name
            rel = p.relative_to(root).as_posix()
            if not inc.match_file(rel) or exc.match_file(rel):
                continue
            if not p.is_file():
                continue
            found.append(p)

    return sorted(found)


def file_key(file_id: str | os.PathLike[str], strategy: KeyStrategy = KeyStrategy.BASENAME) -> str:
    """Key under which a file's window is stored in a report."""
    if strategy == KeyStrategy.FULL_PATH:
        return os.fspath(file_id)
    return os.path.basename(os.fspath(file_id))


def highlight_span(line: str, span: tuple[int, int], markers: tuple[str, str]) -> str:
    """Wrap ``line[a:b]`` with the marker pair; offsets are clamped to the line."""
    a, b = span
    a = max(0, min(len(line), a))
    b = max(a, min(len(line), b))
    return f"{line[:a]}{markers[0]}{line[a:b]}{markers[1]}{line[b:]}"


def replace_markers(
    line: str,
    markers: tuple[str, str],
    replacement: tuple[str, str],
    span: tuple[int, int] | None = None,
) -> str:
    """
    Replace the highlight marker pair in ``line`` with ``replacement``.

    With ``span`` (the match offsets in the unhighlighted line) the markers are
    located exactly, even when the line itself contains marker text. Without it
    the first start marker and the end marker following it are used.
    """
    start, end = markers
    if span is not None:
        a, b = span
        inner_end = a + len(start) + (b - a)
        if line[a : a + len(start)] == start and line[inner_end : inner_end + len(end)] == end:
            middle = line[a + len(start) : inner_end]
            return f"{line[:a]}{replacement[0]}{middle}{replacement[1]}{line[inner_end + len(end):]}"
    head, sep, tail = line.partition(start)
    if not sep:
        return line
    middle, sep, rest = tail.partition(end)
    if not sep:
        return line
    return f"{head}{replacement[0]}{middle}{replacement[1]}{rest}"


def strip_markers(line: str, markers: tuple[str, str], span: tuple[int, int] | None = None) -> str:
    return replace_markers(line, markers, ("", ""), span)
