"""
Main API for snipsearch.

SnippetSearch turns a list of files produced by a search index into a
SearchReport: it runs the snippet extractor over every file, in order, and
keys each window by the file's name (or full path). Files that cannot be read
are recorded in their window and never stop the batch.

Example:
    >>> from snipsearch import SnippetSearch, SearchConfig
    >>> engine = SnippetSearch(SearchConfig(half_window=3))
    >>> report = engine.aggregate(["docs/a.txt", "docs/b.txt"], "deer",
    ...                           extension=".txt", directory="docs")
    >>> for name, window in report.windows.items():
    ...     print(name, window.query_line)
    >>> engine.export("deer.json")
"""

from __future__ import annotations

import os
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .config import SearchConfig, validate_half_window
from .error_handling import (
    ErrorCollector,
    InvalidArgumentError,
    PrerequisiteMissingError,
    SearchError,
    create_error_report,
)
from .extractor import extract_file
from .logging_config import SearchLogger, get_logger
from .report import write_report
from .types import MatchWindow, Outcome, SearchReport
from .utils import file_key, list_files

FileId = str | os.PathLike[str]


class SnippetSearch:
    def __init__(self, config: SearchConfig | None = None, logger: SearchLogger | None = None) -> None:
        self.cfg = config or SearchConfig()
        self.cfg.validate()
        self.logger = logger or get_logger()
        self.error_collector = ErrorCollector()
        self.last_report: SearchReport | None = None

    def _half_window(self, half_window: int | None) -> int:
        return validate_half_window(self.cfg.half_window if half_window is None else half_window)

    def extract_file(self, path: FileId, query: str, half_window: int | None = None) -> MatchWindow:
        """Window for one file using this engine's markers and encoding."""
        return extract_file(
            path,
            query,
            self._half_window(half_window),
            encoding=self.cfg.encoding,
            markers=self.cfg.markers,
            error_collector=self.error_collector,
            logger=self.logger,
        )

    def _extract_all(self, file_ids: Sequence[FileId], query: str, k: int) -> list[MatchWindow]:
        if self.cfg.parallel and len(file_ids) >= self.cfg.parallel_threshold:
            workers = min(self.cfg.resolve_workers(), len(file_ids))
            with ThreadPoolExecutor(max_workers=workers) as ex:
                # map yields in input order; nothing shared is mutated by the workers
                return list(ex.map(lambda f: self.extract_file(f, query, k), file_ids))
        return [self.extract_file(f, query, k) for f in file_ids]

    def aggregate(
        self,
        file_ids: Sequence[FileId],
        query: str,
        half_window: int | None = None,
        extension: str = "",
        directory: str = "",
    ) -> SearchReport:
        """
        Build the report for ``query`` over ``file_ids``.

        The error collector is reset first, so ``error_report`` describes
        this search only.

        Args:
            file_ids: Files returned by the index, in the order to report them
            query: Text searched for, case-insensitively
            half_window: Context lines on each side; defaults to the configured value
            extension: Extension the index was built for, recorded in the report
            directory: Directory the index was built from, recorded in the report

        Returns:
            SearchReport whose ``num_results`` equals ``len(file_ids)``

        Raises:
            InvalidArgumentError: ``half_window`` is negative; no file is opened
        """
        k = self._half_window(half_window)
        file_ids = list(file_ids)
        self.error_collector.clear()
        t0 = time.perf_counter()
        self.logger.log_search_start(query, len(file_ids), half_window=k)

        windows: dict[str, MatchWindow] = {}
        for file_id, window in zip(file_ids, self._extract_all(file_ids, query, k)):
            windows[file_key(file_id, self.cfg.key_strategy)] = window

        report = SearchReport(
            query=query,
            directory=directory,
            extension=extension,
            num_results=len(file_ids),
            windows=windows,
        )
        self.last_report = report

        matched = sum(1 for w in windows.values() if w.matched)
        self.logger.log_search_complete(
            query, matched, len(file_ids), (time.perf_counter() - t0) * 1000.0
        )
        return report

    def try_aggregate(
        self,
        file_ids: Sequence[FileId],
        query: str,
        half_window: int | None = None,
        extension: str = "",
        directory: str = "",
    ) -> Outcome[SearchReport]:
        """Like aggregate, but returns argument errors instead of raising them."""
        try:
            return Outcome(value=self.aggregate(file_ids, query, half_window, extension, directory))
        except SearchError as e:
            return Outcome(error=e)

    def search_directory(
        self,
        directory: FileId,
        extension: str,
        query: str,
        half_window: int | None = None,
    ) -> SearchReport:
        """
        Aggregate over the files of ``directory`` whose names end with ``extension``.

        This is the plain file-listing path used when no index is available:
        every listed file is processed, matched or not.
        """
        k = self._half_window(half_window)
        root = Path(directory)
        if not root.is_dir():
            raise InvalidArgumentError(
                f"Not a directory: {root}", context={"directory": os.fspath(directory)}
            )
        files = list_files(root, extension, recursive=self.cfg.recursive)
        if self.cfg.max_results is not None:
            files = files[: self.cfg.max_results]
        return self.aggregate(files, query, k, extension=extension, directory=os.fspath(directory))

    def snippets(
        self, file_ids: Sequence[FileId], query: str, half_window: int | None = None
    ) -> dict[str, str]:
        """Simple key to snippet text mapping."""
        k = self._half_window(half_window)
        return {
            file_key(f, self.cfg.key_strategy): self.extract_file(f, query, k).text
            for f in file_ids
        }

    def export(
        self,
        destination: FileId,
        *,
        flat: bool = False,
        report: SearchReport | None = None,
    ) -> Path:
        """
        Write ``report`` (default: the last aggregated report) to a new JSON file.

        Raises:
            PrerequisiteMissingError: no report was given and none has been built yet
            DestinationExistsError: ``destination`` exists; it is left unchanged
        """
        if report is None:
            report = self.last_report
        if report is None:
            raise PrerequisiteMissingError("No search has been run; nothing to export")
        path = write_report(report, destination, flat=flat)
        self.logger.log_export(str(path), report.num_results, flat=flat)
        return path

    def try_export(
        self,
        destination: FileId,
        *,
        flat: bool = False,
        report: SearchReport | None = None,
    ) -> Outcome[Path]:
        """Like export, but returns errors instead of raising them."""
        try:
            return Outcome(value=self.export(destination, flat=flat, report=report))
        except SearchError as e:
            return Outcome(error=e)

    def error_report(self) -> str:
        """Human-readable summary of the files the last search could not read."""
        return create_error_report(self.error_collector)
