"""Tests for SnippetSearch aggregation in snipsearch.api."""

from __future__ import annotations

from pathlib import Path

import pytest

from snipsearch import KeyStrategy, SearchConfig, SnippetSearch
from snipsearch.error_handling import ErrorKind, InvalidArgumentError


def _files(corpus: Path, *names: str) -> list[str]:
    return [str(corpus / n) for n in names]


class TestAggregate:
    def test_report_metadata_and_order(self, engine, sample_corpus):
        files = _files(sample_corpus, "notes.txt", "farm.txt", "animals.txt")
        report = engine.aggregate(files, "goat", extension=".txt", directory=str(sample_corpus))

        assert report.query == "goat"
        assert report.extension == ".txt"
        assert report.directory == str(sample_corpus)
        assert report.num_results == 3
        assert list(report.windows) == ["notes.txt", "farm.txt", "animals.txt"]

    def test_windows_per_file(self, engine, sample_corpus):
        files = _files(sample_corpus, "animals.txt", "farm.txt", "notes.txt")
        report = engine.aggregate(files, "goat")

        animals = report.windows["animals.txt"]
        assert (animals.start_line, animals.query_line, animals.end_line) == (3, 4, 5)
        assert animals.text == "A deer crossed the road\nand a <b>goat</b> watched it.\nNothing else happened."

        farm = report.windows["farm.txt"]
        assert farm.query_line == 3
        assert "one <b>GOAT</b> named Gruff" in farm.text

        notes = report.windows["notes.txt"]
        assert notes.query_line == 0 and notes.line_count == 0 and notes.text == ""

    def test_num_results_counts_unmatched_files(self, engine, sample_corpus):
        files = _files(sample_corpus, "notes.txt", "farm.txt")
        report = engine.aggregate(files, "zebra")
        assert report.num_results == 2
        assert report.matched == {}

    def test_half_window_override(self, engine, sample_corpus):
        report = engine.aggregate(_files(sample_corpus, "animals.txt"), "deer", half_window=0)
        assert report.windows["animals.txt"].text == "A <b>deer</b> crossed the road"

    def test_default_half_window_from_config(self, quiet_logger, sample_corpus):
        engine = SnippetSearch(SearchConfig(half_window=0), logger=quiet_logger)
        report = engine.aggregate(_files(sample_corpus, "animals.txt"), "fox")
        assert report.windows["animals.txt"].line_count == 1

    def test_custom_markers(self, quiet_logger, sample_corpus):
        cfg = SearchConfig(half_window=0, highlight_start="**", highlight_end="**")
        engine = SnippetSearch(cfg, logger=quiet_logger)
        report = engine.aggregate(_files(sample_corpus, "animals.txt"), "lazy")
        assert report.windows["animals.txt"].text == "jumps over the **lazy** dog."

    def test_empty_file_list(self, engine):
        report = engine.aggregate([], "anything")
        assert report.num_results == 0
        assert len(report) == 0

    def test_accepts_path_objects(self, engine, sample_corpus):
        report = engine.aggregate([sample_corpus / "farm.txt"], "hens")
        assert report.windows["farm.txt"].query_line == 4

    def test_negative_half_window_raises(self, engine, sample_corpus):
        with pytest.raises(InvalidArgumentError):
            engine.aggregate(_files(sample_corpus, "farm.txt"), "goat", half_window=-1)
        assert engine.last_report is None

    def test_last_report_is_kept(self, engine, sample_corpus):
        report = engine.aggregate(_files(sample_corpus, "farm.txt"), "goat")
        assert engine.last_report is report


class TestFileFailures:
    def test_missing_file_does_not_abort_batch(self, engine, sample_corpus):
        files = [str(sample_corpus / "gone.txt"), *_files(sample_corpus, "farm.txt")]
        report = engine.aggregate(files, "goat")

        assert report.num_results == 2
        gone = report.windows["gone.txt"]
        assert gone.failed
        assert gone.query_line == 0
        assert gone.failure.kind == ErrorKind.FILE_UNREADABLE
        assert report.windows["farm.txt"].query_line == 3
        assert list(report.failures) == ["gone.txt"]

    def test_failures_are_collected(self, engine, sample_corpus):
        engine.aggregate([str(sample_corpus / "gone.txt"), str(sample_corpus / "also-gone.txt")], "x")
        summary = engine.error_collector.get_summary()
        assert summary["total_errors"] == 2
        assert summary["by_kind"] == {"file_unreadable": 2}
        assert "gone.txt" in engine.error_report()

    def test_error_report_covers_latest_search_only(self, engine, sample_corpus):
        engine.aggregate([str(sample_corpus / "gone.txt")], "goat")
        engine.aggregate(_files(sample_corpus, "farm.txt"), "goat")

        assert not engine.error_collector.has_errors()
        assert engine.error_report() == "No errors occurred during the search operation."

        engine.aggregate([str(sample_corpus / "other-gone.txt")], "goat")
        report = engine.error_report()
        assert "other-gone.txt" in report
        assert "  - " + str(sample_corpus / "gone.txt") + " " not in report


class TestKeyStrategy:
    @pytest.fixture
    def twin_files(self, tmp_path: Path) -> list[str]:
        first = tmp_path / "one" / "same.txt"
        second = tmp_path / "two" / "same.txt"
        first.parent.mkdir()
        second.parent.mkdir()
        first.write_text("alpha goat\n", encoding="utf-8")
        second.write_text("beta\ngamma goat\n", encoding="utf-8")
        return [str(first), str(second)]

    def test_basename_keys_collide_and_last_wins(self, engine, twin_files):
        report = engine.aggregate(twin_files, "goat")
        assert report.num_results == 2
        assert list(report.windows) == ["same.txt"]
        assert report.windows["same.txt"].file_path == twin_files[1]
        assert report.windows["same.txt"].query_line == 2

    def test_full_path_keys_keep_both(self, quiet_logger, twin_files):
        engine = SnippetSearch(SearchConfig(key_strategy=KeyStrategy.FULL_PATH), logger=quiet_logger)
        report = engine.aggregate(twin_files, "goat")
        assert list(report.windows) == twin_files
        assert [w.query_line for w in report.windows.values()] == [1, 2]


class TestParallel:
    def test_parallel_matches_sequential(self, quiet_logger, tmp_path: Path):
        files = []
        for i in range(20):
            p = tmp_path / f"f{i:02d}.txt"
            body = [f"filler {j}" for j in range(i)] + ["the Needle"] + ["tail"]
            p.write_text("\n".join(body), encoding="utf-8")
            files.append(str(p))
        files.insert(7, str(tmp_path / "missing.txt"))

        sequential = SnippetSearch(SearchConfig(half_window=2), logger=quiet_logger)
        parallel = SnippetSearch(
            SearchConfig(half_window=2, parallel=True, workers=4, parallel_threshold=2),
            logger=quiet_logger,
        )
        seq_report = sequential.aggregate(files, "needle")
        par_report = parallel.aggregate(files, "needle")

        assert list(par_report.windows) == list(seq_report.windows)
        assert par_report == seq_report
        assert par_report.num_results == 21
        assert parallel.error_collector.get_summary()["total_errors"] == 1


class TestTryAggregate:
    def test_ok(self, engine, sample_corpus):
        outcome = engine.try_aggregate(_files(sample_corpus, "farm.txt"), "goat")
        assert outcome.ok
        assert outcome.value.num_results == 1

    def test_invalid_half_window(self, engine, sample_corpus):
        outcome = engine.try_aggregate(_files(sample_corpus, "farm.txt"), "goat", half_window=-5)
        assert not outcome.ok
        assert outcome.kind == ErrorKind.INVALID_ARGUMENT
        assert outcome.value is None


class TestSnippetsAndSingleFile:
    def test_snippets_mapping(self, engine, sample_corpus):
        snippets = engine.snippets(_files(sample_corpus, "farm.txt", "notes.txt"), "cows")
        assert snippets == {"farm.txt": "Barn inventory\ntwo <b>cows</b>\none GOAT named Gruff", "notes.txt": ""}

    def test_extract_file_uses_config(self, engine, sample_corpus):
        window = engine.extract_file(sample_corpus / "farm.txt", "hens")
        assert window.start_line == 3 and window.end_line == 4


class TestSearchDirectory:
    def test_lists_files_with_extension(self, engine, sample_corpus):
        report = engine.search_directory(sample_corpus, ".txt", "goat")
        assert list(report.windows) == ["animals.txt", "farm.txt", "notes.txt"]
        assert report.num_results == 3
        assert report.extension == ".txt"
        assert report.directory == str(sample_corpus)

    def test_recursive(self, quiet_logger, sample_corpus):
        engine = SnippetSearch(SearchConfig(recursive=True), logger=quiet_logger)
        report = engine.search_directory(sample_corpus, ".txt", "goat")
        assert "deep.txt" in report.windows
        assert report.num_results == 4

    def test_max_results_caps_files(self, quiet_logger, sample_corpus):
        engine = SnippetSearch(SearchConfig(max_results=2), logger=quiet_logger)
        report = engine.search_directory(sample_corpus, ".txt", "goat")
        assert report.num_results == 2

    def test_missing_directory(self, engine, tmp_path):
        with pytest.raises(InvalidArgumentError):
            engine.search_directory(tmp_path / "nope", ".txt", "goat")


def test_invalid_config_rejected(quiet_logger):
    with pytest.raises(InvalidArgumentError):
        SnippetSearch(SearchConfig(half_window=-1), logger=quiet_logger)
