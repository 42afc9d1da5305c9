"""Tests for snipsearch.formatter module."""

from __future__ import annotations

import io

import orjson
from rich.console import Console

from snipsearch.extractor import extract
from snipsearch.formatter import format_report, format_text, render_highlight_console
from snipsearch.types import MatchWindow, OutputFormat, SearchReport

FRUIT = ["apple", "banana", "Cherry", "date", "egg"]


def _report(**windows: MatchWindow) -> SearchReport:
    return SearchReport(
        query="cherry",
        directory="docs",
        extension=".txt",
        num_results=len(windows),
        windows={f"{name}.txt": w for name, w in windows.items()},
    )


class TestFormatText:
    def test_header_and_numbered_lines(self):
        report = _report(fruit=extract(FRUIT, "cherry", 1))
        assert format_text(report) == "\n".join(
            [
                'Searched for "cherry"',
                "Directory: docs",
                "Extension: .txt",
                "Number of results found: 1",
                "",
                "fruit.txt:2-4 (query line 3)",
                "     2 | banana",
                "     3 | [[Cherry]]",
                "     4 | date",
            ]
        )

    def test_without_highlight_markers_are_removed(self):
        report = _report(fruit=extract(FRUIT, "cherry", 0))
        text = format_text(report, highlight=False)
        assert "     3 | Cherry" in text
        assert "<b>" not in text and "[[" not in text

    def test_no_match_status(self):
        report = _report(empty=MatchWindow.no_match("empty.txt"))
        assert format_text(report).endswith("empty.txt: no match")

    def test_unreadable_status(self, tmp_path):
        from snipsearch.extractor import extract_file

        report = _report(gone=extract_file(tmp_path / "gone.txt", "cherry", 1))
        assert "gone.txt: unreadable (missing)" in format_text(report)

    def test_marker_text_inside_line_is_kept(self):
        window = extract(["a <b> tag then cherry"], "cherry", 0)
        report = _report(html=window)
        assert "     1 | a <b> tag then [[cherry]]" in format_text(report)

    def test_custom_markers(self):
        window = extract(FRUIT, "egg", 0, markers=("**", "**"))
        report = _report(fruit=window)
        assert "     5 | [[egg]]" in format_text(report, markers=("**", "**"))


class TestRichRendering:
    def test_renders_match_and_context(self):
        buf = io.StringIO()
        console = Console(file=buf, force_terminal=False, color_system=None, width=120)
        report = _report(fruit=extract(FRUIT, "cherry", 1), empty=MatchWindow.no_match("empty.txt"))

        render_highlight_console(report, console=console)

        out = buf.getvalue()
        assert 'Searched for "cherry"' in out
        assert "fruit.txt:2-4 (query line 3)" in out
        assert "     3 | Cherry" in out
        assert "<b>" not in out
        assert "empty.txt: no match" in out

    def test_markup_in_query_and_directory_is_printed_literally(self):
        buf = io.StringIO()
        console = Console(file=buf, force_terminal=False, color_system=None, width=120)
        report = SearchReport(
            query="[/]",
            directory="[bold]docs",
            extension=".txt",
            num_results=1,
            windows={"tags.txt": extract(["a [/] closing tag"], "[/]", 0)},
        )

        render_highlight_console(report, console=console)

        out = buf.getvalue()
        assert 'Searched for "[/]"' in out
        assert "directory=[bold]docs" in out
        assert "     1 | a [/] closing tag" in out


class TestFormatReport:
    def test_json(self):
        report = _report(fruit=extract(FRUIT, "cherry", 1))
        data = orjson.loads(format_report(report, OutputFormat.JSON))
        assert data["query"] == "cherry"
        assert data["results"][0][0] == {"file name": "fruit.txt"}

    def test_text(self):
        report = _report(fruit=extract(FRUIT, "cherry", 1))
        assert format_report(report, OutputFormat.TEXT) == format_text(report, highlight=False)

    def test_highlight_falls_back_to_text_when_not_a_tty(self, monkeypatch):
        monkeypatch.setattr("sys.stdout", io.StringIO())
        report = _report(fruit=extract(FRUIT, "cherry", 1))
        assert "[[Cherry]]" in format_report(report, OutputFormat.HIGHLIGHT)
