"""
Shared test fixtures and utilities for snipsearch tests.

This module provides common sample files and engine fixtures used across
the unit and integration tests.
"""

from pathlib import Path

import pytest

from snipsearch import SearchConfig, SnippetSearch
from snipsearch.logging_config import LogLevel, SearchLogger

# Test data constants
FRUIT_LINES = ["apple", "banana", "Cherry", "date", "egg"]

ANIMALS_TEXT = """The quick brown fox
jumps over the lazy dog.
A deer crossed the road
and a goat watched it.
Nothing else happened.
"""

FARM_TEXT = """Barn inventory
two cows
one GOAT named Gruff
three hens
"""

NOTES_TEXT = """meeting notes
nothing about animals here
"""


@pytest.fixture
def quiet_logger():
    """A logger that only reports critical messages."""
    return SearchLogger(name="snipsearch.tests", level=LogLevel.CRITICAL)


@pytest.fixture
def sample_corpus(tmp_path: Path) -> Path:
    """A directory of small text files plus one file with another extension."""
    corpus = tmp_path / "testdir"
    corpus.mkdir()
    (corpus / "animals.txt").write_text(ANIMALS_TEXT, encoding="utf-8")
    (corpus / "farm.txt").write_text(FARM_TEXT, encoding="utf-8")
    (corpus / "notes.txt").write_text(NOTES_TEXT, encoding="utf-8")
    (corpus / "readme.md").write_text("a goat in markdown\n", encoding="utf-8")
    nested = corpus / "nested"
    nested.mkdir()
    (nested / "deep.txt").write_text("goat at depth\n", encoding="utf-8")
    return corpus


@pytest.fixture
def fruit_file(tmp_path: Path) -> Path:
    p = tmp_path / "fruit.txt"
    p.write_text("\n".join(FRUIT_LINES) + "\n", encoding="utf-8")
    return p


@pytest.fixture
def engine(quiet_logger) -> SnippetSearch:
    """Sequential engine with a one-line half-window."""
    return SnippetSearch(SearchConfig(half_window=1), logger=quiet_logger)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "extractor: Snippet extraction tests")
    config.addinivalue_line("markers", "report: Report model and export tests")
