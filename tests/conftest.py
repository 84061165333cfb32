# tests/conftest.py
"""Pytest configuration with shared fixtures for the tedit editor tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from tedit.core.Buffer import Buffer
from tedit.core.Editor import Editor
from tedit.core.Location import Size
from tedit.core.View import View
from tedit.utils.utils import DEFAULT_CONFIG, deep_merge


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr with a 24x80 terminal."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """The built-in configuration, as `load_config()` returns it without a user file."""
    return deep_merge({}, DEFAULT_CONFIG)


# --- Document fixtures ---
@pytest.fixture
def sample_text() -> list[str]:
    """A few lines of mixed text used across buffer and view tests."""
    return [
        "def hello_world():",
        "    print('héllo wörld')",
        "",
        "    return True",
    ]


@pytest.fixture
def sample_buffer(sample_text: list[str]) -> Buffer:
    return Buffer.from_text("\n".join(sample_text))


@pytest.fixture
def make_view():
    """Factory building a `View` over the given lines and viewport size."""

    def _make(lines: list[str], height: int = 10, width: int = 20, **kwargs: Any) -> View:
        return View(Buffer.from_text("\n".join(lines)), Size(height, width), **kwargs)

    return _make


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    """A small UTF-8 file on disk."""
    path = tmp_path / "notes.txt"
    path.write_text("first line\nsecond line\n", encoding="utf-8")
    return path


# --- Editor fixtures ---
@pytest.fixture
def editor(mock_stdscr: MagicMock, mock_config: dict[str, Any]) -> Editor:
    """A real `Editor` session driving a mocked curses window."""
    return Editor(mock_stdscr, config=mock_config)
