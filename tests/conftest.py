# tests/conftest.py
"""Pytest configuration with shared fixtures for the shadovi editor tests.

The editor fixtures build a real `Editor` on a mocked curses window. The
`curses` module as seen by `shadovi.core.Editor` is replaced by a mock that
keeps the real key constants and `curses.error`, so key handling code compares
against the same values the real terminal would deliver.
"""

from __future__ import annotations

import curses as real_curses
from pathlib import Path
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest

from shadovi.core.Document import Document
from shadovi.core.Editor import Editor
from shadovi.utils.utils import DEFAULT_CONFIG, deep_merge


def make_curses_mock() -> MagicMock:
    """Return a `curses` mock carrying the real key codes and error type."""
    curses_mock = MagicMock()
    for name in dir(real_curses):
        if name.startswith("KEY_") or name.startswith("COLOR_"):
            setattr(curses_mock, name, getattr(real_curses, name))
    curses_mock.ERR = real_curses.ERR
    curses_mock.error = real_curses.error
    curses_mock.has_colors.return_value = True
    curses_mock.COLORS = 256
    curses_mock.COLOR_PAIRS = 256
    curses_mock.color_pair.side_effect = lambda n: n << 8
    curses_mock.A_NORMAL = 0
    curses_mock.A_BOLD = 1
    curses_mock.A_DIM = 2
    curses_mock.A_REVERSE = 4
    return curses_mock


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr for testing UI components.

    Returns:
        MagicMock: A mocked `stdscr` with terminal size set to (24, 80).
    """
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Provide the embedded default configuration (a private copy).

    Returns:
        dict[str, Any]: Editor configuration dictionary.
    """
    return deep_merge({}, DEFAULT_CONFIG)


# --- Editor fixtures ---
@pytest.fixture
def real_editor(
    mock_stdscr: MagicMock, mock_config: dict[str, Any]
) -> Generator[Editor, None, None]:
    """Create a real `Editor` whose drawer and key binder are mocks.

    Use this fixture to test the logic of the `Editor` class itself rather
    than its interactions with the terminal. Keys for prompts are scripted
    through ``editor.keybinder.get_key_input.side_effect``.

    Yields:
        Editor: A real `Editor` instance with dependencies mocked out.
    """
    with (
        patch("shadovi.core.Editor.DrawScreen"),
        patch("shadovi.core.Editor.KeyBinder"),
        patch("shadovi.core.Editor.curses", make_curses_mock()),
    ):
        yield Editor(mock_stdscr, mock_config)


@pytest.fixture
def editor_with_text(real_editor: Editor, sample_text: list[str]) -> Editor:
    """Provide an `Editor` preloaded with sample text.

    Returns:
        Editor: The editor with `sample_text` loaded into the buffer.
    """
    real_editor.document = Document.from_strings(sample_text, config=real_editor.config)
    return real_editor


# --- Helper fixtures ---
@pytest.fixture
def sample_text() -> list[str]:
    """Provide a sample Rust snippet as a list of lines.

    Returns:
        list[str]: Code lines for use in tests.
    """
    return [
        "fn main() {",
        "    // say hello",
        '    let greeting = "hello";',
        "    println!(\"{}\", greeting);",
        "}",
    ]


@pytest.fixture
def test_file_path(tmp_path: Path) -> Path:
    """Create a small Rust source file in a temporary directory.

    Returns:
        Path: Path to the created test file.
    """
    test_file = tmp_path / "main.rs"
    test_file.write_bytes(b"fn main() {\n    let x = 42;\n}\n")
    return test_file
