# tests/test_core/test_editor.py
"""Tests for the `Editor` session controller.
=============================================

The editor runs on a mocked curses window (see `real_editor` in conftest).
Prompt input is scripted through the mocked key binder, so save-as and the
incremental search can be driven key by key.
"""

import curses
from pathlib import Path
from unittest.mock import patch

import pytest

from shadovi.core.Document import Document, Position
from shadovi.core.Editor import HELP_MESSAGE, Editor
from shadovi.core.Viewport import ScrollOffset, ViewportSize


def script_keys(editor: Editor, keys: list) -> None:
    editor.keybinder.get_key_input.side_effect = keys


# --- Construction & geometry ---
def test_initial_state(real_editor: Editor) -> None:
    assert real_editor.status_message == HELP_MESSAGE
    assert real_editor.cursor == Position(0, 0)
    assert real_editor.document.is_empty()
    assert real_editor.tab_width == 2


def test_colors_cover_every_highlight_category(real_editor: Editor) -> None:
    for name in ("none", "number", "match", "string", "character", "comment", "keyword_primary", "status"):
        assert name in real_editor.colors
    assert real_editor.colors["none"] == 0


def test_text_area_excludes_status_and_message_bars(real_editor: Editor) -> None:
    assert real_editor.text_area_size() == ViewportSize(width=80, height=22)


def test_scroll_follows_cursor(real_editor: Editor) -> None:
    real_editor.document = Document.from_strings(["x"] * 100)
    real_editor.cursor = Position(50, 0)
    real_editor.scroll()
    assert real_editor.offset == ScrollOffset(column=0, row=29)


# --- Status messages ---
def test_status_message_times_out(real_editor: Editor) -> None:
    with patch("shadovi.core.Editor.time") as mock_time:
        mock_time.monotonic.return_value = 100.0
        real_editor._set_status_message("hello")
        assert real_editor.visible_status_message() == "hello"

        mock_time.monotonic.return_value = 104.9
        assert real_editor.visible_status_message() == "hello"
        assert real_editor._status_message_expired() is False

        mock_time.monotonic.return_value = 105.0
        assert real_editor.visible_status_message() == ""
        assert real_editor._status_message_expired() is True
        assert real_editor.status_message == ""


# --- Editing ---
def test_insert_text_advances_cursor(real_editor: Editor) -> None:
    real_editor.insert_text("a")
    real_editor.insert_text("b")
    assert [line.string for line in real_editor.document.lines] == ["ab"]
    assert real_editor.cursor == Position(0, 2)
    assert real_editor.document.is_dirty()


def test_combining_mark_does_not_advance_cursor(real_editor: Editor) -> None:
    real_editor.document = Document.from_strings(["ex", ""], config=real_editor.config)
    real_editor.cursor = Position(0, 1)
    real_editor.insert_text("\u0301")
    assert real_editor.document.lines[0].string == "e\u0301x"
    assert real_editor.document.lines[0].length == 2
    assert real_editor.cursor == Position(0, 1)


def test_combining_mark_at_end_of_line_stays_on_line(real_editor: Editor) -> None:
    real_editor.document = Document.from_strings(["e", "next"], config=real_editor.config)
    real_editor.cursor = Position(0, 1)
    real_editor.insert_text("\u0301")
    assert real_editor.cursor == Position(0, 1)


def test_scroll_keeps_cursor_visible_on_tabbed_line(real_editor: Editor) -> None:
    real_editor.document = Document.from_strings(["\t" * 60], config=real_editor.config)
    real_editor.cursor = Position(0, 60)
    real_editor.scroll()
    row, col = real_editor.screen_cursor()
    assert row == 0
    assert col < real_editor.text_area_size().width


def test_enter_splits_line_and_moves_to_next(editor_with_text: Editor) -> None:
    editor_with_text.cursor = Position(0, 2)
    editor_with_text.handle_enter()
    assert editor_with_text.document.line_at(0).string == "fn"
    assert editor_with_text.document.line_at(1).string == " main() {"
    assert editor_with_text.cursor == Position(1, 0)


def test_backspace_at_origin_does_nothing(editor_with_text: Editor) -> None:
    assert editor_with_text.handle_backspace() is False
    assert not editor_with_text.document.is_dirty()


def test_backspace_at_line_start_joins_lines(real_editor: Editor) -> None:
    real_editor.document = Document.from_strings(["ab", "cd"])
    real_editor.cursor = Position(1, 0)
    assert real_editor.handle_backspace() is True
    assert [line.string for line in real_editor.document.lines] == ["abcd"]
    assert real_editor.cursor == Position(0, 2)


def test_delete_under_cursor(real_editor: Editor) -> None:
    real_editor.document = Document.from_strings(["abc"])
    real_editor.cursor = Position(0, 1)
    real_editor.handle_delete()
    assert real_editor.document.line_at(0).string == "ac"
    assert real_editor.cursor == Position(0, 1)


# --- Files ---
def test_open_file(real_editor: Editor, test_file_path: Path) -> None:
    real_editor.cursor = Position(1, 1)
    real_editor.open_file(str(test_file_path))
    assert len(real_editor.document) == 3
    assert real_editor.document.file_type.name == "Rust"
    assert not real_editor.document.is_dirty()
    assert real_editor.cursor == Position(0, 0)


def test_open_missing_file_keeps_name(real_editor: Editor, tmp_path: Path) -> None:
    missing = str(tmp_path / "new.rs")
    real_editor.open_file(missing)
    assert real_editor.document.is_empty()
    assert real_editor.document.file_name == missing
    assert real_editor.status_message == f"ERR: Could not open file: {missing}"


def test_save_file(real_editor: Editor, tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    real_editor.document = Document.from_strings(["one", "two"], file_name=str(target))
    real_editor.insert_text("x")

    assert real_editor.save_file() is True
    assert target.read_bytes() == b"xone\ntwo\n"
    assert real_editor.status_message == "File saved successfully."
    assert not real_editor.document.is_dirty()


def test_save_as_prompts_for_name(
    real_editor: Editor, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    real_editor.insert_text("z")
    script_keys(real_editor, [*"new.rs", 10])

    assert real_editor.save_file() is True
    assert (tmp_path / "new.rs").read_bytes() == b"z\n"
    assert real_editor.document.file_name == "new.rs"
    assert real_editor.document.file_type.name == "Rust"


def test_save_as_cancelled(real_editor: Editor) -> None:
    real_editor.insert_text("z")
    script_keys(real_editor, ["a", 27])

    assert real_editor.save_file() is False
    assert real_editor.status_message == "Save aborted."
    assert real_editor.document.is_dirty()


def test_save_error_keeps_document_dirty(real_editor: Editor, tmp_path: Path) -> None:
    real_editor.document = Document(file_name=str(tmp_path / "no" / "such" / "dir.txt"))
    real_editor.insert_text("q")

    assert real_editor.save_file() is False
    assert real_editor.status_message == "Error writing file!"
    assert real_editor.document.is_dirty()


# --- Prompt ---
def test_prompt_edits_and_skips_timeouts(real_editor: Editor) -> None:
    script_keys(real_editor, ["a", curses.ERR, "b", 127, "c", 13])
    assert real_editor.prompt("Name: ") == "ac"
    assert real_editor.status_message == ""


def test_prompt_empty_enter_returns_none(real_editor: Editor) -> None:
    script_keys(real_editor, [10])
    assert real_editor.prompt("Name: ") is None


# --- Search ---
@pytest.fixture
def search_editor(real_editor: Editor) -> Editor:
    real_editor.document = Document.from_strings(["hello world", "say hello"])
    return real_editor


def test_find_moves_to_next_and_previous_match(search_editor: Editor) -> None:
    script_keys(search_editor, [*"hello", curses.KEY_RIGHT, 10])
    search_editor.find()
    assert search_editor.cursor == Position(1, 4)
    assert search_editor.highlighted_word is None


def test_find_backward_with_left_arrow(search_editor: Editor) -> None:
    script_keys(search_editor, [*"hello", curses.KEY_DOWN, curses.KEY_LEFT, 10])
    search_editor.find()
    assert search_editor.cursor == Position(0, 0)


def test_find_highlights_query_while_prompting(search_editor: Editor) -> None:
    seen = []

    def record_draw() -> None:
        seen.append(search_editor.highlighted_word)

    search_editor.drawer.draw.side_effect = record_draw
    script_keys(search_editor, [*"wor", 10])
    search_editor.find()
    assert "wor" in seen
    assert search_editor.cursor == Position(0, 6)


def test_find_escape_restores_cursor_and_offset(search_editor: Editor) -> None:
    search_editor.cursor = Position(0, 2)
    script_keys(search_editor, [*"say", 27])
    search_editor.find()
    assert search_editor.cursor == Position(0, 2)
    assert search_editor.offset == ScrollOffset()
    assert search_editor.highlighted_word is None


# --- Main loop ---
def test_process_events_dispatches_key(real_editor: Editor) -> None:
    real_editor.keybinder.get_key_input.return_value = "x"
    real_editor.handle_input.return_value = True
    assert real_editor._process_events_and_input() is True
    real_editor.handle_input.assert_called_once_with("x")


def test_process_events_handles_resize(real_editor: Editor) -> None:
    real_editor.keybinder.get_key_input.return_value = curses.KEY_RESIZE
    assert real_editor._process_events_and_input() is True
    real_editor.handle_input.assert_not_called()


def test_process_events_idle_timeout(real_editor: Editor) -> None:
    real_editor.status_message = ""
    real_editor.keybinder.get_key_input.return_value = curses.ERR
    assert real_editor._process_events_and_input() is False


def test_run_until_exit(real_editor: Editor, mock_stdscr) -> None:
    real_editor.keybinder.get_key_input.return_value = 17
    real_editor.handle_input.side_effect = lambda key: real_editor.exit_editor()
    real_editor.run()
    assert real_editor.running is False
    mock_stdscr.timeout.assert_called_with(100)
    real_editor.drawer.draw.assert_called()
