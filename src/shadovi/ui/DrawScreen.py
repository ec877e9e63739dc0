# shadovi/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the shadovi editor interface with curses.

It is responsible for:
- drawing the visible rows of the document with syntax and match highlighting,
- drawing "~" on rows past the end of the text and the welcome banner,
- rendering the status bar and the message bar,
- placing the terminal cursor.

Rows are produced by `Line.render`, which yields runs of text sharing one
highlight category; each run is painted with the curses attribute the editor
assigned to that category. Display widths come from wcwidth, so wide CJK
glyphs never push text past the right edge.
"""

import curses
import logging
from typing import TYPE_CHECKING, Any

from shadovi.core.Line import split_graphemes
from shadovi.core.Viewport import grapheme_width
from shadovi.utils.utils import APP_NAME, VERSION


if TYPE_CHECKING:
    from shadovi.core.Editor import Editor
    from shadovi.core.Line import Line


NO_NAME = "[No Name]"
MAX_STATUS_FILE_NAME = 20


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Renders the text area, the status bar and the message bar.

    The last two screen rows are reserved: the status bar (inverted colours)
    and the message bar below it. Everything above is the text area.

    Attributes:
        editor (Editor): Reference to the main editor instance.
        config (Dict[str, Any]): Editor configuration dictionary.
        stdscr (curses.window): The main curses window object.
        colors (Dict[str, int]): Highlight category name -> curses attribute.
    """

    def __init__(self, editor: "Editor", config: dict[str, Any]) -> None:
        self.editor = editor
        self.config = config
        self.stdscr = editor.stdscr
        self.colors = editor.colors

    def draw(self) -> None:
        """The main screen drawing method."""
        try:
            height, width = self.stdscr.getmaxyx()
            self.stdscr.erase()

            self._draw_rows(max(0, height - 2), width)
            if height >= 2:
                self._draw_status_bar()
            if height >= 1:
                self._draw_message_bar()

            self.stdscr.noutrefresh()

        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)
        except Exception:
            logging.exception("Unexpected error in DrawScreen.draw()")

    # --- Text area ---
    def _draw_rows(self, text_height: int, width: int) -> None:
        document = self.editor.document
        offset = self.editor.offset

        for screen_row in range(text_height):
            doc_row = offset.row + screen_row
            line = document.highlighted_line(doc_row, self.editor.highlighted_word)
            if line is not None:
                self._draw_line(screen_row, line, offset.column, width)
            elif document.is_empty() and screen_row == text_height // 3:
                self._draw_welcome_message(screen_row, width)
            else:
                self._safe_addstr(screen_row, 0, "~", curses.A_NORMAL)

    def _draw_line(self, screen_row: int, line: "Line", start: int, width: int) -> None:
        """Paints one document line, clipping it to `width` cells."""
        x = 0
        for run in line.render(start, start + width, self.editor.tab_width):
            if not run.text:
                continue
            attr = self.colors.get(run.style.value, curses.A_NORMAL)
            text = self.truncate_string(run.text, width - x)
            if not text:
                break
            self._safe_addstr(screen_row, x, text, attr)
            x += self.get_string_width(text)
            if x >= width:
                break

    def _draw_welcome_message(self, screen_row: int, width: int) -> None:
        welcome = f"{APP_NAME} -- v{VERSION}"
        padding = max(0, (width - len(welcome)) // 2)
        spaces = " " * max(0, padding - 1)
        self._safe_addstr(
            screen_row, 0, self.truncate_string(f"~{spaces}{welcome}", width), curses.A_NORMAL
        )

    # --- Status & message bars ---
    def status_bar_text(self, width: int) -> str:
        """Builds the status bar line, padded or clipped to `width` cells.

        Left: file name (first 20 characters), line count and "(modified)".
        Right: file type name and "current line/total lines".
        """
        document = self.editor.document
        file_name = document.file_name[:MAX_STATUS_FILE_NAME] if document.file_name else NO_NAME
        modified = " (modified)" if document.is_dirty() else ""
        left = f"{file_name} - {len(document)} lines{modified}"
        right = (
            f"{document.file_type.name} | "
            f"{self.editor.cursor.line + 1}/{len(document)}"
        )

        left_w = self.get_string_width(left)
        right_w = self.get_string_width(right)
        if left_w + right_w < width:
            return left + " " * (width - left_w - right_w) + right
        text = self.truncate_string(left, width)
        return text + " " * (width - self.get_string_width(text))

    def _draw_status_bar(self) -> None:
        height, width = self.stdscr.getmaxyx()
        attr = self.colors.get("status", curses.A_REVERSE)
        self._safe_addstr(height - 2, 0, self.status_bar_text(width), attr)

    def _draw_message_bar(self) -> None:
        height, width = self.stdscr.getmaxyx()
        message = self.editor.visible_status_message()
        if message:
            self._safe_addstr(
                height - 1, 0, self.truncate_string(message, max(0, width - 1)), curses.A_NORMAL
            )

    # --- Helpers ---
    def get_string_width(self, text: str) -> int:
        """Return display width of *text* (accounts for tabs & wide glyphs)."""
        return sum(
            grapheme_width(g, self.editor.tab_width) for g in split_graphemes(text)
        )

    def truncate_string(self, s: str, max_width: int) -> str:
        """Return `s` clipped to visual width `max_width`.

        Whole graphemes are kept or dropped, so a wide glyph that would
        straddle the edge is left out entirely.
        """
        result: list[str] = []
        consumed = 0

        for grapheme in split_graphemes(s):
            w = grapheme_width(grapheme, self.editor.tab_width)
            if consumed + w > max_width:
                break
            result.append(grapheme)
            consumed += w

        return "".join(result)

    def _safe_addstr(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # addstr raises after writing the last cell of the window
            pass

    def _position_cursor(self) -> None:
        """Moves the terminal cursor to the editor cursor's screen cell."""
        height, width = self.stdscr.getmaxyx()
        row, col = self.editor.screen_cursor()
        row = max(0, min(row, max(0, height - 3)))
        col = max(0, min(col, width - 1))
        try:
            self.stdscr.move(row, col)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({row}, {col}): {e}")
