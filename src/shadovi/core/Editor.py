# shadovi/core/Editor.py
"""shadovi.core.Editor
=====================
Editor: the session controller of the shadovi terminal text editor.

This module defines the `Editor` class, which ties the buffer engine to the
curses user interface. It owns the session state and runs the main loop:

- File operations (open, save, save-as prompt)
- Cursor motion and scrolling (delegated to `shadovi.core.Viewport`)
- Text editing through the `Document` (insert, delete, split, join)
- Incremental search with match highlighting
- Status and message bars (timed status messages)
- Single-line prompts with per-keystroke callbacks

Input decoding and key dispatch live in `shadovi.ui.KeyBinder`, screen
output in `shadovi.ui.DrawScreen`. One keystroke is processed to completion
(dispatch, edit, scroll, render) before the next one is read.
"""

import curses
import logging
import time
from typing import Any, Callable, Optional

from shadovi.core.Document import Document, Position
from shadovi.core.Highlighter import HighlightType
from shadovi.core.Line import DEFAULT_TAB_WIDTH, SearchDirection
from shadovi.core.Viewport import (
    Motion,
    ScrollOffset,
    ViewportSize,
    move_cursor,
    screen_cursor,
    scroll,
)
from shadovi.ui.DrawScreen import DrawScreen
from shadovi.ui.KeyBinder import KeyBinder
from shadovi.utils.logging_config import logger
from shadovi.utils.utils import hex_to_xterm


HELP_MESSAGE = "HELP: Ctrl-F = find | Ctrl-S = save | Ctrl-Q = quit"
SEARCH_PROMPT = "Search (ESC to cancel, Arrows to navigate): "

ENTER_KEYS = (10, 13)
BACKSPACE_KEYS = (8, 127)

PromptCallback = Callable[["Editor", Any, str], None]


## ==================== Editor Class ====================
class Editor:
    """Class Editor
    =========================
    Main controller of the shadovi editor.

    Attributes:
        stdscr (curses.window): The main curses window.
        config (dict): Merged application configuration.
        document (Document): The buffer being edited.
        cursor (Position): Cursor position in document coordinates.
        offset (ScrollOffset): Top-left visible document coordinate.
        status_message (str): Text of the message bar.
        status_time (float): When `status_message` was set.
        highlighted_word (Optional[str]): Search query painted as MATCH.
        colors (dict[str, int]): Curses attributes per highlight category
            name and for the status bar.
        tab_width (int): Cells used to render a tab.
        message_timeout (float): Seconds a status message stays visible.
        running (bool): Main loop control flag.
        drawer (DrawScreen): Screen renderer.
        keybinder (KeyBinder): Input decoding and dispatch.
    """

    def __init__(
        self,
        stdscr: "curses.window",
        config: dict[str, Any],
        file_name: Optional[str] = None,
    ) -> None:
        self.stdscr = stdscr
        self.config: dict[str, Any] = config

        editor_config = config.get("editor", {})
        self.tab_width: int = int(editor_config.get("tab_width", DEFAULT_TAB_WIDTH))
        self.message_timeout: float = float(editor_config.get("message_timeout", 5))

        self.document: Document = Document(config=config)
        self.cursor: Position = Position()
        self.offset: ScrollOffset = ScrollOffset()
        self.status_message: str = ""
        self.status_time: float = 0.0
        self.highlighted_word: Optional[str] = None
        self.running: bool = False
        self._force_full_redraw: bool = True

        self.colors: dict[str, int] = {}
        self.init_colors()

        self.drawer: DrawScreen = DrawScreen(self, self.config)
        self.keybinder: KeyBinder = KeyBinder(self)
        self.handle_input = self.keybinder.handle_input

        self._setup_environment()

        if file_name:
            self.open_file(file_name)
        if not self.status_message:
            self._set_status_message(HELP_MESSAGE)

        logging.info(f"Editor initialized. File: {self.document.file_name!r}")

    def _setup_environment(self) -> None:
        self.stdscr.keypad(True)
        try:
            curses.curs_set(1)
        except curses.error:
            logging.debug("Terminal does not support changing cursor visibility.")

    # --- Status message ---
    def _set_status_message(self, message: str) -> None:
        self.status_message = str(message)
        self.status_time = time.monotonic()
        logging.debug(f"Status message set to: '{self.status_message}'")

    def visible_status_message(self) -> str:
        """The status message, or an empty string once it has timed out."""
        if time.monotonic() - self.status_time < self.message_timeout:
            return self.status_message
        return ""

    def _status_message_expired(self) -> bool:
        if self.status_message and not self.visible_status_message():
            self.status_message = ""
            return True
        return False

    # --- Colours ---
    def init_colors(self) -> None:
        """Initializes curses color pairs for every highlight category."""
        self.colors = {}

        if not curses.has_colors() or curses.COLORS < 8:
            logging.warning(
                "Terminal has no or limited color support (< 8). Using monochrome attributes."
            )
            self.colors = {
                HighlightType.NONE.value: curses.A_NORMAL,
                HighlightType.NUMBER.value: curses.A_NORMAL,
                HighlightType.MATCH.value: curses.A_REVERSE,
                HighlightType.STRING.value: curses.A_NORMAL,
                HighlightType.CHARACTER.value: curses.A_NORMAL,
                HighlightType.COMMENT.value: curses.A_DIM,
                HighlightType.KEYWORD_PRIMARY.value: curses.A_BOLD,
                "status": curses.A_REVERSE,
            }
            return

        curses.start_color()
        try:
            curses.use_default_colors()
        except curses.error:
            pass

        # name -> (default hex, 8-colour fallback)
        color_definitions = {
            HighlightType.NONE.value: ("#FFFFFF", -1),
            HighlightType.NUMBER.value: ("#DCA3A3", curses.COLOR_RED),
            HighlightType.MATCH.value: ("#268BD2", curses.COLOR_BLUE),
            HighlightType.STRING.value: ("#D33682", curses.COLOR_MAGENTA),
            HighlightType.CHARACTER.value: ("#6C71C4", curses.COLOR_CYAN),
            HighlightType.COMMENT.value: ("#859900", curses.COLOR_GREEN),
            HighlightType.KEYWORD_PRIMARY.value: ("#B58900", curses.COLOR_YELLOW),
        }

        user_colors = self.config.get("colors", {})
        can_use_256_colors = curses.COLORS >= 256
        pair_id = 1

        for name, (default_hex, default_8_color) in color_definitions.items():
            if name == HighlightType.NONE.value:
                # default terminal foreground
                self.colors[name] = curses.A_NORMAL
                continue
            fg = hex_to_xterm(user_colors.get(name, default_hex)) if can_use_256_colors else default_8_color
            try:
                curses.init_pair(pair_id, fg, -1)
                self.colors[name] = curses.color_pair(pair_id)
                pair_id += 1
            except curses.error as e:
                logging.error(f"Failed to initialize curses pair for '{name}': {e}")
                self.colors[name] = curses.A_NORMAL

        if can_use_256_colors:
            status_fg = hex_to_xterm(user_colors.get("status_fg", "#3F3F3F"))
            status_bg = hex_to_xterm(user_colors.get("status_bg", "#EFEFEF"))
        else:
            status_fg, status_bg = curses.COLOR_BLACK, curses.COLOR_WHITE
        try:
            curses.init_pair(pair_id, status_fg, status_bg)
            self.colors["status"] = curses.color_pair(pair_id)
        except curses.error as e:
            logging.warning("init_pair failed (%s) - roll back to A_REVERSE", e)
            self.colors["status"] = curses.A_REVERSE

    # --- Geometry ---
    def text_area_size(self) -> ViewportSize:
        """Size of the text area: the window minus status and message bars."""
        height, width = self.stdscr.getmaxyx()
        return ViewportSize(width=max(1, width), height=max(1, height - 2))

    def scroll(self) -> None:
        self.offset = scroll(
            self.cursor, self.text_area_size(), self.offset, self.document, self.tab_width
        )

    def screen_cursor(self) -> tuple[int, int]:
        return screen_cursor(self.document, self.cursor, self.offset, self.tab_width)

    def handle_resize(self) -> bool:
        logging.debug(f"Window resized to {self.stdscr.getmaxyx()}.")
        self.scroll()
        self._force_full_redraw = True
        return True

    # --- Cursor motion ---
    def move(self, motion: Motion) -> bool:
        self.cursor = move_cursor(
            self.document, self.cursor, motion, self.text_area_size().height
        )
        return True

    def _line_length(self, index: int) -> int:
        line = self.document.line_at(index)
        return line.length if line is not None else 0

    def handle_up(self) -> bool:
        return self.move(Motion.UP)

    def handle_down(self) -> bool:
        return self.move(Motion.DOWN)

    def handle_left(self) -> bool:
        return self.move(Motion.LEFT)

    def handle_right(self) -> bool:
        return self.move(Motion.RIGHT)

    def handle_page_up(self) -> bool:
        return self.move(Motion.PAGE_UP)

    def handle_page_down(self) -> bool:
        return self.move(Motion.PAGE_DOWN)

    def handle_home(self) -> bool:
        return self.move(Motion.HOME)

    def handle_end(self) -> bool:
        return self.move(Motion.END)

    # --- Editing ---
    def insert_text(self, text: str) -> bool:
        """Inserts a single character at the cursor and advances past it.

        A combining mark merges into the grapheme before it, so the cursor
        only advances when the line actually gained a grapheme.
        """
        before = self._line_length(self.cursor.line)
        self.document.insert(self.cursor, text)
        if self._line_length(self.cursor.line) > before:
            return self.move(Motion.RIGHT)
        return True

    def handle_enter(self) -> bool:
        self.document.insert(self.cursor, "\n")
        return self.move(Motion.RIGHT)

    def handle_delete(self) -> bool:
        self.document.delete(self.cursor)
        return True

    def handle_backspace(self) -> bool:
        """Deletes the grapheme before the cursor, joining lines at column 0."""
        if self.cursor.line == 0 and self.cursor.column == 0:
            return False
        self.move(Motion.LEFT)
        self.document.delete(self.cursor)
        return True

    # --- Files ---
    def open_file(self, file_name: str) -> bool:
        """Loads `file_name` into a new document.

        A file that cannot be read yields an empty document that keeps the
        name, so that saving later creates the file.
        """
        logging.debug(f"open_file called. Requested filename: '{file_name}'")
        try:
            with open(file_name, "rb") as f:
                self.document = Document.load(f, file_name=file_name, config=self.config)
            logger.info(f"Opened '{file_name}' ({len(self.document)} lines).")
        except OSError as e:
            logger.warning(f"Could not open file '{file_name}': {e}")
            self.document = Document(file_name=file_name, config=self.config)
            self._set_status_message(f"ERR: Could not open file: {file_name}")
        self.cursor = Position()
        self.offset = ScrollOffset()
        self._force_full_redraw = True
        return True

    def save_file(self) -> bool:
        """Saves the document, prompting for a name when it has none.

        Returns:
            bool: True if the file was written.
        """
        if not self.document.file_name:
            new_name = self.prompt("Save as: ")
            if new_name is None:
                self._set_status_message("Save aborted.")
                return False
            self.document.file_name = new_name

        try:
            self._write_file(self.document.file_name)
        except OSError as e:
            logger.error(f"Error writing '{self.document.file_name}': {e}", exc_info=True)
            self._set_status_message("Error writing file!")
            return False

        self._set_status_message("File saved successfully.")
        logger.info(f"Saved '{self.document.file_name}'.")
        return True

    def _write_file(self, target_filename: str) -> None:
        with open(target_filename, "wb") as f:
            self.document.save(f)

    def exit_editor(self) -> None:
        """Signals the main loop to stop; curses.wrapper restores the terminal."""
        self.running = False
        logger.info("Main loop stop signaled.")

    # --- Prompt & search ---
    def prompt(
        self, message: str, callback: Optional[PromptCallback] = None
    ) -> Optional[str]:
        """Reads a line of input in the message bar.

        The screen is redrawn after every keystroke and `callback` is called
        with ``(editor, key, text_so_far)``.

        Returns:
            The entered text, or None when cancelled with Esc or left empty.
        """
        logging.debug(f"Prompt called. Message: '{message}'")
        result = ""
        while True:
            self._set_status_message(f"{message}{result}")
            self._render_screen(True)

            key = self.keybinder.get_key_input()
            if key in (curses.ERR, -1):
                continue

            if key == curses.KEY_ENTER or key in ENTER_KEYS:
                break
            if key == 27:  # ESC
                self._set_status_message("")
                return None
            if key == curses.KEY_BACKSPACE or key in BACKSPACE_KEYS:
                result = result[:-1]
            elif isinstance(key, str) and len(key) == 1 and key.isprintable():
                result += key

            if callback:
                callback(self, key, result)

        self._set_status_message("")
        return result or None

    def find(self) -> bool:
        """Incremental search; Esc restores the cursor and scroll position."""
        old_cursor = self.cursor
        old_offset = self.offset
        direction = [SearchDirection.FORWARD]

        def search_callback(editor: "Editor", key: Any, query: str) -> None:
            moved = False
            if key in (curses.KEY_RIGHT, curses.KEY_DOWN):
                direction[0] = SearchDirection.FORWARD
                editor.move(Motion.RIGHT)
                moved = True
            elif key in (curses.KEY_LEFT, curses.KEY_UP):
                direction[0] = SearchDirection.BACKWARD
            else:
                direction[0] = SearchDirection.FORWARD

            position = editor.document.find(query, editor.cursor, direction[0])
            if position is not None:
                editor.cursor = position
                editor.scroll()
            elif moved:
                editor.move(Motion.LEFT)
            editor.highlighted_word = query

        query = self.prompt(SEARCH_PROMPT, search_callback)
        if query is None:
            self.cursor = old_cursor
            self.offset = old_offset
            self.scroll()
        self.highlighted_word = None
        self._force_full_redraw = True
        return True

    # --- Main loop ---
    def run(self) -> None:
        """The main event loop of the editor.

        Runs until `self.running` is set to False by `exit_editor`. A
        `KeyboardInterrupt` ends the loop as well; any other exception is
        logged and re-raised so the caller can report it after curses has
        restored the terminal.
        """
        logger.info("Editor main loop started.")
        self.running = True
        self._force_full_redraw = True

        self.stdscr.nodelay(True)
        self.stdscr.timeout(100)

        while self.running:
            try:
                redraw_needed = self._process_events_and_input()
                self._render_screen(redraw_needed)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.exit_editor()
            except curses.error as e:
                logger.critical("Terminal I/O failure in main loop: %s", e, exc_info=True)
                self.exit_editor()
                raise

        logger.info("Editor main loop finished.")

    def _process_events_and_input(self) -> bool:
        redraw_needed = self._status_message_expired()

        key_input = self.keybinder.get_key_input()
        if key_input != curses.ERR and key_input != -1:
            if key_input == curses.KEY_RESIZE:
                redraw_needed = self.handle_resize()
            elif self.handle_input(key_input):
                redraw_needed = True
            self.scroll()

        return redraw_needed

    def _render_screen(self, redraw_needed: bool) -> None:
        if not redraw_needed and not self._force_full_redraw:
            return

        self.scroll()
        self.drawer.draw()
        self.drawer._position_cursor()
        curses.doupdate()

        self._force_full_redraw = False
