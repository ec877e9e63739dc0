# shadovi/core/Viewport.py
"""shadovi.core.Viewport
=======================

Pure functions mapping between document coordinates and the visible window.

- `scroll` recomputes the scroll offset so the cursor stays visible.
- `screen_cursor` converts a document position into a screen cell, using
  display widths (wcwidth) so wide CJK glyphs and tabs land correctly.
- `move_cursor` implements the cursor motion policy for arrow, page,
  Home and End keys, including wrapping across line ends.

All coordinates are grapheme based. The text area size passed in here must
already exclude the status and message bars.
"""

from enum import Enum
from typing import NamedTuple, Optional, Sequence

from wcwidth import wcswidth

from shadovi.core.Document import Document, Position
from shadovi.core.Line import DEFAULT_TAB_WIDTH


class ViewportSize(NamedTuple):
    width: int
    height: int


class ScrollOffset(NamedTuple):
    column: int = 0
    row: int = 0


class Motion(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"


def grapheme_width(grapheme: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Terminal cells used by one grapheme; non-printables count as one cell."""
    if grapheme == "\t":
        return tab_width
    width = wcswidth(grapheme)
    return width if width >= 0 else 1


def display_width(graphemes: Sequence[str], tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    return sum(grapheme_width(g, tab_width) for g in graphemes)


def scroll(
    cursor: Position,
    size: ViewportSize,
    offset: ScrollOffset,
    document: Optional[Document] = None,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> ScrollOffset:
    """Returns the offset that keeps `cursor` inside a window of `size`.

    The offset only moves when the cursor leaves the window, and then just
    far enough to bring it back to the nearest edge. With a `document` the
    right edge is measured in display cells, as `screen_cursor` does, so
    tabs and wide glyphs cannot push the cursor out of view.
    """
    row, column = offset.row, offset.column
    height, width = max(1, size.height), max(1, size.width)

    if cursor.line < row:
        row = cursor.line
    elif cursor.line >= row + height:
        row = cursor.line - height + 1

    line = document.line_at(cursor.line) if document is not None else None
    if cursor.column < column:
        column = cursor.column
    elif line is None:
        if cursor.column >= column + width:
            column = cursor.column - width + 1
    else:
        graphemes = line.graphemes
        while column < cursor.column and (
            display_width(graphemes[column:cursor.column], tab_width) >= width
        ):
            column += 1

    return ScrollOffset(column=column, row=row)


def screen_cursor(
    document: Document,
    cursor: Position,
    offset: ScrollOffset,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> tuple[int, int]:
    """Screen ``(row, col)`` of `cursor` relative to the top-left of the text area."""
    row = cursor.line - offset.row
    line = document.line_at(cursor.line)
    if line is None or cursor.column <= offset.column:
        return row, 0
    visible = line.graphemes[offset.column:cursor.column]
    return row, display_width(visible, tab_width)


def _line_length(document: Document, index: int) -> int:
    line = document.line_at(index)
    return line.length if line is not None else 0


def move_cursor(
    document: Document, cursor: Position, motion: Motion, page_height: int
) -> Position:
    """Applies `motion` to `cursor` and returns the new position.

    The cursor may go down to ``len(document)``, the virtual line after the
    end of the text. Left at column 0 wraps to the end of the previous line,
    Right at the end of a line wraps to column 0 of the line below. The
    column is finally clamped to the length of the target line.
    """
    line, column = cursor.line, cursor.column
    last_line = len(document)
    current_length = _line_length(document, line)

    if motion == Motion.UP:
        line = max(0, line - 1)
    elif motion == Motion.DOWN:
        if line < last_line:
            line += 1
    elif motion == Motion.LEFT:
        if column > 0:
            column -= 1
        elif line > 0:
            line -= 1
            column = _line_length(document, line)
    elif motion == Motion.RIGHT:
        if column < current_length:
            column += 1
        elif line < last_line:
            line += 1
            column = 0
    elif motion == Motion.PAGE_UP:
        line = line - page_height if line > page_height else 0
    elif motion == Motion.PAGE_DOWN:
        line = line + page_height if line + page_height < last_line else last_line
    elif motion == Motion.HOME:
        column = 0
    elif motion == Motion.END:
        column = current_length

    column = min(column, _line_length(document, line))
    return Position(line=line, column=column)
