# shadovi/core/Line.py
"""shadovi.core.Line
===================

One line of text in a `Document`.

All positions handled by a `Line` are grapheme indices: the payload is
segmented into extended grapheme clusters (UAX #29) with the `regex`
library's ``\\X`` pattern, so a user-perceived character such as ``"é"``
written as ``e`` + combining acute, or a flag emoji, counts as one column
for editing, searching and rendering.

A line also carries its highlighting: one `HighlightType` per grapheme,
computed lazily by `refresh_highlighting` and marked stale by every edit.
"""

from enum import Enum
from typing import NamedTuple, Optional

import regex

from shadovi.core.Highlighter import HighlightingOptions, HighlightType, classify

_GRAPHEME_RE = regex.compile(r"\X")

DEFAULT_TAB_WIDTH = 2


def split_graphemes(text: str) -> list[str]:
    """Splits `text` into extended grapheme clusters."""
    return _GRAPHEME_RE.findall(text)


class SearchDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class StyleRun(NamedTuple):
    """A piece of rendered text drawn in a single highlight style.

    `Line.render` always terminates its output with ``StyleRun("", NONE)``,
    the marker that resets the terminal colour after the line.
    """

    text: str
    style: HighlightType


class Line:
    """Grapheme-indexed line of text with lazily computed highlighting.

    Attributes:
        string (str): The payload.
        highlighting (list[HighlightType]): Per-grapheme categories from the
            last highlight pass. Empty until the line is highlighted.
    """

    def __init__(self, text: str = "") -> None:
        self.string: str = text
        self._graphemes: list[str] = split_graphemes(text)
        self.highlighting: list[HighlightType] = []
        self._stale: bool = True
        self._highlighted_word: Optional[str] = None
        self._highlighted_options: Optional[HighlightingOptions] = None

    def __repr__(self) -> str:
        return f"Line({self.string!r})"

    def __len__(self) -> int:
        return len(self._graphemes)

    def __str__(self) -> str:
        return self.string

    @property
    def length(self) -> int:
        return len(self._graphemes)

    @property
    def graphemes(self) -> list[str]:
        return list(self._graphemes)

    @property
    def is_stale(self) -> bool:
        return self._stale

    def is_empty(self) -> bool:
        return not self._graphemes

    def _set_string(self, text: str) -> None:
        # Re-segmenting keeps the count exact when an edit makes two
        # clusters merge (e.g. a combining mark typed after a letter).
        self.string = text
        self._graphemes = split_graphemes(text)
        self._stale = True

    # --- Editing ---
    def insert(self, at: int, ch: str) -> None:
        """Inserts `ch` before grapheme `at`; appends when `at` is past the end."""
        if at >= self.length:
            self._set_string(self.string + ch)
            return
        at = max(0, at)
        self._set_string(
            "".join(self._graphemes[:at]) + ch + "".join(self._graphemes[at:])
        )

    def delete(self, at: int) -> bool:
        """Removes grapheme `at`. Returns False when `at` is out of range."""
        if at < 0 or at >= self.length:
            return False
        self._set_string(
            "".join(self._graphemes[:at]) + "".join(self._graphemes[at + 1:])
        )
        return True

    def append(self, other: "Line") -> None:
        self._set_string(self.string + other.string)

    def split(self, at: int) -> "Line":
        """Keeps graphemes ``[0, at)`` and returns a new Line with the rest."""
        at = max(0, min(at, self.length))
        tail = Line("".join(self._graphemes[at:]))
        self._set_string("".join(self._graphemes[:at]))
        return tail

    def as_storage_bytes(self, encoding: str = "utf-8") -> bytes:
        return self.string.encode(encoding, errors="replace")

    # --- Search ---
    def find(
        self, query: str, at: int, direction: SearchDirection = SearchDirection.FORWARD
    ) -> Optional[int]:
        """Finds `query` in this line and returns the grapheme index of the match.

        The searched window is ``[at, len)`` going forward and ``[0, at)``
        going backward; forward returns the lowest match, backward the
        highest. Occurrences that start or end inside a grapheme cluster are
        skipped.

        Returns:
            The grapheme index of the match, or None when there is none, when
            `query` is empty, or when `at` is past the end of the line.
        """
        if not query or at < 0 or at > self.length:
            return None

        if direction == SearchDirection.FORWARD:
            start, end = at, self.length
        else:
            start, end = 0, at

        window_graphemes = self._graphemes[start:end]
        window = "".join(window_graphemes)

        boundaries: dict[int, int] = {}
        offset = 0
        for grapheme_idx, grapheme in enumerate(window_graphemes):
            boundaries[offset] = grapheme_idx
            offset += len(grapheme)
        boundaries[offset] = len(window_graphemes)

        if direction == SearchDirection.FORWARD:
            pos = window.find(query)
            while pos != -1:
                if pos in boundaries and pos + len(query) in boundaries:
                    return start + boundaries[pos]
                pos = window.find(query, pos + 1)
        else:
            pos = window.rfind(query)
            while pos != -1:
                if pos in boundaries and pos + len(query) in boundaries:
                    return start + boundaries[pos]
                pos = window.rfind(query, 0, pos + len(query) - 1)
        return None

    # --- Highlighting ---
    def highlight_match(self, word: Optional[str]) -> None:
        """Overlays `MATCH` on every non-overlapping occurrence of `word`."""
        if not word:
            return
        word_len = len(split_graphemes(word))
        if len(self.highlighting) != self.length:
            self.highlighting = [HighlightType.NONE] * self.length

        idx = 0
        while True:
            found = self.find(word, idx, SearchDirection.FORWARD)
            if found is None:
                break
            next_idx = min(found + word_len, self.length)
            for i in range(found, next_idx):
                self.highlighting[i] = HighlightType.MATCH
            idx = next_idx

    def highlight(self, options: HighlightingOptions, word: Optional[str] = None) -> None:
        """Recomputes the highlighting of the whole line."""
        self.highlighting = classify(self._graphemes, options)
        self.highlight_match(word)
        self._stale = False
        self._highlighted_word = word
        self._highlighted_options = options

    def refresh_highlighting(
        self, options: HighlightingOptions, word: Optional[str] = None
    ) -> bool:
        """Highlights the line only if it changed since the last pass.

        Returns:
            True when a highlight pass was performed.
        """
        if (
            not self._stale
            and word == self._highlighted_word
            and options == self._highlighted_options
        ):
            return False
        self.highlight(options, word)
        return True

    # --- Rendering ---
    def render(
        self, start: int, end: int, tab_width: int = DEFAULT_TAB_WIDTH
    ) -> list[StyleRun]:
        """Renders graphemes ``[start, min(end, len))`` as style runs.

        A new run starts only where the category changes (the initial
        category is NONE). Tabs expand to `tab_width` spaces. The result
        always ends with the reset marker ``StyleRun("", HighlightType.NONE)``.
        """
        end = min(end, self.length)
        start = max(0, min(start, end))

        runs: list[StyleRun] = []
        current = HighlightType.NONE
        chunk: list[str] = []

        for i in range(start, end):
            style = self.highlighting[i] if i < len(self.highlighting) else HighlightType.NONE
            if style != current:
                if chunk:
                    runs.append(StyleRun("".join(chunk), current))
                    chunk = []
                current = style
            grapheme = self._graphemes[i]
            chunk.append(" " * tab_width if grapheme == "\t" else grapheme)

        if chunk:
            runs.append(StyleRun("".join(chunk), current))
        runs.append(StyleRun("", HighlightType.NONE))
        return runs
