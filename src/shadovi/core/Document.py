# shadovi/core/Document.py
"""shadovi.core.Document
=======================

The text buffer: an ordered list of `Line` objects plus file metadata.

A `Document` owns the structural edits that cross line boundaries (splitting
a line on Enter, joining two lines on Delete at end of line), the dirty flag
and the conversion between byte streams and lines. Editing never raises: out
of range positions are ignored. Only `load`/`save` can fail, and they fail
with the `OSError` raised by the underlying stream.

Positions are `(line, column)` pairs in grapheme units. ``line`` may equal
``len(document)``, the virtual line after the last one, where typing appends
a new line.
"""

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Optional

import chardet

from shadovi.core.FileType import FileType
from shadovi.core.Line import Line, SearchDirection

logger = logging.getLogger("shadovi")

DEFAULT_ENCODING = "utf-8"
CHARDET_MIN_CONFIDENCE = 0.75


@dataclass
class Position:
    line: int = 0
    column: int = 0


def decode_bytes(raw: bytes) -> tuple[str, str]:
    """Decodes file contents, returning ``(text, encoding_used)``.

    UTF-8 is tried first. Otherwise the chardet guess is used when it is
    confident enough, and latin-1, which accepts any byte, is the last resort.
    """
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig"), "utf-8-sig"
    try:
        return raw.decode(DEFAULT_ENCODING), DEFAULT_ENCODING
    except UnicodeDecodeError:
        logger.debug("Content is not valid UTF-8, asking chardet for an encoding.")

    chardet_result = chardet.detect(raw)
    encoding_guess = chardet_result.get("encoding")
    confidence = chardet_result.get("confidence") or 0.0
    logger.debug(
        f"Chardet detected encoding '{encoding_guess}' with confidence {confidence:.2f}."
    )
    if encoding_guess and confidence >= CHARDET_MIN_CONFIDENCE:
        try:
            return raw.decode(encoding_guess), encoding_guess
        except (LookupError, UnicodeDecodeError) as e:
            logger.warning(f"Decoding with detected encoding '{encoding_guess}' failed: {e}")

    return raw.decode("latin-1"), "latin-1"


class Document:
    """Ordered collection of `Line` objects with file metadata.

    Attributes:
        lines (list[Line]): The buffer; indices are dense.
        file_type (FileType): Name and highlighting options of the content.
        encoding (str): Encoding used to decode the file and to write it back.
        line_ending (str): ``"\\n"`` or ``"\\r\\n"``, as detected on load.
    """

    def __init__(
        self,
        lines: Optional[Iterable[Line]] = None,
        file_name: Optional[str] = None,
        file_type: Optional[FileType] = None,
        config: Optional[dict[str, Any]] = None,
        encoding: str = DEFAULT_ENCODING,
        line_ending: str = "\n",
    ) -> None:
        self.lines: list[Line] = list(lines) if lines is not None else []
        self.config = config
        self._file_name = file_name
        self.file_type: FileType = file_type or FileType.from_file_name(file_name, config)
        self.encoding = encoding
        self.line_ending = line_ending
        self._dirty = False

    @classmethod
    def from_strings(cls, strings: Iterable[str], **kwargs: Any) -> "Document":
        return cls([Line(s) for s in strings], **kwargs)

    @classmethod
    def load(
        cls,
        stream: BinaryIO,
        file_name: Optional[str] = None,
        file_type: Optional[FileType] = None,
        config: Optional[dict[str, Any]] = None,
    ) -> "Document":
        """Reads a whole byte stream into a clean (not dirty) document.

        Lines are split on ``"\\n"`` with a trailing ``"\\r"`` removed; a
        terminator at the very end does not produce an extra empty line.

        Raises:
            OSError: If reading the stream fails.
        """
        text, encoding = decode_bytes(stream.read())
        line_ending = "\r\n" if "\r\n" in text else "\n"

        strings = text.split("\n")
        if strings and strings[-1] == "":
            strings.pop()
        lines = [Line(s[:-1] if s.endswith("\r") else s) for s in strings]

        logger.debug(
            f"Document.load: {len(lines)} lines from '{file_name}' "
            f"(encoding={encoding}, line_ending={line_ending!r})."
        )
        return cls(
            lines,
            file_name=file_name,
            file_type=file_type,
            config=config,
            encoding=encoding,
            line_ending=line_ending,
        )

    def save(self, sink: BinaryIO) -> None:
        """Writes every line followed by the line terminator, then clears dirty.

        Raises:
            OSError: Propagated from the sink; the document stays dirty.
        """
        terminator = self.line_ending.encode(self.encoding, errors="replace")
        for line in self.lines:
            sink.write(line.as_storage_bytes(self.encoding))
            sink.write(terminator)
        self._dirty = False
        logger.debug(f"Document.save: wrote {len(self.lines)} lines to '{self._file_name}'.")

    # --- Metadata ---
    @property
    def file_name(self) -> Optional[str]:
        return self._file_name

    @file_name.setter
    def file_name(self, value: Optional[str]) -> None:
        self._file_name = value
        self.file_type = FileType.from_file_name(value, self.config)
        logger.debug(f"Document renamed to '{value}', file type '{self.file_type.name}'.")

    def __len__(self) -> int:
        return len(self.lines)

    def length(self) -> int:
        return len(self.lines)

    def is_empty(self) -> bool:
        return not self.lines

    def is_dirty(self) -> bool:
        return self._dirty

    def line_at(self, index: int) -> Optional[Line]:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def highlighted_line(self, index: int, word: Optional[str] = None) -> Optional[Line]:
        """Returns line `index` with up-to-date highlighting for `word`."""
        line = self.line_at(index)
        if line is not None:
            line.refresh_highlighting(self.file_type.options, word)
        return line

    # --- Editing ---
    def insert(self, at: Position, ch: str) -> None:
        """Inserts a character; ``"\\n"`` splits the line at `at`."""
        if at.line > len(self.lines):
            return
        if ch == "\n":
            self._insert_newline(at)
        elif at.line == len(self.lines):
            self.lines.append(Line(ch))
        else:
            self.lines[at.line].insert(at.column, ch)
        self._dirty = True

    def _insert_newline(self, at: Position) -> None:
        if at.line == len(self.lines):
            self.lines.append(Line())
            return
        tail = self.lines[at.line].split(at.column)
        self.lines.insert(at.line + 1, tail)

    def delete(self, at: Position) -> None:
        """Deletes the grapheme at `at`, or joins the next line at end of line."""
        if at.line >= len(self.lines):
            return
        line = self.lines[at.line]
        if at.column >= line.length and at.line + 1 < len(self.lines):
            next_line = self.lines.pop(at.line + 1)
            line.append(next_line)
            self._dirty = True
        elif line.delete(at.column):
            self._dirty = True

    # --- Search ---
    def find(
        self,
        query: str,
        at: Position,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> Optional[Position]:
        """Finds `query` starting at `at` and moving in `direction`.

        The starting line is searched from `at.column`; following lines are
        searched whole (from column 0 going forward, from their end going
        backward). The search stops at the document edge without wrapping.
        """
        if at.line >= len(self.lines):
            return None

        if direction == SearchDirection.FORWARD:
            line_indices = range(at.line, len(self.lines))
        else:
            line_indices = range(at.line, -1, -1)

        for index in line_indices:
            line = self.lines[index]
            if index == at.line:
                column = at.column
            elif direction == SearchDirection.FORWARD:
                column = 0
            else:
                column = line.length
            found = line.find(query, column, direction)
            if found is not None:
                return Position(index, found)
        return None
