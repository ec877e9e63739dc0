# shadovi/core/Highlighter.py
"""shadovi.core.Highlighter
==========================

Per-grapheme syntax classifier used by `Line`.

A line is classified by a single left-to-right scan. At each position the
recognizers below are tried in priority order, the first one that matches
claims a run of graphemes and the scan resumes after that run:

1. character literal  (`'a'`, `'\\n'`)
2. line comment       (`// ...` to end of line)
3. quoted string      (`"..."`, unterminated strings run to end of line)
4. number             (digits and dots, only after a digit, whitespace or BOL)
5. primary keyword    (literal, case-sensitive, no word-boundary check)

Positions no recognizer claims are `HighlightType.NONE`. After the syntax
pass, `Line.highlight_match` paints every occurrence of the active search
word as `HighlightType.MATCH`, overriding the syntax category.

The classifier is stateless and works on lists of grapheme strings, so the
caller owns segmentation (see `shadovi.core.Line.split_graphemes`).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class HighlightType(Enum):
    """Display category of a single grapheme."""

    NONE = "none"
    NUMBER = "number"
    MATCH = "match"
    STRING = "string"
    CHARACTER = "character"
    COMMENT = "comment"
    KEYWORD_PRIMARY = "keyword_primary"


@dataclass(frozen=True)
class HighlightingOptions:
    """Which syntax classes are highlighted for a file type."""

    numbers: bool = False
    strings: bool = False
    characters: bool = False
    comments: bool = False
    primary_keywords: tuple[str, ...] = ()


ASCII_DIGITS = frozenset("0123456789")
ASCII_WHITESPACE = frozenset(" \t\n\r\x0c")


def _char_literal_len(graphemes: Sequence[str], idx: int) -> int:
    if idx + 1 >= len(graphemes):
        return 0
    closing_idx = idx + 3 if graphemes[idx + 1] == "\\" else idx + 2
    if closing_idx < len(graphemes) and graphemes[closing_idx] == "'":
        return closing_idx - idx + 1
    return 0


def _string_len(graphemes: Sequence[str], idx: int) -> int:
    end = idx + 1
    while end < len(graphemes):
        if graphemes[end] == '"':
            return end - idx + 1
        end += 1
    return end - idx


def _number_len(graphemes: Sequence[str], idx: int) -> int:
    if idx > 0:
        prev = graphemes[idx - 1]
        if prev not in ASCII_DIGITS and prev not in ASCII_WHITESPACE:
            return 0
    end = idx + 1
    while end < len(graphemes) and (graphemes[end] in ASCII_DIGITS or graphemes[end] == "."):
        end += 1
    return end - idx


def _keyword_len(graphemes: Sequence[str], idx: int, keywords: Sequence[str]) -> int:
    for word in keywords:
        if not word:
            continue
        end = idx + len(word)
        if end <= len(graphemes) and list(graphemes[idx:end]) == list(word):
            return len(word)
    return 0


def classify(
    graphemes: Sequence[str], options: HighlightingOptions
) -> list[HighlightType]:
    """Assigns a `HighlightType` to every grapheme of a line.

    Args:
        graphemes: The line, already split into extended grapheme clusters.
        options: Which syntax classes to recognise.

    Returns:
        A list with exactly ``len(graphemes)`` entries.
    """
    categories: list[HighlightType] = []
    idx = 0
    length = len(graphemes)

    while idx < length:
        g = graphemes[idx]
        run, kind = 0, HighlightType.NONE

        if options.characters and g == "'":
            run, kind = _char_literal_len(graphemes, idx), HighlightType.CHARACTER
        if not run and options.comments and g == "/" and idx + 1 < length and graphemes[idx + 1] == "/":
            run, kind = length - idx, HighlightType.COMMENT
        if not run and options.strings and g == '"':
            run, kind = _string_len(graphemes, idx), HighlightType.STRING
        if not run and options.numbers and g in ASCII_DIGITS:
            run, kind = _number_len(graphemes, idx), HighlightType.NUMBER
        if not run and options.primary_keywords:
            run, kind = _keyword_len(graphemes, idx, options.primary_keywords), HighlightType.KEYWORD_PRIMARY

        if not run:
            run, kind = 1, HighlightType.NONE

        categories.extend([kind] * run)
        idx += run

    return categories
