# tests/test_core/test_highlighter.py
"""Unit tests for the syntax classifier in `shadovi.core.Highlighter`.

Each recognizer is exercised on its own and in the priority order used by
`classify`: character literal, comment, string, number, primary keyword.
"""

import pytest

from shadovi.core.Highlighter import HighlightingOptions, HighlightType, classify
from shadovi.core.Line import split_graphemes

H = HighlightType
ALL = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    primary_keywords=("fn", "let"),
)


def kinds(text: str, options: HighlightingOptions = ALL) -> list[HighlightType]:
    return classify(split_graphemes(text), options)


def test_no_options_highlights_nothing() -> None:
    assert kinds("let x = 1; // hi", HighlightingOptions()) == [H.NONE] * 16


def test_number_after_whitespace_and_digits() -> None:
    assert kinds("x 12.5") == [H.NONE, H.NONE, H.NUMBER, H.NUMBER, H.NUMBER, H.NUMBER]


def test_number_glued_to_letters_is_not_highlighted() -> None:
    assert kinds("a1") == [H.NONE, H.NONE]


def test_number_at_start_of_line() -> None:
    assert kinds("7") == [H.NUMBER]


def test_string_includes_quotes() -> None:
    assert kinds('"ab" c') == [H.STRING] * 4 + [H.NONE, H.NONE]


def test_unterminated_string_runs_to_end_of_line() -> None:
    assert kinds('x "abc') == [H.NONE, H.NONE] + [H.STRING] * 4


def test_comment_runs_to_end_of_line() -> None:
    assert kinds("1 // 2") == [H.NUMBER, H.NONE] + [H.COMMENT] * 4


def test_single_slash_is_not_a_comment() -> None:
    assert kinds("/x") == [H.NONE, H.NONE]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("'a'", [H.CHARACTER] * 3),
        ("'\\n'", [H.CHARACTER] * 4),
        ("'ab", [H.NONE] * 3),
        ("'", [H.NONE]),
    ],
)
def test_character_literals(text: str, expected: list[HighlightType]) -> None:
    assert kinds(text) == expected


def test_character_literal_beats_string() -> None:
    assert kinds("'\"'") == [H.CHARACTER] * 3


def test_comment_beats_string_and_keyword() -> None:
    assert kinds('//"let"') == [H.COMMENT] * 7


def test_keywords_have_no_word_boundary_check() -> None:
    assert kinds("letter") == [H.KEYWORD_PRIMARY] * 3 + [H.NONE] * 3


def test_keywords_are_case_sensitive() -> None:
    assert kinds("LET") == [H.NONE] * 3


def test_output_length_matches_input_for_wide_graphemes() -> None:
    graphemes = split_graphemes('日本 "é"')
    assert len(classify(graphemes, ALL)) == len(graphemes)
