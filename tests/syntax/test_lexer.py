"""Tests for :mod:`docnav.syntax.lexer`."""

from __future__ import annotations

from docnav.syntax.lexer import TokenKind, identifiers, tokenize


def test_keywords_are_not_identifiers() -> None:
    tokens = list(tokenize("func F() int"))

    assert [t.kind for t in tokens][:2] == [TokenKind.KEYWORD, TokenKind.IDENT]
    assert identifiers("func F() int") == ["F", "int"]


def test_comments_and_literals_hide_words() -> None:
    text = 'x int = "a b" + `c\nd` // note y\n/* z */'

    assert identifiers(text) == ["x", "int"]
    kinds = [t.kind for t in tokenize(text)]
    assert kinds.count(TokenKind.STRING) == 2
    assert kinds.count(TokenKind.COMMENT) == 2


def test_numbers_swallow_hex_digits() -> None:
    tokens = list(tokenize("0x1F + 1e-9 + .5i"))

    assert [t.text for t in tokens if t.kind is TokenKind.NUMBER] == [
        "0x1F",
        "1e-9",
        ".5i",
    ]
    assert identifiers("0x1F") == []


def test_char_literal() -> None:
    assert [t.kind for t in tokenize("'x'")] == [TokenKind.CHAR]


def test_offsets_cover_source() -> None:
    text = "a <-chan b"
    tokens = list(tokenize(text))

    assert [(t.text, t.offset) for t in tokens] == [
        ("a", 0),
        ("<-", 2),
        ("chan", 4),
        ("b", 9),
    ]
    assert tokens[-1].end == len(text)


def test_unicode_identifiers() -> None:
    assert identifiers("var π = 3") == ["π"]
