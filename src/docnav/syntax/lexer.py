"""Tokenizer for printed declarations.

Only the distinctions the page merger needs are made: identifiers are told
apart from keywords, and comments, string and character literals are kept
whole so identifiers inside them are never counted.

Example:
    >>> [t.text for t in tokenize("func F() int") if t.kind is TokenKind.IDENT]
    ['F', 'int']
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
import re

__all__ = ["KEYWORDS", "Token", "TokenKind", "identifiers", "tokenize"]

KEYWORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)


class TokenKind(StrEnum):
    IDENT = "identifier"
    KEYWORD = "keyword"
    COMMENT = "comment"
    STRING = "string"
    CHAR = "char"
    NUMBER = "number"
    OPERATOR = "operator"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexeme and its character offset in the scanned text."""

    kind: TokenKind
    offset: int
    text: str

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


_PATTERN = re.compile(
    r"""
    (?P<comment>//[^\n]*|/\*.*?\*/)
    |(?P<string>"(?:\\.|[^"\\\n])*"|`[^`]*`)
    |(?P<char>'(?:\\.|[^'\\\n])*')
    |(?P<number>(?:\d|\.\d)(?:[eEpP][+-]|[\w.])*)
    |(?P<word>[^\W\d]\w*)
    |(?P<space>\s+)
    |(?P<operator>\.\.\.|<-|&\^=?|<<=?|>>=?|[-+*/%&|^=!<>:]=|&&|\|\||\+\+|--|.)
    """,
    re.VERBOSE | re.DOTALL,
)


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of ``text`` in order, skipping whitespace."""

    for match in _PATTERN.finditer(text):
        group = match.lastgroup
        value = match.group()
        if group == "space":
            continue
        if group == "word":
            kind = TokenKind.KEYWORD if value in KEYWORDS else TokenKind.IDENT
        elif group == "comment":
            kind = TokenKind.COMMENT
        elif group == "string":
            kind = TokenKind.STRING
        elif group == "char":
            kind = TokenKind.CHAR
        elif group == "number":
            kind = TokenKind.NUMBER
        else:
            kind = TokenKind.OPERATOR
        yield Token(kind, match.start(), value)


def identifiers(text: str) -> list[str]:
    """Return the identifier tokens of ``text``."""

    return [token.text for token in tokenize(text) if token.kind is TokenKind.IDENT]
