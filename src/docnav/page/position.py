"""Scalar addressing for positions inside a generated page.

A position is folded into one integer so ranges compare with plain ``<``.
Lines and columns are 1-based and columns count UTF-8 bytes, the unit the
editor reports cursor columns in.

Example:
    >>> encode(3, 7)
    30007
    >>> decode(30007)
    (3, 7)
"""

from __future__ import annotations

__all__ = ["COLUMN_SPAN", "decode", "encode"]

# Columns at or beyond this value collide with the next line.
COLUMN_SPAN = 10000


def encode(line: int, column: int) -> int:
    """Return the scalar address for ``(line, column)``."""

    return line * COLUMN_SPAN + column


def decode(address: int) -> tuple[int, int]:
    """Return the ``(line, column)`` pair folded into ``address``."""

    return divmod(address, COLUMN_SPAN)
