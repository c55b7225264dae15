"""Interning table for link target paths and anchor names."""

from __future__ import annotations

from collections.abc import Iterator

__all__ = ["StringTable"]


class StringTable:
    """Append-only table mapping strings to small stable indexes.

    Example:
        >>> table = StringTable()
        >>> table.intern("godoc://fmt")
        0
        >>> table.intern("godoc://fmt")
        0
        >>> table.lookup(0)
        'godoc://fmt'
    """

    __slots__ = ("_index", "_values")

    def __init__(self, values: tuple[str, ...] = ()) -> None:
        self._values: list[str] = []
        self._index: dict[str, int] = {}
        for value in values:
            self.intern(value)

    def intern(self, value: str) -> int:
        """Return the index for ``value``, appending it when new."""

        index = self._index.get(value)
        if index is None:
            index = len(self._values)
            self._values.append(value)
            self._index[value] = index
        return index

    def lookup(self, index: int) -> str:
        """Return the string stored at ``index``."""

        return self._values[index]

    def freeze(self) -> tuple[str, ...]:
        """Return an immutable snapshot of the stored strings."""

        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)
