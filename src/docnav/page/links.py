"""Point lookup from a cursor position to the link under it."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable

from .document import Link
from .position import decode, encode

__all__ = ["LinkIndex"]


class LinkIndex:
    """Sorted, immutable view over a page's links.

    Links are ordered by ``end``; since link ranges never overlap, the first
    link ending after a position is the only candidate to contain it.

    Example:
        >>> index = LinkIndex([Link(10005, 10010, 0)])
        >>> index.lookup(1, 5) is not None
        True
        >>> index.lookup(1, 10) is None
        True
    """

    __slots__ = ("_ends", "_links")

    def __init__(self, links: Iterable[Link]) -> None:
        self._links = tuple(sorted(links, key=lambda link: link.end))
        self._ends = [link.end for link in self._links]

    def lookup(self, line: int, column: int) -> Link | None:
        """Return the link covering ``(line, column)`` or ``None``."""

        address = encode(line, column)
        index = bisect_right(self._ends, address)
        if index >= len(self._links):
            return None
        link = self._links[index]
        start_line, _ = decode(link.start)
        if start_line != line or address < link.start:
            return None
        return link

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self):
        return iter(self._links)
