"""Append-only page construction and the immutable :class:`Doc` it yields.

:class:`DocumentBuilder` tracks the write position incrementally so every
scope push/pop can be stamped with an address without rescanning the text.

Example:
    >>> builder = DocumentBuilder()
    >>> builder.write("see ")
    >>> with builder.link_anchor("godoc://fmt", "Println"):
    ...     builder.write("fmt.Println")
    >>> doc = builder.build()
    >>> doc.links[0].start, doc.links[0].end
    (10005, 10016)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Mapping

from .errors import ScopeError
from .position import decode, encode
from .scopes import Fold, FoldTracker, ScopeRange, ScopeStack
from .strings import StringTable

__all__ = [
    "Doc",
    "DocumentBuilder",
    "Highlight",
    "LineSpan",
    "Link",
    "LinkTarget",
]


@dataclass(frozen=True, slots=True)
class LinkTarget:
    """Where a link goes; ``path`` and ``anchor`` are string-table indexes."""

    path: int
    address: int | None = None
    anchor: int | None = None


@dataclass(frozen=True, slots=True)
class Link:
    """A clickable span of page text.

    ``address`` is a concrete position in the target file; ``anchor`` names a
    jump target on the target page. A link with neither opens the target page
    at its top.
    """

    start: int
    end: int
    path: int
    address: int | None = None
    anchor: int | None = None


@dataclass(frozen=True, slots=True)
class Highlight:
    """A presentation range tagged with an editor highlight group."""

    start: int
    end: int
    group: str


@dataclass(frozen=True, slots=True)
class LineSpan:
    """Portion of a highlight on a single line, end column exclusive."""

    line: int
    start_column: int
    end_column: int
    group: str


@dataclass(frozen=True, slots=True)
class Doc:
    """A finished page: text plus its navigation and presentation overlay."""

    text: str
    anchors: Mapping[str, int]
    links: tuple[Link, ...]
    highlights: tuple[Highlight, ...]
    folds: tuple[Fold, ...]
    strings: tuple[str, ...]

    def lines(self) -> list[str]:
        """Return the page text split into lines without terminators."""

        return self.text.split("\n")

    def path_of(self, link: Link) -> str:
        return self.strings[link.path]

    def anchor_of(self, link: Link) -> str | None:
        if link.anchor is None:
            return None
        return self.strings[link.anchor]

    def highlight_spans(self) -> Iterator[LineSpan]:
        """Yield highlights split at line boundaries.

        Columns are byte based like every other page address, so callers
        slicing ``str`` lines should slice the UTF-8 encoding.
        """

        widths = [len(line.encode("utf-8")) for line in self.lines()]
        for highlight in self.highlights:
            start_line, start_column = decode(highlight.start)
            end_line, end_column = decode(highlight.end)
            line = start_line
            column = start_column
            while line < end_line:
                line_end = widths[line - 1] + 1 if line <= len(widths) else 1
                if line_end > column:
                    yield LineSpan(line, column, line_end, highlight.group)
                line += 1
                column = 1
            if end_column > column:
                yield LineSpan(line, column, end_column, highlight.group)


class DocumentBuilder:
    """Mutable writer that assembles a :class:`Doc`.

    Highlight and link scopes are tracked with :class:`ScopeStack`; folds with
    :class:`FoldTracker`. ``build`` refuses to finish while any scope is open.
    """

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._line = 1
        self._column = 1
        self._highlight_stack: ScopeStack[str] = ScopeStack()
        self._link_stack: ScopeStack[LinkTarget] = ScopeStack()
        self._highlights: list[Highlight] = []
        self._links: list[Link] = []
        self._folds = FoldTracker()
        self._anchors: dict[str, int] = {}
        self.strings = StringTable()

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def write(self, text: str) -> None:
        """Append ``text`` and advance the tracked position."""

        if not text:
            return
        self._chunks.append(text)
        newlines = text.count("\n")
        if newlines:
            self._line += newlines
            tail = text[text.rindex("\n") + 1 :]
            self._column = len(tail.encode("utf-8")) + 1
        else:
            self._column += len(text.encode("utf-8"))

    def position(self) -> int:
        """Return the address the next written byte will occupy."""

        return encode(self._line, self._column)

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    # ------------------------------------------------------------------
    # Highlights
    # ------------------------------------------------------------------

    def push_highlight(self, group: str) -> None:
        self._highlight_stack, emitted = self._highlight_stack.push(
            self.position(), group
        )
        self._record_highlights(emitted)

    def pop_highlight(self) -> None:
        self._highlight_stack, emitted = self._highlight_stack.pop(
            self.position()
        )
        self._record_highlights(emitted)

    @contextmanager
    def highlight(self, group: str) -> Iterator[None]:
        self.push_highlight(group)
        yield
        self.pop_highlight()

    def _record_highlights(self, emitted: tuple[ScopeRange[str], ...]) -> None:
        for scope in emitted:
            self._highlights.append(Highlight(scope.start, scope.end, scope.value))

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def push_link(self, path: str, address: int | None = None) -> None:
        """Open a link to ``path``, optionally at a concrete ``address``."""

        self._push_target(LinkTarget(self.strings.intern(path), address=address))

    def push_link_anchor(self, path: str, anchor: str) -> None:
        """Open a link to the named ``anchor`` on the page at ``path``."""

        target = LinkTarget(
            self.strings.intern(path),
            anchor=self.strings.intern(anchor) if anchor else None,
        )
        self._push_target(target)

    def pop_link(self) -> None:
        self._link_stack, emitted = self._link_stack.pop(self.position())
        self._record_links(emitted)

    @contextmanager
    def link(self, path: str, address: int | None = None) -> Iterator[None]:
        self.push_link(path, address)
        yield
        self.pop_link()

    @contextmanager
    def link_anchor(self, path: str, anchor: str) -> Iterator[None]:
        self.push_link_anchor(path, anchor)
        yield
        self.pop_link()

    def write_link(self, text: str, path: str, line: int, column: int) -> None:
        """Write ``text`` linked to ``(line, column)`` in the file ``path``."""

        with self.link(path, encode(line, column)):
            self.write(text)

    def write_link_anchor(self, text: str, path: str, anchor: str) -> None:
        """Write ``text`` linked to ``anchor`` on the page ``path``."""

        with self.link_anchor(path, anchor):
            self.write(text)

    def _push_target(self, target: LinkTarget) -> None:
        self._link_stack, emitted = self._link_stack.push(self.position(), target)
        self._record_links(emitted)

    def _record_links(self, emitted: tuple[ScopeRange[LinkTarget], ...]) -> None:
        for scope in emitted:
            target = scope.value
            self._links.append(
                Link(
                    scope.start,
                    scope.end,
                    target.path,
                    address=target.address,
                    anchor=target.anchor,
                )
            )

    # ------------------------------------------------------------------
    # Anchors and folds
    # ------------------------------------------------------------------

    def add_anchor(self, name: str) -> None:
        """Register ``name`` at the current position; the first one wins."""

        self._anchors.setdefault(name, self.position())

    def push_fold(self) -> None:
        self._folds.push(self._line)

    def pop_fold(self) -> None:
        self._folds.pop(self.position())

    @contextmanager
    def fold(self) -> Iterator[None]:
        self.push_fold()
        yield
        self.pop_fold()

    # ------------------------------------------------------------------
    # Finish
    # ------------------------------------------------------------------

    def build(self) -> Doc:
        """Return the finished :class:`Doc`.

        Raises:
            ScopeError: If a highlight, link, or fold scope is still open.
        """

        if self._highlight_stack or self._link_stack or self._folds.depth:
            raise ScopeError(
                "unbalanced scopes: "
                f"highlights={len(self._highlight_stack)} "
                f"links={len(self._link_stack)} folds={self._folds.depth}"
            )
        return Doc(
            text="".join(self._chunks),
            anchors=dict(self._anchors),
            links=tuple(self._links),
            highlights=tuple(self._highlights),
            folds=self._folds.folds,
            strings=self.strings.freeze(),
        )
