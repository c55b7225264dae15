"""Registry of displayed pages and their editor interaction handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
import threading

from docnav.core.logging import Logger, get_logger

from .document import Doc, Link
from .links import LinkIndex
from .position import decode

__all__ = [
    "DocumentManager",
    "NavigationCommand",
    "Overlay",
    "OverlayDelta",
    "PageEntry",
]


@dataclass(frozen=True, slots=True)
class NavigationCommand:
    """Instruction for the host to open ``path`` and move the cursor.

    Either ``line``/``column`` or ``anchor`` is set; with neither the host
    opens ``path`` at its top.
    """

    path: str
    line: int | None = None
    column: int | None = None
    anchor: str | None = None


@dataclass(frozen=True, slots=True)
class Overlay:
    """A single-line emphasis region, ``length`` in bytes.

    ``group`` is the highlight group the host applies to the region.
    """

    line: int
    column: int
    length: int
    group: str = "Underlined"


@dataclass(frozen=True, slots=True)
class OverlayDelta:
    """Overlay to remove and overlay to add after a hover change."""

    clear: Overlay | None
    add: Overlay | None


@dataclass(slots=True)
class PageEntry:
    """Auxiliary data kept for one displayed page."""

    name: str
    doc: Doc
    links: LinkIndex
    line_widths: tuple[int, ...] = ()
    current_link: Link | None = None
    overlay: Overlay | None = field(default=None)


class DocumentManager:
    """Map editor buffers to the pages displayed in them.

    One lock guards the registry and the per-entry hover state. It is never
    held while a page is built or a package is loaded; callers finish the
    :class:`Doc` first and then call :meth:`display`.
    """

    def __init__(
        self,
        *,
        hover_group: str = "Underlined",
        logger: Logger | None = None,
    ) -> None:
        self.hover_group = hover_group
        self._entries: dict[int, PageEntry] = {}
        self._lock = threading.Lock()
        self._logger = logger or get_logger(__name__, component="page-manager")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def display(self, buffer: int, name: str, doc: Doc) -> None:
        """Publish ``doc`` for ``buffer``, replacing any previous page."""

        widths = tuple(len(line.encode("utf-8")) for line in doc.lines())
        entry = PageEntry(
            name=name,
            doc=doc,
            links=LinkIndex(doc.links),
            line_widths=widths,
        )
        with self._lock:
            self._entries[buffer] = entry
        self._logger.debug(
            "page-displayed",
            buffer=buffer,
            name=name,
            links=len(doc.links),
        )

    def close(self, buffer: int) -> None:
        """Forget ``buffer``; unknown buffers are ignored."""

        with self._lock:
            removed = self._entries.pop(buffer, None)
        if removed is not None:
            self._logger.debug("page-closed", buffer=buffer, name=removed.name)

    def entry(self, buffer: int) -> PageEntry | None:
        with self._lock:
            return self._entries.get(buffer)

    def __contains__(self, buffer: object) -> bool:
        with self._lock:
            return buffer in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def activate(
        self, buffer: int, line: int, column: int
    ) -> NavigationCommand | None:
        """Return where activating ``(line, column)`` should navigate."""

        entry = self.entry(buffer)
        if entry is None:
            return None
        link = entry.links.lookup(line, column)
        if link is None:
            return None
        path = entry.doc.path_of(link) or entry.name
        if link.address is not None:
            target_line, target_column = decode(link.address)
            command = NavigationCommand(path, target_line, target_column)
        else:
            command = NavigationCommand(path, anchor=entry.doc.anchor_of(link))
        self._logger.debug(
            "link-activated",
            buffer=buffer,
            path=command.path,
            anchor=command.anchor,
        )
        return command

    def resolve_anchor(self, buffer: int, name: str) -> tuple[int, int] | None:
        """Return the ``(line, column)`` of anchor ``name`` on ``buffer``."""

        entry = self.entry(buffer)
        if entry is None:
            return None
        address = entry.doc.anchors.get(name)
        if address is None:
            return None
        return decode(address)

    def hover(self, buffer: int, line: int, column: int) -> OverlayDelta | None:
        """Track the link under the cursor, returning an overlay change.

        ``None`` means nothing changed since the previous call.
        """

        entry = self.entry(buffer)
        if entry is None:
            return None
        link = entry.links.lookup(line, column)
        overlay = None
        if link is not None:
            overlay = _overlay_for(entry.line_widths, link, self.hover_group)
        with self._lock:
            if self._entries.get(buffer) is not entry:
                return None
            if link is entry.current_link:
                return None
            previous = entry.overlay
            entry.current_link = link
            entry.overlay = overlay
        return OverlayDelta(clear=previous, add=overlay)

    def leave(self, buffer: int) -> OverlayDelta | None:
        """Drop the hover overlay when ``buffer`` leaves its window."""

        with self._lock:
            entry = self._entries.get(buffer)
            if entry is None or entry.overlay is None:
                return None
            previous = entry.overlay
            entry.current_link = None
            entry.overlay = None
        return OverlayDelta(clear=previous, add=None)


def _overlay_for(widths: tuple[int, ...], link: Link, group: str) -> Overlay:
    start_line, start_column = decode(link.start)
    end_line, end_column = decode(link.end)
    if end_line == start_line:
        length = end_column - start_column
    else:
        width = widths[start_line - 1] if start_line <= len(widths) else 0
        length = width + 1 - start_column
    return Overlay(start_line, start_column, length, group)
