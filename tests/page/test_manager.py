"""Tests for :mod:`docnav.page.manager`."""

from __future__ import annotations

import pytest
import structlog
from structlog.testing import capture_logs

from docnav.page.document import Doc, DocumentBuilder
from docnav.page.manager import DocumentManager, NavigationCommand, Overlay


@pytest.fixture()
def doc() -> Doc:
    builder = DocumentBuilder()
    builder.write("see ")
    builder.write_link_anchor("Println", "godoc://fmt", "Println")
    builder.write(" and ")
    builder.write_link("T", "/src/t.go", 3, 6)
    builder.write("\n")
    builder.add_anchor("T")
    builder.write_link_anchor("T", "", "T")
    return builder.build()


@pytest.fixture()
def manager(doc: Doc) -> DocumentManager:
    manager = DocumentManager(logger=structlog.get_logger("test"))
    manager.display(1, "godoc://example.com/t", doc)
    return manager


def test_activate_anchor_link(manager: DocumentManager) -> None:
    assert manager.activate(1, 1, 5) == NavigationCommand(
        "godoc://fmt", anchor="Println"
    )


def test_activate_file_link(manager: DocumentManager) -> None:
    assert manager.activate(1, 1, 17) == NavigationCommand("/src/t.go", 3, 6)


def test_activate_same_page_link_uses_page_name(manager: DocumentManager) -> None:
    command = manager.activate(1, 2, 1)

    assert command == NavigationCommand("godoc://example.com/t", anchor="T")
    assert manager.resolve_anchor(1, "T") == (2, 1)


def test_activate_outside_links(manager: DocumentManager) -> None:
    assert manager.activate(1, 1, 1) is None
    assert manager.activate(2, 1, 5) is None


def test_activate_logs_navigation(manager: DocumentManager) -> None:
    with capture_logs() as logs:
        manager.activate(1, 1, 5)

    assert any(
        entry["event"] == "link-activated" and entry["path"] == "godoc://fmt"
        for entry in logs
    )


def test_hover_moves_overlay_between_links(manager: DocumentManager) -> None:
    first = manager.hover(1, 1, 5)
    assert first is not None
    assert first.clear is None
    assert first.add == Overlay(1, 5, 7)

    assert manager.hover(1, 1, 8) is None

    second = manager.hover(1, 1, 17)
    assert second is not None
    assert second.clear == Overlay(1, 5, 7)
    assert second.add == Overlay(1, 17, 1)

    off = manager.hover(1, 1, 2)
    assert off is not None
    assert off.clear == Overlay(1, 17, 1)
    assert off.add is None


def test_leave_clears_overlay(manager: DocumentManager) -> None:
    manager.hover(1, 1, 5)

    delta = manager.leave(1)

    assert delta is not None
    assert delta.clear == Overlay(1, 5, 7)
    assert manager.leave(1) is None
    assert manager.entry(1).current_link is None


def test_display_replaces_and_close_forgets(manager: DocumentManager, doc: Doc) -> None:
    manager.hover(1, 1, 5)
    manager.display(1, "godoc://other", doc)

    assert manager.entry(1).name == "godoc://other"
    assert manager.entry(1).overlay is None
    assert len(manager) == 1

    manager.close(1)
    manager.close(1)
    assert 1 not in manager
    assert manager.resolve_anchor(1, "T") is None


def test_overlay_carries_hover_group_and_stops_at_line_end() -> None:
    builder = DocumentBuilder()
    builder.push_link_anchor("", "Wrapped")
    builder.write("ab\ncd")
    builder.pop_link()
    manager = DocumentManager(hover_group="Search", logger=structlog.get_logger("test"))
    manager.display(7, "godoc://wrapped", builder.build())

    delta = manager.hover(7, 1, 2)

    assert delta is not None
    assert delta.add == Overlay(1, 1, 2, "Search")


def test_hover_discards_result_for_replaced_page(
    manager: DocumentManager, doc: Doc
) -> None:
    entry = manager.entry(1)
    links = entry.links

    class _ReplacingIndex:
        def lookup(self, line: int, column: int):
            manager.display(1, "godoc://newer", doc)
            return links.lookup(line, column)

    entry.links = _ReplacingIndex()

    assert manager.hover(1, 1, 5) is None
    assert manager.entry(1).name == "godoc://newer"
    assert manager.entry(1).overlay is None
