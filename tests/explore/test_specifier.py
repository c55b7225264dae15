"""Tests for :mod:`docnav.explore.specifier`."""

from __future__ import annotations

from pathlib import Path

import pytest

from docnav.explore.specifier import (
    PageSpec,
    format_specifier,
    parent_specifier,
    parse_specifier,
    resolve_package_spec,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("godoc://net/http", PageSpec("net/http")),
        ("godoc://net/http#Client", PageSpec("net/http", "Client")),
        ("godoc://net/http#Client.Do", PageSpec("net/http", "Client", "Do")),
        ("godoc://", PageSpec()),
        ("fmt", PageSpec("fmt")),
    ],
)
def test_parse_specifier(text: str, expected: PageSpec) -> None:
    assert parse_specifier(text) == expected


def test_custom_prefix_round_trip() -> None:
    spec = parse_specifier("doc:io#Reader.Read", "doc:")

    assert spec.fragment == "Reader.Read"
    assert format_specifier(spec, "doc:") == "doc:io#Reader.Read"
    assert format_specifier(PageSpec("io"), "doc:") == "doc:io"


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        (PageSpec("net/http", "Client", "Do"), PageSpec("net/http", "Client")),
        (PageSpec("net/http", "Client"), PageSpec("net/http")),
        (PageSpec("net/http"), PageSpec("net")),
        (PageSpec("net"), PageSpec()),
        (PageSpec(), PageSpec()),
    ],
)
def test_parent_specifier(spec: PageSpec, expected: PageSpec) -> None:
    assert parent_specifier(spec) == expected


def test_root_page_is_empty_import_path() -> None:
    assert PageSpec().is_root
    assert not PageSpec("fmt").is_root


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    (tmp_path / "example.com" / "demo" / "sub").mkdir(parents=True)
    return tmp_path


def test_relative_directory_maps_to_import_path(root: Path) -> None:
    cwd = root / "example.com" / "demo"

    assert resolve_package_spec("./sub", cwd=cwd, roots=[root]) == (
        "example.com/demo/sub"
    )
    assert resolve_package_spec("..", cwd=cwd, roots=[root]) == "example.com"
    assert resolve_package_spec(".", cwd=root, roots=[root]) == ""


def test_go_file_maps_to_its_package(root: Path) -> None:
    cwd = root / "example.com" / "demo"

    assert resolve_package_spec("demo.go", cwd=cwd, roots=[root]) == (
        "example.com/demo"
    )


def test_absolute_and_named_specs(root: Path) -> None:
    imports = {"yaml": "gopkg.in/yaml.v2"}

    assert resolve_package_spec("/example.com/x/", cwd=root, roots=[root]) == (
        "example.com/x"
    )
    assert resolve_package_spec("yaml", cwd=root, roots=[], imports=imports) == (
        "gopkg.in/yaml.v2"
    )
    assert resolve_package_spec("fmt", cwd=root, roots=[root]) == "fmt"


def test_relative_directory_outside_roots_is_returned_verbatim(
    root: Path, tmp_path_factory: pytest.TempPathFactory
) -> None:
    elsewhere = tmp_path_factory.mktemp("elsewhere")

    assert resolve_package_spec("./pkg", cwd=elsewhere, roots=[root]) == "./pkg"
