"""Tests for :mod:`docnav.explore.pages`."""

from __future__ import annotations

from pathlib import Path

import pytest

from docnav.core.config import HighlightSettings, RenderSettings
from docnav.explore.errors import SymbolNotFoundError
from docnav.explore.model import ExampleDoc, PackageDoc
from docnav.explore.pages import PagePrinter, _example_title
from docnav.explore.specifier import PageSpec
from docnav.page.document import Doc, DocumentBuilder, Highlight
from docnav.page.scopes import Fold

DEMO_PAGE = (
    'package demo // import "example.com/demo"\n'
    "\n"
    "    Package demo shows pages.\n"
    "\n"
    "CONSTANTS\n"
    "\n"
    "const Answer = 42\n"
    "\n"
    "    Answer is the answer.\n"
    "\n"
    "FUNCTIONS\n"
    "\n"
    "func Hello() string\n"
    "\n"
    "TYPES\n"
    "\n"
    "type Greeter struct {\n"
    "\tName string\n"
    "}\n"
    "\n"
    "    Greeter greets.\n"
    "\n"
    "func (g *Greeter) Greet()\n"
    "\n"
    "IMPORTS\n"
    "\n"
    "    fmt\n"
    "\n"
    "DIRECTORIES\n"
    "\n"
    "    .. (up a directory)\n"
    "    sub\n"
    "\n"
)


@pytest.fixture()
def printer(
    render_settings: RenderSettings, highlight_settings: HighlightSettings
) -> PagePrinter:
    return PagePrinter(
        DocumentBuilder(), settings=render_settings, groups=highlight_settings
    )


def _links(doc: Doc) -> dict[str, tuple[str, str | None]]:
    lines = doc.lines()
    found = {}
    for link in doc.links:
        line, start = divmod(link.start, 10000)
        _, end = divmod(link.end, 10000)
        text = lines[line - 1][start - 1 : end - 1]
        found[text] = (doc.path_of(link), doc.anchor_of(link))
    return found


def test_package_page_layout(printer: PagePrinter, demo_package: PackageDoc) -> None:
    printer.package_page(demo_package, subdirectories=["sub"])
    doc = printer.builder.build()

    assert doc.text == DEMO_PAGE
    assert doc.folds == (Fold(17, 24),)
    assert Highlight(50001, 50010, "Constant") in doc.highlights
    assert set(doc.anchors) == {
        "Answer",
        "Hello",
        "Greeter",
        "Greeter.Name",
        "Greeter.Greet",
    }


def test_package_page_links(printer: PagePrinter, demo_package: PackageDoc) -> None:
    printer.package_page(demo_package, subdirectories=["sub"])
    links = _links(printer.builder.build())

    assert links["demo"] == (str(demo_package.directory), None)
    assert links["string"] == ("godoc://builtin", "string")
    assert links["fmt"] == ("godoc://fmt", None)
    assert links[".. (up a directory)"] == ("godoc://example.com", None)
    assert links["sub"] == ("godoc://example.com/demo/sub", None)
    assert links["Greet"] == ("/src/example.com/demo/demo.go", None)


def test_symbol_page_shows_single_entry(
    printer: PagePrinter, demo_package: PackageDoc
) -> None:
    printer.symbol_page(demo_package, PageSpec("example.com/demo", "Answer"))

    assert printer.builder.build().text == (
        "const Answer = 42\n\n    Answer is the answer.\n\n"
    )


def test_method_page(printer: PagePrinter, demo_package: PackageDoc) -> None:
    printer.symbol_page(
        demo_package, PageSpec("example.com/demo", "Greeter", "Greet")
    )

    assert printer.builder.build().text == "func (g *Greeter) Greet()\n\n"


@pytest.mark.parametrize(
    "spec",
    [
        PageSpec("example.com/demo", "Nope"),
        PageSpec("example.com/demo", "Greeter", "Nope"),
        PageSpec("example.com/demo", "Hello", "Nope"),
    ],
)
def test_missing_symbol_raises(
    printer: PagePrinter, demo_package: PackageDoc, spec: PageSpec
) -> None:
    with pytest.raises(SymbolNotFoundError, match="not found in example.com/demo"):
        printer.symbol_page(demo_package, spec)


def test_command_page(printer: PagePrinter, tmp_path: Path) -> None:
    package = PackageDoc(
        name="main",
        import_path="example.com/cmd/tool",
        directory=tmp_path,
        doc="Tool does things.",
    )

    printer.package_page(package)
    doc = printer.builder.build()

    assert doc.text.startswith("Command tool\n\n    Tool does things.\n\n")
    assert Highlight(10001, 10013, "Constant") in doc.highlights


def test_directory_page(printer: PagePrinter, tmp_path: Path) -> None:
    package = PackageDoc(name="", import_path="example.com", directory=tmp_path)

    printer.package_page(package, subdirectories=["demo"])

    assert printer.builder.build().text == (
        "Directory example.com\n\n"
        "DIRECTORIES\n\n"
        "    .. (up a directory)\n"
        "    demo\n\n"
    )


def test_root_page_lists_top_level_directories(printer: PagePrinter) -> None:
    printer.root_page(["example.com", "golang.org"])
    doc = printer.builder.build()

    assert doc.text == "DIRECTORIES\n\n    example.com\n    golang.org\n\n"
    assert _links(doc)["golang.org"] == ("godoc://golang.org", None)


@pytest.fixture()
def examples_package(demo_package: PackageDoc) -> PackageDoc:
    demo_package.examples = [
        ExampleDoc("", 'fmt.Println("pkg")', output="pkg"),
        ExampleDoc("Greeter", "var g Greeter\ng.Greet()", doc="Greeting a name."),
        ExampleDoc("Greeter_Greet", "g.Greet()", output="hello"),
        ExampleDoc("Greeter_loud", "loud()"),
        ExampleDoc("Hello", "Hello()"),
        ExampleDoc("_second", "second()"),
    ]
    return demo_package


@pytest.mark.parametrize(
    ("example", "name", "expected"),
    [
        ("", "", ""),
        ("_second", "", "Second"),
        ("Greeter", "", None),
        ("Greeter", "Greeter", ""),
        ("Greeter_loud", "Greeter", "Loud"),
        ("Greeter_Greet", "Greeter", None),
        ("Greeter_Greet", "Greeter_Greet", ""),
        ("GreeterSet", "Greeter", None),
        ("Hello", "Greeter", None),
    ],
)
def test_example_title(example: str, name: str, expected: str | None) -> None:
    assert _example_title(example, name) == expected


def test_package_page_ends_with_folded_examples(
    printer: PagePrinter, examples_package: PackageDoc
) -> None:
    printer.package_page(examples_package, subdirectories=["sub"])
    doc = printer.builder.build()

    assert doc.text == DEMO_PAGE + (
        "Example\n"
        "\n"
        "Code:\n"
        "\n"
        '    fmt.Println("pkg")\n'
        "\n"
        "Output:\n"
        "\n"
        "    pkg\n"
        "\n"
        "Example Second\n"
        "\n"
        "Code:\n"
        "\n"
        "    second()\n"
        "\n"
    )
    assert doc.folds == (Fold(17, 24), Fold(34, 43), Fold(44, 49))
    assert Highlight(340001, 340008, "Constant") in doc.highlights


def test_type_page_shows_its_examples(
    printer: PagePrinter, examples_package: PackageDoc
) -> None:
    printer.symbol_page(examples_package, PageSpec("example.com/demo", "Greeter"))

    assert printer.builder.build().text == (
        "type Greeter struct {\n\tName string\n}\n\n"
        "    Greeter greets.\n\n"
        "Example\n\n"
        "    Greeting a name.\n\n"
        "Code:\n\n"
        "    var g Greeter\n"
        "    g.Greet()\n\n"
        "Example Loud\n\n"
        "Code:\n\n"
        "    loud()\n\n"
    )


def test_method_and_func_pages_show_their_examples(
    printer: PagePrinter, examples_package: PackageDoc
) -> None:
    printer.symbol_page(
        examples_package, PageSpec("example.com/demo", "Greeter", "Greet")
    )
    printer.builder.write("--\n")
    printer.symbol_page(examples_package, PageSpec("example.com/demo", "Hello"))

    assert printer.builder.build().text == (
        "func (g *Greeter) Greet()\n\n"
        "Example\n\n"
        "Code:\n\n"
        "    g.Greet()\n\n"
        "Output:\n\n"
        "    hello\n\n"
        "--\n"
        "func Hello() string\n\n"
        "Example\n\n"
        "Code:\n\n"
        "    Hello()\n\n"
    )


def test_value_page_has_no_examples(
    printer: PagePrinter, examples_package: PackageDoc
) -> None:
    printer.symbol_page(examples_package, PageSpec("example.com/demo", "Answer"))

    assert "Example" not in printer.builder.build().text
