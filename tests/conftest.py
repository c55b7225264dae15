"""Shared pytest fixtures for page rendering work."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import structlog

from docnav.core.config import HighlightSettings, RenderSettings
from docnav.explore.model import FuncDoc, PackageDoc, TypeDoc, ValueDoc
from docnav.syntax.nodes import (
    BasicLit,
    DeclToken,
    Field,
    FieldList,
    FuncDecl,
    FuncType,
    GenDecl,
    Ident,
    LitKind,
    Obj,
    ObjKind,
    SourceLocation,
    Star,
    StructType,
    TypeSpec,
    ValueSpec,
)


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Leave the root logger without handlers between tests."""

    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


@pytest.fixture()
def render_settings() -> RenderSettings:
    return RenderSettings()


@pytest.fixture()
def highlight_settings() -> HighlightSettings:
    return HighlightSettings()


def _loc(line: int, column: int) -> SourceLocation:
    return SourceLocation("/src/example.com/demo/demo.go", line, column)


@pytest.fixture()
def demo_package(tmp_path: Path) -> PackageDoc:
    """Return a small hand-built package with one of each member kind.

    The layout mirrors what the loader produces for::

        const Answer = 42
        func Hello() string
        type Greeter struct { Name string }
        func (g *Greeter) Greet()
    """

    answer = ValueDoc(
        names=("Answer",),
        decl=GenDecl(
            DeclToken.CONST,
            (
                ValueSpec(
                    (Ident("Answer", location=_loc(3, 7)),),
                    values=(BasicLit(LitKind.INT, "42"),),
                ),
            ),
        ),
        doc="Answer is the answer.",
        location=_loc(3, 7),
    )
    hello = FuncDoc(
        name="Hello",
        decl=FuncDecl(
            Ident("Hello", location=_loc(5, 6)),
            FuncType(results=FieldList((Field((), Ident("string")),))),
        ),
        location=_loc(5, 6),
    )
    greet = FuncDoc(
        name="Greet",
        decl=FuncDecl(
            Ident("Greet", location=_loc(11, 19)),
            FuncType(),
            recv=FieldList(
                (
                    Field(
                        (Ident("g"),),
                        Star(Ident("Greeter", obj=Obj(ObjKind.TYPE))),
                    ),
                )
            ),
        ),
        recv="Greeter",
        location=_loc(11, 19),
    )
    greeter = TypeDoc(
        name="Greeter",
        decl=GenDecl(
            DeclToken.TYPE,
            (
                TypeSpec(
                    Ident("Greeter", location=_loc(7, 6)),
                    StructType(
                        FieldList(
                            (
                                Field(
                                    (Ident("Name", location=_loc(8, 2)),),
                                    Ident("string"),
                                ),
                            )
                        )
                    ),
                ),
            ),
        ),
        doc="Greeter greets.",
        location=_loc(7, 6),
        methods=[greet],
    )
    return PackageDoc(
        name="demo",
        import_path="example.com/demo",
        directory=tmp_path / "example.com" / "demo",
        doc="Package demo shows pages.",
        imports=("fmt",),
        consts=[answer],
        funcs=[hello],
        types=[greeter],
        files=("demo.go",),
    )
