"""Documentation model of one Go package, grouped the way pages show it."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from docnav.syntax.nodes import FuncDecl, GenDecl, SourceLocation

__all__ = ["ExampleDoc", "FuncDoc", "PackageDoc", "TypeDoc", "ValueDoc"]


@dataclass(slots=True)
class ValueDoc:
    """A const or var declaration and its documentation."""

    names: tuple[str, ...]
    decl: GenDecl
    doc: str = ""
    location: SourceLocation | None = None


@dataclass(slots=True)
class FuncDoc:
    """A function or method; ``recv`` names the receiver base type."""

    name: str
    decl: FuncDecl
    doc: str = ""
    recv: str | None = None
    location: SourceLocation | None = None


@dataclass(slots=True)
class ExampleDoc:
    """A runnable example from a ``_test.go`` file.

    ``name`` is the function name without its ``Example`` prefix, so
    ``ExampleGreeter_Greet`` becomes ``Greeter_Greet``. ``code`` is the
    dedented body without the output comment.
    """

    name: str
    code: str
    doc: str = ""
    output: str = ""


@dataclass(slots=True)
class TypeDoc:
    """A type with the declarations associated with it."""

    name: str
    decl: GenDecl
    doc: str = ""
    location: SourceLocation | None = None
    consts: list[ValueDoc] = field(default_factory=list)
    vars: list[ValueDoc] = field(default_factory=list)
    funcs: list[FuncDoc] = field(default_factory=list)
    methods: list[FuncDoc] = field(default_factory=list)

    def method(self, name: str) -> FuncDoc | None:
        for method in self.methods:
            if method.name == name:
                return method
        return None


@dataclass(slots=True)
class PackageDoc:
    """Everything a package page renders."""

    name: str
    import_path: str
    directory: Path
    doc: str = ""
    imports: tuple[str, ...] = ()
    consts: list[ValueDoc] = field(default_factory=list)
    vars: list[ValueDoc] = field(default_factory=list)
    funcs: list[FuncDoc] = field(default_factory=list)
    types: list[TypeDoc] = field(default_factory=list)
    examples: list[ExampleDoc] = field(default_factory=list)
    files: tuple[str, ...] = ()

    @property
    def is_command(self) -> bool:
        return self.name == "main"

    @property
    def is_directory(self) -> bool:
        """Return whether the directory holds no Go package."""

        return not self.name

    def type(self, name: str) -> TypeDoc | None:
        for item in self.types:
            if item.name == name:
                return item
        return None

    def all_values(self) -> Iterator[ValueDoc]:
        """Yield every const and var, including those grouped under types."""

        yield from self.consts
        yield from self.vars
        for item in self.types:
            yield from item.consts
            yield from item.vars

    def all_funcs(self) -> Iterator[FuncDoc]:
        """Yield every package-level function, including constructors."""

        yield from self.funcs
        for item in self.types:
            yield from item.funcs
