"""Assemble package, symbol, and directory pages into a document builder."""

from __future__ import annotations

from collections.abc import Sequence
from posixpath import dirname, join

from docnav.core.config import HighlightSettings, RenderSettings
from docnav.page.document import DocumentBuilder
from docnav.syntax.merger import render_declaration
from docnav.syntax.nodes import Decl

from .errors import SymbolNotFoundError
from .model import ExampleDoc, FuncDoc, PackageDoc, TypeDoc, ValueDoc
from .specifier import PageSpec
from .text import format_text

__all__ = ["PagePrinter"]

UP_DIRECTORY = ".. (up a directory)"


class PagePrinter:
    """Write page sections into a :class:`DocumentBuilder`.

    Each public method renders one kind of page. Section headers use the
    header highlight group, declarations are rendered through
    :func:`~docnav.syntax.merger.render_declaration`, and each type block is
    wrapped in a fold.
    """

    def __init__(
        self,
        builder: DocumentBuilder,
        *,
        settings: RenderSettings,
        groups: HighlightSettings,
    ) -> None:
        self.builder = builder
        self.settings = settings
        self.groups = groups

    @property
    def prefix(self) -> str:
        return self.settings.page_prefix

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def package_page(
        self,
        package: PackageDoc,
        *,
        subdirectories: Sequence[str] = (),
    ) -> None:
        """Render the full page for ``package``."""

        if package.is_directory:
            self.directory_header(package)
        elif package.is_command:
            self.command_header(package)
            self.text(package.doc)
        else:
            self.package_header(package)
            self.text(package.doc)
            self.declarations(package)
            self.imports(package.imports)
        self.directories(package.import_path, subdirectories)
        self.examples(package.examples, "")

    def symbol_page(self, package: PackageDoc, spec: PageSpec) -> None:
        """Render only the declaration ``spec`` names.

        Raises:
            SymbolNotFoundError: If the package has no such declaration.
        """

        entry = _find_entry(package, spec)
        if entry is None:
            raise SymbolNotFoundError(
                f"{spec.fragment} not found in {package.import_path}"
            )
        self.entry(entry.decl, entry.doc)
        if spec.method:
            self.examples(package.examples, f"{spec.symbol}_{spec.method}")
        elif isinstance(entry, (FuncDoc, TypeDoc)):
            self.examples(package.examples, entry.name)

    def root_page(self, subdirectories: Sequence[str]) -> None:
        """Render the listing of every top-level directory across roots."""

        self.directories("", subdirectories)

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def package_header(self, package: PackageDoc) -> None:
        builder = self.builder
        with builder.highlight(self.groups.declaration):
            builder.write("package ")
            builder.write_link_anchor(package.name, str(package.directory), "")
            with builder.highlight(self.groups.comment):
                builder.write(f' // import "{package.import_path}"')
        builder.write("\n\n")

    def command_header(self, package: PackageDoc) -> None:
        name = package.import_path.rsplit("/", 1)[-1]
        self._titled("Command ", name, str(package.directory))

    def directory_header(self, package: PackageDoc) -> None:
        self._titled("Directory ", package.import_path, str(package.directory))

    def _titled(self, title: str, text: str, path: str) -> None:
        builder = self.builder
        with builder.highlight(self.groups.header):
            builder.write(title)
            builder.write_link_anchor(text, path, "")
        builder.write("\n\n")

    def section(self, title: str) -> None:
        with self.builder.highlight(self.groups.header):
            self.builder.write(title.upper())
        self.builder.write("\n\n")

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def text(self, doc: str) -> None:
        """Write formatted documentation text followed by a blank line."""

        lines = format_text(
            doc,
            width=self.settings.text_width,
            indent=self.settings.indent,
        )
        if not lines:
            return
        builder = self.builder
        for line in lines:
            if line.heading:
                with builder.highlight(self.groups.header):
                    builder.write(line.text)
            else:
                builder.write(line.text)
            builder.write("\n")
        builder.write("\n")

    def entry(self, decl: Decl, doc: str) -> None:
        render_declaration(
            self.builder,
            decl,
            settings=self.settings,
            groups=self.groups,
        )
        self.builder.write("\n\n")
        self.text(doc)

    def declarations(self, package: PackageDoc) -> None:
        if package.consts:
            self.section("Constants")
            self.values(package.consts)
        if package.vars:
            self.section("Variables")
            self.values(package.vars)
        if package.funcs:
            self.section("Functions")
            self.funcs(package.funcs)
        if package.types:
            self.section("Types")
            for type_doc in package.types:
                self.type_block(type_doc)

    def values(self, values: Sequence[ValueDoc]) -> None:
        for value in values:
            self.entry(value.decl, value.doc)

    def funcs(self, funcs: Sequence[FuncDoc]) -> None:
        for func in funcs:
            self.entry(func.decl, func.doc)

    def type_block(self, type_doc: TypeDoc) -> None:
        with self.builder.fold():
            self.entry(type_doc.decl, type_doc.doc)
            self.values(type_doc.consts)
            self.values(type_doc.vars)
            self.funcs(type_doc.funcs)
            self.funcs(type_doc.methods)

    def imports(self, imports: Sequence[str]) -> None:
        if not imports:
            return
        self.section("Imports")
        for path in imports:
            self._listing_link(path, self.prefix + path)
        self.builder.write("\n")

    def directories(self, import_path: str, names: Sequence[str]) -> None:
        if not names and not import_path:
            return
        self.section("Directories")
        if import_path:
            parent = dirname(import_path)
            self._listing_link(UP_DIRECTORY, self.prefix + parent)
        for name in names:
            self._listing_link(name, self.prefix + join(import_path, name))
        self.builder.write("\n")

    def examples(self, examples: Sequence[ExampleDoc], name: str) -> None:
        """Render the examples belonging to ``name``, each in its own fold.

        An empty ``name`` selects the package examples. Examples for
        ``name`` are ``Example<name>`` and ``Example<name>_<suffix>`` where
        the suffix starts with a lower-case letter.
        """

        for example in examples:
            title = _example_title(example.name, name)
            if title is None:
                continue
            self.example(example, title)

    def example(self, example: ExampleDoc, title: str) -> None:
        builder = self.builder
        indent = self.settings.indent
        with builder.fold():
            with builder.highlight(self.groups.header):
                builder.write(f"Example {title}".rstrip())
            builder.write("\n\n")
            self.text(example.doc)
            builder.write("Code:\n\n")
            for line in example.code.splitlines():
                builder.write(f"{indent}{line}\n" if line else "\n")
            builder.write("\n")
            if example.output:
                builder.write("Output:\n\n")
                for line in example.output.splitlines():
                    builder.write(f"{indent}{line}\n" if line else "\n")
                builder.write("\n")

    def _listing_link(self, text: str, target: str) -> None:
        builder = self.builder
        builder.write(self.settings.indent)
        with builder.highlight(self.groups.link):
            builder.write_link_anchor(text, target, "")
        builder.write("\n")


def _example_title(example_name: str, name: str) -> str | None:
    """Return the title suffix of an example for ``name``, or ``None``."""

    if not example_name.startswith(name):
        return None
    suffix = example_name[len(name) :]
    if not suffix:
        return ""
    if suffix.rfind("_") != 0:
        return None
    suffix = suffix[1:]
    if suffix[:1].isupper():
        return None
    return suffix[:1].upper() + suffix[1:]


def _find_entry(
    package: PackageDoc, spec: PageSpec
) -> ValueDoc | FuncDoc | TypeDoc | None:
    type_doc = package.type(spec.symbol)
    if spec.method:
        if type_doc is None:
            return None
        return type_doc.method(spec.method)
    if type_doc is not None:
        return type_doc
    for func in package.all_funcs():
        if func.name == spec.symbol:
            return func
    for value in package.all_values():
        if spec.symbol in value.names:
            return value
    return None
