"""Load Go package documentation with the tree-sitter Go grammar.

The loader reads every non-test ``.go`` file of a package directory, turns
the top-level declarations into :mod:`docnav.syntax.nodes` trees, resolves
identifiers against the package scope and each file's imports, and groups
the exported declarations into a :class:`~docnav.explore.model.PackageDoc`.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
import re
import textwrap
from typing import Any

from docnav.core.logging import Logger, get_logger
from docnav.syntax.nodes import (
    ArrayType,
    BasicLit,
    Binary,
    Call,
    ChanDir,
    ChanType,
    CompositeLit,
    DeclToken,
    Ellipsis,
    Expr,
    Field,
    FieldList,
    FuncDecl,
    FuncType,
    GenDecl,
    Ident,
    Index,
    InterfaceType,
    KeyValue,
    LitKind,
    MapType,
    Obj,
    ObjKind,
    Paren,
    Raw,
    Selector,
    SourceLocation,
    Star,
    StructType,
    TypeSpec,
    Unary,
    ValueSpec,
    is_exported,
)

from .errors import (
    LoaderUnavailableError,
    PackageNotFoundError,
    PackageReadError,
)
from .model import ExampleDoc, FuncDoc, PackageDoc, TypeDoc, ValueDoc

__all__ = ["PackageLoader", "guess_package_name"]

_LITERALS = {
    "int_literal": LitKind.INT,
    "float_literal": LitKind.FLOAT,
    "imaginary_literal": LitKind.IMAG,
    "rune_literal": LitKind.CHAR,
    "interpreted_string_literal": LitKind.STRING,
    "raw_string_literal": LitKind.STRING,
}

_NAMES = {"identifier", "type_identifier", "field_identifier", "package_identifier"}
_PREDECLARED_NODES = {"true", "false", "nil", "iota"}
_OUTPUT_COMMENT = re.compile(r"(?i)//[ \t]*(?:unordered[ \t]+)?output:")
_OUTPUT_PREFIX = re.compile(r"(?i)^\s*(?:unordered\s+)?output:")

_PACKAGE_NAME_PATTERNS = (
    # Last element with a version or VCS suffix removed.
    re.compile(r"/([^-./]+)[-.](?:git|svn|hg|bzr|v\d+)$"),
    # Last element with a "go" prefix or suffix removed.
    re.compile(r"/([^-./]+)[-.]go$"),
    re.compile(r"/go[-.]([^-./]+)$"),
    # Last element of the path.
    re.compile(r"([^/]+)$"),
)


def guess_package_name(import_path: str) -> str:
    """Guess the package name an import path declares.

    Example:
        >>> guess_package_name("github.com/user/go-yaml")
        'yaml'
        >>> guess_package_name("gopkg.in/check.v1")
        'check'
    """

    for pattern in _PACKAGE_NAME_PATTERNS:
        match = pattern.search(import_path)
        if match is not None:
            return match.group(1)
    return ""


@dataclass(slots=True)
class _ParsedFile:
    path: Path
    source: bytes
    root: Any
    package: str
    imports: dict[str, str] = field(default_factory=dict)


class PackageLoader:
    """Resolve import paths under source roots and load their documentation.

    Example:
        >>> loader = PackageLoader([Path("/usr/lib/go/src")])  # doctest: +SKIP
        >>> loader.load("strings").name  # doctest: +SKIP
        'strings'
    """

    def __init__(
        self,
        roots: Sequence[Path],
        *,
        logger: Logger | None = None,
    ) -> None:
        self.roots = tuple(Path(root) for root in roots)
        self._logger = logger or get_logger(__name__, component="package-loader")
        self._parser: Any | None = None

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    def find_directory(self, import_path: str) -> Path:
        """Return the first source directory for ``import_path``.

        Raises:
            PackageNotFoundError: If no root contains the import path.
        """

        for root in self.roots:
            candidate = root.joinpath(*import_path.split("/"))
            if candidate.is_dir():
                return candidate
        searched = ", ".join(str(root) for root in self.roots) or "<no roots>"
        raise PackageNotFoundError(
            f"cannot find package {import_path!r} in any of: {searched}"
        )

    def subdirectories(self, import_path: str) -> list[str]:
        """Return the child directory names of ``import_path`` across roots."""

        names: set[str] = set()
        for root in self.roots:
            directory = root.joinpath(*import_path.split("/")) if import_path else root
            if not directory.is_dir():
                continue
            for child in directory.iterdir():
                name = child.name
                if not child.is_dir() or name.startswith((".", "_")):
                    continue
                if name == "testdata":
                    continue
                names.add(name)
        return sorted(names)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, import_path: str) -> PackageDoc:
        """Parse the package at ``import_path`` and return its documentation.

        A directory without Go files yields a :class:`PackageDoc` with an
        empty ``name``.

        Raises:
            PackageNotFoundError: If the directory does not exist.
            PackageReadError: If a source file cannot be read.
            LoaderUnavailableError: If the Go grammar cannot be loaded.
        """

        directory = self.find_directory(import_path)
        try:
            sources = sorted(
                path for path in directory.glob("*.go") if path.is_file()
            )
        except OSError as exc:
            raise PackageReadError(f"cannot list {directory}: {exc}") from exc
        paths = [path for path in sources if not path.name.endswith("_test.go")]
        test_paths = [path for path in sources if path.name.endswith("_test.go")]
        if not paths:
            return PackageDoc(name="", import_path=import_path, directory=directory)

        parser = self._load_parser()
        parsed = [self._parse_file(parser, path) for path in paths]
        name = _package_name(parsed, directory.name)
        files = [item for item in parsed if item.package == name]

        builder = _PackageBuilder(name, import_path, directory, files)
        package = builder.build()
        package.examples = self._load_examples(parser, test_paths, name)
        self._logger.info(
            "package-loaded",
            import_path=import_path,
            files=len(files),
            types=len(package.types),
            funcs=len(package.funcs),
            examples=len(package.examples),
        )
        return package

    def _load_examples(
        self, parser: Any, paths: Sequence[Path], name: str
    ) -> list[ExampleDoc]:
        """Collect ``Example*`` functions from the package's test files."""

        examples: list[ExampleDoc] = []
        for path in paths:
            parsed = self._parse_file(parser, path)
            if parsed.package not in {name, f"{name}_test"}:
                continue
            examples.extend(_Converter(parsed, {}).examples())
        return sorted(examples, key=lambda item: item.name)

    def _load_parser(self) -> Any:
        if self._parser is not None:
            return self._parser
        try:
            from tree_sitter_languages import get_parser  # type: ignore[import]
        except ImportError as exc:
            raise LoaderUnavailableError(
                "Go package loading requires the 'parsers' extras "
                "(tree_sitter_languages)."
            ) from exc
        try:
            self._parser = get_parser("go")
        except Exception as exc:  # pragma: no cover - grammar build failure
            raise LoaderUnavailableError(
                f"tree-sitter parser for 'go' is unavailable: {exc}"
            ) from exc
        return self._parser

    def _parse_file(self, parser: Any, path: Path) -> _ParsedFile:
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise PackageReadError(f"cannot read {path}: {exc}") from exc
        tree = parser.parse(source)
        root = tree.root_node
        if root.has_error:
            self._logger.warning("package-file-parse-errors", path=str(path))
        package = ""
        imports: dict[str, str] = {}
        for child in root.named_children:
            if child.type == "package_clause":
                for part in child.named_children:
                    if part.type == "package_identifier":
                        package = _text(source, part)
            elif child.type == "import_declaration":
                for spec in _iter_import_specs(child):
                    path_node = spec.child_by_field_name("path")
                    if path_node is None:
                        continue
                    value = _text(source, path_node).strip('"`')
                    alias = spec.child_by_field_name("name")
                    if alias is not None:
                        local = _text(source, alias)
                        if local in {"_", "."}:
                            continue
                    else:
                        local = guess_package_name(value)
                    imports[local] = value
        return _ParsedFile(path, source, root, package, imports)


def _iter_import_specs(node: Any) -> Iterator[Any]:
    for child in node.named_children:
        if child.type == "import_spec":
            yield child
        elif child.type == "import_spec_list":
            yield from _iter_import_specs(child)


def _package_name(files: Sequence[_ParsedFile], directory_name: str) -> str:
    counts = Counter(item.package for item in files if item.package)
    if not counts:
        return ""
    if directory_name in counts:
        return directory_name
    return counts.most_common(1)[0][0]


def _text(source: bytes, node: Any) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _split_example(body: str) -> tuple[str, str]:
    """Split an example body into dedented code and its expected output."""

    inner = body.removeprefix("{").removesuffix("}")
    output = ""
    matches = list(_OUTPUT_COMMENT.finditer(inner))
    if matches:
        start = matches[-1].start()
        tail = [line.strip() for line in inner[start:].splitlines()]
        if all(line.startswith("//") for line in tail if line):
            text = _comment_text(line for line in tail if line)
            output = _OUTPUT_PREFIX.sub("", text, count=1).strip()
            inner = inner[:start]
    code = textwrap.dedent(inner.strip("\n")).strip()
    return code, output


def _comment_text(comments: Iterable[str]) -> str:
    """Strip comment markers and return the documentation text."""

    lines: list[str] = []
    for comment in comments:
        if comment.startswith("//"):
            if comment.startswith(("//go:", "//line ")):
                continue
            line = comment[2:]
            lines.append(line[1:] if line.startswith(" ") else line)
        else:
            body = textwrap.dedent(comment[2:-2]).strip("\n")
            lines.extend(body.splitlines())
    return "\n".join(lines).strip()


# ----------------------------------------------------------------------
# Package assembly
# ----------------------------------------------------------------------


class _PackageBuilder:
    def __init__(
        self,
        name: str,
        import_path: str,
        directory: Path,
        files: Sequence[_ParsedFile],
    ) -> None:
        self.name = name
        self.import_path = import_path
        self.directory = directory
        self.files = files
        self.scope = self._collect_scope()

    def _collect_scope(self) -> dict[str, ObjKind]:
        scope: dict[str, ObjKind] = {}
        kinds = {
            "const_spec": ObjKind.CONST,
            "var_spec": ObjKind.VAR,
            "type_spec": ObjKind.TYPE,
            "type_alias": ObjKind.TYPE,
        }
        for item in self.files:
            for node in item.root.named_children:
                if node.type == "function_declaration":
                    name = node.child_by_field_name("name")
                    if name is not None:
                        scope[_text(item.source, name)] = ObjKind.FUNC
                    continue
                for spec in _iter_specs(node):
                    kind = kinds.get(spec.type)
                    if kind is None:
                        continue
                    for name in spec.children_by_field_name("name"):
                        scope[_text(item.source, name)] = kind
        return scope

    def build(self) -> PackageDoc:
        package = PackageDoc(
            name=self.name,
            import_path=self.import_path,
            directory=self.directory,
            files=tuple(item.path.name for item in self.files),
        )
        imports: set[str] = set()
        values: list[tuple[DeclToken, ValueDoc]] = []
        funcs: list[FuncDoc] = []
        methods: list[FuncDoc] = []
        types: dict[str, TypeDoc] = {}

        for item in self._ordered_files():
            imports.update(item.imports.values())
            converter = _Converter(item, self.scope)
            if not package.doc:
                package.doc = converter.package_doc()
            for decl, doc, spec_docs in converter.declarations():
                if isinstance(decl, FuncDecl):
                    entry = _func_doc(decl, doc)
                    if entry is None:
                        continue
                    (methods if entry.recv is not None else funcs).append(entry)
                elif decl.token is DeclToken.TYPE:
                    for type_doc in _type_docs(decl, spec_docs):
                        types.setdefault(type_doc.name, type_doc)
                else:
                    value = _value_doc(decl, doc)
                    if value is not None:
                        values.append((decl.token, value))

        for token, value in values:
            owner = types.get(_value_type(value.decl) or "")
            if owner is not None:
                (owner.consts if token is DeclToken.CONST else owner.vars).append(value)
            elif token is DeclToken.CONST:
                package.consts.append(value)
            else:
                package.vars.append(value)
        for func in funcs:
            owner = types.get(_result_type(func.decl, types) or "")
            (owner.funcs if owner is not None else package.funcs).append(func)
        for method in methods:
            owner = types.get(method.recv or "")
            if owner is not None:
                owner.methods.append(method)

        package.imports = tuple(sorted(imports))
        package.funcs.sort(key=lambda item: item.name)
        package.types = sorted(types.values(), key=lambda item: item.name)
        for type_doc in package.types:
            type_doc.funcs.sort(key=lambda item: item.name)
            type_doc.methods.sort(key=lambda item: item.name)
        return package

    def _ordered_files(self) -> list[_ParsedFile]:
        # doc.go carries the package comment by convention.
        return sorted(self.files, key=lambda item: item.path.name != "doc.go")


def _iter_specs(node: Any) -> Iterator[Any]:
    for child in node.named_children:
        if child.type in {"const_spec", "var_spec", "type_spec", "type_alias"}:
            yield child
        elif child.type == "var_spec_list":
            yield from _iter_specs(child)


def _func_doc(decl: FuncDecl, doc: str) -> FuncDoc | None:
    if not is_exported(decl.name.name):
        return None
    recv = None
    if decl.recv is not None:
        recv = _base_type_name(decl.recv.fields[0].type) if decl.recv.fields else None
        if recv is None or not is_exported(recv):
            return None
    return FuncDoc(
        name=decl.name.name,
        decl=decl,
        doc=doc,
        recv=recv,
        location=decl.name.location,
    )


def _type_docs(decl: GenDecl, docs: Sequence[str]) -> Iterator[TypeDoc]:
    for spec, spec_doc in zip(decl.specs, docs):
        if not isinstance(spec, TypeSpec):
            continue
        if not is_exported(spec.name.name):
            continue
        yield TypeDoc(
            name=spec.name.name,
            decl=GenDecl(DeclToken.TYPE, (spec,)),
            doc=spec_doc,
            location=spec.name.location,
        )


def _value_doc(decl: GenDecl, doc: str) -> ValueDoc | None:
    specs = tuple(
        spec
        for spec in decl.specs
        if isinstance(spec, ValueSpec)
        and any(is_exported(name.name) for name in spec.names)
    )
    if not specs:
        return None
    kept = replace(decl, specs=specs, grouped=decl.grouped or len(specs) > 1)
    names = tuple(name.name for spec in specs for name in spec.names)
    return ValueDoc(names=names, decl=kept, doc=doc, location=specs[0].names[0].location)


def _value_type(decl: GenDecl) -> str | None:
    """Return the single package type every spec of ``decl`` is declared as."""

    found: set[str | None] = set()
    previous: Expr | None = None
    for spec in decl.specs:
        type_node = spec.type if isinstance(spec, ValueSpec) else None
        if type_node is None and decl.token is DeclToken.CONST and not spec.values:
            type_node = previous
        previous = type_node
        found.add(_local_type_name(type_node))
    if len(found) != 1:
        return None
    return found.pop()


def _result_type(decl: FuncDecl, types: dict[str, TypeDoc]) -> str | None:
    results = decl.type.results
    if results is None:
        return None
    names = {
        name
        for item in results.fields
        for name in [_local_type_name(item.type)]
        if name is not None and name in types
    }
    if len(names) != 1:
        return None
    return names.pop()


def _local_type_name(node: Expr | None) -> str | None:
    if isinstance(node, Star):
        node = node.x
    if isinstance(node, Ident) and node.obj is not None and node.obj.kind is ObjKind.TYPE:
        return node.name
    return None


def _base_type_name(node: Expr) -> str | None:
    if isinstance(node, Paren):
        node = node.x
    if isinstance(node, Star):
        node = node.x
    if isinstance(node, Index):
        node = node.x
    if isinstance(node, Ident):
        return node.name
    return None


# ----------------------------------------------------------------------
# Syntax tree conversion
# ----------------------------------------------------------------------


class _Converter:
    """Convert one parsed file's declarations into declaration nodes."""

    def __init__(self, parsed: _ParsedFile, scope: dict[str, ObjKind]) -> None:
        self.parsed = parsed
        self.source = parsed.source
        self.path = str(parsed.path)
        self.scope = scope
        self.imports = parsed.imports

    def text(self, node: Any) -> str:
        return _text(self.source, node)

    def package_doc(self) -> str:
        children = self.parsed.root.children
        for index, child in enumerate(children):
            if child.type == "package_clause":
                return self.leading_doc(children, index)
        return ""

    def leading_doc(self, siblings: Sequence[Any], index: int) -> str:
        """Return the comment block directly above ``siblings[index]``."""

        comments: list[str] = []
        row = siblings[index].start_point[0]
        position = index - 1
        while position >= 0:
            sibling = siblings[position]
            if sibling.type != "comment" or sibling.end_point[0] != row - 1:
                break
            comments.append(self.text(sibling))
            row = sibling.start_point[0]
            position -= 1
        comments.reverse()
        return _comment_text(comments)

    def declarations(
        self,
    ) -> Iterator[tuple[FuncDecl | GenDecl, str, list[str]]]:
        """Yield each declaration with its doc and the docs of its specs."""

        children = self.parsed.root.children
        for index, child in enumerate(children):
            kind = child.type
            if kind in {"function_declaration", "method_declaration"}:
                yield self.func_decl(child), self.leading_doc(children, index), []
            elif kind in {"const_declaration", "var_declaration", "type_declaration"}:
                decl, spec_docs = self.gen_decl(child)
                doc = self.leading_doc(children, index)
                if len(spec_docs) == 1:
                    spec_docs = [doc or spec_docs[0]]
                yield decl, doc, spec_docs

    def examples(self) -> Iterator[ExampleDoc]:
        children = self.parsed.root.children
        for index, child in enumerate(children):
            if child.type != "function_declaration":
                continue
            name = self.text(child.child_by_field_name("name"))
            suffix = name.removeprefix("Example")
            if suffix == name or suffix[:1].islower():
                continue
            params = child.child_by_field_name("parameters")
            if params is not None and params.named_child_count:
                continue
            body = child.child_by_field_name("body")
            if child.child_by_field_name("result") is not None or body is None:
                continue
            code, output = _split_example(self.text(body))
            yield ExampleDoc(
                name=suffix,
                code=code,
                doc=self.leading_doc(children, index),
                output=output,
            )

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def func_decl(self, node: Any) -> FuncDecl:
        recv = None
        receiver = node.child_by_field_name("receiver")
        if receiver is not None:
            recv = self.params(receiver)
        return FuncDecl(
            name=self.declared(node.child_by_field_name("name")),
            type=FuncType(
                self.params(node.child_by_field_name("parameters")),
                self.results(node.child_by_field_name("result")),
            ),
            recv=recv,
            type_params=self.type_params(node),
        )

    def gen_decl(self, node: Any) -> tuple[GenDecl, list[str]]:
        token = DeclToken(node.type.removesuffix("_declaration"))
        grouped = any(child.type == "(" for child in node.children)
        container = node
        for child in node.named_children:
            if child.type == "var_spec_list":
                container = child
                grouped = True
        specs: list[TypeSpec | ValueSpec] = []
        docs: list[str] = []
        last_row = -1
        siblings = container.children
        for index, child in enumerate(siblings):
            if child.type == "comment":
                if specs and child.start_point[0] == last_row:
                    specs[-1] = replace(specs[-1], comment=self.text(child))
                continue
            if child.type in {"type_spec", "type_alias"}:
                specs.append(self.type_spec(child))
            elif child.type in {"const_spec", "var_spec"}:
                specs.append(self.value_spec(child))
            else:
                continue
            docs.append(self.leading_doc(siblings, index))
            last_row = child.end_point[0]
        return GenDecl(token, tuple(specs), grouped=grouped), docs

    def type_spec(self, node: Any) -> TypeSpec:
        return TypeSpec(
            name=self.declared(node.child_by_field_name("name")),
            type=self.convert(node.child_by_field_name("type")),
            alias=node.type == "type_alias",
            type_params=self.type_params(node),
        )

    def value_spec(self, node: Any) -> ValueSpec:
        names = tuple(
            self.declared(name) for name in node.children_by_field_name("name")
        )
        type_node = node.child_by_field_name("type")
        values: tuple[Expr, ...] = ()
        value_node = node.child_by_field_name("value")
        if value_node is not None:
            values = tuple(self.convert(child) for child in _named(value_node))
        return ValueSpec(
            names=names,
            type=self.convert(type_node) if type_node is not None else None,
            values=values,
        )

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def declared(self, node: Any) -> Ident:
        row, column = node.start_point
        return Ident(
            self.text(node),
            pos=node.start_byte,
            location=SourceLocation(self.path, row + 1, column + 1),
        )

    def plain(self, node: Any) -> Ident:
        return Ident(self.text(node), pos=node.start_byte)

    def resolved(self, node: Any) -> Ident:
        name = self.text(node)
        return Ident(name, pos=node.start_byte, obj=self.resolve(name, node.type))

    def resolve(self, name: str, node_type: str) -> Obj | None:
        if node_type != "package_identifier":
            kind = self.scope.get(name)
            if kind is not None:
                return Obj(kind)
            if node_type != "identifier":
                return None
        import_path = self.imports.get(name)
        if import_path is None:
            return None
        return Obj(ObjKind.PACKAGE, import_path)

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def params(self, node: Any | None) -> FieldList:
        if node is None:
            return FieldList()
        fields: list[Field] = []
        for child in node.named_children:
            if child.type not in {
                "parameter_declaration",
                "variadic_parameter_declaration",
            }:
                continue
            names = tuple(
                self.plain(name) for name in child.children_by_field_name("name")
            )
            type_node = self.convert(child.child_by_field_name("type"))
            if child.type == "variadic_parameter_declaration":
                type_node = Ellipsis(type_node)
            fields.append(Field(names, type_node))
        return FieldList(tuple(fields))

    def type_params(self, node: Any) -> FieldList | None:
        params = node.child_by_field_name("type_parameters")
        if params is None:
            return None
        fields: list[Field] = []
        for child in params.named_children:
            if child.type != "type_parameter_declaration":
                continue
            names = tuple(
                self.plain(name) for name in child.children_by_field_name("name")
            )
            fields.append(Field(names, self.convert(child.child_by_field_name("type"))))
        return FieldList(tuple(fields))

    def results(self, node: Any | None) -> FieldList | None:
        if node is None:
            return None
        if node.type == "parameter_list":
            return self.params(node)
        return FieldList((Field((), self.convert(node)),))

    def struct_fields(self, node: Any) -> FieldList:
        fields: list[Field] = []
        last_row = -1
        for child in _members(node, "field_declaration_list"):
            if child.type == "comment":
                if fields and child.start_point[0] == last_row:
                    fields[-1] = replace(fields[-1], comment=self.text(child))
                continue
            if child.type != "field_declaration":
                continue
            names = tuple(
                self.declared(name) for name in child.children_by_field_name("name")
            )
            type_node = self.convert(child.child_by_field_name("type"))
            if not names and any(part.type == "*" for part in child.children):
                type_node = Star(type_node)
            tag = None
            tag_node = child.child_by_field_name("tag")
            if tag_node is not None:
                tag = BasicLit(LitKind.STRING, self.text(tag_node))
            fields.append(Field(names, type_node, tag=tag))
            last_row = child.end_point[0]
        return FieldList(tuple(fields))

    def interface_methods(self, node: Any) -> FieldList:
        fields: list[Field] = []
        last_row = -1
        for child in _members(node, "method_spec_list"):
            kind = child.type
            if kind == "comment":
                if fields and child.start_point[0] == last_row:
                    fields[-1] = replace(fields[-1], comment=self.text(child))
                continue
            if kind in {"method_spec", "method_elem"}:
                signature = FuncType(
                    self.params(child.child_by_field_name("parameters")),
                    self.results(child.child_by_field_name("result")),
                )
                name = self.declared(child.child_by_field_name("name"))
                fields.append(Field((name,), signature))
            elif kind in {"type_elem", "constraint_elem", "interface_type_name"}:
                parts = list(_named(child))
                if len(parts) == 1:
                    fields.append(Field((), self.convert(parts[0])))
                else:
                    fields.append(Field((), Raw(self.text(child))))
            else:
                fields.append(Field((), self.convert(child)))
            last_row = child.end_point[0]
        return FieldList(tuple(fields))

    # ------------------------------------------------------------------
    # Expressions and types
    # ------------------------------------------------------------------

    def convert(self, node: Any | None) -> Expr:
        if node is None:
            return Raw("")
        kind = node.type
        if kind in _NAMES:
            return self.resolved(node)
        if kind in _PREDECLARED_NODES:
            return self.plain(node)
        literal = _LITERALS.get(kind)
        if literal is not None:
            return BasicLit(literal, self.text(node))
        if kind == "qualified_type":
            return Selector(
                self.resolved(node.child_by_field_name("package")),
                self.plain(node.child_by_field_name("name")),
            )
        if kind == "selector_expression":
            return Selector(
                self.convert(node.child_by_field_name("operand")),
                self.plain(node.child_by_field_name("field")),
            )
        if kind == "pointer_type":
            return Star(self.convert(_first_named(node)))
        if kind == "slice_type":
            return ArrayType(self.convert(node.child_by_field_name("element")))
        if kind == "array_type":
            return ArrayType(
                self.convert(node.child_by_field_name("element")),
                length=self.convert(node.child_by_field_name("length")),
            )
        if kind == "implicit_length_array_type":
            return ArrayType(
                self.convert(node.child_by_field_name("element")),
                length=Ellipsis(),
            )
        if kind == "map_type":
            return MapType(
                self.convert(node.child_by_field_name("key")),
                self.convert(node.child_by_field_name("value")),
            )
        if kind == "channel_type":
            return ChanType(
                self.convert(node.child_by_field_name("value")),
                dir=_chan_dir(node),
            )
        if kind == "function_type":
            return FuncType(
                self.params(node.child_by_field_name("parameters")),
                self.results(node.child_by_field_name("result")),
            )
        if kind == "struct_type":
            return StructType(self.struct_fields(node), inline=_one_line(node))
        if kind == "interface_type":
            return InterfaceType(
                self.interface_methods(node), inline=_one_line(node)
            )
        if kind == "generic_type":
            arguments = [
                _unwrap(child)
                for child in _named(node.child_by_field_name("type_arguments"))
            ]
            index: Expr
            if len(arguments) == 1:
                index = self.convert(arguments[0])
            else:
                index = Raw(", ".join(self.text(child) for child in arguments))
            return Index(self.convert(node.child_by_field_name("type")), index)
        if kind in {"type_constraint", "type_elem", "constraint_elem"}:
            parts = list(_named(node))
            if len(parts) == 1:
                return self.convert(parts[0])
            return Raw(self.text(node))
        if kind in {"parenthesized_type", "parenthesized_expression"}:
            return Paren(self.convert(_first_named(node)))
        if kind == "unary_expression":
            return Unary(
                self.text(node.child_by_field_name("operator")),
                self.convert(node.child_by_field_name("operand")),
            )
        if kind == "binary_expression":
            return Binary(
                self.convert(node.child_by_field_name("left")),
                self.text(node.child_by_field_name("operator")),
                self.convert(node.child_by_field_name("right")),
            )
        if kind == "call_expression" and node.child_by_field_name("type_arguments") is None:
            arguments = node.child_by_field_name("arguments")
            return Call(
                self.convert(node.child_by_field_name("function")),
                tuple(self.convert(arg) for arg in _named(arguments)),
                ellipsis=any(part.type == "..." for part in arguments.children),
            )
        if kind == "type_conversion_expression":
            return Call(
                self.convert(node.child_by_field_name("type")),
                (self.convert(node.child_by_field_name("operand")),),
            )
        if kind == "index_expression":
            return Index(
                self.convert(node.child_by_field_name("operand")),
                self.convert(node.child_by_field_name("index")),
            )
        if kind == "composite_literal":
            return CompositeLit(
                self.convert(node.child_by_field_name("type")),
                self.elements(node.child_by_field_name("body")),
            )
        if kind == "literal_value":
            return CompositeLit(None, self.elements(node))
        return Raw(self.text(node))

    def elements(self, node: Any | None) -> tuple[Expr, ...]:
        if node is None:
            return ()
        elements: list[Expr] = []
        for child in _named(node):
            if child.type == "keyed_element":
                key, value = list(_named(child))[:2]
                elements.append(KeyValue(self.element(key, key=True), self.element(value)))
            else:
                elements.append(self.element(child))
        return tuple(elements)

    def element(self, node: Any, *, key: bool = False) -> Expr:
        if node.type == "literal_element":
            node = _first_named(node)
        if key and node.type in {"identifier", "field_identifier"}:
            return self.plain(node)
        return self.convert(node)


def _named(node: Any) -> Iterator[Any]:
    for child in node.named_children:
        if child.type != "comment":
            yield child


def _first_named(node: Any) -> Any | None:
    return next(_named(node), None)


def _unwrap(node: Any) -> Any:
    """Return the single type inside a ``type_elem`` wrapper."""

    if node.type == "type_elem":
        parts = list(_named(node))
        if len(parts) == 1:
            return parts[0]
    return node


def _members(node: Any, list_type: str) -> Iterator[Any]:
    """Yield the members of a struct or interface body."""

    for child in node.named_children:
        if child.type == list_type:
            yield from child.named_children
        else:
            yield child


def _one_line(node: Any) -> bool:
    return node.start_point[0] == node.end_point[0]


def _chan_dir(node: Any) -> ChanDir:
    tokens = [child.type for child in node.children if not child.is_named]
    if tokens and tokens[0] == "<-":
        return ChanDir.RECV
    if "<-" in tokens:
        return ChanDir.SEND
    return ChanDir.BOTH
