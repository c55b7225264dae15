"""Classify every identifier of a declaration for page rendering.

The walk visits identifiers in exactly the order :func:`format_node` prints
them, producing one :class:`Annotation` per identifier token. The merger then
pairs the two streams to decide which tokens become links and anchors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Mapping

from .lexer import identifiers
from .nodes import (
    ArrayType,
    BasicLit,
    Binary,
    Call,
    ChanType,
    CompositeLit,
    Decl,
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
    Node,
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

__all__ = [
    "AnnotatedDecl",
    "Annotation",
    "AnnotationKind",
    "BUILTIN_PATH",
    "PREDECLARED",
    "Predeclared",
    "annotate_declaration",
]

BUILTIN_PATH = "builtin"
CGO_PACKAGE = "C"


class Predeclared(StrEnum):
    TYPE = "type"
    CONSTANT = "constant"
    FUNCTION = "function"


PREDECLARED: Mapping[str, Predeclared] = {
    **{
        name: Predeclared.TYPE
        for name in (
            "any",
            "bool",
            "byte",
            "complex64",
            "complex128",
            "comparable",
            "error",
            "float32",
            "float64",
            "int",
            "int8",
            "int16",
            "int32",
            "int64",
            "rune",
            "string",
            "uint",
            "uint8",
            "uint16",
            "uint32",
            "uint64",
            "uintptr",
        )
    },
    **{
        name: Predeclared.CONSTANT
        for name in ("true", "false", "iota", "nil")
    },
    **{
        name: Predeclared.FUNCTION
        for name in (
            "append",
            "cap",
            "close",
            "complex",
            "copy",
            "delete",
            "imag",
            "len",
            "make",
            "new",
            "panic",
            "print",
            "println",
            "real",
            "recover",
        )
    },
}


class AnnotationKind(StrEnum):
    IGNORE = "ignore"
    ANCHOR = "anchor"
    LINK = "link"
    START_LINK = "start-link"
    END_LINK = "end-link"
    PACKAGE_LINK = "package-link"


@dataclass(frozen=True, slots=True)
class Annotation:
    """How one identifier token is rendered.

    ``path`` is the target import path of link kinds, empty for the current
    page. ``symbol`` is the selected name that start/end links jump to.
    ``qualifier`` prefixes anchor names, giving ``Type.Member``.
    """

    kind: AnnotationKind
    path: str | None = None
    qualifier: str | None = None
    symbol: str | None = None
    location: SourceLocation | None = None

    @classmethod
    def ignore(cls) -> "Annotation":
        return _IGNORE

    @classmethod
    def anchor(
        cls,
        qualifier: str | None = None,
        location: SourceLocation | None = None,
    ) -> "Annotation":
        return cls(AnnotationKind.ANCHOR, qualifier=qualifier, location=location)

    @classmethod
    def link(cls, path: str = "") -> "Annotation":
        return cls(AnnotationKind.LINK, path=path)

    @classmethod
    def start_link(cls, path: str, symbol: str) -> "Annotation":
        return cls(AnnotationKind.START_LINK, path=path, symbol=symbol)

    @classmethod
    def end_link(cls, path: str, symbol: str) -> "Annotation":
        return cls(AnnotationKind.END_LINK, path=path, symbol=symbol)

    @classmethod
    def package_link(cls, path: str) -> "Annotation":
        return cls(AnnotationKind.PACKAGE_LINK, path=path)


_IGNORE = Annotation(AnnotationKind.IGNORE)


@dataclass(frozen=True, slots=True)
class AnnotatedDecl:
    """Annotations for a declaration and the elision comments it needs."""

    decl: Decl
    annotations: tuple[Annotation, ...]
    elisions: Mapping[Node, str] = field(default_factory=dict)


def annotate_declaration(
    decl: Decl,
    *,
    string_limit: int = 128,
    element_limit: int = 100,
    link_builtins: bool = True,
) -> AnnotatedDecl:
    """Walk ``decl`` and return its annotation stream.

    Example:
        >>> from docnav.syntax.nodes import FuncDecl, FuncType, Ident
        >>> result = annotate_declaration(FuncDecl(Ident("F"), FuncType()))
        >>> [a.kind.value for a in result.annotations]
        ['anchor']
    """

    walker = _Annotator(
        string_limit=string_limit,
        element_limit=element_limit,
        link_builtins=link_builtins,
    )
    walker.declaration(decl)
    return AnnotatedDecl(
        decl=decl,
        annotations=tuple(walker.annotations),
        elisions=dict(walker.elisions),
    )


class _Annotator:
    def __init__(
        self,
        *,
        string_limit: int,
        element_limit: int,
        link_builtins: bool,
    ) -> None:
        self.string_limit = string_limit
        self.element_limit = element_limit
        self.link_builtins = link_builtins
        self.annotations: list[Annotation] = []
        self.elisions: dict[Node, str] = {}

    def add(self, annotation: Annotation) -> None:
        self.annotations.append(annotation)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def declaration(self, decl: Decl) -> None:
        if isinstance(decl, FuncDecl):
            self.func_decl(decl)
            return
        for spec in decl.specs:
            if isinstance(spec, TypeSpec):
                self.type_spec(spec)
            else:
                self.value_spec(spec)

    def type_spec(self, spec: TypeSpec) -> None:
        self.add(Annotation.anchor(location=spec.name.location))
        self.field_list(spec.type_params)
        qualifier = spec.name.name
        if isinstance(spec.type, StructType):
            self.members(spec.type.fields, qualifier)
        elif isinstance(spec.type, InterfaceType):
            self.members(spec.type.methods, qualifier)
        else:
            self.expr(spec.type)

    def members(self, fields: FieldList, qualifier: str) -> None:
        for member in fields.fields:
            for name in member.names:
                self.add(Annotation.anchor(qualifier, location=name.location))
            self.expr(member.type)

    def value_spec(self, spec: ValueSpec) -> None:
        for name in spec.names:
            self.add(Annotation.anchor(location=name.location))
        if spec.type is not None:
            self.expr(spec.type)
        for value in spec.values:
            self.expr(value)

    def func_decl(self, decl: FuncDecl) -> None:
        if decl.recv is None:
            self.add(Annotation.anchor(location=decl.name.location))
        else:
            for recv in decl.recv.fields:
                for _ in recv.names:
                    self.add(Annotation.ignore())
                self.ignore_all(recv.type)
            self.add(
                Annotation.anchor(
                    _receiver_type_name(decl.recv),
                    location=decl.name.location,
                )
            )
        self.field_list(decl.type_params)
        self.expr(decl.type)

    def ignore_all(self, node: Expr) -> None:
        """Emit ``ignore`` for every identifier ``node`` prints."""

        start = len(self.annotations)
        self.expr(node)
        count = len(self.annotations) - start
        del self.annotations[start:]
        self.annotations.extend([Annotation.ignore()] * count)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def field_list(self, fields: FieldList | None) -> None:
        if fields is None:
            return
        for item in fields.fields:
            self.field(item)

    def field(self, item: Field) -> None:
        for _ in item.names:
            self.add(Annotation.ignore())
        self.expr(item.type)

    def expr(self, node: Expr | None) -> None:
        if node is None:
            return
        if isinstance(node, Ident):
            self.ident(node)
        elif isinstance(node, Selector):
            self.selector(node)
        elif isinstance(node, BasicLit):
            self.basic_lit(node)
        elif isinstance(node, CompositeLit):
            self.composite_lit(node)
        elif isinstance(node, KeyValue):
            self.expr(node.key)
            self.expr(node.value)
        elif isinstance(node, (Star, Unary, Paren)):
            self.expr(node.x)
        elif isinstance(node, Binary):
            self.expr(node.x)
            self.expr(node.y)
        elif isinstance(node, Call):
            self.expr(node.fun)
            for arg in node.args:
                self.expr(arg)
        elif isinstance(node, Index):
            self.expr(node.x)
            self.expr(node.index)
        elif isinstance(node, ArrayType):
            self.expr(node.length)
            self.expr(node.elt)
        elif isinstance(node, Ellipsis):
            self.expr(node.elt)
        elif isinstance(node, MapType):
            self.expr(node.key)
            self.expr(node.value)
        elif isinstance(node, ChanType):
            self.expr(node.value)
        elif isinstance(node, FuncType):
            self.field_list(node.params)
            self.field_list(node.results)
        elif isinstance(node, StructType):
            self.field_list(node.fields)
        elif isinstance(node, InterfaceType):
            for method in node.methods.fields:
                for _ in method.names:
                    self.add(Annotation.ignore())
                self.expr(method.type)
        elif isinstance(node, Raw):
            for _ in identifiers(node.text):
                self.add(Annotation.ignore())
        else:
            raise TypeError(f"unsupported node: {type(node).__name__}")

    def ident(self, node: Ident) -> None:
        obj = node.obj
        if obj is None:
            if self.link_builtins and node.name in PREDECLARED:
                self.add(Annotation.link(BUILTIN_PATH))
            else:
                self.add(Annotation.ignore())
        elif obj.kind is not ObjKind.PACKAGE and is_exported(node.name):
            self.add(Annotation.link(""))
        else:
            self.add(Annotation.ignore())

    def selector(self, node: Selector) -> None:
        x = node.x
        if (
            isinstance(x, Ident)
            and x.obj is not None
            and x.obj.kind is ObjKind.PACKAGE
        ):
            path = x.obj.import_path or ""
            if path == CGO_PACKAGE:
                self.add(Annotation.ignore())
                self.add(Annotation.ignore())
            elif _adjacent(x, node.sel):
                self.add(Annotation.start_link(path, node.sel.name))
                self.add(Annotation.end_link(path, node.sel.name))
            else:
                self.add(Annotation.package_link(path))
                self.add(Annotation.link(path))
            return
        self.expr(x)
        self.add(Annotation.ignore())

    def basic_lit(self, node: BasicLit) -> None:
        if node.kind is not LitKind.STRING:
            return
        size = len(node.value.encode("utf-8"))
        if size > self.string_limit:
            self.elisions[node] = f"/* {size} byte string literal not displayed */"

    def composite_lit(self, node: CompositeLit) -> None:
        self.expr(node.type)
        count = len(node.elts)
        if count > self.element_limit:
            self.elisions[node] = f"/* {count} elements not displayed */"
            return
        for element in node.elts:
            self.expr(element)


def _adjacent(x: Ident, sel: Ident) -> bool:
    """Return whether ``sel`` directly follows ``x.`` in the source."""

    if x.end is None or sel.pos is None:
        return True
    return sel.pos - x.end == 1


def _receiver_type_name(recv: FieldList) -> str | None:
    if not recv.fields:
        return None
    node = recv.fields[0].type
    if isinstance(node, Paren):
        node = node.x
    if isinstance(node, Star):
        node = node.x
    if isinstance(node, Index):
        node = node.x
    if isinstance(node, Ident):
        return node.name
    return None
