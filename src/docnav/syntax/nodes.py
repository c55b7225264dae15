"""Declaration tree rendered on documentation pages.

The model covers the parts of Go declarations that appear on a page: type,
const, var and func declarations with their type expressions and
initializers. Function bodies are never part of the tree. Anything the model
does not break down is carried as :class:`Raw` text.

Every node is a frozen dataclass so trees can be shared, hashed, and used as
mapping keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Union

__all__ = [
    "ArrayType",
    "BasicLit",
    "Binary",
    "Call",
    "ChanDir",
    "ChanType",
    "CompositeLit",
    "Decl",
    "DeclToken",
    "Ellipsis",
    "Expr",
    "Field",
    "FieldList",
    "FuncDecl",
    "FuncType",
    "GenDecl",
    "Ident",
    "Index",
    "InterfaceType",
    "KeyValue",
    "LitKind",
    "MapType",
    "Node",
    "Obj",
    "ObjKind",
    "Paren",
    "Raw",
    "Selector",
    "SourceLocation",
    "Spec",
    "Star",
    "StructType",
    "TypeSpec",
    "Unary",
    "ValueSpec",
    "is_exported",
]


class ObjKind(StrEnum):
    PACKAGE = "package"
    TYPE = "type"
    CONST = "const"
    VAR = "var"
    FUNC = "func"


class LitKind(StrEnum):
    INT = "int"
    FLOAT = "float"
    IMAG = "imag"
    CHAR = "char"
    STRING = "string"


class ChanDir(StrEnum):
    BOTH = "both"
    SEND = "send"
    RECV = "recv"


class DeclToken(StrEnum):
    CONST = "const"
    VAR = "var"
    TYPE = "type"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """File position of a declared name, 1-based byte column."""

    path: str
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Obj:
    """What an identifier resolves to.

    Package objects carry the ``import_path`` of the imported package. Other
    kinds refer to declarations at package scope of the current package.
    """

    kind: ObjKind
    import_path: str | None = None


@dataclass(frozen=True, slots=True)
class Ident:
    """An identifier.

    ``pos`` is the byte offset in the declaring file when known; it is used
    to tell ``pkg.Name`` apart from ``pkg . Name``.
    """

    name: str
    pos: int | None = None
    obj: Obj | None = None
    location: SourceLocation | None = None

    @property
    def end(self) -> int | None:
        if self.pos is None:
            return None
        return self.pos + len(self.name.encode("utf-8"))


@dataclass(frozen=True, slots=True)
class BasicLit:
    kind: LitKind
    value: str


@dataclass(frozen=True, slots=True)
class Selector:
    x: "Expr"
    sel: Ident


@dataclass(frozen=True, slots=True)
class CompositeLit:
    type: "Expr | None"
    elts: tuple["Expr", ...] = ()


@dataclass(frozen=True, slots=True)
class KeyValue:
    key: "Expr"
    value: "Expr"


@dataclass(frozen=True, slots=True)
class Star:
    """Pointer type or dereference."""

    x: "Expr"


@dataclass(frozen=True, slots=True)
class Unary:
    op: str
    x: "Expr"


@dataclass(frozen=True, slots=True)
class Binary:
    x: "Expr"
    op: str
    y: "Expr"


@dataclass(frozen=True, slots=True)
class Paren:
    x: "Expr"


@dataclass(frozen=True, slots=True)
class Call:
    fun: "Expr"
    args: tuple["Expr", ...] = ()
    ellipsis: bool = False


@dataclass(frozen=True, slots=True)
class Index:
    x: "Expr"
    index: "Expr"


@dataclass(frozen=True, slots=True)
class ArrayType:
    """Array type, or slice type when ``length`` is ``None``."""

    elt: "Expr"
    length: "Expr | None" = None


@dataclass(frozen=True, slots=True)
class Ellipsis:
    elt: "Expr | None" = None


@dataclass(frozen=True, slots=True)
class MapType:
    key: "Expr"
    value: "Expr"


@dataclass(frozen=True, slots=True)
class ChanType:
    value: "Expr"
    dir: ChanDir = ChanDir.BOTH


@dataclass(frozen=True, slots=True)
class Field:
    """Struct field, parameter, result, or interface member.

    ``names`` is empty for embedded fields and unnamed parameters.
    ``comment`` is a trailing line comment including its ``//`` marker.
    """

    names: tuple[Ident, ...]
    type: "Expr"
    tag: BasicLit | None = None
    comment: str | None = None


@dataclass(frozen=True, slots=True)
class FieldList:
    fields: tuple[Field, ...] = ()

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True, slots=True)
class FuncType:
    params: FieldList = FieldList()
    results: FieldList | None = None


@dataclass(frozen=True, slots=True)
class StructType:
    """Struct type; ``inline`` is set when the source body fits on one line."""

    fields: FieldList = FieldList()
    inline: bool = False


@dataclass(frozen=True, slots=True)
class InterfaceType:
    methods: FieldList = FieldList()
    inline: bool = False


@dataclass(frozen=True, slots=True)
class Raw:
    """Source text the model keeps opaque, such as function literals."""

    text: str


@dataclass(frozen=True, slots=True)
class TypeSpec:
    """A type declaration; ``type_params`` is set for generic types."""

    name: Ident
    type: "Expr"
    alias: bool = False
    comment: str | None = None
    type_params: FieldList | None = None


@dataclass(frozen=True, slots=True)
class ValueSpec:
    names: tuple[Ident, ...]
    type: "Expr | None" = None
    values: tuple["Expr", ...] = ()
    comment: str | None = None


@dataclass(frozen=True, slots=True)
class GenDecl:
    """A ``const``, ``var`` or ``type`` declaration.

    ``grouped`` records whether the specs were written in parentheses.
    """

    token: DeclToken
    specs: tuple["Spec", ...]
    grouped: bool = False


@dataclass(frozen=True, slots=True)
class FuncDecl:
    name: Ident
    type: FuncType
    recv: FieldList | None = None
    type_params: FieldList | None = None


Expr = Union[
    Ident,
    BasicLit,
    Selector,
    CompositeLit,
    KeyValue,
    Star,
    Unary,
    Binary,
    Paren,
    Call,
    Index,
    ArrayType,
    Ellipsis,
    MapType,
    ChanType,
    FuncType,
    StructType,
    InterfaceType,
    Raw,
]
Spec = Union[TypeSpec, ValueSpec]
Decl = Union[GenDecl, FuncDecl]
Node = Union[Expr, Field, FieldList, Spec, Decl]


def is_exported(name: str) -> bool:
    """Return whether ``name`` is visible outside its package."""

    return bool(name) and name[0].isupper()
