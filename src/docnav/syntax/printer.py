"""Pretty-printer for the declaration model.

Output follows gofmt conventions closely enough for reading: tab
indentation, aligned columns in grouped declarations and struct bodies, and
no function bodies. Identifiers are printed in the same order
:mod:`docnav.syntax.annotator` visits them.
"""

from __future__ import annotations

from typing import Mapping

from .nodes import (
    ArrayType,
    BasicLit,
    Binary,
    Call,
    ChanDir,
    ChanType,
    CompositeLit,
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
    MapType,
    Node,
    Paren,
    Raw,
    Selector,
    Star,
    StructType,
    TypeSpec,
    Unary,
    ValueSpec,
)

__all__ = ["format_node"]

INDENT = "\t"


def format_node(node: Node, elisions: Mapping[Node, str] | None = None) -> str:
    """Return the source text for ``node``.

    ``elisions`` maps string and composite literals to the comment that
    replaces their contents.

    Example:
        >>> from docnav.syntax.nodes import FuncDecl, FuncType, Ident
        >>> format_node(FuncDecl(Ident("F"), FuncType()))
        'func F()'
    """

    printer = _Printer(elisions or {})
    if isinstance(node, (GenDecl, FuncDecl)):
        return printer.decl(node)
    if isinstance(node, (TypeSpec, ValueSpec)):
        return " ".join(cell for cell in printer.spec_cells(node, 0) if cell)
    if isinstance(node, Field):
        return printer.param(node, 0)
    if isinstance(node, FieldList):
        return printer.params(node, 0)
    return printer.expr(node, 0)


class _Printer:
    def __init__(self, elisions: Mapping[Node, str]) -> None:
        self.elisions = elisions

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def decl(self, node: GenDecl | FuncDecl) -> str:
        if isinstance(node, FuncDecl):
            recv = ""
            if node.recv is not None:
                recv = f"({self.params(node.recv, 0)}) "
            name = node.name.name + self.type_params(node.type_params)
            return f"func {recv}{name}{self.signature(node.type, 0)}"

        keyword = node.token.value
        if not node.grouped and len(node.specs) == 1:
            cells = self.spec_cells(node.specs[0], 0)
            return f"{keyword} " + " ".join(cell for cell in cells if cell)
        if not node.specs:
            return f"{keyword} ()"
        rows = [self.spec_cells(spec, 1) for spec in node.specs]
        body = "\n".join(INDENT + line for line in _align(rows))
        return f"{keyword} (\n{body}\n)"

    def spec_cells(self, spec: TypeSpec | ValueSpec, depth: int) -> list[str]:
        comment = spec.comment or ""
        if isinstance(spec, TypeSpec):
            name = spec.name.name + self.type_params(spec.type_params)
            prefix = "= " if spec.alias else ""
            return [name, prefix + self.expr(spec.type, depth), comment]
        names = ", ".join(name.name for name in spec.names)
        type_text = self.expr(spec.type, depth) if spec.type is not None else ""
        values = ""
        if spec.values:
            values = "= " + ", ".join(self.expr(v, depth) for v in spec.values)
        return [names, type_text, values, comment]

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    def signature(self, node: FuncType, depth: int) -> str:
        text = f"({self.params(node.params, depth)})"
        results = node.results
        if results is None or not results.fields:
            return text
        if len(results.fields) == 1 and not results.fields[0].names:
            return f"{text} {self.expr(results.fields[0].type, depth)}"
        return f"{text} ({self.params(results, depth)})"

    def type_params(self, fields: FieldList | None) -> str:
        if fields is None or not fields.fields:
            return ""
        return f"[{self.params(fields, 0)}]"

    def params(self, fields: FieldList, depth: int) -> str:
        return ", ".join(self.param(item, depth) for item in fields.fields)

    def param(self, item: Field, depth: int) -> str:
        type_text = self.expr(item.type, depth)
        if not item.names:
            return type_text
        return ", ".join(name.name for name in item.names) + " " + type_text

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def expr(self, node: Expr | None, depth: int) -> str:
        if node is None:
            return ""
        if isinstance(node, Ident):
            return node.name
        if isinstance(node, Selector):
            return f"{self.expr(node.x, depth)}.{node.sel.name}"
        if isinstance(node, BasicLit):
            comment = self.elisions.get(node)
            if comment is not None:
                return f'{comment} ""'
            return node.value
        if isinstance(node, CompositeLit):
            type_text = self.expr(node.type, depth)
            comment = self.elisions.get(node)
            if comment is not None:
                return f"{type_text}{{{comment}}}"
            elements = ", ".join(self.expr(elt, depth) for elt in node.elts)
            return f"{type_text}{{{elements}}}"
        if isinstance(node, KeyValue):
            return f"{self.expr(node.key, depth)}: {self.expr(node.value, depth)}"
        if isinstance(node, Star):
            return "*" + self.expr(node.x, depth)
        if isinstance(node, Unary):
            return node.op + self.expr(node.x, depth)
        if isinstance(node, Binary):
            left = self.expr(node.x, depth)
            right = self.expr(node.y, depth)
            return f"{left} {node.op} {right}"
        if isinstance(node, Paren):
            return f"({self.expr(node.x, depth)})"
        if isinstance(node, Call):
            args = ", ".join(self.expr(arg, depth) for arg in node.args)
            if node.ellipsis:
                args += "..."
            return f"{self.expr(node.fun, depth)}({args})"
        if isinstance(node, Index):
            return f"{self.expr(node.x, depth)}[{self.expr(node.index, depth)}]"
        if isinstance(node, ArrayType):
            return f"[{self.expr(node.length, depth)}]{self.expr(node.elt, depth)}"
        if isinstance(node, Ellipsis):
            return "..." + self.expr(node.elt, depth)
        if isinstance(node, MapType):
            key = self.expr(node.key, depth)
            return f"map[{key}]{self.expr(node.value, depth)}"
        if isinstance(node, ChanType):
            value = self.expr(node.value, depth)
            if node.dir is ChanDir.SEND:
                return f"chan<- {value}"
            if node.dir is ChanDir.RECV:
                return f"<-chan {value}"
            return f"chan {value}"
        if isinstance(node, FuncType):
            return "func" + self.signature(node, depth)
        if isinstance(node, StructType):
            return self.struct(node, depth)
        if isinstance(node, InterfaceType):
            return self.interface(node, depth)
        if isinstance(node, Raw):
            return node.text
        raise TypeError(f"unsupported node: {type(node).__name__}")

    def struct(self, node: StructType, depth: int) -> str:
        if not node.fields.fields:
            return "struct{}"
        rows = []
        for item in node.fields.fields:
            names = ", ".join(name.name for name in item.names)
            type_text = self.expr(item.type, depth + 1)
            tag = item.tag.value if item.tag is not None else ""
            if names:
                cells = [names, type_text]
            else:
                cells = [_Embedded(type_text), ""]
            rows.append(cells + [tag, item.comment or ""])
        if _fits_inline(node.inline, rows):
            return self.inline("struct", rows)
        return self.block("struct", rows, depth)

    def interface(self, node: InterfaceType, depth: int) -> str:
        if not node.methods.fields:
            return "interface{}"
        rows = []
        for item in node.methods.fields:
            if item.names and isinstance(item.type, FuncType):
                text = item.names[0].name + self.signature(item.type, depth + 1)
            else:
                text = self.expr(item.type, depth + 1)
            rows.append([text, item.comment or ""])
        if _fits_inline(node.inline, rows):
            return self.inline("interface", rows)
        return self.block("interface", rows, depth)

    def inline(self, keyword: str, rows: list[list[str]]) -> str:
        members = "; ".join(" ".join(cell for cell in row if cell) for row in rows)
        return f"{keyword}{{ {members} }}"

    def block(self, keyword: str, rows: list[list[str]], depth: int) -> str:
        inner = INDENT * (depth + 1)
        body = "\n".join(inner + line for line in _align(rows))
        return f"{keyword} {{\n{body}\n{INDENT * depth}}}"


class _Embedded(str):
    """A struct cell that spans the name and type columns."""


def _fits_inline(inline: bool, rows: list[list[str]]) -> bool:
    # Line comments cannot be followed by more members on the same line.
    return inline and not any(
        row[-1] or any("\n" in cell for cell in row) for row in rows
    )


def _align(rows: list[list[str]]) -> list[str]:
    """Join cell rows into lines with columns padded to a common width.

    A row containing a multi-line cell ends the current alignment section
    and is joined with single spaces.
    """

    lines: list[str] = []
    section: list[list[str]] = []
    for row in rows:
        if any("\n" in cell for cell in row):
            lines.extend(_align_section(section))
            section = []
            lines.append(" ".join(cell for cell in row if cell))
        else:
            section.append(row)
    lines.extend(_align_section(section))
    return lines


def _align_section(rows: list[list[str]]) -> list[str]:
    if not rows:
        return []
    count = max(len(row) for row in rows)
    padded = [row + [""] * (count - len(row)) for row in rows]
    columns = [i for i in range(count) if any(row[i] for row in padded)]
    widths = {
        i: max(
            (len(row[i]) for row in padded if not isinstance(row[i], _Embedded)),
            default=0,
        )
        for i in columns
    }
    starts: dict[int, int] = {}
    offset = 0
    for i in columns:
        starts[i] = offset
        offset += widths[i] + 1

    lines = []
    for row in padded:
        text = ""
        for i in columns:
            if not row[i]:
                continue
            if text:
                text = text.ljust(max(starts[i] - 1, len(text))) + " "
            text += row[i]
        lines.append(text)
    return lines
