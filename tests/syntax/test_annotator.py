"""Tests for :mod:`docnav.syntax.annotator`."""

from __future__ import annotations

import pytest

from docnav.syntax.annotator import (
    BUILTIN_PATH,
    Annotation,
    AnnotationKind,
    annotate_declaration,
)
from docnav.syntax.lexer import identifiers
from docnav.syntax.nodes import (
    ArrayType,
    BasicLit,
    Call,
    CompositeLit,
    DeclToken,
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
    Raw,
    Selector,
    SourceLocation,
    Star,
    StructType,
    TypeSpec,
    ValueSpec,
)
from docnav.syntax.printer import format_node

FMT = Obj(ObjKind.PACKAGE, "fmt")
LOCAL_TYPE = Obj(ObjKind.TYPE)


def _kinds(decl) -> list[str]:
    return [a.kind.value for a in annotate_declaration(decl).annotations]


def test_function_anchor_and_builtin_links() -> None:
    decl = FuncDecl(
        Ident("F", location=SourceLocation("/src/f.go", 3, 6)),
        FuncType(
            FieldList((Field((Ident("n"),), Ident("int")),)),
            FieldList((Field((), Ident("error")),)),
        ),
    )

    annotations = annotate_declaration(decl).annotations

    assert annotations[0] == Annotation.anchor(
        location=SourceLocation("/src/f.go", 3, 6)
    )
    assert annotations[1:] == (
        Annotation.ignore(),
        Annotation.link(BUILTIN_PATH),
        Annotation.link(BUILTIN_PATH),
    )


def test_builtin_links_can_be_disabled() -> None:
    decl = GenDecl(DeclToken.VAR, (ValueSpec((Ident("x"),), Ident("int")),))

    result = annotate_declaration(decl, link_builtins=False)

    assert [a.kind for a in result.annotations] == [
        AnnotationKind.ANCHOR,
        AnnotationKind.IGNORE,
    ]


def test_method_receiver_is_ignored_and_anchor_qualified() -> None:
    decl = FuncDecl(
        Ident("M"),
        FuncType(),
        recv=FieldList(
            (Field((Ident("t"),), Star(Ident("T", obj=LOCAL_TYPE))),)
        ),
    )

    annotations = annotate_declaration(decl).annotations

    assert [a.kind.value for a in annotations] == ["ignore", "ignore", "anchor"]
    assert annotations[-1].qualifier == "T"


def test_local_references() -> None:
    decl = GenDecl(
        DeclToken.VAR,
        (
            ValueSpec(
                (Ident("v"),),
                MapType(Ident("Key", obj=LOCAL_TYPE), Ident("value", obj=LOCAL_TYPE)),
            ),
        ),
    )

    assert _kinds(decl) == ["anchor", "link", "ignore"]
    assert annotate_declaration(decl).annotations[1].path == ""


def test_adjacent_qualified_identifier_is_one_link() -> None:
    selector = Selector(Ident("fmt", pos=10, obj=FMT), Ident("Stringer", pos=14))
    decl = GenDecl(DeclToken.VAR, (ValueSpec((Ident("s"),), selector),))

    annotations = annotate_declaration(decl).annotations

    assert annotations[1:] == (
        Annotation.start_link("fmt", "Stringer"),
        Annotation.end_link("fmt", "Stringer"),
    )


def test_spaced_qualified_identifier_links_separately() -> None:
    selector = Selector(Ident("fmt", pos=10, obj=FMT), Ident("Stringer", pos=16))
    decl = GenDecl(DeclToken.VAR, (ValueSpec((Ident("s"),), selector),))

    annotations = annotate_declaration(decl).annotations

    assert annotations[1:] == (
        Annotation.package_link("fmt"),
        Annotation.link("fmt"),
    )


def test_cgo_selectors_are_ignored() -> None:
    cgo = Obj(ObjKind.PACKAGE, "C")
    decl = GenDecl(
        DeclToken.VAR,
        (ValueSpec((Ident("x"),), Selector(Ident("C", obj=cgo), Ident("int"))),),
    )

    assert _kinds(decl) == ["anchor", "ignore", "ignore"]


def test_field_selector_on_value_ignores_member() -> None:
    decl = GenDecl(
        DeclToken.VAR,
        (
            ValueSpec(
                (Ident("x"),),
                values=(Selector(Ident("Default", obj=Obj(ObjKind.VAR)), Ident("Size")),),
            ),
        ),
    )

    assert _kinds(decl) == ["anchor", "link", "ignore"]


def test_struct_and_interface_members_are_qualified_anchors() -> None:
    struct = GenDecl(
        DeclToken.TYPE,
        (
            TypeSpec(
                Ident("T"),
                StructType(
                    FieldList(
                        (
                            Field((Ident("A"), Ident("b")), Ident("int")),
                            Field((), Star(Ident("Base", obj=LOCAL_TYPE))),
                        )
                    )
                ),
            ),
        ),
    )
    iface = GenDecl(
        DeclToken.TYPE,
        (
            TypeSpec(
                Ident("I"),
                InterfaceType(
                    FieldList((Field((Ident("Do"),), FuncType()),))
                ),
            ),
        ),
    )

    struct_annotations = annotate_declaration(struct).annotations
    assert [a.qualifier for a in struct_annotations[:3]] == [None, "T", "T"]
    assert struct_annotations[-1] == Annotation.link("")
    assert annotate_declaration(iface).annotations[1].qualifier == "I"


def test_long_string_literal_is_elided() -> None:
    literal = BasicLit(LitKind.STRING, '"hello"')
    decl = GenDecl(DeclToken.CONST, (ValueSpec((Ident("S"),), values=(literal,)),))

    result = annotate_declaration(decl, string_limit=4)

    assert result.elisions == {literal: "/* 7 byte string literal not displayed */"}
    assert format_node(decl, result.elisions) == (
        'const S = /* 7 byte string literal not displayed */ ""'
    )


def test_large_composite_literal_is_elided() -> None:
    literal = CompositeLit(
        Ident("T", obj=LOCAL_TYPE),
        tuple(BasicLit(LitKind.INT, str(i)) for i in range(3)),
    )
    decl = GenDecl(DeclToken.VAR, (ValueSpec((Ident("V"),), values=(literal,)),))

    result = annotate_declaration(decl, element_limit=2)

    assert [a.kind.value for a in result.annotations] == ["anchor", "link"]
    assert format_node(decl, result.elisions) == (
        "var V = T{/* 3 elements not displayed */}"
    )


def test_raw_text_identifiers_are_ignored() -> None:
    decl = GenDecl(
        DeclToken.VAR,
        (ValueSpec((Ident("f"),), values=(Raw("func(a, b int) {}"),)),),
    )

    assert _kinds(decl) == ["anchor", "ignore", "ignore", "ignore"]


def test_type_parameters_ignore_names_and_link_constraints() -> None:
    decl = FuncDecl(
        Ident("Keys"),
        FuncType(
            FieldList((Field((Ident("m"),), MapType(Ident("K"), Ident("V"))),)),
        ),
        type_params=FieldList(
            (
                Field((Ident("K"),), Ident("comparable")),
                Field((Ident("V"),), Ident("Value", obj=LOCAL_TYPE)),
            )
        ),
    )

    assert format_node(decl) == "func Keys[K comparable, V Value](m map[K]V)"
    assert _kinds(decl) == [
        "anchor",
        "ignore",
        "link",
        "ignore",
        "link",
        "ignore",
        "ignore",
        "ignore",
    ]
    assert annotate_declaration(decl).annotations[2].path == BUILTIN_PATH


@pytest.mark.parametrize(
    "decl",
    [
        FuncDecl(
            Ident("Map"),
            FuncType(
                FieldList(
                    (
                        Field((Ident("xs"),), ArrayType(Ident("T"))),
                        Field((Ident("f"),), FuncType(FieldList((Field((), Ident("T")),)))),
                    )
                ),
                FieldList((Field((), ArrayType(Ident("U"))),)),
            ),
            type_params=FieldList(
                (Field((Ident("T"), Ident("U")), Raw("~int | fmt.Stringer")),)
            ),
        ),
        FuncDecl(
            Ident("Push"),
            FuncType(FieldList((Field((Ident("v"),), Ident("T")),))),
            recv=FieldList(
                (Field((Ident("l"),), Star(Index(Ident("List", obj=LOCAL_TYPE), Ident("T")))),)
            ),
        ),
        GenDecl(
            DeclToken.TYPE,
            (
                TypeSpec(
                    Ident("Pair"),
                    StructType(
                        FieldList(
                            (
                                Field((Ident("Key"),), Ident("K")),
                                Field((), Selector(Ident("fmt", obj=FMT), Ident("Stringer"))),
                            )
                        ),
                        inline=True,
                    ),
                    type_params=FieldList(
                        (
                            Field((Ident("K"),), Ident("comparable")),
                            Field((Ident("V"),), Ident("any")),
                        )
                    ),
                ),
            ),
        ),
        FuncDecl(
            Ident("Print"),
            FuncType(
                FieldList(
                    (Field((Ident("w"),), Selector(Ident("fmt", obj=FMT), Ident("Stringer"))),)
                )
            ),
        ),
        GenDecl(
            DeclToken.VAR,
            (
                ValueSpec(
                    (Ident("Table"),),
                    values=(
                        CompositeLit(
                            MapType(Ident("string"), ArrayType(Ident("int"))),
                            (
                                KeyValue(
                                    BasicLit(LitKind.STRING, '"a"'),
                                    CompositeLit(None, (Ident("one"), Ident("Two", obj=Obj(ObjKind.CONST)))),
                                ),
                            ),
                        ),
                    ),
                ),
                ValueSpec(
                    (Ident("n"),),
                    values=(Call(Ident("len"), (Ident("Table", obj=Obj(ObjKind.VAR)),)),),
                    comment="// n // len",
                ),
            ),
            grouped=True,
        ),
        GenDecl(
            DeclToken.TYPE,
            (
                TypeSpec(
                    Ident("Handler"),
                    InterfaceType(
                        FieldList(
                            (
                                Field(
                                    (Ident("Serve"),),
                                    FuncType(
                                        FieldList((Field((), Ident("string")),)),
                                        FieldList((Field((), Ident("error")),)),
                                    ),
                                    comment="// serve it",
                                ),
                            )
                        )
                    ),
                ),
            ),
        ),
    ],
)
def test_one_annotation_per_printed_identifier(decl) -> None:
    result = annotate_declaration(decl)

    assert len(identifiers(format_node(decl, result.elisions))) == len(
        result.annotations
    )
