"""Merge printed declaration text with its annotation stream."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from docnav.core.config import HighlightSettings, RenderSettings
from docnav.core.logging import Logger, get_logger
from docnav.page.document import DocumentBuilder

from .annotator import Annotation, AnnotationKind, annotate_declaration
from .lexer import TokenKind, tokenize
from .nodes import Decl
from .printer import format_node

__all__ = ["MergeResult", "merge_declaration", "render_declaration"]

_logger = get_logger(__name__, component="syntax-merger")


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Outcome of pairing identifier tokens with annotations.

    ``underflow`` is set when the text had more identifiers than
    annotations; ``leftover`` counts annotations no identifier consumed.
    """

    consumed: int
    leftover: int = 0
    underflow: bool = False

    @property
    def aligned(self) -> bool:
        return not self.underflow and not self.leftover


def merge_declaration(
    builder: DocumentBuilder,
    text: str,
    annotations: Sequence[Annotation],
    *,
    page_prefix: str,
    groups: HighlightSettings,
    logger: Logger | None = None,
) -> MergeResult:
    """Write ``text`` into ``builder`` decorating identifiers in order.

    Each identifier token consumes the next annotation. Comments are
    highlighted and consume nothing. When annotations run out the rest of
    the text is written plain; the page is never aborted.
    """

    log = logger or _logger
    cursor = 0
    index = 0
    open_link = False
    underflow = False

    with builder.highlight(groups.declaration):
        for token in tokenize(text):
            builder.write(text[cursor : token.offset])
            cursor = token.end
            if token.kind is TokenKind.COMMENT:
                with builder.highlight(groups.comment):
                    builder.write(token.text)
                continue
            if token.kind is not TokenKind.IDENT or underflow:
                builder.write(token.text)
                continue
            if index >= len(annotations):
                underflow = True
                if open_link:
                    builder.pop_link()
                    open_link = False
                log.warning(
                    "declaration-annotation-underflow",
                    token=token.text,
                    offset=token.offset,
                    annotations=len(annotations),
                )
                builder.write(token.text)
                continue
            annotation = annotations[index]
            index += 1
            open_link = _apply(
                builder, token.text, annotation, page_prefix, open_link
            )
        builder.write(text[cursor:])
        if open_link:
            builder.pop_link()

    leftover = len(annotations) - index
    if leftover:
        log.warning(
            "declaration-annotation-leftover",
            leftover=leftover,
            annotations=len(annotations),
        )
    return MergeResult(consumed=index, leftover=leftover, underflow=underflow)


def _apply(
    builder: DocumentBuilder,
    token: str,
    annotation: Annotation,
    page_prefix: str,
    open_link: bool,
) -> bool:
    """Write one identifier; return whether a start-link remains open."""

    kind = annotation.kind
    if kind is AnnotationKind.ANCHOR:
        name = f"{annotation.qualifier}.{token}" if annotation.qualifier else token
        builder.add_anchor(name)
        location = annotation.location
        if location is None:
            builder.write(token)
        else:
            builder.write_link(token, location.path, location.line, location.column)
    elif kind is AnnotationKind.LINK:
        builder.write_link_anchor(token, _target(page_prefix, annotation), token)
    elif kind is AnnotationKind.PACKAGE_LINK:
        builder.write_link_anchor(token, _target(page_prefix, annotation), "")
    elif kind is AnnotationKind.START_LINK:
        builder.push_link_anchor(
            _target(page_prefix, annotation), annotation.symbol or ""
        )
        builder.write(token)
        return True
    elif kind is AnnotationKind.END_LINK:
        builder.write(token)
        if open_link:
            builder.pop_link()
        return False
    else:
        builder.write(token)
    return open_link


def _target(page_prefix: str, annotation: Annotation) -> str:
    if not annotation.path:
        return ""
    return page_prefix + annotation.path


def render_declaration(
    builder: DocumentBuilder,
    decl: Decl,
    *,
    settings: RenderSettings,
    groups: HighlightSettings,
) -> MergeResult:
    """Annotate, print and merge ``decl`` into ``builder``."""

    annotated = annotate_declaration(
        decl,
        string_limit=settings.string_literal_limit,
        element_limit=settings.composite_element_limit,
        link_builtins=settings.link_builtins,
    )
    text = format_node(decl, annotated.elisions)
    return merge_declaration(
        builder,
        text,
        annotated.annotations,
        page_prefix=settings.page_prefix,
        groups=groups,
    )
