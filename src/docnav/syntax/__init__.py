"""Declaration model, printing, and annotation for page rendering."""

from __future__ import annotations

from .annotator import AnnotatedDecl, Annotation, AnnotationKind, annotate_declaration
from .merger import MergeResult, merge_declaration, render_declaration
from .printer import format_node

__all__ = [
    "AnnotatedDecl",
    "Annotation",
    "AnnotationKind",
    "MergeResult",
    "annotate_declaration",
    "format_node",
    "merge_declaration",
    "render_declaration",
]
