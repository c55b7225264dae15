"""Page construction and navigation engine."""

from __future__ import annotations

from .document import Doc, DocumentBuilder, Highlight, Link
from .errors import DocnavError, ScopeError
from .links import LinkIndex
from .manager import DocumentManager, NavigationCommand, Overlay, OverlayDelta
from .position import COLUMN_SPAN, decode, encode

__all__ = [
    "COLUMN_SPAN",
    "Doc",
    "DocnavError",
    "DocumentBuilder",
    "DocumentManager",
    "Highlight",
    "Link",
    "LinkIndex",
    "NavigationCommand",
    "Overlay",
    "OverlayDelta",
    "ScopeError",
    "decode",
    "encode",
]
