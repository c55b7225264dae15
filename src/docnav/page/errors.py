"""Error types raised while constructing pages."""

from __future__ import annotations

__all__ = ["DocnavError", "ScopeError"]


class DocnavError(RuntimeError):
    """Base class for errors raised by :mod:`docnav`."""


class ScopeError(DocnavError):
    """Raised when highlight, link, or fold scopes are unbalanced."""
