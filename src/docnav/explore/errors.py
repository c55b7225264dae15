"""Errors raised while resolving packages and symbols."""

from __future__ import annotations

from docnav.page.errors import DocnavError

__all__ = [
    "LoaderUnavailableError",
    "PackageNotFoundError",
    "PackageReadError",
    "ResolutionError",
    "SymbolNotFoundError",
]


class ResolutionError(DocnavError):
    """Base class for failures that turn into an error page."""


class PackageNotFoundError(ResolutionError):
    """Raised when an import path does not map to a source directory."""


class PackageReadError(ResolutionError):
    """Raised when a package source file cannot be read."""


class SymbolNotFoundError(ResolutionError):
    """Raised when a page names a symbol the package does not declare."""


class LoaderUnavailableError(ResolutionError):
    """Raised when the Go grammar for tree-sitter cannot be loaded."""
