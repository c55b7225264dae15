"""Package loading and page assembly for Go source trees."""

from __future__ import annotations

from .define import find_definition
from .errors import (
    LoaderUnavailableError,
    PackageNotFoundError,
    PackageReadError,
    ResolutionError,
    SymbolNotFoundError,
)
from .loader import PackageLoader
from .model import ExampleDoc, FuncDoc, PackageDoc, TypeDoc, ValueDoc
from .render import RenderContext, render_page
from .specifier import (
    PageSpec,
    format_specifier,
    parent_specifier,
    parse_specifier,
    resolve_package_spec,
)

__all__ = [
    "ExampleDoc",
    "FuncDoc",
    "LoaderUnavailableError",
    "PackageDoc",
    "PackageLoader",
    "PackageNotFoundError",
    "PackageReadError",
    "PageSpec",
    "RenderContext",
    "ResolutionError",
    "SymbolNotFoundError",
    "TypeDoc",
    "ValueDoc",
    "find_definition",
    "format_specifier",
    "parent_specifier",
    "parse_specifier",
    "resolve_package_spec",
    "render_page",
]
