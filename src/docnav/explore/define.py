"""Go-to-definition lookups over loaded packages."""

from __future__ import annotations

from docnav.syntax.nodes import SourceLocation, ValueSpec

from .errors import SymbolNotFoundError
from .model import PackageDoc, ValueDoc

__all__ = ["find_definition"]


def find_definition(package: PackageDoc, symbol: str = "") -> SourceLocation:
    """Return where ``symbol`` is declared in ``package``.

    ``symbol`` is a top-level name or ``Type.Method``. Without a symbol the
    package directory itself is returned at line 1, column 1.

    Raises:
        SymbolNotFoundError: If the package does not declare ``symbol``.
    """

    symbol = symbol.strip(".")
    if not symbol or package.is_directory:
        return SourceLocation(str(package.directory), 1, 1)

    type_name, _, method_name = symbol.partition(".")
    if method_name:
        type_doc = package.type(type_name)
        method = type_doc.method(method_name) if type_doc is not None else None
        if method is not None and method.location is not None:
            return method.location
    else:
        for value in package.all_values():
            location = _value_location(value, symbol)
            if location is not None:
                return location
        for func in package.all_funcs():
            if func.name == symbol and func.location is not None:
                return func.location
        type_doc = package.type(symbol)
        if type_doc is not None and type_doc.location is not None:
            return type_doc.location
    raise SymbolNotFoundError(f"{symbol} not found in {package.import_path}")


def _value_location(value: ValueDoc, name: str) -> SourceLocation | None:
    if name not in value.names:
        return None
    for spec in value.decl.specs:
        if not isinstance(spec, ValueSpec):
            continue
        for ident in spec.names:
            if ident.name == name:
                return ident.location
    return value.location
