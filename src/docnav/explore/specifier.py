"""Page names: parsing, formatting, and moving up a level.

A page name is ``<prefix><import path>[#<symbol>[.<method>]]``. The empty
import path names the root page listing every source root.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import os
from pathlib import Path, PurePosixPath

__all__ = [
    "PageSpec",
    "format_specifier",
    "parent_specifier",
    "parse_specifier",
    "resolve_package_spec",
]

DEFAULT_PREFIX = "godoc://"


@dataclass(frozen=True, slots=True)
class PageSpec:
    """Parsed page name."""

    import_path: str = ""
    symbol: str = ""
    method: str = ""

    @property
    def fragment(self) -> str:
        """Return the anchor name addressed by this page, if any."""

        if self.method:
            return f"{self.symbol}.{self.method}"
        return self.symbol

    @property
    def is_root(self) -> bool:
        return not self.import_path


def parse_specifier(text: str, prefix: str = DEFAULT_PREFIX) -> PageSpec:
    """Split a page name into import path, symbol, and method.

    Example:
        >>> parse_specifier("godoc://net/http#Client.Do")
        PageSpec(import_path='net/http', symbol='Client', method='Do')
    """

    text = text.replace(os.sep, "/")
    if text.startswith(prefix):
        text = text[len(prefix) :]
    import_path, sep, fragment = text.partition("#")
    if not sep:
        return PageSpec(import_path)
    symbol, _, method = fragment.partition(".")
    return PageSpec(import_path, symbol, method)


def format_specifier(spec: PageSpec, prefix: str = DEFAULT_PREFIX) -> str:
    """Return the page name for ``spec``; inverse of :func:`parse_specifier`."""

    name = prefix + spec.import_path
    if spec.symbol:
        name += "#" + spec.fragment
    return name


def parent_specifier(spec: PageSpec) -> PageSpec:
    """Return the page one level up from ``spec``.

    Method pages go to their type, symbol pages to their package, and
    package pages to the enclosing directory.

    Example:
        >>> parent_specifier(PageSpec("net/http"))
        PageSpec(import_path='net', symbol='', method='')
    """

    if spec.method:
        return PageSpec(spec.import_path, spec.symbol)
    if spec.symbol:
        return PageSpec(spec.import_path)
    parent = str(PurePosixPath(spec.import_path).parent) if spec.import_path else ""
    if parent == ".":
        parent = ""
    return PageSpec(parent)


def resolve_package_spec(
    spec: str,
    *,
    cwd: Path,
    roots: Sequence[Path],
    imports: Mapping[str, str] | None = None,
) -> str:
    """Turn a user supplied package argument into an import path.

    ``./x`` and ``../x`` are resolved against ``cwd`` and mapped to an import
    path under one of ``roots``; a ``.go`` file resolves to its directory's
    package. ``/path`` is taken literally. Other names are looked up in
    ``imports`` (package name to import path), falling back to the name
    itself.
    """

    if spec.endswith(".go"):
        directory = Path(spec).parent
        if not directory.is_absolute():
            directory = cwd / directory
        found = _import_path_for(directory, roots)
        if found is not None:
            return found
    path = spec.rstrip("/")
    if spec.startswith("."):
        found = _import_path_for(cwd / spec, roots)
        if found is not None:
            return found
    elif spec.startswith("/"):
        path = path[1:]
    elif imports and spec in imports:
        path = imports[spec]
    return path


def _import_path_for(directory: Path, roots: Sequence[Path]) -> str | None:
    resolved = directory.resolve()
    for root in roots:
        try:
            relative = resolved.relative_to(Path(root).resolve())
        except ValueError:
            continue
        return relative.as_posix() if relative.parts else ""
    return None
