"""Entry point turning a page name into a finished :class:`Doc`."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from docnav.core.config import AppConfig
from docnav.core.logging import Logger, get_logger
from docnav.page.document import Doc, DocumentBuilder

from .errors import ResolutionError
from .loader import PackageLoader
from .pages import PagePrinter
from .specifier import PageSpec, format_specifier, parse_specifier

__all__ = ["RenderContext", "render_page"]


@dataclass(slots=True)
class RenderContext:
    """Everything page rendering needs besides the page name."""

    config: AppConfig
    loader: PackageLoader
    cwd: Path = field(default_factory=Path.cwd)
    logger: Logger = field(
        default_factory=lambda: get_logger(__name__, component="page-render")
    )

    @classmethod
    def from_config(cls, config: AppConfig, *, cwd: Path | None = None) -> "RenderContext":
        loader = PackageLoader(config.source.roots)
        return cls(config=config, loader=loader, cwd=cwd or Path.cwd())


def render_page(specifier: str, context: RenderContext) -> Doc:
    """Build the page named ``specifier``.

    Resolution failures do not propagate: the error message becomes the
    page body. Scope errors are construction defects and do propagate.

    Example:
        >>> ctx = RenderContext.from_config(AppConfig())  # doctest: +SKIP
        >>> render_page("godoc://missing", ctx).text  # doctest: +SKIP
        "cannot find package 'missing' in any of: <no roots>"
    """

    settings = context.config.render
    spec = parse_specifier(specifier, settings.page_prefix)
    name = format_specifier(spec, settings.page_prefix)
    try:
        doc = _render(spec, context)
    except ResolutionError as exc:
        context.logger.warning("page-render-failed", page=name, error=str(exc))
        builder = DocumentBuilder()
        builder.write(str(exc))
        return builder.build()
    context.logger.info(
        "page-rendered",
        page=name,
        lines=doc.text.count("\n") + 1,
        links=len(doc.links),
        anchors=len(doc.anchors),
    )
    return doc


def _render(spec: PageSpec, context: RenderContext) -> Doc:
    builder = DocumentBuilder()
    printer = PagePrinter(
        builder,
        settings=context.config.render,
        groups=context.config.highlight,
    )
    loader = context.loader
    if spec.is_root:
        printer.root_page(loader.subdirectories(""))
        return builder.build()
    package = loader.load(spec.import_path)
    if spec.symbol:
        printer.symbol_page(package, spec)
    else:
        printer.package_page(
            package,
            subdirectories=loader.subdirectories(spec.import_path),
        )
    return builder.build()
