"""Command-line interface primitives for :mod:`docnav`.

This module exposes the Typer application behind the ``docnav`` console
script. Commands render documentation pages to the terminal, list their
links, and resolve positions the way an editor integration would.

Example:
    >>> import typer
    >>> from docnav.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from docnav.core.config import (
    DEFAULTS_RESOURCE_NAME,
    AppConfig,
    env_overrides,
    load_config,
    load_packaged_defaults,
    load_user_config,
    render_user_config,
)
from docnav.core.logging import configure_logging, get_logger
from docnav.explore import (
    PageSpec,
    RenderContext,
    ResolutionError,
    find_definition,
    format_specifier,
    parent_specifier,
    parse_specifier,
    render_page,
    resolve_package_spec,
)
from docnav.page.document import Doc
from docnav.page.manager import DocumentManager
from docnav.page.position import decode

_app_help = (
    "Navigable documentation pages for Go source trees."
    "\n\n"
    "Pages are named `godoc://<import path>[#Symbol[.Method]]`."
)

USER_CONFIG_NAME = "docnav.toml"

# Terminal styles for the editor highlight groups used by default.
_GROUP_STYLES: Mapping[str, str] = {
    "Constant": "bold magenta",
    "Comment": "green",
    "Special": "cyan",
    "Identifier": "bold",
    "Underlined": "underline",
}

_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help=f"Path to a {USER_CONFIG_NAME} file (defaults to ./{USER_CONFIG_NAME}).",
)
_ROOT_OPTION = typer.Option(
    None,
    "--root",
    "-r",
    metavar="DIR",
    help="Source root to search; may be repeated (overrides config).",
)
_LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    "-l",
    help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
)
_LOG_DIR_OPTION = typer.Option(
    None,
    "--log-dir",
    metavar="DIR",
    help="Also write JSON logs to DIR/docnav.log (overrides config).",
)
_CWD_OPTION = typer.Option(
    None,
    "--cwd",
    help="Directory relative package arguments are resolved against.",
)


def _load_app_config(
    *,
    config_path: Path | None,
    roots: list[Path] | None,
    log_level: str | None,
    log_dir: Path | None = None,
) -> AppConfig:
    """Resolve configuration layers and configure logging."""

    overrides: dict[str, Any] = {}
    if log_level:
        overrides["log_level"] = log_level
    if log_dir is not None:
        overrides["log_dir"] = str(log_dir)
    if roots:
        overrides["source"] = {"roots": [str(root) for root in roots]}

    user_path = config_path or Path(USER_CONFIG_NAME)
    if config_path is not None and not config_path.exists():
        raise typer.BadParameter(
            f"Config file not found: {config_path}",
            param_hint="--config",
        )

    try:
        config = load_config(
            defaults=load_packaged_defaults(),
            user_config=load_user_config(user_path),
            env_config=env_overrides(os.environ),
            cli_overrides=overrides,
        )
        configure_logging(level=config.log_level, log_dir=config.log_dir)
    except ValueError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    return config


def _page_name(
    config: AppConfig,
    target: str,
    symbol: str | None,
    cwd: Path,
) -> str:
    """Return the page name for a CLI target and optional symbol."""

    prefix = config.render.page_prefix
    if target.startswith(prefix):
        spec = parse_specifier(target, prefix)
    else:
        import_path = resolve_package_spec(
            target,
            cwd=cwd,
            roots=config.source.roots,
        )
        spec = PageSpec(import_path)
    if symbol:
        name, _, method = symbol.strip(".").partition(".")
        spec = PageSpec(spec.import_path, name, method)
    return format_specifier(spec, prefix)


def _styled(doc: Doc) -> Text:
    """Convert ``doc`` into a Rich :class:`Text` with highlight styles."""

    lines = doc.lines()
    offsets = [0]
    for line in lines:
        offsets.append(offsets[-1] + len(line) + 1)
    text = Text(doc.text)
    for span in doc.highlight_spans():
        style = _GROUP_STYLES.get(span.group)
        if style is None or span.line > len(lines):
            continue
        line = lines[span.line - 1]
        start = _char_index(line, span.start_column)
        end = _char_index(line, span.end_column)
        base = offsets[span.line - 1]
        text.stylize(style, base + start, base + end)
    return text


def _char_index(line: str, column: int) -> int:
    encoded = line.encode("utf-8")
    return len(encoded[: column - 1].decode("utf-8", errors="ignore"))


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``docnav`` CLI.

    Example:
        >>> import typer
        >>> from docnav.cli import create_app
        >>> cli = create_app()
        >>> isinstance(cli, typer.Typer)
        True
    """

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
        invoke_without_command=False,
        cls=typer.core.TyperGroup,
    )

    @app.callback()
    def main_callback() -> None:
        """Top-level CLI callback ensuring subcommands are dispatched."""

        return None

    @app.command("render", help="Render a documentation page.")
    def render_command(  # noqa: PLR0913 - CLI surface area intentionally explicit
        target: str = typer.Argument(
            ..., help="Page name, import path, ./relative dir, or /path."
        ),
        symbol: str | None = typer.Argument(
            None, help="Symbol or Type.Method to show on its own."
        ),
        plain: bool = typer.Option(
            False, "--plain", help="Print the page text without styling."
        ),
        cwd: Path | None = _CWD_OPTION,
        root: list[Path] = _ROOT_OPTION,
        config_path: Path | None = _CONFIG_OPTION,
        log_level: str | None = _LOG_LEVEL_OPTION,
        log_dir: Path | None = _LOG_DIR_OPTION,
    ) -> None:
        config = _load_app_config(
            config_path=config_path,
            roots=root,
            log_level=log_level,
            log_dir=log_dir,
        )
        base = cwd or Path.cwd()
        name = _page_name(config, target, symbol, base)
        doc = render_page(name, RenderContext.from_config(config, cwd=base))
        if plain:
            typer.echo(doc.text)
            return
        console = Console(highlight=False, soft_wrap=True)
        console.print(_styled(doc))

    @app.command("links", help="List the links on a documentation page.")
    def links_command(
        target: str = typer.Argument(..., help="Page name or package."),
        symbol: str | None = typer.Argument(None, help="Optional symbol."),
        cwd: Path | None = _CWD_OPTION,
        root: list[Path] = _ROOT_OPTION,
        config_path: Path | None = _CONFIG_OPTION,
        log_level: str | None = _LOG_LEVEL_OPTION,
        log_dir: Path | None = _LOG_DIR_OPTION,
    ) -> None:
        config = _load_app_config(
            config_path=config_path,
            roots=root,
            log_level=log_level,
            log_dir=log_dir,
        )
        base = cwd or Path.cwd()
        name = _page_name(config, target, symbol, base)
        doc = render_page(name, RenderContext.from_config(config, cwd=base))

        table = Table(title=name)
        table.add_column("Position")
        table.add_column("Text")
        table.add_column("Target")
        table.add_column("Jump")
        lines = doc.lines()
        for link in doc.links:
            line, start = decode(link.start)
            _, end = decode(link.end)
            encoded = lines[line - 1].encode("utf-8")
            label = encoded[start - 1 : end - 1].decode("utf-8", errors="replace")
            if link.address is not None:
                jump = "%d:%d" % decode(link.address)
            else:
                jump = doc.anchor_of(link) or ""
            table.add_row(
                f"{line}:{start}", label, doc.path_of(link) or name, jump
            )
        Console(soft_wrap=True).print(table)

    @app.command("lookup", help="Show where activating a position navigates.")
    def lookup_command(  # noqa: PLR0913 - CLI surface area intentionally explicit
        target: str = typer.Argument(..., help="Page name or package."),
        line: int = typer.Argument(..., min=1, help="1-based line."),
        column: int = typer.Argument(..., min=1, help="1-based byte column."),
        cwd: Path | None = _CWD_OPTION,
        root: list[Path] = _ROOT_OPTION,
        config_path: Path | None = _CONFIG_OPTION,
        log_level: str | None = _LOG_LEVEL_OPTION,
        log_dir: Path | None = _LOG_DIR_OPTION,
    ) -> None:
        config = _load_app_config(
            config_path=config_path,
            roots=root,
            log_level=log_level,
            log_dir=log_dir,
        )
        base = cwd or Path.cwd()
        name = _page_name(config, target, None, base)
        doc = render_page(name, RenderContext.from_config(config, cwd=base))

        manager = DocumentManager(hover_group=config.highlight.hover)
        manager.display(1, name, doc)
        command = manager.activate(1, line, column)
        if command is None:
            typer.secho(f"No link at {line}:{column}", fg=typer.colors.YELLOW)
            raise typer.Exit(code=1)
        if command.anchor:
            typer.echo(f"{command.path}#{command.anchor}")
        elif command.line is not None:
            typer.echo(f"{command.path}:{command.line}:{command.column}")
        else:
            typer.echo(command.path)

    @app.command("def", help="Print the source location of a definition.")
    def def_command(
        package: str = typer.Argument(..., help="Import path or ./dir."),
        symbol: str | None = typer.Argument(None, help="Symbol or Type.Method."),
        cwd: Path | None = _CWD_OPTION,
        root: list[Path] = _ROOT_OPTION,
        config_path: Path | None = _CONFIG_OPTION,
        log_level: str | None = _LOG_LEVEL_OPTION,
        log_dir: Path | None = _LOG_DIR_OPTION,
    ) -> None:
        config = _load_app_config(
            config_path=config_path,
            roots=root,
            log_level=log_level,
            log_dir=log_dir,
        )
        base = cwd or Path.cwd()
        context = RenderContext.from_config(config, cwd=base)
        import_path = resolve_package_spec(
            package, cwd=base, roots=config.source.roots
        )
        logger = get_logger(__name__, command="def")
        try:
            location = find_definition(
                context.loader.load(import_path), symbol or ""
            )
        except ResolutionError as exc:
            logger.warning("definition-not-found", package=import_path, error=str(exc))
            typer.secho(f"Definition not found: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(f"{location.path}:{location.line}:{location.column}")

    @app.command("up", help="Print the page one level above a page name.")
    def up_command(
        target: str = typer.Argument(..., help="Page name."),
        config_path: Path | None = _CONFIG_OPTION,
    ) -> None:
        config = _load_app_config(
            config_path=config_path, roots=None, log_level=None
        )
        prefix = config.render.page_prefix
        parent = parent_specifier(parse_specifier(target, prefix))
        typer.echo(format_specifier(parent, prefix))

    @app.command("config", help="Print the effective configuration as TOML.")
    def config_command(
        root: list[Path] = _ROOT_OPTION,
        config_path: Path | None = _CONFIG_OPTION,
        log_level: str | None = _LOG_LEVEL_OPTION,
        log_dir: Path | None = _LOG_DIR_OPTION,
        defaults_only: bool = typer.Option(
            False,
            "--defaults",
            help=f"Print the packaged defaults ({DEFAULTS_RESOURCE_NAME}).",
        ),
    ) -> None:
        if defaults_only:
            typer.echo(
                render_user_config(AppConfig(**load_packaged_defaults())),
                nl=False,
            )
            return
        config = _load_app_config(
            config_path=config_path,
            roots=root,
            log_level=log_level,
            log_dir=log_dir,
        )
        typer.echo(render_user_config(config), nl=False)

    return app


__all__ = ["create_app"]
