"""Configuration models and loaders for :mod:`docnav`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
import os
from pathlib import Path
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, field_validator, model_validator

from docnav.resources import get_resource


class RenderSettings(BaseModel):
    """Page layout and declaration rendering values."""

    page_prefix: str = Field(
        default="godoc://",
        description="Marker distinguishing generated pages from files.",
    )
    text_width: int = Field(
        default=80,
        gt=8,
        description="Column width used when wrapping documentation text.",
    )
    text_indent: int = Field(
        default=4,
        ge=0,
        description="Spaces prefixed to documentation text lines.",
    )
    string_literal_limit: int = Field(
        default=128,
        ge=2,
        description="String literals longer than this many bytes are elided.",
    )
    composite_element_limit: int = Field(
        default=100,
        ge=0,
        description="Composite literals with more elements are elided.",
    )
    link_builtins: bool = Field(
        default=True,
        description="Whether predeclared identifiers link to the builtin page.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("page_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        if not value:
            raise ValueError("page_prefix must not be empty")
        return value

    @property
    def indent(self) -> str:
        """Return the documentation text indent as a string."""

        return " " * self.text_indent


class HighlightSettings(BaseModel):
    """Editor highlight groups applied to page regions."""

    header: str = Field(default="Constant", description="Section headers.")
    comment: str = Field(default="Comment", description="Comments in code.")
    declaration: str = Field(
        default="Special",
        description="Rendered declarations.",
    )
    link: str = Field(default="Identifier", description="Link text.")
    hover: str = Field(
        default="Underlined",
        description="Overlay applied to the link under the cursor.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }


class SourceSettings(BaseModel):
    """Locations searched when resolving import paths."""

    roots: list[Path] = Field(
        default_factory=list,
        description="Source roots whose subdirectories are import paths.",
    )

    model_config = {
        "validate_assignment": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _coerce_raw(cls, value: Any) -> Any:
        """Accept a path-separator delimited string for ``roots``."""

        if isinstance(value, MappingABC):
            roots = value.get("roots")
            if isinstance(roots, str):
                data = dict(value)
                data["roots"] = [
                    item for item in roots.split(os.pathsep) if item.strip()
                ]
                return data
        return value

    @model_validator(mode="after")
    def _normalize(self) -> "SourceSettings":
        object.__setattr__(
            self,
            "roots",
            [Path(root).expanduser() for root in self.roots],
        )
        return self


class AppConfig(BaseModel):
    """Root configuration for the :mod:`docnav` application."""

    log_level: str = Field(
        default="WARNING",
        description="Default logging level for the application runtime.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory receiving docnav.log; unset logs to stderr only.",
    )
    render: RenderSettings = Field(default_factory=RenderSettings)
    highlight: HighlightSettings = Field(default_factory=HighlightSettings)
    source: SourceSettings = Field(default_factory=SourceSettings)

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @model_validator(mode="after")
    def _post_process(self) -> "AppConfig":
        """Normalize fields after validation."""

        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.log_dir is not None:
            object.__setattr__(self, "log_dir", self.log_dir.expanduser())
        return self


DEFAULTS_RESOURCE_NAME = "docnav.defaults.toml"
ENV_PREFIX = "DOCNAV_"


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content.

    Example:
        >>> text = read_packaged_defaults_text()
        >>> text.startswith("#")
        True
    """

    resource = get_resource(DEFAULTS_RESOURCE_NAME)
    return resource.read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> defaults = load_packaged_defaults()
        >>> defaults["render"]["page_prefix"]
        'godoc://'
    """

    data: dict[str, Any] = tomllib.loads(read_packaged_defaults_text())
    return data


def load_user_config(path: Path) -> dict[str, Any]:
    """Return the parsed TOML at ``path`` or an empty mapping if absent."""

    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate ``DOCNAV_*`` environment variables into a config layer.

    Example:
        >>> env_overrides({"DOCNAV_LOG_LEVEL": "debug"})
        {'log_level': 'debug'}
    """

    layer: dict[str, Any] = {}
    level = environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if level:
        layer["log_level"] = level
    roots = environ.get(f"{ENV_PREFIX}SOURCE_ROOTS")
    if roots:
        layer["source"] = {"roots": roots}
    log_dir = environ.get(f"{ENV_PREFIX}LOG_DIR")
    if log_dir:
        layer["log_dir"] = log_dir
    prefix = environ.get(f"{ENV_PREFIX}PAGE_PREFIX")
    if prefix:
        layer["render"] = {"page_prefix": prefix}
    return layer


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any],
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults shipped with the application.
        user_config: Parsed user ``docnav.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.
    """

    stack = dict(defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)
    return AppConfig(**stack)


def render_user_config(config: AppConfig, *, include_defaults: bool = True) -> str:
    """Render a ``docnav.toml`` document for ``config``.

    Args:
        config: Configuration instance to serialize.
        include_defaults: Whether to include the explanatory header comments.

    Returns:
        A TOML-formatted string.
    """

    document = tomlkit.document()

    if include_defaults:
        document.add(tomlkit.comment("docnav configuration"))
        document.add(
            tomlkit.comment(
                "Precedence: CLI flags > env vars > docnav.toml > defaults"
            )
        )
        document.add(tomlkit.comment("Environment overrides:"))
        document.add(tomlkit.comment("  DOCNAV_LOG_LEVEL=info"))
        document.add(tomlkit.comment("  DOCNAV_SOURCE_ROOTS=/go/src:/usr/lib/go/src"))
        document.add(tomlkit.comment("  DOCNAV_LOG_DIR=~/.cache/docnav"))
        document.add(tomlkit.nl())

    document["log_level"] = config.log_level
    if config.log_dir is not None:
        document["log_dir"] = str(config.log_dir)

    render_table = tomlkit.table()
    render_table["page_prefix"] = config.render.page_prefix
    render_table["text_width"] = config.render.text_width
    render_table["text_indent"] = config.render.text_indent
    render_table["string_literal_limit"] = config.render.string_literal_limit
    render_table["composite_element_limit"] = (
        config.render.composite_element_limit
    )
    render_table["link_builtins"] = config.render.link_builtins
    document["render"] = render_table

    highlight_table = tomlkit.table()
    highlight_table["header"] = config.highlight.header
    highlight_table["comment"] = config.highlight.comment
    highlight_table["declaration"] = config.highlight.declaration
    highlight_table["link"] = config.highlight.link
    highlight_table["hover"] = config.highlight.hover
    document["highlight"] = highlight_table

    source_table = tomlkit.table()
    source_table["roots"] = [str(root) for root in config.source.roots]
    document["source"] = source_table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "HighlightSettings",
    "RenderSettings",
    "SourceSettings",
    "DEFAULTS_RESOURCE_NAME",
    "ENV_PREFIX",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "load_user_config",
    "read_packaged_defaults_text",
    "render_user_config",
]
