"""Tests for :mod:`docnav.resources`."""

from __future__ import annotations

import tomllib

import pytest

from docnav.resources import get_resource


def test_get_resource_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        get_resource("does-not-exist.toml")


def test_packaged_defaults_resource_is_valid_toml() -> None:
    resource = get_resource("docnav.defaults.toml")

    data = tomllib.loads(resource.read_text(encoding="utf-8"))

    assert set(data) == {"log_level", "render", "highlight", "source"}
