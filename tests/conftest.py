"""Shared pytest fixtures for identkit tests."""

from __future__ import annotations

import os
import sys
import types
from collections.abc import Generator
from pathlib import Path

import pytest

from identkit.config.settings import IdentkitSettings
from identkit.infrastructure.catalog import RegistryCatalog
from tests.support import FIXTURE_MODULE, FIXTURE_VERSION, Box, Outer


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep IDENTKIT_* variables and stray identkit.toml files out of tests."""
    for key in list(os.environ):
        if key.startswith("IDENTKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> IdentkitSettings:
    """Default settings with no TOML file."""
    return IdentkitSettings()


@pytest.fixture
def fixture_module(monkeypatch: pytest.MonkeyPatch) -> Generator[types.ModuleType]:
    """A top-level module named ``identkit_fixture`` exposing Outer and Box."""
    module = types.ModuleType(FIXTURE_MODULE)
    module.__version__ = FIXTURE_VERSION  # type: ignore[attr-defined]
    module.Outer = Outer  # type: ignore[attr-defined]
    module.Box = Box  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, FIXTURE_MODULE, module)
    yield module


@pytest.fixture
def registry() -> RegistryCatalog:
    """Registry with builtins, the fixture classes and three modules."""
    catalog = RegistryCatalog()
    catalog.register_module("builtins", "3.12.0", handle="builtins-handle", distribution="python")
    catalog.register_module(FIXTURE_MODULE, FIXTURE_VERSION + ".0", handle="fixture-handle")
    catalog.register_module("Alpha", "1.2.3.4", handle="alpha-handle", distribution="alpha-dist")
    for tp in (str, int, list, dict):
        catalog.register_type(tp)
    catalog.register_type(Outer)
    catalog.register_type(Outer.Inner)
    catalog.register_type(Box)
    return catalog
