"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator
from typing import Any

import pytest
import structlog

from identkit.config.logging import HANDLER_NAME, configure_from_settings, configure_logging
from identkit.config.settings import IdentkitSettings
from identkit.infrastructure.catalog import RegistryCatalog
from identkit.services.types import TypeResolver


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore identkit and root logger state after each test."""
    root = logging.getLogger()
    root_handlers = root.handlers[:]
    root_level = root.level
    pkg = logging.getLogger("identkit")
    pkg_handlers = pkg.handlers[:]
    pkg_level = pkg.level
    pkg_propagate = pkg.propagate
    yield
    root.handlers = root_handlers
    root.setLevel(root_level)
    pkg.handlers = pkg_handlers
    pkg.setLevel(pkg_level)
    pkg.propagate = pkg_propagate
    structlog.reset_defaults()


def _lines(buf: io.StringIO) -> list[dict[str, Any]]:
    return [json.loads(line) for line in buf.getvalue().splitlines() if line.strip()]


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, stream=io.StringIO())
        assert logging.getLogger("identkit").level == logging.DEBUG

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, stream=io.StringIO())
        assert logging.getLogger("identkit").level == logging.WARNING

    def test_root_logger_untouched(self) -> None:
        root = logging.getLogger()
        before = root.handlers[:]
        configure_logging(verbose=True, stream=io.StringIO())
        assert root.handlers == before
        assert logging.getLogger("identkit").propagate is False

    def test_json_mode_output(self) -> None:
        buf = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buf)
        structlog.get_logger("identkit.test").warning("json test", answer=42)
        (parsed,) = _lines(buf)
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "identkit.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(self) -> None:
        buf = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buf)
        logging.getLogger("identkit.services.modules").debug("No loaded module matches x")
        (parsed,) = _lines(buf)
        assert parsed["event"] == "No loaded module matches x"
        assert parsed["level"] == "debug"

    def test_debug_suppressed_when_not_verbose(self) -> None:
        buf = io.StringIO()
        configure_logging(verbose=False, log_json=True, stream=buf)
        logging.getLogger("identkit.services.modules").debug("hidden")
        assert buf.getvalue() == ""

    def test_resolver_miss_is_logged(self) -> None:
        buf = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buf)
        TypeResolver(RegistryCatalog()).try_resolve_type("nowhere:Thing")
        events = [line["event"] for line in _lines(buf)]
        assert "Type not found: nowhere:Thing" in events

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, stream=io.StringIO())
        configure_logging(verbose=True, log_json=True, stream=io.StringIO())
        pkg = logging.getLogger("identkit")
        assert [h.get_name() for h in pkg.handlers].count(HANDLER_NAME) == 1

    def test_from_settings(self) -> None:
        configure_from_settings(IdentkitSettings(verbose=True))
        assert logging.getLogger("identkit").level == logging.DEBUG
