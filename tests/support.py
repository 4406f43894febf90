"""Test support: addressable fixture classes and result helpers."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from identkit.services.result import ResolutionResult

FIXTURE_MODULE = "identkit_fixture"
FIXTURE_VERSION = "1.2.3"

T = TypeVar("T")


class Outer:
    """Addressable class with a nested class, published as ``identkit_fixture``."""

    class Inner:
        pass


class Box(Generic[T]):
    pass


for _cls in (Outer, Outer.Inner, Box):
    _cls.__module__ = FIXTURE_MODULE


def assert_ok(result: ResolutionResult) -> Any:
    """Assert success and return the value."""
    assert result.ok, result.failure
    return result.value
