"""TypeResolver — resolve a type identity string to a runtime type.

The string is handed to the catalog as-is, so decorated, canonical and bare
forms all work. Each call is independent; nothing is retried. A type whose
module is not loaded yet can be resolved by the caller after loading it.
"""

from __future__ import annotations

import functools
import logging
from typing import Any

from identkit.domain.failures import FailureKind, TypeNotDefined
from identkit.infrastructure.catalog import HostCatalog
from identkit.services._helpers import fail, fail_from_exception, succeed
from identkit.services.base import BaseResolver
from identkit.services.result import ResolutionResult

logger = logging.getLogger(__name__)


class TypeResolver(BaseResolver):
    """Resolves type identity strings against the host catalog."""

    def try_resolve_type(self, name: str) -> ResolutionResult:
        """Resolve *name* to a type.

        Failures:
            MALFORMED_IDENTITY: the lookup raised (bad syntax, broken module);
                the exception is attached as an ExceptionalReason.
            TYPE_NOT_FOUND: the lookup completed without finding a type; a
                TypeNotDefined reason carries the name.
        """
        op = "try_resolve_type"
        try:
            found: Any = self._catalog.lookup_type(name)
        except Exception as exc:
            logger.debug("Type lookup failed for %s: %s", name, exc)
            return fail_from_exception(op, FailureKind.MALFORMED_IDENTITY, exc, detail=name)

        if found is None:
            logger.debug("Type not found: %s", name)
            return fail(
                op,
                FailureKind.TYPE_NOT_FOUND,
                f"Type not found: {name}",
                detail=name,
                reasons=(TypeNotDefined(type_name=name),),
            )
        return succeed(op, found)


@functools.cache
def default_type_resolver() -> TypeResolver:
    """Shared resolver over the live interpreter with default settings."""
    return TypeResolver()


def try_resolve_type(name: str, *, catalog: HostCatalog | None = None) -> ResolutionResult:
    """Resolve *name* against the live interpreter (or *catalog*)."""
    resolver = default_type_resolver() if catalog is None else TypeResolver(catalog)
    return resolver.try_resolve_type(name)
