"""ModuleResolver — find a loaded module matching a module identity.

Absence is an expected outcome (the caller may load the module and retry),
so :meth:`ModuleResolver.resolve` returns None rather than failing.

When several loaded modules match (e.g. two versions of one name), the
``resolver.tie_break`` setting decides: ``first`` returns the first match in
catalog order, which is unspecified; ``highest`` returns the match with the
highest version.
"""

from __future__ import annotations

import logging

from identkit.config.models import TieBreak
from identkit.domain.failures import FailureKind, ModuleNotLoaded
from identkit.domain.identity import ModuleIdentity
from identkit.domain.matching import is_same_as
from identkit.infrastructure.catalog import LoadedModule
from identkit.services._helpers import fail, fail_from_exception, succeed
from identkit.services.base import BaseResolver
from identkit.services.codec import parse_module_identity
from identkit.services.result import ResolutionResult

logger = logging.getLogger(__name__)


def _matches(entry: LoadedModule, identity: ModuleIdentity) -> bool:
    if is_same_as(entry.identity, identity):
        return True
    return entry.distribution is not None and is_same_as(entry.distribution_identity, identity)


def _version_key(entry: LoadedModule) -> tuple[int, int, int, int]:
    version = entry.identity.version
    if version is None:
        return (-1, -1, -1, -1)
    return version.sort_key()


class ModuleResolver(BaseResolver):
    """Resolves module identities against the host catalog."""

    @property
    def tie_break(self) -> TieBreak:
        return self._settings.resolver.tie_break

    def _find(self, identity: ModuleIdentity) -> LoadedModule | None:
        if self.tie_break == TieBreak.FIRST:
            for entry in self._catalog.loaded_modules():
                if _matches(entry, identity):
                    return entry
            logger.debug("No loaded module matches %s", identity)
            return None

        matches = [e for e in self._catalog.loaded_modules() if _matches(e, identity)]
        if not matches:
            logger.debug("No loaded module matches %s", identity)
            return None
        return max(matches, key=_version_key)

    def resolve(self, identity: ModuleIdentity) -> LoadedModule | None:
        """Return a loaded module satisfying *identity*, or None.

        A faulting catalog also yields None; use :meth:`try_resolve` to see
        the fault.
        """
        try:
            return self._find(identity)
        except Exception:
            logger.debug("Catalog enumeration failed for %s", identity, exc_info=True)
            return None

    def try_resolve(self, identity: ModuleIdentity) -> ResolutionResult:
        """Like :meth:`resolve`, with absence and catalog faults as failures."""
        op = "resolve_module"
        persisted = identity.to_persistable()
        try:
            entry = self._find(identity)
        except Exception as exc:
            logger.debug("Catalog enumeration failed for %s", persisted, exc_info=True)
            return fail_from_exception(op, FailureKind.MODULE_NOT_FOUND, exc, detail=persisted)
        if entry is None:
            return fail(
                op,
                FailureKind.MODULE_NOT_FOUND,
                f"No loaded module matches {persisted}",
                detail=persisted,
                reasons=(ModuleNotLoaded(identity=persisted),),
            )
        return succeed(op, entry)

    def resolve_persisted(self, text: str) -> ResolutionResult:
        """Parse a persisted ``Name/Version`` string and resolve it."""
        parsed = parse_module_identity(text)
        if not parsed.ok:
            return parsed.model_copy(update={"op": "resolve_persisted"})
        result = self.try_resolve(parsed.value)
        return result.model_copy(update={"op": "resolve_persisted"})
