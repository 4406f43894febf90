"""IdentityCodec — persistable module identities and canonical type names.

Parsing goes through the domain models; this module adds the result
contract and renders decorated type identities for live Python types.
"""

from __future__ import annotations

import functools
import logging
import types
import typing
from typing import Any, get_args, get_origin

from identkit.config.settings import IdentkitSettings
from identkit.domain.failures import FailureKind
from identkit.domain.identity import MalformedIdentityError, ModuleIdentity
from identkit.domain.typenames import canonicalize, parse_type_identity
from identkit.infrastructure.catalog import HostCatalog, RuntimeCatalog
from identkit.services._helpers import fail, fail_from_exception, succeed
from identkit.services.result import ResolutionResult

logger = logging.getLogger(__name__)

# Both spellings of a union render as typing:Union so that either resolves.
UNION_HEAD = "typing:Union"
NONE_TYPE_HEAD = "types:NoneType"


def _is_union(origin: Any) -> bool:
    return origin is typing.Union or origin is types.UnionType


def parse_module_identity(text: str) -> ResolutionResult:
    """Parse ``Name/Major.Minor[.Build[.Revision]]`` into a ModuleIdentity."""
    op = "parse_module_identity"
    try:
        return succeed(op, ModuleIdentity.from_persistable(text))
    except ValueError as exc:
        return fail_from_exception(op, FailureKind.MALFORMED_IDENTITY, exc, detail=text)


def format_module_identity(identity: ModuleIdentity) -> str:
    """Render the persistable form of *identity*."""
    return identity.to_persistable()


def canonicalize_type_identity(text: str) -> ResolutionResult:
    """Strip volatile decoration and the distribution tail from a type identity.

    Bare names come back unchanged as a success. Unbalanced brackets are the
    only malformed input.
    """
    op = "canonicalize_type_identity"
    try:
        return succeed(op, canonicalize(text))
    except MalformedIdentityError as exc:
        return fail_from_exception(op, FailureKind.MALFORMED_IDENTITY, exc, detail=text)


def parse_type_identity_string(text: str) -> ResolutionResult:
    """Parse a decorated type identity into a TypeIdentity."""
    op = "parse_type_identity"
    try:
        return succeed(op, parse_type_identity(text))
    except MalformedIdentityError as exc:
        return fail_from_exception(op, FailureKind.MALFORMED_IDENTITY, exc, detail=text)


class TypeNameRenderer:
    """Render fully decorated identity strings for Python types.

    Args:
        catalog: Supplies the distribution and version of a type's module.
        settings: Culture and signing-key placeholders come from ``codec``.
    """

    def __init__(
        self,
        catalog: HostCatalog | None = None,
        *,
        settings: IdentkitSettings | None = None,
    ) -> None:
        self._settings = settings or IdentkitSettings()
        self._catalog = catalog if catalog is not None else RuntimeCatalog.from_settings(self._settings)

    def _head(self, tp: Any) -> str:
        if tp is types.NoneType:
            return NONE_TYPE_HEAD
        qualname = getattr(tp, "__qualname__", None)
        module = getattr(tp, "__module__", None)
        if not qualname or not module:
            msg = f"{tp!r} has no module-qualified name"
            raise TypeError(msg)
        if "<locals>" in qualname:
            msg = f"{module}:{qualname} is defined in a function body and cannot be addressed"
            raise TypeError(msg)
        return f"{module}:{qualname}"

    def _tail(self, module_name: str) -> str:
        entry = self._catalog.describe_module(module_name)
        if entry is None:
            return module_name.partition(".")[0]
        codec = self._settings.codec
        segments = [entry.distribution or entry.identity.name]
        if entry.identity.version is not None:
            segments.append(f"Version={entry.identity.version}")
        segments.append(f"Culture={codec.culture}")
        segments.append(f"PublicKeyToken={codec.public_key_token}")
        return ", ".join(segments)

    def render(self, tp: Any) -> str:
        """Return the decorated identity of *tp*; raises TypeError if not addressable."""
        origin = get_origin(tp)
        if origin is not None:
            args = get_args(tp)
            if not args:
                msg = f"{tp!r} has no type arguments"
                raise TypeError(msg)
            inner = ", ".join(f"[{self.render(a)}]" for a in args)
            if _is_union(origin):
                return f"{UNION_HEAD}[{inner}], {self._tail('typing')}"
            return f"{self._head(origin)}[{inner}], {self._tail(origin.__module__)}"
        if not isinstance(tp, type):
            msg = f"{tp!r} is not a type"
            raise TypeError(msg)
        head = self._head(tp)
        return f"{head}, {self._tail(head.partition(':')[0])}"

    def qualified_type_name(self, tp: Any) -> ResolutionResult:
        op = "qualified_type_name"
        try:
            return succeed(op, self.render(tp))
        except Exception as exc:
            logger.debug("Cannot render identity for %r", tp, exc_info=True)
            return fail_from_exception(op, FailureKind.MALFORMED_IDENTITY, exc, detail=repr(tp))

    def canonical_type_name(self, tp: Any) -> ResolutionResult:
        """Canonical (undecorated) identity of *tp*, suitable for persistence."""
        op = "canonical_type_name"
        rendered = self.qualified_type_name(tp)
        if not rendered.ok:
            assert rendered.failure is not None
            return fail(
                op,
                rendered.failure.kind,
                rendered.failure.message,
                detail=rendered.failure.detail,
                reasons=rendered.failure.reasons,
            )
        result = canonicalize_type_identity(rendered.value)
        return result.model_copy(update={"op": op})


@functools.cache
def default_renderer() -> TypeNameRenderer:
    """Shared renderer over the live interpreter with default settings."""
    return TypeNameRenderer()


def _renderer(catalog: HostCatalog | None) -> TypeNameRenderer:
    return default_renderer() if catalog is None else TypeNameRenderer(catalog)


def qualified_type_name(tp: Any, *, catalog: HostCatalog | None = None) -> ResolutionResult:
    """Fully decorated identity of *tp* against the live interpreter by default."""
    return _renderer(catalog).qualified_type_name(tp)


def canonical_type_name(tp: Any, *, catalog: HostCatalog | None = None) -> ResolutionResult:
    """Canonical identity of *tp* against the live interpreter by default."""
    return _renderer(catalog).canonical_type_name(tp)
