"""Host catalogs — the read-only view of loaded modules and types.

Resolution algorithms never touch ``sys.modules`` directly; they query a
:class:`HostCatalog`. Two implementations ship:

* :class:`RuntimeCatalog` — the live interpreter. Modules come from a
  snapshot of ``sys.modules``; versions from installed distribution
  metadata, the interpreter version (stdlib and built-ins), or
  ``__version__``. Types are located by attribute walk over loaded
  modules; importing a missing module is opt-in (``import_missing``).
* :class:`RegistryCatalog` — an explicit registry the host populates at
  startup. Nothing is imported.

Catalogs are never mutated by identkit.
"""

from __future__ import annotations

import functools
import importlib
import importlib.metadata
import logging
import sys
import typing
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING, Any, Protocol, get_origin, runtime_checkable

from identkit.domain.identity import ModuleIdentity, VersionQuad
from identkit.domain.matching import is_same_as
from identkit.domain.typenames import TypeSpec, parse_type_spec

if TYPE_CHECKING:
    from identkit.config.settings import IdentkitSettings

logger = logging.getLogger(__name__)

BUILTINS_MODULE = "builtins"


@dataclass(frozen=True)
class LoadedModule:
    """A loaded module as seen by a catalog.

    Attributes:
        identity: Import name and version.
        handle: The module object (or whatever the host registered).
        distribution: Name of the providing distribution, if known.
    """

    identity: ModuleIdentity
    handle: Any = None
    distribution: str | None = None

    @property
    def distribution_identity(self) -> ModuleIdentity:
        """Identity under the distribution name (import name if unknown)."""
        return ModuleIdentity(
            name=self.distribution or self.identity.name,
            version=self.identity.version,
        )


@runtime_checkable
class HostCatalog(Protocol):
    """Read-only view of the host's loaded modules and types."""

    def loaded_modules(self) -> Iterable[LoadedModule]:
        """Enumerate currently loaded top-level modules (order unspecified)."""
        ...

    def describe_module(self, module_name: str) -> LoadedModule | None:
        """Describe the top-level module owning *module_name*, if loaded."""
        ...

    def lookup_type(self, name: str) -> Any | None:
        """Look up a type by identity string.

        Returns None when no such type exists. Raises on malformed input.
        """
        ...


def _is_type_like(obj: Any) -> bool:
    # typing.Union is a special form, not a class, before 3.14.
    return isinstance(obj, type) or get_origin(obj) is not None or obj is typing.Union


def _walk(root: Any, qualname: str) -> Any | None:
    obj = root
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj


def _top_level(module_name: str) -> str:
    return module_name.partition(".")[0]


class _CatalogBase(ABC):
    """Shared lookup: generic arguments, sequence suffixes, distribution checks."""

    @abstractmethod
    def describe_module(self, module_name: str) -> LoadedModule | None: ...

    @abstractmethod
    def _locate(self, spec: TypeSpec) -> tuple[Any, str] | None:
        """Return ``(type, module_name)`` for the head of *spec*, or None."""

    def lookup_type(self, name: str) -> Any | None:
        return self._build(parse_type_spec(name))

    def _build(self, spec: TypeSpec) -> Any | None:
        located = self._locate(spec)
        if located is None:
            return None
        found, module_name = located
        if spec.distribution is not None and not self._distribution_matches(module_name, spec.distribution):
            logger.debug("Distribution mismatch for %s: wanted %s", spec.name, spec.distribution)
            return None

        if spec.args:
            args = []
            for arg in spec.args:
                resolved = self._build(arg)
                if resolved is None:
                    return None
                args.append(resolved)
            found = found[tuple(args)] if len(args) > 1 else found[args[0]]

        for _ in range(spec.rank):
            found = list[found]
        return found

    def _distribution_matches(self, module_name: str, wanted: ModuleIdentity) -> bool:
        entry = self.describe_module(module_name)
        if entry is None:
            return False
        return is_same_as(entry.distribution_identity, wanted) or is_same_as(entry.identity, wanted)


class RuntimeCatalog(_CatalogBase):
    """Catalog backed by the running interpreter.

    Args:
        interpreter_distribution: Distribution name reported for stdlib and
            built-in modules.
        import_missing: Import a module named by a type identity when it is
            not loaded yet. Off by default: only already-loaded modules are
            searched and ``sys.modules`` is left untouched.
    """

    def __init__(
        self,
        *,
        interpreter_distribution: str = "python",
        import_missing: bool = False,
    ) -> None:
        self._interpreter_distribution = interpreter_distribution
        self._import_missing = import_missing

    @classmethod
    def from_settings(cls, settings: IdentkitSettings) -> RuntimeCatalog:
        return cls(
            interpreter_distribution=settings.codec.interpreter_distribution,
            import_missing=settings.resolver.import_missing,
        )

    @functools.cached_property
    def _package_map(self) -> Mapping[str, list[str]]:
        return importlib.metadata.packages_distributions()

    def _is_interpreter_module(self, name: str) -> bool:
        return name in sys.builtin_module_names or name in sys.stdlib_module_names

    def _describe(self, name: str, module: ModuleType) -> LoadedModule:
        if self._is_interpreter_module(name):
            version = VersionQuad(
                major=sys.version_info.major,
                minor=sys.version_info.minor,
                build=sys.version_info.micro,
            )
            return LoadedModule(
                identity=ModuleIdentity(name=name, version=version),
                handle=module,
                distribution=self._interpreter_distribution,
            )

        distribution: str | None = None
        release: str | None = None
        for candidate in self._package_map.get(name, []):
            try:
                release = importlib.metadata.version(candidate)
            except importlib.metadata.PackageNotFoundError:
                continue
            distribution = candidate
            break
        if release is None:
            release = getattr(module, "__version__", None)
            if not isinstance(release, str):
                release = None
        return LoadedModule(
            identity=ModuleIdentity(name=name, version=VersionQuad.from_release(release)),
            handle=module,
            distribution=distribution,
        )

    def loaded_modules(self) -> Iterable[LoadedModule]:
        # Snapshot: sys.modules may change while we iterate.
        for name, module in list(sys.modules.items()):
            if "." in name or not isinstance(module, ModuleType):
                continue
            yield self._describe(name, module)

    def describe_module(self, module_name: str) -> LoadedModule | None:
        top = _top_level(module_name)
        module = sys.modules.get(top)
        if not isinstance(module, ModuleType):
            return None
        return self._describe(top, module)

    def _module(self, module_name: str) -> ModuleType | None:
        module = sys.modules.get(module_name)
        if isinstance(module, ModuleType):
            return module
        if not self._import_missing:
            return None
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only the requested module (or a parent) being absent means "not
            # found"; a missing dependency of an existing module propagates.
            if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                return None
            raise

    def _candidates(self, spec: TypeSpec) -> list[tuple[str, str]]:
        if spec.module_path is not None:
            _, _, qualname = spec.name.partition(":")
            return [(spec.module_path, qualname)]
        parts = spec.name.split(".")
        if len(parts) == 1:
            return [(BUILTINS_MODULE, spec.name)]
        # Longest importable module prefix first.
        return [(".".join(parts[:i]), ".".join(parts[i:])) for i in range(len(parts) - 1, 0, -1)]

    def _locate(self, spec: TypeSpec) -> tuple[Any, str] | None:
        for module_name, qualname in self._candidates(spec):
            module = self._module(module_name)
            if module is None:
                continue
            found = _walk(module, qualname)
            if found is not None and _is_type_like(found):
                return found, module_name
        return None


class RegistryCatalog(_CatalogBase):
    """Catalog populated explicitly by the host.

    Types are keyed by ``module:qualname``; a dotted ``module.qualname``
    alias is registered alongside.
    """

    def __init__(self) -> None:
        self._modules: list[LoadedModule] = []
        self._types: dict[str, Any] = {}

    def register_module(
        self,
        name: str,
        version: str | VersionQuad | None = None,
        *,
        handle: Any = None,
        distribution: str | None = None,
    ) -> LoadedModule:
        """Add a module entry; several versions of one name may coexist."""
        if isinstance(version, str):
            version = VersionQuad.parse(version)
        entry = LoadedModule(
            identity=ModuleIdentity(name=name, version=version),
            handle=handle,
            distribution=distribution,
        )
        self._modules.append(entry)
        return entry

    def register_type(self, tp: Any, *, name: str | None = None) -> str:
        """Register *tp* under its ``module:qualname`` (or an explicit *name*).

        Returns the primary key.
        """
        if name is None:
            name = f"{tp.__module__}:{tp.__qualname__}"
        self._types[name] = tp
        module, sep, qualname = name.partition(":")
        if sep:
            self._types.setdefault(f"{module}.{qualname}", tp)
        return name

    def loaded_modules(self) -> Iterable[LoadedModule]:
        return list(self._modules)

    def describe_module(self, module_name: str) -> LoadedModule | None:
        key = _top_level(module_name).casefold()
        for entry in self._modules:
            if entry.identity.key == key:
                return entry
        return None

    def _locate(self, spec: TypeSpec) -> tuple[Any, str] | None:
        found = self._types.get(spec.name)
        if found is None and spec.module_path is None and "." not in spec.name:
            found = self._types.get(f"{BUILTINS_MODULE}:{spec.name}")
        if found is None:
            return None
        return found, getattr(found, "__module__", None) or spec.module_path or spec.name
