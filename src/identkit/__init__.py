"""identkit — persistable identities for Python modules and types.

Resolve ``Name/Major.Minor`` module identities and decorated or canonical
type identity strings back to loaded runtime objects, and render canonical
strings that survive rebuilds and upgrades.
"""

from identkit.domain.failures import FailureKind, ResolutionFailure, TypeNotDefined
from identkit.domain.identity import MalformedIdentityError, ModuleIdentity, TypeIdentity, VersionQuad
from identkit.domain.matching import is_same_as
from identkit.infrastructure.catalog import HostCatalog, LoadedModule, RegistryCatalog, RuntimeCatalog
from identkit.services.codec import (
    canonical_type_name,
    canonicalize_type_identity,
    format_module_identity,
    parse_module_identity,
    parse_type_identity_string,
    qualified_type_name,
)
from identkit.services.modules import ModuleResolver
from identkit.services.result import ResolutionError, ResolutionResult
from identkit.services.streams import read_all_text, read_resource
from identkit.services.types import TypeResolver, try_resolve_type

__version__ = "0.1.0"

__all__ = [
    "FailureKind",
    "HostCatalog",
    "LoadedModule",
    "MalformedIdentityError",
    "ModuleIdentity",
    "ModuleResolver",
    "RegistryCatalog",
    "ResolutionError",
    "ResolutionFailure",
    "ResolutionResult",
    "RuntimeCatalog",
    "TypeIdentity",
    "TypeNotDefined",
    "TypeResolver",
    "VersionQuad",
    "canonical_type_name",
    "canonicalize_type_identity",
    "format_module_identity",
    "is_same_as",
    "parse_module_identity",
    "parse_type_identity_string",
    "qualified_type_name",
    "read_all_text",
    "read_resource",
    "try_resolve_type",
]
